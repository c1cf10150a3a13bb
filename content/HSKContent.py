# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-03
# Description: HSKContent
# -----------------------------------------------------------------------------
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict

from errors.HSKErrors import ExtractionSkipped


class SourceType(str, Enum):
    """Category of content an embedding was derived from."""
    WORD = "word"
    GRAMMAR = "grammar"
    CONTENT = "content"
    QUESTION = "question"

    @property
    def label(self) -> str:
        return SOURCE_TYPE_LABELS[self]


SOURCE_TYPE_LABELS = {
    SourceType.WORD: "vocabulary",
    SourceType.GRAMMAR: "grammar",
    SourceType.CONTENT: "lesson content",
    SourceType.QUESTION: "exercise",
}

ALL_SOURCE_TYPES = (SourceType.WORD, SourceType.GRAMMAR, SourceType.CONTENT, SourceType.QUESTION)


@dataclass
class ExtractedContent:
    """
    One normalized learning item ready to embed: the text that represents it
    plus searchable metadata (HSK level, content tags, media flags).
    """
    source_type: SourceType
    source_id: int
    text: str
    metadata: Dict[str, Any] = field(default_factory=dict)

    @property
    def key(self) -> str:
        return f"{self.source_type.value}:{self.source_id}"

    def require_text(self) -> str:
        """Return the stripped text, or raise ExtractionSkipped when there is none."""
        text = (self.text or "").strip()
        if not text:
            raise ExtractionSkipped(self.source_type.value, self.source_id)
        return text

    def short_preview(self, n: int = 120) -> str:
        """Return a compact text preview for logging/debugging."""
        clean = " ".join((self.text or "").split())
        preview = (clean[:n] + "...") if len(clean) > n else clean
        return f"[{self.key}] {preview}"

# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-03
# Description: HSKContentSource
# -----------------------------------------------------------------------------
import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Protocol, runtime_checkable

from loader.types import ContentBlockDict, GrammarPatternDict, QuestionDict, WordDict
from utility.logging_utils import get_class_logger


@runtime_checkable
class HSKContentSource(Protocol):
    """
    Read-only view over the learning-content stores. Each call returns records
    with their immediate relations (word senses + translations, grammar
    translations, lesson reference for blocks and questions).
    """

    def list_words(self) -> List[WordDict]:
        ...

    def list_grammar_patterns(self) -> List[GrammarPatternDict]:
        ...

    def list_contents(self) -> List[ContentBlockDict]:
        ...

    def list_questions(self) -> List[QuestionDict]:
        ...


def _active_only(records: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    return [r for r in records if r.get("is_active", True)]


@dataclass
class InMemoryContentSource:
    """Content source over plain lists, used for tests and embedding callers."""
    words: List[WordDict] = field(default_factory=list)
    grammar_patterns: List[GrammarPatternDict] = field(default_factory=list)
    contents: List[ContentBlockDict] = field(default_factory=list)
    questions: List[QuestionDict] = field(default_factory=list)

    def list_words(self) -> List[WordDict]:
        return list(self.words)

    def list_grammar_patterns(self) -> List[GrammarPatternDict]:
        return list(self.grammar_patterns)

    def list_contents(self) -> List[ContentBlockDict]:
        return _active_only(self.contents)

    def list_questions(self) -> List[QuestionDict]:
        return _active_only(self.questions)


class JsonContentSource:
    """
    Reads a content export file:

        {
          "words": [...],
          "grammar_patterns": [...],
          "contents": [...],
          "questions": [...]
        }

    The file is re-read on every call so a reindex always sees the latest export.
    A missing file is treated as an empty corpus.
    """

    SECTIONS = ("words", "grammar_patterns", "contents", "questions")

    def __init__(self, path: str | Path, logger: logging.Logger | None = None) -> None:
        self.path = Path(path)
        self.logger = logger or get_class_logger(self.__class__)

    def _load(self) -> Dict[str, List[Dict[str, Any]]]:
        if not self.path.exists():
            self.logger.warning("Content export not found at '%s'; treating as empty", self.path)
            return {name: [] for name in self.SECTIONS}

        try:
            raw = json.loads(self.path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as e:
            self.logger.error("Content export '%s' is not valid JSON: %s", self.path, e)
            raise ValueError(f"Invalid content export '{self.path}': {e}") from e

        if not isinstance(raw, dict):
            raise ValueError(f"Content export '{self.path}' must be a JSON object")

        out: Dict[str, List[Dict[str, Any]]] = {}
        for name in self.SECTIONS:
            section = raw.get(name) or []
            if not isinstance(section, list):
                raise ValueError(f"Section '{name}' in '{self.path}' must be a list")
            out[name] = [r for r in section if isinstance(r, dict)]
        return out

    def list_words(self) -> List[WordDict]:
        return self._load()["words"]

    def list_grammar_patterns(self) -> List[GrammarPatternDict]:
        return self._load()["grammar_patterns"]

    def list_contents(self) -> List[ContentBlockDict]:
        return _active_only(self._load()["contents"])

    def list_questions(self) -> List[QuestionDict]:
        return _active_only(self._load()["questions"])

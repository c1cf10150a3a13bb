# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-06
# Description: HSKVectorIndex
# -----------------------------------------------------------------------------
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Protocol, Sequence, runtime_checkable

import numpy as np

from content.HSKContent import ALL_SOURCE_TYPES, ExtractedContent, SourceType


@dataclass(frozen=True)
class SearchOptions:
    source_types: Sequence[SourceType] = ALL_SOURCE_TYPES
    min_similarity: float = 0.5
    limit: int = 10
    hsk_level: Optional[int] = None
    include_metadata: bool = True


@dataclass
class SearchResult:
    record_id: int
    source_type: SourceType
    source_id: int
    content_text: str
    similarity: float
    metadata: Optional[Dict[str, Any]] = None

    def to_source(self) -> Dict[str, Any]:
        """Shape persisted in the query ledger."""
        return {
            "source_type": self.source_type.value,
            "source_id": self.source_id,
            "similarity": round(float(self.similarity), 6),
            "content": self.content_text,
        }


@dataclass
class EmbeddingStats:
    total: int = 0
    active: int = 0
    by_source_type: Dict[str, int] = field(default_factory=dict)


def rank_candidates(candidates: Iterable[SearchResult], min_similarity: float, limit: int) -> List[SearchResult]:
    """
    Drop anything below min_similarity, sort by similarity descending with
    record id ascending as tie-break, truncate to limit.
    """
    kept = [c for c in candidates if c.similarity >= min_similarity]
    kept.sort(key=lambda c: (-c.similarity, c.record_id))
    return kept[:max(limit, 0)]


@runtime_checkable
class HSKVectorIndex(Protocol):
    """
    Store of embedding records answering filtered similarity queries.

    Writes go into a generation that only becomes visible to search once
    activate_generation() flips it live and drops the previous one.
    """

    def test_connection(self) -> bool:
        ...

    def search(self, query_vector: np.ndarray, options: SearchOptions) -> List[SearchResult]:
        ...

    def find_similar_to(self, source_type: SourceType, source_id: int, options: SearchOptions) -> List[SearchResult]:
        ...

    def stats(self) -> EmbeddingStats:
        ...

    def begin_generation(self) -> str:
        ...

    def add_records(
            self,
            generation_id: str,
            items: Sequence[ExtractedContent],
            vectors: Sequence[np.ndarray],
    ) -> int:
        ...

    def activate_generation(self, generation_id: str) -> int:
        ...

    def discard_generation(self, generation_id: str) -> int:
        ...

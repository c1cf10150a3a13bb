# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-09
# Description: HSKSearchService
# -----------------------------------------------------------------------------
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence

import settings
from content.HSKContent import ALL_SOURCE_TYPES, SourceType
from embedding.HSKEmbeddingGateway import HSKEmbeddingGateway
from errors.HSKErrors import ValidationError
from utility.logging_utils import get_class_logger
from vectorstore.HSKVectorIndex import HSKVectorIndex, SearchOptions, SearchResult


def build_options(
        source_types: Optional[Sequence[Any]] = None,
        min_similarity: float = settings.SEARCH_DEFAULTS["min_similarity"],
        limit: int = settings.SEARCH_DEFAULTS["limit"],
        hsk_level: Optional[int] = None,
        include_metadata: bool = True,
) -> SearchOptions:
    """Validate raw search parameters and turn them into SearchOptions."""
    if not 0.0 <= min_similarity <= 1.0:
        raise ValidationError(f"min_similarity must be between 0 and 1, got {min_similarity}")
    if not 1 <= limit <= settings.SEARCH_LIMIT_MAX:
        raise ValidationError(f"limit must be between 1 and {settings.SEARCH_LIMIT_MAX}, got {limit}")
    if hsk_level is not None and not settings.HSK_LEVEL_MIN <= hsk_level <= settings.HSK_LEVEL_MAX:
        raise ValidationError(
            f"hsk_level must be between {settings.HSK_LEVEL_MIN} and {settings.HSK_LEVEL_MAX}, got {hsk_level}"
        )

    if source_types:
        try:
            types = tuple(dict.fromkeys(SourceType(t) for t in source_types))
        except ValueError as e:
            raise ValidationError(f"Unknown source type: {e}") from e
    else:
        types = ALL_SOURCE_TYPES

    return SearchOptions(
        source_types=types,
        min_similarity=min_similarity,
        limit=limit,
        hsk_level=hsk_level,
        include_metadata=include_metadata,
    )


@dataclass
class HSKSearchService:
    """Raw similarity search over the index, with explicit filters and no generation."""
    gateway: HSKEmbeddingGateway
    index: HSKVectorIndex
    logger: Any = None

    def __post_init__(self) -> None:
        self.logger = self.logger or get_class_logger(self.__class__)

    def search(self, query_text: str, options: SearchOptions) -> List[SearchResult]:
        q = (query_text or "").strip()
        if not q:
            raise ValidationError("query must not be empty")

        self.logger.info(
            "search: query='%s' types=%s min_similarity=%.2f limit=%d hsk=%s",
            q[:120], [t.value for t in options.source_types], options.min_similarity, options.limit, options.hsk_level,
        )
        return self.index.search(self.gateway.embed(q), options)

    def find_similar(self, source_type: Any, source_id: int, options: SearchOptions) -> List[SearchResult]:
        try:
            anchor_type = SourceType(source_type)
        except ValueError as e:
            raise ValidationError(f"Unknown source type: {source_type!r}") from e

        results = self.index.find_similar_to(anchor_type, source_id, options)
        self.logger.info("find_similar: %s:%s -> %d results", anchor_type.value, source_id, len(results))
        return results

    @staticmethod
    def to_hits(results: Sequence[SearchResult]) -> List[Dict[str, Any]]:
        """Flatten results into plain dicts for API responses."""
        return [
            {
                "id": r.record_id,
                "source_type": r.source_type.value,
                "source_id": r.source_id,
                "content_text": r.content_text,
                "similarity": r.similarity,
                "metadata": r.metadata,
            }
            for r in results
        ]

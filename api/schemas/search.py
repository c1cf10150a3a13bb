# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-12
# Description: search.py
# -----------------------------------------------------------------------------
from typing import List, Optional

from pydantic import BaseModel, Field

import settings
from api.schemas.query import SourceHit
from content.HSKContent import SourceType


class SearchFilters(BaseModel):
    source_types: Optional[List[SourceType]] = None
    min_similarity: float = Field(settings.SEARCH_DEFAULTS["min_similarity"], ge=0.0, le=1.0)
    limit: int = Field(settings.SEARCH_DEFAULTS["limit"], ge=1, le=settings.SEARCH_LIMIT_MAX)
    hsk_level: Optional[int] = Field(None, ge=settings.HSK_LEVEL_MIN, le=settings.HSK_LEVEL_MAX)
    include_metadata: bool = True


class SearchRequest(SearchFilters):
    query: str = Field(..., min_length=1)


class SimilarRequest(SearchFilters):
    source_type: SourceType
    source_id: int


class SearchResponse(BaseModel):
    count: int
    results: List[SourceHit]

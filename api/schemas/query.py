# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-12
# Description: query.py
# -----------------------------------------------------------------------------
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, Field

import settings
from content.HSKContent import SourceType


class SourceHit(BaseModel):
    id: int
    source_type: SourceType
    source_id: int
    content_text: str
    similarity: float
    metadata: Optional[Dict[str, Any]] = None


class RagQueryRequest(BaseModel):
    query: str = Field(..., min_length=1)
    user_id: Optional[str] = None
    hsk_level: Optional[int] = Field(None, ge=settings.HSK_LEVEL_MIN, le=settings.HSK_LEVEL_MAX)
    query_type: Literal["general", "word", "grammar", "lesson"] = "general"
    current_content: Optional[str] = None
    max_sources: Optional[int] = Field(None, ge=1, le=20)
    min_similarity: Optional[float] = Field(None, ge=0.0, le=1.0)


class RagQueryResponse(BaseModel):
    answer: str
    sources: List[SourceHit]
    confidence: float
    processing_time_ms: int
    record_id: Optional[int] = None
    is_fallback: bool = False
    model: Optional[str] = None

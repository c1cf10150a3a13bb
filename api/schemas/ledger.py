# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-12
# Description: ledger.py
# -----------------------------------------------------------------------------
from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel


class HistoryItem(BaseModel):
    id: int
    query: str
    response: str
    retrieved_sources: List[Dict[str, Any]]
    source_count: int
    confidence: Optional[float] = None
    processing_time_ms: int
    created_at: datetime


class HistoryResponse(BaseModel):
    user_id: str
    count: int
    items: List[HistoryItem]


class PopularQuery(BaseModel):
    query: str
    count: int


class AnalyticsResponse(BaseModel):
    total_queries: int
    avg_processing_time_ms: float
    avg_sources_used: float
    popular_queries: List[PopularQuery]

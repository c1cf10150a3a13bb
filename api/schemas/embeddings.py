# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-12
# Description: embeddings.py
# -----------------------------------------------------------------------------
from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, Field


class EmbeddingStatsResponse(BaseModel):
    total_embeddings: int
    active_embeddings: int
    by_source_type: Dict[str, int]
    vector_backend: str
    embedding_backend: str
    embedding_dim: int
    last_reindex_state: str
    last_reindex_finished_at: Optional[str] = None


class ReindexAckResponse(BaseModel):
    status: str
    job_id: str
    message: str


class ReindexReportModel(BaseModel):
    generation_id: str
    extracted: int
    skipped: int
    embedded: int
    removed: int
    batches: int
    duration_ms: int
    by_source_type: Dict[str, int]


class ReindexStatusResponse(BaseModel):
    job_id: Optional[str] = None
    state: str
    started_at: Optional[datetime] = None
    finished_at: Optional[datetime] = None
    error: Optional[str] = None
    report: Optional[ReindexReportModel] = None


class EmbedTestRequest(BaseModel):
    text: str = Field(..., min_length=1)


class EmbedTestResponse(BaseModel):
    text: str
    dimensions: int
    norm: float
    preview: List[float]
    backend: str

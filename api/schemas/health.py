# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-12
# Description: health.py
# -----------------------------------------------------------------------------
from typing import Dict

from pydantic import BaseModel

class HealthResponse(BaseModel):
    status: str
    message: str

class SmokeTestSummary(BaseModel):
    total: int
    passed: int
    failed: int

class DeepHealthResponse(BaseModel):
    status: str
    results: Dict[str, bool]
    summary: SmokeTestSummary

class ProviderHealthResponse(BaseModel):
    status: str
    embedding_service: bool
    generation_service: bool
    embedding_backend: str
    generation_backend: str

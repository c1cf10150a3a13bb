# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-12
# Description: errors.py
# -----------------------------------------------------------------------------
from fastapi import HTTPException

from errors.HSKErrors import (
    DimensionMismatch,
    GenerationFailed,
    HSKRagError,
    ProviderUnavailable,
    ReindexInProgress,
    ValidationError,
)


def to_http_exception(e: HSKRagError) -> HTTPException:
    """Map a pipeline error onto the HTTP status callers see."""
    if isinstance(e, ValidationError):
        return HTTPException(status_code=400, detail=str(e))
    if isinstance(e, GenerationFailed):
        return HTTPException(status_code=502, detail=f"Response generation failed: {e}")
    if isinstance(e, ProviderUnavailable):
        return HTTPException(status_code=503, detail=f"Service unavailable: {e}")
    if isinstance(e, ReindexInProgress):
        return HTTPException(status_code=409, detail=str(e))
    if isinstance(e, DimensionMismatch):
        return HTTPException(status_code=500, detail=str(e))
    return HTTPException(status_code=500, detail=str(e))

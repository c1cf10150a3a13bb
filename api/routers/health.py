# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-12
# Description: health.py
# -----------------------------------------------------------------------------
import logging
from fastapi import APIRouter, Depends, HTTPException, Query

from api.schemas.health import HealthResponse, DeepHealthResponse
from api.dependencies import get_health_service
from services.HSKHealthService import HSKHealthService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/health", tags=["health"])


@router.get("", response_model=HealthResponse)
async def health_check():
    return HealthResponse(status="ok", message="HSK RAG API running")


@router.get("/deep", response_model=DeepHealthResponse)
def deep_health_check(
    svc: HSKHealthService = Depends(get_health_service),
    run_generation: bool = Query(False, description="Also run a real (token-consuming) generation call"),
) -> DeepHealthResponse:
    logger.info("GET /health/deep called (run_generation=%s)", run_generation)
    try:
        result = svc.deep_health(run_generation=run_generation)
        logger.info("GET /health/deep completed (status=%s)", result.status)
        return result
    except Exception as e:
        logger.exception("GET /health/deep failed: %s", e)
        raise HTTPException(status_code=500, detail=f"Deep health check failed: {e}") from e

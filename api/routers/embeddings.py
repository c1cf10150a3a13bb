# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-12
# Description: embeddings router
# -----------------------------------------------------------------------------
import logging
from dataclasses import asdict

import numpy as np
from fastapi import APIRouter, Depends, HTTPException

from api.dependencies import get_gateway, get_health_service, get_reindex_service, get_stats_service
from api.errors import to_http_exception
from api.schemas.embeddings import (
    EmbeddingStatsResponse,
    EmbedTestRequest,
    EmbedTestResponse,
    ReindexAckResponse,
    ReindexReportModel,
    ReindexStatusResponse,
)
from api.schemas.health import ProviderHealthResponse
from embedding.HSKEmbeddingGateway import HSKEmbeddingGateway
from errors.HSKErrors import HSKRagError
from services.HSKHealthService import HSKHealthService
from services.HSKReindexService import HSKReindexService
from services.HSKStatsService import HSKStatsService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/rag", tags=["embeddings"])


@router.get("/embeddings/stats", response_model=EmbeddingStatsResponse)
def get_embedding_stats(svc: HSKStatsService = Depends(get_stats_service)) -> EmbeddingStatsResponse:
    try:
        return EmbeddingStatsResponse(**svc.get_stats())
    except Exception as e:
        logger.exception("Embedding stats failed: %s", e)
        raise HTTPException(status_code=500, detail=f"Embedding stats failed: {e}") from e


@router.post("/embeddings/process", response_model=ReindexAckResponse, status_code=202)
def post_process_content(svc: HSKReindexService = Depends(get_reindex_service)) -> ReindexAckResponse:
    logger.info("POST /rag/embeddings/process called")
    try:
        ack = svc.trigger()
    except Exception as e:
        logger.exception("Could not start reindex: %s", e)
        raise HTTPException(status_code=500, detail=f"Could not start reindex: {e}") from e
    return ReindexAckResponse(status=ack.status, job_id=ack.job_id, message=ack.message)


@router.get("/embeddings/process/status", response_model=ReindexStatusResponse)
def get_process_status(svc: HSKReindexService = Depends(get_reindex_service)) -> ReindexStatusResponse:
    status = svc.status()
    return ReindexStatusResponse(
        job_id=status.job_id,
        state=status.state,
        started_at=status.started_at,
        finished_at=status.finished_at,
        error=status.error,
        report=ReindexReportModel(**asdict(status.report)) if status.report else None,
    )


@router.get("/embeddings/health", response_model=ProviderHealthResponse)
def get_provider_health(svc: HSKHealthService = Depends(get_health_service)) -> ProviderHealthResponse:
    return svc.provider_health()


@router.post("/test/embed", response_model=EmbedTestResponse)
def post_test_embed(
    req: EmbedTestRequest,
    gateway: HSKEmbeddingGateway = Depends(get_gateway),
) -> EmbedTestResponse:
    try:
        vec = gateway.embed(req.text)
    except HSKRagError as e:
        logger.exception("Test embedding failed: %s", e)
        raise to_http_exception(e) from e
    except Exception as e:
        logger.exception("Test embedding failed: %s", e)
        raise HTTPException(status_code=500, detail=f"Test embedding failed: {e}") from e

    return EmbedTestResponse(
        text=req.text,
        dimensions=int(vec.shape[0]),
        norm=float(np.linalg.norm(vec)),
        preview=[float(x) for x in vec[:5]],
        backend=gateway.backend_name,
    )

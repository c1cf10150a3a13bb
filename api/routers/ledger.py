# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-12
# Description: ledger router
# -----------------------------------------------------------------------------
import logging

from fastapi import APIRouter, Depends, HTTPException, Query

import settings
from api.dependencies import get_ledger
from api.errors import to_http_exception
from api.schemas.ledger import AnalyticsResponse, HistoryItem, HistoryResponse, PopularQuery
from errors.HSKErrors import HSKRagError
from services.HSKContextLedger import HSKContextLedger

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/rag", tags=["ledger"])


@router.get("/history", response_model=HistoryResponse)
def get_history(
    user_id: str = Query(..., min_length=1),
    limit: int = Query(10, ge=1, le=settings.HISTORY_LIMIT_MAX),
    ledger: HSKContextLedger = Depends(get_ledger),
) -> HistoryResponse:
    try:
        records = ledger.history(user_id, limit=limit)
    except HSKRagError as e:
        logger.exception("History lookup failed: %s", e)
        raise to_http_exception(e) from e
    except Exception as e:
        logger.exception("History lookup failed: %s", e)
        raise HTTPException(status_code=500, detail=f"History lookup failed: {e}") from e

    items = [
        HistoryItem(
            id=r.id,
            query=r.query,
            response=r.response,
            retrieved_sources=r.retrieved_sources,
            source_count=r.source_count,
            confidence=r.confidence,
            processing_time_ms=r.processing_time_ms,
            created_at=r.created_at,
        )
        for r in records
    ]
    return HistoryResponse(user_id=user_id, count=len(items), items=items)


@router.get("/analytics", response_model=AnalyticsResponse)
def get_analytics(ledger: HSKContextLedger = Depends(get_ledger)) -> AnalyticsResponse:
    try:
        a = ledger.analytics()
    except Exception as e:
        logger.exception("Analytics failed: %s", e)
        raise HTTPException(status_code=500, detail=f"Analytics failed: {e}") from e

    return AnalyticsResponse(
        total_queries=a.total_queries,
        avg_processing_time_ms=a.avg_processing_time_ms,
        avg_sources_used=a.avg_sources_used,
        popular_queries=[PopularQuery(**p) for p in a.popular_queries],
    )

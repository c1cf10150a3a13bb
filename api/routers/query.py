# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-12
# Description: query router
# -----------------------------------------------------------------------------
import logging

from fastapi import APIRouter, Depends, HTTPException

from api.dependencies import get_query_service
from api.errors import to_http_exception
from api.schemas.query import RagQueryRequest, RagQueryResponse, SourceHit
from errors.HSKErrors import HSKRagError, ValidationError
from services.HSKQueryService import HSKQueryService, QueryRequest
from services.HSKSearchService import HSKSearchService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/rag", tags=["rag"])


@router.post("/query", response_model=RagQueryResponse)
def post_query(
    req: RagQueryRequest,
    svc: HSKQueryService = Depends(get_query_service),
) -> RagQueryResponse:
    logger.info("POST /rag/query (type=%s, hsk=%s, user=%s)", req.query_type, req.hsk_level, req.user_id)
    try:
        answer = svc.ask(QueryRequest(
            query=req.query,
            user_id=req.user_id,
            hsk_level=req.hsk_level,
            query_type=req.query_type,
            current_content=req.current_content,
            max_sources=req.max_sources,
            min_similarity=req.min_similarity,
        ))
    except ValidationError as e:
        logger.warning("Rejected RAG query: %s", e)
        raise to_http_exception(e) from e
    except HSKRagError as e:
        logger.exception("RAG query failed: %s", e)
        raise to_http_exception(e) from e
    except Exception as e:
        logger.exception("RAG query failed: %s", e)
        raise HTTPException(status_code=500, detail=f"RAG query failed: {e}") from e

    return RagQueryResponse(
        answer=answer.answer,
        sources=[SourceHit(**h) for h in HSKSearchService.to_hits(answer.sources)],
        confidence=answer.confidence,
        processing_time_ms=answer.processing_time_ms,
        record_id=answer.record_id,
        is_fallback=answer.is_fallback,
        model=answer.model,
    )

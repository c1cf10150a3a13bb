# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-12
# Description: search router
# -----------------------------------------------------------------------------
import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException

from api.dependencies import get_search_service
from api.errors import to_http_exception
from api.schemas.query import SourceHit
from api.schemas.search import SearchFilters, SearchRequest, SearchResponse, SimilarRequest
from errors.HSKErrors import HSKRagError
from services.HSKSearchService import HSKSearchService, build_options
from vectorstore.HSKVectorIndex import SearchOptions, SearchResult

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/rag/search", tags=["search"])


def _options(req: SearchFilters) -> SearchOptions:
    return build_options(
        source_types=req.source_types,
        min_similarity=req.min_similarity,
        limit=req.limit,
        hsk_level=req.hsk_level,
        include_metadata=req.include_metadata,
    )


def _response(results: List[SearchResult]) -> SearchResponse:
    hits = [SourceHit(**h) for h in HSKSearchService.to_hits(results)]
    return SearchResponse(count=len(hits), results=hits)


@router.post("", response_model=SearchResponse)
def post_search(
    req: SearchRequest,
    svc: HSKSearchService = Depends(get_search_service),
) -> SearchResponse:
    try:
        results = svc.search(req.query, _options(req))
    except HSKRagError as e:
        logger.exception("Search failed: %s", e)
        raise to_http_exception(e) from e
    except Exception as e:
        logger.exception("Search failed: %s", e)
        raise HTTPException(status_code=500, detail=f"Search failed: {e}") from e
    return _response(results)


@router.post("/similar", response_model=SearchResponse)
def post_similar(
    req: SimilarRequest,
    svc: HSKSearchService = Depends(get_search_service),
) -> SearchResponse:
    try:
        results = svc.find_similar(req.source_type, req.source_id, _options(req))
    except HSKRagError as e:
        logger.exception("Similar search failed: %s", e)
        raise to_http_exception(e) from e
    except Exception as e:
        logger.exception("Similar search failed: %s", e)
        raise HTTPException(status_code=500, detail=f"Similar search failed: {e}") from e
    return _response(results)

# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-09
# Description: HSKContextLedger.py
# -----------------------------------------------------------------------------
import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional, Sequence

from sqlalchemy import func

import settings
from errors.HSKErrors import ValidationError
from storage.database import Database
from storage.models import QueryContextRow
from utility.logging_utils import get_class_logger


@dataclass
class QueryContextRecord:
    id: int
    user_id: Optional[str]
    query: str
    response: str
    retrieved_sources: List[Dict[str, Any]]
    source_count: int
    confidence: Optional[float]
    processing_time_ms: int
    created_at: datetime

    @classmethod
    def from_row(cls, row: QueryContextRow) -> "QueryContextRecord":
        return cls(
            id=row.id,
            user_id=row.user_id,
            query=row.query,
            response=row.response,
            retrieved_sources=list(row.retrieved_sources or []),
            source_count=row.source_count,
            confidence=row.confidence,
            processing_time_ms=row.processing_time_ms,
            created_at=row.created_at,
        )


@dataclass
class QueryAnalytics:
    total_queries: int = 0
    avg_processing_time_ms: float = 0.0
    avg_sources_used: float = 0.0
    popular_queries: List[Dict[str, Any]] = field(default_factory=list)


@dataclass
class HSKContextLedger:
    """
    Append-only record of answered queries, read back for per-user history
    and aggregate analytics.
    """
    db: Database
    logger: logging.Logger | None = None

    def __post_init__(self) -> None:
        self.logger = self.logger or get_class_logger(self.__class__)

    def record(
            self,
            *,
            query: str,
            response: str,
            sources: Sequence[Dict[str, Any]],
            processing_time_ms: int,
            user_id: Optional[str] = None,
            confidence: Optional[float] = None,
    ) -> int:
        row = QueryContextRow(
            user_id=user_id,
            query=query,
            response=response,
            retrieved_sources=list(sources),
            source_count=len(sources),
            confidence=confidence,
            processing_time_ms=int(processing_time_ms),
        )
        with self.db.session() as s:
            s.add(row)
            s.flush()
            record_id = row.id

        self.logger.info(
            "Recorded query context id=%d (user=%s, sources=%d, %d ms)",
            record_id, user_id, len(sources), processing_time_ms,
        )
        return record_id

    def history(self, user_id: str, limit: int = 10) -> List[QueryContextRecord]:
        if not user_id:
            raise ValidationError("user_id is required")
        if not 1 <= limit <= settings.HISTORY_LIMIT_MAX:
            raise ValidationError(f"limit must be between 1 and {settings.HISTORY_LIMIT_MAX}, got {limit}")

        with self.db.session() as s:
            rows = (
                s.query(QueryContextRow)
                .filter(QueryContextRow.user_id == user_id)
                .order_by(QueryContextRow.created_at.desc(), QueryContextRow.id.desc())
                .limit(limit)
                .all()
            )
            return [QueryContextRecord.from_row(r) for r in rows]

    def analytics(self, top_n: int = settings.POPULAR_QUERIES_TOP_N) -> QueryAnalytics:
        with self.db.session() as s:
            total, avg_time, avg_sources = s.query(
                func.count(QueryContextRow.id),
                func.avg(QueryContextRow.processing_time_ms),
                func.avg(QueryContextRow.source_count),
            ).one()

            count_col = func.count(QueryContextRow.id).label("count")
            popular = (
                s.query(QueryContextRow.query, count_col)
                .group_by(QueryContextRow.query)
                .order_by(count_col.desc(), QueryContextRow.query)
                .limit(top_n)
                .all()
            )

        return QueryAnalytics(
            total_queries=int(total or 0),
            avg_processing_time_ms=float(avg_time or 0.0),
            avg_sources_used=float(avg_sources or 0.0),
            popular_queries=[{"query": q, "count": int(c)} for q, c in popular],
        )

# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-06
# Description: SqlVectorIndex
# -----------------------------------------------------------------------------
import uuid
from datetime import datetime, timezone
from typing import List, Optional, Sequence

import numpy as np
from sqlalchemy import func

from content.HSKContent import ExtractedContent, SourceType
from embedding.EmbeddingRecord import EmbeddingRecord
from errors.HSKErrors import DimensionMismatch
from storage.database import Database
from storage.models import EmbeddingRow
from utility.logging_utils import get_class_logger
from vectorstore.HSKVectorIndex import EmbeddingStats, SearchOptions, SearchResult, rank_candidates


class SqlVectorIndex:
    """
    Full-scan vector index over the `embeddings` table.

    Every search loads the active rows matching the source-type filter in its
    own session and scores them in one numpy pass. Fine for corpora in the
    low thousands.
    """

    def __init__(self, db: Database, dim: int, logger=None):
        self.db = db
        self.dim = dim
        self.logger = logger or get_class_logger(self.__class__)

    def test_connection(self) -> bool:
        return self.db.ping()

    # ---------------------------------------------------------------------
    # Read side
    # ---------------------------------------------------------------------
    def _active_records(self, source_types: Sequence[SourceType]) -> List[EmbeddingRecord]:
        with self.db.session() as s:
            q = s.query(EmbeddingRow).filter(EmbeddingRow.is_active.is_(True))
            if source_types:
                q = q.filter(EmbeddingRow.source_type.in_([SourceType(t).value for t in source_types]))
            return [r.to_record() for r in q.order_by(EmbeddingRow.id).all()]

    def _score(
            self,
            query_vector: np.ndarray,
            records: List[EmbeddingRecord],
            options: SearchOptions,
            exclude_id: Optional[int] = None,
    ) -> List[SearchResult]:
        q = np.asarray(query_vector, dtype=np.float32).ravel()
        if q.shape[0] != self.dim:
            raise DimensionMismatch(self.dim, q.shape[0], "query vector")

        if options.hsk_level is not None:
            records = [r for r in records if r.hsk_level == options.hsk_level]
        if exclude_id is not None:
            records = [r for r in records if r.id != exclude_id]
        if not records:
            return []

        for r in records:
            if r.dim != self.dim:
                raise DimensionMismatch(self.dim, r.dim, f"embedding {r.id}")

        matrix = np.vstack([r.vector for r in records])
        denom = np.linalg.norm(matrix, axis=1) * float(np.linalg.norm(q))
        sims = np.divide(matrix @ q, denom, out=np.zeros(len(records), dtype=np.float32), where=denom > 0)

        candidates = [
            SearchResult(
                record_id=r.id,
                source_type=r.source_type,
                source_id=r.source_id,
                content_text=r.content_text,
                similarity=float(sim),
                metadata=r.metadata if options.include_metadata else None,
            )
            for r, sim in zip(records, sims)
        ]
        return rank_candidates(candidates, options.min_similarity, options.limit)

    def search(self, query_vector: np.ndarray, options: SearchOptions) -> List[SearchResult]:
        records = self._active_records(options.source_types)
        results = self._score(query_vector, records, options)
        self.logger.info(
            "Search scanned %d rows -> %d results (min_similarity=%.2f, limit=%d, hsk_level=%s)",
            len(records), len(results), options.min_similarity, options.limit, options.hsk_level,
        )
        return results

    def find_similar_to(self, source_type: SourceType, source_id: int, options: SearchOptions) -> List[SearchResult]:
        with self.db.session() as s:
            anchor = (
                s.query(EmbeddingRow)
                .filter(
                    EmbeddingRow.is_active.is_(True),
                    EmbeddingRow.source_type == SourceType(source_type).value,
                    EmbeddingRow.source_id == source_id,
                )
                .order_by(EmbeddingRow.id)
                .first()
            )
            anchor = anchor.to_record() if anchor is not None else None
        if anchor is None:
            self.logger.info("No active embedding for %s:%s; nothing similar", SourceType(source_type).value, source_id)
            return []

        records = self._active_records(options.source_types)
        return self._score(anchor.vector, records, options, exclude_id=anchor.id)

    def stats(self) -> EmbeddingStats:
        with self.db.session() as s:
            total = s.query(func.count(EmbeddingRow.id)).scalar() or 0
            grouped = (
                s.query(EmbeddingRow.source_type, func.count(EmbeddingRow.id))
                .filter(EmbeddingRow.is_active.is_(True))
                .group_by(EmbeddingRow.source_type)
                .all()
            )
        by_type = {t.value: 0 for t in SourceType}
        by_type.update({source_type: count for source_type, count in grouped})
        return EmbeddingStats(total=total, active=sum(by_type.values()), by_source_type=by_type)

    # ---------------------------------------------------------------------
    # Write side
    # ---------------------------------------------------------------------
    def begin_generation(self) -> str:
        generation_id = uuid.uuid4().hex
        self.logger.info("Started embedding generation %s", generation_id)
        return generation_id

    def add_records(
            self,
            generation_id: str,
            items: Sequence[ExtractedContent],
            vectors: Sequence[np.ndarray],
    ) -> int:
        if len(items) != len(vectors):
            raise ValueError(f"items ({len(items)}) and vectors ({len(vectors)}) length mismatch")

        rows = []
        for item, vec in zip(items, vectors):
            arr = np.asarray(vec, dtype=np.float32).ravel()
            if arr.shape[0] != self.dim:
                raise DimensionMismatch(self.dim, arr.shape[0], item.key)
            rows.append(EmbeddingRow(
                source_type=item.source_type.value,
                source_id=item.source_id,
                content_text=item.text,
                vector=arr.tolist(),
                meta=dict(item.metadata or {}),
                is_active=False,
                generation_id=generation_id,
            ))

        with self.db.session() as s:
            s.add_all(rows)
        self.logger.debug("Wrote %d rows into generation %s", len(rows), generation_id)
        return len(rows)

    def activate_generation(self, generation_id: str) -> int:
        """Flip `generation_id` live and delete every other generation in one transaction."""
        with self.db.session() as s:
            removed = (
                s.query(EmbeddingRow)
                .filter(EmbeddingRow.generation_id != generation_id)
                .delete(synchronize_session=False)
            )
            activated = (
                s.query(EmbeddingRow)
                .filter(EmbeddingRow.generation_id == generation_id)
                .update(
                    {EmbeddingRow.is_active: True, EmbeddingRow.updated_at: datetime.now(timezone.utc)},
                    synchronize_session=False,
                )
            )
        self.logger.info(
            "Activated generation %s (%d records); removed %d previous records", generation_id, activated, removed
        )
        return removed

    def discard_generation(self, generation_id: str) -> int:
        with self.db.session() as s:
            removed = (
                s.query(EmbeddingRow)
                .filter(EmbeddingRow.generation_id == generation_id, EmbeddingRow.is_active.is_(False))
                .delete(synchronize_session=False)
            )
        self.logger.warning("Discarded generation %s (%d records)", generation_id, removed)
        return removed

# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-11
# Description: HSKStatsService.py
# -----------------------------------------------------------------------------

import logging

from embedding.HSKEmbeddingGateway import HSKEmbeddingGateway
from loader.types import EmbeddingStatsDict
from services.HSKReindexService import HSKReindexService
from utility.logging_utils import get_class_logger
from vectorstore.HSKVectorIndex import HSKVectorIndex


class HSKStatsService:
    """
    Stats service for the /rag/embeddings/stats endpoint.

    Responsibilities:
      - count total / active embeddings per source type
      - report which index and embedding backends are in use
      - include the outcome of the most recent reindex job
    """

    def __init__(
        self,
        *,
        index: HSKVectorIndex,
        gateway: HSKEmbeddingGateway,
        reindex: HSKReindexService,
        vector_backend: str,
        logger: logging.Logger | None = None,
    ) -> None:
        self.index = index
        self.gateway = gateway
        self.reindex = reindex
        self.vector_backend = vector_backend
        self.logger = logger or get_class_logger(self.__class__)

    def get_stats(self) -> EmbeddingStatsDict:
        stats = self.index.stats()
        status = self.reindex.status()
        self.logger.info(
            "Embedding stats: total=%d active=%d by_type=%s", stats.total, stats.active, stats.by_source_type
        )
        return EmbeddingStatsDict(
            total_embeddings=stats.total,
            active_embeddings=stats.active,
            by_source_type=dict(stats.by_source_type),
            vector_backend=self.vector_backend,
            embedding_backend=self.gateway.backend_name,
            embedding_dim=self.gateway.dim,
            last_reindex_state=status.state,
            last_reindex_finished_at=status.finished_at.isoformat() if status.finished_at else None,
        )

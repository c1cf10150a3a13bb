# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-12
# Description: AppContainer.py
# -----------------------------------------------------------------------------
from functools import lru_cache
from typing import Optional

import settings
from chat.FallbackGenerationClient import build_generation_client
from chat.GenerationClient import GenerationClient
from config.Config import Config
from embedding.HSKEmbeddingGateway import HSKEmbeddingGateway
from extractor.HSKContentNormalizer import HSKContentNormalizer
from health.EmbeddingHealth import EmbeddingHealth
from health.GenerationHealth import GenerationHealth
from health.TestRunner import TestRunner
from health.VectorIndexHealth import VectorIndexHealth
from loader.HSKContentSource import HSKContentSource, JsonContentSource
from services.HSKContextLedger import HSKContextLedger
from services.HSKHealthService import HSKHealthService
from services.HSKQueryService import HSKQueryService
from services.HSKReindexService import HSKReindexService
from services.HSKSearchService import HSKSearchService
from services.HSKStatsService import HSKStatsService
from storage.database import Database
from utility.logging_utils import get_class_logger
from vectorstore.ChromaVectorIndex import ChromaVectorIndex
from vectorstore.HSKVectorIndex import HSKVectorIndex
from vectorstore.SqlVectorIndex import SqlVectorIndex


class AppContainer:
    """
    Owns heavy object instantiation and application wiring.
    Singleton instances are provided via FastAPI dependencies.
    """

    def __init__(
        self,
        cfg: Optional[Config] = None,
        *,
        content_source: Optional[HSKContentSource] = None,
        generator: Optional[GenerationClient] = None,
    ) -> None:
        self.logger = get_class_logger(self.__class__)

        # Configuration
        self.cfg = cfg or Config.from_env()
        self.logger.info("Building app container: %s", self.cfg.summary())

        # Core infrastructure
        self.db = Database(self.cfg.database_url, echo=settings.DB_ECHO_SQL)
        self.db.init_schema()
        self.gateway = HSKEmbeddingGateway.from_config(self.cfg)
        self.index = self._build_index()
        self.generator = generator or build_generation_client(self.cfg)

        # Upstream content for reindexing
        self.content_source = content_source or JsonContentSource(self.cfg.content_source_path)
        self.normalizer = HSKContentNormalizer()

        # Return a singleton HSKContextLedger instance
        self.ledger = HSKContextLedger(db=self.db)

        # Return a singleton HSKQueryService instance
        self.query_service = HSKQueryService(
            gateway=self.gateway,
            index=self.index,
            generator=self.generator,
            ledger=self.ledger,
        )

        # Return a singleton HSKSearchService instance
        self.search_service = HSKSearchService(gateway=self.gateway, index=self.index)

        # Return a singleton HSKReindexService instance
        self.reindex_service = HSKReindexService(
            source=self.content_source,
            normalizer=self.normalizer,
            gateway=self.gateway,
            index=self.index,
        )

        # Return a singleton HSKStatsService instance
        self.stats_service = HSKStatsService(
            index=self.index,
            gateway=self.gateway,
            reindex=self.reindex_service,
            vector_backend=self.cfg.vector_backend,
        )

        # Smoke tests / health
        self.test_runner = TestRunner(
            index_health=VectorIndexHealth(self.index),
            embedding_health=EmbeddingHealth(self.gateway),
            generation_health=GenerationHealth(self.generator),
        )
        self.health_service = HSKHealthService(
            test_runner=self.test_runner,
            gateway=self.gateway,
            generator=self.generator,
        )

    def _build_index(self) -> HSKVectorIndex:
        if self.cfg.vector_backend == "chroma":
            return ChromaVectorIndex.persistent(
                self.cfg.chroma_path, self.cfg.embedding_dim, self.cfg.chroma_collection
            )
        return SqlVectorIndex(self.db, self.cfg.embedding_dim)


@lru_cache
def get_app_container() -> AppContainer:
    """Singleton container, built on first use."""
    return AppContainer()

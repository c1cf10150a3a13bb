# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-11
# Description: EmbeddingHealth
# -----------------------------------------------------------------------------
import logging
import time
from typing import Optional

from embedding.HSKEmbeddingGateway import HSKEmbeddingGateway
from utility.logging_utils import get_logger


class EmbeddingHealth:
    """
    Smoke test for the embedding provider.

    Verifies:
      - the embedding call completes through the gateway
      - the vector has the configured dimension
      - the vector is usable for cosine scoring (self-similarity ~ 1.0)
    """

    TEST_TEXT = "你好 embedding healthcheck"

    def __init__(self, gateway: HSKEmbeddingGateway, logger: Optional[logging.Logger] = None):
        self.gateway = gateway
        self.logger = logger or get_logger(__name__)

    def run(self) -> bool:
        self.logger.info("Running embedding healthcheck (backend=%s)", self.gateway.backend_name)
        try:
            start = time.time()
            vec = self.gateway.embed(self.TEST_TEXT)
            elapsed_ms = (time.time() - start) * 1000.0
            self.logger.info("Embedding call succeeded in %.1f ms. Returned dimension: %d", elapsed_ms, vec.shape[0])

            self_sim = self.gateway.cosine_similarity(vec, vec)
            if abs(self_sim - 1.0) > 1e-3:
                self.logger.error("Self-similarity is %.4f, expected 1.0", self_sim)
                return False

            self.logger.info("Embedding healthcheck PASSED.")
            return True

        except Exception as e:
            self.logger.exception("Embedding healthcheck FAILED: %s", e)
            return False

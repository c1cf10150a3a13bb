# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-11
# Description: VectorIndexHealth
# -----------------------------------------------------------------------------
import logging
from typing import Optional

from utility.logging_utils import get_logger
from vectorstore.HSKVectorIndex import HSKVectorIndex


class VectorIndexHealth:
    """Smoke test for the vector index: connection plus a stats read."""

    def __init__(self, index: HSKVectorIndex, logger: Optional[logging.Logger] = None):
        self.index = index
        self.logger = logger or get_logger(__name__)

    def run(self) -> bool:
        if not self.index.test_connection():
            self.logger.error("Vector index connection FAILED (%s)", type(self.index).__name__)
            return False
        try:
            stats = self.index.stats()
        except Exception as e:
            self.logger.exception("Vector index stats FAILED: %s", e)
            return False

        if stats.active == 0:
            self.logger.warning("Vector index is reachable but has no active embeddings; run a reindex")
        self.logger.info("Vector index healthcheck PASSED (active=%d, total=%d)", stats.active, stats.total)
        return True

# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-05
# Description: FallbackEmbeddingBackend
# -----------------------------------------------------------------------------
from typing import List, Sequence

import numpy as np

from embedding.EmbeddingBackend import EmbeddingBackend
from errors.HSKErrors import ProviderUnavailable
from utility.logging_utils import get_class_logger


class FallbackEmbeddingBackend:
    """Development strategy: try the real provider, use the mock when it is unavailable."""

    def __init__(self, primary: EmbeddingBackend, fallback: EmbeddingBackend, logger=None):
        self.primary = primary
        self.fallback = fallback
        self.name = f"{primary.name}+{fallback.name}"
        self.logger = logger or get_class_logger(self.__class__)

    def embed(self, text: str) -> np.ndarray:
        try:
            return self.primary.embed(text)
        except ProviderUnavailable as e:
            self.logger.warning("Embedding provider unavailable, using mock vector: %s", e)
            return self.fallback.embed(text)

    def embed_batch(self, texts: Sequence[str]) -> List[np.ndarray]:
        try:
            return self.primary.embed_batch(texts)
        except ProviderUnavailable as e:
            self.logger.warning("Embedding provider unavailable, using %d mock vectors: %s", len(texts), e)
            return self.fallback.embed_batch(texts)

    def health_check(self) -> bool:
        return self.primary.health_check()

# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-05
# Description: HSKEmbeddingGateway
# -----------------------------------------------------------------------------
import time
from typing import List, Sequence

import numpy as np

from config.Config import Config, Mode
from embedding.EmbeddingBackend import EmbeddingBackend
from embedding.FallbackEmbeddingBackend import FallbackEmbeddingBackend
from embedding.HttpEmbeddingBackend import HttpEmbeddingBackend
from embedding.MockEmbeddingBackend import MockEmbeddingBackend
from embedding.OpenAIEmbeddingBackend import OpenAIEmbeddingBackend
from errors.HSKErrors import DimensionMismatch, ProviderUnavailable, ValidationError
from utility.logging_utils import get_class_logger


def cosine_similarity(v1: np.ndarray, v2: np.ndarray) -> float:
    """
    dot(v1, v2) / (|v1| * |v2|). Returns 0.0 when either norm is zero.
    Raises DimensionMismatch when the vectors differ in length.
    """
    a = np.asarray(v1, dtype=np.float32).ravel()
    b = np.asarray(v2, dtype=np.float32).ravel()
    if a.shape[0] != b.shape[0]:
        raise DimensionMismatch(a.shape[0], b.shape[0], "cosine_similarity")

    norm_a = float(np.linalg.norm(a))
    norm_b = float(np.linalg.norm(b))
    if norm_a == 0.0 or norm_b == 0.0:
        return 0.0
    return float(np.dot(a, b) / (norm_a * norm_b))


def build_embedding_backend(cfg: Config) -> EmbeddingBackend:
    """Pick the embedding strategy for the configured mode and provider."""
    mock = MockEmbeddingBackend(cfg.embedding_dim)
    if cfg.mode == Mode.TEST:
        return mock

    if cfg.embedding_provider == "openai":
        real: EmbeddingBackend = OpenAIEmbeddingBackend(cfg)
    else:
        real = HttpEmbeddingBackend(cfg.embedding_service_url, cfg.embedding_model)

    if cfg.mode == Mode.DEVELOPMENT:
        return FallbackEmbeddingBackend(real, mock)
    return real


class HSKEmbeddingGateway:
    """
    Single entry point for embeddings. The backend strategy is chosen once at
    construction; every vector coming back is checked against `dim`.
    """

    def __init__(self, backend: EmbeddingBackend, dim: int, logger=None):
        self.backend = backend
        self.dim = dim
        self.logger = logger or get_class_logger(self.__class__)
        self.logger.info("Embedding gateway ready (backend=%s, dim=%d)", backend.name, dim)

    @classmethod
    def from_config(cls, cfg: Config, logger=None) -> "HSKEmbeddingGateway":
        return cls(build_embedding_backend(cfg), cfg.embedding_dim, logger=logger)

    @property
    def backend_name(self) -> str:
        return self.backend.name

    def _check(self, vec: np.ndarray, context: str) -> np.ndarray:
        vec = np.asarray(vec, dtype=np.float32).ravel()
        if vec.shape[0] != self.dim:
            raise DimensionMismatch(self.dim, vec.shape[0], context)
        return vec

    def embed(self, text: str) -> np.ndarray:
        if not text or not text.strip():
            raise ValidationError("text must be a non-empty string")
        start = time.time()
        vec = self._check(self.backend.embed(text), "embed")
        self.logger.debug("Embedded %d chars in %.1f ms", len(text), (time.time() - start) * 1000.0)
        return vec

    def embed_batch(self, texts: Sequence[str]) -> List[np.ndarray]:
        if not texts:
            return []
        start = time.time()
        vectors = self.backend.embed_batch(list(texts))
        if len(vectors) != len(texts):
            raise ProviderUnavailable("embedding", f"backend returned {len(vectors)} vectors for {len(texts)} texts")
        out = [self._check(v, "embed_batch") for v in vectors]
        self.logger.info("Embedded batch of %d texts in %.1f ms", len(texts), (time.time() - start) * 1000.0)
        return out

    @staticmethod
    def cosine_similarity(v1: np.ndarray, v2: np.ndarray) -> float:
        return cosine_similarity(v1, v2)

    def health_check(self) -> bool:
        try:
            return bool(self.backend.health_check())
        except Exception as e:
            self.logger.warning("Embedding health check raised: %s", e)
            return False

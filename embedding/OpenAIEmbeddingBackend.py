# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-05
# Description: OpenAIEmbeddingBackend
# -----------------------------------------------------------------------------
from typing import List, Sequence

import numpy as np
from openai import OpenAI, OpenAIError

import settings
from config.Config import Config
from errors.HSKErrors import ProviderUnavailable
from utility.logging_utils import get_class_logger


class OpenAIEmbeddingBackend:
    """
    OpenAI embeddings API as an alternative to the self-hosted service.

    The output size is pinned with `dimensions=cfg.embedding_dim` so stored
    vectors stay comparable. The SDK's built-in retries are disabled.
    """

    name = "openai"

    def __init__(self, cfg: Config, *, client: OpenAI | None = None, logger=None):
        self.cfg = cfg
        self.logger = logger or get_class_logger(self.__class__)
        self.model = cfg.openai_embed_model
        self.dim = cfg.embedding_dim

        if client is None:
            if not cfg.openai_api_key:
                raise ValueError("Config is missing openai_api_key for OpenAI embeddings")
            client = OpenAI(
                api_key=cfg.openai_api_key,
                base_url=cfg.openai_base_url or None,
                max_retries=0,
            )
        self.client = client
        self.logger.info("OpenAIEmbeddingBackend initialised (model=%s, dim=%d)", self.model, self.dim)

    def _create(self, texts: List[str], timeout: float) -> List[np.ndarray]:
        try:
            resp = self.client.embeddings.create(
                model=self.model,
                input=texts,
                dimensions=self.dim,
                timeout=timeout,
            )
        except OpenAIError as e:
            self.logger.error("OpenAI embeddings call failed (%d texts): %s", len(texts), e, exc_info=True)
            raise ProviderUnavailable("embedding", f"OpenAI embeddings failed: {e}") from e

        data = sorted(resp.data, key=lambda d: d.index)
        return [np.asarray(d.embedding, dtype=np.float32) for d in data]

    def embed(self, text: str) -> np.ndarray:
        return self._create([text], settings.EMBED_TIMEOUT_SECONDS)[0]

    def embed_batch(self, texts: Sequence[str]) -> List[np.ndarray]:
        if not texts:
            return []
        return self._create(list(texts), settings.EMBED_BATCH_TIMEOUT_SECONDS)

    def health_check(self) -> bool:
        try:
            self.client.models.retrieve(self.model, timeout=settings.HEALTH_TIMEOUT_SECONDS)
            return True
        except OpenAIError as e:
            self.logger.warning("OpenAI embeddings health check failed: %s", e)
            return False

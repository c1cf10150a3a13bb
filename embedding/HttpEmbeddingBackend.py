# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-05
# Description: HttpEmbeddingBackend
# -----------------------------------------------------------------------------
from typing import Any, List, Optional, Sequence

import httpx
import numpy as np

import settings
from errors.HSKErrors import ProviderUnavailable
from utility.logging_utils import get_class_logger


class HttpEmbeddingBackend:
    """
    Client for the self-hosted embedding service.

        POST {url}/embed        {"text": ..., "model": ...}    -> {"embedding": [...]}
        POST {url}/embed/batch  {"texts": [...], "model": ...} -> {"embeddings": [[...], ...]}
        GET  {url}/health                                       -> 200
    """

    name = "http"

    def __init__(
            self,
            base_url: str,
            model: str,
            *,
            timeout: float = settings.EMBED_TIMEOUT_SECONDS,
            batch_timeout: float = settings.EMBED_BATCH_TIMEOUT_SECONDS,
            health_timeout: float = settings.HEALTH_TIMEOUT_SECONDS,
            client: Optional[httpx.Client] = None,
            logger=None,
    ):
        self.base_url = base_url.rstrip("/")
        self.model = model
        self.timeout = timeout
        self.batch_timeout = batch_timeout
        self.health_timeout = health_timeout
        self.client = client or httpx.Client()
        self.logger = logger or get_class_logger(self.__class__)
        self.logger.info("HttpEmbeddingBackend initialised (url=%s, model=%s)", self.base_url, self.model)

    def _post(self, path: str, payload: dict, timeout: float) -> Any:
        url = f"{self.base_url}{path}"
        try:
            resp = self.client.post(url, json=payload, timeout=timeout)
            resp.raise_for_status()
            return resp.json()
        except httpx.TimeoutException as e:
            self.logger.error("Embedding request to %s timed out after %.0fs", url, timeout, exc_info=True)
            raise ProviderUnavailable("embedding", f"timeout after {timeout:.0f}s calling {path}") from e
        except httpx.HTTPStatusError as e:
            self.logger.error("Embedding request to %s returned %s", url, e.response.status_code, exc_info=True)
            raise ProviderUnavailable("embedding", f"HTTP {e.response.status_code} from {path}") from e
        except (httpx.HTTPError, ValueError) as e:
            self.logger.error("Embedding request to %s failed: %s", url, e, exc_info=True)
            raise ProviderUnavailable("embedding", f"request to {path} failed: {e}") from e

    def embed(self, text: str) -> np.ndarray:
        data = self._post("/embed", {"text": text, "model": self.model}, self.timeout)
        embedding = data.get("embedding") if isinstance(data, dict) else None
        if not isinstance(embedding, list):
            raise ProviderUnavailable("embedding", "response is missing 'embedding'")
        return np.asarray(embedding, dtype=np.float32)

    def embed_batch(self, texts: Sequence[str]) -> List[np.ndarray]:
        if not texts:
            return []
        data = self._post("/embed/batch", {"texts": list(texts), "model": self.model}, self.batch_timeout)
        embeddings = data.get("embeddings") if isinstance(data, dict) else None
        if not isinstance(embeddings, list) or len(embeddings) != len(texts):
            raise ProviderUnavailable(
                "embedding", f"batch response has {len(embeddings or [])} vectors for {len(texts)} texts"
            )
        return [np.asarray(e, dtype=np.float32) for e in embeddings]

    def health_check(self) -> bool:
        try:
            resp = self.client.get(f"{self.base_url}/health", timeout=self.health_timeout)
            return resp.status_code == 200
        except httpx.HTTPError as e:
            self.logger.warning("Embedding service health check failed: %s", e)
            return False

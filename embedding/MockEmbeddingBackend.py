# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-05
# Description: MockEmbeddingBackend
# -----------------------------------------------------------------------------
import hashlib
from typing import List, Sequence

import numpy as np


class MockEmbeddingBackend:
    """
    Deterministic stand-in for the embedding provider: unit-normalized
    pseudo-random vectors seeded from the SHA-256 of the text, so the same
    text always maps to the same vector. No network.
    """

    name = "mock"

    def __init__(self, dim: int = 1024):
        if dim <= 0:
            raise ValueError(f"dim must be positive, got {dim}")
        self.dim = dim

    def embed(self, text: str) -> np.ndarray:
        seed = int.from_bytes(hashlib.sha256((text or "").encode("utf-8")).digest()[:8], "big")
        rng = np.random.default_rng(seed)
        vec = rng.standard_normal(self.dim).astype(np.float32)
        return vec / (np.linalg.norm(vec) + 1e-12)

    def embed_batch(self, texts: Sequence[str]) -> List[np.ndarray]:
        return [self.embed(t) for t in texts]

    def health_check(self) -> bool:
        return True

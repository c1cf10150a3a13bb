# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-05
# Description: EmbeddingBackend
# -----------------------------------------------------------------------------
from typing import List, Protocol, Sequence, runtime_checkable

import numpy as np


@runtime_checkable
class EmbeddingBackend(Protocol):
    """
    One strategy for turning text into vectors. Implementations raise
    ProviderUnavailable on network/timeout/payload failures and never retry.
    """

    name: str

    def embed(self, text: str) -> np.ndarray:
        ...

    def embed_batch(self, texts: Sequence[str]) -> List[np.ndarray]:
        ...

    def health_check(self) -> bool:
        ...

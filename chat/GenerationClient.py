# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-08
# Description: GenerationClient
# -----------------------------------------------------------------------------
from dataclasses import dataclass, field
from typing import List, Optional, Protocol, runtime_checkable

import settings
from vectorstore.HSKVectorIndex import SearchResult


@dataclass
class GenerationRequest:
    """Everything a generation strategy may need: the full prompt plus the raw pieces it was built from."""
    prompt: str
    context: str
    query: str
    sources: List[SearchResult] = field(default_factory=list)
    hsk_level: Optional[int] = None
    max_tokens: int = settings.GENERATION_DEFAULTS["max_tokens"]
    temperature: float = settings.GENERATION_DEFAULTS["temperature"]


@dataclass
class GenerationResult:
    text: str
    model: str
    is_fallback: bool = False


@runtime_checkable
class GenerationClient(Protocol):
    """
    A generation strategy. Real clients raise GenerationFailed on any
    provider failure and never retry.
    """

    name: str

    def generate(self, request: GenerationRequest) -> GenerationResult:
        ...

    def health_check(self) -> bool:
        ...

# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-08
# Description: FallbackGenerationClient
# -----------------------------------------------------------------------------
from dataclasses import replace

from chat.GenerationClient import GenerationClient, GenerationRequest, GenerationResult
from chat.HttpGenerationClient import HttpGenerationClient
from chat.MockGenerationClient import MockGenerationClient
from chat.OpenAIChat import OpenAIChat
from config.Config import Config, Mode
from errors.HSKErrors import ProviderUnavailable
from utility.logging_utils import get_class_logger


class FallbackGenerationClient:
    """Development strategy: real provider first, templated answer flagged as fallback on failure."""

    def __init__(self, primary: GenerationClient, fallback: GenerationClient, logger=None):
        self.primary = primary
        self.fallback = fallback
        self.name = f"{primary.name}+{fallback.name}"
        self.logger = logger or get_class_logger(self.__class__)

    def generate(self, request: GenerationRequest) -> GenerationResult:
        try:
            return self.primary.generate(request)
        except ProviderUnavailable as e:
            self.logger.warning("Generation provider failed, using templated answer: %s", e)
            return replace(self.fallback.generate(request), is_fallback=True)

    def health_check(self) -> bool:
        return self.primary.health_check()


def build_generation_client(cfg: Config) -> GenerationClient:
    """Pick the generation strategy for the configured mode and provider."""
    mock = MockGenerationClient()
    if cfg.mode == Mode.TEST:
        return mock

    if cfg.generation_provider == "openai":
        real: GenerationClient = OpenAIChat(cfg)
    else:
        real = HttpGenerationClient(cfg.llm_service_url, cfg.llm_model)

    if cfg.mode == Mode.DEVELOPMENT:
        return FallbackGenerationClient(real, mock)
    return real

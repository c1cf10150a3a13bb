# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-08
# Description: OpenAIChat
# -----------------------------------------------------------------------------
from dataclasses import dataclass
from typing import Any, Dict, List

from openai import OpenAI, OpenAIError

import settings
from chat.GenerationClient import GenerationRequest, GenerationResult
from errors.HSKErrors import GenerationFailed
from utility.logging_utils import get_class_logger

Message = Dict[str, str]  # {"role": "system"|"user"|"assistant", "content": "..."}

SYSTEM_PROMPT = "You are a helpful Chinese language learning assistant."


@dataclass
class OpenAIChat:
    """
    OpenAI chat completions as a generation strategy.

    Expected Config fields:
      cfg.openai_api_key: str
      cfg.openai_base_url: str (optional)
      cfg.openai_chat_model: str  (e.g. "gpt-4o-mini")
    """

    cfg: Any
    client: Any = None
    logger: Any = None

    name = "openai"

    def __post_init__(self) -> None:
        self.logger = self.logger or get_class_logger(self.__class__)

        self.model = getattr(self.cfg, "openai_chat_model", None)
        if not self.model:
            raise ValueError("Config missing openai_chat_model for OpenAI generation.")

        if self.client is None:
            if not getattr(self.cfg, "openai_api_key", None):
                raise ValueError("Config is missing openai_api_key for OpenAI generation")
            self.client = OpenAI(
                api_key=self.cfg.openai_api_key,
                base_url=getattr(self.cfg, "openai_base_url", None) or None,
                max_retries=0,
            )

        self.logger.info("OpenAIChat initialised (model=%s)", self.model)

    def chat(self, messages: List[Message], temperature: float, max_tokens: int, timeout: float) -> Any:
        if not messages:
            raise ValueError("messages must be non-empty.")

        self.logger.debug(
            "Chat request: model=%s temp=%s max_tokens=%s", self.model, temperature, max_tokens
        )
        return self.client.chat.completions.create(
            model=self.model,
            messages=messages,
            temperature=temperature,
            max_tokens=max_tokens,
            timeout=timeout,
        )

    def generate(self, request: GenerationRequest) -> GenerationResult:
        messages: List[Message] = [
            {"role": "system", "content": SYSTEM_PROMPT},
            {"role": "user", "content": request.prompt},
        ]
        try:
            resp = self.chat(
                messages,
                temperature=request.temperature,
                max_tokens=request.max_tokens,
                timeout=settings.GENERATION_TIMEOUT_SECONDS,
            )
        except OpenAIError as e:
            self.logger.error("OpenAI chat call failed: %s", e, exc_info=True)
            raise GenerationFailed(f"OpenAI chat failed: {e}") from e

        try:
            content = resp.choices[0].message.content or ""
        except (AttributeError, IndexError) as e:
            self.logger.error("Unexpected chat response format: %s", e, exc_info=True)
            raise GenerationFailed(f"Unexpected chat response format: {e}") from e

        self.logger.info("Chat answer generated (model=%s)", getattr(resp, "model", None))
        self.logger.debug("Token usage: %r", getattr(resp, "usage", None))
        return GenerationResult(text=content, model=getattr(resp, "model", None) or self.model)

    def health_check(self) -> bool:
        try:
            self.client.models.retrieve(self.model, timeout=settings.HEALTH_TIMEOUT_SECONDS)
            return True
        except OpenAIError as e:
            self.logger.warning("Chat healthcheck failed: %s", e)
            return False

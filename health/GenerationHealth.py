# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-11
# Description: GenerationHealth
# -----------------------------------------------------------------------------
import logging
from typing import Optional

from chat.GenerationClient import GenerationClient, GenerationRequest
from utility.logging_utils import get_logger


class GenerationHealth:
    """Smoke test for the generation provider: reachability, plus an optional tiny generation."""

    def __init__(self, client: GenerationClient, logger: Optional[logging.Logger] = None):
        self.client = client
        self.logger = logger or get_logger(__name__)

    def run(self) -> bool:
        try:
            ok = bool(self.client.health_check())
        except Exception as e:
            self.logger.exception("Generation healthcheck raised: %s", e)
            return False
        self.logger.info("Generation healthcheck (%s): %s", self.client.name, "PASSED" if ok else "FAILED")
        return ok

    def run_generation(self) -> bool:
        """Issue one short generation. Costs provider tokens."""
        request = GenerationRequest(
            prompt="Reply with the single word: pong",
            context="",
            query="ping",
            max_tokens=5,
            temperature=0.0,
        )
        try:
            result = self.client.generate(request)
        except Exception as e:
            self.logger.exception("Generation smoke call FAILED: %s", e)
            return False
        if result.is_fallback or not result.text.strip():
            self.logger.error("Generation smoke call returned no real answer (fallback=%s)", result.is_fallback)
            return False
        self.logger.info("Generation smoke call PASSED (model=%s)", result.model)
        return True

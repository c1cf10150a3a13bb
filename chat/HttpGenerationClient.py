# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-08
# Description: HttpGenerationClient
# -----------------------------------------------------------------------------
from typing import Optional

import httpx

import settings
from chat.GenerationClient import GenerationRequest, GenerationResult
from errors.HSKErrors import GenerationFailed
from utility.logging_utils import get_class_logger

NO_RESPONSE_TEXT = "No response generated"


class HttpGenerationClient:
    """
    Client for the self-hosted LLM service.

        POST {url}/generate {"prompt", "context", "model", "maxTokens", "temperature"}
            -> {"text": ...} (older deployments answer with {"response": ...})
    """

    name = "http"

    def __init__(
            self,
            base_url: str,
            model: str,
            *,
            timeout: float = settings.GENERATION_TIMEOUT_SECONDS,
            health_timeout: float = settings.HEALTH_TIMEOUT_SECONDS,
            client: Optional[httpx.Client] = None,
            logger=None,
    ):
        self.base_url = base_url.rstrip("/")
        self.model = model
        self.timeout = timeout
        self.health_timeout = health_timeout
        self.client = client or httpx.Client()
        self.logger = logger or get_class_logger(self.__class__)
        self.logger.info("HttpGenerationClient initialised (url=%s, model=%s)", self.base_url, self.model)

    def generate(self, request: GenerationRequest) -> GenerationResult:
        payload = {
            "prompt": request.prompt,
            "context": request.context,
            "model": self.model,
            "maxTokens": request.max_tokens,
            "temperature": request.temperature,
        }
        url = f"{self.base_url}/generate"
        try:
            resp = self.client.post(url, json=payload, timeout=self.timeout)
            resp.raise_for_status()
            data = resp.json()
        except httpx.TimeoutException as e:
            self.logger.error("Generation request timed out after %.0fs", self.timeout, exc_info=True)
            raise GenerationFailed(f"timeout after {self.timeout:.0f}s") from e
        except httpx.HTTPStatusError as e:
            self.logger.error("Generation request returned %s", e.response.status_code, exc_info=True)
            raise GenerationFailed(f"HTTP {e.response.status_code} from /generate") from e
        except (httpx.HTTPError, ValueError) as e:
            self.logger.error("Generation request to %s failed: %s", url, e, exc_info=True)
            raise GenerationFailed(f"request to /generate failed: {e}") from e

        if not isinstance(data, dict):
            raise GenerationFailed("response body is not a JSON object")
        text = data.get("text") or data.get("response") or NO_RESPONSE_TEXT
        return GenerationResult(text=str(text), model=self.model)

    def health_check(self) -> bool:
        try:
            resp = self.client.get(f"{self.base_url}/health", timeout=self.health_timeout)
            return resp.status_code == 200
        except httpx.HTTPError as e:
            self.logger.warning("LLM service health check failed: %s", e)
            return False

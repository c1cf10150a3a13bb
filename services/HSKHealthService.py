# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-11
# Description: HSKHealthService.py
# -----------------------------------------------------------------------------
from dataclasses import dataclass

from api.schemas.health import DeepHealthResponse, ProviderHealthResponse, SmokeTestSummary
from chat.GenerationClient import GenerationClient
from embedding.HSKEmbeddingGateway import HSKEmbeddingGateway
from health.TestRunner import TestRunner


@dataclass
class HSKHealthService:
    """
    Wraps TestRunner for the deep smoke tests and the quick provider probes.
    Returns API schema objects.
    """

    test_runner: TestRunner
    gateway: HSKEmbeddingGateway
    generator: GenerationClient

    def deep_health(self, run_generation: bool = False) -> DeepHealthResponse:
        results = self.test_runner.run_all(run_generation=run_generation)

        total = len(results)
        passed = sum(1 for ok in results.values() if ok)
        failed = total - passed

        return DeepHealthResponse(
            status="ok" if failed == 0 else "error",
            results=results,
            summary=SmokeTestSummary(total=total, passed=passed, failed=failed),
        )

    def provider_health(self) -> ProviderHealthResponse:
        embedding_ok = self.gateway.health_check()
        generation_ok = bool(self.generator.health_check())
        return ProviderHealthResponse(
            status="healthy" if embedding_ok else "unhealthy",
            embedding_service=embedding_ok,
            generation_service=generation_ok,
            embedding_backend=self.gateway.backend_name,
            generation_backend=self.generator.name,
        )

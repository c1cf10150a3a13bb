# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-11
# Description: TestRunner
# -----------------------------------------------------------------------------

from __future__ import annotations

import logging
from typing import Callable, Dict, Optional

from health.EmbeddingHealth import EmbeddingHealth
from health.GenerationHealth import GenerationHealth
from health.VectorIndexHealth import VectorIndexHealth
from utility.logging_utils import get_class_logger


class TestRunner:
    """
    Orchestrates all smoke tests and reports a consolidated result.

    Tests included:
      - VectorIndexHealth (index connection + stats)
      - EmbeddingHealth   (provider call + dimension check)
      - GenerationHealth  (provider reachability, optional real generation)
    """

    __test__ = False  # not a pytest class

    def __init__(
        self,
        *,
        index_health: VectorIndexHealth,
        embedding_health: EmbeddingHealth,
        generation_health: GenerationHealth,
        logger: Optional[logging.Logger] = None,
    ):
        self.index_health = index_health
        self.embedding_health = embedding_health
        self.generation_health = generation_health
        self.logger = logger or get_class_logger(self.__class__)

    # -------------------------------------------------------------------------
    def run_all(self, run_generation: bool = False) -> Dict[str, bool]:
        """
        Run all configured smoke tests.

        :param run_generation: If True, also issues a real (token-consuming) generation call.
        :return: Dict mapping test names to True/False.
        """
        self.logger.info("Starting smoke test suite (run_generation=%s)", run_generation)

        checks: Dict[str, Callable[[], bool]] = {
            "vector_index_health": self.index_health.run,
            "embedding_health": self.embedding_health.run,
            "generation_health": self.generation_health.run,
        }
        if run_generation:
            checks["generation_call_health"] = self.generation_health.run_generation

        results: Dict[str, bool] = {}
        for name, check in checks.items():
            try:
                ok = bool(check())
            except Exception as e:
                self.logger.exception("%s raised an exception: %s", name, e)
                ok = False
            results[name] = ok
            self._log_result(name, ok)

        self._log_summary(results)
        return results

    # -------------------------------------------------------------------------
    def _log_result(self, name: str, ok: bool) -> None:
        if ok:
            self.logger.info("%s: PASS", name)
        else:
            self.logger.error("%s: FAIL", name)

    def _log_summary(self, results: Dict[str, bool]) -> None:
        total = len(results)
        passed = sum(1 for v in results.values() if v)
        self.logger.info("Smoke test summary: %d total, %d passed, %d failed", total, passed, total - passed)

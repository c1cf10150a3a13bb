# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-10
# Description: HSKReindexService.py
# -----------------------------------------------------------------------------
from __future__ import annotations

import logging
import threading
import time
import uuid
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Callable, Dict, List, Optional

import settings
from content.HSKContent import ExtractedContent
from embedding.HSKEmbeddingGateway import HSKEmbeddingGateway
from errors.HSKErrors import ExtractionSkipped, ReindexInProgress
from extractor.HSKContentNormalizer import HSKContentNormalizer
from loader.HSKContentSource import HSKContentSource
from utility.logging_utils import get_class_logger
from vectorstore.HSKVectorIndex import HSKVectorIndex


@dataclass
class ReindexReport:
    generation_id: str
    extracted: int = 0
    skipped: int = 0
    embedded: int = 0
    removed: int = 0
    batches: int = 0
    duration_ms: int = 0
    by_source_type: Dict[str, int] = field(default_factory=dict)


@dataclass
class ReindexAck:
    status: str  # "processing" | "already_running"
    job_id: str
    message: str


@dataclass
class ReindexStatus:
    job_id: Optional[str] = None
    state: str = "idle"  # idle | running | completed | failed
    started_at: Optional[datetime] = None
    finished_at: Optional[datetime] = None
    report: Optional[ReindexReport] = None
    error: Optional[str] = None


class HSKReindexService:
    """
    Owns the full-corpus rebuild:
      - open a new index generation
      - run the four extractors concurrently over the content source
      - drop items with no text
      - embed sequentially in paced batches, writing each into the generation
      - activate the generation, which removes the previous one

    Only one rebuild runs at a time. A failed rebuild discards its generation
    and the previous one stays live.
    """

    def __init__(
        self,
        *,
        source: HSKContentSource,
        normalizer: HSKContentNormalizer,
        gateway: HSKEmbeddingGateway,
        index: HSKVectorIndex,
        batch_size: int = settings.REINDEX_BATCH_SIZE,
        batch_delay_seconds: float = settings.REINDEX_BATCH_DELAY_SECONDS,
        sleep: Callable[[float], None] = time.sleep,
        logger: logging.Logger | None = None,
    ) -> None:
        if batch_size < 1:
            raise ValueError(f"batch_size must be >= 1, got {batch_size}")
        self.source = source
        self.normalizer = normalizer
        self.gateway = gateway
        self.index = index
        self.batch_size = batch_size
        self.batch_delay_seconds = batch_delay_seconds
        self.sleep = sleep
        self.logger = logger or get_class_logger(self.__class__)

        self._run_lock = threading.Lock()
        self._state_lock = threading.Lock()
        self._status = ReindexStatus()
        self._thread: Optional[threading.Thread] = None

    # ---------------------------------------------------------------------
    # Extraction
    # ---------------------------------------------------------------------
    def extract_all(self) -> List[ExtractedContent]:
        """Run the four extractors in parallel; output order is word, grammar, content, question."""
        with ThreadPoolExecutor(max_workers=4, thread_name_prefix="extract") as pool:
            futures = [
                pool.submit(lambda: self.normalizer.extract_words(self.source.list_words())),
                pool.submit(lambda: self.normalizer.extract_grammar(self.source.list_grammar_patterns())),
                pool.submit(lambda: self.normalizer.extract_contents(self.source.list_contents())),
                pool.submit(lambda: self.normalizer.extract_questions(self.source.list_questions())),
            ]
            items: List[ExtractedContent] = []
            for f in futures:
                items.extend(f.result())
        return items

    def _embeddable(self, items: List[ExtractedContent]) -> List[ExtractedContent]:
        kept: List[ExtractedContent] = []
        for item in items:
            try:
                item.text = item.require_text()
            except ExtractionSkipped as e:
                self.logger.debug("Skipping %s", e)
                continue
            self.logger.debug("Queued %s", item.short_preview(80))
            kept.append(item)
        return kept

    # ---------------------------------------------------------------------
    # Rebuild
    # ---------------------------------------------------------------------
    def _rebuild(self) -> ReindexReport:
        start = time.time()
        generation_id = self.index.begin_generation()
        report = ReindexReport(generation_id=generation_id)

        try:
            extracted = self.extract_all()
            items = self._embeddable(extracted)
            report.extracted = len(extracted)
            report.skipped = len(extracted) - len(items)
            for item in items:
                key = item.source_type.value
                report.by_source_type[key] = report.by_source_type.get(key, 0) + 1

            self.logger.info(
                "Reindex %s: %d items to embed (%d skipped without text), batch=%d",
                generation_id, len(items), report.skipped, self.batch_size,
            )

            for offset in range(0, len(items), self.batch_size):
                if offset > 0 and self.batch_delay_seconds > 0:
                    self.sleep(self.batch_delay_seconds)
                batch = items[offset:offset + self.batch_size]
                vectors = self.gateway.embed_batch([i.text for i in batch])
                report.embedded += self.index.add_records(generation_id, batch, vectors)
                report.batches += 1
                self.logger.info(
                    "Reindex %s: batch %d done (%d/%d embedded)",
                    generation_id, report.batches, report.embedded, len(items),
                )

            report.removed = self.index.activate_generation(generation_id)

        except Exception as e:
            self.logger.error(
                "Reindex %s failed after %d embedded records: %s", generation_id, report.embedded, e, exc_info=True
            )
            try:
                self.index.discard_generation(generation_id)
            except Exception as discard_error:
                self.logger.error("Could not discard generation %s: %s", generation_id, discard_error, exc_info=True)
            raise

        report.duration_ms = int((time.time() - start) * 1000)
        self.logger.info(
            "Reindex %s complete: %d records active, %d previous removed (%d ms)",
            generation_id, report.embedded, report.removed, report.duration_ms,
        )
        return report

    def rebuild_all(self) -> ReindexReport:
        """Synchronous rebuild. Raises ReindexInProgress when another rebuild holds the lock."""
        if not self._run_lock.acquire(blocking=False):
            raise ReindexInProgress(self._status.job_id)
        job_id = uuid.uuid4().hex
        self._set_status(ReindexStatus(job_id=job_id, state="running", started_at=_now()))
        try:
            return self._run_job(job_id)
        finally:
            self._run_lock.release()

    def _run_job(self, job_id: str) -> ReindexReport:
        try:
            report = self._rebuild()
        except Exception as e:
            self._set_status(ReindexStatus(
                job_id=job_id, state="failed", started_at=self._status.started_at,
                finished_at=_now(), error=str(e),
            ))
            raise
        self._set_status(ReindexStatus(
            job_id=job_id, state="completed", started_at=self._status.started_at,
            finished_at=_now(), report=report,
        ))
        return report

    # ---------------------------------------------------------------------
    # Background trigger
    # ---------------------------------------------------------------------
    def trigger(self) -> ReindexAck:
        """Start a rebuild on a daemon thread and return at once."""
        if not self._run_lock.acquire(blocking=False):
            job_id = self._status.job_id or ""
            self.logger.info("Reindex trigger ignored: job %s still running", job_id)
            return ReindexAck(status="already_running", job_id=job_id, message="A reindex is already in progress")

        job_id = uuid.uuid4().hex
        self._set_status(ReindexStatus(job_id=job_id, state="running", started_at=_now()))
        try:
            self._thread = threading.Thread(
                target=self._background, args=(job_id,), name=f"reindex-{job_id[:8]}", daemon=True
            )
            self._thread.start()
        except Exception:
            self._run_lock.release()
            raise

        self.logger.info("Reindex job %s started in background", job_id)
        return ReindexAck(status="processing", job_id=job_id, message="Content processing started in background")

    def _background(self, job_id: str) -> None:
        try:
            self._run_job(job_id)
        except Exception as e:
            self.logger.error("Background reindex job %s failed: %s", job_id, e)
        finally:
            self._run_lock.release()

    def wait(self, timeout: Optional[float] = None) -> bool:
        """Block until the background job (if any) finishes. Returns False on timeout."""
        thread = self._thread
        if thread is None:
            return True
        thread.join(timeout)
        return not thread.is_alive()

    @property
    def is_running(self) -> bool:
        return self._run_lock.locked()

    def status(self) -> ReindexStatus:
        with self._state_lock:
            return self._status

    def _set_status(self, status: ReindexStatus) -> None:
        with self._state_lock:
            self._status = status


def _now() -> datetime:
    return datetime.now(timezone.utc)

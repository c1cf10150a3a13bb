# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-14
# Description: test_reindex_service.py
# -----------------------------------------------------------------------------
import threading

import pytest

from conftest import DIM, KeyedEmbeddingBackend, item, seed_index, unit
from content.HSKContent import SourceType
from embedding.HSKEmbeddingGateway import HSKEmbeddingGateway
from errors.HSKErrors import ProviderUnavailable, ReindexInProgress
from extractor.HSKContentNormalizer import HSKContentNormalizer
from loader.HSKContentSource import InMemoryContentSource
from services.HSKReindexService import HSKReindexService
from vectorstore.HSKVectorIndex import SearchOptions


class FlakyBackend(KeyedEmbeddingBackend):
    """Fails on the n-th batch call."""

    def __init__(self, fail_on_batch: int):
        super().__init__({})
        self.fail_on_batch = fail_on_batch

    def embed_batch(self, texts):
        if len(self.batch_calls) + 1 == self.fail_on_batch:
            self.batch_calls.append(list(texts))
            raise ProviderUnavailable("embedding", "connection reset")
        return super().embed_batch(texts)


class BlockingBackend(KeyedEmbeddingBackend):
    """Holds the first batch until released, so a rebuild stays in flight."""

    def __init__(self):
        super().__init__({})
        self.entered = threading.Event()
        self.release = threading.Event()

    def embed_batch(self, texts):
        self.entered.set()
        self.release.wait(timeout=5)
        return super().embed_batch(texts)


def make_service(source, backend, index, batch_size=10, sleeps=None) -> HSKReindexService:
    return HSKReindexService(
        source=source,
        normalizer=HSKContentNormalizer(),
        gateway=HSKEmbeddingGateway(backend, DIM),
        index=index,
        batch_size=batch_size,
        batch_delay_seconds=0.5,
        sleep=(sleeps.append if sleeps is not None else (lambda s: None)),
    )


def word_source(n: int) -> InMemoryContentSource:
    return InMemoryContentSource(words=[
        {"id": i, "simplified": f"词{i}", "senses": [{"part_of_speech": "noun", "hsk_level": 1}]}
        for i in range(1, n + 1)
    ])


def test_extract_all_keeps_source_type_order(content_source, sql_index):
    service = make_service(content_source, KeyedEmbeddingBackend({}), sql_index)
    items = service.extract_all()
    assert [i.key for i in items] == [
        "word:1", "word:2", "grammar:10", "content:100", "content:101", "question:200",
    ]


def test_rebuild_embeds_only_items_with_text(content_source, sql_index):
    backend = KeyedEmbeddingBackend({})
    service = make_service(content_source, backend, sql_index)

    report = service.rebuild_all()

    assert report.extracted == 6
    assert report.skipped == 2
    assert report.embedded == 4
    assert report.by_source_type == {"word": 1, "grammar": 1, "content": 1, "question": 1}
    assert all(text.strip() for batch in backend.batch_calls for text in batch)

    stats = sql_index.stats()
    assert (stats.total, stats.active) == (4, 4)
    assert service.status().state == "completed"


def test_batches_are_paced(sql_index):
    backend = KeyedEmbeddingBackend({})
    sleeps = []
    service = make_service(word_source(25), backend, sql_index, batch_size=10, sleeps=sleeps)

    report = service.rebuild_all()

    assert [len(b) for b in backend.batch_calls] == [10, 10, 5]
    assert report.batches == 3
    # no pause before the first batch
    assert sleeps == [0.5, 0.5]


def test_rebuild_replaces_previous_generation(sql_index):
    seed_index(sql_index, [(item(SourceType.WORD, 999, "旧"), unit(1))])
    service = make_service(word_source(3), KeyedEmbeddingBackend({}), sql_index)

    report = service.rebuild_all()

    assert report.removed == 1
    stats = sql_index.stats()
    assert (stats.total, stats.active) == (3, 3)
    ids = [r.source_id for r in sql_index.search(unit(1), SearchOptions(min_similarity=-1.0, limit=50))]
    assert 999 not in ids


def test_failed_rebuild_keeps_previous_generation(sql_index):
    seed_index(sql_index, [(item(SourceType.WORD, 999, "旧"), unit(1))])
    service = make_service(word_source(25), FlakyBackend(fail_on_batch=2), sql_index)

    with pytest.raises(ProviderUnavailable):
        service.rebuild_all()

    stats = sql_index.stats()
    assert (stats.total, stats.active) == (1, 1)
    status = service.status()
    assert status.state == "failed"
    assert "connection reset" in status.error
    assert not service.is_running


def test_empty_corpus_clears_index(sql_index):
    seed_index(sql_index, [(item(SourceType.WORD, 999, "旧"), unit(1))])
    service = make_service(InMemoryContentSource(), KeyedEmbeddingBackend({}), sql_index)

    report = service.rebuild_all()
    assert report.embedded == 0
    assert sql_index.stats().total == 0


def test_trigger_is_single_flight(sql_index):
    backend = BlockingBackend()
    service = make_service(word_source(3), backend, sql_index)

    first = service.trigger()
    assert first.status == "processing"
    assert backend.entered.wait(timeout=5)

    second = service.trigger()
    assert second.status == "already_running"
    assert second.job_id == first.job_id
    with pytest.raises(ReindexInProgress):
        service.rebuild_all()

    backend.release.set()
    assert service.wait(timeout=5)
    assert service.status().state == "completed"
    assert service.status().job_id == first.job_id
    assert sql_index.stats().active == 3
    assert service.trigger().status == "processing"
    assert service.wait(timeout=5)


def test_background_failure_is_reported_in_status(sql_index):
    service = make_service(word_source(3), FlakyBackend(fail_on_batch=1), sql_index)

    ack = service.trigger()
    assert service.wait(timeout=5)

    status = service.status()
    assert status.job_id == ack.job_id
    assert status.state == "failed"
    assert not service.is_running


def test_batch_size_must_be_positive(content_source, sql_index):
    with pytest.raises(ValueError):
        make_service(content_source, KeyedEmbeddingBackend({}), sql_index, batch_size=0)

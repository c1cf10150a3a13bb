# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-13
# Description: test_query_service.py
# -----------------------------------------------------------------------------
import pytest

from chat.FallbackGenerationClient import FallbackGenerationClient
from chat.MockGenerationClient import MockGenerationClient
from conftest import (
    DIM,
    FailingGenerationClient,
    KeyedEmbeddingBackend,
    StaticGenerationClient,
    item,
    seed_index,
    unit,
    vector_with_similarity,
)
from content.HSKContent import SourceType
from embedding.HSKEmbeddingGateway import HSKEmbeddingGateway
from errors.HSKErrors import GenerationFailed, ValidationError
from services.HSKQueryService import HSKQueryService, QueryRequest, build_context, compute_confidence

QUERY = "你好是什么意思"


@pytest.fixture
def backend():
    return KeyedEmbeddingBackend({QUERY: unit(1)})


def make_service(backend, sql_index, ledger, generator) -> HSKQueryService:
    return HSKQueryService(
        gateway=HSKEmbeddingGateway(backend, DIM),
        index=sql_index,
        generator=generator,
        ledger=ledger,
    )


@pytest.fixture
def greeting_index(sql_index):
    seed_index(sql_index, [
        (item(SourceType.WORD, 1, "Word: 你好. Meanings: interjection Translations: hello (en)", hskLevel=1),
         vector_with_similarity(0.92)),
    ])
    return sql_index


def test_word_query_end_to_end(backend, greeting_index, ledger):
    generator = StaticGenerationClient()
    service = make_service(backend, greeting_index, ledger, generator)

    answer = service.ask(QueryRequest(query=QUERY, query_type="word", hsk_level=1, user_id="42"))

    assert answer.answer == "你好 means hello."
    assert len(answer.sources) == 1
    assert answer.sources[0].similarity == pytest.approx(0.92, abs=1e-5)
    assert answer.confidence == pytest.approx(0.92 + 0.04, abs=1e-5)
    assert answer.is_fallback is False
    assert answer.model == "static-model"

    history = ledger.history("42")
    assert len(history) == 1
    assert history[0].id == answer.record_id
    assert history[0].source_count == 1
    assert history[0].retrieved_sources[0]["source_type"] == "word"
    assert history[0].retrieved_sources[0]["source_id"] == 1

    prompt = generator.requests[0].prompt
    assert "HSK level 1" in prompt
    assert "[vocabulary (HSK 1)]" in prompt
    assert f"User Question: {QUERY}" in prompt


def test_threshold_excludes_weak_matches(backend, sql_index, ledger):
    seed_index(sql_index, [(item(SourceType.WORD, 1, "你好", hskLevel=3), vector_with_similarity(0.65))])
    service = make_service(backend, sql_index, ledger, StaticGenerationClient())

    # word baseline 0.7 without the beginner drop
    answer = service.ask(QueryRequest(query=QUERY, query_type="word", hsk_level=3))
    assert answer.sources == []
    assert answer.confidence == pytest.approx(0.1)


def test_no_sources_gives_floor_confidence(backend, sql_index, ledger):
    generator = MockGenerationClient()
    service = make_service(backend, sql_index, ledger, generator)

    answer = service.ask(QueryRequest(query=QUERY))
    assert answer.confidence == pytest.approx(0.1)
    assert "couldn't find specific information" in answer.answer
    assert ledger.analytics().total_queries == 1


def test_generation_failure_falls_back_in_development(backend, greeting_index, ledger):
    generator = FallbackGenerationClient(FailingGenerationClient(), MockGenerationClient())
    service = make_service(backend, greeting_index, ledger, generator)

    answer = service.ask(QueryRequest(query=QUERY, query_type="word", hsk_level=1))
    assert answer.is_fallback is True
    assert answer.confidence == 0.5
    assert answer.answer.startswith("Based on the vocabulary content")
    assert "92.0%" in answer.answer
    assert ledger.analytics().total_queries == 1


def test_generation_failure_propagates_in_production(backend, greeting_index, ledger):
    service = make_service(backend, greeting_index, ledger, FailingGenerationClient())

    with pytest.raises(GenerationFailed):
        service.ask(QueryRequest(query=QUERY, query_type="word", hsk_level=1))
    assert ledger.analytics().total_queries == 0


@pytest.mark.parametrize("request_kwargs", [
    {"query": "   "},
    {"query": QUERY, "query_type": "idiom"},
    {"query": QUERY, "hsk_level": 0},
    {"query": QUERY, "hsk_level": 10},
    {"query": QUERY, "max_sources": 0},
    {"query": QUERY, "min_similarity": 1.5},
])
def test_validation_happens_before_any_provider_call(backend, sql_index, ledger, request_kwargs):
    generator = StaticGenerationClient()
    service = make_service(backend, sql_index, ledger, generator)

    with pytest.raises(ValidationError):
        service.ask(QueryRequest(**request_kwargs))
    assert generator.requests == []
    assert ledger.analytics().total_queries == 0


def test_query_type_matching_ignores_case(backend, greeting_index, ledger):
    service = make_service(backend, greeting_index, ledger, StaticGenerationClient())

    answer = service.ask(QueryRequest(query=QUERY, query_type=" Word ", hsk_level=1))
    assert [s.source_id for s in answer.sources] == [1]


def test_overrides_replace_planned_parameters(backend, sql_index, ledger):
    seed_index(sql_index, [
        (item(SourceType.WORD, i, f"word {i}"), vector_with_similarity(0.3 + i * 0.05)) for i in range(1, 6)
    ])
    service = make_service(backend, sql_index, ledger, StaticGenerationClient())

    answer = service.ask(QueryRequest(query=QUERY, query_type="word", max_sources=2, min_similarity=0.2))
    assert [s.source_id for s in answer.sources] == [5, 4]


def test_current_content_is_prepended_to_context(backend, greeting_index, ledger):
    generator = StaticGenerationClient()
    service = make_service(backend, greeting_index, ledger, generator)

    service.ask(QueryRequest(query=QUERY, query_type="word", hsk_level=1, current_content="Lesson 1: greetings"))
    context = generator.requests[0].context
    assert context.startswith("Current learning content:\nLesson 1: greetings\n\n1. ")


def test_context_without_sources():
    assert build_context([]) == ""
    assert build_context([], "extra") == "Current learning content:\nextra"


def test_confidence_is_capped_and_monotonic():
    assert compute_confidence([]) == 0.1
    assert compute_confidence([0.95] * 5) == 1.0
    assert compute_confidence([0.6]) < compute_confidence([0.7])
    assert compute_confidence([0.6]) < compute_confidence([0.6, 0.6])
    assert compute_confidence([0.6] * 5) == pytest.approx(compute_confidence([0.6] * 8))

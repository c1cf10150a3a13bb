# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-15
# Description: test_generation_clients.py
# -----------------------------------------------------------------------------
import json
from types import SimpleNamespace

import httpx
import openai
import pytest

from chat.FallbackGenerationClient import FallbackGenerationClient, build_generation_client
from chat.GenerationClient import GenerationRequest
from chat.HttpGenerationClient import HttpGenerationClient
from chat.MockGenerationClient import MockGenerationClient, templated_answer
from chat.OpenAIChat import OpenAIChat
from config.Config import Config, Mode
from conftest import DIM, FailingGenerationClient, StaticGenerationClient
from content.HSKContent import SourceType
from errors.HSKErrors import GenerationFailed
from health.EmbeddingHealth import EmbeddingHealth
from health.GenerationHealth import GenerationHealth
from health.TestRunner import TestRunner
from health.VectorIndexHealth import VectorIndexHealth
from vectorstore.HSKVectorIndex import SearchResult


def _request(sources=()) -> GenerationRequest:
    return GenerationRequest(prompt="PROMPT", context="CTX", query="你好是什么意思", sources=list(sources))


def _source(text: str, similarity: float = 0.873) -> SearchResult:
    return SearchResult(record_id=1, source_type=SourceType.GRAMMAR, source_id=10,
                        content_text=text, similarity=similarity)


def http_client(handler) -> HttpGenerationClient:
    return HttpGenerationClient(
        "http://llm.local", "qwen", client=httpx.Client(transport=httpx.MockTransport(handler))
    )


# -----------------------------------------------------------------------------
# templated answers
# -----------------------------------------------------------------------------
def test_templated_answer_without_sources():
    text = templated_answer(_request())
    assert text.startswith("I couldn't find specific information about \"你好是什么意思\"")


def test_templated_answer_quotes_top_source():
    text = templated_answer(_request([_source("x" * 500), _source("second")]), snippet_chars=200)
    assert text.startswith("Based on the grammar content, here's what I found related to \"你好是什么意思\": ")
    assert "x" * 200 + "..." in text
    assert "x" * 201 not in text
    assert "second" not in text
    assert text.endswith("similarity score of 87.3% with your question.")


# -----------------------------------------------------------------------------
# HTTP client
# -----------------------------------------------------------------------------
def test_http_generate_sends_payload():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen.update(json.loads(request.content))
        return httpx.Response(200, json={"text": "你好 means hello"})

    result = http_client(handler).generate(_request())
    assert result.text == "你好 means hello"
    assert result.model == "qwen"
    assert seen["prompt"] == "PROMPT"
    assert seen["context"] == "CTX"
    assert seen["maxTokens"] == 500


@pytest.mark.parametrize("body,expected", [
    ({"response": "legacy"}, "legacy"),
    ({}, "No response generated"),
])
def test_http_generate_response_variants(body, expected):
    assert http_client(lambda r: httpx.Response(200, json=body)).generate(_request()).text == expected


def test_http_generate_failure():
    with pytest.raises(GenerationFailed):
        http_client(lambda r: httpx.Response(500)).generate(_request())


# -----------------------------------------------------------------------------
# OpenAI client
# -----------------------------------------------------------------------------
class FakeCompletions:
    def __init__(self, error=None):
        self.error = error
        self.calls = []

    def create(self, **kwargs):
        self.calls.append(kwargs)
        if self.error:
            raise self.error
        message = SimpleNamespace(content="你好 means hello")
        return SimpleNamespace(choices=[SimpleNamespace(message=message)], model="gpt-test", usage=None)


def _openai_chat(completions: FakeCompletions) -> OpenAIChat:
    cfg = Config(mode=Mode.TEST, database_url="sqlite://", openai_chat_model="gpt-test")
    client = SimpleNamespace(chat=SimpleNamespace(completions=completions))
    return OpenAIChat(cfg=cfg, client=client)


def test_openai_generate():
    completions = FakeCompletions()
    result = _openai_chat(completions).generate(_request())

    assert result.text == "你好 means hello"
    assert result.model == "gpt-test"
    assert completions.calls[0]["messages"][1] == {"role": "user", "content": "PROMPT"}


def test_openai_errors_become_generation_failed():
    error = openai.APIConnectionError(request=httpx.Request("POST", "http://openai.local"))
    with pytest.raises(GenerationFailed):
        _openai_chat(FakeCompletions(error)).generate(_request())


# -----------------------------------------------------------------------------
# Strategies
# -----------------------------------------------------------------------------
def test_fallback_marks_templated_answer():
    client = FallbackGenerationClient(FailingGenerationClient(), MockGenerationClient())
    result = client.generate(_request([_source("是……的")]))
    assert result.is_fallback is True
    assert result.model == "mock"


def test_fallback_passes_through_success():
    result = FallbackGenerationClient(StaticGenerationClient(), MockGenerationClient()).generate(_request())
    assert result.is_fallback is False


@pytest.mark.parametrize("mode,expected", [
    (Mode.TEST, MockGenerationClient),
    (Mode.DEVELOPMENT, FallbackGenerationClient),
    (Mode.PRODUCTION, HttpGenerationClient),
])
def test_generation_strategy_follows_mode(mode, expected):
    cfg = Config(mode=mode, database_url="sqlite://", embedding_dim=DIM)
    assert isinstance(build_generation_client(cfg), expected)


# -----------------------------------------------------------------------------
# Smoke tests
# -----------------------------------------------------------------------------
def test_runner_reports_each_check(gateway, sql_index):
    runner = TestRunner(
        index_health=VectorIndexHealth(sql_index),
        embedding_health=EmbeddingHealth(gateway),
        generation_health=GenerationHealth(StaticGenerationClient()),
    )
    assert runner.run_all() == {
        "vector_index_health": True,
        "embedding_health": True,
        "generation_health": True,
    }
    assert runner.run_all(run_generation=True)["generation_call_health"] is True


def test_runner_flags_failing_generation(gateway, sql_index):
    runner = TestRunner(
        index_health=VectorIndexHealth(sql_index),
        embedding_health=EmbeddingHealth(gateway),
        generation_health=GenerationHealth(FailingGenerationClient()),
    )
    results = runner.run_all(run_generation=True)
    assert results["generation_health"] is False
    assert results["generation_call_health"] is False
    assert results["embedding_health"] is True

# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-13
# Description: conftest.py
# -----------------------------------------------------------------------------

import os
import sys
from pathlib import Path
from typing import Dict, List, Sequence

import numpy as np
import pytest

# add project root to sys.path
ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))

# must be set before settings / Config are imported
os.environ["HSK_MODE"] = "test"
os.environ["HSK_LOG_TO_FILE"] = "0"

from chat.GenerationClient import GenerationRequest, GenerationResult  # noqa: E402
from config.Config import Config, Mode  # noqa: E402
from content.HSKContent import ExtractedContent, SourceType  # noqa: E402
from embedding.HSKEmbeddingGateway import HSKEmbeddingGateway  # noqa: E402
from embedding.MockEmbeddingBackend import MockEmbeddingBackend  # noqa: E402
from errors.HSKErrors import GenerationFailed  # noqa: E402
from loader.HSKContentSource import InMemoryContentSource  # noqa: E402
from services.HSKContextLedger import HSKContextLedger  # noqa: E402
from storage.database import Database  # noqa: E402
from vectorstore.SqlVectorIndex import SqlVectorIndex  # noqa: E402

DIM = 8


def unit(*values: float) -> np.ndarray:
    """Pad to DIM and normalize."""
    vec = np.zeros(DIM, dtype=np.float32)
    vec[:len(values)] = values
    return vec / np.linalg.norm(vec)


def vector_with_similarity(similarity: float) -> np.ndarray:
    """Unit vector whose cosine against unit(1) is exactly `similarity`."""
    return unit(similarity, float(np.sqrt(1.0 - similarity ** 2)))


class KeyedEmbeddingBackend:
    """Returns pre-assigned vectors per text; unknown texts fall back to the mock."""

    name = "keyed"

    def __init__(self, vectors: Dict[str, np.ndarray], dim: int = DIM):
        self.vectors = vectors
        self.mock = MockEmbeddingBackend(dim)
        self.batch_calls: List[List[str]] = []

    def embed(self, text: str) -> np.ndarray:
        return self.vectors.get(text, self.mock.embed(text))

    def embed_batch(self, texts: Sequence[str]) -> List[np.ndarray]:
        self.batch_calls.append(list(texts))
        return [self.embed(t) for t in texts]

    def health_check(self) -> bool:
        return True


class StaticGenerationClient:
    name = "static"
    model = "static-model"

    def __init__(self, text: str = "你好 means hello."):
        self.text = text
        self.requests: List[GenerationRequest] = []

    def generate(self, request: GenerationRequest) -> GenerationResult:
        self.requests.append(request)
        return GenerationResult(text=self.text, model=self.model)

    def health_check(self) -> bool:
        return True


class FailingGenerationClient:
    name = "failing"

    def generate(self, request: GenerationRequest) -> GenerationResult:
        raise GenerationFailed("LLM service down")

    def health_check(self) -> bool:
        return False


def seed_index(index, entries: Sequence[tuple]) -> str:
    """entries: (ExtractedContent, vector). Writes and activates one generation."""
    generation_id = index.begin_generation()
    if entries:
        items = [e[0] for e in entries]
        vectors = [e[1] for e in entries]
        index.add_records(generation_id, items, vectors)
    index.activate_generation(generation_id)
    return generation_id


def item(source_type: SourceType, source_id: int, text: str, **metadata) -> ExtractedContent:
    return ExtractedContent(source_type, source_id, text, dict(metadata))


@pytest.fixture
def cfg() -> Config:
    return Config(mode=Mode.TEST, database_url="sqlite://", embedding_dim=DIM)


@pytest.fixture
def db() -> Database:
    database = Database("sqlite://")
    database.init_schema()
    yield database
    database.engine.dispose()


@pytest.fixture
def gateway() -> HSKEmbeddingGateway:
    return HSKEmbeddingGateway(MockEmbeddingBackend(DIM), DIM)


@pytest.fixture
def sql_index(db) -> SqlVectorIndex:
    return SqlVectorIndex(db, DIM)


@pytest.fixture
def ledger(db) -> HSKContextLedger:
    return HSKContextLedger(db=db)


@pytest.fixture
def content_source() -> InMemoryContentSource:
    lesson = {"id": 7, "name": "Greetings", "hsk_level": 1}
    return InMemoryContentSource(
        words=[
            {
                "id": 1,
                "simplified": "你好",
                "traditional": "你好",
                "senses": [{
                    "pinyin": "nǐ hǎo",
                    "part_of_speech": "interjection",
                    "hsk_level": 1,
                    "is_primary": True,
                    "translations": [{"language": "en", "translation": "hello"}],
                }],
            },
            {"id": 2, "simplified": "", "senses": []},
        ],
        grammar_patterns=[
            {
                "id": 10,
                "pattern": ["是", "……", "的"],
                "pattern_pinyin": ["shì", "...", "de"],
                "pattern_formula": "是 + X + 的",
                "hsk_level": 2,
                "translations": [{"language": "en", "explanation": "Emphasizes details of a past event"}],
            },
        ],
        contents=[
            {
                "id": 100,
                "lesson_id": 7,
                "order_index": 1,
                "type": "dialog",
                "data": {"dialog": [{"speaker": "A", "text": "你好"}, {"speaker": "B", "text": "你好！"}]},
                "lesson": lesson,
            },
            {"id": 101, "lesson_id": 7, "order_index": 2, "type": "dialog", "data": {"layout": "two-column"}, "lesson": lesson},
            {"id": 102, "lesson_id": 7, "order_index": 3, "type": "text", "data": {"text": "hidden"}, "is_active": False},
        ],
        questions=[
            {
                "id": 200,
                "lesson_id": 7,
                "order_index": 1,
                "question_type": "question_selection_text_text",
                "data": {"question": "你好 means?", "options": ["hello", "goodbye"], "correctAnswer": "hello"},
                "lesson": lesson,
            },
        ],
    )

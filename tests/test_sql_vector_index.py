# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-13
# Description: test_sql_vector_index.py
# -----------------------------------------------------------------------------
import numpy as np
import pytest

from conftest import DIM, item, seed_index, unit, vector_with_similarity
from content.HSKContent import SourceType
from errors.HSKErrors import DimensionMismatch
from storage.models import EmbeddingRow
from vectorstore.HSKVectorIndex import SearchOptions

W, G, C, Q = SourceType.WORD, SourceType.GRAMMAR, SourceType.CONTENT, SourceType.QUESTION


@pytest.fixture
def seeded(sql_index):
    seed_index(sql_index, [
        (item(W, 1, "你好", hskLevel=1), vector_with_similarity(0.95)),
        (item(W, 2, "谢谢", hskLevel=1), vector_with_similarity(0.80)),
        (item(W, 3, "学习", hskLevel=3), vector_with_similarity(0.65)),
        (item(G, 10, "是……的", hskLevel=2), vector_with_similarity(0.90)),
        (item(C, 100, "Dialog: A: 你好", hskLevel=1), vector_with_similarity(0.30)),
        (item(Q, 200, "Multiple choice", hskLevel=1), vector_with_similarity(0.70)),
    ])
    return sql_index


def test_search_filters_sorts_and_truncates(seeded):
    results = seeded.search(unit(1), SearchOptions(min_similarity=0.6, limit=3))

    assert [(r.source_type, r.source_id) for r in results] == [(W, 1), (G, 10), (W, 2)]
    sims = [r.similarity for r in results]
    assert sims == sorted(sims, reverse=True)
    assert all(s >= 0.6 for s in sims)
    assert sims[0] == pytest.approx(0.95, abs=1e-5)


def test_search_respects_source_types_and_hsk_level(seeded):
    results = seeded.search(unit(1), SearchOptions(source_types=(W,), min_similarity=0.0, hsk_level=1))
    assert [r.source_id for r in results] == [1, 2]
    assert all(r.metadata["hskLevel"] == 1 for r in results)


def test_search_can_omit_metadata(seeded):
    results = seeded.search(unit(1), SearchOptions(min_similarity=0.0, include_metadata=False))
    assert len(results) == 6
    assert all(r.metadata is None for r in results)


def test_ties_break_on_record_id(sql_index):
    seed_index(sql_index, [
        (item(W, 7, "a"), vector_with_similarity(0.8)),
        (item(W, 5, "b"), vector_with_similarity(0.8)),
    ])
    results = sql_index.search(unit(1), SearchOptions(min_similarity=0.0))
    assert [r.source_id for r in results] == [7, 5]
    assert results[0].record_id < results[1].record_id


def test_empty_index_returns_nothing(sql_index):
    assert sql_index.search(unit(1), SearchOptions(min_similarity=0.0)) == []


def test_query_dimension_mismatch(seeded):
    with pytest.raises(DimensionMismatch):
        seeded.search(np.ones(DIM + 2), SearchOptions())


def test_stored_dimension_mismatch(sql_index, db):
    seed_index(sql_index, [(item(W, 1, "你好"), unit(1))])
    with db.session() as s:
        s.add(EmbeddingRow(source_type="word", source_id=2, content_text="bad", vector=[1.0, 0.0],
                           meta={}, is_active=True, generation_id="manual"))
    with pytest.raises(DimensionMismatch):
        sql_index.search(unit(1), SearchOptions(min_similarity=0.0))


def test_find_similar_excludes_anchor(seeded):
    results = seeded.find_similar_to(W, 1, SearchOptions(min_similarity=0.0))
    assert (W, 1) not in [(r.source_type, r.source_id) for r in results]
    assert len(results) == 5
    assert results[0].source_id == 10


def test_find_similar_with_missing_anchor(seeded):
    assert seeded.find_similar_to(W, 999, SearchOptions(min_similarity=0.0)) == []


def test_stats(seeded):
    stats = seeded.stats()
    assert stats.total == 6
    assert stats.active == 6
    assert stats.by_source_type == {"word": 3, "grammar": 1, "content": 1, "question": 1}


def test_new_generation_is_invisible_until_activated(seeded):
    generation_id = seeded.begin_generation()
    seeded.add_records(generation_id, [item(W, 50, "新")], [vector_with_similarity(0.99)])

    before = seeded.search(unit(1), SearchOptions(min_similarity=0.0))
    assert 50 not in [r.source_id for r in before]
    assert seeded.stats().total == 7
    assert seeded.stats().active == 6

    removed = seeded.activate_generation(generation_id)
    assert removed == 6

    after = seeded.search(unit(1), SearchOptions(min_similarity=0.0))
    assert [r.source_id for r in after] == [50]
    stats = seeded.stats()
    assert (stats.total, stats.active) == (1, 1)


def test_discard_generation_keeps_live_records(seeded):
    generation_id = seeded.begin_generation()
    seeded.add_records(generation_id, [item(W, 50, "新")], [unit(1)])

    assert seeded.discard_generation(generation_id) == 1
    stats = seeded.stats()
    assert (stats.total, stats.active) == (6, 6)


def test_add_records_rejects_wrong_dimension(sql_index):
    generation_id = sql_index.begin_generation()
    with pytest.raises(DimensionMismatch):
        sql_index.add_records(generation_id, [item(W, 1, "你好")], [np.ones(3)])

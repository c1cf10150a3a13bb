# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-14
# Description: test_context_ledger.py
# -----------------------------------------------------------------------------
import pytest

from errors.HSKErrors import ValidationError


def _record(ledger, query, user_id="u1", sources=1, ms=100):
    return ledger.record(
        query=query,
        response=f"answer to {query}",
        sources=[{"source_type": "word", "source_id": i, "similarity": 0.8, "content": "x"} for i in range(sources)],
        processing_time_ms=ms,
        user_id=user_id,
        confidence=0.9,
    )


def test_history_is_newest_first_and_limited(ledger):
    ids = [_record(ledger, q) for q in ("一", "二", "三")]
    _record(ledger, "other user", user_id="u2")

    history = ledger.history("u1", limit=2)
    assert [h.id for h in history] == [ids[2], ids[1]]
    assert history[0].query == "三"
    assert history[0].source_count == 1
    assert history[0].retrieved_sources[0]["source_type"] == "word"


def test_history_for_unknown_user_is_empty(ledger):
    assert ledger.history("nobody") == []


@pytest.mark.parametrize("user_id,limit", [("", 10), ("u1", 0), ("u1", 101)])
def test_history_rejects_bad_parameters(ledger, user_id, limit):
    with pytest.raises(ValidationError):
        ledger.history(user_id, limit=limit)


def test_anonymous_queries_are_recorded(ledger):
    record_id = _record(ledger, "你好", user_id=None, sources=0)
    assert record_id > 0
    assert ledger.analytics().total_queries == 1


def test_analytics(ledger):
    _record(ledger, "你好", sources=2, ms=100)
    _record(ledger, "你好", sources=0, ms=300)
    _record(ledger, "谢谢", sources=1, ms=200)

    a = ledger.analytics(top_n=1)
    assert a.total_queries == 3
    assert a.avg_processing_time_ms == pytest.approx(200.0)
    assert a.avg_sources_used == pytest.approx(1.0)
    assert a.popular_queries == [{"query": "你好", "count": 2}]


def test_analytics_on_empty_ledger(ledger):
    a = ledger.analytics()
    assert (a.total_queries, a.avg_processing_time_ms, a.avg_sources_used, a.popular_queries) == (0, 0.0, 0.0, [])

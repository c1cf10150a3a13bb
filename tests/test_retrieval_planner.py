# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-13
# Description: test_retrieval_planner.py
# -----------------------------------------------------------------------------
import pytest

from content.HSKContent import ALL_SOURCE_TYPES, SourceType
from errors.HSKErrors import ValidationError
from planner.RetrievalPlanner import RetrievalPlanner, plan


@pytest.mark.parametrize("query_type,level,expected", [
    ("word", None, (0.7, 3)),
    ("word", 5, (0.7, 3)),
    ("word", 1, (0.6, 5)),
    ("grammar", 2, (0.5, 9)),
    ("grammar", 3, (0.6, 7)),
    ("lesson", 1, (0.4, 12)),
    ("general", 2, (0.5, 7)),
    ("general", 9, (0.6, 5)),
])
def test_baselines_and_beginner_adjustment(query_type, level, expected):
    p = plan(query_type, level)
    assert (p.min_similarity, p.max_results) == expected


def test_threshold_never_drops_below_floor():
    for query_type in ("word", "grammar", "lesson", "general"):
        for level in (1, 2):
            p = plan(query_type, level)
            assert p.min_similarity >= 0.4
            assert p.max_results <= 20


def test_source_type_filters():
    assert plan("word").source_types == (SourceType.WORD,)
    assert plan("grammar").source_types == (SourceType.GRAMMAR,)
    assert plan("lesson").source_types == (SourceType.CONTENT, SourceType.QUESTION)
    assert plan("general").source_types == ALL_SOURCE_TYPES


def test_query_type_is_case_insensitive():
    assert RetrievalPlanner().plan(" Word ", 1).max_results == 5


@pytest.mark.parametrize("bad", ["phrase", "", None])
def test_unknown_query_type_rejected(bad):
    with pytest.raises(ValidationError):
        plan(bad, 1)

# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-07
# Description: RetrievalPlanner
# -----------------------------------------------------------------------------
"""
Adaptive retrieval parameters.

Each query type has a baseline (min_similarity, max_results). Beginners
(proficiency <= 2) get a more lenient threshold and a few more sources.
"""
from dataclasses import dataclass
from typing import Dict, Optional, Tuple

from content.HSKContent import ALL_SOURCE_TYPES, SourceType
from errors.HSKErrors import ValidationError

QUERY_TYPES = ("general", "word", "grammar", "lesson")

BASELINES: Dict[str, Tuple[float, int]] = {
    "word": (0.7, 3),
    "grammar": (0.6, 7),
    "lesson": (0.5, 10),
    "general": (0.6, 5),
}

SOURCE_TYPE_FILTERS: Dict[str, Tuple[SourceType, ...]] = {
    "word": (SourceType.WORD,),
    "grammar": (SourceType.GRAMMAR,),
    "lesson": (SourceType.CONTENT, SourceType.QUESTION),
    "general": ALL_SOURCE_TYPES,
}

BEGINNER_MAX_LEVEL = 2
BEGINNER_THRESHOLD_DROP = 0.1
BEGINNER_THRESHOLD_FLOOR = 0.4
BEGINNER_EXTRA_RESULTS = 2
MAX_RESULTS_CAP = 20


@dataclass(frozen=True)
class RetrievalPlan:
    min_similarity: float
    max_results: int
    source_types: Tuple[SourceType, ...]


def plan(query_type: str, proficiency_level: Optional[int] = None) -> RetrievalPlan:
    key = (query_type or "").strip().lower()
    if key not in BASELINES:
        raise ValidationError(f"query_type must be one of {QUERY_TYPES}, got {query_type!r}")

    min_similarity, max_results = BASELINES[key]
    if proficiency_level is not None and proficiency_level <= BEGINNER_MAX_LEVEL:
        min_similarity = max(min_similarity - BEGINNER_THRESHOLD_DROP, BEGINNER_THRESHOLD_FLOOR)
        max_results = min(max_results + BEGINNER_EXTRA_RESULTS, MAX_RESULTS_CAP)

    return RetrievalPlan(
        min_similarity=round(min_similarity, 2),
        max_results=max_results,
        source_types=SOURCE_TYPE_FILTERS[key],
    )


class RetrievalPlanner:
    """Thin object wrapper so the planner can be injected like the other services."""

    def plan(self, query_type: str, proficiency_level: Optional[int] = None) -> RetrievalPlan:
        return plan(query_type, proficiency_level)

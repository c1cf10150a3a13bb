# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-03
# Description: types.py
# -----------------------------------------------------------------------------
from typing import Any, Dict, List, Optional, TypedDict


class WordSenseTranslationDict(TypedDict, total=False):
    language: str
    translation: str
    additional_detail: Optional[str]


class WordSenseDict(TypedDict, total=False):
    id: int
    sense_number: int
    pinyin: str
    part_of_speech: Optional[str]
    hsk_level: Optional[int]
    is_primary: bool
    translations: List[WordSenseTranslationDict]


class WordDict(TypedDict, total=False):
    id: int
    simplified: str
    traditional: Optional[str]
    senses: List[WordSenseDict]


class GrammarTranslationDict(TypedDict, total=False):
    language: str
    explanation: str


class GrammarPatternDict(TypedDict, total=False):
    id: int
    pattern: List[str]
    pattern_pinyin: Optional[List[str]]
    pattern_formula: Optional[str]
    hsk_level: Optional[int]
    difficulty_level: Optional[int]
    translations: List[GrammarTranslationDict]


class LessonRefDict(TypedDict, total=False):
    id: int
    name: str
    hsk_level: Optional[int]


class ContentBlockDict(TypedDict, total=False):
    id: int
    lesson_id: int
    order_index: int
    type: Optional[str]
    data: Dict[str, Any]
    is_active: bool
    lesson: Optional[LessonRefDict]


class QuestionDict(TypedDict, total=False):
    id: int
    lesson_id: int
    order_index: int
    question_type: str
    data: Dict[str, Any]
    is_active: bool
    lesson: Optional[LessonRefDict]


class EmbeddingStatsDict(TypedDict):
    total_embeddings: int
    active_embeddings: int
    by_source_type: Dict[str, int]
    vector_backend: str
    embedding_backend: str
    embedding_dim: int
    last_reindex_state: str
    last_reindex_finished_at: Optional[str]

# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-04
# Description: HSKContentNormalizer
# -----------------------------------------------------------------------------
import time
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional

from content.HSKContent import ExtractedContent, SourceType
from extractor.ContentBlockExtractors import as_text, extract_block_text
from extractor.QuestionExtractors import QuestionTypeTag, extract_question_body, has_audio, has_image
from loader.types import ContentBlockDict, GrammarPatternDict, QuestionDict, WordDict
from utility.logging_utils import get_class_logger


def _dicts(value: Any) -> List[Mapping[str, Any]]:
    if not isinstance(value, list):
        return []
    return [v for v in value if isinstance(v, Mapping)]


def _join_segments(value: Any, sep: str) -> str:
    if isinstance(value, list):
        return sep.join(as_text(v) for v in value if as_text(v))
    return as_text(value)


def _source_id(record: Mapping[str, Any]) -> int:
    try:
        return int(record.get("id"))
    except (TypeError, ValueError):
        return 0


def _hsk_level(value: Any) -> Optional[int]:
    """Exports carry levels as ints or numeric strings; anything else is no level."""
    if isinstance(value, bool):
        return None
    try:
        return int(str(value).strip())
    except (TypeError, ValueError):
        return None


def _lesson_metadata(record: Mapping[str, Any]) -> Dict[str, Any]:
    lesson = record.get("lesson") if isinstance(record.get("lesson"), Mapping) else {}
    meta: Dict[str, Any] = {
        "lessonId": record.get("lesson_id", lesson.get("id")),
        "lessonTitle": as_text(lesson.get("name")) or None,
        "orderIndex": record.get("order_index"),
    }
    level = _hsk_level(lesson.get("hsk_level"))
    if level is not None:
        meta["hskLevel"] = level
    return meta


def _word_hsk_level(senses: List[Mapping[str, Any]]) -> Optional[int]:
    for sense in senses:
        level = _hsk_level(sense.get("hsk_level"))
        if sense.get("is_primary") and level is not None:
            return level
    levels = [lv for lv in (_hsk_level(s.get("hsk_level")) for s in senses) if lv is not None]
    return min(levels) if levels else None


# -----------------------------------------------------------------------------
# Per-record normalizers
# -----------------------------------------------------------------------------
def normalize_word(word: WordDict) -> ExtractedContent:
    """
    Word: 你好 (妳好). Meanings: interjection Translations: hello (en), hi (en) | ...
    """
    simplified = as_text(word.get("simplified"))
    traditional = as_text(word.get("traditional"))
    senses = _dicts(word.get("senses"))

    sense_texts = []
    for sense in senses:
        translations = ", ".join(
            f"{as_text(t.get('translation'))} ({as_text(t.get('language'))})"
            for t in _dicts(sense.get("translations"))
            if as_text(t.get("translation"))
        )
        sense_text = f"{as_text(sense.get('part_of_speech'))} Translations: {translations}".strip()
        sense_texts.append(sense_text)

    text = ""
    if simplified:
        head = simplified if not traditional or traditional == simplified else f"{simplified} ({traditional})"
        text = f"Word: {head}."
        if sense_texts:
            text += f" Meanings: {' | '.join(sense_texts)}"

    metadata = {
        "simplified": simplified,
        "traditional": traditional or None,
        "pinyin": [as_text(s.get("pinyin")) for s in senses if as_text(s.get("pinyin"))],
        "sensesCount": len(senses),
        "hskLevel": _word_hsk_level(senses),
    }
    return ExtractedContent(SourceType.WORD, _source_id(word), text.strip(), metadata)


def normalize_grammar(pattern: GrammarPatternDict) -> ExtractedContent:
    display = _join_segments(pattern.get("pattern"), "")
    pinyin = _join_segments(pattern.get("pattern_pinyin"), " ")
    formula = as_text(pattern.get("pattern_formula"))
    translations = _dicts(pattern.get("translations"))

    text = ""
    if display:
        text = f"Pattern: {display}"
        if pinyin:
            text += f" ({pinyin})"
        if formula:
            text += f" Formula: {formula}"
        text += "."
        explanations = " | ".join(
            f"{as_text(t.get('explanation'))} ({as_text(t.get('language'))})"
            for t in translations
            if as_text(t.get("explanation"))
        )
        if explanations:
            text += f" Explanations: {explanations}"

    metadata: Dict[str, Any] = {
        "pattern": display,
        "patternPinyin": pinyin or None,
        "patternFormula": formula or None,
        "hskLevel": _hsk_level(pattern.get("hsk_level")),
        "translationsCount": len(translations),
    }
    if pattern.get("difficulty_level") is not None:
        metadata["difficultyLevel"] = pattern.get("difficulty_level")
    return ExtractedContent(SourceType.GRAMMAR, _source_id(pattern), text.strip(), metadata)


def normalize_content(block: ContentBlockDict) -> ExtractedContent:
    content_type = block.get("type")
    text = extract_block_text(content_type, block.get("data"))
    metadata = _lesson_metadata(block)
    metadata["contentType"] = content_type
    return ExtractedContent(SourceType.CONTENT, _source_id(block), text, metadata)


def normalize_question(question: QuestionDict) -> ExtractedContent:
    raw_type = question.get("question_type")
    tag = QuestionTypeTag.parse(raw_type)
    data = question.get("data") if isinstance(question.get("data"), Mapping) else {}

    body = extract_question_body(data)
    text = f"{tag.label}{body}".strip() if body else ""

    metadata = _lesson_metadata(question)
    metadata.update({
        "questionType": raw_type,
        "action": tag.action,
        "inputType": tag.input_type,
        "outputType": tag.output_type,
        "hasAudio": has_audio(tag, data),
        "hasImage": has_image(tag, data),
    })
    return ExtractedContent(SourceType.QUESTION, _source_id(question), text, metadata)


class HSKContentNormalizer:
    """
    Turns upstream learning-content records into ExtractedContent items.

    Every entry point is total: records that yield no recognizable text come
    back with text == "" and are dropped by the reindex pipeline.
    """

    def __init__(self, logger=None):
        self.logger = logger or get_class_logger(self.__class__)

    def _run(self, name: str, fn: Callable[[Any], ExtractedContent], records: Iterable[Any]) -> List[ExtractedContent]:
        start = time.time()
        items = [fn(r) for r in records if isinstance(r, Mapping)]
        elapsed = (time.time() - start) * 1000.0
        empty = sum(1 for i in items if not i.text)
        self.logger.info(
            "Normalized %d %s records (%d without text, %.1f ms)", len(items), name, empty, elapsed
        )
        return items

    def extract_words(self, words: Iterable[WordDict]) -> List[ExtractedContent]:
        return self._run("word", normalize_word, words)

    def extract_grammar(self, patterns: Iterable[GrammarPatternDict]) -> List[ExtractedContent]:
        return self._run("grammar", normalize_grammar, patterns)

    def extract_contents(self, blocks: Iterable[ContentBlockDict]) -> List[ExtractedContent]:
        return self._run("content", normalize_content, blocks)

    def extract_questions(self, questions: Iterable[QuestionDict]) -> List[ExtractedContent]:
        return self._run("question", normalize_question, questions)

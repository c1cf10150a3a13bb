# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-04
# Description: ContentBlockExtractors
# -----------------------------------------------------------------------------
"""
Text extraction for lesson content blocks.

Each block carries a content-type tag and a free-form JSON `data` payload.
The tag selects a tuple of section extractors from CONTENT_EXTRACTORS; every
section looks for one known key and renders a labeled sentence, or "" when
the key is absent. Unknown tags map to NO_TEXT so they never reach the
embedding batch.
"""
from typing import Any, Callable, Dict, Mapping, Optional, Tuple

SectionExtractor = Callable[[Mapping[str, Any]], str]


def as_text(value: Any) -> str:
    """Scalar -> stripped string; containers and None -> ''."""
    if value is None or isinstance(value, (dict, list, tuple, set)):
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value).strip()


def first_text(data: Mapping[str, Any], *keys: str) -> str:
    for key in keys:
        text = as_text(data.get(key))
        if text:
            return text
    return ""


def _dict_items(value: Any) -> list:
    if not isinstance(value, list):
        return []
    return [v for v in value if isinstance(v, dict)]


# -----------------------------------------------------------------------------
# Sections
# -----------------------------------------------------------------------------
def section_title(data: Mapping[str, Any]) -> str:
    title = as_text(data.get("title"))
    return f"Title: {title}. " if title else ""


def section_text(data: Mapping[str, Any]) -> str:
    parts = [as_text(data.get("text")), as_text(data.get("content"))]
    return "".join(f"{p} " for p in parts if p)


def section_explanation(data: Mapping[str, Any]) -> str:
    explanation = as_text(data.get("explanation"))
    return f"Explanation: {explanation}. " if explanation else ""


def section_description(data: Mapping[str, Any]) -> str:
    description = as_text(data.get("description"))
    return f"Description: {description}. " if description else ""


def section_dialog(data: Mapping[str, Any]) -> str:
    lines = _dict_items(data.get("dialog"))
    if not lines:
        return ""
    rendered = [
        f"{as_text(line.get('speaker'))}: {first_text(line, 'text', 'content')}"
        for line in lines
    ]
    return f"Dialog: {' '.join(rendered)}. "


def section_vocabulary(data: Mapping[str, Any]) -> str:
    items = _dict_items(data.get("vocabulary"))
    if not items:
        return ""
    rendered = [
        f"{first_text(item, 'word', 'chinese')} {first_text(item, 'meaning', 'english')}".strip()
        for item in items
    ]
    rendered = [r for r in rendered if r]
    return f"Vocabulary: {', '.join(rendered)}. " if rendered else ""


def section_examples(data: Mapping[str, Any]) -> str:
    examples = _dict_items(data.get("examples"))
    rendered = []
    for ex in examples:
        body = f"{first_text(ex, 'chinese', 'text')} {first_text(ex, 'english', 'translation')}".strip()
        if body:
            rendered.append(f"Example: {body}")
    return " ".join(rendered) + " " if rendered else ""


def section_sentences(data: Mapping[str, Any]) -> str:
    sentences = _dict_items(data.get("sentences"))
    rendered = []
    for s in sentences:
        chinese = first_text(s, "chinese", "text")
        english = first_text(s, "english", "translation")
        if chinese and english:
            rendered.append(f"{chinese} ({english})")
        elif chinese or english:
            rendered.append(chinese or english)
    return f"Sentences: {' '.join(rendered)}. " if rendered else ""


def section_word_definition(data: Mapping[str, Any]) -> str:
    word = first_text(data, "word", "chinese")
    if not word:
        return ""
    pinyin = as_text(data.get("pinyin"))
    english = first_text(data, "english", "meaning")
    head = f"Word: {word}"
    if pinyin:
        head += f" ({pinyin})"
    if english:
        head += f" - {english}"
    text = f"{head}. "
    definition = as_text(data.get("definition"))
    if definition:
        text += f"Definition: {definition}. "
    return text


# -----------------------------------------------------------------------------
# Registry
# -----------------------------------------------------------------------------
GENERIC_SECTIONS: Tuple[SectionExtractor, ...] = (
    section_title,
    section_text,
    section_explanation,
    section_description,
    section_dialog,
    section_vocabulary,
    section_examples,
)

NO_TEXT: Tuple[SectionExtractor, ...] = ()

CONTENT_EXTRACTORS: Dict[str, Tuple[SectionExtractor, ...]] = {
    "word_definition": (section_word_definition,) + GENERIC_SECTIONS,
    "sentences": (section_title, section_sentences, section_text, section_explanation, section_examples),
    "dialog": GENERIC_SECTIONS,
    "text": GENERIC_SECTIONS,
    "vocabulary": GENERIC_SECTIONS,
    "examples": GENERIC_SECTIONS,
    "explanation": GENERIC_SECTIONS,
}


def sections_for(content_type: Optional[str]) -> Tuple[SectionExtractor, ...]:
    """Missing tag -> generic sections; unknown tag -> NO_TEXT."""
    tag = (content_type or "").strip().lower()
    if not tag:
        return GENERIC_SECTIONS
    return CONTENT_EXTRACTORS.get(tag, NO_TEXT)


def extract_block_text(content_type: Optional[str], data: Any) -> str:
    if not isinstance(data, Mapping):
        return ""
    return "".join(section(data) for section in sections_for(content_type)).strip()

# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-04
# Description: QuestionExtractors
# -----------------------------------------------------------------------------
"""
Exercise question decoding and text extraction.

Question type tags look like `question_selection_audio_text`: an optional
`question_` prefix, then ACTION_INPUT_OUTPUT. The decoded tag labels the
extracted text and feeds the media flags. The payload is walked through the
ordered QUESTION_SHAPES; each shape renders one labeled sentence when its
keys are present.
"""
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple

from extractor.ContentBlockExtractors import as_text, first_text

ACTION_LABELS: Dict[str, str] = {
    "SELECTION": "Multiple choice",
    "MATCHING": "Matching",
    "FILL": "Fill in the blank",
    "BOOL": "True or false",
    "UNKNOWN": "General",
}

AUDIO_KEYS = ("audio", "audio_url", "audioUrl")
IMAGE_KEYS = ("image", "image_url", "imageUrl")


@dataclass(frozen=True)
class QuestionTypeTag:
    action: str
    input_type: str
    output_type: str

    @classmethod
    def parse(cls, tag: Optional[str]) -> "QuestionTypeTag":
        raw = tag.strip() if isinstance(tag, str) else ""
        if raw.lower().startswith("question_"):
            raw = raw[len("question_"):]
        parts = [p for p in raw.split("_") if p]
        if len(parts) < 3:
            return UNKNOWN_TAG
        return cls(parts[0].upper(), parts[1].upper(), parts[2].upper())

    @property
    def label(self) -> str:
        action = ACTION_LABELS.get(self.action, self.action.capitalize())
        return f"{action} exercise ({self.input_type.lower()} to {self.output_type.lower()}). "

    def involves(self, media: str) -> bool:
        return media in (self.input_type, self.output_type)


UNKNOWN_TAG = QuestionTypeTag("UNKNOWN", "TEXT", "TEXT")


def _has_media(data: Mapping[str, Any], keys: Tuple[str, ...]) -> bool:
    if first_text(data, *keys):
        return True
    options = data.get("options")
    if isinstance(options, list):
        return any(isinstance(o, dict) and first_text(o, *keys) for o in options)
    return False


def has_audio(tag: QuestionTypeTag, data: Mapping[str, Any]) -> bool:
    return tag.involves("AUDIO") or _has_media(data, AUDIO_KEYS)


def has_image(tag: QuestionTypeTag, data: Mapping[str, Any]) -> bool:
    return tag.involves("IMAGE") or _has_media(data, IMAGE_KEYS)


def _render_value(value: Any) -> str:
    if isinstance(value, list):
        return ", ".join(t for t in (_render_value(v) for v in value) if t)
    if isinstance(value, dict):
        return first_text(value, "text", "chinese", "word", "alt", "label", "id")
    return as_text(value)


def _option_text(option: Any) -> str:
    if isinstance(option, dict):
        return first_text(option, "text", "chinese", "word", "alt", "label", "image")
    return as_text(option)


# -----------------------------------------------------------------------------
# Shapes
# -----------------------------------------------------------------------------
def shape_prompt(data: Mapping[str, Any]) -> str:
    out = ""
    for key, label in (("question", "Question"), ("prompt", "Prompt"), ("instruction", "Instruction")):
        text = as_text(data.get(key))
        if text:
            out += f"{label}: {text}. "
    return out


def shape_media(data: Mapping[str, Any]) -> str:
    out = ""
    audio = first_text(data, *AUDIO_KEYS)
    if audio:
        out += f"Audio: {audio}. "
    transcript = as_text(data.get("transcript"))
    if transcript:
        out += f"Transcript: {transcript}. "
    image = first_text(data, *IMAGE_KEYS)
    if image:
        out += f"Image: {image}. "
    return out


def shape_options(data: Mapping[str, Any]) -> str:
    options = data.get("options")
    if not isinstance(options, list) or not options:
        return ""
    rendered = [f"{chr(65 + i)}) {_option_text(o)}" for i, o in enumerate(options[:26])]
    return f"Options: {' '.join(rendered)}. "


def shape_fill_blank(data: Mapping[str, Any]) -> str:
    out = ""
    sentence = as_text(data.get("sentence"))
    if sentence:
        out += f"Sentence: {sentence}. "
    for key, label in (("segments", "Segments"), ("blanks", "Blanks"), ("answers", "Blank answers")):
        value = data.get(key)
        if isinstance(value, list) and value:
            text = " | ".join(t for t in (_render_value(v) for v in value) if t)
            if text:
                out += f"{label}: {text}. "
    return out


def _column_lookup(column: Any) -> Dict[str, str]:
    lookup: Dict[str, str] = {}
    if not isinstance(column, list):
        return lookup
    for i, item in enumerate(column):
        if isinstance(item, dict):
            key = as_text(item.get("id")) or str(i)
            lookup[key] = _option_text(item)
        else:
            lookup[str(i)] = as_text(item)
    return lookup


def shape_matching(data: Mapping[str, Any]) -> str:
    pairs: List[Tuple[str, str]] = []

    explicit = data.get("pairs")
    if isinstance(explicit, list):
        for p in explicit:
            if isinstance(p, dict):
                pairs.append((first_text(p, "left", "chinese", "word"), first_text(p, "right", "english", "meaning")))

    matches = data.get("correctMatches")
    if not pairs and isinstance(matches, list):
        left = _column_lookup(data.get("leftColumn"))
        right = _column_lookup(data.get("rightColumn"))
        for m in matches:
            if isinstance(m, dict):
                lkey, rkey = as_text(m.get("left")), as_text(m.get("right"))
                pairs.append((left.get(lkey, lkey), right.get(rkey, rkey)))

    rendered = [f"{l} = {r}" for l, r in pairs if l or r]
    return f"Matching pairs: {', '.join(rendered)}. " if rendered else ""


def shape_answer(data: Mapping[str, Any]) -> str:
    for key in ("correctAnswer", "answer", "correctAnswers"):
        if key in data:
            text = _render_value(data.get(key))
            if text:
                return f"Answer: {text}. "
    return ""


def shape_explanation(data: Mapping[str, Any]) -> str:
    explanation = as_text(data.get("explanation"))
    return f"Explanation: {explanation}. " if explanation else ""


QUESTION_SHAPES: Tuple[Callable[[Mapping[str, Any]], str], ...] = (
    shape_prompt,
    shape_media,
    shape_options,
    shape_fill_blank,
    shape_matching,
    shape_answer,
    shape_explanation,
)


def extract_question_body(data: Any) -> str:
    if not isinstance(data, Mapping):
        return ""
    return "".join(shape(data) for shape in QUESTION_SHAPES).strip()

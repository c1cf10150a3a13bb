# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-08
# Description: MockGenerationClient
# -----------------------------------------------------------------------------
import settings
from chat.GenerationClient import GenerationRequest, GenerationResult


def templated_answer(request: GenerationRequest, snippet_chars: int = settings.FALLBACK_SNIPPET_CHARS) -> str:
    """Answer built from the top-ranked source alone, or a not-found message when there are none."""
    if not request.sources:
        return (
            f"I couldn't find specific information about \"{request.query}\" in the learning materials. "
            "This might be a topic not yet covered in the current HSK level content."
        )

    top = request.sources[0]
    return (
        f"Based on the {top.source_type.label} content, here's what I found related to \"{request.query}\": "
        f"{top.content_text[:snippet_chars]}... "
        f"This information has a similarity score of {top.similarity * 100:.1f}% with your question."
    )


class MockGenerationClient:
    """Offline generation strategy that returns the templated answer."""

    name = "mock"
    model = "mock"

    def generate(self, request: GenerationRequest) -> GenerationResult:
        return GenerationResult(text=templated_answer(request), model=self.model)

    def health_check(self) -> bool:
        return True

# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-09
# Description: HSKQueryService.py
# -----------------------------------------------------------------------------
import logging
import time
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

import settings
from chat.GenerationClient import GenerationClient, GenerationRequest
from embedding.HSKEmbeddingGateway import HSKEmbeddingGateway
from errors.HSKErrors import GenerationFailed, ProviderUnavailable, ValidationError
from planner.RetrievalPlanner import QUERY_TYPES, RetrievalPlanner
from services.HSKContextLedger import HSKContextLedger
from utility.logging_utils import get_class_logger
from vectorstore.HSKVectorIndex import HSKVectorIndex, SearchOptions, SearchResult


@dataclass
class QueryRequest:
    query: str
    user_id: Optional[str] = None
    hsk_level: Optional[int] = None
    query_type: str = "general"
    current_content: Optional[str] = None
    max_sources: Optional[int] = None
    min_similarity: Optional[float] = None


@dataclass
class QueryAnswer:
    answer: str
    sources: List[SearchResult] = field(default_factory=list)
    confidence: float = 0.0
    processing_time_ms: int = 0
    record_id: Optional[int] = None
    is_fallback: bool = False
    model: Optional[str] = None


def compute_confidence(similarities: Sequence[float]) -> float:
    """
    Average source similarity plus up to 0.2 for having several sources,
    capped at 1.0. No sources -> fixed low floor.
    """
    if not similarities:
        return settings.CONFIDENCE_NO_SOURCES
    avg = sum(similarities) / len(similarities)
    bonus = min(len(similarities) / settings.CONFIDENCE_FULL_BONUS_SOURCES, 1.0) * settings.CONFIDENCE_SOURCE_BONUS
    return min(avg + bonus, 1.0)


def build_context(sources: Sequence[SearchResult], current_content: Optional[str] = None) -> str:
    lines = []
    for rank, s in enumerate(sources, start=1):
        hsk = (s.metadata or {}).get("hskLevel")
        hsk_tag = f" (HSK {hsk})" if hsk else ""
        lines.append(f"{rank}. [{s.source_type.label}{hsk_tag}] {s.content_text}")
    context = "\n\n".join(lines)

    extra = (current_content or "").strip()
    if extra:
        context = f"Current learning content:\n{extra}\n\n{context}" if context else f"Current learning content:\n{extra}"
    return context


def build_prompt(query: str, context: str, hsk_level: Optional[int] = None, language: str = "English") -> str:
    hsk_line = f"The user is studying Chinese at HSK level {hsk_level}. " if hsk_level else ""
    return (
        f"You are a helpful Chinese language learning assistant. {hsk_line}"
        f"Respond in {language}. "
        "Answer the user's question using the provided context. "
        "If the context doesn't contain enough information, say so clearly.\n\n"
        f"Context:\n{context}\n\n"
        f"User Question: {query}\n\n"
        "Instructions:\n"
        "- Provide accurate, helpful answers about Chinese language learning\n"
        "- Use simple, clear explanations appropriate for language learners\n"
        "- Include relevant examples when helpful\n"
        "- If uncertain, acknowledge limitations\n"
        "- Keep responses concise but informative\n\n"
        "Answer:"
    )


@dataclass
class HSKQueryService:
    """
    Query pipeline:
        - validates the request
        - embeds the query and plans retrieval from type + proficiency
        - searches the vector index
        - builds the context block and prompt, calls the generation client
        - scores confidence and records the exchange in the ledger
    """
    gateway: HSKEmbeddingGateway
    index: HSKVectorIndex
    generator: GenerationClient
    ledger: HSKContextLedger
    planner: RetrievalPlanner = field(default_factory=RetrievalPlanner)
    language: str = settings.GENERATION_DEFAULTS["language"]
    logger: logging.Logger | None = None

    def __post_init__(self) -> None:
        self.logger = self.logger or get_class_logger(self.__class__)
        self.logger.info(
            "HSKQueryService initialised (gateway=%s generator=%s index=%s)",
            self.gateway.backend_name,
            self.generator.name,
            type(self.index).__name__,
        )

    @staticmethod
    def validate(request: QueryRequest) -> None:
        if not request.query or not request.query.strip():
            raise ValidationError("query must not be empty")
        if (request.query_type or "").strip().lower() not in QUERY_TYPES:
            raise ValidationError(f"query_type must be one of {QUERY_TYPES}, got {request.query_type!r}")
        if request.hsk_level is not None and not settings.HSK_LEVEL_MIN <= request.hsk_level <= settings.HSK_LEVEL_MAX:
            raise ValidationError(
                f"hsk_level must be between {settings.HSK_LEVEL_MIN} and {settings.HSK_LEVEL_MAX}, got {request.hsk_level}"
            )
        if request.max_sources is not None and not 1 <= request.max_sources <= 20:
            raise ValidationError(f"max_sources must be between 1 and 20, got {request.max_sources}")
        if request.min_similarity is not None and not 0.0 <= request.min_similarity <= 1.0:
            raise ValidationError(f"min_similarity must be between 0 and 1, got {request.min_similarity}")

    def ask(self, request: QueryRequest) -> QueryAnswer:
        self.validate(request)
        start = time.time()
        q = request.query.strip()

        self.logger.info(
            "ask: query='%s' type=%s hsk=%s user=%s (start)",
            q[:120], request.query_type, request.hsk_level, request.user_id or "anonymous",
        )

        query_vector = self.gateway.embed(q)

        plan = self.planner.plan(request.query_type, request.hsk_level)
        options = SearchOptions(
            source_types=plan.source_types,
            min_similarity=plan.min_similarity if request.min_similarity is None else request.min_similarity,
            limit=plan.max_results if request.max_sources is None else request.max_sources,
            hsk_level=request.hsk_level,
            include_metadata=True,
        )
        sources = self.index.search(query_vector, options)
        self.logger.info(
            "ask: retrieved %d sources (min_similarity=%.2f limit=%d)",
            len(sources), options.min_similarity, options.limit,
        )

        context = build_context(sources, request.current_content)
        gen_request = GenerationRequest(
            prompt=build_prompt(q, context, request.hsk_level, self.language),
            context=context,
            query=q,
            sources=list(sources),
            hsk_level=request.hsk_level,
        )

        try:
            result = self.generator.generate(gen_request)
        except GenerationFailed:
            raise
        except ProviderUnavailable as e:
            raise GenerationFailed(str(e)) from e

        if result.is_fallback:
            confidence = settings.CONFIDENCE_FALLBACK
        else:
            confidence = compute_confidence([s.similarity for s in sources])

        elapsed_ms = int((time.time() - start) * 1000)
        record_id = self.ledger.record(
            query=q,
            response=result.text,
            sources=[s.to_source() for s in sources],
            processing_time_ms=elapsed_ms,
            user_id=request.user_id,
            confidence=confidence,
        )

        self.logger.info(
            "ask: answer_chars=%d confidence=%.3f fallback=%s %d ms (done)",
            len(result.text), confidence, result.is_fallback, elapsed_ms,
        )
        return QueryAnswer(
            answer=result.text,
            sources=list(sources),
            confidence=confidence,
            processing_time_ms=elapsed_ms,
            record_id=record_id,
            is_fallback=result.is_fallback,
            model=result.model,
        )

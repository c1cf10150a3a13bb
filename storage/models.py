# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-06
# Description: models.py
# -----------------------------------------------------------------------------
"""
SQLAlchemy models for embedding storage and the query ledger.
"""
from datetime import datetime, timezone

import numpy as np
from sqlalchemy import JSON, Boolean, Column, DateTime, Float, Index, Integer, String, Text
from sqlalchemy.orm import declarative_base

from content.HSKContent import SourceType
from embedding.EmbeddingRecord import EmbeddingRecord

Base = declarative_base()


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class EmbeddingRow(Base):
    """
    One embedded learning item.

    source_type: "word", "grammar", "content", "question"
    source_id: id of the record in its owning content store
    vector: JSON float array; length fixed by the embedding provider
    generation_id: reindex run that wrote the row; only one generation is active
    """
    __tablename__ = "embeddings"

    id = Column(Integer, primary_key=True, index=True)
    source_type = Column(String(20), nullable=False)
    source_id = Column(Integer, nullable=False)
    content_text = Column(Text, nullable=False)
    vector = Column(JSON, nullable=False)
    meta = Column("metadata", JSON, nullable=False, default=dict)
    is_active = Column(Boolean, nullable=False, default=False)
    generation_id = Column(String(36), nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), default=_utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=_utcnow, onupdate=_utcnow, nullable=False)

    __table_args__ = (
        Index("ix_embeddings_active_source", "is_active", "source_type", "source_id"),
    )

    def to_record(self) -> EmbeddingRecord:
        return EmbeddingRecord(
            id=self.id,
            source_type=SourceType(self.source_type),
            source_id=self.source_id,
            content_text=self.content_text,
            vector=np.asarray(self.vector, dtype=np.float32),
            metadata=dict(self.meta or {}),
            is_active=self.is_active,
            generation_id=self.generation_id,
            created_at=self.created_at,
            updated_at=self.updated_at,
        )


class QueryContextRow(Base):
    """One answered query: the answer, the sources it was grounded on, and timing."""
    __tablename__ = "rag_contexts"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(String(64), nullable=True, index=True)
    query = Column(Text, nullable=False)
    response = Column(Text, nullable=False)
    retrieved_sources = Column(JSON, nullable=False, default=list)
    source_count = Column(Integer, nullable=False, default=0)
    confidence = Column(Float, nullable=True)
    processing_time_ms = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), default=_utcnow, nullable=False, index=True)

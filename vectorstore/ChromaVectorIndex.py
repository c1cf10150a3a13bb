# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-07
# Description: ChromaVectorIndex
# -----------------------------------------------------------------------------
import json
import uuid
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence, Tuple

import chromadb
import numpy as np
from chromadb import ClientAPI
from chromadb.api.models import Collection

from content.HSKContent import ExtractedContent, SourceType
from errors.HSKErrors import DimensionMismatch
from utility.logging_utils import get_class_logger
from vectorstore.HSKVectorIndex import EmbeddingStats, SearchOptions, SearchResult, rank_candidates


@dataclass
class ChromaVectorIndex:
    """
    Approximate nearest-neighbour backend on chromadb.

    Each reindex generation is its own collection (`{base}_{generation_id}`)
    in cosine space; a small registry collection records which generation is
    live in its metadata. Similarity is 1 - cosine distance.
    """

    client: ClientAPI
    dim: int
    collection_name: str = "hsk_embeddings"
    logger: Any = None

    def __post_init__(self) -> None:
        self.logger = self.logger or get_class_logger(self.__class__)
        self.registry_name = f"{self.collection_name}_registry"
        self.client.get_or_create_collection(name=self.registry_name, embedding_function=None)
        self.logger.info(
            "Chroma index ready (collection=%s, active_generation=%s)",
            self.collection_name,
            self._active_generation(),
        )

    @classmethod
    def persistent(cls, path: str, dim: int, collection_name: str = "hsk_embeddings", logger=None) -> "ChromaVectorIndex":
        return cls(chromadb.PersistentClient(path=path), dim, collection_name, logger)

    # ---------------------------------------------------------------------
    # Generations
    # ---------------------------------------------------------------------
    def _generation_name(self, generation_id: str) -> str:
        return f"{self.collection_name}_{generation_id}"

    def _registry(self) -> Collection:
        return self.client.get_collection(name=self.registry_name)

    def _active_generation(self) -> Optional[str]:
        return (self._registry().metadata or {}).get("active_generation")

    def _generation(self, generation_id: str) -> Collection:
        return self.client.get_or_create_collection(
            name=self._generation_name(generation_id),
            metadata={"hnsw:space": "cosine"},
            embedding_function=None,
        )

    def _active_collection(self) -> Optional[Collection]:
        generation_id = self._active_generation()
        if not generation_id:
            return None
        name = self._generation_name(generation_id)
        try:
            return self.client.get_collection(name=name)
        except Exception as e:
            self.logger.warning("Active generation %s has no collection '%s': %s", generation_id, name, e)
            return None

    def _drop(self, generation_id: str) -> int:
        name = self._generation_name(generation_id)
        try:
            count = self.client.get_collection(name=name).count()
        except Exception as e:
            self.logger.debug("Generation collection '%s' not found: %s", name, e)
            return 0
        self.client.delete_collection(name=name)
        return count

    def begin_generation(self) -> str:
        generation_id = uuid.uuid4().hex
        self._generation(generation_id)
        self.logger.info("Started Chroma generation %s", generation_id)
        return generation_id

    def add_records(
            self,
            generation_id: str,
            items: Sequence[ExtractedContent],
            vectors: Sequence[np.ndarray],
    ) -> int:
        if len(items) != len(vectors):
            raise ValueError(f"items ({len(items)}) and vectors ({len(vectors)}) length mismatch")
        if not items:
            return 0

        collection = self._generation(generation_id)
        offset = collection.count()

        ids: List[str] = []
        documents: List[str] = []
        embeddings: List[List[float]] = []
        metadatas: List[Dict[str, Any]] = []

        for i, (item, vec) in enumerate(zip(items, vectors), start=1):
            arr = np.asarray(vec, dtype=np.float32).ravel()
            if arr.shape[0] != self.dim:
                raise DimensionMismatch(self.dim, arr.shape[0], item.key)

            record_id = offset + i
            meta: Dict[str, Any] = {
                "record_id": record_id,
                "source_type": item.source_type.value,
                "source_id": item.source_id,
                "metadata_json": json.dumps(item.metadata or {}, ensure_ascii=False, default=str),
            }
            # Chroma metadata must be scalar and non-null
            if isinstance((item.metadata or {}).get("hskLevel"), int):
                meta["hskLevel"] = item.metadata["hskLevel"]

            ids.append(str(record_id))
            documents.append(item.text)
            embeddings.append(arr.tolist())
            metadatas.append(meta)

        collection.add(ids=ids, documents=documents, embeddings=embeddings, metadatas=metadatas)
        self.logger.debug("Added %d records to generation %s", len(ids), generation_id)
        return len(ids)

    def activate_generation(self, generation_id: str) -> int:
        previous = self._active_generation()
        self._registry().modify(metadata={"active_generation": generation_id})
        removed = self._drop(previous) if previous and previous != generation_id else 0
        self.logger.info("Activated Chroma generation %s; removed %d previous records", generation_id, removed)
        return removed

    def discard_generation(self, generation_id: str) -> int:
        if generation_id == self._active_generation():
            raise ValueError(f"Refusing to discard the active generation {generation_id}")
        removed = self._drop(generation_id)
        self.logger.warning("Discarded Chroma generation %s (%d records)", generation_id, removed)
        return removed

    # ---------------------------------------------------------------------
    # Read side
    # ---------------------------------------------------------------------
    def test_connection(self) -> bool:
        try:
            self.client.heartbeat()
            return True
        except Exception as e:
            self.logger.error("Chroma connection failed: %s", e)
            return False

    @staticmethod
    def _where(options: SearchOptions) -> Optional[Dict[str, Any]]:
        clauses: List[Dict[str, Any]] = []
        if options.source_types:
            clauses.append({"source_type": {"$in": [SourceType(t).value for t in options.source_types]}})
        if options.hsk_level is not None:
            clauses.append({"hskLevel": {"$eq": options.hsk_level}})
        if not clauses:
            return None
        return clauses[0] if len(clauses) == 1 else {"$and": clauses}

    def _fetch(
            self,
            collection: Collection,
            query_kwargs: Dict[str, Any],
            n_results: int,
            options: SearchOptions,
            exclude_record: Optional[int],
    ) -> Tuple[int, List[SearchResult]]:
        res = collection.query(n_results=n_results, **query_kwargs)
        metadatas = (res.get("metadatas") or [[]])[0]
        documents = (res.get("documents") or [[]])[0]
        distances = (res.get("distances") or [[]])[0]

        candidates = []
        for meta, doc, dist in zip(metadatas, documents, distances):
            record_id = int(meta["record_id"])
            if record_id == exclude_record:
                continue
            candidates.append(SearchResult(
                record_id=record_id,
                source_type=SourceType(meta["source_type"]),
                source_id=int(meta["source_id"]),
                content_text=doc or "",
                similarity=1.0 - float(dist),
                metadata=json.loads(meta.get("metadata_json") or "{}") if options.include_metadata else None,
            ))
        return len(metadatas), candidates

    @staticmethod
    def _cutoff_settled(candidates: List[SearchResult], options: SearchOptions) -> bool:
        """True when no unfetched record can tie the last kept similarity."""
        if len(candidates) <= options.limit:
            return False
        sims = sorted((c.similarity for c in candidates), reverse=True)
        cutoff = sims[options.limit - 1]
        return cutoff < options.min_similarity or cutoff > sims[-1]

    def _query(
            self,
            collection: Collection,
            query_vector: np.ndarray,
            options: SearchOptions,
            exclude_record: Optional[int] = None,
    ) -> List[SearchResult]:
        q = np.asarray(query_vector, dtype=np.float32).ravel()
        if q.shape[0] != self.dim:
            raise DimensionMismatch(self.dim, q.shape[0], "query vector")

        available = collection.count()
        if available == 0 or options.limit <= 0:
            return []

        query_kwargs: Dict[str, Any] = {
            "query_embeddings": [q.tolist()],
            "include": ["documents", "metadatas", "distances"],
        }
        where = self._where(options)
        if where is not None:
            query_kwargs["where"] = where

        # widen until the boundary similarity is strictly above the furthest
        # fetched one, or the matches run out; ties then break on record id
        n_results = min(options.limit + 1 + (1 if exclude_record is not None else 0), available)
        while True:
            fetched, candidates = self._fetch(collection, query_kwargs, n_results, options, exclude_record)
            if fetched < n_results or n_results >= available or self._cutoff_settled(candidates, options):
                break
            n_results = min(n_results * 2, available)
            self.logger.debug("Widening Chroma query to %d results to settle ties", n_results)

        return rank_candidates(candidates, options.min_similarity, options.limit)

    def search(self, query_vector: np.ndarray, options: SearchOptions) -> List[SearchResult]:
        collection = self._active_collection()
        if collection is None:
            return []
        results = self._query(collection, query_vector, options)
        self.logger.info("Chroma search returned %d results (limit=%d)", len(results), options.limit)
        return results

    def find_similar_to(self, source_type: SourceType, source_id: int, options: SearchOptions) -> List[SearchResult]:
        collection = self._active_collection()
        if collection is None:
            return []

        res = collection.get(
            where={"$and": [
                {"source_type": {"$eq": SourceType(source_type).value}},
                {"source_id": {"$eq": int(source_id)}},
            ]},
            include=["embeddings", "metadatas"],
        )
        embeddings = res.get("embeddings")
        if embeddings is None or len(embeddings) == 0:
            self.logger.info("No active embedding for %s:%s; nothing similar", SourceType(source_type).value, source_id)
            return []

        anchor_id = int(res["metadatas"][0]["record_id"])
        return self._query(collection, np.asarray(embeddings[0]), options, exclude_record=anchor_id)

    def stats(self) -> EmbeddingStats:
        by_type = {t.value: 0 for t in SourceType}
        collection = self._active_collection()
        if collection is not None:
            res = collection.get(include=["metadatas"])
            for meta in res.get("metadatas") or []:
                key = meta.get("source_type")
                by_type[key] = by_type.get(key, 0) + 1
        active = sum(by_type.values())
        return EmbeddingStats(total=active, active=active, by_source_type=by_type)

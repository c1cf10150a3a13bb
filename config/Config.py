# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-02
# Description: Config
# -----------------------------------------------------------------------------

import os
from dataclasses import dataclass, fields
from enum import Enum

from dotenv import load_dotenv, find_dotenv

# Load .env once globally
load_dotenv(find_dotenv(usecwd=True))


class Mode(str, Enum):
    """
    Runtime mode injected into the embedding gateway and generation client.

    PRODUCTION  - real providers only, failures propagate
    DEVELOPMENT - real providers with deterministic mock fallback
    TEST        - mock providers only, no network
    """
    PRODUCTION = "production"
    DEVELOPMENT = "development"
    TEST = "test"


EMBEDDING_PROVIDERS = ("http", "openai")
GENERATION_PROVIDERS = ("http", "openai")
VECTOR_BACKENDS = ("sql", "chroma")


@dataclass(frozen=True)
class Config:
    mode: Mode = Mode.DEVELOPMENT

    # Relational storage (embeddings + query ledger)
    database_url: str = "sqlite:///./data/hsk_rag.db"

    # Embedding provider
    embedding_provider: str = "http"
    embedding_service_url: str = "http://localhost:8000"
    embedding_model: str = "BAAI/bge-m3"
    embedding_dim: int = 1024

    # Generation provider
    generation_provider: str = "http"
    llm_service_url: str = "http://localhost:8001"
    llm_model: str = "qwen-2.5b-instruct"

    # OpenAI (optional provider for embeddings and/or generation)
    openai_api_key: str = ""
    openai_base_url: str = ""
    openai_embed_model: str = "text-embedding-3-small"
    openai_chat_model: str = "gpt-4o-mini"

    # Vector index backend
    vector_backend: str = "sql"
    chroma_path: str = "./data/chroma"
    chroma_collection: str = "hsk_embeddings"

    # Upstream content export used by the reindex pipeline
    content_source_path: str = "./data/content_export.json"

    # ---- Single source of truth: field_name -> ENV VAR NAME ----
    ENV_VARS = {
        "mode": "HSK_MODE",
        "database_url": "HSK_DATABASE_URL",

        # Embeddings
        "embedding_provider": "HSK_EMBEDDING_PROVIDER",   # http | openai
        "embedding_service_url": "EMBEDDING_SERVICE_URL",
        "embedding_model": "EMBEDDING_MODEL",
        "embedding_dim": "HSK_EMBEDDING_DIM",

        # Generation
        "generation_provider": "HSK_GENERATION_PROVIDER",  # http | openai
        "llm_service_url": "LLM_SERVICE_URL",
        "llm_model": "LLM_MODEL",

        # OpenAI direct
        "openai_api_key": "OPENAI_API_KEY",
        "openai_base_url": "OPENAI_BASE_URL",      # e.g. https://api.openai.com/v1
        "openai_embed_model": "OPENAI_EMBED_MODEL",
        "openai_chat_model": "OPENAI_CHAT_MODEL",

        # Vector index
        "vector_backend": "HSK_VECTOR_BACKEND",    # sql | chroma
        "chroma_path": "CHROMA_PATH",
        "chroma_collection": "CHROMA_COLLECTION",

        # Content
        "content_source_path": "HSK_CONTENT_SOURCE_PATH",
    }

    @staticmethod
    def from_env() -> "Config":
        """Build Config object from environment variables, keeping defaults for unset ones."""
        kwargs = {}
        for f in fields(Config):
            env_name = Config.ENV_VARS.get(f.name)
            raw = (os.getenv(env_name) or "").strip() if env_name else ""
            if not raw:
                continue
            if f.name == "mode":
                try:
                    kwargs[f.name] = Mode(raw.lower())
                except ValueError as e:
                    raise ValueError(f"{env_name} must be one of {[m.value for m in Mode]}, got {raw!r}") from e
            elif f.name == "embedding_dim":
                try:
                    kwargs[f.name] = int(raw)
                except ValueError as e:
                    raise ValueError(f"{env_name} must be an int, got {raw!r}") from e
            else:
                kwargs[f.name] = raw
        return Config(**kwargs)

    def __post_init__(self):
        """
        Fail fast on invalid or missing configuration.

        Only the settings needed by the selected providers are required, and
        the OpenAI key is only enforced outside TEST mode.
        """
        if not isinstance(self.mode, Mode):
            object.__setattr__(self, "mode", Mode(str(self.mode).lower()))

        if self.embedding_provider not in EMBEDDING_PROVIDERS:
            raise ValueError(f"embedding_provider must be one of {EMBEDDING_PROVIDERS}, got {self.embedding_provider!r}")
        if self.generation_provider not in GENERATION_PROVIDERS:
            raise ValueError(f"generation_provider must be one of {GENERATION_PROVIDERS}, got {self.generation_provider!r}")
        if self.vector_backend not in VECTOR_BACKENDS:
            raise ValueError(f"vector_backend must be one of {VECTOR_BACKENDS}, got {self.vector_backend!r}")
        if self.embedding_dim <= 0:
            raise ValueError(f"embedding_dim must be positive, got {self.embedding_dim}")

        missing_fields = [k for k in self._required_fields() if not getattr(self, k)]

        if missing_fields:
            missing_env_vars = [self.ENV_VARS[f] for f in missing_fields]
            raise ValueError(f"Missing required environment variables: {missing_env_vars}")

    def _required_fields(self) -> list[str]:
        required = ["database_url"]
        if self.mode == Mode.TEST:
            return required

        if self.embedding_provider == "http":
            required.append("embedding_service_url")
        if self.generation_provider == "http":
            required.append("llm_service_url")
        if "openai" in (self.embedding_provider, self.generation_provider):
            required.append("openai_api_key")
        if self.vector_backend == "chroma":
            required.append("chroma_path")
        return required

    @property
    def is_production(self) -> bool:
        return self.mode == Mode.PRODUCTION

    def summary(self) -> dict:
        """Return a safe, non-sensitive summary for logging."""
        return {
            "mode": self.mode.value,
            "database_url": self.database_url.split("@")[-1],
            "embedding_provider": self.embedding_provider,
            "embedding_service_url": self.embedding_service_url,
            "embedding_model": self.embedding_model,
            "embedding_dim": self.embedding_dim,
            "generation_provider": self.generation_provider,
            "llm_service_url": self.llm_service_url,
            "llm_model": self.llm_model,
            "vector_backend": self.vector_backend,
            "content_source_path": self.content_source_path,
        }

# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-02
# Updated: 2026-02-19
# Description: settings.py
# -----------------------------------------------------------------------------
import os
from typing import Any, Dict


def _env(name: str, default: str = "") -> str:
    """Read env var safely and strip whitespace."""
    return (os.getenv(name) or default).strip()


def _env_int(name: str, default: int) -> int:
    v = _env(name, "")
    if v == "":
        return default
    try:
        return int(v)
    except ValueError as e:
        raise RuntimeError(f"Env var {name} must be an int, got {v!r}") from e


def _env_float(name: str, default: float) -> float:
    v = _env(name, "")
    if v == "":
        return default
    try:
        return float(v)
    except ValueError as e:
        raise RuntimeError(f"Env var {name} must be a float, got {v!r}") from e


def _env_bool(name: str, default: bool) -> bool:
    v = _env(name, "")
    if v == "":
        return default
    v = v.lower()
    if v in ("1", "true", "t", "yes", "y", "on"):
        return True
    if v in ("0", "false", "f", "no", "n", "off"):
        return False
    raise RuntimeError(f"Env var {name} must be a boolean, got {v!r}")


# -----------------------------------------------------------------------------
# Provider timeouts (seconds). Providers are never retried automatically.
# -----------------------------------------------------------------------------
EMBED_TIMEOUT_SECONDS = _env_float("HSK_EMBED_TIMEOUT_SECONDS", 30.0)
EMBED_BATCH_TIMEOUT_SECONDS = _env_float("HSK_EMBED_BATCH_TIMEOUT_SECONDS", 60.0)
HEALTH_TIMEOUT_SECONDS = _env_float("HSK_HEALTH_TIMEOUT_SECONDS", 5.0)
GENERATION_TIMEOUT_SECONDS = _env_float("HSK_GENERATION_TIMEOUT_SECONDS", 60.0)


# -----------------------------------------------------------------------------
# Reindex
# -----------------------------------------------------------------------------
REINDEX_BATCH_SIZE = _env_int("HSK_REINDEX_BATCH_SIZE", 10)
REINDEX_BATCH_DELAY_SECONDS = _env_float("HSK_REINDEX_BATCH_DELAY_SECONDS", 1.0)


# -----------------------------------------------------------------------------
# Generation defaults (env-controlled)
# -----------------------------------------------------------------------------
GENERATION_DEFAULTS: Dict[str, Any] = {
    "max_tokens": _env_int("HSK_GENERATION_MAX_TOKENS", 500),
    "temperature": _env_float("HSK_GENERATION_TEMPERATURE", 0.7),
    "language": _env("HSK_RESPONSE_LANGUAGE", "English"),
}

# Characters of the top source quoted by the templated fallback answer
FALLBACK_SNIPPET_CHARS = _env_int("HSK_FALLBACK_SNIPPET_CHARS", 200)


# -----------------------------------------------------------------------------
# Confidence scoring
# -----------------------------------------------------------------------------
CONFIDENCE_NO_SOURCES = 0.1
CONFIDENCE_FALLBACK = 0.5
CONFIDENCE_SOURCE_BONUS = 0.2
CONFIDENCE_FULL_BONUS_SOURCES = 5


# -----------------------------------------------------------------------------
# Storage
# -----------------------------------------------------------------------------
DB_ECHO_SQL = _env_bool("HSK_DB_ECHO", False)


# -----------------------------------------------------------------------------
# Validation bounds
# -----------------------------------------------------------------------------
HSK_LEVEL_MIN = 1
HSK_LEVEL_MAX = 9
SEARCH_LIMIT_MAX = 50
SEARCH_DEFAULTS: Dict[str, Any] = {
    "min_similarity": _env_float("HSK_SEARCH_MIN_SIMILARITY", 0.5),
    "limit": _env_int("HSK_SEARCH_LIMIT", 10),
}
HISTORY_LIMIT_MAX = 100
POPULAR_QUERIES_TOP_N = _env_int("HSK_POPULAR_QUERIES_TOP_N", 10)


# -----------------------------------------------------------------------------
# Sanity checks (tunable)
# -----------------------------------------------------------------------------
if REINDEX_BATCH_SIZE < 1:
    raise RuntimeError("HSK_REINDEX_BATCH_SIZE must be >= 1")

if REINDEX_BATCH_DELAY_SECONDS < 0:
    raise RuntimeError("HSK_REINDEX_BATCH_DELAY_SECONDS must be >= 0")

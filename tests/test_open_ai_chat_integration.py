# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2025-11-22
# Updated: 2026-02-15
# Description: test_open_ai_chat_integration.py
# -----------------------------------------------------------------------------
import os

import pytest

from chat.GenerationClient import GenerationRequest
from chat.OpenAIChat import OpenAIChat
from config.Config import Config, Mode


def _missing_openai_chat_env_vars() -> list[str]:
    """Derive the env var names from Config.ENV_VARS to avoid duplication."""
    openai_env_names = [
        Config.ENV_VARS["openai_api_key"],          # "OPENAI_API_KEY"
        Config.ENV_VARS["openai_chat_model"],       # "OPENAI_CHAT_MODEL"
    ]
    return [name for name in openai_env_names if not os.getenv(name)]


def _chat_cfg() -> Config:
    missing = _missing_openai_chat_env_vars()
    if missing:
        pytest.skip(f"Missing env vars for OpenAI: {', '.join(missing)}")
    return Config(
        mode=Mode.PRODUCTION,
        database_url="sqlite://",
        generation_provider="openai",
        openai_api_key=os.environ["OPENAI_API_KEY"],
        openai_base_url=os.getenv("OPENAI_BASE_URL", ""),
        openai_chat_model=os.environ["OPENAI_CHAT_MODEL"],
    )


@pytest.mark.integration
def test_openai_chat_generate_roundtrip():
    chat = OpenAIChat(cfg=_chat_cfg())

    result = chat.generate(GenerationRequest(
        prompt="Reply with a single word: OK",
        context="",
        query="ping",
        temperature=0.0,
        max_tokens=5,
    ))

    assert result.is_fallback is False
    assert result.text.strip().upper().startswith("OK")


@pytest.mark.integration
def test_openai_chat_healthcheck():
    chat = OpenAIChat(cfg=_chat_cfg())
    assert chat.health_check() is True

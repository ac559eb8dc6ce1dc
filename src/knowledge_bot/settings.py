from __future__ import annotations

import os
from dataclasses import dataclass, field

from dotenv import load_dotenv

from .text_processing import DEFAULT_FOLLOW_UP_TRIGGERS


@dataclass(slots=True)
class ChatSettings:
    """Runtime configuration for retrieval, translation and generation calls."""

    chat_model: str = "gpt-4.1-mini"
    translation_model: str = "gpt-4.1-mini"
    embedding_model: str = "text-embedding-3-small"
    temperature: float = 0.7
    max_tokens: int = 1000
    presence_penalty: float = 0.1
    frequency_penalty: float = 0.1
    translate_queries: bool = True
    query_language: str = "Serbian (Latin script)"
    keyword_top_k: int = 10
    request_timeout: float = 30.0
    match_url: str | None = None
    match_token: str | None = None
    organization: str = "kompanija"
    follow_up_triggers: tuple[str, ...] = field(default=DEFAULT_FOLLOW_UP_TRIGGERS)


@dataclass(slots=True)
class Paths:
    """Common project paths for the corpus and the Chroma store."""

    data_dir: str = "data"
    artifacts_dir: str = "artifacts"


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _env_triggers(name: str) -> tuple[str, ...]:
    value = os.getenv(name)
    if not value:
        return DEFAULT_FOLLOW_UP_TRIGGERS
    triggers = tuple(part.strip().lower() for part in value.split(",") if part.strip())
    return triggers or DEFAULT_FOLLOW_UP_TRIGGERS


def load_settings() -> tuple[ChatSettings, Paths]:
    """Load environment-backed settings and return typed config objects.

    Returns:
        Tuple containing chat settings and common path settings.
    """
    load_dotenv()
    return (
        ChatSettings(
            chat_model=os.getenv("OPENAI_CHAT_MODEL", "gpt-4.1-mini"),
            translation_model=os.getenv("KB_TRANSLATION_MODEL", "gpt-4.1-mini"),
            embedding_model=os.getenv("OPENAI_EMBEDDING_MODEL", "text-embedding-3-small"),
            max_tokens=int(os.getenv("KB_MAX_TOKENS", "1000")),
            translate_queries=_env_bool("KB_TRANSLATE_QUERIES", True),
            query_language=os.getenv("KB_QUERY_LANGUAGE", "Serbian (Latin script)"),
            keyword_top_k=int(os.getenv("KB_KEYWORD_TOP_K", "10")),
            request_timeout=float(os.getenv("KB_REQUEST_TIMEOUT", "30")),
            match_url=os.getenv("KB_MATCH_URL") or None,
            match_token=os.getenv("KB_MATCH_TOKEN") or None,
            organization=os.getenv("KB_ORGANIZATION", "kompanija"),
            follow_up_triggers=_env_triggers("KB_FOLLOW_UP_TRIGGERS"),
        ),
        Paths(
            data_dir=os.getenv("KB_DATA_DIR", "data"),
            artifacts_dir=os.getenv("KB_ARTIFACTS_DIR", "artifacts"),
        ),
    )

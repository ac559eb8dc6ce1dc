"""Exception hierarchy for knowledge-bot.

Only collaborators raise these. ``ChatPipeline.generate_response`` catches
every one of them and turns it into a reply string.
"""
from __future__ import annotations

from typing import Any


class KnowledgeBotError(Exception):
    """Base error carrying a short code, the underlying cause and debug context."""

    error_code: str = "KB_ERR_001"

    def __init__(
        self,
        message: str,
        *,
        cause: Exception | None = None,
        context: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.cause = cause
        self.context = context or {}

    def __str__(self) -> str:
        text = f"[{self.error_code}] {self.message}"
        if self.cause is not None:
            text += f" (caused by {type(self.cause).__name__}: {self.cause})"
        return text

    def to_dict(self) -> dict[str, Any]:
        return {
            "error_code": self.error_code,
            "error_type": type(self).__name__,
            "message": self.message,
            "cause": str(self.cause) if self.cause is not None else None,
            "context": self.context,
        }


class MatchOracleError(KnowledgeBotError):
    """Semantic match service failed or returned an unusable payload."""

    error_code = "KB_MATCH_001"


class CorpusError(KnowledgeBotError):
    """Corpus could not be loaded or parsed."""

    error_code = "KB_CORPUS_001"

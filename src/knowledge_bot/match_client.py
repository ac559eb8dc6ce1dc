"""HTTP client for the semantic match service.

The service owns the embeddings and the vector search. It accepts

    POST <url>  {"query": "..."}    Authorization: Bearer <token>

and answers ``{"matches": [{"chunk": "...", "document_name": "..."}]}``
(``document_name`` is optional).
"""
from __future__ import annotations

import logging
from typing import Protocol

import httpx

from .errors import MatchOracleError
from .schema import MatchedChunk

logger = logging.getLogger(__name__)


class MatchOracle(Protocol):
    """Semantic search backend.

    Oracles that set ``needs_completion_credential = True`` receive the
    OpenAI credential as ``token``; every other oracle gets the dedicated
    match token (or None).
    """

    async def match(self, query: str, token: str | None) -> list[MatchedChunk]: ...


def parse_matches(payload: object) -> list[MatchedChunk]:
    """Validate a match response body and map it to ``MatchedChunk`` records.

    Raises:
        MatchOracleError: If the payload does not have the expected shape.
    """
    if not isinstance(payload, dict) or not isinstance(payload.get("matches", []), list):
        raise MatchOracleError("Match response is not an object with a 'matches' list")

    matches: list[MatchedChunk] = []
    for item in payload.get("matches", []):
        if not isinstance(item, dict) or not isinstance(item.get("chunk"), str):
            raise MatchOracleError("Match entry without a 'chunk' string", context={"entry": repr(item)[:200]})
        if not item["chunk"].strip():
            continue
        name = item.get("document_name")
        matches.append(MatchedChunk(text=item["chunk"], document_name=name if isinstance(name, str) else None))
    return matches


class HttpMatchOracle:
    """Semantic match oracle reached over HTTP with ``httpx.AsyncClient``."""

    needs_completion_credential = False

    def __init__(
        self,
        url: str,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.url = url
        self.timeout = timeout
        self._transport = transport

    async def match(self, query: str, token: str | None) -> list[MatchedChunk]:
        headers = {"Content-Type": "application/json"}
        if token:
            headers["Authorization"] = f"Bearer {token}"

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.post(self.url, json={"query": query}, headers=headers)
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            raise MatchOracleError("Match service unreachable", cause=exc, context={"url": self.url}) from exc

        if response.status_code != 200:
            raise MatchOracleError(
                f"Match service returned HTTP {response.status_code}",
                context={"url": self.url, "body": response.text[:200]},
            )

        try:
            payload = response.json()
        except ValueError as exc:
            raise MatchOracleError("Match service returned invalid JSON", cause=exc) from exc

        matches = parse_matches(payload)
        logger.debug("Match service returned %d chunks", len(matches))
        return matches

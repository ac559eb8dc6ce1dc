"""Tests for match_client.py — HttpMatchOracle against httpx.MockTransport."""
from __future__ import annotations

import json

import httpx
import pytest

from knowledge_bot.errors import MatchOracleError
from knowledge_bot.match_client import HttpMatchOracle, parse_matches
from knowledge_bot.schema import MatchedChunk

URL = "https://match.example.test/semantic-search"


def _oracle(handler) -> HttpMatchOracle:
    return HttpMatchOracle(URL, timeout=5.0, transport=httpx.MockTransport(handler))


# ---------------------------------------------------------------------------
# parse_matches
# ---------------------------------------------------------------------------

class TestParseMatches:
    def test_maps_chunks(self):
        payload = {"matches": [{"chunk": "a", "document_name": "pravilnik.txt"}, {"chunk": "b"}]}
        assert parse_matches(payload) == [MatchedChunk("a", "pravilnik.txt"), MatchedChunk("b", None)]

    def test_missing_matches_key_is_empty(self):
        assert parse_matches({}) == []

    def test_skips_blank_chunks(self):
        assert parse_matches({"matches": [{"chunk": "  "}, {"chunk": "x"}]}) == [MatchedChunk("x")]

    def test_non_object_payload_raises(self):
        with pytest.raises(MatchOracleError):
            parse_matches(["not", "an", "object"])

    def test_matches_not_a_list_raises(self):
        with pytest.raises(MatchOracleError):
            parse_matches({"matches": "oops"})

    def test_entry_without_chunk_raises(self):
        with pytest.raises(MatchOracleError):
            parse_matches({"matches": [{"text": "wrong key"}]})


# ---------------------------------------------------------------------------
# HttpMatchOracle
# ---------------------------------------------------------------------------

class TestHttpMatchOracle:
    @pytest.mark.asyncio
    async def test_posts_query_with_bearer_token(self):
        seen: dict = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["method"] = request.method
            seen["url"] = str(request.url)
            seen["auth"] = request.headers.get("Authorization")
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json={"matches": [{"chunk": "Kaciga je obavezna."}]})

        matches = await _oracle(handler).match("kaciga", "tok-123")

        assert matches == [MatchedChunk("Kaciga je obavezna.")]
        assert seen == {
            "method": "POST",
            "url": URL,
            "auth": "Bearer tok-123",
            "body": {"query": "kaciga"},
        }

    @pytest.mark.asyncio
    async def test_no_token_sends_no_authorization(self):
        seen: dict = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["auth"] = request.headers.get("Authorization")
            return httpx.Response(200, json={"matches": []})

        assert await _oracle(handler).match("kaciga", None) == []
        assert seen["auth"] is None

    @pytest.mark.asyncio
    async def test_non_200_raises(self):
        oracle = _oracle(lambda request: httpx.Response(503, text="unavailable"))
        with pytest.raises(MatchOracleError, match="503"):
            await oracle.match("kaciga", "tok")

    @pytest.mark.asyncio
    async def test_invalid_json_raises(self):
        oracle = _oracle(lambda request: httpx.Response(200, text="<html>"))
        with pytest.raises(MatchOracleError, match="invalid JSON"):
            await oracle.match("kaciga", "tok")

    @pytest.mark.asyncio
    async def test_transport_error_raises_match_error(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("refused", request=request)

        with pytest.raises(MatchOracleError, match="unreachable") as exc_info:
            await _oracle(handler).match("kaciga", "tok")
        assert isinstance(exc_info.value.cause, httpx.ConnectError)

    @pytest.mark.asyncio
    async def test_timeout_raises_match_error(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("slow", request=request)

        with pytest.raises(MatchOracleError):
            await _oracle(handler).match("kaciga", "tok")

    @pytest.mark.asyncio
    async def test_malformed_url_raises_match_error(self):
        oracle = HttpMatchOracle("http://[::1/match", timeout=5.0)
        with pytest.raises(MatchOracleError, match="unreachable") as exc_info:
            await oracle.match("kaciga", None)
        assert isinstance(exc_info.value.cause, httpx.InvalidURL)

    def test_does_not_ask_for_completion_credential(self):
        assert HttpMatchOracle(URL).needs_completion_credential is False

"""Knowledge-base assembly for one user message.

Retrieval is split into interchangeable strategies:

  SemanticRetriever - asks the semantic match oracle (vector search service)
  KeywordRetriever  - scores every local corpus chunk by keyword overlap

KnowledgeRetriever tries them in order and keeps the first non-empty result,
so semantic search is used when it is available and has embeddings, and the
keyword scorer covers the rest. Strategy failures never propagate.
"""
from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from typing import Protocol

import httpx

from .errors import KnowledgeBotError
from .match_client import MatchOracle
from .schema import RetrievalResult
from .scoring import DEFAULT_TOP_K, score_chunks
from .stores import CorpusStore
from .text_processing import DEFAULT_FOLLOW_UP_TRIGGERS, extract_query_words, is_follow_up

logger = logging.getLogger(__name__)

CHUNK_SEPARATOR = "\n\n"


class RetrievalStrategy(Protocol):
    name: str

    async def search(self, query: str) -> RetrievalResult: ...


class SemanticRetriever:
    """Knowledge base built from semantic match oracle results."""

    name = "semantic"

    def __init__(self, oracle: MatchOracle, token: str | None = None) -> None:
        self.oracle = oracle
        self.token = token

    async def search(self, query: str) -> RetrievalResult:
        try:
            matches = await self.oracle.match(query, self.token)
        except (KnowledgeBotError, httpx.HTTPError, httpx.InvalidURL) as exc:
            logger.warning("Semantic retrieval failed, continuing without it: %s", exc)
            return RetrievalResult(knowledge_base="", strategy=self.name)

        if not matches:
            logger.info("Semantic retrieval returned no matches")
            return RetrievalResult(knowledge_base="", strategy=self.name)

        return RetrievalResult(
            knowledge_base=CHUNK_SEPARATOR.join(match.text for match in matches),
            sources_used={match.document_name for match in matches if match.document_name},
            strategy=self.name,
        )


class KeywordRetriever:
    """Knowledge base built from the best keyword-scored corpus chunks."""

    name = "keyword"

    def __init__(self, corpus: CorpusStore, top_k: int = DEFAULT_TOP_K) -> None:
        self.corpus = corpus
        self.top_k = top_k

    async def search(self, query: str) -> RetrievalResult:
        try:
            documents = await self.corpus.get_documents()
        except KnowledgeBotError as exc:
            logger.warning("Corpus unavailable for keyword retrieval: %s", exc)
            return RetrievalResult(knowledge_base="", strategy=self.name)

        ranked = score_chunks(extract_query_words(query), documents, top_k=self.top_k)
        logger.debug("Keyword retrieval scored %d chunks over %d documents", len(ranked), len(documents))

        return RetrievalResult(
            knowledge_base=CHUNK_SEPARATOR.join(f"[{row.document_name}]\n{row.text}" for row in ranked),
            sources_used={row.document_name for row in ranked},
            strategy=self.name,
        )


class KnowledgeRetriever:
    """Run retrieval strategies in order and flag the no-content state."""

    def __init__(
        self,
        strategies: Sequence[RetrievalStrategy],
        follow_up_triggers: Iterable[str] = DEFAULT_FOLLOW_UP_TRIGGERS,
    ) -> None:
        self.strategies = list(strategies)
        self.follow_up_triggers = tuple(follow_up_triggers)

    async def retrieve(self, message: str, query: str | None = None) -> RetrievalResult:
        """Assemble the knowledge base for one user message.

        Args:
            message: Original user message, used for follow-up detection.
            query: Search query (the translated message); defaults to
                ``message``.

        Returns:
            Result of the first strategy with content. ``no_content`` is set
            when nothing was found and the message is not a follow-up.
        """
        search_query = query or message
        result = RetrievalResult(knowledge_base="")

        for strategy in self.strategies:
            result = await strategy.search(search_query)
            if not result.is_empty:
                logger.info(
                    "Retrieved knowledge base via %s strategy (%d chars, %d sources)",
                    strategy.name,
                    len(result.knowledge_base),
                    len(result.sources_used),
                )
                return result
            logger.info("Strategy %s found nothing, trying next", strategy.name)

        follow_up = is_follow_up(message, self.follow_up_triggers)
        return RetrievalResult(
            knowledge_base="",
            strategy="none",
            no_content=not follow_up,
        )

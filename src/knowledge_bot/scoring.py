from __future__ import annotations

import re
from collections.abc import Iterable, Sequence

from .schema import Document, ScoredChunk

EXACT_MATCH_WEIGHT = 3
PARTIAL_MATCH_WEIGHT = 1
DEFAULT_TOP_K = 10


def score_chunk(query_words: Sequence[str], chunk_lower: str) -> int:
    """Score one lower-cased chunk against the query words.

    Whole-word matches count three times; substring occurrences that are not
    whole-word matches count once.

    Args:
        query_words: Words from ``extract_query_words``; duplicates add up.
        chunk_lower: Chunk text, already lower-cased.

    Returns:
        Non-negative integer relevance score.
    """
    score = 0
    for word in query_words:
        if not word:
            continue
        escaped = re.escape(word)
        exact = len(re.findall(rf"\b{escaped}\b", chunk_lower))
        total = len(re.findall(escaped, chunk_lower))
        partial = max(total - exact, 0)
        score += exact * EXACT_MATCH_WEIGHT + partial * PARTIAL_MATCH_WEIGHT
    return score


def score_chunks(
    query_words: Sequence[str],
    documents: Iterable[Document],
    top_k: int = DEFAULT_TOP_K,
) -> list[ScoredChunk]:
    """Rank chunks of every document by keyword overlap with the query.

    Args:
        query_words: Significant query words.
        documents: Corpus snapshot to score.
        top_k: Maximum number of chunks to return.

    Returns:
        Up to ``top_k`` chunks with a positive score, best first. Ties keep
        document/chunk encounter order.
    """
    if not query_words or top_k <= 0:
        return []

    scored: list[ScoredChunk] = []
    for document in documents:
        seen: set[str] = set()
        for chunk in document.chunks:
            trimmed = chunk.strip()
            if not trimmed or trimmed in seen:
                continue
            seen.add(trimmed)

            score = score_chunk(query_words, trimmed.lower())
            if score > 0:
                scored.append(ScoredChunk(text=trimmed, score=score, document_name=document.name))

    # sorted() is stable, so equal scores stay in encounter order
    ranked = sorted(scored, key=lambda row: row.score, reverse=True)
    return ranked[:top_k]

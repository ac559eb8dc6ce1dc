from __future__ import annotations

import asyncio
import logging
from pathlib import Path

import chromadb

from .embeddings import embed_texts
from .errors import MatchOracleError
from .schema import Document, MatchedChunk

logger = logging.getLogger(__name__)


def build_chroma_collection(
    documents: list[Document],
    embeddings: list[list[float]],
    collection_name: str,
    persist_dir: str = "artifacts/chroma",
):
    """Create (or replace) a persistent Chroma collection from document chunks.

    Chunk ids are ``<doc_id>-<position>``; empty and duplicate chunks of a
    document are skipped, so ``embeddings`` must align with
    ``indexable_chunks(documents)``.

    Args:
        documents: Corpus documents to index.
        embeddings: Embedding vectors aligned to the indexable chunks.
        collection_name: Chroma collection name.
        persist_dir: Local path for Chroma persistence.

    Returns:
        The created Chroma collection instance.
    """
    rows = indexable_chunks(documents)
    if len(rows) != len(embeddings):
        raise ValueError(f"Expected {len(rows)} embeddings, got {len(embeddings)}")

    Path(persist_dir).mkdir(parents=True, exist_ok=True)
    client = chromadb.PersistentClient(path=persist_dir)
    # list_collections yields names on chromadb>=0.6 and Collection objects before that
    existing = {getattr(collection, "name", collection) for collection in client.list_collections()}
    if collection_name in existing:
        client.delete_collection(collection_name)

    collection = client.create_collection(name=collection_name)
    if rows:
        collection.add(
            ids=[chunk_id for chunk_id, _, _ in rows],
            embeddings=embeddings,
            documents=[text for _, text, _ in rows],
            metadatas=[{"document_name": name} for _, _, name in rows],
        )
    return collection


def indexable_chunks(documents: list[Document]) -> list[tuple[str, str, str]]:
    """Return ``(chunk_id, text, document_name)`` for every non-empty, unique chunk."""
    rows: list[tuple[str, str, str]] = []
    for document in documents:
        seen: set[str] = set()
        for position, chunk in enumerate(document.chunks):
            trimmed = chunk.strip()
            if not trimmed or trimmed in seen:
                continue
            seen.add(trimmed)
            rows.append((f"{document.doc_id}-{position:04d}", trimmed, document.name))
    return rows


class ChromaMatchOracle:
    """Semantic match oracle backed by an existing Chroma collection.

    With ``embedding_model`` set, the query is embedded through OpenAI using
    the token handed to ``match``; otherwise the collection's own embedding
    function handles ``query_texts``.
    """

    def __init__(self, collection, top_k: int = 8, embedding_model: str | None = None) -> None:
        self.collection = collection
        self.top_k = top_k
        self.embedding_model = embedding_model
        # the query is embedded with the caller's OpenAI key
        self.needs_completion_credential = embedding_model is not None

    def _query(self, query: str, token: str | None) -> list[MatchedChunk]:
        if self.embedding_model:
            vector = embed_texts([query], model=self.embedding_model, api_key=token)[0]
            response = self.collection.query(query_embeddings=[vector.tolist()], n_results=self.top_k)
        else:
            response = self.collection.query(query_texts=[query], n_results=self.top_k)

        docs = response["documents"][0]
        metadatas = (response.get("metadatas") or [[]])[0] or [{} for _ in docs]
        return [
            MatchedChunk(text=text, document_name=(metadata or {}).get("document_name"))
            for text, metadata in zip(docs, metadatas, strict=True)
            if text and text.strip()
        ]

    async def match(self, query: str, token: str | None) -> list[MatchedChunk]:
        try:
            return await asyncio.to_thread(self._query, query, token)
        except Exception as exc:  # noqa: BLE001
            raise MatchOracleError("Chroma query failed", cause=exc) from exc

from __future__ import annotations

import uuid

from .schema import Document

DEFAULT_CHUNK_SIZE = 1000


def chunk_text(text: str, chunk_size: int = DEFAULT_CHUNK_SIZE) -> list[str]:
    """Split text into fixed-width character chunks without overlap.

    Args:
        text: Extracted document text.
        chunk_size: Maximum number of characters per chunk.

    Returns:
        Consecutive slices of ``text``; empty input gives no chunks.
    """
    if chunk_size <= 0:
        raise ValueError("chunk_size must be positive")
    return [text[start : start + chunk_size] for start in range(0, len(text), chunk_size)]


def build_document(
    name: str,
    content: str,
    doc_type: str = "txt",
    chunk_size: int = DEFAULT_CHUNK_SIZE,
    doc_id: str | None = None,
) -> Document:
    """Create a corpus document from extracted plain text.

    Args:
        name: Display name, usually the uploaded file name.
        content: Extracted plain text.
        doc_type: ``"txt"`` or ``"pdf"``.
        chunk_size: Characters per chunk.
        doc_id: Explicit id; a random one is generated when omitted.

    Returns:
        Document carrying its chunks.
    """
    if doc_type not in {"txt", "pdf"}:
        raise ValueError(f"Unsupported document type '{doc_type}'")
    return Document(
        doc_id=doc_id or uuid.uuid4().hex,
        name=name,
        content=content,
        doc_type=doc_type,
        chunks=chunk_text(content, chunk_size=chunk_size),
    )

"""Credential and corpus collaborators consumed by the chat pipeline.

Both are protocols with async methods so that database- or network-backed
implementations can be dropped in. The implementations here cover tests,
local runs and JSON-lines corpus files.
"""
from __future__ import annotations

import json
import logging
import os
from dataclasses import asdict
from pathlib import Path
from typing import Protocol

from dotenv import load_dotenv

from .chunking import DEFAULT_CHUNK_SIZE, build_document
from .errors import CorpusError
from .schema import Document

logger = logging.getLogger(__name__)

CREDENTIAL_ENV_VAR = "OPENAI_API_KEY"


class CredentialStore(Protocol):
    async def get_credential(self) -> str | None: ...

    async def save_credential(self, value: str) -> None: ...


class CorpusStore(Protocol):
    async def get_documents(self) -> list[Document]: ...


class InMemoryCredentialStore:
    """Holds the completion-service credential in memory."""

    def __init__(self, credential: str | None = None) -> None:
        self._credential = credential

    async def get_credential(self) -> str | None:
        return self._credential or None

    async def save_credential(self, value: str) -> None:
        self._credential = value


class EnvCredentialStore:
    """Reads the credential from the process environment (and ``.env``)."""

    def __init__(self, env_var: str = CREDENTIAL_ENV_VAR) -> None:
        self.env_var = env_var
        load_dotenv()

    async def get_credential(self) -> str | None:
        return os.getenv(self.env_var) or None

    async def save_credential(self, value: str) -> None:
        os.environ[self.env_var] = value


class InMemoryCorpus:
    """Read-only snapshot of already loaded documents."""

    def __init__(self, documents: list[Document] | None = None) -> None:
        self._documents = list(documents or [])

    async def get_documents(self) -> list[Document]:
        return list(self._documents)


def _load_jsonl(path: str | Path) -> list[dict]:
    records: list[dict] = []
    with Path(path).open("r", encoding="utf-8") as file_handle:
        for line_number, line in enumerate(file_handle, start=1):
            if not line.strip():
                continue
            try:
                records.append(json.loads(line))
            except json.JSONDecodeError as exc:
                raise CorpusError(
                    "Malformed corpus record",
                    cause=exc,
                    context={"path": str(path), "line": line_number},
                ) from exc
    return records


def load_documents(path: str | Path) -> list[Document]:
    try:
        return [Document(**record) for record in _load_jsonl(path)]
    except TypeError as exc:
        raise CorpusError("Corpus record has unexpected fields", cause=exc, context={"path": str(path)}) from exc


def save_documents(documents: list[Document], path: str | Path) -> None:
    destination = Path(path)
    destination.parent.mkdir(parents=True, exist_ok=True)

    with destination.open("w", encoding="utf-8") as file_handle:
        for document in documents:
            file_handle.write(json.dumps(asdict(document), ensure_ascii=False) + "\n")


def load_text_directory(directory: str | Path, chunk_size: int = DEFAULT_CHUNK_SIZE) -> list[Document]:
    """Build documents from every ``*.txt`` file in a directory.

    Args:
        directory: Folder holding plain-text exports.
        chunk_size: Characters per chunk.

    Returns:
        Documents sorted by file name.
    """
    root = Path(directory)
    if not root.is_dir():
        raise CorpusError("Corpus directory does not exist", context={"path": str(root)})

    documents = [
        build_document(name=path.name, content=path.read_text(encoding="utf-8"), chunk_size=chunk_size)
        for path in sorted(root.glob("*.txt"))
    ]
    logger.info("Loaded %d text documents from %s", len(documents), root)
    return documents


class JsonlCorpus:
    """Corpus persisted as one JSON document per line.

    A missing file is an empty corpus.
    """

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)

    async def get_documents(self) -> list[Document]:
        if not self.path.exists():
            logger.debug("Corpus file %s not found, treating corpus as empty", self.path)
            return []
        return load_documents(self.path)

    async def add_documents(self, documents: list[Document]) -> None:
        existing = await self.get_documents()
        save_documents(existing + documents, self.path)

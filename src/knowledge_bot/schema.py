from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum


class Script(str, Enum):
    """Writing system of a Serbian message."""

    CYRILLIC = "cyrillic"
    LATIN = "latin"


@dataclass(slots=True)
class Document:
    """Uploaded source document with its fixed-size chunks."""

    doc_id: str
    name: str
    content: str
    doc_type: str = "txt"
    chunks: list[str] = field(default_factory=list)
    uploaded_at: str = field(default_factory=lambda: datetime.now(timezone.utc).isoformat())


@dataclass(slots=True)
class ScoredChunk:
    """Keyword-scored chunk produced for a single query."""

    text: str
    score: int
    document_name: str


@dataclass(slots=True)
class MatchedChunk:
    """Single match returned by a semantic match oracle."""

    text: str
    document_name: str | None = None


@dataclass(slots=True)
class RetrievalResult:
    """Knowledge base assembled for one query."""

    knowledge_base: str
    sources_used: set[str] = field(default_factory=set)
    strategy: str = "none"
    no_content: bool = False

    @property
    def is_empty(self) -> bool:
        return not self.knowledge_base.strip()


@dataclass(slots=True)
class ConversationTurn:
    """Most recent user/assistant exchange supplied by the caller."""

    user_text: str
    assistant_text: str


@dataclass(slots=True)
class Message:
    """Chat message as stored by the conversation layer."""

    content: str
    role: str = "user"

    def to_chat(self) -> dict[str, str]:
        return {"role": self.role, "content": self.content}

"""Retrieval-augmented workplace-safety chat assistant."""

from .pipeline import ChatPipeline
from .schema import ConversationTurn, Document, Message, RetrievalResult, ScoredChunk, Script
from .titles import generate_chat_title

__all__ = [
    "ChatPipeline",
    "ConversationTurn",
    "Document",
    "Message",
    "RetrievalResult",
    "ScoredChunk",
    "Script",
    "generate_chat_title",
]

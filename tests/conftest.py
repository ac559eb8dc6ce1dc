"""Shared pytest fixtures for knowledge_bot unit tests."""
from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import pytest

from knowledge_bot.schema import ConversationTurn, Document
from knowledge_bot.settings import ChatSettings


def make_completion(content: str | None) -> MagicMock:
    """Chat-completion response shaped like ``openai`` returns it."""
    response = MagicMock()
    choice = MagicMock()
    choice.message.content = content
    response.choices = [choice]
    return response


def make_client(*responses) -> MagicMock:
    """Async OpenAI client mock whose completions return/raise ``responses`` in order."""
    client = MagicMock()
    client.chat.completions.create = AsyncMock(side_effect=list(responses))
    return client


@pytest.fixture()
def sample_document() -> Document:
    return Document(
        doc_id="DOC-001",
        name="pravilnik.txt",
        content="Zaposleni moraju nositi zaštitnu opremu. Kaciga je obavezna na gradilištu.",
        chunks=[
            "Zaposleni moraju nositi zaštitnu opremu.",
            "Kaciga je obavezna na gradilištu.",
        ],
    )


@pytest.fixture()
def sample_documents() -> list[Document]:
    return [
        Document(
            doc_id="DOC-001",
            name="pravilnik.txt",
            content="",
            chunks=[
                "Zaposleni moraju nositi zaštitnu opremu na radnom mestu.",
                "Kaciga je obavezna na gradilištu za sve radnike.",
                "Kaciga je obavezna na gradilištu za sve radnike.",
                "   ",
            ],
        ),
        Document(
            doc_id="DOC-002",
            name="evakuacija.txt",
            content="",
            chunks=[
                "Procedura za evakuaciju: izađite najbližim izlazom.",
                "Mesto okupljanja je parking ispred zgrade.",
            ],
        ),
        Document(
            doc_id="DOC-003",
            name="pozar.txt",
            content="",
            chunks=[
                "U slučaju požara koristite aparat za gašenje i pozovite 193.",
            ],
        ),
    ]


@pytest.fixture()
def settings() -> ChatSettings:
    return ChatSettings(translate_queries=False)


@pytest.fixture()
def prior_turn() -> ConversationTurn:
    return ConversationTurn(
        user_text="Šta je procedura za evakuaciju?",
        assistant_text="Izađite najbližim izlazom i idite na mesto okupljanja.",
    )

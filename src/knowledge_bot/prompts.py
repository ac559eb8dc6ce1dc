"""Chat prompt construction.

The system prompt pins the persona, the knowledge base and the reply
script. Conversation context is bounded to one prior exchange so the
prompt size stays flat however long the chat gets.
"""
from __future__ import annotations

from .schema import ConversationTurn, Message, Script
from .text_processing import detect_script

DEFAULT_ORGANIZATION = "kompanija"

CONTINUATION_PLACEHOLDER = (
    "Ovo je nastavak prethodnog razgovora. Nema novog sadržaja iz dokumenata; "
    "nastavi odgovor na osnovu prethodne razmene."
)

SCRIPT_INSTRUCTIONS = {
    Script.CYRILLIC: (
        "Korisnik piše ćirilicom. Odgovori isključivo na srpskom jeziku, ćiriličnim pismom (Cyrillic script)."
    ),
    Script.LATIN: (
        "Korisnik piše latinicom. Odgovori isključivo na srpskom jeziku, latiničnim pismom (Latin script)."
    ),
}

_SYSTEM_TEMPLATE = """Ti si asistent za bezbednost i zdravlje na radu za zaposlene u organizaciji: {organization}.
Odgovaraš isključivo na osnovu priložene baze znanja.
- Budi ljubazan, konkretan i jasan.
- Ako informacija nije u bazi znanja, to ljubazno reci i nemoj izmišljati.
- Kada je moguće, navedi iz kog dokumenta potiče odgovor.
- Uvek odgovaraj na srpskom jeziku, bez obzira na jezik dokumenata.
{script_instruction}

Baza znanja:
{knowledge_base}"""


def build_system_prompt(
    knowledge_base: str,
    script: Script,
    organization: str = DEFAULT_ORGANIZATION,
) -> str:
    return _SYSTEM_TEMPLATE.format(
        organization=organization,
        script_instruction=SCRIPT_INSTRUCTIONS[script],
        knowledge_base=knowledge_base.strip() or CONTINUATION_PLACEHOLDER,
    )


def compose_messages(
    message: str,
    knowledge_base: str,
    prior_turn: ConversationTurn | None = None,
    organization: str = DEFAULT_ORGANIZATION,
) -> list[dict[str, str]]:
    """Build the chat-completion message list for one user turn.

    Args:
        message: Current user message; its script decides the reply script.
        knowledge_base: Retrieved text, or empty for a follow-up turn.
        prior_turn: The single most recent exchange, if any.
        organization: Employer named in the persona.

    Returns:
        ``[system, prior user, prior assistant, current user]`` with the prior
        pair present only when ``prior_turn`` is given.
    """
    messages = [
        {
            "role": "system",
            "content": build_system_prompt(knowledge_base, detect_script(message), organization),
        }
    ]
    if prior_turn is not None:
        messages.append(Message(prior_turn.user_text, "user").to_chat())
        messages.append(Message(prior_turn.assistant_text, "assistant").to_chat())
    messages.append(Message(message, "user").to_chat())
    return messages


def last_turn(history: list[Message]) -> ConversationTurn | None:
    """Return the most recent complete user/assistant exchange of a chat history."""
    for index in range(len(history) - 1, 0, -1):
        if history[index].role == "assistant" and history[index - 1].role == "user":
            return ConversationTurn(
                user_text=history[index - 1].content,
                assistant_text=history[index].content,
            )
    return None

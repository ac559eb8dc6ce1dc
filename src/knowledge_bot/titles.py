from __future__ import annotations

DEFAULT_TITLE = "Novi razgovor"
TITLE_WORD_LIMIT = 5


def generate_chat_title(first_message: str) -> str:
    """Derive a chat title from the first five words of the opening message."""
    words = first_message.split()
    title = " ".join(words[:TITLE_WORD_LIMIT])
    if len(words) > TITLE_WORD_LIMIT:
        title += "..."
    return title or DEFAULT_TITLE

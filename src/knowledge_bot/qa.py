from __future__ import annotations

import logging

import openai
from openai import AsyncOpenAI

from . import replies
from .settings import ChatSettings

logger = logging.getLogger(__name__)

TRANSLATION_TEMPERATURE = 0.3


def _translation_prompt(language: str) -> str:
    return (
        f"Translate the user's question into {language}, preserving the core meaning of the question. "
        "Keep names, numbers and technical terms intact. "
        "Return only the translated question, with no explanations."
    )


async def translate_query(client: AsyncOpenAI, message: str, settings: ChatSettings) -> str:
    """Rewrite the message into the corpus query language.

    Any failure falls back to the original message; translation never
    blocks retrieval.
    """
    try:
        response = await client.chat.completions.create(
            model=settings.translation_model,
            messages=[
                {"role": "system", "content": _translation_prompt(settings.query_language)},
                {"role": "user", "content": message},
            ],
            temperature=TRANSLATION_TEMPERATURE,
        )
    except openai.APIError as exc:
        logger.warning("Query translation failed, using original message: %s", exc)
        return message

    translated = (response.choices[0].message.content or "").strip() if response.choices else ""
    if not translated:
        logger.warning("Query translation returned no text, using original message")
        return message
    logger.debug("Translated query: %r -> %r", message, translated)
    return translated


def _error_detail(exc: openai.APIError) -> str:
    body = getattr(exc, "body", None)
    if isinstance(body, dict):
        error = body.get("error", body)
        if isinstance(error, dict) and error.get("message"):
            return str(error["message"])
    return exc.message or "Unknown error"


async def generate_answer(
    client: AsyncOpenAI,
    messages: list[dict[str, str]],
    settings: ChatSettings,
) -> str:
    """Call the chat model and map every failure to a reply string.

    Args:
        client: Async OpenAI client bound to the configured credential.
        messages: Prompt from ``compose_messages``.
        settings: Model and generation parameters.

    Returns:
        Model answer, or a localized fallback/apology.
    """
    try:
        response = await client.chat.completions.create(
            model=settings.chat_model,
            messages=messages,
            temperature=settings.temperature,
            max_tokens=settings.max_tokens,
            presence_penalty=settings.presence_penalty,
            frequency_penalty=settings.frequency_penalty,
        )
    except openai.AuthenticationError as exc:
        logger.warning("Completion rejected the API key: %s", _error_detail(exc))
        return replies.INVALID_CREDENTIAL
    except openai.APIError as exc:
        detail = _error_detail(exc)
        logger.warning("Completion call failed: %s", detail)
        return replies.generation_failed(detail)

    content = response.choices[0].message.content if response.choices else None
    if not content or not content.strip():
        logger.warning("Completion returned empty content")
        return replies.EMPTY_COMPLETION
    return content

"""Public chat entry point: credential check, translation, retrieval, generation.

    CheckCredential -> Translate -> Retrieve -> CheckEmptyKnowledgeBase
        -> Compose -> Generate -> Return

The missing-credential and no-content states return early. Every other
failure is either degraded inside its stage or caught at the top, so
``generate_response`` always returns displayable text.
"""
from __future__ import annotations

import logging
from collections.abc import Callable
from pathlib import Path

from openai import AsyncOpenAI

from . import replies
from .match_client import HttpMatchOracle, MatchOracle
from .prompts import compose_messages
from .qa import generate_answer, translate_query
from .retrieval import KeywordRetriever, KnowledgeRetriever, RetrievalStrategy, SemanticRetriever
from .schema import ConversationTurn, RetrievalResult
from .settings import ChatSettings, load_settings
from .stores import CorpusStore, CredentialStore, EnvCredentialStore, JsonlCorpus
from .tracing import (
    ATTR_INPUT_VALUE,
    ATTR_LLM_MODEL_NAME,
    ATTR_OUTPUT_VALUE,
    ATTR_RETRIEVAL_DOCUMENTS,
    ATTR_RETRIEVAL_STRATEGY,
    get_tracer,
    traced_stage,
)

logger = logging.getLogger(__name__)

ClientFactory = Callable[[str], AsyncOpenAI]

CORPUS_FILE_NAME = "corpus.jsonl"


class ChatPipeline:
    """Retrieval-augmented answer generation for one chat message at a time.

    Collaborators are injected: the credential is resolved once per call, the
    corpus is read once per call, and the OpenAI client is created per call
    from the credential. Instances hold no per-chat state.

    Usage
    -----
    pipeline = ChatPipeline(
        credentials=InMemoryCredentialStore("sk-..."),
        corpus=InMemoryCorpus([build_document("pravilnik.txt", text)]),
    )
    reply = await pipeline.generate_response("Šta je procedura za evakuaciju?")
    """

    def __init__(
        self,
        credentials: CredentialStore,
        corpus: CorpusStore,
        match_oracle: MatchOracle | None = None,
        settings: ChatSettings | None = None,
        client_factory: ClientFactory | None = None,
    ) -> None:
        self.credentials = credentials
        self.corpus = corpus
        self.match_oracle = match_oracle
        self.settings = settings or ChatSettings()
        self.client_factory = client_factory or self._default_client
        self.tracer = get_tracer("knowledge_bot.pipeline")

    @classmethod
    def from_env(cls) -> "ChatPipeline":
        """Build a pipeline from environment settings, ``.env`` and the JSONL corpus."""
        settings, paths = load_settings()
        oracle = HttpMatchOracle(settings.match_url, timeout=settings.request_timeout) if settings.match_url else None
        return cls(
            credentials=EnvCredentialStore(),
            corpus=JsonlCorpus(Path(paths.data_dir) / CORPUS_FILE_NAME),
            match_oracle=oracle,
            settings=settings,
        )

    def _default_client(self, credential: str) -> AsyncOpenAI:
        return AsyncOpenAI(api_key=credential, timeout=self.settings.request_timeout)

    def build_retriever(self, credential: str) -> KnowledgeRetriever:
        """Semantic strategy first (when an oracle is configured), keyword fallback second."""
        strategies: list[RetrievalStrategy] = []
        if self.match_oracle is not None:
            if getattr(self.match_oracle, "needs_completion_credential", False) is True:
                token = credential
            else:
                token = self.settings.match_token
            strategies.append(SemanticRetriever(self.match_oracle, token=token))
        strategies.append(KeywordRetriever(self.corpus, top_k=self.settings.keyword_top_k))
        return KnowledgeRetriever(strategies, follow_up_triggers=self.settings.follow_up_triggers)

    async def retrieve(self, message: str, client: AsyncOpenAI, credential: str) -> RetrievalResult:
        """Translate the message (when enabled) and assemble its knowledge base."""
        query = message
        if self.settings.translate_queries:
            with traced_stage(self.tracer, "translate", **{ATTR_INPUT_VALUE: message}) as span:
                query = await translate_query(client, message, self.settings)
                span.set_attribute(ATTR_OUTPUT_VALUE, query[:500])

        with traced_stage(self.tracer, "retrieve", **{ATTR_INPUT_VALUE: query}) as span:
            result = await self.build_retriever(credential).retrieve(message, query)
            span.set_attribute(ATTR_RETRIEVAL_STRATEGY, result.strategy)
            span.set_attribute(ATTR_RETRIEVAL_DOCUMENTS, len(result.sources_used))
        return result

    async def _respond(self, message: str, prior_turn: ConversationTurn | None) -> str:
        credential = await self.credentials.get_credential()
        if not credential:
            logger.warning("No completion credential configured, skipping pipeline")
            return replies.MISSING_CREDENTIAL

        client = self.client_factory(credential)
        async with client:
            with self.tracer.start_as_current_span("chat-pipeline") as root:
                root.set_attribute(ATTR_INPUT_VALUE, message[:500])

                result = await self.retrieve(message, client, credential)
                if result.no_content:
                    logger.info("No knowledge base content for a new question")
                    root.set_attribute(ATTR_OUTPUT_VALUE, replies.NO_DOCUMENTS)
                    return replies.NO_DOCUMENTS

                messages = compose_messages(
                    message,
                    result.knowledge_base,
                    prior_turn=prior_turn,
                    organization=self.settings.organization,
                )
                with traced_stage(
                    self.tracer, "generate", **{ATTR_LLM_MODEL_NAME: self.settings.chat_model}
                ) as span:
                    answer = await generate_answer(client, messages, self.settings)
                    span.set_attribute(ATTR_OUTPUT_VALUE, answer[:500])

                root.set_attribute(ATTR_OUTPUT_VALUE, answer[:500])
                return answer

    async def generate_response(self, message: str, prior_turn: ConversationTurn | None = None) -> str:
        """Answer one user message. Never raises.

        Args:
            message: Current user message.
            prior_turn: Most recent user/assistant exchange, if the chat has one.

        Returns:
            Model answer or one of the fixed replies in ``knowledge_bot.replies``.
        """
        try:
            return await self._respond(message, prior_turn)
        except Exception:  # noqa: BLE001
            logger.exception("Unexpected failure while generating a response")
            return replies.UNEXPECTED_ERROR

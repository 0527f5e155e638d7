"""
FAQLens - Provider Ports & Gemini Adapters
===========================================
Narrow capability interfaces for the three external services the core
talks to, plus their Google Gemini implementations via LangChain.

Ports (``typing.Protocol``)
---------------------------
``EmbedderPort``    ``embed(text) -> list[float]``
``ClassifierPort``  ``classify(text, labels, instruction) -> label``
``GeneratorPort``   ``generate(messages, system) -> GenerationResult``

Error Contract
--------------
Every adapter raises ``ProviderError`` when the provider call fails or
returns nothing usable.  The original exception is chained with
``raise ... from exc`` so tracebacks stay intact.

Usage:
    from faqlens.src.core.providers import GeminiEmbedder
    embedder = GeminiEmbedder()
    vector = await embedder.embed("What is the capital of France?")
"""

from __future__ import annotations

from collections.abc import Sequence
from functools import lru_cache
from typing import Literal, Protocol, runtime_checkable

from langchain_core.messages import AIMessage, BaseMessage, ChatMessage, HumanMessage, SystemMessage
from pydantic import BaseModel, create_model

from faqlens.config.settings import settings
from faqlens.src.core.models import ContentPart, FilePart, GenerationResult, ImagePart, Message, TextPart
from faqlens.src.utils.logger import get_logger

logger = get_logger(__name__)


class ProviderError(RuntimeError):
    """An external provider failed or returned no usable result."""


# ══════════════════════════════════════════════════════════════════════
#  PORTS
# ══════════════════════════════════════════════════════════════════════


@runtime_checkable
class EmbedderPort(Protocol):
    """Anything that can turn a text into a fixed-dimension vector."""

    async def embed(self, text: str) -> list[float]: ...


@runtime_checkable
class ClassifierPort(Protocol):
    """Anything that can pick one label of a closed set for a text."""

    async def classify(self, text: str, labels: Sequence[str], instruction: str) -> str: ...


@runtime_checkable
class GeneratorPort(Protocol):
    """Anything that can answer a conversation."""

    async def generate(self, messages: Sequence[Message], system: str) -> GenerationResult: ...


# ══════════════════════════════════════════════════════════════════════
#  GEMINI EMBEDDER
# ══════════════════════════════════════════════════════════════════════


class GeminiEmbedder:
    """
    ``EmbedderPort`` backed by ``GoogleGenerativeAIEmbeddings``.

    Parameters
    ----------
    embeddings
        Optional pre-built LangChain embeddings object.  Defaults to
        ``settings.EMBEDDING_MODEL``.
    """

    __slots__ = ("_embeddings",)

    def __init__(self, embeddings: object | None = None) -> None:
        self._embeddings = embeddings if embeddings is not None else self._init_embeddings()


    @staticmethod
    def _init_embeddings() -> object:
        from langchain_google_genai import GoogleGenerativeAIEmbeddings

        logger.info("Embedding model initialised: %s", settings.EMBEDDING_MODEL)
        return GoogleGenerativeAIEmbeddings(model=settings.EMBEDDING_MODEL, google_api_key=settings.GOOGLE_API_KEY.get_secret_value())


    async def embed(self, text: str) -> list[float]:
        try:
            vector = await self._embeddings.aembed_query(text)  # type: ignore[attr-defined]
        except Exception as exc:
            logger.error("[EMBED] Embedding call failed: %s", exc)
            raise ProviderError(f"Embedding provider failed: {exc}") from exc

        if not vector:
            raise ProviderError("Embedding provider returned no vector.")
        return list(vector)


# ══════════════════════════════════════════════════════════════════════
#  GEMINI CLASSIFIER
# ══════════════════════════════════════════════════════════════════════


@lru_cache(maxsize=8)
def _label_schema(labels: tuple[str, ...]) -> type[BaseModel]:
    """Build (once per label set) a structured-output schema with a ``Literal`` label."""
    return create_model("Classification", label=(Literal[labels], ...))


class GeminiClassifier:
    """
    ``ClassifierPort`` backed by ``ChatGoogleGenerativeAI`` structured output.

    The model is forced to answer with a schema whose only field is a
    ``Literal`` over the allowed labels.
    """

    __slots__ = ("_llm",)

    def __init__(self, llm: object | None = None) -> None:
        self._llm = llm if llm is not None else self._init_llm()


    @staticmethod
    def _init_llm() -> object:
        from langchain_google_genai import ChatGoogleGenerativeAI

        logger.info("Classifier initialised: %s", settings.CLASSIFIER_MODEL)
        return ChatGoogleGenerativeAI(model=settings.CLASSIFIER_MODEL, temperature=0.0, google_api_key=settings.GOOGLE_API_KEY.get_secret_value())


    async def classify(self, text: str, labels: Sequence[str], instruction: str) -> str:
        schema = _label_schema(tuple(labels))

        try:
            runnable = self._llm.with_structured_output(schema)  # type: ignore[attr-defined]
            result = await runnable.ainvoke([SystemMessage(content=instruction), HumanMessage(content=text)])
        except Exception as exc:
            logger.error("[CLASSIFY] Classification call failed: %s", exc)
            raise ProviderError(f"Classification provider failed: {exc}") from exc

        if result is None:
            raise ProviderError("Classification provider returned no result.")
        return result.label


# ══════════════════════════════════════════════════════════════════════
#  GEMINI GENERATOR
# ══════════════════════════════════════════════════════════════════════


def _to_langchain_part(part: ContentPart) -> dict[str, str]:
    if isinstance(part, TextPart):
        return {"type": "text", "text": part.text}
    if isinstance(part, ImagePart):
        return {"type": "image_url", "image_url": part.image}
    if isinstance(part, FilePart):
        return {"type": "media", "mime_type": part.mime_type, "data": part.data}
    raise TypeError(f"Unsupported content part: {type(part).__name__}")


def to_langchain_messages(messages: Sequence[Message], system: str | None = None) -> list[BaseMessage]:
    """Convert FAQLens messages to LangChain messages, optionally led by *system*."""
    converted: list[BaseMessage] = [SystemMessage(content=system)] if system else []
    for message in messages:
        parts = [_to_langchain_part(p) for p in message.content]
        if message.role == "user":
            converted.append(HumanMessage(content=parts))
        elif message.role == "assistant":
            converted.append(AIMessage(content=parts))
        elif message.role == "system":
            converted.append(SystemMessage(content=parts))
        else:
            # roles LangChain has no dedicated class for (e.g. "tool" turns
            # without a tool-call id) keep their name
            converted.append(ChatMessage(role=message.role, content=parts))
    return converted


def _response_text(content: object) -> str:
    """Flatten a chat-model response ``content`` (str or list of parts) to text."""
    if isinstance(content, str):
        return content
    if isinstance(content, list):
        chunks = [c if isinstance(c, str) else c.get("text", "") for c in content if isinstance(c, (str, dict))]
        return "".join(chunks)
    return str(content)


class GeminiGenerator:
    """``GeneratorPort`` backed by ``ChatGoogleGenerativeAI``."""

    __slots__ = ("_llm",)

    def __init__(self, llm: object | None = None) -> None:
        self._llm = llm if llm is not None else self._init_llm()


    @staticmethod
    def _init_llm() -> object:
        from langchain_google_genai import ChatGoogleGenerativeAI

        llm = ChatGoogleGenerativeAI(model=settings.LLM_MODEL, temperature=settings.LLM_TEMPERATURE, max_output_tokens=settings.LLM_MAX_TOKENS, google_api_key=settings.GOOGLE_API_KEY.get_secret_value())
        logger.info("LLM initialised: %s (temperature=%.1f)", settings.LLM_MODEL, settings.LLM_TEMPERATURE)
        return llm


    async def generate(self, messages: Sequence[Message], system: str) -> GenerationResult:
        try:
            response = await self._llm.ainvoke(to_langchain_messages(messages, system))  # type: ignore[attr-defined]
        except Exception as exc:
            logger.error("[GENERATE] LLM call failed: %s", exc)
            raise ProviderError(f"Generation provider failed: {exc}") from exc

        if response is None:
            raise ProviderError("Generation provider returned no response.")
        return GenerationResult(text=_response_text(getattr(response, "content", response)))

"""
FAQLens - FAQ Assistant Service
================================
Composes the augmentation core with the answer-generation provider.
The HTTP layer and the CLI only ever call this module.

Flow of ``answer(messages, faqs)``:
    1. ``FaqAugmenter.augment`` → possibly inject FAQ context.
    2. ``generate`` → answer with ``SYSTEM_PROMPT``.

Callers that already hold augmented messages (the CLI reports what was
injected before answering) call ``generate`` directly.

Provider failures propagate as ``ProviderError``; the outermost
handler converts them into a user-visible error.

Usage:
    from faqlens.src.core.assistant import FaqAssistant
    assistant = FaqAssistant.from_settings()
    result = await assistant.ask("What is the capital of France?", faqs)
"""

from __future__ import annotations

import time
from collections.abc import Sequence

from faqlens.config.prompt_templates import SYSTEM_PROMPT
from faqlens.src.core.augmenter import FaqAugmenter
from faqlens.src.core.faq_cache import FaqEmbeddingCache
from faqlens.src.core.models import ContentPart, FaqEntry, GenerationResult, Message
from faqlens.src.core.providers import GeminiClassifier, GeminiEmbedder, GeminiGenerator, GeneratorPort
from faqlens.src.database.cache_store import CacheStore
from faqlens.src.utils.logger import get_logger

logger = get_logger(__name__)


class FaqAssistant:
    """
    FAQ-aware question answering.

    Parameters
    ----------
    augmenter
        Injects matching FAQ context into the conversation.
    generator
        Produces the final answer from the (possibly augmented) messages.
    system_prompt
        Instruction sent with every generation call.
    """

    __slots__ = ("_augmenter", "_generator", "_system_prompt")

    def __init__(self, augmenter: FaqAugmenter, generator: GeneratorPort, system_prompt: str = SYSTEM_PROMPT) -> None:
        self._augmenter = augmenter
        self._generator = generator
        self._system_prompt = system_prompt


    @classmethod
    def from_settings(cls, store: CacheStore | None = None) -> FaqAssistant:
        """Wire the Gemini adapters and the process-wide cache store."""
        embedder = GeminiEmbedder()
        augmenter = FaqAugmenter(classifier=GeminiClassifier(), embedder=embedder, cache=FaqEmbeddingCache(embedder, store=store))
        return cls(augmenter, GeminiGenerator())


    @property
    def augmenter(self) -> FaqAugmenter:
        return self._augmenter


    async def answer(self, messages: Sequence[Message], faqs: Sequence[FaqEntry]) -> GenerationResult:
        """Augment *messages* with FAQ context, then generate the answer."""
        t_start = time.perf_counter()

        augmented = await self._augmenter.augment(messages, faqs)
        augment_ms = (time.perf_counter() - t_start) * 1000

        result = await self.generate(augmented)
        total_ms = (time.perf_counter() - t_start) * 1000

        logger.info("[ASSISTANT] Answered in %.1fms (augment=%.1fms, %d chars)", total_ms, augment_ms, len(result.text))
        return result


    async def generate(self, messages: Sequence[Message]) -> GenerationResult:
        """Generate the answer for already-augmented *messages*."""
        return await self._generator.generate(messages, system=self._system_prompt)


    async def ask(self, prompt: str | Sequence[ContentPart], faqs: Sequence[FaqEntry]) -> GenerationResult:
        """Answer a single-turn *prompt* (plain text or content parts)."""
        message = Message(role="user", content=prompt if isinstance(prompt, str) else list(prompt))
        return await self.answer([message], faqs)

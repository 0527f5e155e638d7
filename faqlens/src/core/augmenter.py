"""
FAQLens - FAQ Augmentation Engine
==================================
Decides, per request, whether the latest user message is a question
that one of the supplied FAQs can help answer, and if so injects that
FAQ as context right before the message.

Architecture
------------
``Continue`` / ``ShortCircuit``
    Tagged outcome of the guard checks.  Every "leave the conversation
    alone" path is a ``ShortCircuit`` carrying the caller's original
    messages and a reason, so each one can be tested on its own.

``FaqAugmenter``
    Orchestrator.  Flow:
        1. No FAQs                        → short-circuit
        2. Last message missing / not user → short-circuit
        3. No text in that message         → short-circuit
        4. Classifier says not a question  → short-circuit
        5. Embed the query
        6. Resolve FAQ embeddings (cache)
        7. Rank FAQs by cosine similarity
        8. Best above threshold → prepend FAQ context to the message
        9. Return the rebuilt conversation

Error Policy
------------
Guards never raise: malformed or absent input just returns the messages
unchanged.  Provider failures (``ProviderError``) are *not* caught here;
they propagate to the caller, which owns the user-facing error.

Usage:
    from faqlens.src.core.augmenter import FaqAugmenter
    augmenter = FaqAugmenter(classifier, embedder, FaqEmbeddingCache(embedder))
    messages = await augmenter.augment(messages, faqs)
"""

from __future__ import annotations

import dataclasses
from collections.abc import Sequence
from dataclasses import dataclass

from faqlens.config.prompt_templates import CLASSIFICATION_INSTRUCTION, CLASSIFICATION_LABELS, FAQ_CONTEXT_TEMPLATE, QUESTION_LABEL
from faqlens.config.settings import settings
from faqlens.src.core.faq_cache import FaqEmbeddingCache
from faqlens.src.core.models import FaqEntry, Message, ScoredFaqEntry, TextPart
from faqlens.src.core.providers import ClassifierPort, EmbedderPort
from faqlens.src.core.ranker import rank
from faqlens.src.utils.logger import get_logger
from faqlens.src.utils.text_utils import extract_text, format_similarity

logger = get_logger(__name__)


# ══════════════════════════════════════════════════════════════════════
#  GUARD OUTCOMES
# ══════════════════════════════════════════════════════════════════════


@dataclass(frozen=True)
class AugmentationState:
    """What the guards have established so far about one request."""

    messages: Sequence[Message]
    faqs: Sequence[FaqEntry]
    history: tuple[Message, ...] = ()
    recent: Message | None = None
    text: str = ""


@dataclass(frozen=True)
class Continue:
    state: AugmentationState


@dataclass(frozen=True)
class ShortCircuit:
    messages: Sequence[Message]
    reason: str


GuardOutcome = Continue | ShortCircuit


# ══════════════════════════════════════════════════════════════════════
#  AUGMENTER
# ══════════════════════════════════════════════════════════════════════


class FaqAugmenter:
    """
    Best-effort FAQ context injection for a chat conversation.

    Parameters
    ----------
    classifier
        ``ClassifierPort`` deciding question vs. other.
    embedder
        ``EmbedderPort`` for the user's query.
    cache
        ``FaqEmbeddingCache`` resolving FAQ embeddings.
    threshold
        Minimum similarity for injection.  Defaults to
        ``settings.SIMILARITY_THRESHOLD``.
    inclusive
        Whether a score equal to ``threshold`` qualifies.  Defaults to
        ``settings.SIMILARITY_INCLUSIVE``.
    """

    __slots__ = ("_classifier", "_embedder", "_cache", "_threshold", "_inclusive")

    def __init__(self, classifier: ClassifierPort, embedder: EmbedderPort, cache: FaqEmbeddingCache, threshold: float | None = None, inclusive: bool | None = None) -> None:
        self._classifier = classifier
        self._embedder = embedder
        self._cache = cache
        self._threshold: float = settings.SIMILARITY_THRESHOLD if threshold is None else threshold
        self._inclusive: bool = settings.SIMILARITY_INCLUSIVE if inclusive is None else inclusive


    @property
    def cache(self) -> FaqEmbeddingCache:
        return self._cache


    async def augment(self, messages: Sequence[Message], faqs: Sequence[FaqEntry]) -> Sequence[Message]:
        """
        Return *messages* with FAQ context injected when a FAQ matches.

        The caller's sequence is never mutated.  On every short-circuit
        path the very same *messages* object is returned.

        Raises
        ------
        ProviderError
            If classification or embedding fails.
        """
        outcome = await self.evaluate(messages, faqs)
        if isinstance(outcome, ShortCircuit):
            logger.info("[FAQ] %s", outcome.reason)
            return outcome.messages

        state = outcome.state

        query_embedding = await self._embedder.embed(state.text)
        faq_embeddings = await self._cache.resolve(state.faqs)
        best = rank(query_embedding, faq_embeddings)

        if best is not None and self._passes_threshold(best.similarity):
            logger.info('[FAQ] Found relevant FAQ (Similarity: %s): "%s"', format_similarity(best.similarity), best.question)
            return [*state.history, self._inject(best, state.recent)]

        logger.info("[FAQ] No relevant FAQ found above threshold (%s). Max similarity: %s", self._threshold, format_similarity(best.similarity if best else None))
        return [*state.history, state.recent]


    async def evaluate(self, messages: Sequence[Message], faqs: Sequence[FaqEntry]) -> GuardOutcome:
        """Run the guard checks in order, stopping at the first ``ShortCircuit``."""
        outcome: GuardOutcome = Continue(AugmentationState(messages=messages, faqs=faqs))

        for guard in (self._require_faqs, self._require_user_message, self._require_text):
            outcome = guard(outcome.state)
            if isinstance(outcome, ShortCircuit):
                return outcome

        return await self._require_question(outcome.state)

    # ══════════════════════════════════════════════════════════════════
    #  GUARDS
    # ══════════════════════════════════════════════════════════════════

    @staticmethod
    def _require_faqs(state: AugmentationState) -> GuardOutcome:
        if not state.faqs:
            return ShortCircuit(state.messages, "No FAQs supplied.")
        return Continue(state)


    @staticmethod
    def _require_user_message(state: AugmentationState) -> GuardOutcome:
        if not state.messages or state.messages[-1].role != "user":
            return ShortCircuit(state.messages, "No recent user message found.")
        return Continue(dataclasses.replace(state, history=tuple(state.messages[:-1]), recent=state.messages[-1]))


    @staticmethod
    def _require_text(state: AugmentationState) -> GuardOutcome:
        text = extract_text(state.recent)  # type: ignore[arg-type]
        if not text.strip():
            return ShortCircuit(state.messages, "User message content is empty.")
        return Continue(dataclasses.replace(state, text=text))


    async def _require_question(self, state: AugmentationState) -> GuardOutcome:
        label = await self._classifier.classify(state.text, CLASSIFICATION_LABELS, CLASSIFICATION_INSTRUCTION)
        if label != QUESTION_LABEL:
            return ShortCircuit(state.messages, f'Classification is "{label}", skipping FAQ lookup.')
        logger.info('[FAQ] Classification is "%s", proceeding with FAQ lookup.', label)
        return Continue(state)

    # ══════════════════════════════════════════════════════════════════
    #  DECISION HELPERS
    # ══════════════════════════════════════════════════════════════════

    def _passes_threshold(self, similarity: float | None) -> bool:
        if similarity is None:
            return False
        if self._inclusive:
            return similarity >= self._threshold
        return similarity > self._threshold


    @staticmethod
    def _inject(best: ScoredFaqEntry, recent: Message) -> Message:
        """Build a new user message: FAQ context first, then the original parts untouched."""
        context = TextPart(text=FAQ_CONTEXT_TEMPLATE.format(question=best.question, answer=best.answer))
        return Message(role="user", content=[context, *recent.content])

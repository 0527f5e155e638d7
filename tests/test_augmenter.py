import math

import pytest

from faqlens.config.prompt_templates import CLASSIFICATION_INSTRUCTION, CLASSIFICATION_LABELS
from faqlens.src.core.augmenter import Continue, FaqAugmenter, ShortCircuit
from faqlens.src.core.faq_cache import FaqEmbeddingCache
from faqlens.src.core.models import FaqEntry, ImagePart, Message, TextPart
from faqlens.src.core.providers import ProviderError
from faqlens.src.core.ranker import cosine_similarity
from faqlens.src.database.cache_store import SingleSlotCacheStore

QUESTION = "What is the capital of France?"
FAQS = [FaqEntry(question=QUESTION, answer="Paris.")]


def _user(*parts) -> Message:
    return Message(role="user", content=list(parts))


def _build(embedder, classifier, threshold=0.7, inclusive=False) -> FaqAugmenter:
    cache = FaqEmbeddingCache(embedder, store=SingleSlotCacheStore())
    return FaqAugmenter(classifier, embedder, cache, threshold=threshold, inclusive=inclusive)


@pytest.fixture
def providers(fake_embedder_cls, fake_classifier_cls):
    embedder = fake_embedder_cls({QUESTION: [1.0, 0.0, 0.0]})
    classifier = fake_classifier_cls("question")
    return embedder, classifier


# ── No-op paths ──────────────────────────────────────────────────────


@pytest.mark.anyio("asyncio")
async def test_empty_faqs_returns_messages_without_provider_calls(providers):
    embedder, classifier = providers
    messages = [_user(TextPart(text=QUESTION))]

    result = await _build(embedder, classifier).augment(messages, [])

    assert result is messages
    assert embedder.calls == [] and classifier.calls == []


@pytest.mark.anyio("asyncio")
@pytest.mark.parametrize("role", ["assistant", "system"])
async def test_non_user_last_message_is_left_in_place(providers, role):
    embedder, classifier = providers
    messages = [_user(TextPart(text=QUESTION)), Message(role=role, content="Sure, ask away.")]

    result = await _build(embedder, classifier).augment(messages, FAQS)

    assert result is messages
    assert [m.role for m in result] == ["user", role]
    assert embedder.calls == [] and classifier.calls == []


@pytest.mark.anyio("asyncio")
async def test_no_messages_is_a_no_op(providers):
    embedder, classifier = providers

    result = await _build(embedder, classifier).augment([], FAQS)

    assert result == []
    assert classifier.calls == []


@pytest.mark.anyio("asyncio")
@pytest.mark.parametrize("parts", [[TextPart(text="   \n ")], [ImagePart(image="https://example.com/a.png")]])
async def test_blank_user_text_is_a_no_op(providers, parts):
    embedder, classifier = providers
    messages = [_user(*parts)]

    result = await _build(embedder, classifier).augment(messages, FAQS)

    assert result is messages
    assert classifier.calls == []


@pytest.mark.anyio("asyncio")
async def test_non_question_skips_embedding(providers):
    embedder, classifier = providers
    classifier.label = "other"
    original = _user(TextPart(text=QUESTION))
    messages = [original]

    result = await _build(embedder, classifier).augment(messages, FAQS)

    assert list(result) == [original]
    assert result[-1] is original
    assert embedder.calls == []
    assert classifier.calls == [(QUESTION, CLASSIFICATION_LABELS, CLASSIFICATION_INSTRUCTION)]


@pytest.mark.anyio("asyncio")
async def test_evaluate_reports_each_short_circuit_reason(providers):
    embedder, classifier = providers
    augmenter = _build(embedder, classifier)
    question = [_user(TextPart(text=QUESTION))]

    no_faqs = await augmenter.evaluate(question, [])
    not_user = await augmenter.evaluate([Message(role="assistant", content="hi")], FAQS)
    empty = await augmenter.evaluate([_user(TextPart(text=""))], FAQS)
    proceed = await augmenter.evaluate(question, FAQS)

    assert isinstance(no_faqs, ShortCircuit) and "No FAQs" in no_faqs.reason
    assert isinstance(not_user, ShortCircuit) and "user message" in not_user.reason
    assert isinstance(empty, ShortCircuit) and "empty" in empty.reason
    assert isinstance(proceed, Continue)
    assert proceed.state.text == QUESTION
    assert proceed.state.recent is question[0]
    assert proceed.state.history == ()


# ── Matching ─────────────────────────────────────────────────────────


@pytest.mark.anyio("asyncio")
async def test_matching_faq_is_injected_before_original_parts(providers):
    embedder, classifier = providers
    image = ImagePart(image="https://example.com/map.png")
    original = _user(TextPart(text=QUESTION), image)
    earlier = [_user(TextPart(text="Hello")), Message(role="assistant", content="Hi! How can I help?")]
    messages = [*earlier, original]

    result = await _build(embedder, classifier).augment(messages, FAQS)

    assert len(result) == 3
    assert list(result[:2]) == earlier
    injected = result[-1]
    assert injected.role == "user"
    assert "Paris." in injected.content[0].text
    assert "potentially relevant" in injected.content[0].text
    assert injected.content[1:] == [original.content[0], image]
    assert messages[-1] is original and len(messages) == 3


@pytest.mark.anyio("asyncio")
async def test_single_message_match_yields_context_then_original_content(providers):
    embedder, classifier = providers
    messages = [_user(TextPart(text=QUESTION))]

    result = await _build(embedder, classifier).augment(messages, FAQS)

    assert len(result) == 1
    assert "Paris." in result[0].content[0].text
    assert result[0].content[1] == TextPart(text=QUESTION)


@pytest.mark.anyio("asyncio")
async def test_low_similarity_appends_original_message(fake_embedder_cls, fake_classifier_cls):
    faqs = [FaqEntry(question="How do I reset my password?", answer="Use the reset link.")]
    embedder = fake_embedder_cls({QUESTION: [1.0, 0.0], faqs[0].question: [0.5, math.sqrt(0.75)]})
    original = _user(TextPart(text=QUESTION))

    result = await _build(embedder, fake_classifier_cls("question")).augment([original], faqs)

    assert list(result) == [original]
    assert result[0] is original


@pytest.mark.anyio("asyncio")
@pytest.mark.parametrize("inclusive,expected_parts", [(False, 1), (True, 2)])
async def test_threshold_exclusivity_is_configurable(fake_embedder_cls, fake_classifier_cls, inclusive, expected_parts):
    faqs = [FaqEntry(question="Close enough?", answer="Yes.")]
    embedder = fake_embedder_cls({QUESTION: [1.0, 0.0], faqs[0].question: [0.5, math.sqrt(0.75)]})
    # threshold equal to the exact score the ranker will compute
    threshold = cosine_similarity([1.0, 0.0], [0.5, math.sqrt(0.75)])
    augmenter = _build(embedder, fake_classifier_cls("question"), threshold=threshold, inclusive=inclusive)

    result = await augmenter.augment([_user(TextPart(text=QUESTION))], faqs)

    assert len(result[-1].content) == expected_parts


@pytest.mark.anyio("asyncio")
async def test_best_of_several_faqs_wins(fake_embedder_cls, fake_classifier_cls):
    faqs = [
        FaqEntry(question="Opening hours?", answer="9 to 5."),
        FaqEntry(question=QUESTION, answer="Paris."),
        FaqEntry(question="Capital of Spain?", answer="Madrid."),
    ]
    embedder = fake_embedder_cls({QUESTION: [1.0, 0.1], "Opening hours?": [0.0, 1.0], "Capital of Spain?": [0.8, 0.6]})

    result = await _build(embedder, fake_classifier_cls("question")).augment([_user(TextPart(text=QUESTION))], faqs)

    assert "A: Paris." in result[-1].content[0].text


@pytest.mark.anyio("asyncio")
async def test_second_call_with_warm_cache_is_identical_and_skips_faq_embedding(providers):
    embedder, classifier = providers
    augmenter = _build(embedder, classifier)
    messages = [_user(TextPart(text=QUESTION))]

    first = await augmenter.augment(messages, FAQS)
    faq_embeds_after_first = embedder.calls.count(QUESTION)
    second = await augmenter.augment(messages, FAQS)

    assert first == second
    # one call for the query plus one for the FAQ question on the first run;
    # only the query embedding is repeated on the second run
    assert faq_embeds_after_first == 2
    assert embedder.calls.count(QUESTION) == 3
    assert (augmenter.cache.hits, augmenter.cache.misses) == (1, 1)


# ── Provider failures ───────────────────────────────────────────────


@pytest.mark.anyio("asyncio")
async def test_classification_failure_propagates(fake_embedder_cls):
    class BrokenClassifier:
        async def classify(self, text, labels, instruction):
            raise ProviderError("classifier down")

    augmenter = _build(fake_embedder_cls({QUESTION: [1.0]}), BrokenClassifier())

    with pytest.raises(ProviderError):
        await augmenter.augment([_user(TextPart(text=QUESTION))], FAQS)


@pytest.mark.anyio("asyncio")
async def test_embedding_failure_propagates(providers):
    embedder, classifier = providers
    embedder.fail_on = {QUESTION}

    with pytest.raises(ProviderError):
        await _build(embedder, classifier).augment([_user(TextPart(text=QUESTION))], FAQS)

import pytest
from pydantic import ValidationError

from faqlens.src.core.models import EmbeddedFaqEntry, FaqCacheEntry, FaqEntry, FilePart, ImagePart, Message, TextPart


def test_plain_string_content_becomes_one_text_part():
    message = Message(role="user", content="What is the capital of France?")

    assert message.content == [TextPart(text="What is the capital of France?")]


def test_content_parts_are_discriminated_by_type():
    message = Message.model_validate(
        {
            "role": "user",
            "content": [
                {"type": "text", "text": "Look:"},
                {"type": "image", "image": "https://example.com/cat.png"},
                {"type": "file", "data": "aGVsbG8=", "mime_type": "text/plain"},
            ],
        }
    )

    assert [type(p) for p in message.content] == [TextPart, ImagePart, FilePart]


def test_unknown_role_is_rejected():
    with pytest.raises(ValidationError):
        Message(role="robot", content="hi")


def test_tool_turns_are_accepted():
    message = Message(role="tool", content="42 results")

    assert message.role == "tool"
    assert message.content == [TextPart(text="42 results")]


def test_faq_entries_are_immutable():
    faq = FaqEntry(question="Q?", answer="A.")

    with pytest.raises(ValidationError):
        faq.question = "Other?"


def test_cache_entry_requires_entries():
    with pytest.raises(ValidationError):
        FaqCacheEntry(key="[]", entries=())

    entry = FaqCacheEntry(key="k", entries=(EmbeddedFaqEntry(question="Q?", answer="A.", embedding=[1.0]),))
    assert len(entry.entries) == 1

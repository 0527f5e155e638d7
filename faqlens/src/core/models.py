"""
FAQLens - Data Model
=====================
Pydantic models shared by the augmentation core, the provider adapters
and the HTTP layer.

Lifecycle:
  • ``FaqCacheEntry`` lives in the cache store until a request arrives
    with a different FAQ list.
  • Everything else is request-scoped.

All models are frozen: FAQ entries are immutable once received, and the
core never edits a ``Message`` in place; it builds a new one.
"""

from __future__ import annotations

from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

# ── Type Aliases ──────────────────────────────────────────────────────
Role = Literal["system", "user", "assistant", "tool"]
ClassificationLabel = Literal["question", "other"]
Vector = list[float]


# ══════════════════════════════════════════════════════════════════════
#  FAQ ENTRIES
# ══════════════════════════════════════════════════════════════════════


class FaqEntry(BaseModel):
    """A question/answer pair supplied by the caller."""

    model_config = ConfigDict(frozen=True)

    question: str
    answer: str


class EmbeddedFaqEntry(FaqEntry):
    """A ``FaqEntry`` with the embedding of its ``question``."""

    embedding: Vector


class ScoredFaqEntry(EmbeddedFaqEntry):
    """An ``EmbeddedFaqEntry`` scored against one query embedding."""

    similarity: float


class FaqCacheEntry(BaseModel):
    """
    Content of the single cache slot.

    ``entries`` is aligned 1:1 with the FAQ list whose canonical
    serialisation is ``key``.
    """

    model_config = ConfigDict(frozen=True)

    key: str
    entries: tuple[EmbeddedFaqEntry, ...]

    @field_validator("entries")
    @classmethod
    def _entries_non_empty(cls, v: tuple[EmbeddedFaqEntry, ...]) -> tuple[EmbeddedFaqEntry, ...]:
        if not v:
            raise ValueError("FaqCacheEntry.entries must not be empty")
        return v


# ══════════════════════════════════════════════════════════════════════
#  MESSAGES
# ══════════════════════════════════════════════════════════════════════


class TextPart(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: Literal["text"] = "text"
    text: str


class ImagePart(BaseModel):
    """Image given as a URL or a base64 data URI."""

    model_config = ConfigDict(frozen=True)

    type: Literal["image"] = "image"
    image: str
    mime_type: str | None = None


class FilePart(BaseModel):
    """Arbitrary media, base64 encoded."""

    model_config = ConfigDict(frozen=True)

    type: Literal["file"] = "file"
    data: str
    mime_type: str


ContentPart = Annotated[TextPart | ImagePart | FilePart, Field(discriminator="type")]


class Message(BaseModel):
    """
    One turn of the conversation.

    ``content`` also accepts a bare string, which becomes a single
    text part.
    """

    model_config = ConfigDict(frozen=True)

    role: Role
    content: list[ContentPart]

    @field_validator("content", mode="before")
    @classmethod
    def _wrap_plain_text(cls, v: object) -> object:
        if isinstance(v, str):
            return [{"type": "text", "text": v}]
        return v


# ══════════════════════════════════════════════════════════════════════
#  GENERATION
# ══════════════════════════════════════════════════════════════════════


class GenerationResult(BaseModel):
    text: str

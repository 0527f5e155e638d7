"""
FAQLens - Text Utilities
=========================
Helper functions for message text extraction, FAQ list serialisation
and log formatting.

These utilities should remain stateless and side-effect-free.
"""

from __future__ import annotations

import json
from collections.abc import Sequence

from faqlens.src.core.models import FaqEntry, Message, TextPart


# ── Public API ─────────────────────────────────────────────────────────

def extract_text(message: Message) -> str:
    """
    Join the text parts of *message*, in order, with newlines.

    Non-text parts (images, files) are ignored.  The result is *not*
    stripped; callers decide whether whitespace-only text counts.

    Args:
        message: Any chat message.

    Returns:
        The concatenated text, or ``""`` when there are no text parts.
    """
    return "\n".join(part.text for part in message.content if isinstance(part, TextPart))


def canonical_faq_key(faqs: Sequence[FaqEntry]) -> str:
    """
    Serialise a FAQ list into the string used as its cache key.

    Produces compact JSON (``[{"question":…,"answer":…},…]``) in list
    order with non-ASCII characters kept as-is, so two lists share a key
    exactly when they hold the same pairs in the same order.

    Examples::

        [FaqEntry(question="Q?", answer="A.")]  →  '[{"question":"Q?","answer":"A."}]'
        []                                      →  '[]'
    """
    payload = [{"question": faq.question, "answer": faq.answer} for faq in faqs]
    return json.dumps(payload, ensure_ascii=False, separators=(",", ":"))


def format_similarity(value: float | None) -> str:
    """Render a similarity score for logs (two decimals, ``N/A`` if missing)."""
    if value is None:
        return "N/A"
    return f"{value:.2f}"

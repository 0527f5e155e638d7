"""
FAQLens - FAQ Source
=====================
Loads the fallback FAQ list used by the HTTP layer when a request does
not carry its own.

Two JSON layouts are accepted::

    [{"question": "...", "answer": "..."}, ...]
    {"faqs": {"list": [{"question": "...", "answer": "..."}, ...]}}

A missing or malformed file is not fatal: the loader logs a warning and
returns an empty list, which turns FAQ augmentation into a no-op.
"""

from __future__ import annotations

import json
from pathlib import Path

from pydantic import TypeAdapter, ValidationError

from faqlens.src.core.models import FaqEntry
from faqlens.src.utils.logger import get_logger

logger = get_logger(__name__)

_FAQ_LIST_ADAPTER = TypeAdapter(list[FaqEntry])


def load_faqs(path: Path) -> list[FaqEntry]:
    """
    Read a FAQ list from *path*.

    Returns
    -------
    list[FaqEntry]
        Parsed entries in file order, or ``[]`` when the file is
        missing, unreadable, or does not match either layout.
    """
    if not path.exists():
        logger.warning("FAQ file not found: %s; no default FAQs.", path)
        return []

    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except (json.JSONDecodeError, OSError) as exc:
        logger.warning("Could not read FAQ file %s: %s", path, exc)
        return []

    if isinstance(raw, dict):
        raw = raw.get("faqs", {}).get("list", []) if isinstance(raw.get("faqs"), dict) else []

    try:
        faqs = _FAQ_LIST_ADAPTER.validate_python(raw)
    except ValidationError as exc:
        logger.warning("FAQ file %s has an invalid layout: %d error(s).", path, exc.error_count())
        return []

    logger.info("Loaded %d FAQ(s) from %s", len(faqs), path)
    return faqs

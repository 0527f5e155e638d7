"""
FAQLens - API Routes
=====================
Thin HTTP controllers: validate the request, delegate to
``FaqAssistant``, shape the response.  No business logic lives here.

Endpoints:
  - POST /q       → answer a prompt, with optional per-request FAQs
  - GET  /health  → liveness + size of the cached FAQ set

Error mapping:
  - missing body / prompt → 400 ``{"error": ...}``
  - any failure downstream → 500 ``{"error": ...}``
"""

from __future__ import annotations

from functools import lru_cache

from fastapi import APIRouter, Body, Depends
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from faqlens.config.settings import settings
from faqlens.src.core.assistant import FaqAssistant
from faqlens.src.core.models import ContentPart, FaqEntry
from faqlens.src.database.cache_store import get_process_store
from faqlens.src.database.faq_source import load_faqs
from faqlens.src.utils.logger import get_logger

logger = get_logger(__name__)

router = APIRouter()


# ── Request / Response Models ─────────────────────────────────────────

class AskRequest(BaseModel):
    prompt: str | list[ContentPart] | None = None
    faqs: list[FaqEntry] | None = None


class AskResponse(BaseModel):
    text: str


class HealthResponse(BaseModel):
    status: str
    cached_faqs: int


# ── Dependencies ──────────────────────────────────────────────────────

@lru_cache(maxsize=1)
def get_assistant() -> FaqAssistant:
    """Create the shared assistant on first use."""
    return FaqAssistant.from_settings()


@lru_cache(maxsize=1)
def get_default_faqs() -> list[FaqEntry]:
    """FAQ list used when a request does not carry its own."""
    return load_faqs(settings.FAQ_FILE)


# ── Endpoints ─────────────────────────────────────────────────────────

@router.post("/q", response_model=AskResponse)
async def ask(payload: AskRequest | None = Body(default=None), assistant: FaqAssistant = Depends(get_assistant), default_faqs: list[FaqEntry] = Depends(get_default_faqs)):
    if payload is None:
        return JSONResponse(status_code=400, content={"error": "Request body is required"})
    if not payload.prompt:
        return JSONResponse(status_code=400, content={"error": "Prompt is required"})

    faqs = payload.faqs if payload.faqs is not None else default_faqs

    try:
        result = await assistant.ask(payload.prompt, faqs)
    except Exception as exc:
        logger.exception("[API] /q failed.")
        return JSONResponse(status_code=500, content={"error": str(exc) or "An unknown error occurred"})

    return AskResponse(text=result.text)


@router.get("/health", response_model=HealthResponse)
async def health() -> HealthResponse:
    entry = get_process_store().peek()
    return HealthResponse(status="ok", cached_faqs=len(entry.entries) if entry else 0)

"""
FAQLens - Centralized Configuration
====================================
Uses ``pydantic-settings`` (``BaseSettings``) to load *all* configuration
from environment variables and the project-level ``.env`` file.

Security
--------
- ``GOOGLE_API_KEY`` is typed as ``SecretStr`` and has **no default value**.
  If the key is missing at startup, Pydantic will raise a ``ValidationError``
  with a clear error message.  The raw value is never exposed in repr,
  logs, or tracebacks.

Matching Policy
---------------
``SIMILARITY_THRESHOLD`` and ``SIMILARITY_INCLUSIVE`` decide when a FAQ is
close enough to be injected.  With the defaults a FAQ must score strictly
above 0.7 cosine similarity.

Concurrency
-----------
``EMBED_CONCURRENCY`` caps the number of in-flight embedding calls while the
FAQ cache is refreshed (default 8).
"""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application-wide settings.

    Every field is loaded from environment variables (or ``.env``).
    Fields *without* a default are **required**: the app will refuse
    to start until they are provided.

    Attributes
    ----------
    GOOGLE_API_KEY : SecretStr
        API key for Google AI Studio (Gemini).  **Required.**
        Access the raw value with ``settings.GOOGLE_API_KEY.get_secret_value()``.
    ENV : Literal["dev", "prod"]
        Environment mode controlling logging verbosity.
    EMBEDDING_MODEL : str
        Model identifier passed to ``GoogleGenerativeAIEmbeddings``.
    CLASSIFIER_MODEL : str
        Small, fast model used to decide whether a message is a question.
    LLM_MODEL : str
        Model identifier for the answer-generation LLM.
    LLM_TEMPERATURE : float
        Sampling temperature of the answer-generation LLM.
    LLM_MAX_TOKENS : int
        Output token cap of the answer-generation LLM.
    SIMILARITY_THRESHOLD : float
        Cosine similarity a FAQ must reach to be injected as context.
    SIMILARITY_INCLUSIVE : bool
        ``False`` → similarity must be strictly greater than the threshold.
    EMBED_CONCURRENCY : int
        Maximum concurrent embedding calls during a cache refresh.
    FAQ_FILE : Path
        JSON file with the FAQ list used when a request supplies none.
    HOST, PORT
        Bind address of the HTTP server.
    """

    # ── Resolved Absolute Paths ────────────────────────────────────────
    BASE_DIR: Path = Path(__file__).resolve().parent.parent
    FAQ_FILE: Path = BASE_DIR / "data" / "faqs.json"

    # ── Environment Mode ───────────────────────────────────────────────
    ENV: Literal["dev", "prod"] = "dev"

    # ── API Keys (REQUIRED — no default) ───────────────────────────────
    GOOGLE_API_KEY: SecretStr

    # ── Model Configuration ────────────────────────────────────────────
    EMBEDDING_MODEL: str = "models/text-embedding-004"
    CLASSIFIER_MODEL: str = "gemini-1.5-flash-8b"
    LLM_MODEL: str = "gemini-2.0-flash-lite"
    LLM_TEMPERATURE: float = 0.7
    LLM_MAX_TOKENS: int = 8192

    # ── FAQ Matching Policy ────────────────────────────────────────────
    SIMILARITY_THRESHOLD: float = 0.7
    SIMILARITY_INCLUSIVE: bool = False

    # ── Concurrency ────────────────────────────────────────────────────
    EMBED_CONCURRENCY: int = 8

    # ── HTTP Server ────────────────────────────────────────────────────
    HOST: str = "0.0.0.0"
    PORT: int = 3000

    # ── Validators ─────────────────────────────────────────────────────

    @field_validator("SIMILARITY_THRESHOLD")
    @classmethod
    def _threshold_range(cls, v: float) -> float:
        if not -1.0 <= v <= 1.0:
            raise ValueError(f"SIMILARITY_THRESHOLD must be within [-1, 1], got {v}")
        return v


    @field_validator("EMBED_CONCURRENCY")
    @classmethod
    def _concurrency_range(cls, v: int) -> int:
        if not 1 <= v <= 32:
            raise ValueError(f"EMBED_CONCURRENCY must be 1–32, got {v}")
        return v

    # ── Pydantic Settings Configuration ────────────────────────────────
    model_config = SettingsConfigDict(env_file=Path(__file__).resolve().parent.parent.parent / ".env", env_file_encoding="utf-8", extra="ignore")


# ── Singleton Instance ─────────────────────────────────────────────────
# Import this throughout the project:
#     from faqlens.config.settings import settings
settings = Settings()

import os
import sys
from pathlib import Path

import pytest

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.append(str(PROJECT_ROOT))

# Settings refuse to load without a key; tests never reach Gemini.
os.environ.setdefault("GOOGLE_API_KEY", "test-google-api-key")
os.environ.setdefault("ENV", "prod")

from faqlens.src.core.models import GenerationResult  # noqa: E402
from faqlens.src.core.providers import ProviderError  # noqa: E402


@pytest.fixture
def anyio_backend():
    return "asyncio"


class FakeEmbedder:
    """Returns canned vectors per text and records every call."""

    def __init__(self, vectors: dict[str, list[float]], default: list[float] | None = None) -> None:
        self.vectors = vectors
        self.default = default
        self.calls: list[str] = []
        self.fail_on: set[str] = set()

    async def embed(self, text: str) -> list[float]:
        self.calls.append(text)
        if text in self.fail_on:
            raise ProviderError(f"embedding failed for {text!r}")
        if text in self.vectors:
            return self.vectors[text]
        if self.default is not None:
            return self.default
        raise KeyError(text)


class FakeClassifier:
    def __init__(self, label: str = "question") -> None:
        self.label = label
        self.calls: list[tuple[str, tuple[str, ...], str]] = []

    async def classify(self, text, labels, instruction) -> str:
        self.calls.append((text, tuple(labels), instruction))
        return self.label


class FakeGenerator:
    def __init__(self, text: str = "Paris.") -> None:
        self.text = text
        self.calls: list[tuple[list, str]] = []

    async def generate(self, messages, system) -> GenerationResult:
        self.calls.append((list(messages), system))
        return GenerationResult(text=self.text)


@pytest.fixture
def fake_embedder_cls():
    return FakeEmbedder


@pytest.fixture
def fake_classifier_cls():
    return FakeClassifier


@pytest.fixture
def fake_generator_cls():
    return FakeGenerator

"""Shared test configuration, pytest markers and a fake embedding model."""

import numpy as np
import pytest

from api.router import limiter
from services.text_embedder import SKILL_PROMPTS, ModelHandle, TextEmbedder

# Unknown texts are orthogonal to every prompt, so they are never skill-like.
DEFAULT_VECTOR = [0.0, 0.0, 0.0, 1.0]


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "integration: loads the real embedding model (slow, downloads weights)"
    )


class FakeEncoder:
    """Stands in for SentenceTransformer: looks vectors up by normalized text."""

    def __init__(self, vectors: dict[str, list[float]], default=DEFAULT_VECTOR):
        self.vectors = {k.strip().lower(): v for k, v in vectors.items()}
        self.default = default
        self.calls: list[str] = []

    def encode(self, text, convert_to_numpy=True):
        self.calls.append(text)
        return np.array(self.vectors.get(text.strip().lower(), self.default), dtype=np.float32)


def prompt_vectors() -> dict[str, list[float]]:
    """First prompt -> e0, every other prompt -> e1."""
    vectors = {p: [0.0, 1.0, 0.0, 0.0] for p in SKILL_PROMPTS}
    vectors[SKILL_PROMPTS[0]] = [1.0, 0.0, 0.0, 0.0]
    return vectors


def make_embedder(vectors: dict[str, list[float]] | None = None) -> tuple[TextEmbedder, FakeEncoder]:
    encoder = FakeEncoder({**prompt_vectors(), **(vectors or {})})
    return TextEmbedder(handle=ModelHandle(lambda: encoder)), encoder


@pytest.fixture
def fake_embedder():
    return make_embedder


@pytest.fixture(autouse=True)
def _disable_rate_limit(monkeypatch):
    monkeypatch.setattr(limiter, "enabled", False)

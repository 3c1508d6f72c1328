"""Shared dependencies for API routes."""

from services.text_embedder import TextEmbedder, text_embedder


def get_text_embedder() -> TextEmbedder:
    return text_embedder

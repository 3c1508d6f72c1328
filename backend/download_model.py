#!/usr/bin/env python3
"""Pre-fetch the embedding model so the first comparison starts fast.

Usage (from the backend/ directory):
    python download_model.py

Model name and cache folder come from config (EMBEDDING_MODEL_NAME,
EMBEDDING_CACHE_DIR). Already-cached models are loaded from disk.
"""

import sys

from config import settings
from services.text_embedder import load_sentence_transformer


def download() -> bool:
    """Download (or load from cache) the configured model."""
    name = settings.embedding_model_name
    cache = settings.embedding_cache_dir or "default cache"
    print(f"  [DL] {name} -> {cache}")
    try:
        model = load_sentence_transformer()
    except Exception as e:
        print(f"  [ERROR] {name}: {e}")
        return False
    print(f"  [OK] {name} ({model.get_sentence_embedding_dimension()}-dim embeddings)")
    return True


def main() -> int:
    print("=== Embedding Model Downloader ===\n")
    ok = download()
    print("\n[DONE]" if ok else "\n[FAILED]")
    return 0 if ok else 1


if __name__ == "__main__":
    sys.exit(main())

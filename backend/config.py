import json
from typing import Annotated

from pydantic import field_validator
from pydantic_settings import BaseSettings, NoDecode


class Settings(BaseSettings):
    max_upload_size_mb: int = 5
    max_text_chars: int = 50000
    cors_origins: Annotated[list[str], NoDecode] = [
        "http://localhost:5173",
        "http://localhost:1420",
        "http://tauri.localhost",
        "https://tauri.localhost",
        "tauri://localhost",
    ]
    rate_limit: str = "10/minute"
    rate_limit_enabled: bool = True
    debug: bool = False

    # Embedding comparator
    embedding_model_name: str = "sentence-transformers/all-MiniLM-L6-v2"
    embedding_cache_dir: str = ""  # empty -> sentence-transformers default cache
    skill_phrase_threshold: float = 0.35  # chunk counts as skill-like above this
    phrase_match_threshold: float = 0.5  # job/CV phrase pair accepted above this

    # Keyword analyzer: terms appended to the built-in vocabulary
    extra_skill_keywords: Annotated[list[str], NoDecode] = []

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "protected_namespaces": ("settings_",)}

    @field_validator("cors_origins", "extra_skill_keywords", mode="before")
    @classmethod
    def _parse_list(cls, raw):
        """Accept a comma-separated string or a JSON list."""
        if not isinstance(raw, str):
            return raw
        if raw.startswith("["):
            return json.loads(raw)
        return [o.strip() for o in raw.split(",") if o.strip()]


settings = Settings()

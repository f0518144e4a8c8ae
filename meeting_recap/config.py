from __future__ import annotations

from functools import lru_cache

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Provider and pipeline settings, read from the environment or ``.env``."""

    # Text-generation provider
    llm_provider: str = "anthropic"  # "anthropic", "openai" or "ollama"
    llm_model: str = ""  # empty -> provider default
    anthropic_api_key: str = ""
    openai_api_key: str = ""
    ollama_base_url: str = "http://localhost:11434"
    max_tokens: int = 4096

    # Pipeline
    chunk_size_bytes: int = 1024 * 1024
    stream_timeout_seconds: float = 300.0
    min_supplementary_items: int = 2

    # Server
    api_host: str = "0.0.0.0"
    api_port: int = 8000
    log_level: str = "INFO"

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "extra": "ignore"}


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Load settings once per process.

    An unreadable ``.env`` is not fatal: the environment and the defaults
    above are used instead.
    """
    try:
        return Settings()
    except Exception:
        return Settings(_env_file=None)  # type: ignore[call-arg]

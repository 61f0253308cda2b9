"""Central configuration via Pydantic Settings. All values driven by env vars."""

from __future__ import annotations

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # API Keys
    openai_api_key: str = ""
    google_api_key: str = ""

    # Embedding
    embedding_model: str = "text-embedding-3-small"
    embedding_dimensions: int = 1536
    embedding_batch_size: int = 100

    # LLM / Gemini
    gemini_model: str = "gemini-2.5-flash"
    gemini_temperature: float = 0.1
    gemini_max_tokens: int = 4096

    # Context building
    max_results: int = 20
    max_tokens: int = 10_000
    min_threshold: float = 0.2
    chars_per_token: int = 4
    hybrid_oversample_factor: int = 3

    # Candidate pool fetched from the record store
    simple_pool_limit: int = 50
    analysis_pool_limit: int = 100

    # External capability timeouts (seconds)
    llm_timeout_s: float = 30.0
    semantic_timeout_s: float = 20.0

    # Chat session cache
    session_cache_max_size: int = 256
    session_cache_ttl_s: float = 3600.0

    # Response formatting
    page_size: int = 10

    # Storage paths
    records_path: str = "data/audit_results.json"
    embedding_cache_db_path: str = "data/embedding_cache.db"
    embedding_cache_ttl_s: float = 24 * 60 * 60

    # Server
    host: str = "0.0.0.0"
    port: int = 8000
    log_level: str = "INFO"

    model_config = {"env_file": ".env", "env_prefix": "AUDIT_RAG_"}

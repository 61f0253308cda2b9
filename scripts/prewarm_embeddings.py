"""Embed every audit record once so later semantic queries hit the cache.

Usage:
    python scripts/prewarm_embeddings.py

Reads AUDIT_RAG_RECORDS_PATH and AUDIT_RAG_OPENAI_API_KEY from .env or environment.
"""

from __future__ import annotations

import asyncio

from audit_rag.api.app import create_services
from audit_rag.config.settings import Settings
from audit_rag.observability.logger import setup_logging


async def main() -> None:
    settings = Settings()
    setup_logging(level=settings.log_level, json_output=False)

    services = await create_services(settings)
    records = await services.record_store.all_records()
    print(f"Loaded {len(records)} audit records from {settings.records_path}")

    if not services.context_builder.semantic_available:
        print("Embedding provider not configured; nothing to prewarm.")
        return

    embedded = await services.context_builder.prewarm_cache(records)
    print(f"Embedded {embedded} records into {settings.embedding_cache_db_path}")


if __name__ == "__main__":
    asyncio.run(main())

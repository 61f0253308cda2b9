"""In-memory record store loaded from a JSON export of audit results."""

from __future__ import annotations

import asyncio
import json
from pathlib import Path

from audit_rag.config.constants import PROJECT_TYPE_ALIASES
from audit_rag.exceptions import RetrievalError
from audit_rag.models.domain import AuditRecord, ExtractedFilters
from audit_rag.observability.logger import get_logger
from audit_rag.scoring.severity import severity_label

logger = get_logger("memory_store")


def _project_type_terms(project_type: str) -> list[str]:
    return [alias for alias, canonical in PROJECT_TYPE_ALIASES.items() if canonical == project_type] + [
        project_type.lower()
    ]


def matches_filters(record: AuditRecord, filters: ExtractedFilters) -> bool:
    """Structured pre-filter; keywords are left to ranking."""
    if filters.year and str(record.year).strip() != filters.year:
        return False
    if filters.department and filters.department.lower() not in record.department.lower():
        return False
    if filters.severity and severity_label(record.nilai) not in filters.severity:
        return False
    if filters.project_type:
        haystack = f"{record.project_name} {record.risk_area}".lower()
        if not any(term in haystack for term in _project_type_terms(filters.project_type)):
            return False
    return True


class InMemoryRecordStore:
    def __init__(self, records: list[AuditRecord] | None = None) -> None:
        self._records = list(records or [])

    @classmethod
    def from_json_file(cls, path: str | Path) -> InMemoryRecordStore:
        """Accepts a JSON list of records or an object with an ``auditResults`` list."""
        path = Path(path)
        if not path.exists():
            logger.warning("records_file_missing", path=str(path))
            return cls()

        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            raise RetrievalError(f"Failed to load audit results from {path}: {e}") from e
        if isinstance(data, dict):
            data = data.get("auditResults", [])
        records = [AuditRecord.from_dict(item) for item in data if isinstance(item, dict)]
        logger.info("records_loaded", path=str(path), count=len(records))
        return cls(records)

    @classmethod
    async def load(cls, path: str | Path) -> InMemoryRecordStore:
        return await asyncio.to_thread(cls.from_json_file, path)

    async def fetch(self, filters: ExtractedFilters, limit: int) -> list[AuditRecord]:
        matched = [r for r in self._records if matches_filters(r, filters)]
        logger.debug("records_fetched", matched=len(matched), limit=limit)
        return matched[:limit]

    async def all_records(self) -> list[AuditRecord]:
        return list(self._records)

    async def count(self) -> int:
        return len(self._records)

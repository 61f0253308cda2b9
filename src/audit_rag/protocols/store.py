"""Protocol for the record store that materializes candidate pools."""

from __future__ import annotations

from typing import Protocol

from audit_rag.models.domain import AuditRecord, ExtractedFilters


class RecordStore(Protocol):
    async def fetch(self, filters: ExtractedFilters, limit: int) -> list[AuditRecord]: ...

    async def all_records(self) -> list[AuditRecord]: ...

    async def count(self) -> int: ...

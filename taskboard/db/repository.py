"""Storage interface for task records."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Protocol

from taskboard.models.task_models import Task

# Fields a caller may write; id and timestamps are owned by the store.
WRITABLE_FIELDS: tuple[str, ...] = ("title", "description", "status", "due_date")


class TaskRepository(Protocol):
    """Create/read/update/delete over task records.

    Implementations persist whatever they are given. Validation happens
    before a record reaches the repository.
    """

    async def ensure_schema(self) -> None: ...

    async def ping(self) -> None: ...

    async def create(self, record: Mapping[str, Any]) -> Task: ...

    async def get(self, task_id: str) -> Task | None: ...

    async def list_tasks(self, *, status: str | None = None, limit: int = 100) -> list[Task]: ...

    async def update(self, task_id: str, changes: Mapping[str, Any]) -> Task | None: ...

    async def delete(self, task_id: str) -> bool: ...


def writable(record: Mapping[str, Any]) -> dict[str, Any]:
    """Keep only the caller-writable task fields."""
    return {k: record[k] for k in WRITABLE_FIELDS if k in record}

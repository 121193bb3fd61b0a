"""Task service: validates candidate records before they reach storage."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

import structlog

from taskboard.core.errors import TaskNotFoundError, TaskValidationError
from taskboard.core.validation import (
    ALLOWED_STATUSES,
    MSG_NOT_INCLUDED,
    FieldError,
    validate_task,
)
from taskboard.db.repository import WRITABLE_FIELDS, TaskRepository, writable
from taskboard.models.task_models import Task

log = structlog.get_logger(__name__)


class TaskService:
    """Create, read, update and delete tasks through a `TaskRepository`."""

    def __init__(self, repository: TaskRepository) -> None:
        self.repository = repository

    def _check(self, candidate: Mapping[str, Any], *, task_id: str | None = None) -> None:
        result = validate_task(candidate)
        if result.ok:
            return
        log.info(
            "task_validation_failed",
            task_id=task_id,
            errors=[f"{e.field}:{e.kind}" for e in result.errors],
        )
        raise TaskValidationError(list(result.errors))

    async def create_task(self, payload: Mapping[str, Any]) -> Task:
        record = writable(payload)
        self._check(record)
        task = await self.repository.create(record)
        log.info("task_created", task_id=task.id, status=task.status)
        return task

    async def get_task(self, task_id: str) -> Task:
        task = await self.repository.get(task_id)
        if task is None:
            raise TaskNotFoundError(task_id)
        return task

    async def list_tasks(self, *, status: str | None = None, limit: int = 100) -> list[Task]:
        if status is not None and status not in ALLOWED_STATUSES:
            raise TaskValidationError([FieldError("status", "inclusion", MSG_NOT_INCLUDED)])
        return await self.repository.list_tasks(status=status, limit=limit)

    async def replace_task(self, task_id: str, payload: Mapping[str, Any]) -> Task:
        """Full update: fields absent from `payload` are cleared."""
        await self.get_task(task_id)
        record = {name: payload.get(name) for name in WRITABLE_FIELDS}
        self._check(record, task_id=task_id)
        return await self._apply(task_id, record)

    async def update_task(self, task_id: str, changes: Mapping[str, Any]) -> Task:
        """Partial update: `changes` is merged onto the stored record and re-validated."""
        current = await self.get_task(task_id)
        delta = writable(changes)
        if not delta:
            return current
        merged = {**current.model_dump(include=set(WRITABLE_FIELDS)), **delta}
        self._check(merged, task_id=task_id)
        return await self._apply(task_id, delta)

    async def _apply(self, task_id: str, changes: Mapping[str, Any]) -> Task:
        task = await self.repository.update(task_id, changes)
        if task is None:
            # Deleted between the read and the write.
            raise TaskNotFoundError(task_id)
        log.info("task_updated", task_id=task_id, fields=sorted(changes))
        return task

    async def delete_task(self, task_id: str) -> None:
        if not await self.repository.delete(task_id):
            raise TaskNotFoundError(task_id)
        log.info("task_deleted", task_id=task_id)

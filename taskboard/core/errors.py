"""Domain exceptions shared by the service, the API and the client."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from taskboard.core.validation import FieldError


class TaskboardError(Exception):
    """Base class for taskboard errors."""


class TaskValidationError(TaskboardError):
    """A candidate task record failed validation."""

    def __init__(self, errors: list[FieldError]) -> None:
        self.errors = list(errors)
        summary = "; ".join(f"{e.field} {e.message}" for e in self.errors)
        super().__init__(summary or "validation failed")

    def fields(self) -> set[str]:
        return {e.field for e in self.errors}


class TaskNotFoundError(TaskboardError):
    def __init__(self, task_id: str) -> None:
        self.task_id = task_id
        super().__init__(f"Task not found: {task_id}")


class TaskApiError(TaskboardError):
    """Unexpected response from the task HTTP API."""

    def __init__(self, status_code: int, detail: str | None = None) -> None:
        self.status_code = status_code
        self.detail = detail
        super().__init__(f"HTTP {status_code}: {detail or 'request failed'}")

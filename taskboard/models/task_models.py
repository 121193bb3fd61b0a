"""Pydantic models for task records and API payloads."""

from __future__ import annotations

from datetime import date, datetime
from enum import Enum

from pydantic import BaseModel, Field


class TaskStatus(str, Enum):
    pending = "pending"
    doing = "doing"
    done = "done"


class Task(BaseModel):
    """A persisted task record."""

    id: str
    title: str | None = None
    description: str | None = None
    # Stored as a plain string: storage does not enforce the enumeration.
    status: str | None = None
    due_date: date | None = None
    created_at: datetime
    updated_at: datetime


class TaskPayload(BaseModel):
    """Client-submitted task fields.

    Every field is optional so that presence and inclusion are reported by
    `validate_task` rather than by request parsing.
    """

    title: str | None = None
    description: str | None = None
    status: str | None = None
    due_date: date | None = None


class FieldErrorOut(BaseModel):
    field: str
    kind: str
    message: str


class ValidationErrorResponse(BaseModel):
    detail: str = "Validation failed"
    errors: list[FieldErrorOut] = Field(default_factory=list)


class NotFoundResponse(BaseModel):
    detail: str = "Task not found"

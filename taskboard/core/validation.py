"""Task record validation rules.

`validate_task` checks a candidate record and reports every offending field
at once. It knows nothing about storage; the service calls it before any
create or update reaches the repository.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Literal

from taskboard.models.task_models import TaskStatus

TITLE_MIN_LENGTH = 3
ALLOWED_STATUSES: frozenset[str] = frozenset(s.value for s in TaskStatus)

ErrorKind = Literal["presence", "length", "inclusion"]

MSG_BLANK = "can't be blank"
MSG_TOO_SHORT = f"is too short (minimum is {TITLE_MIN_LENGTH} characters)"
MSG_NOT_INCLUDED = "is not included in the list"


@dataclass(frozen=True)
class FieldError:
    field: str
    kind: ErrorKind
    message: str


@dataclass(frozen=True)
class ValidationResult:
    errors: tuple[FieldError, ...] = field(default_factory=tuple)

    @property
    def ok(self) -> bool:
        return not self.errors

    def for_field(self, name: str) -> list[FieldError]:
        return [e for e in self.errors if e.field == name]


def _as_text(value: Any) -> str | None:
    return value if isinstance(value, str) else None


def _is_blank(value: str | None) -> bool:
    return value is None or not value.strip()


def validate_title(value: Any) -> list[FieldError]:
    text = _as_text(value)
    errors: list[FieldError] = []
    if _is_blank(text):
        errors.append(FieldError("title", "presence", MSG_BLANK))
    # A missing title counts as length 0.
    if len(text or "") < TITLE_MIN_LENGTH:
        errors.append(FieldError("title", "length", MSG_TOO_SHORT))
    return errors


def validate_status(value: Any) -> list[FieldError]:
    text = _as_text(value)
    errors: list[FieldError] = []
    if _is_blank(text):
        errors.append(FieldError("status", "presence", MSG_BLANK))
    if text not in ALLOWED_STATUSES:
        errors.append(FieldError("status", "inclusion", MSG_NOT_INCLUDED))
    return errors


def validate_task(candidate: Mapping[str, Any]) -> ValidationResult:
    """Validate a candidate task record.

    Returns a result carrying every field error found; `result.ok` is true
    only when `title` and `status` both pass.
    """
    errors = validate_title(candidate.get("title")) + validate_status(candidate.get("status"))
    return ValidationResult(errors=tuple(errors))

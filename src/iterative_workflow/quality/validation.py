"""Non-raising validation of agent JSON against the pydantic schemas."""

import json
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ValidationError

M = TypeVar("M", bound=BaseModel)


@dataclass(frozen=True)
class ValidationIssue:
    """One field-level validation failure.

    ``path`` is the dotted location of the failing field (``scores.security``,
    ``issues.0.severity``), or ``""`` for document-level failures.
    """

    path: str
    message: str


@dataclass(frozen=True)
class ValidationResult(Generic[M]):
    success: bool
    data: M | None
    errors: tuple[ValidationIssue, ...]


def _issues_from_error(error: ValidationError) -> tuple[ValidationIssue, ...]:
    return tuple(
        ValidationIssue(
            path=".".join(str(part) for part in detail["loc"]),
            message=detail["msg"],
        )
        for detail in error.errors()
    )


def safe_validate(model: type[M], data: Any) -> ValidationResult[M]:
    """Validate ``data`` against ``model`` without raising on invalid input."""
    try:
        validated = model.model_validate(data)
    except ValidationError as e:
        return ValidationResult(success=False, data=None, errors=_issues_from_error(e))
    return ValidationResult(success=True, data=validated, errors=())


def parse_and_validate(model: type[M], json_text: str) -> ValidationResult[M]:
    """Parse ``json_text`` and validate it; malformed JSON becomes a single issue."""
    try:
        parsed = json.loads(json_text)
    except json.JSONDecodeError as e:
        return ValidationResult(
            success=False,
            data=None,
            errors=(ValidationIssue(path="", message=f"Invalid JSON: {e}"),),
        )
    return safe_validate(model, parsed)


def format_validation_errors(errors: tuple[ValidationIssue, ...] | list[ValidationIssue]) -> str:
    return "\n".join(
        f"{issue.path}: {issue.message}" if issue.path else issue.message for issue in errors
    )

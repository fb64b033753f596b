"""Validation models - diagnostics and results."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any

from rpclens.config.constants import DEFAULT_DIAGNOSTIC_SOURCE
from rpclens.scanner.models import Span


class Severity(Enum):
    """Diagnostic severity level."""

    ERROR = "error"
    WARNING = "warning"


class DiagnosticCode(Enum):
    """Machine-readable diagnostic codes."""

    PROCEDURE_NOT_FOUND = "procedure_not_found"
    WRONG_CALL_TYPE = "wrong_call_type"
    INVALID_TYPE = "invalid_type"
    UNRECOGNIZED_KEYS = "unrecognized_keys"
    UNEXPECTED_INPUT = "unexpected_input"
    TOO_SMALL = "too_small"
    TOO_BIG = "too_big"
    INVALID_ENUM_VALUE = "invalid_enum_value"
    INVALID_STRING = "invalid_string"
    NOT_MULTIPLE_OF = "not_multiple_of"
    CUSTOM = "custom"
    UNBALANCED_PARENTHESES = "unbalanced_parentheses"
    SCAN_ERROR = "scan_error"


@dataclass(frozen=True, slots=True)
class Diagnostic:
    """A positioned problem found in source text."""

    message: str
    code: DiagnosticCode
    span: Span
    severity: Severity = Severity.ERROR
    path: tuple[str, ...] = ()
    source: str = DEFAULT_DIAGNOSTIC_SOURCE

    def to_dict(self) -> dict[str, Any]:
        """Editor-host payload: zero-based offsets, 1-based line/column."""
        return {
            "message": self.message,
            "code": self.code.value,
            "severity": self.severity.value,
            "path": list(self.path),
            "source": self.source,
            **self.span.to_dict(),
        }


@dataclass(frozen=True, slots=True)
class ValidationResult:
    """Errors and warnings from validating one or more calls."""

    errors: tuple[Diagnostic, ...] = ()
    warnings: tuple[Diagnostic, ...] = ()

    @property
    def is_valid(self) -> bool:
        return not self.errors

    @property
    def diagnostics(self) -> tuple[Diagnostic, ...]:
        """Errors followed by warnings."""
        return self.errors + self.warnings

    def merge(self, other: ValidationResult) -> ValidationResult:
        return ValidationResult(
            errors=self.errors + other.errors,
            warnings=self.warnings + other.warnings,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "is_valid": self.is_valid,
            "errors": [d.to_dict() for d in self.errors],
            "warnings": [d.to_dict() for d in self.warnings],
        }

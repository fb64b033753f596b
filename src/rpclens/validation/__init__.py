"""Validation module - schema checks, diagnostics, and the result cache."""

from rpclens.validation.cache import CacheStats, ValidationCache
from rpclens.validation.models import Diagnostic, DiagnosticCode, Severity, ValidationResult
from rpclens.validation.validator import validate, validate_call

__all__ = [
    "CacheStats",
    "Diagnostic",
    "DiagnosticCode",
    "Severity",
    "ValidationCache",
    "ValidationResult",
    "validate",
    "validate_call",
]

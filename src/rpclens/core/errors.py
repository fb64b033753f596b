"""rpclens error types with typed error codes.

Error code ranges:
- 2xxx: Config
- 3xxx: Catalog

These are load-time failures only. Problems found in the analyzed source text
are reported as diagnostics, never raised.
"""

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any


class ErrorCode(IntEnum):
    """Typed error codes for programmatic handling."""

    # Config (2xxx)
    CONFIG_PARSE_ERROR = 2001
    CONFIG_INVALID_VALUE = 2002
    CONFIG_FILE_NOT_FOUND = 2004

    # Catalog (3xxx)
    CATALOG_FILE_NOT_FOUND = 3001
    CATALOG_PARSE_ERROR = 3002
    CATALOG_INVALID_DOCUMENT = 3003


@dataclass(frozen=True, slots=True)
class RpcLensError(Exception):
    """Base error with structured context for CLI and JSON output."""

    code: ErrorCode
    message: str
    retryable: bool = False
    details: dict[str, Any] = field(default_factory=dict)

    @property
    def error_name(self) -> str:
        """String identifier for logging (e.g., 'CATALOG_PARSE_ERROR')."""
        return self.code.name

    def to_dict(self) -> dict[str, Any]:
        """Serialize for JSON responses."""
        return {
            "code": self.code.value,
            "error": self.error_name,
            "message": self.message,
            "retryable": self.retryable,
            "details": self.details,
        }

    def __str__(self) -> str:
        return f"[{self.code.value}] {self.error_name}: {self.message}"


class ConfigError(RpcLensError):
    """Configuration-related errors."""

    @classmethod
    def parse_error(cls, path: str, reason: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_PARSE_ERROR,
            message=f"Failed to parse config at {path}: {reason}",
            details={"path": path, "reason": reason},
        )

    @classmethod
    def invalid_value(cls, field: str, value: Any, reason: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_INVALID_VALUE,
            message=f"Invalid value for '{field}': {reason}",
            details={"field": field, "value": str(value), "reason": reason},
        )

    @classmethod
    def file_not_found(cls, path: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_FILE_NOT_FOUND,
            message=f"Config file not found: {path}",
            details={"path": path},
        )


class CatalogError(RpcLensError):
    """Procedure catalog loading errors."""

    @classmethod
    def file_not_found(cls, path: str) -> "CatalogError":
        return cls(
            code=ErrorCode.CATALOG_FILE_NOT_FOUND,
            message=f"Catalog file not found: {path}",
            details={"path": path},
        )

    @classmethod
    def parse_error(cls, path: str, reason: str) -> "CatalogError":
        return cls(
            code=ErrorCode.CATALOG_PARSE_ERROR,
            message=f"Failed to parse catalog at {path}: {reason}",
            details={"path": path, "reason": reason},
        )

    @classmethod
    def invalid_document(cls, path: str, reason: str) -> "CatalogError":
        return cls(
            code=ErrorCode.CATALOG_INVALID_DOCUMENT,
            message=f"Invalid catalog document at {path}: {reason}",
            details={"path": path, "reason": reason},
        )

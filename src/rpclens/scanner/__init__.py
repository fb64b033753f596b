"""Scanner module - call-site detection and argument literal parsing."""

from rpclens.scanner.models import (
    UNDEFINED,
    ArrayLiteral,
    CallKind,
    ParsedCall,
    ScanError,
    ScanErrorCode,
    ScanResult,
    Span,
    UnparsedExpression,
    Value,
)
from rpclens.scanner.scanner import position_at, scan

__all__ = [
    "UNDEFINED",
    "ArrayLiteral",
    "CallKind",
    "ParsedCall",
    "ScanError",
    "ScanErrorCode",
    "ScanResult",
    "Span",
    "UnparsedExpression",
    "Value",
    "position_at",
    "scan",
]

"""Scanner models - call sites, spans, and parsed argument values."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Union


class CallKind(Enum):
    """Kind of procedure a call site invokes."""

    QUERY = "query"
    MUTATION = "mutation"

    @classmethod
    def from_verb(cls, verb: str) -> CallKind:
        """Map the call verb (`query` / `mutate`) to a kind."""
        return cls.MUTATION if verb == "mutate" else cls.QUERY

    @property
    def verb(self) -> str:
        return "mutate" if self is CallKind.MUTATION else "query"


class _Undefined(Enum):
    """Sentinel type for an absent value, distinct from null."""

    UNDEFINED = "undefined"

    def __repr__(self) -> str:
        return "UNDEFINED"

    def __bool__(self) -> bool:
        return False


UNDEFINED = _Undefined.UNDEFINED


@dataclass(frozen=True, slots=True)
class UnparsedExpression:
    """A sub-expression that is not a literal (call, constructor, identifier...)."""

    text: str


@dataclass(frozen=True, slots=True)
class ArrayLiteral:
    """An array literal kept as raw text; elements are not decomposed."""

    text: str


# str | int | float | bool | None | UNDEFINED | dict[str, Value] | UnparsedExpression | ArrayLiteral
Value = Union[
    str,
    int,
    float,
    bool,
    None,
    _Undefined,
    dict[str, Any],
    UnparsedExpression,
    ArrayLiteral,
]


@dataclass(frozen=True, slots=True)
class Span:
    """Location in source text.

    `start`/`end` are zero-based character offsets (`end` exclusive);
    `line`/`column` are 1-based and describe `start`.
    """

    start: int
    end: int
    line: int
    column: int

    def contains(self, offset: int) -> bool:
        return self.start <= offset <= self.end

    def to_dict(self) -> dict[str, int]:
        return {"start": self.start, "end": self.end, "line": self.line, "column": self.column}


@dataclass(frozen=True, slots=True)
class ParsedCall:
    """One recognized call site."""

    procedure_path: tuple[str, ...]
    kind: CallKind
    argument: Value
    span: Span
    raw_text: str
    argument_text: str

    @property
    def procedure(self) -> str:
        """Dotted procedure name (e.g. 'user.get')."""
        return ".".join(self.procedure_path)

    def to_dict(self) -> dict[str, Any]:
        return {
            "procedure": self.procedure,
            "kind": self.kind.value,
            "argument": value_to_json(self.argument),
            "span": self.span.to_dict(),
            "raw_text": self.raw_text,
        }


class ScanErrorCode(Enum):
    """Why a call site could not be scanned."""

    UNBALANCED_PARENTHESES = "unbalanced_parentheses"
    PARSE_FAILURE = "scan_error"


@dataclass(frozen=True, slots=True)
class ScanError:
    """A malformed call site; the rest of the text is still scanned."""

    message: str
    span: Span
    code: ScanErrorCode = ScanErrorCode.UNBALANCED_PARENTHESES

    def to_dict(self) -> dict[str, Any]:
        return {"message": self.message, "code": self.code.value, "span": self.span.to_dict()}


@dataclass
class ScanResult:
    """Calls and errors from one scan of a document."""

    calls: list[ParsedCall] = field(default_factory=list)
    errors: list[ScanError] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "calls": [c.to_dict() for c in self.calls],
            "errors": [e.to_dict() for e in self.errors],
        }


def value_to_json(value: Value) -> Any:
    """Render a parsed value as JSON-compatible data for display.

    Undefined becomes None; placeholders are tagged so they stay distinguishable.
    """
    if value is UNDEFINED:
        return None
    if isinstance(value, UnparsedExpression):
        return {"$expression": value.text}
    if isinstance(value, ArrayLiteral):
        return {"$array": value.text}
    if isinstance(value, dict):
        return {k: value_to_json(v) for k, v in value.items()}
    return value

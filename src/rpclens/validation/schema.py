"""Checks of parsed argument values against JSON Schema, built on jsonschema.

Argument values come from source text rather than JSON, so the Draft 2020-12
validator is extended to know about them:

- `ArrayLiteral` is an array whose items were never parsed; item keywords
  leave it alone.
- `UNDEFINED` matches no JSON type.
- `UnparsedExpression` only fails where the schema asks for a concrete type,
  and then with a single issue naming the expression.

On top of that, an object with unrecognized keys is not checked for missing
required properties. Every jsonschema error is mapped to a SchemaIssue that
carries the diagnostic code and property path.
"""

from __future__ import annotations

import json
import re
from collections.abc import Callable, Iterator, Mapping
from dataclasses import dataclass, field
from functools import lru_cache
from typing import Any

from jsonschema import Draft202012Validator, validators
from jsonschema.exceptions import ValidationError
from referencing import Registry

from rpclens.scanner.models import UNDEFINED, ArrayLiteral, UnparsedExpression, Value
from rpclens.validation.models import DiagnosticCode

_BASE = Draft202012Validator

# Keywords whose failure on an expression means a concrete value was expected.
_CONCRETE_KEYWORDS = ("type", "anyOf", "oneOf", "enum", "const")
# Keywords that only route an instance to other subschemas.
_PASS_THROUGH_KEYWORDS = frozenset({"$ref", "$dynamicRef", "allOf"})
_ARRAY_CONTENT_KEYWORDS = frozenset(
    {"items", "prefixItems", "contains", "minItems", "maxItems", "uniqueItems", "unevaluatedItems"}
)

# keyword -> (code, detail template filled with the keyword's value)
_KEYWORD_DETAILS: dict[str, tuple[DiagnosticCode, str]] = {
    "minimum": (DiagnosticCode.TOO_SMALL, "Minimum is {}"),
    "exclusiveMinimum": (DiagnosticCode.TOO_SMALL, "Must be greater than {}"),
    "minLength": (DiagnosticCode.TOO_SMALL, "Minimum length is {}"),
    "minProperties": (DiagnosticCode.TOO_SMALL, "Minimum number of properties is {}"),
    "maximum": (DiagnosticCode.TOO_BIG, "Maximum is {}"),
    "exclusiveMaximum": (DiagnosticCode.TOO_BIG, "Must be less than {}"),
    "maxLength": (DiagnosticCode.TOO_BIG, "Maximum length is {}"),
    "maxProperties": (DiagnosticCode.TOO_BIG, "Maximum number of properties is {}"),
    "pattern": (DiagnosticCode.INVALID_STRING, "Must match pattern {}"),
    "format": (DiagnosticCode.INVALID_STRING, "Must be a valid {}"),
    "multipleOf": (DiagnosticCode.NOT_MULTIPLE_OF, "Must be a multiple of {}"),
}

KeywordCheck = Callable[[Any, Any, Any, Mapping[str, Any]], Any]


@dataclass(frozen=True, slots=True)
class SchemaIssue:
    """A single mismatch between a value and its schema.

    `anchor_path` is the property chain whose text best locates the issue in
    source; for a missing property that is the enclosing object.
    """

    code: DiagnosticCode
    path: tuple[str, ...]
    expected: str = ""
    received: str = ""
    detail: str = ""
    expression: str | None = None
    missing: bool = False
    allowed: tuple[tuple[str, str], ...] = field(default=())

    @property
    def anchor_path(self) -> tuple[str, ...]:
        return self.path[:-1] if self.missing else self.path


def kind_of(value: Value) -> str:
    """Name the kind of a parsed value the way diagnostics report it."""
    if value is UNDEFINED:
        return "undefined"
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, dict):
        return "object"
    if isinstance(value, ArrayLiteral):
        return "array"
    if isinstance(value, UnparsedExpression):
        return "expression"
    return type(value).__name__


def describe(schema: Any) -> str:
    """Short human description of what a schema expects."""
    if not isinstance(schema, Mapping):
        return "unknown"
    if "type" in schema:
        return _describe_types(schema["type"])
    for keyword in ("anyOf", "oneOf"):
        if isinstance(schema.get(keyword), list):
            return " | ".join(describe(branch) for branch in schema[keyword])
    if isinstance(schema.get("$ref"), str):
        return schema["$ref"].rsplit("/", 1)[-1]
    if "enum" in schema or "const" in schema:
        return "enum"
    return "unknown"


def _describe_types(types: Any) -> str:
    return types if isinstance(types, str) else " | ".join(map(str, types))


def _is_array(checker: Any, instance: Any) -> bool:
    return isinstance(instance, (list, ArrayLiteral))


def _unrecognized_keys(instance: Mapping[str, Any], schema: Mapping[str, Any]) -> list[str]:
    if schema.get("additionalProperties") is not False:
        return []
    properties = schema.get("properties", {})
    patterns = schema.get("patternProperties", {})
    return [key for key in instance if key not in properties and not any(re.search(p, key) for p in patterns)]


def _required(validator: Any, required: Any, instance: Any, schema: Mapping[str, Any]) -> Iterator[ValidationError]:
    if not validator.is_type(instance, "object") or _unrecognized_keys(instance, schema):
        return
    for name in required:
        if name not in instance:
            yield ValidationError(f"{name!r} is a required property", path=[name])


def _additional_properties(
    validator: Any, additional: Any, instance: Any, schema: Mapping[str, Any]
) -> Iterator[ValidationError]:
    if additional is False:
        if validator.is_type(instance, "object"):
            for key in _unrecognized_keys(instance, schema):
                yield ValidationError(f"Unrecognized key {key!r}", path=[key])
        return
    yield from _BASE.VALIDATORS["additionalProperties"](validator, additional, instance, schema) or ()


def _first_concrete_keyword(schema: Mapping[str, Any]) -> str | None:
    return next((keyword for keyword in schema if keyword in _CONCRETE_KEYWORDS), None)


def _source_aware(keyword: str, check: KeywordCheck) -> KeywordCheck:
    """Wrap a keyword check so it handles expressions and unparsed arrays."""

    def checked(validator: Any, value: Any, instance: Any, schema: Mapping[str, Any]) -> Iterator[ValidationError]:
        if isinstance(instance, UnparsedExpression) and keyword not in _PASS_THROUGH_KEYWORDS:
            if keyword == _first_concrete_keyword(schema):
                yield ValidationError(f"{instance.text} is not a literal value")
            return
        if isinstance(instance, ArrayLiteral) and keyword in _ARRAY_CONTENT_KEYWORDS:
            return
        yield from check(validator, value, instance, schema) or ()

    return checked


_KEYWORD_CHECKS: dict[str, KeywordCheck] = {
    **_BASE.VALIDATORS,
    "required": _required,
    "additionalProperties": _additional_properties,
}

ArgumentValidator = validators.extend(
    _BASE,
    validators={keyword: _source_aware(keyword, check) for keyword, check in _KEYWORD_CHECKS.items()},
    type_checker=_BASE.TYPE_CHECKER.redefine("array", _is_array),
)

# References resolve inside the schema document only; nothing is fetched.
_LOCAL_ONLY = Registry()


@lru_cache(maxsize=128)
def _compiled(document: str) -> Any:
    schema = json.loads(document)
    ArgumentValidator.check_schema(schema)
    return ArgumentValidator(schema, registry=_LOCAL_ONLY, format_checker=ArgumentValidator.FORMAT_CHECKER)


def check_value(value: Value, schema: Mapping[str, Any]) -> list[SchemaIssue]:
    """Check `value` against `schema` (the root of its own $ref namespace).

    Raises:
        jsonschema.exceptions.SchemaError: If `schema` is not valid JSON Schema
        referencing.exceptions.Unresolvable: If a $ref leads nowhere
    """
    validator = _compiled(json.dumps(schema, default=str))
    issues = [issue for error in validator.iter_errors(value) for issue in _issues_from(error)]
    return _prune(issues)


def _issues_from(error: ValidationError) -> list[SchemaIssue]:
    path = tuple(str(p) for p in error.absolute_path)
    keyword = error.validator
    instance = error.instance

    if isinstance(instance, UnparsedExpression):
        return [
            SchemaIssue(
                code=DiagnosticCode.INVALID_TYPE,
                path=path,
                expected=describe(error.schema),
                received="expression",
                expression=instance.text,
            )
        ]
    if keyword == "type":
        return [
            SchemaIssue(
                code=DiagnosticCode.INVALID_TYPE,
                path=path,
                expected=_describe_types(error.validator_value),
                received=kind_of(instance),
            )
        ]
    if keyword == "required":
        return [
            SchemaIssue(
                code=DiagnosticCode.INVALID_TYPE,
                path=path,
                expected="defined",
                received="undefined",
                missing=True,
            )
        ]
    if keyword == "additionalProperties":
        properties = error.schema.get("properties", {})
        allowed = tuple((name, describe(prop)) for name, prop in properties.items())
        return [SchemaIssue(code=DiagnosticCode.UNRECOGNIZED_KEYS, path=path, allowed=allowed)]
    if keyword in ("anyOf", "oneOf") and error.context:
        return _union_issues(error, path)
    if keyword in ("enum", "const"):
        options = error.validator_value if keyword == "enum" else [error.validator_value]
        return [
            SchemaIssue(
                code=DiagnosticCode.INVALID_ENUM_VALUE,
                path=path,
                expected=", ".join(json.dumps(o, default=str) for o in options),
                received=_literal_text(instance),
            )
        ]
    if keyword in _KEYWORD_DETAILS:
        code, template = _KEYWORD_DETAILS[keyword]
        return [SchemaIssue(code=code, path=path, detail=template.format(error.validator_value))]
    return [SchemaIssue(code=DiagnosticCode.CUSTOM, path=path, detail=error.message)]


def _union_issues(error: ValidationError, path: tuple[str, ...]) -> list[SchemaIssue]:
    """A single branch of the value's own kind reports its issues; otherwise one type issue."""
    branches: dict[Any, list[ValidationError]] = {}
    for sub in error.context:
        branches.setdefault(sub.relative_schema_path[0], []).append(sub)

    same_kind = [
        errors
        for errors in branches.values()
        if not any(e.validator == "type" and not e.relative_path for e in errors)
    ]
    if len(same_kind) == 1:
        return [issue for sub in same_kind[0] for issue in _issues_from(sub)]
    return [
        SchemaIssue(
            code=DiagnosticCode.INVALID_TYPE,
            path=path,
            expected=describe(error.schema),
            received=kind_of(error.instance),
        )
    ]


def _prune(issues: list[SchemaIssue]) -> list[SchemaIssue]:
    """Drop duplicates, and anything else reported at a path whose type is already wrong."""
    mistyped = {i.path for i in issues if i.code is DiagnosticCode.INVALID_TYPE and not i.missing}
    kept: list[SchemaIssue] = []
    for issue in issues:
        if issue in kept:
            continue
        if issue.path in mistyped and (issue.code is not DiagnosticCode.INVALID_TYPE or issue.missing):
            continue
        kept.append(issue)
    return kept


def _literal_text(value: Value) -> str:
    if value is UNDEFINED:
        return "undefined"
    if isinstance(value, (bool, int, float, str)) or value is None:
        return json.dumps(value)
    return kind_of(value)

"""Schema validator - checks scanned calls against the procedure catalog.

Per call, in order:
1. the procedure path must resolve (otherwise nothing else is checked);
2. the call verb must match the procedure kind;
3. the argument is checked against the declared input schema, or, when the
   procedure declares none, a supplied argument is flagged as a warning.

Nothing here raises for bad input. Schemas that jsonschema rejects or cannot
resolve are logged like any other fault while checking, and the procedure is
treated as having no input schema.
"""

from __future__ import annotations

from collections.abc import Iterable

import structlog
from jsonschema.exceptions import SchemaError
from referencing.exceptions import Unresolvable

from rpclens.catalog.models import Procedure, ProcedureCatalog
from rpclens.config.constants import DEFAULT_DIAGNOSTIC_SOURCE
from rpclens.scanner.models import UNDEFINED, ParsedCall
from rpclens.validation.models import Diagnostic, DiagnosticCode, Severity, ValidationResult
from rpclens.validation.schema import SchemaIssue, check_value
from rpclens.validation.spans import key_span, value_span

log = structlog.get_logger(__name__)


def _format_message(issue: SchemaIssue) -> str:
    """Human message for a schema issue."""
    property_line = f"\n\nProperty: {'.'.join(issue.path)}" if issue.path else ""

    if issue.code is DiagnosticCode.UNRECOGNIZED_KEYS:
        message = f'Unrecognized key: "{issue.path[-1]}"'
        if issue.allowed:
            listing = "\n".join(f"  • {name} ({type_name})" for name, type_name in issue.allowed)
            message += f"\n\nAvailable properties:\n{listing}"
        return message

    if issue.code is DiagnosticCode.INVALID_TYPE:
        if issue.missing:
            return f'Required property "{issue.path[-1]}" is missing{property_line}'
        message = f"Expected {issue.expected}, received {issue.received}{property_line}"
        if issue.expression is not None:
            message += f"\nExpression: {issue.expression}"
        return message

    if issue.code is DiagnosticCode.TOO_SMALL:
        return f"Value is too small. {issue.detail}{property_line}"
    if issue.code is DiagnosticCode.TOO_BIG:
        return f"Value is too large. {issue.detail}{property_line}"
    if issue.code is DiagnosticCode.INVALID_ENUM_VALUE:
        return f"Invalid value {issue.received}. Expected one of: {issue.expected}{property_line}"
    if issue.code is DiagnosticCode.INVALID_STRING:
        return f"Invalid string. {issue.detail}{property_line}"
    if issue.code is DiagnosticCode.NOT_MULTIPLE_OF:
        return f"Invalid number. {issue.detail}{property_line}"
    return f"Invalid value. {issue.detail}{property_line}"


def _issue_diagnostic(issue: SchemaIssue, call: ParsedCall, source: str) -> Diagnostic:
    if issue.code is DiagnosticCode.UNRECOGNIZED_KEYS:
        span = key_span(call, issue.anchor_path)
    else:
        span = value_span(call, issue.anchor_path)
    return Diagnostic(
        message=_format_message(issue),
        code=issue.code,
        span=span,
        severity=Severity.ERROR,
        path=issue.path,
        source=source,
    )


def _check_input(call: ParsedCall, procedure: Procedure) -> list[SchemaIssue] | None:
    """Schema issues for the call argument, or None when there is no usable schema."""
    if procedure.input_schema is None:
        return None
    try:
        return check_value(call.argument, procedure.input_schema)
    except (RecursionError, SchemaError, TypeError, Unresolvable, ValueError) as e:
        log.warning("input_schema_check_failed", procedure=call.procedure, error=str(e))
        return None


def validate_call(
    call: ParsedCall,
    catalog: ProcedureCatalog,
    *,
    source: str = DEFAULT_DIAGNOSTIC_SOURCE,
) -> ValidationResult:
    """Validate a single call site."""
    procedure = catalog.resolve(call.procedure_path)
    if procedure is None:
        return ValidationResult(
            errors=(
                Diagnostic(
                    message=f'Procedure "{call.procedure}" not found',
                    code=DiagnosticCode.PROCEDURE_NOT_FOUND,
                    span=call.span,
                    source=source,
                ),
            )
        )

    errors: list[Diagnostic] = []
    warnings: list[Diagnostic] = []

    if procedure.kind is not call.kind:
        errors.append(
            Diagnostic(
                message=(
                    f'Procedure "{call.procedure}" is a {procedure.kind.value}, '
                    f"but called as {call.kind.value}"
                ),
                code=DiagnosticCode.WRONG_CALL_TYPE,
                span=call.span,
                source=source,
            )
        )

    issues = _check_input(call, procedure)
    if issues is not None:
        errors.extend(_issue_diagnostic(issue, call, source) for issue in issues)
    elif call.argument is not UNDEFINED and call.argument is not None:
        warnings.append(
            Diagnostic(
                message=(
                    f'Procedure "{call.procedure}" does not expect any input, '
                    "but arguments were provided"
                ),
                code=DiagnosticCode.UNEXPECTED_INPUT,
                span=call.span,
                severity=Severity.WARNING,
                source=source,
            )
        )

    return ValidationResult(errors=tuple(errors), warnings=tuple(warnings))


def validate(
    calls: Iterable[ParsedCall],
    catalog: ProcedureCatalog,
    *,
    source: str = DEFAULT_DIAGNOSTIC_SOURCE,
) -> ValidationResult:
    """Validate calls in discovery order and aggregate their diagnostics."""
    result = ValidationResult()
    for call in calls:
        result = result.merge(validate_call(call, catalog, source=source))
    log.debug(
        "validation_complete",
        errors=len(result.errors),
        warnings=len(result.warnings),
    )
    return result

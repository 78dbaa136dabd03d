"""Argument validation against a tool's declared parameters."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Dict, Iterable, Optional

from toolcall.tools import ParameterSpec

MISSING_ARGUMENT = "MissingArgument"
TYPE_MISMATCH = "TypeMismatch"
UNKNOWN_ARGUMENT = "UnknownArgument"
MALFORMED_ARGUMENTS = "MalformedArguments"


class ValidationError(ValueError):
    """Raised when model-supplied arguments do not satisfy a tool's parameters."""

    def __init__(
        self,
        kind: str,
        message: str,
        *,
        field: Optional[str] = None,
        expected: Optional[str] = None,
        actual: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.kind = kind
        self.field = field
        self.expected = expected
        self.actual = actual


def _matches(expected: str, value: Any) -> bool:
    # bool is an int subclass; it never counts as a number here.
    if expected == "number":
        return isinstance(value, (int, float)) and not isinstance(value, bool)
    if expected == "string":
        return isinstance(value, str)
    if expected == "boolean":
        return isinstance(value, bool)
    if expected == "object":
        return isinstance(value, Mapping)
    if expected == "array":
        return isinstance(value, (list, tuple))
    return False


def _type_name(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, Mapping):
        return "object"
    if isinstance(value, (list, tuple)):
        return "array"
    return type(value).__name__


def validate(parameters: Iterable[ParameterSpec], args: Any) -> Dict[str, Any]:
    """
    Check ``args`` against ``parameters`` and return the accepted arguments.

    The returned dict holds exactly the supplied declared keys, ordered as
    the parameters are declared. The first problem found is raised:
    non-mapping payload, then unknown keys, then each parameter in turn.

    Raises
    ------
    ValidationError
        With ``kind`` set to one of ``MalformedArguments``,
        ``UnknownArgument``, ``MissingArgument`` or ``TypeMismatch``.
    """
    params = tuple(parameters)
    if not isinstance(args, Mapping):
        raise ValidationError(
            MALFORMED_ARGUMENTS,
            f"Arguments must be an object, got {_type_name(args)}.",
            expected="object",
            actual=_type_name(args),
        )

    declared = {param.name for param in params}
    for key in args:
        if key not in declared:
            raise ValidationError(UNKNOWN_ARGUMENT, f"Unknown argument '{key}'.", field=str(key))

    validated: Dict[str, Any] = {}
    for param in params:
        if param.name not in args:
            if param.required:
                raise ValidationError(
                    MISSING_ARGUMENT,
                    f"Missing required argument '{param.name}'.",
                    field=param.name,
                )
            continue
        value = args[param.name]
        if not _matches(param.type, value):
            actual = _type_name(value)
            raise ValidationError(
                TYPE_MISMATCH,
                f"Argument '{param.name}' must be {param.type}, got {actual}.",
                field=param.name,
                expected=param.type,
                actual=actual,
            )
        validated[param.name] = value
    return validated

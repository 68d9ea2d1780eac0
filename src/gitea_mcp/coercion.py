"""Argument coercion: untyped argument map -> typed parameter record.

The untyped map delivered by the transport never reaches a handler. Coercion is purely local
and synchronous; it never calls the remote service.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from .errors import (SafeError, invalid_array_element, invalid_parameter_type,
                     invalid_parameter_value, missing_parameter)
from .schema import ParameterKind, ParameterSpec, ToolSchema, is_number

_KIND_LABELS = {
    ParameterKind.STRING: "string",
    ParameterKind.NUMBER: "number",
    ParameterKind.BOOLEAN: "boolean",
    ParameterKind.ARRAY_NUMBER: "array of numbers",
    ParameterKind.ARRAY_STRING: "array of strings",
}


def _coerce_number(spec: ParameterSpec, value: float | int) -> float | int:
    if spec.integral:
        # Numbers arrive as JSON floats; only whole magnitudes may become IDs/indices.
        if isinstance(value, float) and not value.is_integer():
            raise invalid_parameter_value(spec.name, reason="must be an integer")
        out: float | int = int(value)
    else:
        out = float(value)
    if spec.minimum is not None and out < spec.minimum:
        raise invalid_parameter_value(spec.name, reason=f"must be >= {spec.minimum:g}")
    return out


def _coerce_array(spec: ParameterSpec, value: object) -> list[Any]:
    if not isinstance(value, (list, tuple)):
        raise invalid_parameter_type(spec.name, _KIND_LABELS[spec.kind])
    item_kind = spec.kind.item_kind
    expected = "integer" if spec.integral else "number"
    if spec.minimum is not None:
        expected = f"{expected} >= {spec.minimum:g}"
    out: list[Any] = []
    for index, element in enumerate(value):
        if item_kind is ParameterKind.NUMBER:
            if not is_number(element):
                raise invalid_array_element(spec.name, index, expected)
            try:
                out.append(_coerce_number(spec, element))
            except SafeError as exc:
                raise invalid_array_element(spec.name, index, expected) from exc
        else:
            if not isinstance(element, str):
                raise invalid_array_element(spec.name, index, "string")
            out.append(element)
    return out


def coerce_value(spec: ParameterSpec, value: object) -> Any:
    """Coerce a single present value according to its spec."""
    if spec.kind.is_array:
        return _coerce_array(spec, value)

    if spec.kind is ParameterKind.STRING:
        if not isinstance(value, str):
            raise invalid_parameter_type(spec.name, _KIND_LABELS[spec.kind])
        if spec.enum is not None and value not in spec.enum:
            raise invalid_parameter_value(spec.name, spec.enum)
        return value

    if spec.kind is ParameterKind.NUMBER:
        if not is_number(value):
            raise invalid_parameter_type(spec.name, _KIND_LABELS[spec.kind])
        return _coerce_number(spec, value)  # type: ignore[arg-type]

    if not isinstance(value, bool):
        raise invalid_parameter_type(spec.name, _KIND_LABELS[spec.kind])
    return value


def _default_number(spec: ParameterSpec, value: float | int) -> float | int:
    return int(value) if spec.integral else float(value)


def _absent_value(spec: ParameterSpec) -> Any:
    if spec.default is not None:
        if spec.kind is ParameterKind.ARRAY_NUMBER:
            return [_default_number(spec, v) for v in spec.default]
        if spec.kind.is_array:
            return list(spec.default)
        if spec.kind is ParameterKind.NUMBER:
            return _default_number(spec, spec.default)
        return spec.default
    if spec.keep_absent:
        return None
    if spec.kind is ParameterKind.NUMBER and spec.integral:
        return 0
    return spec.kind.zero_value()


def coerce_arguments(schema: ToolSchema, arguments: Mapping[str, Any] | None) -> dict[str, Any]:
    """Extract and validate every declared parameter, in declaration order.

    Keys not declared by the schema are ignored; a JSON null counts as absent.

    Raises:
        SafeError: the first MissingParameter / InvalidParameterType / InvalidParameterValue /
            InvalidArrayElement encountered.
    """
    if not isinstance(arguments, Mapping):
        arguments = {}

    params: dict[str, Any] = {}
    for spec in schema.parameters:
        value = arguments.get(spec.name)
        if value is None:
            if spec.required:
                raise missing_parameter(spec.name)
            params[spec.name] = _absent_value(spec)
            continue
        params[spec.name] = coerce_value(spec, value)
    return params

"""Static tool schema declarations.

A ToolSchema is created once at import time and never mutated. `input_schema()` renders the
JSON Schema object advertised to MCP clients.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Any


class ParameterKind(str, enum.Enum):
    """Wire representation of a tool parameter."""

    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    ARRAY_NUMBER = "array_number"
    ARRAY_STRING = "array_string"

    @property
    def is_array(self) -> bool:
        return self in (ParameterKind.ARRAY_NUMBER, ParameterKind.ARRAY_STRING)

    @property
    def item_kind(self) -> ParameterKind | None:
        if self is ParameterKind.ARRAY_NUMBER:
            return ParameterKind.NUMBER
        if self is ParameterKind.ARRAY_STRING:
            return ParameterKind.STRING
        return None

    def zero_value(self) -> Any:
        """Value used when an optional parameter without a default is absent."""
        if self is ParameterKind.STRING:
            return ""
        if self is ParameterKind.NUMBER:
            return 0.0
        if self is ParameterKind.BOOLEAN:
            return False
        return []


def is_number(value: object) -> bool:
    """Return True for JSON numbers (bool is excluded even though it subclasses int)."""
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def matches_kind(kind: ParameterKind, value: object) -> bool:
    """Return True if `value` has the representation expected for `kind`."""
    if kind is ParameterKind.STRING:
        return isinstance(value, str)
    if kind is ParameterKind.NUMBER:
        return is_number(value)
    if kind is ParameterKind.BOOLEAN:
        return isinstance(value, bool)
    if not isinstance(value, (list, tuple)):
        return False
    item = kind.item_kind
    assert item is not None
    return all(matches_kind(item, v) for v in value)


@dataclass(frozen=True, slots=True)
class ParameterSpec:
    """Declaration of one tool parameter.

    integral: numbers (or number-array elements) must be whole and are handed to the
        handler as int.
    keep_absent: an absent optional parameter coerces to None instead of the zero value,
        so handlers can tell "omitted" from "set to empty".
    """

    name: str
    kind: ParameterKind
    description: str = ""
    required: bool = False
    default: Any = None
    enum: tuple[str, ...] | None = None
    integral: bool = False
    minimum: float | None = None
    keep_absent: bool = False

    def __post_init__(self) -> None:
        if not self.name:
            raise ValueError("Parameter name must be non-empty")
        if self.required and self.default is not None:
            raise ValueError(f"Parameter '{self.name}' cannot be both required and have a default")
        if self.required and self.keep_absent:
            raise ValueError(f"Parameter '{self.name}' cannot be both required and keep_absent")
        if self.enum is not None:
            if self.kind is not ParameterKind.STRING:
                raise ValueError(f"Parameter '{self.name}': enum is only supported for strings")
            if not self.enum:
                raise ValueError(f"Parameter '{self.name}': enum must not be empty")
        if (self.integral or self.minimum is not None) and self.kind not in (
            ParameterKind.NUMBER,
            ParameterKind.ARRAY_NUMBER,
        ):
            raise ValueError(f"Parameter '{self.name}': integral/minimum only apply to numbers")
        if self.default is not None:
            if not matches_kind(self.kind, self.default):
                raise ValueError(f"Parameter '{self.name}': default does not match kind {self.kind.value}")
            if self.enum is not None and self.default not in self.enum:
                raise ValueError(f"Parameter '{self.name}': default is not one of the enum values")

    def json_schema(self) -> dict[str, Any]:
        """Render this parameter as a JSON Schema property."""
        out: dict[str, Any] = {}
        item = self.kind.item_kind
        if item is not None:
            items: dict[str, Any] = {"type": "integer" if self.integral else item.value}
            if self.minimum is not None:
                items["minimum"] = self.minimum
            out["type"] = "array"
            out["items"] = items
        elif self.kind is ParameterKind.NUMBER:
            out["type"] = "integer" if self.integral else "number"
            if self.minimum is not None:
                out["minimum"] = self.minimum
        else:
            out["type"] = self.kind.value
        if self.description:
            out["description"] = self.description
        if self.enum is not None:
            out["enum"] = list(self.enum)
        if self.default is not None:
            out["default"] = list(self.default) if item is not None else self.default
        return out


@dataclass(frozen=True, slots=True)
class ToolSchema:
    """Immutable descriptor of a tool: name, description and ordered parameters."""

    name: str
    description: str
    parameters: tuple[ParameterSpec, ...] = ()

    def __post_init__(self) -> None:
        if not self.name:
            raise ValueError("Tool name must be non-empty")
        seen: set[str] = set()
        for p in self.parameters:
            if p.name in seen:
                raise ValueError(f"Tool '{self.name}' declares parameter '{p.name}' twice")
            seen.add(p.name)

    def input_schema(self) -> dict[str, Any]:
        """Return the JSON Schema object for the tool's arguments."""
        schema: dict[str, Any] = {
            "type": "object",
            "properties": {p.name: p.json_schema() for p in self.parameters},
        }
        required = [p.name for p in self.parameters if p.required]
        if required:
            schema["required"] = required
        return schema


def string(name: str, description: str = "", **kwargs: Any) -> ParameterSpec:
    return ParameterSpec(name=name, kind=ParameterKind.STRING, description=description, **kwargs)


def number(name: str, description: str = "", **kwargs: Any) -> ParameterSpec:
    return ParameterSpec(name=name, kind=ParameterKind.NUMBER, description=description, **kwargs)


def boolean(name: str, description: str = "", **kwargs: Any) -> ParameterSpec:
    return ParameterSpec(name=name, kind=ParameterKind.BOOLEAN, description=description, **kwargs)


def number_array(name: str, description: str = "", **kwargs: Any) -> ParameterSpec:
    return ParameterSpec(name=name, kind=ParameterKind.ARRAY_NUMBER, description=description, **kwargs)


def string_array(name: str, description: str = "", **kwargs: Any) -> ParameterSpec:
    return ParameterSpec(name=name, kind=ParameterKind.ARRAY_STRING, description=description, **kwargs)

"""Tool registry.

Holds every declared tool, partitioned by mutation class. A Registry is built once at startup
by sequential registration calls and is only read afterwards, so concurrent lookups need no
locking.
"""

from __future__ import annotations

import enum
from collections.abc import Awaitable, Callable, Iterable
from dataclasses import dataclass
from typing import Any

from .schema import ToolSchema

# handler(runtime, params) -> domain payload; raises SafeError on domain failure.
Handler = Callable[[Any, dict[str, Any]], Awaitable[Any]]


class MutationClass(str, enum.Enum):
    """Whether a tool only observes or changes remote state."""

    READ = "read"
    WRITE = "write"


class RegistrationError(RuntimeError):
    """Raised for invalid registrations (duplicate names). Fatal at startup."""


@dataclass(frozen=True, slots=True)
class ToolEntry:
    """A tool schema paired with its handler and mutation class."""

    schema: ToolSchema
    handler: Handler
    mutation: MutationClass

    @property
    def name(self) -> str:
        return self.schema.name


def read_tool(schema: ToolSchema, handler: Handler) -> ToolEntry:
    return ToolEntry(schema=schema, handler=handler, mutation=MutationClass.READ)


def write_tool(schema: ToolSchema, handler: Handler) -> ToolEntry:
    return ToolEntry(schema=schema, handler=handler, mutation=MutationClass.WRITE)


class Registry:
    """Two disjoint name -> ToolEntry mappings, one per mutation class."""

    def __init__(self) -> None:
        self._read: dict[str, ToolEntry] = {}
        self._write: dict[str, ToolEntry] = {}
        self._order: list[str] = []

    def __len__(self) -> int:
        return len(self._order)

    def __contains__(self, name: object) -> bool:
        return name in self._read or name in self._write

    def _add(self, target: dict[str, ToolEntry], entry: ToolEntry) -> None:
        name = entry.schema.name
        if name in self:
            raise RegistrationError(f"Tool '{name}' is already registered")
        target[name] = entry
        self._order.append(name)

    def register_read(self, schema: ToolSchema, handler: Handler) -> ToolEntry:
        """Register a non-mutating tool."""
        entry = read_tool(schema, handler)
        self._add(self._read, entry)
        return entry

    def register_write(self, schema: ToolSchema, handler: Handler) -> ToolEntry:
        """Register a tool that changes remote state."""
        entry = write_tool(schema, handler)
        self._add(self._write, entry)
        return entry

    def register(self, entries: Iterable[ToolEntry]) -> None:
        """Register a declarative table of (schema, handler, mutation class) entries."""
        for entry in entries:
            if entry.mutation is MutationClass.READ:
                self._add(self._read, entry)
            else:
                self._add(self._write, entry)

    def lookup(self, name: str) -> ToolEntry | None:
        """Return the entry for `name`, or None if no such tool is registered."""
        entry = self._read.get(name)
        if entry is None:
            entry = self._write.get(name)
        return entry

    def mutation_class(self, name: str) -> MutationClass | None:
        entry = self.lookup(name)
        return entry.mutation if entry is not None else None

    def all_tools(self, include_write: bool) -> list[ToolSchema]:
        """Return tool schemas in registration order.

        With include_write=False only read tools are returned; this is what a server in
        restricted (read-only) mode advertises.
        """
        out: list[ToolSchema] = []
        for name in self._order:
            if name in self._read:
                out.append(self._read[name].schema)
            elif include_write:
                out.append(self._write[name].schema)
        return out

    def names(self, mutation: MutationClass | None = None) -> list[str]:
        if mutation is MutationClass.READ:
            return [n for n in self._order if n in self._read]
        if mutation is MutationClass.WRITE:
            return [n for n in self._order if n in self._write]
        return list(self._order)

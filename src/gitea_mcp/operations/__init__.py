"""Declarative tool tables, one module per tool family."""

from __future__ import annotations

from ..registry import ToolEntry
from . import label, pull, repo, user

FAMILIES = (user, repo, pull, label)


def all_entries() -> tuple[ToolEntry, ...]:
    """Every tool entry of every family, in registration order."""
    return tuple(entry for family in FAMILIES for entry in family.TOOLS)

"""Tool dispatcher.

Per invocation: gate (restricted mode) -> lookup -> coerce -> invoke -> envelope.
Stateless across invocations; every outcome, including cancellation, leaves as a
ResultEnvelope. Nothing is retried here: a caller that wants a retry issues a new invocation.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any

from .audit import (AuditLogger, build_event, new_correlation_id,
                    target_repo_from_args)
from .coercion import coerce_arguments
from .envelope import ResultEnvelope, failure, success
from .errors import (SafeError, cancelled, forbidden_tool, internal,
                     unknown_tool)
from .registry import MutationClass, Registry

logger = logging.getLogger(__name__)

_DENIED_CODES = frozenset(
    {
        "MissingParameter",
        "InvalidParameterType",
        "InvalidParameterValue",
        "InvalidArrayElement",
        "UnknownTool",
        "Forbidden",
    }
)


class Dispatcher:
    """Routes a (tool name, argument map) request to its handler."""

    def __init__(self, registry: Registry, runtime: Any, *, audit: AuditLogger | None = None) -> None:
        """Create a dispatcher.

        Args:
            registry: Fully populated registry; never modified by the dispatcher.
            runtime: Opaque object handed to every handler (remote client, limits...).
            audit: Audit sink; defaults to a stderr-only AuditLogger.
        """
        self._registry = registry
        self._runtime = runtime
        self._audit = audit if audit is not None else AuditLogger()

    @property
    def registry(self) -> Registry:
        return self._registry

    async def _execute(self, name: str, arguments: dict[str, Any], *, restricted: bool) -> Any:
        # Gate before anything else: a forbidden write tool never sees its arguments.
        if restricted and self._registry.mutation_class(name) is MutationClass.WRITE:
            raise forbidden_tool(name)

        entry = self._registry.lookup(name)
        if entry is None:
            raise unknown_tool(name)

        params = coerce_arguments(entry.schema, arguments)
        logger.debug("Called %s", name)
        return await entry.handler(self._runtime, params)

    async def invoke(self, name: str, arguments: dict[str, Any] | None, restricted: bool) -> ResultEnvelope:
        """Invoke a tool exactly once and wrap the outcome in an envelope."""
        if not isinstance(arguments, dict):
            arguments = {}

        correlation_id = new_correlation_id()
        target_repo = target_repo_from_args(arguments)
        mutation = self._registry.mutation_class(name)
        start = self._audit.measure_start()

        err: SafeError | None = None
        outcome = "succeeded"
        payload: Any = None
        try:
            payload = await self._execute(name, arguments, restricted=restricted)
        except asyncio.CancelledError:
            logger.info("Tool %s cancelled", name)
            err = cancelled(name)
            outcome = "cancelled"
        except SafeError as exc:
            err = exc
            outcome = "denied" if exc.code in _DENIED_CODES else "failed"
        except Exception as exc:  # pylint: disable=broad-exception-caught
            logger.error("Tool %s failed unexpectedly: %s", name, type(exc).__name__)
            err = internal("Tool execution failed")
            outcome = "failed"

        self._audit.write_event(
            build_event(
                correlation_id=correlation_id,
                tool=name,
                mutation=mutation.value if mutation is not None else None,
                target_repo=target_repo,
                outcome=outcome,
                reason=err.message if err is not None else None,
                duration_ms=self._audit.measure_duration_ms(start),
            )
        )

        if err is not None:
            return failure(err)
        return success(payload)

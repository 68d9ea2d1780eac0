"""Gitea REST client wrapper.

Provides:
- token authentication against a single configured host
- no-redirect behavior
- bounded retries with backoff
- finite timeouts
- safe error translation
"""

from __future__ import annotations

import asyncio
import json
import logging
from dataclasses import dataclass
from typing import Any

import httpx

from .config import LimitsConfig
from .errors import SafeError, external_service_error
from .safety import redact_text

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class RequestBudget:
    """Budget for a single tool call."""

    total_timeout_s: float


class GiteaClient:
    """Minimal Gitea API v1 client."""

    def __init__(
        self,
        *,
        api_base_url: str,
        token: str,
        limits: LimitsConfig,
        verify: bool = True,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Create a Gitea REST client.

        Args:
            api_base_url: e.g. https://gitea.com/api/v1
            token: Access token sent as `Authorization: token ...`.
            limits: Timeouts/retry limits.
            verify: TLS certificate verification (disabled by GITEA_INSECURE).
            transport: Optional httpx transport for tests.
        """
        self._api_base_url = api_base_url.rstrip("/")
        self._token = token
        self._limits = limits
        self._verify = verify
        self._transport = transport

    def _headers(self) -> dict[str, str]:
        headers = {"Accept": "application/json"}
        if self._token:
            headers["Authorization"] = f"token {self._token}"
        return headers

    def _compute_backoff_s(self, attempt_index: int) -> float:
        # attempt_index: 1 for first retry, 2 for second retry...
        base = min(self._limits.max_backoff_s, 0.5 * (2 ** (attempt_index - 1)))
        jitter = min(0.05, 0.01 * attempt_index)
        return min(self._limits.max_backoff_s, base + jitter)

    @staticmethod
    def _is_retryable_status(status_code: int) -> bool:
        return status_code == 429 or 500 <= status_code <= 599

    @staticmethod
    def _error_hint(resp: httpx.Response) -> str | None:
        try:
            payload = resp.json()
        except ValueError:
            return None
        if isinstance(payload, dict) and isinstance(payload.get("message"), str):
            return redact_text(payload["message"])
        return None

    def _failure(self, method: str, path: str, resp: httpx.Response) -> SafeError:
        status = resp.status_code
        if status in (401, 403):
            message = f"Gitea denied {method} {path} (status {status})"
        elif status == 404:
            message = f"{method} {path} failed: not found (status 404)"
        else:
            message = f"{method} {path} failed with status {status}"
        return external_service_error(message, hint=self._error_hint(resp), status_code=status)

    async def request_json(
        self,
        *,
        method: str,
        path: str,
        params: dict[str, Any] | None = None,
        json_body: dict[str, Any] | None = None,
        budget: RequestBudget,
    ) -> Any:
        """Make a request and return decoded JSON.

        Returns None for empty bodies (e.g. 204 No Content on deletes).
        """
        url = f"{self._api_base_url}{path}"
        timeout = httpx.Timeout(
            timeout=min(budget.total_timeout_s, self._limits.total_timeout_s),
            connect=self._limits.connect_timeout_s,
            read=self._limits.read_timeout_s,
        )

        async with httpx.AsyncClient(
            follow_redirects=False,
            timeout=timeout,
            verify=self._verify,
            transport=self._transport,
        ) as client:
            for attempt in range(1, self._limits.max_attempts + 1):
                last_attempt = attempt >= self._limits.max_attempts
                try:
                    resp = await client.request(
                        method,
                        url,
                        headers=self._headers(),
                        params=params,
                        json=json_body,
                    )
                except (httpx.TimeoutException, httpx.TransportError) as exc:
                    if not last_attempt:
                        logger.debug("Retrying %s %s after %s", method, path, type(exc).__name__)
                        await asyncio.sleep(self._compute_backoff_s(attempt))
                        continue
                    raise external_service_error(f"{method} {path} failed: network error ({type(exc).__name__})") from exc

                if resp.status_code >= 400:
                    if not last_attempt and self._is_retryable_status(resp.status_code):
                        logger.debug("Retrying %s %s after status %s", method, path, resp.status_code)
                        await asyncio.sleep(self._compute_backoff_s(attempt))
                        continue
                    raise self._failure(method, path, resp)
                if resp.is_redirect:
                    raise external_service_error(
                        f"{method} {path} failed: unexpected redirect (status {resp.status_code})",
                        status_code=resp.status_code,
                    )

                if resp.status_code == 204 or not resp.content:
                    return None
                try:
                    return resp.json()
                except json.JSONDecodeError as exc:
                    raise external_service_error(f"{method} {path} returned invalid JSON") from exc

        raise external_service_error(f"{method} {path} failed")  # pragma: no cover

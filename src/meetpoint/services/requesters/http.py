"""Shared HTTP plumbing for the external lookup and routing providers."""

from __future__ import annotations

import logging
import time
from typing import Any, Mapping

import httpx

from ...config import settings
from ...errors import RequesterFailure

logger = logging.getLogger(__name__)

RETRYABLE_STATUS_CODES = frozenset({429, 500, 502, 503, 504})


class JsonRequester:
    """GET-and-decode JSON with retries and backoff.

    A fresh ``httpx.Client`` is opened per call so instances can be shared by the
    worker threads that resolve paths in parallel.
    """

    name = "requester"

    def __init__(
        self,
        base_url: str,
        *,
        timeout: float | None = None,
        max_retries: int | None = None,
        backoff_seconds: float | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout if timeout is not None else settings.requester_timeout_seconds
        self.max_retries = max_retries if max_retries is not None else settings.requester_max_retries
        self.backoff_seconds = (
            backoff_seconds if backoff_seconds is not None else settings.requester_backoff_seconds
        )
        self.transport = transport

    def _get_client(self) -> httpx.Client:
        return httpx.Client(
            timeout=httpx.Timeout(self.timeout, connect=min(self.timeout, 5.0)),
            transport=self.transport,
        )

    def _headers(self) -> dict[str, str]:
        return {}

    def _get_json(self, path: str, params: Mapping[str, Any]) -> Any:
        url = f"{self.base_url}/{path.lstrip('/')}"
        client = self._get_client()
        try:
            attempt = 0
            while True:
                try:
                    response = client.get(url, params=params, headers=self._headers())
                    response.raise_for_status()
                    return response.json()
                except httpx.HTTPStatusError as e:
                    status_code = e.response.status_code
                    if status_code not in RETRYABLE_STATUS_CODES:
                        raise RequesterFailure(
                            self.name, f"{path} answered HTTP {status_code}"
                        ) from e
                    attempt += 1
                    if attempt > self.max_retries:
                        logger.warning(f"{self.name} {path} failed with HTTP {status_code} after {attempt} attempts")
                        raise RequesterFailure(self.name, f"{path} answered HTTP {status_code}") from e
                    self._sleep(attempt, f"HTTP {status_code}")
                except httpx.TimeoutException as e:
                    attempt += 1
                    if attempt > self.max_retries:
                        logger.warning(f"{self.name} {path} timed out after {attempt} attempts: {e}")
                        raise RequesterFailure(self.name, f"{path} timed out") from e
                    self._sleep(attempt, "timeout")
                except httpx.TransportError as e:
                    attempt += 1
                    if attempt > self.max_retries:
                        logger.warning(f"{self.name} {path} unreachable after {attempt} attempts: {e}")
                        raise RequesterFailure(
                            self.name, f"failed to connect to {self.base_url}: {e}"
                        ) from e
                    self._sleep(attempt, "network error")
                except ValueError as e:
                    raise RequesterFailure(self.name, f"{path} returned invalid JSON") from e
        finally:
            client.close()

    def _sleep(self, attempt: int, reason: str) -> None:
        wait_time = self.backoff_seconds * (2 ** (attempt - 1))
        logger.debug(
            f"{self.name} {reason}, retrying in {wait_time:.1f}s (attempt {attempt}/{self.max_retries})"
        )
        time.sleep(wait_time)

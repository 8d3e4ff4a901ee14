# Copyright (c) Brandpulse.
# SPDX-License-Identifier: MIT
"""HTTP document source: async, retried, instrumented.

Fetches ``index.json`` and ``<PERIOD>.json`` documents published by the build
phase from an HTTP origin.

* Async HTTP (httpx) with per-request timeout.
* Jittered exponential retries (bounded) on transport failures and 5xx.
* Deterministic mapping to document-source errors; httpx types never cross
  the boundary.
"""

from __future__ import annotations

import time
from collections.abc import Mapping
from contextlib import suppress
from typing import Any, Final
from urllib.parse import quote

import httpx

from brandpulse.domain.exceptions.brand_data import (
    DocumentDecodeError,
    DocumentNotFoundError,
    DocumentSourceError,
)
from brandpulse.infrastructure.documents.settings import DocumentsHttpSettings
from brandpulse.infrastructure.logging.logger import get_json_logger, get_run_id
from brandpulse.infrastructure.observability.metrics import (
    get_documents_http_latency_seconds,
    get_documents_http_status_total,
)
from brandpulse.infrastructure.resilience.retry import RetryPolicy, retry_async

logger = get_json_logger(__name__)

_DEFAULT_BASE_BACKOFF: Final[float] = 0.2
_DEFAULT_MAX_BACKOFF: Final[float] = 2.0
_DEFAULT_HEADERS: Final[dict[str, str]] = {"Accept": "application/json"}


class _UpstreamUnavailable(DocumentSourceError):
    """Retryable failure: transport error or 5xx response."""


class HttpDocumentSource:
    """Document source backed by an HTTP origin."""

    def __init__(
        self,
        settings: DocumentsHttpSettings,
        *,
        http: httpx.AsyncClient | None = None,
        retry_policy: RetryPolicy | None = None,
    ) -> None:
        """Initialize the source.

        Args:
            settings: Transport settings.
            http: Optional shared ``httpx.AsyncClient``. If omitted, a client
                is created and owned by this instance.
            retry_policy: Optional retry configuration for retryable failures.
        """
        self._base_url = str(settings.base_url).rstrip("/")
        self._timeout = float(settings.timeout_s)
        self._owns_client = http is None
        self._client = http or httpx.AsyncClient(
            timeout=self._timeout,
            headers=_DEFAULT_HEADERS.copy(),
        )
        self._retry = retry_policy or RetryPolicy(
            total=int(settings.max_retries),
            base=_DEFAULT_BASE_BACKOFF,
            cap=_DEFAULT_MAX_BACKOFF,
            jitter=True,
        )
        self._latency = get_documents_http_latency_seconds()
        self._status_total = get_documents_http_status_total()

    async def aclose(self) -> None:
        """Close the underlying HTTP client if this instance owns it."""
        if self._owns_client and not self._client.is_closed:
            await self._client.aclose()

    async def fetch_json(self, name: str) -> Mapping[str, Any]:
        """Fetch ``<base_url>/<name>`` and return the decoded JSON object.

        Raises:
            DocumentNotFoundError: On 404.
            DocumentDecodeError: On non-JSON or non-object payloads.
            DocumentSourceError: On other 4xx/5xx or transport failures.
        """
        url = f"{self._base_url}/{quote(name)}"
        headers: dict[str, str] = {}
        run_id = get_run_id()
        if run_id:
            headers["X-Request-ID"] = run_id

        async def _call() -> Mapping[str, Any]:
            try:
                response = await self._client.get(url, headers=headers, timeout=self._timeout)
            except httpx.RequestError as exc:
                raise _UpstreamUnavailable(
                    "Document transport failure.",
                    details={"name": name, "error": str(exc)},
                ) from exc
            return self._handle_response(response, name=name)

        def _retry_predicate(exc_or_result: Exception | Mapping[str, Any]) -> bool:
            if isinstance(exc_or_result, _UpstreamUnavailable):
                logger.warning(
                    "documents_http.retry",
                    extra={"extra": {"name": name, **exc_or_result.details}},
                )
                return True
            return False

        start = time.perf_counter()
        outcome = "ok"
        try:
            return await retry_async(_call, policy=self._retry, retry_on=_retry_predicate)
        except DocumentSourceError:
            outcome = "error"
            raise
        finally:
            with suppress(Exception):
                self._latency.labels(outcome=outcome).observe(time.perf_counter() - start)

    def _handle_response(self, response: httpx.Response, *, name: str) -> Mapping[str, Any]:
        """Map an HTTP response into a JSON object or a document-source error."""
        with suppress(Exception):
            self._status_total.labels(code=str(response.status_code)).inc()

        status = response.status_code
        if status == 404:
            raise DocumentNotFoundError(
                f"Document not found: {name}",
                details={"name": name, "status": 404},
            )
        if status >= 500:
            raise _UpstreamUnavailable(
                "Document origin unavailable.",
                details={"name": name, "status": status},
            )
        if status >= 400:
            raise DocumentSourceError(
                "Document request rejected.",
                details={"name": name, "status": status},
            )

        try:
            payload: Any = response.json()
        except ValueError as exc:
            raise DocumentDecodeError(
                f"Document {name} is not valid JSON.",
                details={"name": name, "error": str(exc)},
            ) from exc
        if not isinstance(payload, Mapping):
            raise DocumentDecodeError(
                f"Document {name} must be a JSON object.",
                details={"name": name, "type": type(payload).__name__},
            )
        return payload


__all__ = ["HttpDocumentSource"]

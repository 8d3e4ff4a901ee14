from __future__ import annotations

from typing import Any

import httpx
import prometheus_client as prom
import pytest
import respx

from brandpulse.domain.exceptions.brand_data import (
    DocumentDecodeError,
    DocumentNotFoundError,
    DocumentSourceError,
)
from brandpulse.infrastructure.documents.http_source import HttpDocumentSource
from brandpulse.infrastructure.documents.settings import DocumentsHttpSettings
from brandpulse.infrastructure.logging.logger import bind_run_id
from brandpulse.infrastructure.resilience.retry import RetryPolicy

BASE_URL = "https://cdn.example.test/quarterly"
INDEX_BODY: dict[str, Any] = {"periods": ["2012Q1"], "periodSourceFiles": {}, "totalPeriods": 1}
NO_WAIT = RetryPolicy(total=2, base=0.0, cap=0.0, jitter=False)


def _source(client: httpx.AsyncClient) -> HttpDocumentSource:
    return HttpDocumentSource(DocumentsHttpSettings(base_url=BASE_URL), http=client, retry_policy=NO_WAIT)


def _sample(name: str, labels: dict[str, str]) -> float | None:
    return prom.REGISTRY.get_sample_value(name, labels)


@pytest.mark.asyncio
async def test_fetch_returns_json_object() -> None:
    async with httpx.AsyncClient() as client:
        src = _source(client)
        with respx.mock:
            route = respx.get(f"{BASE_URL}/index.json").mock(
                return_value=httpx.Response(200, json=INDEX_BODY)
            )
            payload = await src.fetch_json("index.json")

    assert route.call_count == 1
    assert payload["periods"] == ["2012Q1"]
    assert _sample("brandpulse_documents_http_status_total", {"code": "200"}) == 1.0
    assert _sample("brandpulse_documents_http_latency_seconds_count", {"outcome": "ok"}) == 1.0


@pytest.mark.asyncio
async def test_run_id_is_forwarded_as_request_id() -> None:
    run_id = bind_run_id("run-42")
    async with httpx.AsyncClient() as client:
        src = _source(client)
        with respx.mock:
            route = respx.get(f"{BASE_URL}/2012Q1.json").mock(
                return_value=httpx.Response(200, json={"periodKey": "2012Q1"})
            )
            await src.fetch_json("2012Q1.json")

    assert route.calls.last.request.headers["X-Request-ID"] == run_id


@pytest.mark.asyncio
async def test_404_maps_to_not_found_without_retry() -> None:
    async with httpx.AsyncClient() as client:
        src = _source(client)
        with respx.mock:
            route = respx.get(f"{BASE_URL}/2030Q1.json").mock(return_value=httpx.Response(404))
            with pytest.raises(DocumentNotFoundError):
                await src.fetch_json("2030Q1.json")

    assert route.call_count == 1
    assert _sample("brandpulse_documents_http_latency_seconds_count", {"outcome": "error"}) == 1.0


@pytest.mark.asyncio
async def test_5xx_is_retried_then_succeeds() -> None:
    async with httpx.AsyncClient() as client:
        src = _source(client)
        with respx.mock:
            route = respx.get(f"{BASE_URL}/index.json").mock(
                side_effect=[httpx.Response(503), httpx.Response(200, json=INDEX_BODY)]
            )
            payload = await src.fetch_json("index.json")

    assert route.call_count == 2
    assert payload["totalPeriods"] == 1


@pytest.mark.asyncio
async def test_transport_errors_exhaust_retry_budget() -> None:
    async with httpx.AsyncClient() as client:
        src = _source(client)
        with respx.mock:
            route = respx.get(f"{BASE_URL}/index.json").mock(
                side_effect=httpx.ConnectError("refused")
            )
            with pytest.raises(DocumentSourceError) as excinfo:
                await src.fetch_json("index.json")

    assert route.call_count == 3
    assert not isinstance(excinfo.value, DocumentNotFoundError)


@pytest.mark.asyncio
async def test_other_4xx_is_not_retried() -> None:
    async with httpx.AsyncClient() as client:
        src = _source(client)
        with respx.mock:
            route = respx.get(f"{BASE_URL}/index.json").mock(return_value=httpx.Response(403))
            with pytest.raises(DocumentSourceError) as excinfo:
                await src.fetch_json("index.json")

    assert route.call_count == 1
    assert excinfo.value.details["status"] == 403


@pytest.mark.parametrize(
    "response",
    [
        httpx.Response(200, content=b"<html>oops</html>"),
        httpx.Response(200, json=["2012Q1"]),
    ],
    ids=["not-json", "not-object"],
)
@pytest.mark.asyncio
async def test_undecodable_payload(response: httpx.Response) -> None:
    async with httpx.AsyncClient() as client:
        src = _source(client)
        with respx.mock:
            respx.get(f"{BASE_URL}/2012Q1.json").mock(return_value=response)
            with pytest.raises(DocumentDecodeError):
                await src.fetch_json("2012Q1.json")


@pytest.mark.asyncio
async def test_owned_client_is_closed() -> None:
    src = HttpDocumentSource(DocumentsHttpSettings(base_url=BASE_URL + "/"))
    await src.aclose()
    await src.aclose()

    shared = httpx.AsyncClient()
    borrowed = HttpDocumentSource(DocumentsHttpSettings(base_url=BASE_URL), http=shared)
    await borrowed.aclose()
    assert not shared.is_closed
    await shared.aclose()

"""Tests for the request middleware — request ids and HTTP metrics."""

from httpx import AsyncClient

from gridboard.core.metrics import http_requests_total


async def test_response_carries_generated_request_id(client: AsyncClient):
    response = await client.get("/api/v1/dashboards")
    assert len(response.headers["X-Request-ID"]) == 32


async def test_caller_request_id_is_reused(client: AsyncClient):
    response = await client.get("/api/v1/hints", headers={"X-Request-ID": "browser-7"})
    assert response.headers["X-Request-ID"] == "browser-7"


async def test_metrics_use_route_pattern(client: AsyncClient):
    labels = {"method": "GET", "path": "/api/v1/widgets/{widget_id}/data", "status": 404}
    before = http_requests_total.labels(**labels)._value.get()

    await client.get("/api/v1/widgets/some-id/data")

    assert http_requests_total.labels(**labels)._value.get() == before + 1

"""Tests for the onboarding hint endpoints."""

from httpx import AsyncClient


async def test_hints_are_visible_until_dismissed(client: AsyncClient):
    body = (await client.get("/api/v1/hints")).json()
    assert body["dismissed"] is False
    assert body["rotation_seconds"] == 10
    assert body["initial_delay_seconds"] == 3
    assert [h["title"] for h in body["items"]] == [
        "Edit Dashboard",
        "Add Widgets",
        "Upload Your Data",
        "Custom Dashboard",
    ]


async def test_dismiss_persists(client: AsyncClient, redis):
    response = await client.post("/api/v1/hints/dismiss")
    assert response.status_code == 200
    assert response.json()["dismissed"] is True
    assert redis.data["test:hints_dismissed"] == "true"
    assert (await client.get("/api/v1/hints")).json()["dismissed"] is True

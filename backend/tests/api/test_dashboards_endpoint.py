"""Tests for the dashboard endpoints — list, create, switch, rename, layout."""

from httpx import AsyncClient

BASE = "/api/v1/dashboards"


async def test_list_starts_with_default_dashboard(client: AsyncClient):
    response = await client.get(BASE)
    assert response.status_code == 200
    body = response.json()
    assert body["current_id"] == "default-dashboard"
    assert body["items"] == [
        {"id": "default-dashboard", "name": "My Dashboard", "widget_count": 0, "is_current": True}
    ]


async def test_create_dashboard_switches_to_it(client: AsyncClient):
    response = await client.post(BASE, json={"name": "Q1"})
    assert response.status_code == 201
    created = response.json()
    assert created["name"] == "Q1"
    assert created["widgets"] == []

    current = (await client.get(f"{BASE}/current")).json()
    assert current["id"] == created["id"]


async def test_create_dashboard_requires_name(client: AsyncClient):
    response = await client.post(BASE, json={"name": ""})
    assert response.status_code == 422


async def test_switch_dashboard(client: AsyncClient):
    await client.post(BASE, json={"name": "Q1"})

    response = await client.post(f"{BASE}/default-dashboard/switch")
    assert response.status_code == 200
    assert response.json()["current_id"] == "default-dashboard"


async def test_switch_to_unknown_dashboard_is_404_and_keeps_current(client: AsyncClient):
    created = (await client.post(BASE, json={"name": "Q1"})).json()

    response = await client.post(f"{BASE}/missing/switch")
    assert response.status_code == 404
    assert (await client.get(f"{BASE}/current")).json()["id"] == created["id"]


async def test_rename_dashboard(client: AsyncClient):
    response = await client.patch(f"{BASE}/default-dashboard", json={"name": "Overview"})
    assert response.status_code == 200
    assert response.json()["name"] == "Overview"

    missing = await client.patch(f"{BASE}/missing", json={"name": "x"})
    assert missing.status_code == 404


async def test_layout_round_trip(client: AsyncClient):
    first = (await client.post("/api/v1/widgets", json={"type": "bar-chart"})).json()
    second = (await client.post("/api/v1/widgets", json={"type": "kpi"})).json()

    layout = (await client.get(f"{BASE}/current/layout")).json()
    assert [item["i"] for item in layout["items"]] == [first["id"], second["id"]]
    assert layout["items"][0]["min_w"] == 2

    response = await client.put(
        f"{BASE}/current/layout",
        json={
            "items": [
                {"i": first["id"], "x": 6, "y": 0, "w": 6, "h": 4},
                {"i": second["id"], "x": 0, "y": 4, "w": 3, "h": 2},
                {"i": "ghost", "x": 0, "y": 0, "w": 1, "h": 1},
            ]
        },
    )
    assert response.status_code == 200
    items = {item["i"]: item for item in response.json()["items"]}
    assert set(items) == {first["id"], second["id"]}
    assert (items[first["id"]]["x"], items[first["id"]]["y"]) == (6, 0)
    assert (items[second["id"]]["w"], items[second["id"]]["h"]) == (3, 2)

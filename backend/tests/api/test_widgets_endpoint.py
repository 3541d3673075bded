"""Tests for the widget endpoints — add, edit, rebind, move, remove, resolve."""

from httpx import AsyncClient

BASE = "/api/v1/widgets"


async def _add(client: AsyncClient, **body) -> dict:
    response = await client.post(BASE, json={"type": "bar-chart", **body})
    assert response.status_code == 201, response.text
    return response.json()


async def test_catalog_lists_four_widget_kinds(client: AsyncClient):
    response = await client.get(f"{BASE}/catalog")
    assert response.status_code == 200
    assert [entry["type"] for entry in response.json()] == ["bar-chart", "line-chart", "kpi", "table"]


async def test_add_widget_uses_library_defaults(client: AsyncClient):
    widget = await _add(client)

    assert widget["title"] == "New Bar Chart"
    assert widget["position"] == {"x": 0, "y": 0, "w": 6, "h": 4}
    assert widget["config"]["data_source"] == "sales"
    assert widget["config"]["x_axis_key"] == "month"

    listed = (await client.get(BASE)).json()
    assert [w["id"] for w in listed] == [widget["id"]]


async def test_add_widget_rejects_invalid_config(client: AsyncClient):
    response = await client.post(
        BASE, json={"type": "bar-chart", "config": {"data_source": "sales", "color": "red"}}
    )
    assert response.status_code == 422
    assert (await client.get(BASE)).json() == []


async def test_add_widget_rejects_unknown_field(client: AsyncClient):
    response = await client.post(
        BASE,
        json={"type": "kpi", "config": {"data_source": "sales", "metric_key": "margin"}},
    )
    assert response.status_code == 422
    assert "margin" in response.json()["detail"]


async def test_q1_kpi_scenario(client: AsyncClient):
    await client.post("/api/v1/dashboards", json={"name": "Q1"})
    widget = await _add(
        client,
        type="kpi",
        title="Revenue",
        config={"data_source": "sales", "metric_key": "revenue", "format": "currency"},
    )

    data = (await client.get(f"{BASE}/{widget['id']}/data")).json()
    assert data["widget_type"] == "kpi"
    assert data["display_value"] == "$4,000.00"
    assert data["progress_label"] is None
    assert data["percent_of_target"] is None


async def test_update_widget(client: AsyncClient):
    widget = await _add(client)
    widget["title"] = "Profit"
    widget["config"]["y_axis_key"] = "profit"

    response = await client.put(f"{BASE}/{widget['id']}", json=widget)
    assert response.status_code == 200
    assert response.json()["config"]["y_axis_key"] == "profit"

    data = (await client.get(f"{BASE}/{widget['id']}/data")).json()
    assert data["points"][0] == {"x": "Jan", "y": 2400}


async def test_update_without_position_keeps_placement(client: AsyncClient):
    widget = await _add(client)
    moved = {"x": 4, "y": 3, "w": 3, "h": 2}
    await client.patch(f"{BASE}/{widget['id']}/position", json=moved)

    response = await client.put(
        f"{BASE}/{widget['id']}",
        json={"type": "bar-chart", "title": "Renamed", "config": widget["config"]},
    )
    assert response.status_code == 200
    assert response.json()["title"] == "Renamed"
    assert response.json()["position"] == moved

    listed = (await client.get(BASE)).json()
    assert listed[0]["position"] == moved


async def test_update_widget_cannot_change_type(client: AsyncClient):
    widget = await _add(client)
    response = await client.put(
        f"{BASE}/{widget['id']}",
        json={"title": "x", "type": "kpi", "config": {"data_source": "performance"}},
    )
    assert response.status_code == 409


async def test_update_unknown_widget_is_404(client: AsyncClient):
    response = await client.put(
        f"{BASE}/ghost", json={"title": "x", "type": "kpi", "config": {"data_source": "sales"}}
    )
    assert response.status_code == 404


async def test_rebind_clears_fields_and_resolves_empty_keys(client: AsyncClient):
    widget = await _add(client)

    response = await client.post(
        f"{BASE}/{widget['id']}/data-source", json={"data_source": "traffic"}
    )
    assert response.status_code == 200
    config = response.json()["config"]
    assert config["data_source"] == "traffic"
    assert (config["x_axis_key"], config["y_axis_key"]) == ("", "")

    options = (await client.get(f"{BASE}/{widget['id']}/field-options")).json()
    assert [f["name"] for f in options["fields"]] == [
        "date",
        "page",
        "visitors",
        "pageviews",
        "bounceRate",
    ]


async def test_kpi_field_options_are_numeric(client: AsyncClient):
    widget = await _add(client, type="kpi")
    options = (
        await client.get(f"{BASE}/{widget['id']}/field-options", params={"data_source": "sales"})
    ).json()
    assert options["data_source"] == "sales"
    assert [f["name"] for f in options["fields"]] == ["revenue", "profit", "units"]


async def test_move_widget_changes_only_position(client: AsyncClient):
    widget = await _add(client)
    response = await client.patch(
        f"{BASE}/{widget['id']}/position", json={"x": 2, "y": 3, "w": 4, "h": 5}
    )
    assert response.status_code == 200
    moved = response.json()
    assert moved["position"] == {"x": 2, "y": 3, "w": 4, "h": 5}
    assert {k: v for k, v in moved.items() if k != "position"} == {
        k: v for k, v in widget.items() if k != "position"
    }


async def test_move_rejects_zero_width(client: AsyncClient):
    widget = await _add(client)
    response = await client.patch(
        f"{BASE}/{widget['id']}/position", json={"x": 0, "y": 0, "w": 0, "h": 1}
    )
    assert response.status_code == 422


async def test_delete_widget(client: AsyncClient):
    widget = await _add(client)
    assert (await client.delete(f"{BASE}/{widget['id']}")).status_code == 204
    assert (await client.get(BASE)).json() == []
    assert (await client.delete(f"{BASE}/{widget['id']}")).status_code == 204


async def test_table_data_pages(client: AsyncClient):
    widget = await _add(client, type="table")
    data = (
        await client.get(f"{BASE}/{widget['id']}/data", params={"page": 1, "rows_per_page": 5})
    ).json()
    assert data["widget_type"] == "table"
    assert data["total_rows"] == 7
    assert data["rows"] == [["Jun", "$2,390.00", "250"], ["Jul", "$3,490.00", "210"]]


async def test_data_for_unknown_widget_is_404(client: AsyncClient):
    assert (await client.get(f"{BASE}/ghost/data")).status_code == 404

"""Tests for Prometheus metrics.

Run with: pytest tests/test_metrics.py -v
"""

from prometheus_client import REGISTRY, generate_latest

from gridboard.core.metrics import (
    http_requests_total,
    ingestion_total,
    storage_operations_total,
)


def test_registry_contains_expected_metrics():
    metric_names = {m.name for m in REGISTRY.collect()}
    expected = [
        "gridboard_http_requests",
        "gridboard_http_request_duration_seconds",
        "gridboard_storage_operations",
        "gridboard_ingestion",
        "gridboard_ingested_rows",
        "gridboard_data_sources_registered",
        "gridboard_widget_resolutions",
    ]
    for name in expected:
        # prometheus_client strips the _total suffix in the registry
        assert any(name in m for m in metric_names), (
            f"Metric {name} not found in registry. Available: {metric_names}"
        )


def test_counter_increment():
    before = http_requests_total.labels(method="GET", path="/test", status=200)._value.get()
    http_requests_total.labels(method="GET", path="/test", status=200).inc()
    after = http_requests_total.labels(method="GET", path="/test", status=200)._value.get()
    assert after == before + 1


def test_labelled_counters_render():
    storage_operations_total.labels(key="dashboards", operation="set", status="ok").inc()
    ingestion_total.labels(kind="csv", status="ok").inc()
    output = generate_latest().decode("utf-8")
    assert 'key="dashboards"' in output
    assert 'kind="csv"' in output

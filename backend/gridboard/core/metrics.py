"""Central Prometheus metrics registry.

All application metrics are defined here to avoid scattered metric definitions
and ensure consistent naming/labeling.
"""

from prometheus_client import Counter, Gauge, Histogram, Info

# Application info
app_info = Info("gridboard_app", "GridBoard application info")

# --- HTTP ---
http_requests_total = Counter(
    "gridboard_http_requests_total",
    "Total HTTP requests",
    ["method", "path", "status"],
)
http_request_duration_seconds = Histogram(
    "gridboard_http_request_duration_seconds",
    "HTTP request duration in seconds",
    ["method", "path"],
)

# --- Storage ---
storage_operations_total = Counter(
    "gridboard_storage_operations_total",
    "Total persisted-state operations",
    ["key", "operation", "status"],
)
storage_operation_duration_seconds = Histogram(
    "gridboard_storage_operation_duration_seconds",
    "Duration of storage get/set operations in seconds",
    ["key", "operation"],
)

# --- Data sources ---
ingestion_total = Counter(
    "gridboard_ingestion_total",
    "Total data source imports",
    ["kind", "status"],
)
ingested_rows = Histogram(
    "gridboard_ingested_rows",
    "Number of rows in an imported data source",
    ["kind"],
    buckets=[0, 1, 10, 100, 1000, 5000, 10000, 50000, 100000],
)
data_sources_registered = Gauge(
    "gridboard_data_sources_registered",
    "Number of registered data sources (demo + user)",
)

# --- Widgets ---
widget_resolutions_total = Counter(
    "gridboard_widget_resolutions_total",
    "Widget data resolutions",
    ["widget_type", "status"],
)

# --- Store health ---
store_health_status = Gauge(
    "gridboard_store_health_status",
    "Store health status (1=healthy, 0=unhealthy)",
    ["store"],
)
store_health_check_duration_seconds = Histogram(
    "gridboard_store_health_check_duration_seconds",
    "Duration of store health check pings in seconds",
    ["store"],
)

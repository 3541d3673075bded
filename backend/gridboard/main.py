"""Gridboard FastAPI application entry point."""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from gridboard.api.routes import dashboards, data_sources, health, hints, metrics, widgets
from gridboard.core.config import settings
from gridboard.core.logging_config import configure_logging
from gridboard.core.metrics import app_info
from gridboard.core.middleware import ObservabilityMiddleware
from gridboard.core.redis import close_redis, get_redis
from gridboard.core.storage import LocalStorage
from gridboard.services.dashboard_store import DashboardStore
from gridboard.services.data_source_registry import DataSourceRegistry
from gridboard.services.endpoint_fetcher import EndpointFetcher
from gridboard.services.hint_service import HintService

configure_logging()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle events."""
    app_info.info({"version": "0.1.0", "env": settings.app_env})

    storage = LocalStorage(await get_redis())

    registry = DataSourceRegistry(storage, fetcher=EndpointFetcher())
    await registry.load()
    app.state.data_source_registry = registry

    store = DashboardStore(storage)
    await store.load()
    app.state.dashboard_store = store

    app.state.hint_service = HintService(storage)

    yield

    await close_redis()


app = FastAPI(
    title="Gridboard",
    description="Configurable analytics dashboards over uploaded and demo datasets",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(ObservabilityMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Routes — all REST under /api/v1/
app.include_router(health.router, tags=["health"])
app.include_router(dashboards.router, prefix="/api/v1/dashboards", tags=["dashboards"])
app.include_router(widgets.router, prefix="/api/v1/widgets", tags=["widgets"])
app.include_router(data_sources.router, prefix="/api/v1/data-sources", tags=["data-sources"])
app.include_router(hints.router, prefix="/api/v1/hints", tags=["hints"])
app.include_router(metrics.router, tags=["metrics"])

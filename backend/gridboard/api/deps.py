"""Dependency injection for FastAPI routes.

All services are provided via Depends() from this module. The long-lived
store and registry are built once in the app lifespan and kept on app.state;
route handlers never instantiate them directly.
"""

from fastapi import Depends, Request

from gridboard.core.redis import get_redis as _get_redis
from gridboard.services.dashboard_store import DashboardStore
from gridboard.services.data_source_registry import DataSourceRegistry
from gridboard.services.hint_service import HintService
from gridboard.services.widget_data_service import WidgetDataService


async def get_redis():
    """Provide the Redis client."""
    return await _get_redis()


async def get_dashboard_store(request: Request) -> DashboardStore:
    return request.app.state.dashboard_store


async def get_data_source_registry(request: Request) -> DataSourceRegistry:
    return request.app.state.data_source_registry


async def get_hint_service(request: Request) -> HintService:
    return request.app.state.hint_service


async def get_widget_data_service(
    registry: DataSourceRegistry = Depends(get_data_source_registry),
) -> WidgetDataService:
    return WidgetDataService(registry=registry)

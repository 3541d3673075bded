"""Dashboard endpoints — list, create, rename, switch, and grid layout.

There is always exactly one current dashboard. Widget endpoints act on it.
"""

from fastapi import APIRouter, Depends, HTTPException, status

from gridboard.api.deps import get_dashboard_store
from gridboard.schemas.dashboard import (
    Dashboard,
    DashboardCreate,
    DashboardListResponse,
    DashboardSummary,
    DashboardUpdate,
    LayoutChange,
    LayoutResponse,
)
from gridboard.services.dashboard_store import DashboardStore
from gridboard.services.layout_reconciler import apply_layout_change, to_layout_items

router = APIRouter()


def _list_response(store: DashboardStore) -> DashboardListResponse:
    current_id = store.current_dashboard.id
    return DashboardListResponse(
        items=[
            DashboardSummary(
                id=d.id,
                name=d.name,
                widget_count=len(d.widgets),
                is_current=d.id == current_id,
            )
            for d in store.dashboards
        ],
        current_id=current_id,
    )


@router.get("", response_model=DashboardListResponse)
async def list_dashboards(store: DashboardStore = Depends(get_dashboard_store)):
    return _list_response(store)


@router.post("", response_model=Dashboard, status_code=status.HTTP_201_CREATED)
async def create_dashboard(
    body: DashboardCreate,
    store: DashboardStore = Depends(get_dashboard_store),
):
    """Create an empty dashboard. It becomes the current dashboard."""
    return await store.create_dashboard(body.name)


@router.get("/current", response_model=Dashboard)
async def get_current_dashboard(store: DashboardStore = Depends(get_dashboard_store)):
    return store.current_dashboard


@router.get("/current/layout", response_model=LayoutResponse)
async def get_layout(store: DashboardStore = Depends(get_dashboard_store)):
    """Grid layout description for the current dashboard's widgets."""
    dashboard = store.current_dashboard
    return LayoutResponse(dashboard_id=dashboard.id, items=to_layout_items(dashboard.widgets))


@router.put("/current/layout", response_model=LayoutResponse)
async def update_layout(
    body: LayoutChange,
    store: DashboardStore = Depends(get_dashboard_store),
):
    """Apply a layout-change batch reported by the grid. Unknown ids are ignored."""
    await apply_layout_change(store, body.items)
    dashboard = store.current_dashboard
    return LayoutResponse(dashboard_id=dashboard.id, items=to_layout_items(dashboard.widgets))


@router.post("/{dashboard_id}/switch", response_model=DashboardListResponse)
async def switch_dashboard(
    dashboard_id: str,
    store: DashboardStore = Depends(get_dashboard_store),
):
    if not store.switch_dashboard(dashboard_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Dashboard not found"
        )
    return _list_response(store)


@router.patch("/{dashboard_id}", response_model=Dashboard)
async def rename_dashboard(
    dashboard_id: str,
    body: DashboardUpdate,
    store: DashboardStore = Depends(get_dashboard_store),
):
    dashboard = await store.rename_dashboard(dashboard_id, body.name)
    if dashboard is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Dashboard not found"
        )
    return dashboard

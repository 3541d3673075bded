"""Widget endpoints — add, edit, rebind, move, remove, and resolve widget data.

All widget operations act on the current dashboard. Widgets reference data
sources by id only; a config may only name fields the bound source has,
except right after a rebind when every field reference is blank.
"""

from fastapi import APIRouter, Body, Depends, HTTPException, Query, status
from pydantic import ValidationError

from gridboard.api.deps import (
    get_dashboard_store,
    get_data_source_registry,
    get_widget_data_service,
)
from gridboard.schemas.widget import (
    DataSourceRebind,
    Widget,
    WidgetCatalogEntry,
    WidgetDraft,
    WidgetPosition,
    WidgetType,
    widget_adapter,
)
from gridboard.schemas.widget_data import FieldOptionsResponse, WidgetDataResponse
from gridboard.services.dashboard_store import DashboardStore
from gridboard.services.data_source_registry import DataSourceRegistry
from gridboard.services.widget_data_service import WidgetDataService
from gridboard.services.widget_model import (
    WIDGET_CATALOG,
    field_options,
    missing_fields,
    rebind_data_source,
)

router = APIRouter()


def _invalid(exc: ValidationError) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        detail=exc.errors(include_url=False, include_context=False),
    )


def _widget_or_404(store: DashboardStore, widget_id: str) -> Widget:
    widget = store.get_widget(widget_id)
    if widget is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Widget not found")
    return widget


def _check_field_references(widget: Widget, registry: DataSourceRegistry) -> None:
    """Reject configs naming fields the bound source lacks.

    A missing source is not an error here: the widget renders empty.
    """
    if registry.get_source(widget.config.data_source) is None:
        return
    missing = missing_fields(widget, registry.get_fields(widget.config.data_source))
    if missing:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=(
                f"Data source {widget.config.data_source!r} has no field(s): "
                f"{', '.join(missing)}"
            ),
        )


@router.get("/catalog", response_model=list[WidgetCatalogEntry])
async def get_widget_catalog():
    """Widget kinds that can be added from the library."""
    return WIDGET_CATALOG


@router.get("", response_model=list[Widget])
async def list_widgets(store: DashboardStore = Depends(get_dashboard_store)):
    return store.widgets


@router.post("", response_model=Widget, status_code=status.HTTP_201_CREATED)
async def add_widget(
    body: WidgetDraft,
    store: DashboardStore = Depends(get_dashboard_store),
    registry: DataSourceRegistry = Depends(get_data_source_registry),
):
    """Add a widget to the current dashboard. Omitted config uses the library defaults."""
    if body.config is not None:
        # Checked against the bound source before the store assigns an id.
        try:
            candidate = widget_adapter.validate_python(
                {"id": "draft", "title": body.title or "", "type": body.type.value, "config": body.config}
            )
        except ValidationError as exc:
            raise _invalid(exc) from exc
        _check_field_references(candidate, registry)

    try:
        return await store.add_widget(body)
    except ValidationError as exc:
        raise _invalid(exc) from exc


@router.put("/{widget_id}", response_model=Widget)
async def update_widget(
    widget_id: str,
    body: dict = Body(...),
    store: DashboardStore = Depends(get_dashboard_store),
    registry: DataSourceRegistry = Depends(get_data_source_registry),
):
    """Replace a widget's title and config. Id and type cannot change.

    The stored position is kept unless the body carries one.
    """
    existing = _widget_or_404(store, widget_id)
    try:
        widget = widget_adapter.validate_python(
            {"position": existing.position.model_dump(), **body, "id": widget_id}
        )
    except ValidationError as exc:
        raise _invalid(exc) from exc

    if existing.type != widget.type:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Widget type cannot change from {existing.type!r} to {widget.type!r}",
        )
    _check_field_references(widget, registry)

    await store.update_widget(widget)
    return widget


@router.post("/{widget_id}/data-source", response_model=Widget)
async def rebind_widget(
    widget_id: str,
    body: DataSourceRebind,
    store: DashboardStore = Depends(get_dashboard_store),
):
    """Bind a widget to another source. Field references are cleared."""
    widget = rebind_data_source(_widget_or_404(store, widget_id), body.data_source)
    await store.update_widget(widget)
    return widget


@router.patch("/{widget_id}/position", response_model=Widget)
async def move_widget(
    widget_id: str,
    body: WidgetPosition,
    store: DashboardStore = Depends(get_dashboard_store),
):
    if not await store.update_widget_position(widget_id, body):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Widget not found")
    return store.get_widget(widget_id)


@router.delete("/{widget_id}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_widget(
    widget_id: str,
    store: DashboardStore = Depends(get_dashboard_store),
):
    """Remove a widget from the current dashboard. Unknown ids are a no-op."""
    await store.remove_widget(widget_id)


@router.get("/{widget_id}/data", response_model=WidgetDataResponse)
async def get_widget_data(
    widget_id: str,
    page: int = Query(0, ge=0, description="Zero-based table page"),
    rows_per_page: int | None = Query(None, ge=1, le=100, description="Table page size"),
    store: DashboardStore = Depends(get_dashboard_store),
    widget_data_service: WidgetDataService = Depends(get_widget_data_service),
):
    """Resolve the widget's bound data source into display-ready data."""
    widget = _widget_or_404(store, widget_id)
    return widget_data_service.resolve(widget, page=page, rows_per_page=rows_per_page)


@router.get("/{widget_id}/field-options", response_model=FieldOptionsResponse)
async def get_field_options(
    widget_id: str,
    data_source: str | None = Query(None, description="Preview options for another source"),
    store: DashboardStore = Depends(get_dashboard_store),
    registry: DataSourceRegistry = Depends(get_data_source_registry),
):
    """Fields a config form may offer. KPI widgets only get numeric fields."""
    widget = _widget_or_404(store, widget_id)
    source_id = data_source or widget.config.data_source
    return FieldOptionsResponse(
        widget_id=widget.id,
        data_source=source_id,
        fields=field_options(WidgetType(widget.type), registry.get_fields(source_id)),
    )

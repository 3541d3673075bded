"""Pydantic schemas for dashboards and dashboard endpoints."""

from pydantic import BaseModel, Field

from gridboard.schemas.widget import LayoutItem, Widget

# ── Dashboard ────────────────────────────────────────────────────────────


class Dashboard(BaseModel):
    """A named collection of widgets. Widget order is creation order, not spatial order."""

    id: str
    name: str
    widgets: list[Widget] = Field(default_factory=list)


class DashboardCreate(BaseModel):
    name: str = Field(min_length=1)


class DashboardUpdate(BaseModel):
    name: str = Field(min_length=1)


class DashboardSummary(BaseModel):
    id: str
    name: str
    widget_count: int
    is_current: bool


class DashboardListResponse(BaseModel):
    items: list[DashboardSummary]
    current_id: str


# ── Layout ───────────────────────────────────────────────────────────────


class LayoutResponse(BaseModel):
    dashboard_id: str
    items: list[LayoutItem]


class LayoutChange(BaseModel):
    items: list[LayoutItem]

"""Pydantic schemas for resolved widget data handed to the presentation layer."""

from typing import Annotated, Literal

from pydantic import BaseModel, Field

from gridboard.schemas.data_source import DataField, Scalar


class ChartPoint(BaseModel):
    x: Scalar
    y: Scalar


class ChartView(BaseModel):
    widget_id: str
    widget_type: Literal["bar-chart", "line-chart"]
    data_source: str
    empty: bool
    x_axis_key: str
    y_axis_key: str
    color: str
    show_points: bool = False
    points: list[ChartPoint]


class KpiView(BaseModel):
    widget_id: str
    widget_type: Literal["kpi"] = "kpi"
    data_source: str
    empty: bool
    value: float
    display_value: str
    percent_of_target: float | None = None
    progress_label: str | None = None
    status_color: str


class TableColumnHeader(BaseModel):
    key: str
    label: str


class TableView(BaseModel):
    widget_id: str
    widget_type: Literal["table"] = "table"
    data_source: str
    empty: bool
    columns: list[TableColumnHeader]
    rows: list[list[str]]
    total_rows: int
    page: int
    rows_per_page: int
    pagination: bool


WidgetDataResponse = Annotated[
    ChartView | KpiView | TableView, Field(discriminator="widget_type")
]


class FieldOptionsResponse(BaseModel):
    widget_id: str
    data_source: str
    fields: list[DataField]

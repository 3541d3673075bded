"""Widget schemas — a closed tagged union over the four widget kinds.

The ``type`` field is the discriminator. Every consumer dispatches over the
union exhaustively and ends with ``assert_never`` so a fifth kind cannot be
added without touching each dispatch site.
"""

import enum
from typing import Annotated, Literal

from pydantic import BaseModel, Field, PositiveInt, TypeAdapter

HEX_COLOR_PATTERN = r"^#(?:[0-9a-fA-F]{3}|[0-9a-fA-F]{6})$"


class WidgetType(str, enum.Enum):
    BAR_CHART = "bar-chart"
    LINE_CHART = "line-chart"
    KPI = "kpi"
    TABLE = "table"


class ValueFormat(str, enum.Enum):
    NUMBER = "number"
    CURRENCY = "currency"
    PERCENTAGE = "percentage"
    DATE = "date"


KpiFormat = Literal["number", "currency", "percentage"]


class WidgetPosition(BaseModel):
    """Grid cell coordinates and span."""

    x: int = Field(0, ge=0)
    y: int = Field(0, ge=0)
    w: int = Field(6, ge=1)
    h: int = Field(4, ge=1)


# ── Per-type configuration ───────────────────────────────────────────────


class BarChartConfig(BaseModel):
    data_source: str
    x_axis_key: str = ""
    y_axis_key: str = ""
    color: str = Field("#8884d8", pattern=HEX_COLOR_PATTERN)


class LineChartConfig(BaseModel):
    data_source: str
    x_axis_key: str = ""
    y_axis_key: str = ""
    color: str = Field("#82ca9d", pattern=HEX_COLOR_PATTERN)
    show_points: bool = True


class KpiConfig(BaseModel):
    data_source: str
    metric_key: str = ""
    format: KpiFormat = "number"
    target_value: float | None = None
    prefix: str | None = None
    suffix: str | None = None


class TableColumn(BaseModel):
    key: str
    label: str
    format: ValueFormat | None = None


class TableConfig(BaseModel):
    data_source: str
    columns: list[TableColumn] = Field(default_factory=list)
    pagination: bool = True
    rows_per_page: PositiveInt = 5


# ── Widget variants ──────────────────────────────────────────────────────


class WidgetBase(BaseModel):
    id: str
    title: str
    position: WidgetPosition = Field(default_factory=WidgetPosition)


class BarChartWidget(WidgetBase):
    type: Literal["bar-chart"] = "bar-chart"
    config: BarChartConfig


class LineChartWidget(WidgetBase):
    type: Literal["line-chart"] = "line-chart"
    config: LineChartConfig


class KpiWidget(WidgetBase):
    type: Literal["kpi"] = "kpi"
    config: KpiConfig


class TableWidget(WidgetBase):
    type: Literal["table"] = "table"
    config: TableConfig


Widget = Annotated[
    BarChartWidget | LineChartWidget | KpiWidget | TableWidget,
    Field(discriminator="type"),
]

widget_adapter: TypeAdapter[Widget] = TypeAdapter(Widget)


# ── API ──────────────────────────────────────────────────────────────────


class WidgetDraft(BaseModel):
    """A widget before it is placed: no id, no position.

    Without ``config`` (or ``title``) the type's library defaults are used.
    """

    type: WidgetType
    title: str | None = None
    config: dict | None = None


class WidgetCatalogEntry(BaseModel):
    type: WidgetType
    title: str


class DataSourceRebind(BaseModel):
    data_source: str


class LayoutItem(BaseModel):
    """Grid layout description exchanged with the grid collaborator."""

    i: str
    x: int = Field(ge=0)
    y: int = Field(ge=0)
    w: int = Field(ge=1)
    h: int = Field(ge=1)
    min_w: int = 2
    min_h: int = 2

"""Widget Data Service — resolves a widget's bound data source into display data.

Data binding: widget.config.data_source -> registry.get_source -> rows.
A source that no longer exists degrades the widget to its empty-data state;
resolution never fails because of missing data.

Formatting follows en-US conventions:
- number      4,000       (up to 3 decimals)
- currency    $4,000.00
- percentage  85.0%       (the stored value is already a percentage)
- date        1/31/2024
"""

import logging
import math
from typing import assert_never

from dateutil import parser as date_parser

from gridboard.core.metrics import widget_resolutions_total
from gridboard.schemas.data_source import Row, Scalar
from gridboard.schemas.widget import (
    BarChartWidget,
    KpiWidget,
    LineChartWidget,
    TableWidget,
    ValueFormat,
    Widget,
)
from gridboard.schemas.widget_data import (
    ChartPoint,
    ChartView,
    KpiView,
    TableColumnHeader,
    TableView,
)
from gridboard.services.data_source_registry import DataSourceRegistry

logger = logging.getLogger(__name__)

STATUS_DEFAULT = "#3f51b5"
STATUS_ON_TARGET = "#4caf50"
STATUS_NEAR_TARGET = "#ff9800"
STATUS_BELOW_TARGET = "#f44336"


def _as_number(value: object) -> float | None:
    if isinstance(value, bool):
        return None
    if not isinstance(value, int | float | str):
        return None
    try:
        number = float(value)
    except (ValueError, OverflowError):
        # Ints beyond float range are shown as plain text.
        return None
    return number if math.isfinite(number) else None


def _plain(value: Scalar) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _format_number(number: float) -> str:
    if number.is_integer():
        return f"{int(number):,}"
    text = f"{number:,.3f}".rstrip("0").rstrip(".")
    return "0" if text in ("-0", "") else text


def _format_currency(number: float) -> str:
    sign = "-" if number < 0 else ""
    return f"{sign}${abs(number):,.2f}"


def _format_date(value: Scalar) -> str:
    try:
        parsed = date_parser.parse(str(value))
    except (ValueError, OverflowError):
        return _plain(value)
    return f"{parsed.month}/{parsed.day}/{parsed.year}"


def format_value(value: Scalar, fmt: ValueFormat | str | None) -> str:
    """Render a cell or KPI value for display."""
    if value is None:
        return ""
    fmt = ValueFormat(fmt) if fmt is not None else None
    if fmt is None:
        return _plain(value)
    if fmt is ValueFormat.DATE:
        return _format_date(value)

    number = _as_number(value)
    if number is None:
        return _plain(value)
    match fmt:
        case ValueFormat.NUMBER:
            return _format_number(number)
        case ValueFormat.CURRENCY:
            return _format_currency(number)
        case ValueFormat.PERCENTAGE:
            return f"{number:,.1f}%"
        case _:
            assert_never(fmt)


def status_color(percent_of_target: float | None) -> str:
    if percent_of_target is None:
        return STATUS_DEFAULT
    if percent_of_target >= 100:
        return STATUS_ON_TARGET
    if percent_of_target >= 70:
        return STATUS_NEAR_TARGET
    return STATUS_BELOW_TARGET


class WidgetDataService:
    """Resolves widgets against the data source registry."""

    def __init__(self, registry: DataSourceRegistry):
        self._registry = registry

    def resolve_rows(self, widget: Widget) -> list[Row]:
        source = self._registry.get_source(widget.config.data_source)
        if source is None:
            logger.debug(
                "Widget %s is bound to missing data source %s",
                widget.id,
                widget.config.data_source,
            )
            return []
        return source.rows

    def resolve(
        self, widget: Widget, page: int = 0, rows_per_page: int | None = None
    ) -> ChartView | KpiView | TableView:
        """Dispatch to the resolver for the widget's type."""
        if isinstance(widget, BarChartWidget | LineChartWidget):
            view: ChartView | KpiView | TableView = self.resolve_chart(widget)
        elif isinstance(widget, KpiWidget):
            view = self.resolve_kpi(widget)
        elif isinstance(widget, TableWidget):
            view = self.resolve_table(widget, page=page, rows_per_page=rows_per_page)
        else:
            assert_never(widget)

        status = "empty" if view.empty else "ok"
        widget_resolutions_total.labels(widget_type=widget.type, status=status).inc()
        return view

    def resolve_chart(self, widget: BarChartWidget | LineChartWidget) -> ChartView:
        rows = self.resolve_rows(widget)
        config = widget.config
        points = [
            ChartPoint(x=row.get(config.x_axis_key), y=row.get(config.y_axis_key))
            for row in rows
        ]
        return ChartView(
            widget_id=widget.id,
            widget_type=widget.type,
            data_source=config.data_source,
            empty=not rows,
            x_axis_key=config.x_axis_key,
            y_axis_key=config.y_axis_key,
            color=config.color,
            show_points=isinstance(widget, LineChartWidget) and widget.config.show_points,
            points=points,
        )

    def resolve_kpi(self, widget: KpiWidget) -> KpiView:
        """Value from the first row; progress only when a non-zero target is set."""
        rows = self.resolve_rows(widget)
        config = widget.config

        value = 0.0
        if rows:
            value = _as_number(rows[0].get(config.metric_key)) or 0.0

        percent: float | None = None
        progress_label: str | None = None
        if config.target_value:
            percent = value / config.target_value * 100
            progress_label = f"{math.floor(percent + 0.5)}% of target"

        display = f"{config.prefix or ''}{format_value(value, config.format)}{config.suffix or ''}"
        return KpiView(
            widget_id=widget.id,
            data_source=config.data_source,
            empty=not rows,
            value=value,
            display_value=display,
            percent_of_target=percent,
            progress_label=progress_label,
            status_color=status_color(percent),
        )

    def resolve_table(
        self, widget: TableWidget, page: int = 0, rows_per_page: int | None = None
    ) -> TableView:
        rows = self.resolve_rows(widget)
        config = widget.config
        per_page = rows_per_page or config.rows_per_page
        page = max(page, 0)

        visible = rows
        if config.pagination:
            start = page * per_page
            visible = rows[start : start + per_page]

        return TableView(
            widget_id=widget.id,
            data_source=config.data_source,
            empty=not rows,
            columns=[TableColumnHeader(key=c.key, label=c.label) for c in config.columns],
            rows=[
                [format_value(row.get(c.key), c.format) for c in config.columns]
                for row in visible
            ],
            total_rows=len(rows),
            page=page if config.pagination else 0,
            rows_per_page=per_page,
            pagination=config.pagination,
        )

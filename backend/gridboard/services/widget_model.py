"""Widget Model — library defaults, field options, and data-source rebinding.

Field names are not portable across data sources: rebinding a widget to a
different source clears every field reference in its config.
"""

from typing import assert_never

from gridboard.schemas.data_source import DataField, FieldType
from gridboard.schemas.widget import (
    BarChartConfig,
    BarChartWidget,
    KpiConfig,
    KpiWidget,
    LineChartConfig,
    LineChartWidget,
    TableColumn,
    TableConfig,
    TableWidget,
    ValueFormat,
    Widget,
    WidgetCatalogEntry,
    WidgetDraft,
    WidgetPosition,
    WidgetType,
    widget_adapter,
)

WIDGET_CATALOG: list[WidgetCatalogEntry] = [
    WidgetCatalogEntry(type=WidgetType.BAR_CHART, title="Bar Chart"),
    WidgetCatalogEntry(type=WidgetType.LINE_CHART, title="Line Chart"),
    WidgetCatalogEntry(type=WidgetType.KPI, title="KPI Card"),
    WidgetCatalogEntry(type=WidgetType.TABLE, title="Data Table"),
]


def default_title(widget_type: WidgetType) -> str:
    match widget_type:
        case WidgetType.BAR_CHART:
            return "New Bar Chart"
        case WidgetType.LINE_CHART:
            return "New Line Chart"
        case WidgetType.KPI:
            return "New KPI"
        case WidgetType.TABLE:
            return "New Table"
        case _:
            assert_never(widget_type)


def default_config(
    widget_type: WidgetType,
) -> BarChartConfig | LineChartConfig | KpiConfig | TableConfig:
    """Initial configuration for a widget freshly added from the library."""
    match widget_type:
        case WidgetType.BAR_CHART:
            return BarChartConfig(
                data_source="sales", x_axis_key="month", y_axis_key="revenue", color="#8884d8"
            )
        case WidgetType.LINE_CHART:
            return LineChartConfig(
                data_source="traffic",
                x_axis_key="date",
                y_axis_key="visitors",
                color="#82ca9d",
                show_points=True,
            )
        case WidgetType.KPI:
            return KpiConfig(
                data_source="performance", metric_key="value", format="number", target_value=100
            )
        case WidgetType.TABLE:
            return TableConfig(
                data_source="sales",
                columns=[
                    TableColumn(key="month", label="Month"),
                    TableColumn(key="revenue", label="Revenue", format=ValueFormat.CURRENCY),
                    TableColumn(key="units", label="Units"),
                ],
                pagination=True,
                rows_per_page=5,
            )
        case _:
            assert_never(widget_type)


def build_widget(draft: WidgetDraft, widget_id: str, position: WidgetPosition) -> Widget:
    """Validate a draft into a concrete widget variant.

    Raises pydantic.ValidationError when the draft's config does not fit its type.
    """
    config = draft.config
    if config is None:
        config = default_config(draft.type).model_dump(mode="json")
    return widget_adapter.validate_python(
        {
            "id": widget_id,
            "title": draft.title if draft.title is not None else default_title(draft.type),
            "type": draft.type.value,
            "position": position.model_dump(),
            "config": config,
        }
    )


def field_options(widget_type: WidgetType, fields: list[DataField]) -> list[DataField]:
    """Fields a config form may offer for this widget type."""
    match widget_type:
        case WidgetType.BAR_CHART | WidgetType.LINE_CHART | WidgetType.TABLE:
            return list(fields)
        case WidgetType.KPI:
            return [f for f in fields if f.type == FieldType.NUMBER]
        case _:
            assert_never(widget_type)


def rebind_data_source(widget: Widget, source_id: str) -> Widget:
    """Return a copy bound to ``source_id`` with every field reference cleared."""
    if widget.config.data_source == source_id:
        return widget

    if isinstance(widget, BarChartWidget | LineChartWidget):
        config = widget.config.model_copy(
            update={"data_source": source_id, "x_axis_key": "", "y_axis_key": ""}
        )
    elif isinstance(widget, KpiWidget):
        config = widget.config.model_copy(update={"data_source": source_id, "metric_key": ""})
    elif isinstance(widget, TableWidget):
        config = widget.config.model_copy(update={"data_source": source_id, "columns": []})
    else:
        assert_never(widget)
    return widget.model_copy(update={"config": config})


def referenced_fields(widget: Widget) -> list[str]:
    """Non-empty field names the config points at, in config order."""
    if isinstance(widget, BarChartWidget | LineChartWidget):
        keys = [widget.config.x_axis_key, widget.config.y_axis_key]
    elif isinstance(widget, KpiWidget):
        keys = [widget.config.metric_key]
    elif isinstance(widget, TableWidget):
        keys = [column.key for column in widget.config.columns]
    else:
        assert_never(widget)
    return [key for key in keys if key]


def missing_fields(widget: Widget, fields: list[DataField]) -> list[str]:
    available = {f.name for f in fields}
    return [key for key in referenced_fields(widget) if key not in available]

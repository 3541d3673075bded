"""Pydantic schemas for data sources and their derived fields."""

import enum
from datetime import datetime

from pydantic import BaseModel, Field

Scalar = str | int | float | bool | None
Row = dict[str, Scalar]


class SourceKind(str, enum.Enum):
    CSV = "csv"
    EXCEL = "excel"
    JSON = "json"
    DEMO = "demo"


class FieldType(str, enum.Enum):
    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    DATE = "date"
    UNKNOWN = "unknown"


class DataSource(BaseModel):
    """A named tabular dataset. Widgets reference it by id only."""

    id: str
    name: str
    kind: SourceKind
    added_at: datetime
    rows: list[Row] = Field(default_factory=list)


class DataField(BaseModel):
    """Derived from the first row of a source — never stored."""

    name: str
    type: FieldType


# ── API ─────────────────────────────────────────────────────────────────


class DataSourceSummary(BaseModel):
    id: str
    name: str
    kind: SourceKind
    added_at: datetime
    row_count: int
    protected: bool


class DataSourceListResponse(BaseModel):
    items: list[DataSourceSummary]
    total: int


class EndpointImportRequest(BaseModel):
    endpoint: str
    name: str | None = None

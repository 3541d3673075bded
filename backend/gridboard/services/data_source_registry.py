"""Data Source Registry — owns the catalog of named tabular datasets.

Demo sources are seeded at construction and are never removed. User sources
are created by File Ingestion, appended in insertion order, and persisted as a
whole list on every add/remove. Reads never raise: an unknown id yields None
or an empty field list.
"""

import asyncio
import logging
import re
import time
from datetime import UTC, datetime
from pathlib import PurePath

from dateutil import parser as date_parser
from pydantic import ValidationError

from gridboard.core.metrics import data_sources_registered, ingested_rows, ingestion_total
from gridboard.core.storage import DATA_SOURCES_KEY, LocalStorage
from gridboard.schemas.data_source import DataField, DataSource, FieldType, Row, SourceKind
from gridboard.services.demo_data import build_demo_sources, is_demo_source
from gridboard.services.endpoint_fetcher import EndpointFetcher
from gridboard.services.file_ingestion import EXTENSION_KINDS, IngestionError, parse_file

logger = logging.getLogger(__name__)

USER_SOURCE_PREFIX = "user-source-"

_DIGIT_RE = re.compile(r"\d")
_DATE_PART_RE = re.compile(r"\d+|[A-Za-z]+")


class DuplicateDataSourceError(ValueError):
    def __init__(self, source_id: str):
        self.source_id = source_id
        super().__init__(f"A data source with id {source_id!r} already exists.")


def _looks_like_date(value: str) -> bool:
    # Bare words such as "Jan" and lone numbers such as "1" are not dates.
    if not _DIGIT_RE.search(value) or len(_DATE_PART_RE.findall(value)) < 2:
        return False
    try:
        date_parser.parse(value)
    except (ValueError, OverflowError):
        return False
    return True


def infer_field_type(value: object) -> FieldType:
    """Classify a single sample value."""
    if isinstance(value, bool):
        return FieldType.BOOLEAN
    if isinstance(value, int | float):
        return FieldType.NUMBER
    if isinstance(value, str):
        return FieldType.DATE if _looks_like_date(value) else FieldType.STRING
    return FieldType.UNKNOWN


def infer_fields(rows: list[Row]) -> list[DataField]:
    """Field list from the first row only, in the row's key order.

    Mixed-type columns are not reconciled; later rows are never sampled.
    """
    if not rows:
        return []
    first = rows[0]
    return [DataField(name=name, type=infer_field_type(value)) for name, value in first.items()]


class DataSourceRegistry:
    def __init__(
        self,
        storage: LocalStorage,
        fetcher: EndpointFetcher | None = None,
    ):
        self._storage = storage
        self._fetcher = fetcher
        self._demo: list[DataSource] = build_demo_sources()
        self._user: list[DataSource] = []
        self._lock = asyncio.Lock()
        self._update_gauge()

    async def load(self) -> None:
        """Restore user sources from storage. Malformed entries are skipped."""
        stored = await self._storage.get_json(DATA_SOURCES_KEY)
        if not isinstance(stored, list):
            return

        restored: list[DataSource] = []
        seen: set[str] = set()
        for entry in stored:
            try:
                source = DataSource.model_validate(entry)
            except ValidationError:
                logger.warning("Skipping malformed stored data source", exc_info=True)
                continue
            if source.kind == SourceKind.DEMO or is_demo_source(source.id):
                continue
            if source.id in seen:
                logger.warning("Skipping duplicate stored data source %s", source.id)
                continue
            seen.add(source.id)
            restored.append(source)

        self._user = restored
        self._update_gauge()
        logger.info("Restored %d user data sources", len(restored))

    # ── Reads ────────────────────────────────────────────────────────────

    def list_sources(self) -> list[DataSource]:
        """Demo sources first, then user sources in insertion order."""
        return [*self._demo, *self._user]

    def get_source(self, source_id: str) -> DataSource | None:
        for source in self.list_sources():
            if source.id == source_id:
                return source
        return None

    def get_fields(self, source_id: str) -> list[DataField]:
        source = self.get_source(source_id)
        if source is None:
            return []
        return infer_fields(source.rows)

    def is_protected(self, source_id: str) -> bool:
        return is_demo_source(source_id)

    # ── Writes ───────────────────────────────────────────────────────────

    async def add_source(self, source: DataSource) -> DataSource:
        """Append a user source and persist. The id must be unused."""
        async with self._lock:
            if source.kind == SourceKind.DEMO:
                raise ValueError("Demo data sources are seeded at startup and cannot be added.")
            if self.get_source(source.id) is not None:
                raise DuplicateDataSourceError(source.id)
            self._user.append(source)
            self._update_gauge()
            await self._persist()
        logger.info(
            "Added data source %s (%s, %d rows)", source.id, source.kind.value, len(source.rows)
        )
        return source

    async def remove_source(self, source_id: str) -> bool:
        """Remove a user source. Demo and unknown ids are refused with False."""
        if is_demo_source(source_id):
            logger.info("Refused to delete demo data source %s", source_id)
            return False
        async with self._lock:
            remaining = [s for s in self._user if s.id != source_id]
            if len(remaining) == len(self._user):
                return False
            self._user = remaining
            self._update_gauge()
            await self._persist()
        logger.info("Removed data source %s", source_id)
        return True

    # ── Imports ──────────────────────────────────────────────────────────

    def new_source_id(self) -> str:
        """user-source-<epoch millis>, suffixed when that id is already taken."""
        base = f"{USER_SOURCE_PREFIX}{int(time.time() * 1000)}"
        candidate = base
        suffix = 1
        while self.get_source(candidate) is not None:
            candidate = f"{base}-{suffix}"
            suffix += 1
        return candidate

    async def import_file(
        self, filename: str, content: bytes, name: str | None = None
    ) -> DataSource:
        """Parse an uploaded file and register it as a new source.

        Raises IngestionError on any parse failure; the registry is left untouched.
        """
        try:
            kind, rows = parse_file(filename, content)
        except IngestionError as exc:
            known = EXTENSION_KINDS.get(PurePath(filename).suffix.lower())
            kind_label = known.value if known else "unsupported"
            ingestion_total.labels(kind=kind_label, status="error").inc()
            logger.warning("Import of %s failed: %s", filename, exc)
            raise

        source = DataSource(
            id=self.new_source_id(),
            name=name or PurePath(filename).stem or filename,
            kind=kind,
            added_at=datetime.now(UTC),
            rows=rows,
        )
        await self.add_source(source)
        ingestion_total.labels(kind=kind.value, status="ok").inc()
        ingested_rows.labels(kind=kind.value).observe(len(rows))
        return source

    async def import_endpoint(self, endpoint: str, name: str | None = None) -> DataSource:
        """Fetch rows from an HTTP endpoint and register them as a JSON source."""
        if self._fetcher is None:
            raise IngestionError("Fetching data from an endpoint is not enabled.")
        try:
            rows = await self._fetcher.fetch_rows(endpoint)
        except IngestionError:
            ingestion_total.labels(kind="endpoint", status="error").inc()
            raise

        source = DataSource(
            id=self.new_source_id(),
            name=name or endpoint,
            kind=SourceKind.JSON,
            added_at=datetime.now(UTC),
            rows=rows,
        )
        await self.add_source(source)
        ingestion_total.labels(kind="endpoint", status="ok").inc()
        ingested_rows.labels(kind=SourceKind.JSON.value).observe(len(rows))
        return source

    # ── Internals ────────────────────────────────────────────────────────

    async def _persist(self) -> None:
        """Write every user source. Demo sources are never persisted."""
        await self._storage.set_json(
            DATA_SOURCES_KEY, [s.model_dump(mode="json") for s in self._user]
        )

    def _update_gauge(self) -> None:
        data_sources_registered.set(len(self._demo) + len(self._user))

"""File Ingestion — parses uploaded CSV / Excel / JSON content into rows.

Pure functions, no state. Every parser either returns the complete row list
or raises an IngestionError; there is no partial result.
"""

import csv
import io
import json
import math
import re
import zipfile
from datetime import date, datetime, time
from pathlib import PurePath

from openpyxl import load_workbook
from openpyxl.utils.exceptions import InvalidFileException

from gridboard.core.config import settings
from gridboard.schemas.data_source import Row, Scalar, SourceKind

EXTENSION_KINDS: dict[str, SourceKind] = {
    ".csv": SourceKind.CSV,
    ".xlsx": SourceKind.EXCEL,
    ".json": SourceKind.JSON,
}

_INT_RE = re.compile(r"^\s*-?\d+\s*$")
_FLOAT_RE = re.compile(r"^\s*-?(\d+\.?|\.\d+|\d+\.\d+)([eE][-+]?\d+)?\s*$")


class IngestionError(Exception):
    """Base class for import failures. The message is shown to the user."""


class UnsupportedFileTypeError(IngestionError):
    def __init__(self, filename: str):
        self.filename = filename
        super().__init__(
            f"Unsupported file type for {filename!r}. "
            "Please upload CSV, Excel (.xlsx), or JSON files."
        )


class FileTooLargeError(IngestionError):
    def __init__(self, size: int, limit: int):
        self.size = size
        self.limit = limit
        super().__init__(f"File is {size} bytes; the upload limit is {limit} bytes.")


class FileParseError(IngestionError):
    """Malformed content. Raised for the first problem found."""


def detect_kind(filename: str) -> SourceKind:
    """Map a filename to its source kind by extension. Raises before any parsing."""
    kind = EXTENSION_KINDS.get(PurePath(filename).suffix.lower())
    if kind is None:
        raise UnsupportedFileTypeError(filename)
    return kind


def coerce_scalar(value: str) -> Scalar:
    """Dynamic typing for CSV cells: numbers, true/false, empty → None.

    Only the lower and upper case spellings of true/false are booleans.
    """
    if value == "":
        return None
    if value in ("true", "TRUE"):
        return True
    if value in ("false", "FALSE"):
        return False
    if _INT_RE.match(value):
        try:
            return int(value)
        except ValueError as exc:
            raise FileParseError(f"Number too long to import: {value[:20]}...") from exc
    if _FLOAT_RE.match(value):
        number = float(value)
        if math.isfinite(number):
            return number
    return value


def _decode(content: bytes) -> str:
    try:
        return content.decode("utf-8-sig")
    except UnicodeDecodeError as exc:
        raise FileParseError(f"File is not valid UTF-8 text: {exc}") from exc


def parse_csv(content: bytes) -> list[Row]:
    """Header row defines field names. Blank lines are skipped.

    A row whose cell count differs from the header aborts the import.
    """
    reader = csv.reader(io.StringIO(_decode(content), newline=""))
    header: list[str] | None = None
    rows: list[Row] = []
    try:
        for cells in reader:
            if not any(cell.strip() for cell in cells):
                continue
            if header is None:
                header = cells
                continue
            if len(cells) != len(header):
                raise FileParseError(
                    f"Row {reader.line_num} has {len(cells)} fields; "
                    f"expected {len(header)} to match the header."
                )
            rows.append({key: coerce_scalar(cell) for key, cell in zip(header, cells)})
    except csv.Error as exc:
        raise FileParseError(f"Malformed CSV near line {reader.line_num}: {exc}") from exc
    return rows


def _excel_scalar(value: object) -> Scalar:
    if isinstance(value, datetime | date | time):
        return value.isoformat()
    if value is None or isinstance(value, bool | int | float | str):
        return value
    return str(value)


def parse_excel(content: bytes) -> list[Row]:
    """First worksheet only. Rows keyed by the header row; empty rows skipped."""
    try:
        workbook = load_workbook(io.BytesIO(content), read_only=True, data_only=True)
    except (InvalidFileException, zipfile.BadZipFile, KeyError, OSError, ValueError) as exc:
        raise FileParseError(f"Could not read the Excel workbook: {exc}") from exc

    try:
        sheet = workbook.worksheets[0]
        iterator = sheet.iter_rows(values_only=True)
        try:
            header_row = next(iterator)
        except StopIteration:
            return []
        columns = [str(value) if value is not None else "" for value in header_row]

        rows: list[Row] = []
        for values in iterator:
            if values is None or all(value is None for value in values):
                continue
            row: Row = {}
            for index, column in enumerate(columns):
                if not column:
                    continue
                cell = values[index] if index < len(values) else None
                row[column] = _excel_scalar(cell)
            rows.append(row)
        return rows
    finally:
        workbook.close()


def _json_scalar(value: object) -> Scalar:
    if isinstance(value, dict | list):
        return json.dumps(value)
    return value  # type: ignore[return-value]


def parse_json(content: bytes) -> list[Row]:
    """A top-level list yields one row per element; a single object yields one row."""
    try:
        document = json.loads(_decode(content))
    except json.JSONDecodeError as exc:
        raise FileParseError(f"Invalid JSON: {exc}") from exc
    except ValueError as exc:
        # Integer literals past the interpreter's digit limit.
        raise FileParseError(f"Unreadable JSON number: {exc}") from exc
    return rows_from_json(document)


def rows_from_json(document: object) -> list[Row]:
    items = document if isinstance(document, list) else [document]
    rows: list[Row] = []
    for index, item in enumerate(items):
        if not isinstance(item, dict):
            raise FileParseError(
                f"Element {index} is a {type(item).__name__}; every record must be an object."
            )
        rows.append({str(key): _json_scalar(value) for key, value in item.items()})
    return rows


PARSERS = {
    SourceKind.CSV: parse_csv,
    SourceKind.EXCEL: parse_excel,
    SourceKind.JSON: parse_json,
}


def parse_file(
    filename: str, content: bytes, max_bytes: int | None = None
) -> tuple[SourceKind, list[Row]]:
    """Detect the format from the extension and parse the whole file."""
    kind = detect_kind(filename)
    limit = max_bytes if max_bytes is not None else settings.ingestion.max_upload_bytes
    if len(content) > limit:
        raise FileTooLargeError(len(content), limit)
    return kind, PARSERS[kind](content)

"""Data source endpoints — catalog, field inference, uploads, and endpoint imports."""

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile, status

from gridboard.api.deps import get_data_source_registry
from gridboard.core.config import settings
from gridboard.schemas.data_source import (
    DataField,
    DataSource,
    DataSourceListResponse,
    DataSourceSummary,
    EndpointImportRequest,
)
from gridboard.services.data_source_registry import DataSourceRegistry
from gridboard.services.file_ingestion import (
    FileTooLargeError,
    IngestionError,
    UnsupportedFileTypeError,
)

router = APIRouter()


def _summary(source: DataSource, registry: DataSourceRegistry) -> DataSourceSummary:
    return DataSourceSummary(
        id=source.id,
        name=source.name,
        kind=source.kind,
        added_at=source.added_at,
        row_count=len(source.rows),
        protected=registry.is_protected(source.id),
    )


def _ingestion_error(exc: IngestionError) -> HTTPException:
    if isinstance(exc, UnsupportedFileTypeError):
        code = status.HTTP_415_UNSUPPORTED_MEDIA_TYPE
    elif isinstance(exc, FileTooLargeError):
        code = status.HTTP_413_REQUEST_ENTITY_TOO_LARGE
    else:
        code = status.HTTP_400_BAD_REQUEST
    return HTTPException(status_code=code, detail=str(exc))


@router.get("", response_model=DataSourceListResponse)
async def list_data_sources(
    registry: DataSourceRegistry = Depends(get_data_source_registry),
):
    """Demo sources first, then user sources in the order they were added."""
    items = [_summary(s, registry) for s in registry.list_sources()]
    return DataSourceListResponse(items=items, total=len(items))


@router.get("/{source_id}", response_model=DataSource)
async def get_data_source(
    source_id: str,
    registry: DataSourceRegistry = Depends(get_data_source_registry),
):
    source = registry.get_source(source_id)
    if source is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Data source not found")
    return source


@router.get("/{source_id}/fields", response_model=list[DataField])
async def get_data_source_fields(
    source_id: str,
    registry: DataSourceRegistry = Depends(get_data_source_registry),
):
    """Fields inferred from the first row. Unknown or empty sources have none."""
    return registry.get_fields(source_id)


@router.post("/upload", response_model=DataSourceSummary, status_code=status.HTTP_201_CREATED)
async def upload_data_source(
    file: UploadFile = File(...),
    name: str | None = Form(None),
    registry: DataSourceRegistry = Depends(get_data_source_registry),
):
    """Import a CSV, Excel, or JSON file as a new data source."""
    # Read one byte past the limit so oversize files are rejected without buffering them whole.
    content = await file.read(settings.ingestion.max_upload_bytes + 1)
    try:
        source = await registry.import_file(file.filename or "", content, name=name or None)
    except IngestionError as exc:
        raise _ingestion_error(exc) from exc
    return _summary(source, registry)


@router.post("/endpoint", response_model=DataSourceSummary, status_code=status.HTTP_201_CREATED)
async def import_endpoint(
    body: EndpointImportRequest,
    registry: DataSourceRegistry = Depends(get_data_source_registry),
):
    """Fetch a JSON array of records from a URL and register it."""
    try:
        source = await registry.import_endpoint(body.endpoint, name=body.name)
    except IngestionError as exc:
        raise _ingestion_error(exc) from exc
    return _summary(source, registry)


@router.delete("/{source_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_data_source(
    source_id: str,
    registry: DataSourceRegistry = Depends(get_data_source_registry),
):
    if registry.is_protected(source_id):
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Demo data sources cannot be deleted.",
        )
    if not await registry.remove_source(source_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Data source not found")

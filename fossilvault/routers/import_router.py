"""Import endpoints for spreadsheet fossil collection import."""

import json
import logging
from typing import AsyncIterator, Callable

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile, status
from fastapi.responses import StreamingResponse
from pydantic import TypeAdapter, ValidationError

from fossilvault.config import settings
from fossilvault.models.fields import TargetField
from fossilvault.schemas.import_schemas import (
    FieldMappingResponse,
    ImportPreviewResponse,
    ImportRunRequest,
    MappingConfiguration,
    TabularResult,
)
from fossilvault.services.import_service import (
    BeanieSpecimenStore,
    SourceReadError,
    SpecimenStore,
    apply_overrides,
    build_drafts,
    generate_mapping,
    import_selected,
    parse_csv,
    parse_xlsx,
)

logger = logging.getLogger(__name__)

router = APIRouter()

# Allowed file extensions
ALLOWED_EXTENSIONS = {"csv", "tsv", "txt", "xlsx", "xlsm"}

StoreFactory = Callable[[str], SpecimenStore]

_overrides_adapter = TypeAdapter(dict[TargetField, list[str]])


def get_store_factory() -> StoreFactory:
    """Dependency returning a factory for owner-scoped specimen stores."""
    return BeanieSpecimenStore


def _get_file_extension(filename: str | None) -> str:
    """Extract file extension from filename."""
    if not filename:
        return ""
    return filename.rsplit(".", 1)[-1].lower() if "." in filename else ""


async def _read_spreadsheet(file: UploadFile) -> TabularResult:
    """Validate, read and parse an uploaded spreadsheet.

    Raises:
        HTTPException: 400 for unsupported or unreadable files, 413 when too large.
    """
    ext = _get_file_extension(file.filename)
    if ext not in ALLOWED_EXTENSIONS:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Unsupported file type '.{ext}'. Allowed: CSV, XLSX",
        )

    # Read in chunks to avoid unbounded memory for oversized files
    max_size = settings.max_upload_size_bytes
    chunks: list[bytes] = []
    total_size = 0
    while True:
        chunk = await file.read(64 * 1024)
        if not chunk:
            break
        total_size += len(chunk)
        if total_size > max_size:
            raise HTTPException(
                status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
                detail=f"File exceeds maximum size of {settings.max_upload_size_mb} MB",
            )
        chunks.append(chunk)
    content = b"".join(chunks)

    source_name = file.filename or "unknown"
    try:
        if ext in ("xlsx", "xlsm"):
            result = parse_xlsx(content, source_name, settings.max_rows)
        else:
            result = parse_csv(content, source_name, settings.max_rows)
    except SourceReadError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    if not result.rows:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Spreadsheet has no data rows",
        )
    return result


def _configure(result: TabularResult, overrides: dict[TargetField, list[str]]) -> MappingConfiguration:
    config = generate_mapping(result)
    try:
        return apply_overrides(config, overrides)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))


@router.post("/preview", response_model=ImportPreviewResponse)
async def preview_import(
    file: UploadFile = File(..., description="CSV or XLSX spreadsheet"),
    mapping: str | None = Form(
        None, description="JSON object of target field -> source columns overriding the suggestion"
    ),
) -> ImportPreviewResponse:
    """Upload a spreadsheet and preview its suggested mapping and validated rows."""
    result = await _read_spreadsheet(file)

    overrides: dict[TargetField, list[str]] = {}
    if mapping:
        try:
            overrides = _overrides_adapter.validate_json(mapping)
        except ValidationError as e:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    config = _configure(result, overrides)
    drafts = build_drafts(config, settings.default_currency)

    return ImportPreviewResponse(
        source_name=result.source_name,
        delimiter=result.delimiter_name,
        row_count=result.row_count,
        headers=result.headers,
        preview_rows=result.sample_rows(),
        mappings=[FieldMappingResponse.from_mapping(m) for m in config.mappings],
        unmapped_required_fields=config.unmapped_required_fields(),
        conflicting_columns=config.conflicting_columns(),
        drafts=drafts,
        importable_count=sum(1 for d in drafts if d.is_importable),
    )


@router.post("/run")
async def run_import(
    file: UploadFile = File(..., description="CSV or XLSX spreadsheet"),
    options: str = Form(..., description="JSON ImportRunRequest"),
    store_factory: StoreFactory = Depends(get_store_factory),
) -> StreamingResponse:
    """Import a spreadsheet, streaming progress as newline-delimited JSON.

    Each line is either {"progress": ImportProgress} or, last,
    {"summary": ImportSummary}.
    """
    try:
        request = ImportRunRequest.model_validate_json(options)
    except ValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    result = await _read_spreadsheet(file)
    config = _configure(result, request.mapping)
    if not config.has_all_required_fields_mapped():
        missing = ", ".join(f.display_name for f in config.unmapped_required_fields())
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Required fields are not mapped: {missing}",
        )

    deselected = set(request.deselected_rows)
    drafts = [
        d.with_selected(False) if d.row_index in deselected else d
        for d in build_drafts(config, settings.default_currency)
    ]

    logger.info(
        "Import of %s for owner %s: %d rows, %d deselected",
        result.source_name,
        request.owner_id,
        len(drafts),
        len(deselected),
    )
    run = import_selected(
        drafts,
        request.owner_id,
        store_factory(request.owner_id),
        source_name=result.source_name,
        batch_size=settings.batch_size,
        default_currency=settings.default_currency,
    )

    async def stream() -> AsyncIterator[str]:
        async for progress in run:
            yield json.dumps({"progress": progress.model_dump(mode="json")}) + "\n"
        yield json.dumps({"summary": run.summary().model_dump(mode="json")}) + "\n"

    return StreamingResponse(stream(), media_type="application/x-ndjson")

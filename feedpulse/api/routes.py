"""FastAPI routes for the feedpulse API.

Service dependencies are resolved from ``app.state`` via FastAPI's
``Depends`` using the ``Annotated`` pattern.

# ─── API ROUTE MAP ────────────────────────────────────────────────────
#
# Endpoint                    Method   Description
# ─────────────────────────────────────────────────────────────────────
# /api/feedback               GET      List all feedback records
# /api/feedback               POST     Store one feedback record
# /api/feedback?id=<n>        DELETE   Delete a record by id
# /api/feedback/{id}          DELETE   Delete a record by id
# /api/ingest                 POST     Ingest pasted newline-separated text
# /api/ingest/upload          POST     Ingest an uploaded .txt/.csv file
# /api/report                 GET      Sentiment + theme dashboard summary
# /api/clear-data             POST     Delete every record
# /api/health                 GET      Service + storage status
#
# Any path answers OPTIONS with an empty 200 (see CORSHeadersMiddleware).
# Other methods on these paths return 405 {"error": "Method not allowed"}.
# ──────────────────────────────────────────────────────────────────────
"""

from __future__ import annotations

from typing import Annotated

import structlog
from fastapi import APIRouter, Depends, Query, Request, UploadFile

from feedpulse.api.schemas import (
    ClearDataResponse,
    CreateFeedbackRequest,
    DeleteResponse,
    ErrorResponse,
    FeedbackListResponse,
    HealthResponse,
    IngestTextRequest,
)
from feedpulse.interfaces.feedback_store import IFeedbackStore
from feedpulse.models.feedback import FeedbackRecord
from feedpulse.models.ingestion import IngestionReport
from feedpulse.models.report import FeedbackReport
from feedpulse.services.ingestion_service import IngestionService
from feedpulse.services.report_service import ReportService
from feedpulse.utils.errors import NotFoundError, ValidationError
from feedpulse.utils.logging import get_logger

_logger: structlog.BoundLogger = get_logger(__name__)

router = APIRouter(prefix="/api")

_VERSION = "0.1.0"

# Uploads are read in chunks so oversized files are rejected before the
# whole payload is buffered.
_MAX_UPLOAD_SIZE = 1 * 1024 * 1024  # 1 MB
_UPLOAD_CHUNK_SIZE = 64 * 1024  # 64 KB


# ---------------------------------------------------------------------------
# Dependency injection helpers - resolve singletons from app.state
# ---------------------------------------------------------------------------


def _get_store(request: Request) -> IFeedbackStore:
    """Return the feedback store from application state."""
    return request.app.state.feedback_store


def _get_ingestion_service(request: Request) -> IngestionService:
    """Return the ingestion service from application state."""
    return request.app.state.ingestion_service


def _get_report_service(request: Request) -> ReportService:
    """Return the report service from application state."""
    return request.app.state.report_service


StoreDep = Annotated[IFeedbackStore, Depends(_get_store)]
IngestionDep = Annotated[IngestionService, Depends(_get_ingestion_service)]
ReportDep = Annotated[ReportService, Depends(_get_report_service)]


def _parse_record_id(raw: str | None) -> int:
    if raw is None or not raw.strip():
        raise ValidationError("ID is required")
    try:
        record_id = int(raw)
    except ValueError as exc:
        raise ValidationError(f"ID must be an integer, got {raw!r}") from exc
    return record_id


async def _delete(store: IFeedbackStore, record_id: int) -> DeleteResponse:
    if not await store.delete_by_id(record_id):
        raise NotFoundError("Feedback not found")
    _logger.info("feedback_deleted_via_api", id=record_id)
    return DeleteResponse(deleted=1)


# ---------------------------------------------------------------------------
# Feedback CRUD
# ---------------------------------------------------------------------------


@router.get(
    "/feedback",
    response_model=FeedbackListResponse,
    summary="List all feedback records",
)
async def list_feedback(store: StoreDep) -> FeedbackListResponse:
    """Return every stored record, oldest first.  Empty list when none."""
    return FeedbackListResponse(data=await store.list_all())


@router.post(
    "/feedback",
    response_model=FeedbackRecord,
    status_code=201,
    responses={400: {"model": ErrorResponse}},
    summary="Store one feedback record",
)
async def create_feedback(body: CreateFeedbackRequest, store: StoreDep) -> FeedbackRecord:
    """Store *text* as-is with an optional client-supplied classification."""
    if body.text is None or not body.text.strip():
        raise ValidationError("Feedback text is required")
    return await store.insert(body.text, body.sentiment, body.confidence)


@router.delete(
    "/feedback",
    response_model=DeleteResponse,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
    summary="Delete a feedback record (id in the query string)",
)
async def delete_feedback_by_query(
    store: StoreDep,
    record_id: Annotated[str | None, Query(alias="id")] = None,
) -> DeleteResponse:
    return await _delete(store, _parse_record_id(record_id))


@router.delete(
    "/feedback/{record_id}",
    response_model=DeleteResponse,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
    summary="Delete a feedback record (id in the path)",
)
async def delete_feedback_by_path(record_id: str, store: StoreDep) -> DeleteResponse:
    return await _delete(store, _parse_record_id(record_id))


@router.post(
    "/clear-data",
    response_model=ClearDataResponse,
    summary="Delete every feedback record",
)
async def clear_data(store: StoreDep) -> ClearDataResponse:
    await store.clear_all()
    return ClearDataResponse(success=True, message="All feedback data cleared")


# ---------------------------------------------------------------------------
# Ingestion + reporting
# ---------------------------------------------------------------------------


@router.post(
    "/ingest",
    response_model=IngestionReport,
    responses={400: {"model": ErrorResponse}},
    summary="Ingest newline-separated feedback text",
)
async def ingest_text(body: IngestTextRequest, ingestion: IngestionDep) -> IngestionReport:
    """Clean, dedup, classify and store each line of *text*."""
    return await ingestion.ingest_text(body.text)


@router.post(
    "/ingest/upload",
    response_model=IngestionReport,
    responses={400: {"model": ErrorResponse}},
    summary="Ingest an uploaded .txt or .csv file",
)
async def ingest_upload(file: UploadFile, ingestion: IngestionDep) -> IngestionReport:
    """Validate the upload against the allow-list, then ingest it line by line."""
    ingestion.validate_upload(file.filename, file.content_type)

    chunks: list[bytes] = []
    total = 0
    while chunk := await file.read(_UPLOAD_CHUNK_SIZE):
        total += len(chunk)
        if total > _MAX_UPLOAD_SIZE:
            raise ValidationError(
                f"File too large. Maximum size is {_MAX_UPLOAD_SIZE // 1024} KB."
            )
        chunks.append(chunk)

    return await ingestion.ingest_upload(file.filename, file.content_type, b"".join(chunks))


@router.get(
    "/report",
    response_model=FeedbackReport,
    summary="Sentiment breakdown, theme counts and top-theme insight",
)
async def get_report(reports: ReportDep) -> FeedbackReport:
    return await reports.build_report()


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Service and storage status",
)
async def health(store: StoreDep) -> HealthResponse:
    records = await store.list_all()
    degraded = bool(getattr(store, "degraded", False))
    return HealthResponse(
        status="degraded" if degraded else "ok",
        version=_VERSION,
        store=store.get_provider_name(),
        degraded=degraded,
        records=len(records),
    )

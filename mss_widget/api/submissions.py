"""
Submission log endpoints: append, list with annotations, row update,
annotation upsert and raw CSV download.
"""

from datetime import datetime, timezone
from typing import Any, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from fastapi.responses import PlainTextResponse

from .deps import client_ip, get_submission_log, json_body, require_admin
from .schemas import (
    AnnotationRequest,
    AnnotationResponse,
    SubmissionListResponse,
    SubmissionResponse,
    SubmissionUpdateResponse,
)
from ..core.annotations import row_key
from ..core.errors import (
    AnnotationError,
    LogWriteError,
    RowNotFoundError,
    RowOutOfRangeError,
)
from ..core.scoring import submission_fields_from_payload
from ..core.submission_log import SubmissionLog

router = APIRouter()


@router.post("/submission", response_model=SubmissionResponse)
async def log_submission(request: Request, log: SubmissionLog = Depends(get_submission_log)):
    """Append one submission to the CSV log.

    Accepts the flat field map sent by the widget. When the body carries the
    raw scoring response under ``mssBody``, missing score fields are filled
    from it.
    """
    body = await json_body(request)
    if not isinstance(body, dict):
        body = {}

    fields = submission_fields_from_payload(body)
    if not fields.get("timestamp"):
        fields["timestamp"] = datetime.now(timezone.utc).isoformat()
    if not fields.get("ip"):
        fields["ip"] = client_ip(request)
    if not fields.get("userAgent"):
        fields["userAgent"] = request.headers.get("user-agent", "")

    try:
        log.append(fields)
    except LogWriteError as e:
        raise HTTPException(status_code=500, detail={"ok": False, "error": "log failed", "details": str(e)})

    return SubmissionResponse(ok=True, file=log.path.name, rating=fields.get("rating") or None)


@router.get("/submissions", response_model=SubmissionListResponse)
def list_submissions(
    limit: Optional[int] = Query(None, description="Most recent rows to return (clamped to the configured maximum)"),
    log: SubmissionLog = Depends(get_submission_log),
):
    """Most recent submissions merged with reviewer annotations."""
    page = log.list(limit)
    return SubmissionListResponse(**page.to_dict())


@router.put("/submission/{row_id}", response_model=SubmissionUpdateResponse, dependencies=[Depends(require_admin)])
async def update_submission(row_id: str, request: Request, log: SubmissionLog = Depends(get_submission_log)):
    """Overwrite fields of one logged row. Body is a field map, or ``{"updates": {...}}``."""
    body = await json_body(request)
    updates: Any = body.get("updates", body) if isinstance(body, dict) else {}
    if not isinstance(updates, dict):
        updates = {}

    try:
        row = log.update_row(row_id, updates)
    except RowNotFoundError as e:
        raise HTTPException(status_code=404, detail={"ok": False, "error": "not found", "details": str(e)})
    except RowOutOfRangeError as e:
        raise HTTPException(status_code=400, detail={"ok": False, "error": "out of range", "details": str(e)})
    except LogWriteError as e:
        raise HTTPException(status_code=500, detail={"ok": False, "error": "update failed", "details": str(e)})

    return SubmissionUpdateResponse(ok=True, id=int(row_id.strip()), row=row)


@router.post("/annotation", response_model=AnnotationResponse, dependencies=[Depends(require_admin)])
def upsert_annotation(request: AnnotationRequest, log: SubmissionLog = Depends(get_submission_log)):
    """Attach a reviewer note to a row id. The row does not have to exist yet."""
    try:
        annotation = log.upsert_annotation(request.id, note=request.note, teacher=request.teacher)
    except AnnotationError as e:
        raise HTTPException(status_code=400, detail={"ok": False, "error": "bad request", "details": str(e)})
    except LogWriteError as e:
        raise HTTPException(status_code=500, detail={"ok": False, "error": "annotation failed", "details": str(e)})

    return AnnotationResponse(
        ok=True,
        id=row_key(request.id),
        note=annotation.note,
        teacher=annotation.teacher,
        updatedAt=annotation.updatedAt,
    )


@router.get("/csv", response_class=PlainTextResponse)
def download_csv(log: SubmissionLog = Depends(get_submission_log)):
    """Raw CSV for the report page."""
    return PlainTextResponse(
        log.read_raw(),
        media_type="text/csv",
        headers={"Content-Disposition": f'inline; filename="{log.path.name}"'},
    )

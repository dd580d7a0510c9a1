"""
QA run logger: test step results and bug tickets, each in its own CSV.
"""

from datetime import datetime, timezone

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import PlainTextResponse

from .deps import get_qa_log, get_qa_tickets
from .schemas import OkResponse, QALogRequest, QATicketRequest
from ..core.errors import LogWriteError
from ..core.submission_log import SubmissionLog
from ..util.logging import logger

router = APIRouter()


@router.post("/log", response_model=OkResponse)
def log_qa_results(request: QALogRequest, qa_log: SubmissionLog = Depends(get_qa_log)):
    """Record one QA run; every step shares the same timestamp and component."""
    ts = datetime.now(timezone.utc).isoformat()
    rows = [
        {"timestamp": ts, "component": request.component, "stepId": r.stepId, "result": r.result}
        for r in request.rows
    ]

    try:
        qa_log.append_many(rows)
    except LogWriteError as e:
        raise HTTPException(status_code=500, detail={"ok": False, "error": "write failed", "details": str(e)})

    logger.log_batch("qa.log", rows)
    return OkResponse(ok=True, file=qa_log.path.name)


@router.get("/log", response_class=PlainTextResponse)
def get_qa_results(qa_log: SubmissionLog = Depends(get_qa_log)):
    if not qa_log.exists():
        raise HTTPException(status_code=404, detail="no qa log yet")
    return PlainTextResponse(qa_log.read_raw(), media_type="text/csv")


@router.post("/ticket", response_model=OkResponse)
def file_qa_ticket(request: QATicketRequest, tickets: SubmissionLog = Depends(get_qa_tickets)):
    fields = request.model_dump()
    fields["timestamp"] = datetime.now(timezone.utc).isoformat()

    try:
        tickets.append(fields)
    except LogWriteError as e:
        raise HTTPException(status_code=500, detail={"ok": False, "error": "write failed", "details": str(e)})

    return OkResponse(ok=True, file=tickets.path.name)

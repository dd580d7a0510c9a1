"""
Store providers and the admin write guard, injected with FastAPI ``Depends``.

Tests swap the stores through ``app.dependency_overrides``.
"""

import json
from pathlib import Path
from typing import Any, Optional

from fastapi import Header, HTTPException, Request

from ..core import config
from ..core.annotations import AnnotationStore
from ..core.config_resolver import ConfigResolver
from ..core.submission_log import SubmissionLog
from ..util.logging import logger

_config_resolver = None
_submission_log = None
_qa_log = None
_qa_tickets = None


def get_config_resolver() -> ConfigResolver:
    """Lazy initialization of the config resolver."""
    global _config_resolver
    if _config_resolver is None:
        _config_resolver = ConfigResolver.from_dirs(config.DATA_DIR, config.REPO_CONFIG_DIR)
    return _config_resolver


def get_submission_log() -> SubmissionLog:
    """Lazy initialization of the submission log and its annotation store."""
    global _submission_log
    if _submission_log is None:
        _submission_log = SubmissionLog(
            config.submission_log_path(),
            config.SUBMISSION_FIELDS,
            annotations=AnnotationStore(config.annotations_path()),
        )
    return _submission_log


def get_qa_log() -> SubmissionLog:
    global _qa_log
    if _qa_log is None:
        _qa_log = SubmissionLog(Path(config.QA_DIR) / "qa-log.csv", config.QA_LOG_FIELDS)
    return _qa_log


def get_qa_tickets() -> SubmissionLog:
    global _qa_tickets
    if _qa_tickets is None:
        _qa_tickets = SubmissionLog(Path(config.QA_DIR) / "qa-tickets.csv", config.QA_TICKET_FIELDS)
    return _qa_tickets


def require_admin(x_admin_key: Optional[str] = Header(None, alias="X-ADMIN-KEY")) -> None:
    """Reject writes without the configured admin key. No key configured means open."""
    configured = config.admin_write_key()
    if not configured:
        return
    if x_admin_key and x_admin_key == configured:
        return
    logger.log_rejected_request("admin_guard", "missing or wrong X-ADMIN-KEY")
    raise HTTPException(status_code=401, detail={"ok": False, "error": "unauthorized"})


async def json_body(request: Request) -> Any:
    """Request body as JSON; empty or malformed bodies read as None."""
    raw = await request.body()
    if not raw:
        return None
    try:
        return json.loads(raw)
    except ValueError:
        logger.warning(f"Ignoring malformed JSON body on {request.url.path}")
        return None


def client_ip(request: Request) -> str:
    forwarded = request.headers.get("x-forwarded-for", "")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.client.host if request.client else ""

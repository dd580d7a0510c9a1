"""
MSS Widget service - HTTP surface.

Serves the editable widget configuration documents and records submission
telemetry to CSV. Static assets and the admin UI are served elsewhere.
"""

from datetime import datetime, timezone
from typing import Any, Dict, List

from fastapi import FastAPI, HTTPException, Depends, Request
from fastapi.middleware.cors import CORSMiddleware

from .deps import get_config_resolver, get_submission_log, json_body, require_admin
from .schemas import HealthResponse, OkResponse
from .submissions import router as submissions_router
from .qa import router as qa_router
from ..core.config import CORS_ORIGINS, VERSION, debug_enabled, ensure_data_directory, validate_config
from ..core.config_resolver import ConfigResolver
from ..core.errors import ConfigWriteError, UnknownConfigKindError
from ..core.submission_log import SubmissionLog
from ..util.logging import logger

ensure_data_directory()

for issue in validate_config():
    logger.warning(f"Configuration issue: {issue}")

# Initialize the FastAPI application
app = FastAPI(
    title="MSS Widget Service",
    version=VERSION,
    description="Widget configuration and submission log backend",
    docs_url="/docs" if debug_enabled() else None,
    redoc_url="/redoc" if debug_enabled() else None
)

# The widget is embedded on third-party pages
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/health", response_model=HealthResponse)
def health_check_endpoint(log: SubmissionLog = Depends(get_submission_log)):
    """Check service health."""
    return HealthResponse(
        ok=True,
        time=datetime.now(timezone.utc).isoformat(),
        version=VERSION,
        submissions=log.count(),
    )


@app.get("/config", response_model=List[str])
def list_config_kinds(resolver: ConfigResolver = Depends(get_config_resolver)):
    """Known config kinds."""
    return resolver.kinds()


@app.get("/config/{kind}", response_model=Dict[str, Any])
def get_config_endpoint(kind: str, resolver: ConfigResolver = Depends(get_config_resolver)):
    """Resolved config document: runtime override, then repository default, then built-in default."""
    try:
        return resolver.get(kind)
    except UnknownConfigKindError:
        raise HTTPException(status_code=404, detail=f"Unknown config kind: {kind}")


@app.put("/config/{kind}", response_model=OkResponse, dependencies=[Depends(require_admin)])
async def put_config_endpoint(kind: str, request: Request, resolver: ConfigResolver = Depends(get_config_resolver)):
    """Replace a config document. Anything but a JSON object is stored as ``{}``."""
    body = await json_body(request)

    try:
        resolver.put(kind, body)
    except UnknownConfigKindError:
        raise HTTPException(status_code=404, detail=f"Unknown config kind: {kind}")
    except ConfigWriteError as e:
        raise HTTPException(status_code=500, detail={"ok": False, "error": "write failed", "details": str(e)})

    return OkResponse(ok=True)


app.include_router(submissions_router, prefix="/log", tags=["submissions"])
app.include_router(qa_router, prefix="/qa", tags=["qa"])

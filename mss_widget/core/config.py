"""
Service configuration read from the environment.

Paths and limits are resolved once at import. The helper functions re-read
the environment so the admin guard and debug flag can be toggled at runtime.
"""

import os
from pathlib import Path

# Writable runtime tier (config overrides, submission log, annotations)
DATA_DIR = os.getenv("MSS_DATA_DIR", "./data")

# Read-only repository defaults for config documents
REPO_CONFIG_DIR = os.getenv("MSS_REPO_CONFIG_DIR", "./config")

LOG_FILE = os.getenv("MSS_LOG_FILE", "log.csv")
ANNOTATIONS_FILE = os.getenv("MSS_ANNOTATIONS_FILE", "annotations.json")
QA_DIR = os.getenv("MSS_QA_DIR", os.path.join(DATA_DIR, "qa"))

# Submission listing bounds
LIST_DEFAULT_LIMIT = int(os.getenv("MSS_LIST_DEFAULT_LIMIT", "200"))
LIST_MAX_LIMIT = int(os.getenv("MSS_LIST_MAX_LIMIT", "2000"))

CORS_ORIGINS = [o.strip() for o in os.getenv("MSS_CORS_ORIGINS", "*").split(",") if o.strip()]

# Version string
VERSION = "1.0.0"

# Canonical submission header (keep in sync with the widget and the report page).
# Columns after ``wpm`` carry scoring sub-scores and request metadata; files
# created with the shorter header keep it.
SUBMISSION_FIELDS = [
    "timestamp",
    "ip",
    "userId",
    "fileName",
    "lengthSec",
    "submitTime",
    "toefl",
    "ielts",
    "pte",
    "cefr",
    "question",
    "transcript",
    "wpm",
    "score",
    "fluency",
    "grammar",
    "pronunciation",
    "vocabulary",
    "rating",
    "apiKeyMask",
    "apiSecretMask",
    "statusCode",
    "rateLimit",
    "rateRemaining",
    "userAgent",
]

QA_LOG_FIELDS = ["timestamp", "component", "stepId", "result"]

QA_TICKET_FIELDS = [
    "timestamp",
    "tester",
    "component",
    "stepId",
    "stepText",
    "severity",
    "steps",
    "expected",
    "actual",
    "notes",
]


def debug_enabled():
    """Check if debug mode is enabled."""
    return os.getenv("DEBUG", "true").lower() == "true"


def admin_write_key():
    """Admin key required for writes; empty string disables the guard."""
    return os.getenv("ADMIN_WRITE_KEY", "")


def ensure_data_directory():
    """Ensure the runtime data directory exists."""
    Path(DATA_DIR).mkdir(parents=True, exist_ok=True)


def submission_log_path() -> Path:
    return Path(DATA_DIR) / LOG_FILE


def annotations_path() -> Path:
    return Path(DATA_DIR) / ANNOTATIONS_FILE


def clamp_limit(limit) -> int:
    """Clamp a requested row limit into [1, LIST_MAX_LIMIT]; None means default."""
    if limit is None:
        return min(LIST_DEFAULT_LIMIT, LIST_MAX_LIMIT)
    return max(1, min(int(limit), LIST_MAX_LIMIT))


def validate_config():
    """Validate configuration and return any issues."""
    issues = []

    if LIST_DEFAULT_LIMIT < 1:
        issues.append("MSS_LIST_DEFAULT_LIMIT must be >= 1")

    if LIST_MAX_LIMIT < LIST_DEFAULT_LIMIT:
        issues.append("MSS_LIST_MAX_LIMIT must be >= MSS_LIST_DEFAULT_LIMIT")

    if os.path.abspath(DATA_DIR) == os.path.abspath(REPO_CONFIG_DIR):
        issues.append("MSS_DATA_DIR and MSS_REPO_CONFIG_DIR must differ")

    return issues

"""
Reviewer annotations keyed by submission row id.

The whole store is one JSON object ``{id: {note, teacher, updatedAt}}``,
loaded in full and rewritten atomically on every upsert.
"""

from datetime import datetime, timezone
from pathlib import Path
from typing import Dict

from .errors import AnnotationError, LogWriteError
from .fileio import lock_for, read_json_object, write_json_object
from .schema import Annotation
from ..util.logging import logger


def row_key(row_id) -> str:
    """Canonical annotation key: decimal ids lose padding ("07" -> "7")."""
    key = "" if row_id is None else str(row_id).strip()
    if key.isascii() and key.isdigit():
        return str(int(key))
    return key


class AnnotationStore:
    def __init__(self, path):
        self.path = Path(path)

    def load(self) -> Dict[str, Annotation]:
        """All annotations; a missing or corrupt file reads as empty."""
        raw = read_json_object(self.path)
        if raw is None:
            if self.path.exists():
                logger.warning(f"Annotation store {self.path} is unreadable, treating as empty")
            return {}
        return {str(key): Annotation.from_dict(value) for key, value in raw.items()}

    def get(self, row_id) -> Annotation:
        return self.load().get(row_key(row_id), Annotation())

    def upsert(self, row_id, note: str = "", teacher: str = "") -> Annotation:
        key = row_key(row_id)
        if not key:
            logger.log_rejected_request("annotation.upsert", "missing id")
            raise AnnotationError("id is required")

        annotation = Annotation(
            note="" if note is None else str(note),
            teacher="" if teacher is None else str(teacher),
            updatedAt=datetime.now(timezone.utc).isoformat(),
        )

        try:
            with lock_for(self.path):
                entries = {k: v.to_dict() for k, v in self.load().items()}
                entries[key] = annotation.to_dict()
                write_json_object(self.path, entries)
        except OSError as e:
            logger.log_annotation_operation(key, teacher=annotation.teacher, status="failed")
            raise LogWriteError(f"Failed to store annotation for {key}: {e}") from e

        logger.log_annotation_operation(key, teacher=annotation.teacher)
        return annotation

"""
Structured logging for configuration, submission log and annotation operations.
"""

import logging
from typing import Any, Dict, List


def _truncate(value: Any, limit: int = 50) -> Any:
    if isinstance(value, str) and len(value) > limit:
        return value[:limit] + "..."
    return value


class StructuredLogger:
    """Structured logger for store and API operations."""

    def __init__(self, name: str = "mss_widget"):
        self.logger = logging.getLogger(name)
        self.logger.setLevel(logging.INFO)

        # Create handler if not already set
        if not self.logger.handlers:
            handler = logging.StreamHandler()
            formatter = logging.Formatter(
                '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
            )
            handler.setFormatter(formatter)
            self.logger.addHandler(handler)

    def log_operation(self, operation: str, status: str, details: Dict[str, Any] = None):
        """Log a structured operation."""
        message = f"Operation: {operation}, Status: {status}"
        if details:
            message += f", Details: {details}"

        if status in ("failed", "error"):
            self.logger.error(message)
        elif status in ("fallback", "degraded"):
            self.logger.warning(message)
        else:
            self.logger.info(message)

    def log_config_operation(self, operation: str, kind: str, source: str = None, status: str = "success"):
        """Log a config resolver operation."""
        details = {"kind": kind}
        if source is not None:
            details["source"] = source

        self.log_operation(f"config.{operation}", status, details)

    def log_submission_operation(self, operation: str, path: str, details: Dict[str, Any] = None, status: str = "success"):
        """Log a CSV log store operation."""
        log_details = {"file": path}
        if details:
            log_details.update({k: _truncate(v) for k, v in details.items()})

        self.log_operation(f"log.{operation}", status, log_details)

    def log_annotation_operation(self, row_id: str, teacher: str = None, status: str = "success"):
        """Log an annotation upsert."""
        details = {"id": row_id}
        if teacher:
            details["teacher"] = _truncate(teacher)

        self.log_operation("annotation.upsert", status, details)

    def log_rejected_request(self, operation: str, reason: str, identifiers: Dict[str, Any] = None):
        """Log a request rejected by validation or the admin guard."""
        details = dict(identifiers or {})
        details["reason"] = reason[:100]

        self.log_operation(operation, "rejected", details)

    def log_batch(self, operation: str, items: List[Any], status: str = "success"):
        """Log a batch operation with its item count only."""
        self.log_operation(operation, status, {"count": len(items)})

    # Standard logging methods for compatibility
    def info(self, message: str) -> None:
        """Log an info message."""
        self.logger.info(message)

    def warning(self, message: str) -> None:
        """Log a warning message."""
        self.logger.warning(message)

    def error(self, message: str) -> None:
        """Log an error message."""
        self.logger.error(message)

    def debug(self, message: str) -> None:
        """Log a debug message."""
        self.logger.debug(message)


# Global logger instance
logger = StructuredLogger()

"""
Tests for the structured operation logger.
"""

import logging

from mss_widget.util.logging import StructuredLogger, logger


def test_log_operation_message_format(caplog):
    with caplog.at_level(logging.INFO, logger="mss_widget"):
        logger.log_operation("config.put", "success", {"kind": "widget"})

    assert "Operation: config.put, Status: success, Details: {'kind': 'widget'}" in caplog.text


def test_failed_operations_log_at_error(caplog):
    with caplog.at_level(logging.INFO, logger="mss_widget"):
        logger.log_submission_operation("append", "/tmp/log.csv", {"error": "disk full"}, status="failed")

    record = caplog.records[-1]
    assert record.levelno == logging.ERROR
    assert "log.append" in record.getMessage()


def test_fallback_logs_at_warning(caplog):
    with caplog.at_level(logging.INFO, logger="mss_widget"):
        logger.log_config_operation("read", "forms", source="data/form.json", status="fallback")

    assert caplog.records[-1].levelno == logging.WARNING


def test_long_values_truncated(caplog):
    with caplog.at_level(logging.INFO, logger="mss_widget"):
        logger.log_submission_operation("update", "log.csv", {"fields": "x" * 200})

    assert "x" * 50 + "..." in caplog.text
    assert "x" * 51 not in caplog.text


def test_annotation_and_rejection_helpers(caplog):
    with caplog.at_level(logging.INFO, logger="mss_widget"):
        logger.log_annotation_operation("3", teacher="Ms. K")
        logger.log_rejected_request("admin_guard", "missing key")

    assert "annotation.upsert" in caplog.text
    assert "'teacher': 'Ms. K'" in caplog.text
    assert "Status: rejected" in caplog.text


def test_handler_added_once():
    first = StructuredLogger("mss_widget.test_handlers")
    second = StructuredLogger("mss_widget.test_handlers")

    assert first.logger is second.logger
    assert len(second.logger.handlers) == 1

# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Unit tests for structured logging
"""

import json
import logging

from blockflow.core.errors import BlockflowError, ValidationError
from blockflow.core.logging import JSONFormatter, get_logger, log_event


def test_json_formatter_includes_extra_fields():
    record = logging.LogRecord("blockflow.test", logging.INFO, __file__, 1, "Parallel started", None, None)
    record.parallel_id = "P"

    data = json.loads(JSONFormatter().format(record))

    assert data["message"] == "Parallel started"
    assert data["level"] == "INFO"
    assert data["parallel_id"] == "P"


def test_log_event_writes_json(capsys):
    logger = get_logger("blockflow.test.events", log_format="json")

    log_event(logger, "Wave executed", wave=3)

    data = json.loads(capsys.readouterr().out.strip())
    assert data["message"] == "Wave executed"
    assert data["wave"] == 3


def test_get_logger_replaces_handlers(tmp_path):
    log_file = tmp_path / "logs" / "engine.log"
    get_logger("blockflow.test.files")
    logger = get_logger("blockflow.test.files", log_format="text", log_file=log_file)

    assert len(logger.handlers) == 2
    assert log_file.parent.exists()


def test_error_to_dict():
    error = ValidationError("bad block", field="blocks", details={"id": "x"})

    assert isinstance(error, BlockflowError)
    assert error.to_dict() == {
        "error": "ValidationError",
        "message": "bad block",
        "details": {"id": "x"},
    }


def test_text_formatter_appends_event_fields():
    from blockflow.core.logging import TextFormatter

    record = logging.LogRecord("blockflow.test", logging.INFO, __file__, 1, "Parallel started", None, None)
    record.parallel_id = "P"
    record.parallel_count = 3

    line = TextFormatter().format(record)

    assert "Parallel started" in line
    assert line.endswith("parallel_id=P parallel_count=3")

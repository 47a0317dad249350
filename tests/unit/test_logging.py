"""Unit tests for the log formatters."""

import json
import logging

from voice_ingest.utils.logging import JsonFormatter, TextFormatter, setup_logging


def make_record(**extra):
    record = logging.LogRecord("voice_ingest.test", logging.INFO, __file__, 1, "Converted %s", ("voice.amr",), None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_json_formatter_includes_extras():
    line = JsonFormatter().format(make_record(provider="groq", exit_code=1))
    payload = json.loads(line)

    assert payload["message"] == "Converted voice.amr"
    assert payload["level"] == "INFO"
    assert payload["logger"] == "voice_ingest.test"
    assert payload["provider"] == "groq"
    assert payload["exit_code"] == 1
    assert "args" not in payload


def test_text_formatter_appends_key_values():
    line = TextFormatter().format(make_record(stage="conversion"))

    assert "Converted voice.amr" in line
    assert line.endswith("stage=conversion")


def test_setup_logging_replaces_handlers():
    class Config:
        log_level = "debug"
        log_format = "text"

    root = logging.getLogger()
    saved_handlers, saved_level = list(root.handlers), root.level
    try:
        setup_logging(Config())

        assert len(root.handlers) == 1
        assert isinstance(root.handlers[0].formatter, TextFormatter)
        assert root.level == logging.DEBUG
    finally:
        root.handlers[:] = saved_handlers
        root.setLevel(saved_level)

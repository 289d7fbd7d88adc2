import json
import logging
import sys

import pytest

from analyzer import analyze
from logger_config import JSONFormatter, log_analysis, serialize_deck, setup_logging


@pytest.fixture
def clean_root_logger():
    root = logging.getLogger()
    level = root.level
    yield root
    for handler in list(root.handlers):
        if getattr(handler, "_deck_analyzer", False):
            root.removeHandler(handler)
            handler.close()
    root.setLevel(level)


def test_json_formatter_merges_data():
    record = logging.LogRecord("deck_analyzer", logging.INFO, __file__, 1, "hello %s", ("world",), None)
    record.data = {"event_type": "test", "score": 88}
    payload = json.loads(JSONFormatter().format(record))
    assert payload["message"] == "hello world"
    assert payload["level"] == "INFO"
    assert payload["logger"] == "deck_analyzer"
    assert payload["event_type"] == "test"
    assert payload["score"] == 88
    assert "timestamp" in payload


def test_json_formatter_includes_exceptions():
    try:
        raise ValueError("bad deck")
    except ValueError:
        record = logging.LogRecord("x", logging.ERROR, __file__, 1, "failed", (), sys.exc_info())
    payload = json.loads(JSONFormatter().format(record))
    assert "ValueError: bad deck" in payload["exception"]


def test_setup_logging_rejects_unknown_level(clean_root_logger):
    with pytest.raises(ValueError):
        setup_logging("LOUD")


def test_setup_logging_replaces_its_handlers(clean_root_logger):
    setup_logging("INFO")
    setup_logging("DEBUG")
    ours = [h for h in clean_root_logger.handlers if getattr(h, "_deck_analyzer", False)]
    assert len(ours) == 1
    assert clean_root_logger.level == logging.DEBUG


def test_log_analysis_writes_json_lines(tmp_path, clean_root_logger, balanced_deck):
    log_file = tmp_path / "logs" / "events.jsonl"
    setup_logging("INFO", json_file=log_file)

    report = analyze(balanced_deck)
    log_analysis(logging.getLogger("deck_analyzer"), report, missing_cards=[], deck=serialize_deck(balanced_deck))
    for handler in clean_root_logger.handlers:
        handler.flush()

    events = [json.loads(line) for line in log_file.read_text(encoding="utf-8").splitlines()]
    [event] = [e for e in events if e.get("event_type") == "deck_analysis"]
    assert event["deck_name"] == "Charizard"
    assert event["score"] == report.score
    assert event["warning_codes"] == [w.code for w in report.warnings]
    assert event["deck"]["name"] == "Charizard"


def test_serialize_deck_fallbacks():
    assert serialize_deck({"a": 1}) == {"a": 1}
    assert serialize_deck(42) == {"raw": "42"}

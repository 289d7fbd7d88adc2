"""
Logging configuration for the deck analyzer.
Human-readable console output plus optional JSON-lines event logs.
"""
from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional, Union

CONSOLE_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


class JSONFormatter(logging.Formatter):
    """Formatter that writes one JSON object per record."""

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        # Add any extra fields passed to the logger
        if hasattr(record, "data"):
            log_data.update(record.data)

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data, default=str)


def setup_logging(log_level: str = "INFO", json_file: Optional[Union[str, Path]] = None) -> None:
    """
    Setup logging for the CLI and dashboard.

    Args:
        log_level: Root level name, e.g. "INFO" or "DEBUG"
        json_file: Optional path for a JSON-lines event log
    """
    level = getattr(logging, log_level.upper(), None)
    if not isinstance(level, int):
        raise ValueError(f"Unknown log level: {log_level}")

    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    # Replace handlers from an earlier call
    for handler in list(root_logger.handlers):
        if getattr(handler, "_deck_analyzer", False):
            root_logger.removeHandler(handler)
            handler.close()

    console_handler = logging.StreamHandler()
    console_handler.setLevel(level)
    console_handler.setFormatter(logging.Formatter(CONSOLE_FORMAT, datefmt=DATE_FORMAT))
    console_handler._deck_analyzer = True
    root_logger.addHandler(console_handler)

    if json_file is not None:
        path = Path(json_file)
        path.parent.mkdir(parents=True, exist_ok=True)
        json_handler = logging.FileHandler(path, mode="a", encoding="utf-8")
        json_handler.setLevel(logging.DEBUG)
        json_handler.setFormatter(JSONFormatter())
        json_handler._deck_analyzer = True
        root_logger.addHandler(json_handler)


def log_analysis(logger: logging.Logger, report: Any, **extra_data: Any) -> None:
    """Log a finished deck analysis as a structured event."""
    log_data = {
        "event_type": "deck_analysis",
        "deck_name": getattr(report, "deck_name", None),
        "score": getattr(report, "score", None),
        "warning_codes": [w.code for w in getattr(report, "warnings", ())],
        **extra_data
    }
    logger.info("Deck analysis logged", extra={"data": log_data})


def log_card_lookup(
    logger: logging.Logger,
    card_name: str,
    found: bool,
    **extra_data: Any
) -> None:
    """Log a card-data API lookup."""
    log_data = {
        "event_type": "card_lookup",
        "card_name": card_name,
        "found": found,
        **extra_data
    }
    logger.debug("Card lookup logged", extra={"data": log_data})


def serialize_deck(deck: Any) -> Dict[str, Any]:
    """Serialize a deck to a dict for logging."""
    if hasattr(deck, "model_dump"):
        return deck.model_dump(mode="json")
    elif isinstance(deck, dict):
        return deck
    else:
        return {"raw": str(deck)}


# Logger for the analysis surfaces (CLI and dashboard)
analyzer_logger = logging.getLogger("deck_analyzer")

"""Structured Logging — one JSON object per log line, or plain text for local runs.

Invariants:
    - Every line carries timestamp, level, logger and message
    - Graph/template context (graph_key, node_key, placeholder) and request
      context (error_code, path) appear only when the call site passed them
    - Values that are not JSON-native are rendered with str()

Design Decisions:
    - Formatter on stdlib logging: module loggers stay plain logging.getLogger(__name__)
    - setup_logging runs from the FastAPI lifespan; calling it again swaps the
      gencore handler rather than adding a second one
"""

import logging
import json
from datetime import datetime, timezone

_EXTRA_KEYS = ("graph_key", "node_key", "placeholder", "error_code", "path")
_HANDLER_NAME = "gencore"


class JSONFormatter(logging.Formatter):
    """Render a record and its known extras as a single JSON line."""

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        payload.update({
            key: record.__dict__[key]
            for key in _EXTRA_KEYS
            if record.__dict__.get(key) is not None
        })
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False, default=str)


def setup_logging(level: str = "INFO", fmt: str = "json"):
    """Install the gencore root handler at `level` (json or text output)."""
    handler = logging.StreamHandler()
    handler.set_name(_HANDLER_NAME)
    handler.setFormatter(
        JSONFormatter() if fmt == "json"
        else logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s"),
    )
    for existing in list(logging.root.handlers):
        if existing.get_name() == _HANDLER_NAME:
            logging.root.removeHandler(existing)
    logging.root.addHandler(handler)
    logging.root.setLevel(getattr(logging, level.upper(), logging.INFO))

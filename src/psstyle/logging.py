"""
Logging setup for the psstyle command line.

Diagnostics go to stderr so that report output on stdout stays clean
for --format json / yaml consumers.
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone

_HANDLER_NAME = "psstyle"


class StructuredFormatter(logging.Formatter):
    """JSON formatter for structured logs with stable keys."""

    def format(self, record: logging.LogRecord) -> str:
        data: dict[str, object] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        # Optional contextual field
        if hasattr(record, "path"):
            data["path"] = record.path

        return json.dumps(data, ensure_ascii=False)


def setup_logging(level: str = "WARNING", structured: bool = False) -> None:
    """Configure the psstyle logger hierarchy; calling it again replaces the previous handler."""
    root = logging.getLogger("psstyle")
    root.setLevel(getattr(logging, level.upper(), logging.WARNING))
    root.propagate = False

    for old in [h for h in root.handlers if h.get_name() == _HANDLER_NAME]:
        root.removeHandler(old)
    handler = logging.StreamHandler(sys.stderr)
    handler.set_name(_HANDLER_NAME)
    root.addHandler(handler)
    if structured:
        handler.setFormatter(StructuredFormatter())
    else:
        handler.setFormatter(logging.Formatter("psstyle: %(levelname)s: %(message)s"))


def get_logger(name: str) -> logging.Logger:
    """Return module logger."""
    return logging.getLogger(name)

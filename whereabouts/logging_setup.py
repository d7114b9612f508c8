"""Logging setup.

Components log through `logging.getLogger(__name__)` with their context
in `extra=`. The plain format drops that context; structured mode emits
one JSON object per record including it.
"""

from __future__ import annotations

import json
import logging
import sys
from typing import Any, Optional

from .config import ObservabilityConfig, get_config

# Attributes every LogRecord carries; anything else came in through extra=
_RECORD_ATTRIBUTES = frozenset(
    vars(logging.LogRecord("", 0, "", 0, "", (), None)).keys()
) | {"message", "asctime"}


class JsonFormatter(logging.Formatter):
    """Format records as JSON lines, keeping the `extra=` fields."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "time": self.formatTime(record),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for key, value in vars(record).items():
            if key not in _RECORD_ATTRIBUTES:
                payload[key] = value
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False, default=str)


def configure_logging(config: Optional[ObservabilityConfig] = None) -> None:
    """Configure the root logger from the observability settings.

    Args:
        config: Observability configuration (defaults to the global one).
    """
    config = config or get_config().observability

    handler = logging.StreamHandler(sys.stderr)
    if config.structured:
        handler.setFormatter(JsonFormatter())
    else:
        handler.setFormatter(logging.Formatter(config.format))

    logging.basicConfig(
        level=getattr(logging, config.level.upper(), logging.INFO),
        handlers=[handler],
        force=True,
    )

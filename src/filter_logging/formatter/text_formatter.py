"""
Plain text formatter for filter logging
"""

import logging
from datetime import datetime
from typing import Optional

from ..config import StreamLoggingConfig, get_default_config


class PlainTextFormatter(logging.Formatter):
    """Single-line human readable formatter"""

    def __init__(self, config: Optional[StreamLoggingConfig] = None):
        super().__init__()
        self.config = config or get_default_config()

    def format(self, record: logging.LogRecord) -> str:
        parts = []

        if self.config.include_timestamp:
            parts.append(f"[{datetime.fromtimestamp(record.created).isoformat()}]")

        parts.extend([record.levelname, record.name, record.getMessage()])

        context_items = [
            f"{key[4:]}={value}"
            for key, value in record.__dict__.items()
            if key.startswith("ctx_")
        ]
        if context_items:
            parts.append(f"({', '.join(context_items)})")

        if record.exc_info:
            parts.append("\n" + self.formatException(record.exc_info))

        return " ".join(parts)

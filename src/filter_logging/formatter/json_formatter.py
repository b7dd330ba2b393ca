"""
JSON formatter for filter logging
"""

import json
import logging
from datetime import datetime
from typing import Any, Dict, Optional

from ..config import StreamLoggingConfig, get_default_config


class StructuredFormatter(logging.Formatter):
    """Compact JSON formatter, one object per record"""

    def __init__(self, config: Optional[StreamLoggingConfig] = None):
        super().__init__()
        self.config = config or get_default_config()

    def format(self, record: logging.LogRecord) -> str:
        log_entry: Dict[str, Any] = {
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        if self.config.include_timestamp:
            log_entry["timestamp"] = datetime.fromtimestamp(record.created).isoformat()

        for key, value in record.__dict__.items():
            if key.startswith("ctx_"):
                log_entry[key[4:]] = value  # Remove ctx_ prefix

        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)

        # default=str keeps arbitrary field values serializable
        return json.dumps(log_entry, separators=(",", ":"), default=str)

"""
Filter Logging

Fluent helpers that attach conditional log statements to stream filters.
"""

__version__ = "0.1.0"

from .config import (
    FormatterType,
    StreamLoggingConfig,
    get_default_config,
    set_default_config,
)
from .errors import LoggerMissingError
from .formatter import PlainTextFormatter, StructuredFormatter
from .logger import get_logger
from .sinks import (
    TemplateLoggerAdapter,
    TemplateMessage,
    get_stream_logger,
    render_template,
)
from .streaming import (
    AsyncLoggedStream,
    LineFileSource,
    LoggedStream,
    LogRule,
    MemorySource,
    StreamBuilder,
    create_source,
    field,
    filter_with_logs,
)

__all__ = [
    # Core builder
    "filter_with_logs",
    "StreamBuilder",
    "LogRule",
    "field",
    "LoggedStream",
    "AsyncLoggedStream",
    # Sources
    "MemorySource",
    "LineFileSource",
    "create_source",
    # Sinks
    "get_stream_logger",
    "TemplateLoggerAdapter",
    "TemplateMessage",
    "render_template",
    # Configuration
    "StreamLoggingConfig",
    "FormatterType",
    "get_default_config",
    "set_default_config",
    # Logging
    "get_logger",
    "PlainTextFormatter",
    "StructuredFormatter",
    # Errors
    "LoggerMissingError",
]

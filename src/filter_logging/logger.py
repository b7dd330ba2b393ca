import logging
import sys
from typing import Dict, Optional

from .config import StreamLoggingConfig, get_default_config
from .formatter import PlainTextFormatter, StructuredFormatter

# Performance optimization: Cache formatter instances
_formatter_cache: Dict[str, logging.Formatter] = {}


def _get_formatter_cache_key(config: StreamLoggingConfig) -> str:
    """Generate cache key for formatter"""
    return f"{config.formatter_type}_{config.include_timestamp}"


def _get_or_create_formatter(config: StreamLoggingConfig) -> logging.Formatter:
    """Get formatter from cache or create new one"""
    cache_key = _get_formatter_cache_key(config)

    if cache_key not in _formatter_cache:
        if config.formatter_type == "json":
            formatter = StructuredFormatter(config)
        else:  # default to plain
            formatter = PlainTextFormatter(config)
        _formatter_cache[cache_key] = formatter

    return _formatter_cache[cache_key]


def _add_console_handler(logger: logging.Logger, formatter: logging.Formatter) -> None:
    """Attach a stdout handler using the given formatter"""
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)


def get_logger(name: str, config: Optional[StreamLoggingConfig] = None) -> logging.Logger:
    """Create a logger with the given name, configured on first use"""
    logger = logging.getLogger(name)

    if not logger.handlers:
        config = config or get_default_config()
        logger.setLevel(getattr(logging, config.log_level.upper()))

        formatter = _get_or_create_formatter(config)
        _add_console_handler(logger, formatter)

        logger.propagate = True

    return logger

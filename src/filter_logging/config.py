import logging
import os
from dataclasses import dataclass
from typing import Literal, Optional

FormatterType = Literal["plain", "json"]

_VALID_FORMATTERS = ("plain", "json")


@dataclass
class StreamLoggingConfig:
    """Configuration for filter logging streams"""

    log_level: str = "INFO"
    formatter_type: FormatterType = "plain"
    include_timestamp: bool = True
    rule_level: str = "INFO"  # Level used for messages emitted by log rules
    parallel_workers: int = 4

    def __post_init__(self):
        if self.parallel_workers <= 0:
            raise ValueError("parallel_workers must be positive")

    @property
    def rule_levelno(self) -> int:
        """Numeric logging level for rule messages"""
        level = logging.getLevelName(self.rule_level.upper())
        if not isinstance(level, int):
            raise ValueError(f"Unknown rule level: {self.rule_level}")
        return level

    @classmethod
    def _parse_bool_env(cls, key: str, default: str = "false") -> bool:
        """Parse boolean from environment variable"""
        return os.getenv(key, default).lower() == "true"

    @classmethod
    def from_env(cls) -> "StreamLoggingConfig":
        """Create configuration from environment variables"""
        formatter_type = os.getenv("FILTER_LOG_FORMATTER", "plain").lower()
        if formatter_type not in _VALID_FORMATTERS:
            formatter_type = "plain"

        return cls(
            log_level=os.getenv("FILTER_LOG_LEVEL", "INFO"),
            formatter_type=formatter_type,
            include_timestamp=cls._parse_bool_env("FILTER_LOG_TIMESTAMP", "true"),
            rule_level=os.getenv("FILTER_LOG_RULE_LEVEL", "INFO"),
            parallel_workers=int(os.getenv("FILTER_LOG_WORKERS", "4")),
        )


_default_config: Optional[StreamLoggingConfig] = None


def get_default_config() -> StreamLoggingConfig:
    """Get the default configuration instance"""
    global _default_config
    if _default_config is None:
        _default_config = StreamLoggingConfig.from_env()
    return _default_config


def set_default_config(config: StreamLoggingConfig) -> None:
    """Set the default configuration instance"""
    global _default_config
    _default_config = config

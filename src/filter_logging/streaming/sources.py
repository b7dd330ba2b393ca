"""
Async sources for filtered log streams

This module provides async iterables to feed ``StreamBuilder.build_async``.
"""

import asyncio
import json
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, AsyncIterator, Dict, List, Optional, Union

import aiofiles

from ..logger import get_logger


class StreamSource(ABC):
    """Base class for stream sources"""

    @abstractmethod
    def __aiter__(self) -> AsyncIterator[Any]:
        """Async iterator for reading items"""
        pass


@dataclass
class MemorySource(StreamSource):
    """
    Yield items from memory (for testing/development)
    """

    items: List[Any]
    delay: float = 0  # Delay between items (to simulate streaming)
    repeat: bool = False  # Repeat items indefinitely

    async def __aiter__(self) -> AsyncIterator[Any]:
        while True:
            for item in self.items:
                yield item

                if self.delay > 0:
                    await asyncio.sleep(self.delay)

            if not self.repeat:
                break


@dataclass
class LineFileSource(StreamSource):
    """
    Read a file line by line

    ``plain`` yields each stripped line, ``json`` yields one decoded object
    per line. Blank lines are skipped.
    """

    path: str
    format: str = "plain"  # plain, json
    encoding: str = "utf-8"

    def __post_init__(self):
        self.logger = get_logger("filter_logging.file_source")
        if self.format not in ("plain", "json"):
            raise ValueError(f"Unsupported line format: {self.format}")

    async def __aiter__(self) -> AsyncIterator[Union[str, Dict[str, Any]]]:
        async with aiofiles.open(self.path, "r", encoding=self.encoding) as f:
            async for line in f:
                item = self._parse_line(line.strip())
                if item is not None:
                    yield item

    def _parse_line(self, line: str) -> Optional[Union[str, Dict[str, Any]]]:
        """Parse a line based on format"""
        if not line:
            return None

        if self.format == "json":
            try:
                return json.loads(line)
            except json.JSONDecodeError:
                self.logger.warning(f"Failed to parse JSON: {line}")
                return {"message": line, "parse_error": True}

        return line


def create_source(source_type: str, **kwargs) -> StreamSource:
    """
    Create a source instance

    Args:
        source_type: Type of source (memory, file)
        **kwargs: Source-specific configuration

    Returns:
        StreamSource instance
    """
    if source_type == "memory":
        return MemorySource(**kwargs)
    elif source_type == "file":
        return LineFileSource(**kwargs)
    else:
        raise ValueError(f"Unknown source type: {source_type}")

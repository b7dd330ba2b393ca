"""
Filtered streams with conditional trace logging

Attach log rules to a filter predicate and get back a lazy stream that logs
while it filters.
"""

from .builder import StreamBuilder, filter_with_logs
from .rules import Field, LogRule, field
from .sources import LineFileSource, MemorySource, StreamSource, create_source
from .stream import AsyncLoggedStream, LoggedStream, StreamMetrics

__all__ = [
    # Builder
    "StreamBuilder",
    "filter_with_logs",

    # Rules
    "Field",
    "LogRule",
    "field",

    # Streams
    "LoggedStream",
    "AsyncLoggedStream",
    "StreamMetrics",

    # Sources
    "StreamSource",
    "MemorySource",
    "LineFileSource",
    "create_source",
]

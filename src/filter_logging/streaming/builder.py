"""
Fluent builder that attaches conditional log statements to a filter

Usage::

    stream = (
        filter_with_logs(orders, lambda o: o["status"] == "open")
        .log_when(lambda o: o["total"] > 1000, "Large order {} for {}",
                  field("id"), field("customer"))
        .log_when(lambda o: not o["items"], "Empty order {}", field("id"))
        .build(get_stream_logger("orders"))
    )

For every item pulled from the stream the predicate is evaluated first, then
each rule in registration order logs when its condition holds, and finally
the item is yielded if the predicate accepted it.
"""

import logging
from collections import deque
from concurrent.futures import ThreadPoolExecutor
from functools import partial
from typing import (
    Any,
    AsyncIterable,
    AsyncIterator,
    Iterable,
    Iterator,
    List,
    Optional,
    Tuple,
    Union,
)

from ..config import get_default_config
from ..errors import LoggerMissingError
from .rules import Field, LogRule, Predicate, field
from .stream import AsyncLoggedStream, Evaluation, LoggedStream, evaluate_item

Level = Union[int, str, None]

_logger = logging.getLogger(__name__)


def _resolve_level(level: Level) -> int:
    """Map a level name or number to a logging level, defaulting to config"""
    if level is None:
        return get_default_config().rule_levelno
    if isinstance(level, str):
        resolved = logging.getLevelName(level.upper())
        if not isinstance(resolved, int):
            raise ValueError(f"Unknown logging level: {level}")
        return resolved
    return level


class StreamBuilder:
    """
    Accumulates log rules for a filtered stream

    The builder owns its rule list; rules must be registered before the built
    stream is consumed. Registration is not thread-safe.
    """

    def __init__(self, source: Union[Iterable[Any], AsyncIterable[Any]], predicate: Predicate):
        self.source = source
        self.predicate = predicate
        self._rules: List[LogRule] = []

    @property
    def rules(self) -> Tuple[LogRule, ...]:
        return tuple(self._rules)

    def log_when(
        self, condition: Predicate, message: str, *fields: Union[Field, str]
    ) -> "StreamBuilder":
        """Log ``message`` with the field values for items matching ``condition``"""
        self._rules.append(LogRule(condition, message, tuple(field(f) for f in fields)))
        return self

    def _prepare(self, logger: Any, level: Level, method: str):
        if logger is None:
            raise LoggerMissingError(method)

        rules = tuple(self._rules)
        evaluate = partial(
            evaluate_item,
            predicate=self.predicate,
            rules=rules,
            sink=logger,
            level=_resolve_level(level),
        )
        _logger.debug(f"Building filtered stream via {method} with {len(rules)} log rules")
        return rules, evaluate

    def build(self, logger: Any, level: Level = None) -> LoggedStream:
        """
        Build the lazily filtered stream

        Args:
            logger: Sink with ``log(level, msg, *args)``; a ``logging.Logger``
                or the adapter returned by ``get_stream_logger``
            level: Level for rule messages, defaults to the configured one

        Raises:
            LoggerMissingError: if ``logger`` is None
        """
        rules, evaluate = self._prepare(logger, level, "build")
        return LoggedStream(self._evaluations(evaluate), rules)

    def build_async(self, logger: Any, level: Level = None) -> AsyncLoggedStream:
        """Build the stream over an async (or plain) iterable source"""
        rules, evaluate = self._prepare(logger, level, "build_async")
        return AsyncLoggedStream(self._async_evaluations(evaluate), rules)

    def build_parallel(
        self,
        logger: Any,
        level: Level = None,
        max_workers: Optional[int] = None,
    ) -> LoggedStream:
        """
        Build the stream with per-item evaluation on a thread pool

        Items are yielded in source order. Up to ``max_workers * 2`` items
        are read ahead of the consumer. Log lines of different items may
        interleave.
        """
        rules, evaluate = self._prepare(logger, level, "build_parallel")

        if max_workers is None:
            max_workers = get_default_config().parallel_workers
        if max_workers <= 0:
            raise ValueError("max_workers must be positive")

        return LoggedStream(self._parallel_evaluations(evaluate, max_workers), rules)

    def _evaluations(self, evaluate) -> Iterator[Evaluation]:
        for item in self.source:
            yield evaluate(item)

    async def _async_evaluations(self, evaluate) -> AsyncIterator[Evaluation]:
        if hasattr(self.source, "__aiter__"):
            async for item in self.source:
                yield evaluate(item)
        else:
            for item in self.source:
                yield evaluate(item)

    def _parallel_evaluations(self, evaluate, max_workers: int) -> Iterator[Evaluation]:
        window = max_workers * 2
        executor = ThreadPoolExecutor(
            max_workers=max_workers, thread_name_prefix="filter-logging"
        )
        _logger.debug(f"Started evaluation pool with {max_workers} workers")

        pending = deque()
        try:
            for item in self.source:
                pending.append(executor.submit(evaluate, item))
                if len(pending) >= window:
                    yield pending.popleft().result()

            while pending:
                yield pending.popleft().result()
        finally:
            executor.shutdown(wait=True, cancel_futures=True)


def filter_with_logs(
    source: Union[Iterable[Any], AsyncIterable[Any]], predicate: Predicate
) -> StreamBuilder:
    """Start a filter logging builder for ``source`` filtered by ``predicate``"""
    return StreamBuilder(source, predicate)

"""
Lazy output streams produced by the filter logging builder

Each stream consumes an iterator of evaluations ``(item, include, matched)``
where ``matched`` lists the indexes of the rules that logged for the item.
Items are yielded only when ``include`` is true; every evaluation is counted.
"""

from collections import defaultdict
from typing import Any, AsyncIterator, Dict, Iterator, List, Sequence, Tuple

from .rules import LogRule

Evaluation = Tuple[Any, bool, List[int]]


def evaluate_item(
    item: Any,
    predicate: Any,
    rules: Sequence[LogRule],
    sink: Any,
    level: int,
) -> Evaluation:
    """Run the predicate, then every matching rule in order, for one item"""
    include = bool(predicate(item))

    matched = []
    for index, rule in enumerate(rules):
        if rule.matches(item):
            sink.log(level, rule.message, *rule.extract_values(item))
            matched.append(index)

    return item, include, matched


class StreamMetrics:
    """Counters kept while a stream is consumed"""

    def __init__(self, rules: Sequence[LogRule]):
        self._rule_keys = [f"{i}:{rule.message}" for i, rule in enumerate(rules)]
        self.metrics: Dict[str, int] = defaultdict(int)
        self._rule_stats: Dict[str, int] = defaultdict(int)

    def record(self, include: bool, matched: Sequence[int]) -> None:
        self.metrics["total_evaluated"] += 1
        if include:
            self.metrics["passed_through"] += 1
        else:
            self.metrics["filtered_out"] += 1

        self.metrics["log_calls"] += len(matched)
        for index in matched:
            self._rule_stats[self._rule_keys[index]] += 1

    def get_metrics(self) -> Dict[str, Any]:
        total_evaluated = self.metrics.get("total_evaluated", 0)
        passed_through = self.metrics.get("passed_through", 0)

        return {
            "summary": {
                "total_evaluated": total_evaluated,
                "passed_through": passed_through,
                "filtered_out": self.metrics.get("filtered_out", 0),
                "log_calls": self.metrics.get("log_calls", 0),
            },
            "rule_stats": dict(self._rule_stats),
            "pass_rate": passed_through / max(1, total_evaluated),
        }

    def reset(self) -> None:
        self.metrics.clear()
        self._rule_stats.clear()


class LoggedStream:
    """Iterator over the items that passed the predicate"""

    def __init__(self, evaluations: Iterator[Evaluation], rules: Sequence[LogRule]):
        self._evaluations = evaluations
        self._metrics = StreamMetrics(rules)

    def __iter__(self) -> "LoggedStream":
        return self

    def __next__(self) -> Any:
        for item, include, matched in self._evaluations:
            self._metrics.record(include, matched)
            if include:
                return item
        raise StopIteration

    def close(self) -> None:
        """Release the underlying evaluation generator"""
        close = getattr(self._evaluations, "close", None)
        if close is not None:
            close()

    def collect(self) -> List[Any]:
        """Drain the remaining items into a list"""
        return list(self)

    def get_metrics(self) -> Dict[str, Any]:
        return self._metrics.get_metrics()

    def reset_metrics(self) -> None:
        self._metrics.reset()


class AsyncLoggedStream:
    """Async iterator over the items that passed the predicate"""

    def __init__(self, evaluations: AsyncIterator[Evaluation], rules: Sequence[LogRule]):
        self._evaluations = evaluations
        self._metrics = StreamMetrics(rules)

    def __aiter__(self) -> "AsyncLoggedStream":
        return self

    async def __anext__(self) -> Any:
        async for item, include, matched in self._evaluations:
            self._metrics.record(include, matched)
            if include:
                return item
        raise StopAsyncIteration

    async def aclose(self) -> None:
        aclose = getattr(self._evaluations, "aclose", None)
        if aclose is not None:
            await aclose()

    async def collect(self) -> List[Any]:
        """Drain the remaining items into a list"""
        return [item async for item in self]

    def get_metrics(self) -> Dict[str, Any]:
        return self._metrics.get_metrics()

    def reset_metrics(self) -> None:
        self._metrics.reset()

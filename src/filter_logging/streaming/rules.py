"""
Log rules evaluated against stream items
"""

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Callable, Tuple, Union

Predicate = Callable[[Any], bool]
Field = Callable[[Any], Any]


def field(getter: Union[Field, str]) -> Field:
    """
    Normalise a value extractor for a log rule

    A callable is returned as is. A string names a key for mapping items and
    an attribute for anything else.
    """
    if callable(getter):
        return getter

    if isinstance(getter, str):
        name = getter

        def extract(item: Any) -> Any:
            if isinstance(item, Mapping):
                return item[name]
            return getattr(item, name)

        extract.__name__ = f"field_{name}"
        return extract

    raise TypeError(f"field() expects a callable or a str, got {type(getter).__name__}")


@dataclass(frozen=True)
class LogRule:
    """Condition, message template and ordered value extractors"""

    condition: Predicate
    message: str
    fields: Tuple[Field, ...] = ()

    def matches(self, item: Any) -> bool:
        return bool(self.condition(item))

    def extract_values(self, item: Any) -> Tuple[Any, ...]:
        """Apply each field to the item, keeping field order"""
        return tuple(f(item) for f in self.fields)

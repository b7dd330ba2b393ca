"""
Log sinks for filtered streams

A sink is any object exposing ``log(level, msg, *args)``. A plain
``logging.Logger`` is a valid sink for ``%``-style templates; the adapter in
this module renders ``{}`` placeholders instead.
"""

import logging
from typing import Any, Dict, MutableMapping, Optional, Sequence, Tuple

from .config import StreamLoggingConfig
from .logger import get_logger

PLACEHOLDER = "{}"
ESCAPE_CHAR = "\\"


def render_template(template: str, values: Sequence[Any]) -> str:
    """
    Substitute ``{}`` placeholders left to right with ``str(value)``

    Placeholders without a value stay literal, surplus values are ignored and
    ``\\{}`` renders as a literal ``{}``.
    """
    parts = []
    remaining = iter(values)
    position = 0

    while True:
        found = template.find(PLACEHOLDER, position)
        if found == -1:
            break

        if found > 0 and template[found - 1] == ESCAPE_CHAR:
            parts.append(template[position:found - 1])
            parts.append(PLACEHOLDER)
            position = found + len(PLACEHOLDER)
            continue

        parts.append(template[position:found])
        try:
            parts.append(str(next(remaining)))
        except StopIteration:
            parts.append(PLACEHOLDER)
        position = found + len(PLACEHOLDER)

    parts.append(template[position:])
    return "".join(parts)


class TemplateMessage:
    """Deferred ``{}`` template, rendered only when a handler formats it"""

    __slots__ = ("template", "values")

    def __init__(self, template: str, values: Sequence[Any] = ()):
        self.template = template
        self.values = tuple(values)

    def __str__(self) -> str:
        return render_template(self.template, self.values)

    def __repr__(self) -> str:
        return f"TemplateMessage({self.template!r}, {self.values!r})"


class TemplateLoggerAdapter(logging.LoggerAdapter):
    """
    Logger adapter that accepts ``{}`` templates with positional values

    Extra context given at construction is attached to every record with the
    ``ctx_`` prefix understood by the package formatters.
    """

    def __init__(self, logger: logging.Logger, extra: Optional[Dict[str, Any]] = None):
        super().__init__(logger, extra or {})

    def process(
        self, msg: Any, kwargs: MutableMapping[str, Any]
    ) -> Tuple[Any, MutableMapping[str, Any]]:
        if self.extra:
            context = {f"ctx_{k}": v for k, v in self.extra.items()}
            context.update(kwargs.get("extra") or {})
            kwargs["extra"] = context
        return msg, kwargs

    def log(self, level: int, msg: Any, *args: Any, **kwargs: Any) -> None:
        if self.isEnabledFor(level):
            msg, kwargs = self.process(msg, kwargs)
            # Attribute the record to the caller of this adapter
            kwargs.setdefault("stacklevel", 2)
            self.logger.log(level, TemplateMessage(msg, args), **kwargs)


def get_stream_logger(
    name: str,
    config: Optional[StreamLoggingConfig] = None,
    **context: Any,
) -> TemplateLoggerAdapter:
    """Get a ``{}``-template sink backed by a configured logger"""
    return TemplateLoggerAdapter(get_logger(name, config), context)

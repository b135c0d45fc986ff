from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Dict

from ..core.result import Result


@dataclass
class Dispatcher:
    """Routes each command/query object to the one handler registered for its type."""

    _handlers: Dict[type, Callable[[Any], Result]] = field(default_factory=dict)

    def register(self, message_type: type, handler: Callable[[Any], Result]) -> None:
        if message_type in self._handlers:
            raise ValueError(f"Handler already registered for {message_type.__name__}")
        self._handlers[message_type] = handler

    def send(self, message: Any) -> Result:
        handler = self._handlers.get(type(message))
        if handler is None:
            raise LookupError(f"No handler registered for {type(message).__name__}")
        return handler(message)

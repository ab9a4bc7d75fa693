"""Lightweight publish/subscribe hooks used for stat and resource notifications."""

from collections.abc import Callable
from typing import Any

import structlog

logger = structlog.get_logger(__name__)

Handler = Callable[..., Any]


class Event:
    """
    An ordered list of subscribers that are called synchronously on emit.

    Handlers run in subscription order. A handler that raises is logged and
    skipped so that one faulty listener cannot leave the emitter half-updated.
    """

    def __init__(self, name: str) -> None:
        self.name = name
        self._handlers: list[Handler] = []

    def subscribe(self, handler: Handler) -> Handler:
        """
        Register a handler.

        Returns the handler unchanged, so this can be used as a decorator.
        Subscribing the same handler twice calls it twice.
        """
        self._handlers.append(handler)
        return handler

    def unsubscribe(self, handler: Handler) -> bool:
        """Remove the first registration of a handler. Returns True if found."""
        try:
            self._handlers.remove(handler)
        except ValueError:
            return False
        return True

    def emit(self, *args: Any) -> None:
        """Call every subscribed handler with the given arguments."""
        # Copy so handlers may unsubscribe themselves while being notified
        for handler in list(self._handlers):
            try:
                handler(*args)
            except Exception as e:
                logger.error(
                    "event_handler_error",
                    event_name=self.name,
                    handler=getattr(handler, "__qualname__", repr(handler)),
                    error=str(e),
                    exc_info=True,
                )

    def clear(self) -> None:
        """Remove all handlers."""
        self._handlers.clear()

    def __len__(self) -> int:
        return len(self._handlers)

    def __repr__(self) -> str:
        return f"Event({self.name!r}, handlers={len(self._handlers)})"

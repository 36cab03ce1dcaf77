"""
Change notifications for record sets.

A RecordSet holds a reference to an EventBus and calls it directly when its
records change:

    add     (record, record_set)     once per added record
    remove  (record, record_set)     once per removed record
    update  (record_set,)            once after a non-empty add/remove batch
    reset   (record_set,)            after the record list is wholly replaced
    sync    (record_set, response)   after a fetch completed and was applied
    error   (record_set, exc)        after a fetch failed

Usage:
    bus = EventEmitter()
    bus.on("sync", lambda record_set, response: render(record_set))
    records = RecordSet(name="Account", events=bus)
"""

from collections.abc import Callable
from typing import Any, Protocol

from ._logging import logger

ALL_EVENTS = "all"

Handler = Callable[..., Any]


class EventBus(Protocol):
    """Port: publishes record set change notifications."""

    def trigger(self, event: str, *args: Any) -> None:
        """Deliver *event* with *args* to every handler subscribed to it."""
        ...


class EventEmitter:
    """
    Synchronous in-process EventBus.

    Handlers run in subscription order on the caller's stack. Handlers
    registered for "all" receive the event name as their first argument.
    Exceptions raised by a handler propagate to whoever triggered the event.
    """

    def __init__(self) -> None:
        self._handlers: dict[str, list[Handler]] = {}

    def on(self, event: str, handler: Handler) -> None:
        self._handlers.setdefault(event, []).append(handler)

    def off(self, event: str | None = None, handler: Handler | None = None) -> None:
        """Removes one handler, all handlers of an event, or everything."""
        if event is None:
            self._handlers.clear()
            return
        if handler is None:
            self._handlers.pop(event, None)
            return
        handlers = self._handlers.get(event, [])
        if handler in handlers:
            handlers.remove(handler)

    def trigger(self, event: str, *args: Any) -> None:
        handlers = list(self._handlers.get(event, []))
        catch_all = list(self._handlers.get(ALL_EVENTS, [])) if event != ALL_EVENTS else []
        if not handlers and not catch_all:
            return

        logger.debug("Triggering event", extra={"event": event, "handlers": len(handlers)})
        for handler in handlers:
            handler(*args)
        for handler in catch_all:
            handler(event, *args)

    def handler_count(self, event: str) -> int:
        return len(self._handlers.get(event, []))


class NullEventBus:
    """EventBus that discards everything. Used when no bus is supplied."""

    def trigger(self, event: str, *args: Any) -> None:
        return None

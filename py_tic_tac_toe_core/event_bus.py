import logging
import threading
from collections.abc import Callable
from dataclasses import dataclass
from typing import TypeVar, cast

from py_tic_tac_toe_core.board import Mark
from py_tic_tac_toe_core.game import MatchOptions
from py_tic_tac_toe_core.player import Player

logger = logging.getLogger(__name__)


class Event:
    pass


@dataclass(frozen=True)
class NewMatch(Event):
    pass


@dataclass(frozen=True)
class StartMatch(Event):
    options: MatchOptions


@dataclass(frozen=True)
class Restart(Event):
    pass


@dataclass(frozen=True)
class PlayerSelects(Event):
    mark: Mark
    row: int
    col: int


@dataclass(frozen=True)
class TurnChange(Event):
    mark: Mark


@dataclass(frozen=True)
class MoveApplied(Event):
    mark: Mark
    row: int
    col: int


@dataclass(frozen=True)
class GameOver(Event):
    winner: Player | None


E = TypeVar("E", bound=Event)


class EventBus:
    """Synchronous publish/subscribe channel keyed by event type.

    `publish` calls every handler registered for the event's type, in subscription order,
    before returning. A handler that raises aborts the rest of that delivery.
    """

    def __init__(self) -> None:
        self._handlers: dict[type[Event], list[Callable[[Event], None]]] = {}
        self._handlers_lock = threading.RLock()

    def subscribe(self, event_type: type[E], handler: Callable[[E], None]) -> Callable[[], None]:
        """Register `handler` and return a function that removes exactly this registration."""
        registered = cast("Callable[[Event], None]", handler)
        with self._handlers_lock:
            self._handlers.setdefault(event_type, []).append(registered)

        unsubscribed = False

        def unsubscribe() -> None:
            nonlocal unsubscribed
            with self._handlers_lock:
                if unsubscribed:
                    return
                unsubscribed = True
                handlers = self._handlers.get(event_type, [])
                for index, candidate in enumerate(handlers):
                    if candidate is registered:
                        del handlers[index]
                        break
                if not handlers:
                    self._handlers.pop(event_type, None)

        return unsubscribe

    def publish(self, event: Event) -> None:
        with self._handlers_lock:
            handlers = self._handlers.get(type(event), []).copy()
        if not handlers:
            logger.debug("No subscribers for %s", type(event).__name__)
        for handler in handlers:
            handler(event)

    def subscriber_count(self, event_type: type[Event]) -> int:
        with self._handlers_lock:
            return len(self._handlers.get(event_type, []))

    def close(self) -> None:
        with self._handlers_lock:
            self._handlers.clear()

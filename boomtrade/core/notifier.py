"""Delivery of session state changes to subscribers."""
import logging
import threading
from typing import Callable, Iterable

from boomtrade.models import SessionEvent, SessionState

logger = logging.getLogger(__name__)

SessionCallback = Callable[[SessionEvent], None]


class StateNotifier:
    """Thread-safe registry of state change callbacks.

    Each callback is registered once, together with the set of states it
    wants to hear about (None meaning every state). Subscribing the same
    callback again widens its filter instead of adding a second entry, so a
    transition reaches every callback at most once.
    """

    def __init__(self):
        # callback -> states filter; insertion order is delivery order
        self._subscriptions: dict[SessionCallback, frozenset[SessionState] | None] = {}
        self._lock = threading.Lock()

    def subscribe(self, callback: SessionCallback, states: Iterable[SessionState] | None = None) -> None:
        """Register callback for transitions into the given states.

        Args:
            callback: Called with the SessionEvent after a matching transition
            states: States to deliver (default: all)
        """
        wanted = frozenset(SessionState(s) for s in states) if states is not None else None

        with self._lock:
            if callback in self._subscriptions:
                current = self._subscriptions[callback]
                if current is None or wanted is None:
                    wanted = None
                else:
                    wanted = current | wanted
            self._subscriptions[callback] = wanted

        logger.debug(f"Subscribed {_name(callback)} to {_describe(wanted)}")

    def unsubscribe(self, callback: SessionCallback) -> None:
        with self._lock:
            if self._subscriptions.pop(callback, False) is not False:
                logger.debug(f"Unsubscribed {_name(callback)}")

    def states_for(self, callback: SessionCallback) -> frozenset[SessionState] | None:
        """Return the states a callback is registered for (None for all).

        Raises:
            KeyError: If the callback is not subscribed
        """
        with self._lock:
            return self._subscriptions[callback]

    def __len__(self) -> int:
        with self._lock:
            return len(self._subscriptions)

    def __contains__(self, callback: SessionCallback) -> bool:
        with self._lock:
            return callback in self._subscriptions

    def publish(self, event: SessionEvent) -> None:
        """Deliver event to every callback whose filter matches event.current."""
        with self._lock:
            callbacks = [
                callback
                for callback, states in self._subscriptions.items()
                if states is None or event.current in states
            ]

        for callback in callbacks:
            try:
                callback(event)
            except Exception as e:
                logger.error(f"Error in subscriber {_name(callback)} for {event.type}: {e}")


def _describe(states: frozenset[SessionState] | None) -> str:
    if states is None:
        return "all states"
    return ", ".join(sorted(s.value for s in states))


def _name(callback: Callable) -> str:
    return getattr(callback, "__name__", repr(callback))

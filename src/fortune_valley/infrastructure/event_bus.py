"""Session-scoped publish/subscribe channel and an event recorder.

Topics are the event classes themselves: ``bus.subscribe(BalanceChanged,
handler)``.  Each :class:`~fortune_valley.services.session.GameSession` owns
one bus and hands it to every component it builds; there is no module-level
bus, so two sessions (or two tests) never hear each other.

Dispatch is synchronous and happens on the caller's stack, which keeps a
tick fully deterministic: by the time ``publish`` returns, every listener
has reacted.  A listener that raises is logged with its traceback and the
remaining listeners still run.
"""

from __future__ import annotations

import logging
from collections import defaultdict, deque
from collections.abc import Callable, Sequence

from fortune_valley.domain.events import DomainEvent

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Type aliases
# ---------------------------------------------------------------------------
Handler = Callable[[DomainEvent], None]


# ===================================================================== #
#  Event Bus                                                             #
# ===================================================================== #

class EventBus:
    """Typed, in-process notification channel for one game session.

    Observers registered with :meth:`subscribe_all` see every event before
    any typed listener does; within each group listeners fire in the order
    they subscribed.  Events published from inside a listener (a purchase
    that ends the game, for instance) are delivered immediately, depth
    first.

    Usage::

        bus = EventBus()
        bus.subscribe(OwnershipChanged, on_lot_bought)
        bus.publish(OwnershipChanged(lot_id="harbor", new_owner=Owner.RIVAL))
    """

    def __init__(self) -> None:
        self._typed: defaultdict[type[DomainEvent], list[Handler]] = defaultdict(list)
        self._observers: list[Handler] = []

    def subscribe(self, event_type: type[DomainEvent], handler: Handler) -> None:
        """Call *handler* for every published instance of exactly *event_type*."""
        self._typed[event_type].append(handler)

    def subscribe_all(self, handler: Handler) -> None:
        """Call *handler* for every event, whatever its type."""
        self._observers.append(handler)

    def unsubscribe(self, event_type: type[DomainEvent], handler: Handler) -> bool:
        """Detach *handler* from *event_type*.

        Returns
        -------
        bool
            ``False`` if the handler was not subscribed.
        """
        listeners = self._typed.get(event_type)
        if not listeners or handler not in listeners:
            return False
        listeners.remove(handler)
        return True

    def unsubscribe_all(self, handler: Handler) -> bool:
        """Detach an observer added with :meth:`subscribe_all`."""
        if handler not in self._observers:
            return False
        self._observers.remove(handler)
        return True

    def publish(self, event: DomainEvent) -> None:
        """Deliver *event* to the observers, then to its typed listeners."""
        topic = type(event).__name__
        # Copies, so a listener may (un)subscribe while being notified.
        for handler in [*self._observers, *self._typed.get(type(event), ())]:
            try:
                handler(event)
            except Exception:
                logger.exception("Listener %r failed on %s", handler, topic)

    def publish_many(self, events: Sequence[DomainEvent]) -> None:
        for event in events:
            self.publish(event)

    def handler_count(self, event_type: type[DomainEvent] | None = None) -> int:
        """Listeners for *event_type*, or every listener when ``None``."""
        if event_type is not None:
            return len(self._typed.get(event_type, ()))
        return len(self._observers) + sum(len(hs) for hs in self._typed.values())

    def clear(self) -> None:
        self._typed.clear()
        self._observers.clear()


# ===================================================================== #
#  Event Store                                                           #
# ===================================================================== #

class EventStore:
    """Bounded, append-only record of published events.

    Wire it to a bus with ``bus.subscribe_all(store.append)`` to keep a
    replayable log of a session, e.g. for debugging a rival decision or for
    assertions in tests.

    Parameters
    ----------
    max_size:
        Oldest events are dropped past this many.  ``0`` keeps everything.
    """

    def __init__(self, max_size: int = 0) -> None:
        self._events: deque[DomainEvent] = deque(maxlen=max_size or None)

    def append(self, event: DomainEvent) -> None:
        self._events.append(event)

    def query(
        self,
        event_type: type[DomainEvent] | None = None,
        source_id: str | None = None,
        limit: int = 0,
    ) -> list[DomainEvent]:
        """Recorded events, oldest first, narrowed by the optional filters.

        Parameters
        ----------
        event_type:
            Keep only instances of this class (subclasses included).
        source_id:
            Keep only events emitted by this component, e.g. ``"rival"``.
        limit:
            Keep only the most recent *limit* matches.  ``0`` means all.
        """
        matches = [
            e
            for e in self._events
            if (event_type is None or isinstance(e, event_type))
            and (source_id is None or e.source_id == source_id)
        ]
        return matches[-limit:] if limit > 0 else matches

    @property
    def latest(self) -> DomainEvent | None:
        return self._events[-1] if self._events else None

    def __len__(self) -> int:
        return len(self._events)

    def __bool__(self) -> bool:
        return bool(self._events)

    def clear(self) -> None:
        self._events.clear()

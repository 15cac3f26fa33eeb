"""Discrete simulation clock.

One tick is one in-game day.  Each tick the clock publishes
``TickAdvanced`` and then drives its participants in the order they were
registered.  The session registers them as income, investments, rival and
then observers, so every tick is deterministic.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from typing import Protocol, runtime_checkable

from fortune_valley.domain.events import TickAdvanced
from fortune_valley.infrastructure.event_bus import EventBus

logger = logging.getLogger(__name__)


@runtime_checkable
class TickParticipant(Protocol):
    """Anything the clock can drive."""

    def on_tick(self, tick: int) -> None: ...


class SimulationClock:
    """Advances time and stops once the game is over.

    Parameters
    ----------
    event_bus:
        Session bus for ``TickAdvanced``.
    participants:
        Components called each tick, in this order.
    is_terminal:
        Zero-argument callable; when it returns ``True`` the clock refuses
        to advance further.
    """

    def __init__(
        self,
        event_bus: EventBus,
        participants: Sequence[TickParticipant] = (),
        is_terminal: Callable[[], bool] | None = None,
    ) -> None:
        self._bus = event_bus
        self._participants: list[TickParticipant] = list(participants)
        self._is_terminal = is_terminal or (lambda: False)
        self._current_tick = 0

    @property
    def current_tick(self) -> int:
        return self._current_tick

    @property
    def participants(self) -> list[TickParticipant]:
        return list(self._participants)

    def add_participant(self, participant: TickParticipant) -> None:
        self._participants.append(participant)

    def advance(self, ticks: int = 1) -> int:
        """Run up to *ticks* ticks.

        A tick that ends the game still completes for every participant;
        the clock then stops before the next one.

        Returns
        -------
        int
            Number of ticks actually executed.
        """
        executed = 0
        for _ in range(max(ticks, 0)):
            if self._is_terminal():
                break
            self._current_tick += 1
            self._bus.publish(TickAdvanced(source_id="clock", tick=self._current_tick))
            for participant in self._participants:
                participant.on_tick(self._current_tick)
            executed += 1
        if executed:
            logger.debug("Advanced %d tick(s) to %d", executed, self._current_tick)
        return executed

    def run_until_terminal(self, max_ticks: int) -> int:
        """Advance until the game ends or *max_ticks* ticks have run."""
        return self.advance(max_ticks)

    def reset(self) -> None:
        self._current_tick = 0

# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
Failure-streak state machine.

The watchdog probes forever while WATCHING. Each failed probe bumps the
consecutive-failure counter and each success resets it. When the counter
reaches the threshold the machine enters RECOVERING, the recovery trigger runs
once and the loop ends.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable

from .models.watch import WatchdogState, WatchState
from .recovery import RecoveryTrigger

logger = logging.getLogger(__name__)


def advance(current: WatchdogState, ok: bool, threshold: int) -> WatchdogState:
    """Return the state after one probe outcome. RECOVERING is terminal."""
    if current.recovering:
        return current
    if ok:
        return WatchdogState()
    failures = current.consecutive_failures + 1
    if failures >= threshold:
        return WatchdogState(consecutive_failures=failures, state=WatchState.RECOVERING)
    return WatchdogState(consecutive_failures=failures)


class Watchdog:
    """Drive probes, sleep between them and fire recovery on a long enough failure streak."""

    def __init__(
        self,
        probe: Callable[[], bool],
        recovery: RecoveryTrigger,
        *,
        threshold: int,
        wait: float,
        sleep: Callable[[float], object] | None = None,
        on_transition: Callable[[WatchdogState], None] | None = None,
    ):
        if threshold < 1:
            raise ValueError("threshold must be at least 1")
        self.probe = probe
        self.recovery = recovery
        self.threshold = threshold
        self.wait = wait
        self._stop_event = threading.Event()
        self._sleep = sleep or self._stop_event.wait
        self._on_transition = on_transition
        self.state = WatchdogState()

    def stop(self) -> None:
        """Interrupt the inter-probe sleep and end the loop without recovery."""
        self._stop_event.set()

    @property
    def stopped(self) -> bool:
        return self._stop_event.is_set()

    def step(self) -> WatchdogState:
        """Run one probe and apply its outcome."""
        ok = bool(self.probe())
        self.state = advance(self.state, ok, self.threshold)
        if ok:
            logger.info("Connected")
        else:
            logger.info("Not connected (%d/%d consecutive failures)", self.state.consecutive_failures, self.threshold)
        if self._on_transition is not None:
            self._on_transition(self.state)
        return self.state

    def run(self) -> bool | None:
        """
        Loop until recovery fires or ``stop()`` is called.

        Returns the recovery trigger's result, or None when stopped first.
        """
        while not self.stopped:
            if self.step().recovering:
                logger.warning("Failure threshold hit!")
                return self.recovery.trigger()
            self._sleep(self.wait)
        logger.info("Watchdog stopped")
        return None


__all__ = ["Watchdog", "advance"]

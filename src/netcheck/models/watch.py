# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Failure-streak state models."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class WatchState(str, Enum):
    WATCHING = "WATCHING"
    RECOVERING = "RECOVERING"


@dataclass(frozen=True)
class WatchdogState:
    """Consecutive failures since the last successful probe, and the machine state."""

    consecutive_failures: int = 0
    state: WatchState = WatchState.WATCHING

    @property
    def recovering(self) -> bool:
        return self.state is WatchState.RECOVERING

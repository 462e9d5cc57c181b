# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Readiness polling."""

from __future__ import annotations

import select
from typing import Protocol

from .base import Transport


class Poller(Protocol):
    """Bounded readiness checks; each call waits at most ``timeout`` seconds."""

    def wait_readable(self, transport: Transport, timeout: float) -> bool: ...

    def wait_writable(self, transport: Transport, timeout: float) -> bool: ...


class SelectPoller:
    """select(2)-based poller."""

    def wait_readable(self, transport: Transport, timeout: float) -> bool:
        readable, _, _ = select.select([transport], [], [], timeout)
        return bool(readable)

    def wait_writable(self, transport: Transport, timeout: float) -> bool:
        _, writable, _ = select.select([], [transport], [], timeout)
        return bool(writable)

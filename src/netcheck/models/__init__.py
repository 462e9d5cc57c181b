# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Dataclass exports for netcheck."""

from ..config import ConnectionTarget, ProbeParameters, WatchdogSettings
from ..http.models import HttpResponse
from .probe import ProbeResult
from .watch import WatchdogState, WatchState

__all__ = [
    "ConnectionTarget",
    "HttpResponse",
    "ProbeParameters",
    "ProbeResult",
    "WatchState",
    "WatchdogSettings",
    "WatchdogState",
]

# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
netcheck package entrypoint.

A connectivity watchdog: it repeatedly requests a page from a host, checks the
response for an expected string and, after enough consecutive failures, runs a
recovery command. Transport, readiness polling and the recovery action are
injectable so the HTTP reader and the failure-streak state machine can be
exercised without sockets.
"""

from .config import ConnectionTarget, ProbeParameters, WatchdogSettings, load_settings
from .errors import ConfigError, ProbeError, ProbeErrorKind
from .http import HttpResponse, read_response
from .log import setup_logging
from .models import ProbeResult, WatchdogState, WatchState
from .probe import Prober, probe
from .recovery import CommandRecovery, RecoveryTrigger
from .runtime import NetCheck
from .transport import DeadlineIO, SelectPoller, SocketTransport, open_transport
from .version import __version__
from .watchdog import Watchdog, advance

__all__ = [
    "CommandRecovery",
    "ConfigError",
    "ConnectionTarget",
    "DeadlineIO",
    "HttpResponse",
    "NetCheck",
    "ProbeError",
    "ProbeErrorKind",
    "ProbeParameters",
    "ProbeResult",
    "Prober",
    "RecoveryTrigger",
    "SelectPoller",
    "SocketTransport",
    "WatchState",
    "Watchdog",
    "WatchdogSettings",
    "WatchdogState",
    "__version__",
    "advance",
    "load_settings",
    "open_transport",
    "probe",
    "read_response",
    "setup_logging",
]

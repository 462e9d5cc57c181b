# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Transport, readiness polling and deadline-bounded I/O exports."""

from .base import Connector, Transport
from .deadline import POLL_INTERVAL, RECV_CHUNK_SIZE, DeadlineIO
from .poller import Poller, SelectPoller
from .sockets import SocketTransport, build_tls_context, open_transport

__all__ = [
    "POLL_INTERVAL",
    "RECV_CHUNK_SIZE",
    "Connector",
    "DeadlineIO",
    "Poller",
    "SelectPoller",
    "SocketTransport",
    "Transport",
    "build_tls_context",
    "open_transport",
]

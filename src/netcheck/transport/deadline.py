# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
Deadline-bounded I/O over a non-blocking transport.

Every operation is a loop of short readiness polls (at most POLL_INTERVAL
seconds each) against a single monotonic deadline, so a probe never blocks
longer than its configured timeout no matter how the peer behaves.
"""

from __future__ import annotations

import logging
import ssl
import time
from collections.abc import Callable

from ..errors import ProbeError, ProbeErrorKind, categorize_exception
from .base import Transport
from .poller import Poller, SelectPoller

logger = logging.getLogger(__name__)

POLL_INTERVAL = 1.0
RECV_CHUNK_SIZE = 1024

_NOT_READY = (BlockingIOError, InterruptedError, ssl.SSLWantReadError, ssl.SSLWantWriteError)


class DeadlineIO:
    """Send/receive helpers sharing one deadline, created per probe."""

    def __init__(
        self,
        transport: Transport,
        timeout: float,
        *,
        poller: Poller | None = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.transport = transport
        self.timeout = timeout
        self.poller = poller or SelectPoller()
        self._clock = clock
        self.deadline = clock() + timeout
        self.bytes_received = 0

    def remaining(self) -> float:
        return max(0.0, self.deadline - self._clock())

    def _next_slice(self) -> float | None:
        remaining = self.remaining()
        if remaining <= 0:
            return None
        return min(POLL_INTERVAL, remaining)

    def send_all(self, data: bytes) -> int:
        """Send all of ``data`` before the deadline; return the byte count."""
        view = memoryview(data)
        sent = 0
        while sent < len(data):
            wait = self._next_slice()
            if wait is None:
                raise ProbeError(ProbeErrorKind.SEND_TIMEOUT, f"Timed out. Sent {sent} bytes.")
            try:
                if not self.poller.wait_writable(self.transport, wait):
                    continue
                count = self.transport.send(view[sent:])
            except _NOT_READY:
                continue
            except OSError as exc:
                raise ProbeError(categorize_exception(exc, sending=True), f"Send failure: {exc}") from exc
            sent += count
        return sent

    def recv(self, size: int = RECV_CHUNK_SIZE) -> bytes:
        """
        Return the next non-empty chunk of at most ``size`` bytes.

        Locally buffered data (``transport.pending()``) is read without polling:
        a TLS transport can hold decrypted bytes that the descriptor will never
        report as readable.
        """
        while True:
            wait = self._next_slice()
            if wait is None:
                raise ProbeError(ProbeErrorKind.TIMEOUT, f"Timed out after {self.timeout}s waiting for data")
            try:
                if self.transport.pending() <= 0 and not self.poller.wait_readable(self.transport, wait):
                    continue
                data = self.transport.recv(size)
            except _NOT_READY:
                continue
            except OSError as exc:
                raise ProbeError(categorize_exception(exc), f"Recv failure: {exc}") from exc
            if not data:
                logger.debug("EOF after %d bytes", self.bytes_received)
                raise ProbeError(ProbeErrorKind.END_OF_STREAM, "EOF")
            self.bytes_received += len(data)
            return data

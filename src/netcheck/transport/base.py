# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Transport abstraction consumed by the deadline-bounded I/O loop."""

from __future__ import annotations

from collections.abc import Callable
from typing import Protocol

from ..config import ConnectionTarget


class Transport(Protocol):
    """
    A single outbound byte stream in non-blocking mode.

    ``send``/``recv`` may raise ``BlockingIOError`` (or the ssl want-read/want-write
    errors) when the stream is not ready; callers poll and try again.
    ``pending`` reports bytes already buffered on our side of the stream (e.g.
    decrypted TLS records) that a readiness poll on the descriptor would miss.
    """

    def fileno(self) -> int: ...

    def send(self, data: bytes) -> int: ...

    def recv(self, size: int) -> bytes: ...

    def pending(self) -> int: ...

    def close(self) -> None: ...


Connector = Callable[[ConnectionTarget], Transport]

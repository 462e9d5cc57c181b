# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Error taxonomy and exception helpers."""

from __future__ import annotations

import socket
import ssl
from enum import Enum


class ProbeErrorKind(str, Enum):
    CONNECT_FAILURE = "CONNECT_FAILURE"
    SEND_TIMEOUT = "SEND_TIMEOUT"
    SEND_IO_ERROR = "SEND_IO_ERROR"
    TIMEOUT = "TIMEOUT"
    END_OF_STREAM = "END_OF_STREAM"
    IO_ERROR = "IO_ERROR"
    MISSING_LENGTH = "MISSING_LENGTH"
    MALFORMED = "MALFORMED"
    INVALID_REQUEST = "INVALID_REQUEST"
    PATTERN_NOT_FOUND = "PATTERN_NOT_FOUND"


class ProbeError(Exception):
    """A probe step failed; ``kind`` says which one."""

    def __init__(self, kind: ProbeErrorKind, message: str | None = None):
        self.kind = kind
        self.message = message or error_kind_to_reason(kind)
        super().__init__(self.message)

    def __repr__(self) -> str:
        return f"ProbeError({self.kind.value}, {self.message!r})"


class ConfigError(ValueError):
    """Raised for invalid watchdog configuration before the loop starts."""


def categorize_exception(exc: BaseException, *, sending: bool = False) -> ProbeErrorKind:
    """
    Map Python socket/ssl exceptions to ProbeErrorKind.

    ``sending`` selects the send-side kinds.
    """
    if isinstance(exc, ProbeError):
        return exc.kind

    if isinstance(exc, (socket.timeout, TimeoutError)):
        return ProbeErrorKind.SEND_TIMEOUT if sending else ProbeErrorKind.TIMEOUT

    if isinstance(exc, ssl.SSLZeroReturnError):
        return ProbeErrorKind.END_OF_STREAM

    if isinstance(exc, (ConnectionResetError, BrokenPipeError, ssl.SSLEOFError)) and not sending:
        return ProbeErrorKind.END_OF_STREAM

    return ProbeErrorKind.SEND_IO_ERROR if sending else ProbeErrorKind.IO_ERROR


def error_kind_to_reason(kind: ProbeErrorKind | None) -> str:
    """User-facing reason string."""
    mapping = {
        ProbeErrorKind.CONNECT_FAILURE: "Unable to open connection",
        ProbeErrorKind.SEND_TIMEOUT: "Timed out sending request",
        ProbeErrorKind.SEND_IO_ERROR: "Send failure",
        ProbeErrorKind.TIMEOUT: "Timed out waiting for response",
        ProbeErrorKind.END_OF_STREAM: "Connection closed before response was complete",
        ProbeErrorKind.IO_ERROR: "Recv failure",
        ProbeErrorKind.MISSING_LENGTH: "Response has neither chunked encoding nor a usable Content-Length",
        ProbeErrorKind.MALFORMED: "Malformed response framing",
        ProbeErrorKind.INVALID_REQUEST: "Request cannot be encoded for the wire",
        ProbeErrorKind.PATTERN_NOT_FOUND: "Expected content not found in response body",
        None: "",
    }
    return mapping.get(kind, "Probe failed")


__all__ = [
    "ConfigError",
    "ProbeError",
    "ProbeErrorKind",
    "categorize_exception",
    "error_kind_to_reason",
]

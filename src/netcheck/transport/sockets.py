# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Socket-backed transports (plain TCP and TLS)."""

from __future__ import annotations

import logging
import socket
import ssl
from contextlib import suppress

from ..config import ConnectionTarget
from ..errors import ProbeError, ProbeErrorKind

logger = logging.getLogger(__name__)


def build_tls_context(*, verify: bool = True) -> ssl.SSLContext:
    """TLS 1.2+ client context; certificate checks are left to the ssl module."""
    context = ssl.create_default_context()
    context.minimum_version = ssl.TLSVersion.TLSv1_2
    if not verify:
        context.check_hostname = False
        context.verify_mode = ssl.CERT_NONE
    return context


class SocketTransport:
    """Transport over an already connected socket, switched to non-blocking mode."""

    def __init__(self, sock: socket.socket):
        self._sock = sock
        self._sock.setblocking(False)

    def fileno(self) -> int:
        return self._sock.fileno()

    def send(self, data: bytes) -> int:
        return self._sock.send(data)

    def recv(self, size: int) -> bytes:
        return self._sock.recv(size)

    def pending(self) -> int:
        if isinstance(self._sock, ssl.SSLSocket):
            return self._sock.pending()
        return 0

    def close(self) -> None:
        with suppress(OSError):
            self._sock.shutdown(socket.SHUT_RDWR)
        self._sock.close()


def open_transport(target: ConnectionTarget) -> SocketTransport:
    """
    Connect to ``target`` within its timeout and return a non-blocking transport.

    The TCP connect and the TLS handshake both run in blocking mode bounded by
    ``target.timeout``; any failure is reported as ``CONNECT_FAILURE``.
    """
    try:
        sock = socket.create_connection((target.host, target.port), timeout=target.timeout)
    except OSError as exc:
        raise ProbeError(ProbeErrorKind.CONNECT_FAILURE, f"Unable to open socket: {exc}") from exc

    try:
        if target.use_tls:
            context = build_tls_context(verify=target.verify_tls)
            sock = context.wrap_socket(sock, server_hostname=target.host)
            logger.debug("TLS established with %s:%s (%s)", target.host, target.port, sock.version())
        return SocketTransport(sock)
    except (OSError, ValueError) as exc:
        sock.close()
        raise ProbeError(ProbeErrorKind.CONNECT_FAILURE, f"Unable to establish TLS: {exc}") from exc

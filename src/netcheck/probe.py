# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Connectivity prober: one GET request, one pattern check."""

from __future__ import annotations

import logging
import sys
import time
from collections.abc import Callable
from contextlib import suppress

from .config import ConnectionTarget, ProbeParameters
from .errors import ProbeError, ProbeErrorKind, error_kind_to_reason
from .http.models import HttpResponse
from .http.reader import read_response
from .http.request import build_get_request
from .models.probe import ProbeResult
from .transport.base import Connector, Transport
from .transport.deadline import DeadlineIO
from .transport.poller import Poller
from .transport.sockets import open_transport

logger = logging.getLogger(__name__)

Display = Callable[[HttpResponse], None]


def print_raw_response(response: HttpResponse) -> None:
    """Write the header block and decoded body to stdout."""
    sys.stdout.write(response.raw() + "\n")
    sys.stdout.flush()


class Prober:
    """
    Issue a single GET against the target and look for the expected pattern.

    Every failure (connect, send, read, framing, pattern mismatch) is folded
    into ``ProbeResult(ok=False)`` with the failure kind recorded; nothing is
    retried here. The transport is closed on every path.
    """

    def __init__(
        self,
        target: ConnectionTarget,
        params: ProbeParameters,
        *,
        connector: Connector | None = None,
        poller: Poller | None = None,
        display: Display | None = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.target = target
        self.params = params
        self.connector = connector or open_transport
        self.poller = poller
        self.display = display or print_raw_response
        self._clock = clock

    def _failure(self, exc: ProbeError, response: HttpResponse | None = None) -> ProbeResult:
        logger.info("Probe of %s:%s failed (%s): %s", self.target.host, self.target.port, exc.kind.value, exc.message)
        return ProbeResult(ok=False, response=response, error_kind=exc.kind, error_message=exc.message)

    def _close(self, transport: Transport) -> None:
        with suppress(OSError):
            transport.close()

    def _build_request(self) -> bytes:
        try:
            return build_get_request(
                self.target.host,
                self.params.path,
                user_agent=self.params.user_agent,
                accept=self.params.send_accept,
            )
        except ValueError as exc:
            raise ProbeError(ProbeErrorKind.INVALID_REQUEST, f"Cannot build request: {exc}") from exc

    def probe(self) -> ProbeResult:
        try:
            request = self._build_request()
        except ProbeError as exc:
            return self._failure(exc)

        logger.info("Connecting to %s:%s...", self.target.host, self.target.port)
        try:
            transport = self.connector(self.target)
        except ProbeError as exc:
            return self._failure(exc)
        except OSError as exc:
            return self._failure(ProbeError(ProbeErrorKind.CONNECT_FAILURE, f"Unable to open socket: {exc}"))

        started = self._clock()
        try:
            io = DeadlineIO(transport, self.params.timeout, poller=self.poller, clock=self._clock)
            logger.info("Sending GET...")
            io.send_all(request)
            logger.info("Receiving...")
            response = read_response(io)
        except ProbeError as exc:
            return self._failure(exc)
        finally:
            self._close(transport)

        response.meta["elapsed"] = self._clock() - started
        response.meta["bytes_received"] = io.bytes_received
        logger.info("Received %d bytes (status %s).", len(response.body), response.status_code)

        if self.params.show_raw:
            self.display(response)

        if self.params.pattern.encode("utf-8") not in response.body:
            return self._failure(
                ProbeError(ProbeErrorKind.PATTERN_NOT_FOUND, error_kind_to_reason(ProbeErrorKind.PATTERN_NOT_FOUND)),
                response,
            )
        return ProbeResult(ok=True, response=response, metadata=dict(response.meta))


def probe(target: ConnectionTarget, params: ProbeParameters, **kwargs) -> bool:
    """Run one probe and return whether the target is reachable and serving the pattern."""
    return Prober(target, params, **kwargs).probe().ok


__all__ = ["Display", "Prober", "ProbeResult", "print_raw_response", "probe"]

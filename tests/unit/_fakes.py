# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Scripted transport, poller and clock used instead of sockets."""

from collections import deque

from netcheck.transport.deadline import DeadlineIO


class FakeClock:
    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeTransport:
    """
    Deliver scripted receive results.

    Script items: bytes are returned by recv (split to the requested size),
    None is one poll slice with nothing to read, exceptions are raised by recv.
    An exhausted script reads as EOF unless ``silent`` is set, in which case
    the transport never becomes readable.
    """

    def __init__(self, script=(), *, silent=False, writable=True, send_limit=None, send_error=None, pending=b""):
        self.script = deque(script)
        self.silent = silent
        self.writable = writable
        self.send_limit = send_limit
        self.send_error = send_error
        self.local = bytearray(pending)
        self.sent = bytearray()
        self.recv_calls = 0
        self.closed = False

    def fileno(self) -> int:
        return -1

    def ready(self) -> bool:
        if not self.script:
            return not self.silent
        return self.script[0] is not None

    def stall(self) -> None:
        if self.script and self.script[0] is None:
            self.script.popleft()

    def send(self, data) -> int:
        if self.send_error is not None:
            raise self.send_error
        data = bytes(data)
        count = len(data) if self.send_limit is None else min(len(data), self.send_limit)
        self.sent += data[:count]
        return count

    def recv(self, size: int) -> bytes:
        self.recv_calls += 1
        if self.local:
            data = bytes(self.local[:size])
            del self.local[:size]
            return data
        if not self.script:
            return b""
        item = self.script.popleft()
        if isinstance(item, BaseException):
            raise item
        if len(item) > size:
            self.script.appendleft(item[size:])
            item = item[:size]
        return item

    def pending(self) -> int:
        return len(self.local)

    def close(self) -> None:
        self.closed = True


class FakePoller:
    """Answers readiness from the transport script; an idle slice advances the clock."""

    def __init__(self, clock: FakeClock):
        self.clock = clock
        self.read_polls = 0
        self.write_polls = 0

    def wait_readable(self, transport, timeout: float) -> bool:
        self.read_polls += 1
        if transport.ready():
            return True
        transport.stall()
        self.clock.advance(timeout)
        return False

    def wait_writable(self, transport, timeout: float) -> bool:
        self.write_polls += 1
        if transport.writable:
            return True
        self.clock.advance(timeout)
        return False


def make_io(script=(), *, timeout=5, **transport_kwargs):
    clock = FakeClock()
    transport = FakeTransport(script, **transport_kwargs)
    poller = FakePoller(clock)
    io = DeadlineIO(transport, timeout, poller=poller, clock=clock)
    return io, transport, poller, clock


def split_every(data: bytes, size: int) -> list[bytes]:
    return [data[i : i + size] for i in range(0, len(data), size)]


def chunked(*parts: bytes) -> bytes:
    body = b"".join(b"%x\r\n%s\r\n" % (len(part), part) for part in parts)
    return body + b"0\r\n\r\n"

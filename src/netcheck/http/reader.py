# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
Incremental HTTP/1.1 response reader.

The reader pulls at most RECV_CHUNK_SIZE bytes at a time from a DeadlineIO and
parses whatever is buffered: first CRLF-terminated header lines up to the empty
line, then the body as either chunked or Content-Length framed. Bytes that do
not yet form a complete line or chunk stay in the buffer for the next pass.

All failures are raised as ProbeError; a partial body is never returned.
"""

from __future__ import annotations

import logging
import re
from typing import Protocol

from ..errors import ProbeError, ProbeErrorKind
from ..transport.deadline import RECV_CHUNK_SIZE
from .headers import select_framing
from .models import HttpResponse

logger = logging.getLogger(__name__)

CRLF = b"\r\n"
MAX_HEADER_BYTES = 64 * 1024
MAX_CHUNK_SIZE_LINE = 1024

_HEX_RE = re.compile(rb"^[0-9A-Fa-f]+$")


class ByteSource(Protocol):
    def recv(self, size: int = RECV_CHUNK_SIZE) -> bytes: ...


def _take_line(buffer: bytearray) -> bytes | None:
    """Remove and return the next CRLF-terminated line (without CRLF), if complete."""
    index = buffer.find(CRLF)
    if index < 0:
        return None
    line = bytes(buffer[:index])
    del buffer[: index + len(CRLF)]
    return line


def read_headers(io: ByteSource, buffer: bytearray | None = None) -> tuple[list[str], bytearray]:
    """
    Read the status line and header lines up to the empty line.

    Returns the header lines in wire order and the buffer holding whatever was
    received past the header block (possibly the start of the body).
    """
    buffer = bytearray() if buffer is None else buffer
    lines: list[str] = []
    while True:
        line = _take_line(buffer)
        while line is not None:
            if not line:
                return lines, buffer
            lines.append(line.decode("latin-1"))
            line = _take_line(buffer)
        if len(buffer) > MAX_HEADER_BYTES:
            raise ProbeError(ProbeErrorKind.MALFORMED, "Header line too long")
        buffer += io.recv(RECV_CHUNK_SIZE)


def parse_chunk_size(line: bytes) -> int:
    """Parse a hexadecimal chunk-size line. Chunk extensions are rejected."""
    size = line.strip()
    if not _HEX_RE.match(size):
        raise ProbeError(ProbeErrorKind.MALFORMED, f"Invalid chunk size line: {line[:32]!r}")
    return int(size, 16)


class ChunkedDecoder:
    """
    Chunked transfer-coding state.

    ``pending_size`` is None while waiting for a size line, otherwise the size of
    the chunk whose data (plus its CRLF) has not fully arrived yet.
    """

    def __init__(self) -> None:
        self.pending_size: int | None = None
        self.decoded = bytearray()
        self.done = False

    def feed(self, buffer: bytearray) -> bool:
        """Consume as much of ``buffer`` as possible; return True once the last chunk is seen."""
        while not self.done:
            if self.pending_size is None:
                line = _take_line(buffer)
                if line is None:
                    if len(buffer) > MAX_CHUNK_SIZE_LINE:
                        raise ProbeError(ProbeErrorKind.MALFORMED, "Chunk size line too long")
                    return False
                self.pending_size = parse_chunk_size(line)
                if self.pending_size == 0:
                    # Anything after the last chunk (trailers) is ignored.
                    self.done = True
                continue

            needed = self.pending_size + len(CRLF)
            if len(buffer) < needed:
                return False
            self.decoded += buffer[: self.pending_size]
            del buffer[:needed]
            self.pending_size = None
        return True

    @property
    def body(self) -> bytes:
        return bytes(self.decoded)


def read_chunked_body(io: ByteSource, buffer: bytearray) -> bytes:
    decoder = ChunkedDecoder()
    while not decoder.feed(buffer):
        buffer += io.recv(RECV_CHUNK_SIZE)
    return decoder.body


def read_fixed_body(io: ByteSource, buffer: bytearray, length: int) -> bytes:
    """Read exactly ``length`` body bytes; bytes past the end are left unread."""
    if length <= 0:
        raise ProbeError(ProbeErrorKind.MISSING_LENGTH)
    while len(buffer) < length:
        buffer += io.recv(RECV_CHUNK_SIZE)
    return bytes(buffer[:length])


def read_body(io: ByteSource, headers: list[str], buffer: bytearray) -> tuple[bytes, bool]:
    """Decode the body according to the header framing; returns (body, chunked)."""
    framing = select_framing(headers)
    if framing.chunked:
        return read_chunked_body(io, buffer), True
    return read_fixed_body(io, buffer, framing.content_length or 0), False


def read_response(io: ByteSource) -> HttpResponse:
    headers, buffer = read_headers(io)
    logger.debug("Header block complete: %s", headers[0] if headers else "<empty>")
    body, chunked = read_body(io, headers, buffer)
    return HttpResponse(headers=headers, body=body, chunked=chunked)


__all__ = [
    "ChunkedDecoder",
    "parse_chunk_size",
    "read_body",
    "read_chunked_body",
    "read_fixed_body",
    "read_headers",
    "read_response",
]

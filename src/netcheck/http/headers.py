# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Header line parsing and body framing selection.

HTTP header field names are case-insensitive (RFC 9110). The reader keeps the raw
header lines in wire order for display; lookups go through an ``httpx.Headers``
view built from those lines.
"""

from __future__ import annotations

import re
from collections.abc import Sequence
from dataclasses import dataclass

import httpx

from ..errors import ProbeError, ProbeErrorKind

_DIGITS_RE = re.compile(r"^[0-9]+$")


@dataclass(frozen=True)
class BodyFraming:
    """How the body following the header block is delimited."""

    chunked: bool
    content_length: int | None = None


def header_fields(lines: Sequence[str]) -> httpx.Headers:
    """
    Build a case-insensitive header view from raw header lines.

    The status line and anything without a ``name: value`` shape are skipped.
    """
    pairs: list[tuple[bytes, bytes]] = []
    for line in lines:
        if not line or line.startswith("HTTP/") or line[0] in " \t":
            continue
        name, sep, value = line.partition(":")
        name = name.strip()
        if not sep or not name:
            continue
        pairs.append((name.encode("latin-1"), value.strip().encode("latin-1")))
    return httpx.Headers(pairs)


def is_chunked(fields: httpx.Headers) -> bool:
    tokens = [token.strip().lower() for token in fields.get("transfer-encoding", "").split(",")]
    return "chunked" in tokens


def content_length(fields: httpx.Headers) -> int | None:
    """Return the Content-Length as an int, or None when absent or not plain digits."""
    raw = fields.get("content-length", "").strip()
    if not _DIGITS_RE.match(raw):
        return None
    return int(raw)


def select_framing(lines: Sequence[str]) -> BodyFraming:
    """
    Choose chunked or fixed-length decoding for a response.

    Chunked transfer coding wins when both headers are present. A missing or
    non-positive Content-Length is an error: reading until close is not
    supported.
    """
    fields = header_fields(lines)
    if is_chunked(fields):
        return BodyFraming(chunked=True)
    length = content_length(fields)
    if length is None or length <= 0:
        raise ProbeError(ProbeErrorKind.MISSING_LENGTH)
    return BodyFraming(chunked=False, content_length=length)


__all__ = ["BodyFraming", "content_length", "header_fields", "is_chunked", "select_framing"]

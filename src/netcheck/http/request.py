# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Probe request construction."""

from __future__ import annotations

import httpx

from ..config import DEFAULT_USER_AGENT
from ..errors import ProbeError, ProbeErrorKind


def encode_target(host: str, path: str = "/") -> tuple[bytes, bytes]:
    """
    Return the wire forms of the Host header value and the request target.

    Internationalized host names are sent in IDNA (punycode) form and non-ASCII
    path characters are percent-encoded.
    """
    authority = f"[{host}]" if ":" in host else host
    try:
        url = httpx.URL(f"http://{authority}{path}")
    except httpx.InvalidURL as exc:
        raise ProbeError(ProbeErrorKind.INVALID_REQUEST, f"Cannot build request for {host!r}{path}: {exc}") from exc
    raw_host = url.raw_host
    if b":" in raw_host:
        raw_host = b"[" + raw_host + b"]"
    return raw_host, url.raw_path


def encode_user_agent(user_agent: str) -> bytes:
    if any(ch in user_agent for ch in "\r\n"):
        raise ProbeError(ProbeErrorKind.INVALID_REQUEST, "User-Agent must not contain line breaks")
    try:
        return user_agent.encode("latin-1")
    except UnicodeEncodeError as exc:
        raise ProbeError(ProbeErrorKind.INVALID_REQUEST, f"User-Agent is not latin-1 encodable: {user_agent!r}") from exc


def build_get_request(host: str, path: str = "/", *, user_agent: str = DEFAULT_USER_AGENT, accept: bool = True) -> bytes:
    """Return a minimal HTTP/1.1 GET request with no body."""
    raw_host, raw_path = encode_target(host, path)
    lines = [
        b"GET " + raw_path + b" HTTP/1.1",
        b"Host: " + raw_host,
        b"User-Agent: " + encode_user_agent(user_agent),
    ]
    if accept:
        lines.append(b"Accept: */*")
    return b"\r\n".join(lines) + b"\r\n\r\n"


__all__ = ["build_get_request", "encode_target", "encode_user_agent"]

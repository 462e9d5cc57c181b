# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""HTTP response data model produced by the incremental reader."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass
class HttpResponse:
    """Header lines in wire order (status line first) and the decoded body."""

    headers: list[str] = field(default_factory=list)
    body: bytes = b""
    chunked: bool = False
    meta: dict[str, Any] = field(default_factory=dict)

    @property
    def status_line(self) -> str:
        return self.headers[0] if self.headers else ""

    @property
    def status_code(self) -> int | None:
        parts = self.status_line.split(" ", 2)
        if len(parts) < 2 or not parts[0].startswith("HTTP/") or not parts[1].isdigit():
            return None
        return int(parts[1])

    @property
    def text(self) -> str:
        return self.body.decode("utf-8", errors="replace")

    def raw(self) -> str:
        """Header block and body as they would be shown to a user."""
        return "\n".join(self.headers) + "\n\n" + self.text


__all__ = ["HttpResponse"]

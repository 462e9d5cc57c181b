# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Probe result model."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from ..errors import ProbeErrorKind
from ..http.models import HttpResponse


@dataclass
class ProbeResult:
    ok: bool
    response: HttpResponse | None = None
    error_kind: ProbeErrorKind | None = None
    error_message: str | None = None
    metadata: dict[str, Any] = field(default_factory=dict)

    def __bool__(self) -> bool:
        return self.ok

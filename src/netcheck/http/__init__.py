# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""HTTP request building and incremental response reading."""

from .headers import BodyFraming, header_fields, select_framing
from .models import HttpResponse
from .reader import (
    ChunkedDecoder,
    read_body,
    read_chunked_body,
    read_fixed_body,
    read_headers,
    read_response,
)
from .request import build_get_request

__all__ = [
    "BodyFraming",
    "ChunkedDecoder",
    "HttpResponse",
    "build_get_request",
    "header_fields",
    "read_body",
    "read_chunked_body",
    "read_fixed_body",
    "read_headers",
    "read_response",
    "select_framing",
]

# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

import pytest
from _fakes import chunked, make_io, split_every

from netcheck.errors import ProbeError, ProbeErrorKind
from netcheck.http.headers import header_fields, select_framing
from netcheck.http.models import HttpResponse
from netcheck.http.reader import (
    ChunkedDecoder,
    parse_chunk_size,
    read_chunked_body,
    read_fixed_body,
    read_headers,
    read_response,
)

HELLO = b"HTTP/1.1 200 OK\r\nContent-Length: 13\r\n\r\nHello, world!"
WIKI = b"HTTP/1.1 200 OK\r\nTransfer-Encoding: chunked\r\n\r\n4\r\nWiki\r\n5\r\npedia\r\n0\r\n\r\n"


def test_read_headers_returns_lines_and_unconsumed_tail():
    io, _, _, _ = make_io([b"HTTP/1.1 200 OK\r\nServer: test\r\nContent-Length: 5\r\n\r\nhel"])
    headers, tail = read_headers(io)
    assert headers == ["HTTP/1.1 200 OK", "Server: test", "Content-Length: 5"]
    assert bytes(tail) == b"hel"


def test_read_headers_across_single_byte_reads():
    io, transport, _, _ = make_io(split_every(HELLO, 1), timeout=1000)
    headers, tail = read_headers(io)
    assert headers == ["HTTP/1.1 200 OK", "Content-Length: 13"]
    assert tail == b""
    assert transport.recv_calls == HELLO.index(b"\r\n\r\n") + 4


def test_read_headers_keeps_partial_line_between_reads():
    io, _, _, _ = make_io([b"HTTP/1.1 200 OK\r\nCont", None, b"ent-Length: 2\r", b"\n\r\nok"])
    headers, tail = read_headers(io)
    assert headers[1] == "Content-Length: 2"
    assert bytes(tail) == b"ok"


def test_read_headers_timeout():
    io, _, _, _ = make_io([b"HTTP/1.1 200 OK\r\n"], silent=True, timeout=2)
    with pytest.raises(ProbeError) as excinfo:
        read_headers(io)
    assert excinfo.value.kind is ProbeErrorKind.TIMEOUT


def test_read_headers_end_of_stream():
    io, _, _, _ = make_io([b"HTTP/1.1 200 OK\r\nContent-Length: 3\r\n"])
    with pytest.raises(ProbeError) as excinfo:
        read_headers(io)
    assert excinfo.value.kind is ProbeErrorKind.END_OF_STREAM


def test_read_headers_io_error():
    io, _, _, _ = make_io([b"HTTP/1.1 200 OK\r\n", OSError("reset")])
    with pytest.raises(ProbeError) as excinfo:
        read_headers(io)
    assert excinfo.value.kind is ProbeErrorKind.IO_ERROR


def test_fixed_length_body():
    io, _, _, _ = make_io([HELLO])
    response = read_response(io)
    assert response.body == b"Hello, world!"
    assert response.status_code == 200
    assert response.chunked is False


@pytest.mark.parametrize("size", [1, 2, 5, 13, 1024])
def test_fixed_length_body_any_fragmentation_ignores_extra_bytes(size):
    raw = HELLO + b"EXTRA BYTES"
    io, _, _, _ = make_io(split_every(raw, size), timeout=1000)
    assert read_response(io).body == b"Hello, world!"


def test_fixed_length_body_does_not_read_past_length():
    io, transport, _, _ = make_io([b"abc", b"de"], silent=True)
    assert read_fixed_body(io, bytearray(), 3) == b"abc"
    assert transport.recv_calls == 1


def test_fixed_length_body_requires_positive_length():
    io, _, _, _ = make_io([])
    with pytest.raises(ProbeError) as excinfo:
        read_fixed_body(io, bytearray(b"abc"), 0)
    assert excinfo.value.kind is ProbeErrorKind.MISSING_LENGTH


def test_fixed_length_body_end_of_stream_returns_nothing():
    io, _, _, _ = make_io([b"HTTP/1.1 200 OK\r\nContent-Length: 10\r\n\r\nshort"])
    with pytest.raises(ProbeError) as excinfo:
        read_response(io)
    assert excinfo.value.kind is ProbeErrorKind.END_OF_STREAM


def test_chunked_body_wikipedia():
    io, _, _, _ = make_io([WIKI])
    response = read_response(io)
    assert response.body == b"Wikipedia"
    assert response.chunked is True


@pytest.mark.parametrize("size", [1, 2, 3, 7, 16, 1024])
def test_chunked_body_any_fragmentation(size):
    payload = [b"The quick ", b"brown fox ", b"x" * 300, b"\r\n inside data \r\n", b"!"]
    raw = b"HTTP/1.1 200 OK\r\nTransfer-Encoding: chunked\r\n\r\n" + chunked(*payload)
    io, _, _, _ = make_io(split_every(raw, size), timeout=10000)
    assert read_response(io).body == b"".join(payload)


def test_chunked_body_stops_at_zero_chunk_despite_trailers():
    raw = WIKI[:-2] + b"X-Trailer: yes\r\n\r\n"
    io, transport, _, _ = make_io([raw], silent=True)
    assert read_response(io).body == b"Wikipedia"
    assert transport.recv_calls == 1


def test_chunked_body_consumes_buffered_chunks_without_new_reads():
    io, transport, _, _ = make_io([], silent=True)
    body = read_chunked_body(io, bytearray(b"3\r\nabc\r\n2\r\nde\r\n0\r\n\r\n"))
    assert body == b"abcde"
    assert transport.recv_calls == 0


def test_chunked_body_uppercase_hex_size():
    io, _, _, _ = make_io([], silent=True)
    data = b"A" * 0x1A
    assert read_chunked_body(io, bytearray(b"1A\r\n" + data + b"\r\n0\r\n\r\n")) == data


def test_chunked_body_timeout_mid_chunk():
    io, _, _, _ = make_io([b"5\r\nped"], silent=True, timeout=2)
    with pytest.raises(ProbeError) as excinfo:
        read_chunked_body(io, bytearray())
    assert excinfo.value.kind is ProbeErrorKind.TIMEOUT


def test_chunked_body_end_of_stream_before_last_chunk():
    io, _, _, _ = make_io([b"4\r\nWiki\r\n"])
    with pytest.raises(ProbeError) as excinfo:
        read_chunked_body(io, bytearray())
    assert excinfo.value.kind is ProbeErrorKind.END_OF_STREAM


def test_chunk_extensions_are_rejected():
    with pytest.raises(ProbeError) as excinfo:
        parse_chunk_size(b"4;name=value")
    assert excinfo.value.kind is ProbeErrorKind.MALFORMED


def test_chunked_decoder_keeps_partial_state():
    decoder = ChunkedDecoder()
    buffer = bytearray(b"5\r\npe")
    assert decoder.feed(buffer) is False
    assert decoder.pending_size == 5
    assert bytes(buffer) == b"pe"
    buffer += b"dia\r\n0\r\n\r\n"
    assert decoder.feed(buffer) is True
    assert decoder.body == b"pedia"


def test_framing_header_names_are_case_insensitive():
    assert select_framing(["HTTP/1.1 200 OK", "content-LENGTH: 7"]).content_length == 7
    assert select_framing(["HTTP/1.1 200 OK", "TRANSFER-ENCODING: Chunked"]).chunked is True
    assert header_fields(["HTTP/1.1 200 OK", "X-Thing:  value "])["x-thing"].strip() == "value"


def test_framing_prefers_chunked_over_content_length():
    framing = select_framing(["HTTP/1.1 200 OK", "Content-Length: 100", "Transfer-Encoding: gzip, chunked"])
    assert framing.chunked is True
    assert framing.content_length is None


@pytest.mark.parametrize(
    "headers",
    [
        ["HTTP/1.1 200 OK"],
        ["HTTP/1.1 200 OK", "Content-Length: 0"],
        ["HTTP/1.1 200 OK", "Content-Length: twelve"],
        ["HTTP/1.1 200 OK", "Content-Length: -5"],
        ["HTTP/1.1 200 OK", "Transfer-Encoding: gzip"],
    ],
)
def test_framing_without_usable_length_fails(headers):
    with pytest.raises(ProbeError) as excinfo:
        select_framing(headers)
    assert excinfo.value.kind is ProbeErrorKind.MISSING_LENGTH


def test_response_model_helpers():
    response = HttpResponse(headers=["HTTP/1.1 404 Not Found", "Content-Length: 2"], body=b"no")
    assert response.status_line == "HTTP/1.1 404 Not Found"
    assert response.status_code == 404
    assert response.raw() == "HTTP/1.1 404 Not Found\nContent-Length: 2\n\nno"
    assert HttpResponse().status_code is None

#
# Copyright (c) 2026 The hust contributors
#
# MIT License - See LICENSE file accompanying this package.
#

"""
Abstraction of a Datagram packet used in SSDP discovery.
"""

from __future__ import annotations

from .internal_types import *

from .util import (
    CaseInsensitiveDict,
    split_bytes_at_lf_or_crlf,
    parse_http_headers,
    encode_http_header,
)

class SsdpDatagram:
    """Wrapper for a raw SSDP datagram.

    This class provides parsing and formatting of the HTTP-like packets and a
    case-insensitive view of the headers. Unlike HTTP proper, header values are
    left exactly as sent; no unquoting is performed.
    """

    _raw_data: bytes
    """The raw UDP datagram contents"""

    _statement_line: str
    """The first line of the datagram; e.g., "HTTP/1.1 200 OK" or "M-SEARCH * HTTP/1.1"."""

    _headers: CaseInsensitiveDict[str]
    """The headers, keyed case-insensitively."""

    _body: bytes
    """The body of the datagram, if any. If there is no body, b'' is returned."""

    def __init__(
            self,
            statement: Optional[str]=None,
            headers: Optional[Mapping[str, Union[str, int]]]=None,
            body: Optional[bytes]=None,
            raw_data: Optional[bytes]=None,
          ):
        if raw_data is None:
            if statement is None:
                raise ValueError("Either statement or raw_data must be provided")
            self._statement_line = statement
            self._headers = CaseInsensitiveDict()
            if headers is not None:
                for name, value in headers.items():
                    self._headers[name] = str(value)
            self._body = b'' if body is None else body
            self._rebuild_raw_data()
        else:
            if not (statement is None and headers is None and body is None):
                raise ValueError("If raw_data is provided, statement, headers, and body must be None")
            self._parse_raw_data(raw_data)

    def __str__(self) -> str:
        return f"SsdpDatagram('{self._statement_line}', headers={dict(self._headers)}, body={self._body!r})"

    def __repr__(self) -> str:
        return str(self)

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, SsdpDatagram):
            return False
        return (self._statement_line == other._statement_line and
                self._headers == other._headers and
                self._body == other._body)

    @property
    def raw_data(self) -> bytes:
        """The raw UDP datagram contents"""
        return self._raw_data

    @property
    def statement_line(self) -> str:
        """The first line of the datagram."""
        return self._statement_line

    @property
    def headers(self) -> CaseInsensitiveDict[str]:
        return self._headers

    @property
    def body(self) -> bytes:
        return self._body

    def get_header(self, name: str, default: Optional[str]=None) -> Optional[str]:
        """Returns the value of a header (case-insensitive), or default if it is absent."""
        return self._headers.get(name, default)

    @property
    def hdr_location(self) -> Optional[str]:
        """Returns the "LOCATION" header, the URL of the responder's description document.

        Returns None if there is no LOCATION header or it is empty.
        """
        result = self._headers.get("LOCATION")
        if result is None or result == '':
            return None
        return result

    def _parse_raw_data(self, raw_data: bytes) -> None:
        self._raw_data = raw_data
        statement_and_remainder = split_bytes_at_lf_or_crlf(raw_data, 1)
        self._statement_line = statement_and_remainder[0].decode('utf-8', errors='replace')
        remainder = b'' if len(statement_and_remainder) < 2 else statement_and_remainder[1]
        self._headers, self._body = parse_http_headers(remainder)

    def _rebuild_raw_data(self) -> None:
        """Rebuild the raw data from the statement line, headers, and body.

        Headers are written in insertion order, and the header block is always
        terminated by a blank line.
        """
        raw_data = self._statement_line.encode('utf-8') + b'\r\n'
        for k, v in self._headers.items():
            raw_data += encode_http_header(k, v)
        raw_data += b'\r\n'
        raw_data += self._body
        self._raw_data = raw_data

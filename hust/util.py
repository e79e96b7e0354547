#
# Copyright (c) 2026 The hust contributors
#
# MIT License - See LICENSE file accompanying this package.
#

"""
Simple utility functions used by this package
"""

from __future__ import annotations

from typing_extensions import SupportsIndex

import re
import netifaces
from ipaddress import ip_address

from .internal_types import *

from email.parser import BytesHeaderParser
from email.message import Message as EmailParserMessage
from email.header import Header as EmailParserHeader
from requests.structures import CaseInsensitiveDict

_header_line_re = re.compile(rb'^([\x21-\x39\x3b-\x7e]+:|[\t ])')
"""Matches a header line ("<name>:...") or a folded continuation line."""

def split_bytes_at_lf_or_crlf(data: bytes, maxsplit: SupportsIndex = -1) -> List[bytes]:
    """Split a byte string at LF or CRLF.

    If maxsplit is given, at most maxsplit splits are done.

    Returns a List[bytes] of the lines with the delimiters removed.
    """
    parts = data.split(b'\n', maxsplit)
    for i, part in enumerate(parts[:-1]):
        if part.endswith(b'\r'):
            parts[i] = part[:-1]
    return parts

def split_headers_and_body(data: bytes) -> Tuple[bytes, bytes]:
    """Splits the header block of an HTTP-style message from its body.

    Bare '\n' is accepted as a line delimiter. Returns (headers, body); body is b''
    if the message has no blank line.
    """
    first_i = -1
    first_nb = 0
    for delim in (b'\n\r\n', b'\n\n'):
        i = data.find(delim)
        if i != -1 and (first_i == -1 or i < first_i):
            first_i = i
            first_nb = len(delim)
    if first_i == -1:
        return (data, b'')
    headers, body = data[:first_i], data[first_i + first_nb:]
    if headers.endswith(b'\r'):
        headers = headers[:-1]
    return (headers, body)

def parse_http_headers(data: bytes) -> Tuple[CaseInsensitiveDict[str], bytes]:
    """Parse HTTP-style headers out of a byte string that follows the statement line
    (e.g., "HTTP/1.1 200 OK"). Also returns the body of the message, if any.

    Header names are case-insensitive in the result. Values are not decoded. Lines
    that are neither "<name>: <value>" nor a continuation are skipped, and if a header
    appears more than once, the first occurrence wins.

    Returns a tuple of (headers: CaseInsensitiveDict[str], body: bytes).
    """
    headers_data, body = split_headers_and_body(data)
    # email's header parser wants CRLF line endings, and ends the header block at the
    # first line it does not recognize
    lines = [ line for line in split_bytes_at_lf_or_crlf(headers_data) if _header_line_re.match(line) ]
    headers_data = b'\r\n'.join(lines) + b'\r\n'
    msg: EmailParserMessage = BytesHeaderParser().parsebytes(headers_data)
    headers: CaseInsensitiveDict[str] = CaseInsensitiveDict()
    for k, v in msg.items():
        if k not in headers:
            headers[k] = str(v).strip()
    return (headers, body)

def encode_http_header(name: str, value: str) -> bytes:
    """Encodes a raw HTTP header name/value pair into a byte string terminated with '\r\n'."""
    h = EmailParserHeader(value, header_name=name)
    return name.encode() + b': ' + h.encode(linesep='\r\n').encode() + b'\r\n'

def get_default_ip_gateway() -> Tuple[Optional[str], Optional[str]]:
    """Returns (gateway_ip_address, gateway_interface_name) for the default IPV4 gateway,
       or (None, None) if there is none."""
    gws = netifaces.gateways()
    default_gateway_infos = gws.get("default", {})
    if netifaces.AF_INET in default_gateway_infos:
        gw_ip, gw_interface_name = default_gateway_infos[netifaces.AF_INET][:2]
        return (gw_ip, gw_interface_name)
    return (None, None)

def get_local_ip_addresses_and_interfaces(include_loopback: bool=False) -> List[Tuple[str, str]]:
    """Returns a list of (ip_address, interface_name) for the local IPV4 addresses.

    Addresses on the default gateway interface come first, then other non-loopback
    addresses, then loopback addresses (if requested). The first entry is the best
    candidate for sending multicast discovery requests.
    """
    _, default_gateway_ifname = get_default_ip_gateway()
    result_with_priority: List[Tuple[int, str, str]] = []
    for ifname in netifaces.interfaces():
        for addrinfo in netifaces.ifaddresses(ifname).get(netifaces.AF_INET, []):
            ip_str = addrinfo['addr']
            if ip_address(ip_str).is_loopback:
                if not include_loopback:
                    continue
                priority = 2
            elif ifname == default_gateway_ifname:
                priority = 0
            else:
                priority = 1
            result_with_priority.append((priority, ip_str, ifname))
    return [ (ip, ifname) for _, ip, ifname in sorted(result_with_priority) ]

def format_host_and_port(addr: Optional[HostAndPort]) -> Optional[str]:
    """Formats a socket address as "host:port"."""
    if addr is None:
        return None
    return f"{addr[0]}:{addr[1]}"

def full_name_of_type(t: Type) -> str:
    """Returns the fully qualified name of a python type"""
    module = t.__module__
    if module == 'builtins':
        result: str = t.__qualname__
    else:
        result = module + '.' + t.__qualname__
    return result

def full_type(o: Any) -> str:
    """Returns the fully qualified name of an object's type"""
    return full_name_of_type(o.__class__)

"""Tests for SSDP bridge discovery"""

import errno
import socket
import time
from unittest import mock

import pytest

from hust import (
    Bridge,
    BridgeFinder,
    DiscoveryParseError,
    TransportError,
    parse_discovery_answer,
)
from hust.discovery import DISCOVERY_REQUEST

from conftest import FakeSocket, discovery_response

LOCATION = "http://192.168.1.2:80/description.xml"


@pytest.fixture
def resolve(bridge):
    with mock.patch.object(Bridge, "from_description_url", return_value=bridge) as patched:
        yield patched


def test_discovery_request_text():
    raw = DISCOVERY_REQUEST.raw_data
    assert raw.startswith(b"M-SEARCH * HTTP/1.1\r\n")
    assert b"HOST: 239.255.255.250:1900\r\n" in raw
    assert b"MAN: ssdp:discover\r\n" in raw
    assert b"MX: 10\r\n" in raw
    assert b"ST: ssdp:all\r\n" in raw
    assert raw.endswith(b"\r\n\r\n")


def test_parse_discovery_answer():
    assert parse_discovery_answer(discovery_response(LOCATION)) == LOCATION


def test_parse_discovery_answer_accepts_bare_lf_and_any_case():
    data = b"HTTP/1.1 200 OK\nLocation: http://10.0.0.9/description.xml\n\n"
    assert parse_discovery_answer(data) == "http://10.0.0.9/description.xml"


def test_parse_discovery_answer_skips_unrecognized_header_lines():
    data = (
        b"HTTP/1.1 200 OK\r\n"
        b"CACHE-CONTROL: max-age=100\r\n"
        b"EXT\r\n"
        b"LOCATION: http://10.0.0.9/description.xml\r\n"
        b"\r\n"
    )
    assert parse_discovery_answer(data) == "http://10.0.0.9/description.xml"


def test_parse_discovery_answer_first_location_wins():
    data = b"HTTP/1.1 200 OK\r\nLOCATION: http://a/\r\nLOCATION: http://b/\r\n\r\n"
    assert parse_discovery_answer(data) == "http://a/"


@pytest.mark.parametrize("data", [
    discovery_response(location=None),
    b"NOTIFY * HTTP/1.1\r\nLOCATION: http://10.0.0.9/description.xml\r\n\r\n",
    b"HTTP/1.1 404 Not Found\r\nLOCATION: http://10.0.0.9/description.xml\r\n\r\n",
    b"HTTP/1.1 200 OK\r\nLOCATION:\r\n\r\n",
    b"",
    b"\xff\xfe\x00garbage",
])
def test_parse_discovery_answer_malformed(data):
    with pytest.raises(DiscoveryParseError):
        parse_discovery_answer(data)


def test_sends_request_once_to_multicast_group():
    sock = FakeSocket()
    with BridgeFinder(timeout=0.05, sock=sock):
        pass
    assert sock.sent == [(DISCOVERY_REQUEST.raw_data, ("239.255.255.250", 1900))]
    assert sock.closed


def test_sets_multicast_interface():
    sock = FakeSocket()
    with BridgeFinder(timeout=0.05, sock=sock, multicast_interface="192.168.1.10"):
        pass
    assert sock.sockopts == [(socket.IPPROTO_IP, socket.IP_MULTICAST_IF, socket.inet_aton("192.168.1.10"))]


def test_send_failure_raises_transport_error():
    sock = FakeSocket()
    sock.sendto = mock.Mock(side_effect=OSError(errno.ENETUNREACH, "Network is unreachable"))
    with pytest.raises(TransportError):
        BridgeFinder(timeout=0.05, sock=sock)
    assert sock.closed


def test_timeout_with_no_responses(resolve):
    sock = FakeSocket()
    start = time.monotonic()
    finder = BridgeFinder(timeout=0.2, sock=sock)
    assert list(finder) == []
    elapsed = time.monotonic() - start
    assert 0.2 <= elapsed < 1.0
    assert all(0.0 < t <= 0.2 for t in sock.timeouts)
    assert sock.closed
    resolve.assert_not_called()


def test_exhausted_finder_stays_exhausted():
    finder = BridgeFinder(timeout=0.05, sock=FakeSocket())
    assert list(finder) == []
    with pytest.raises(StopIteration):
        next(finder)
    assert list(finder) == []


def test_yields_resolved_bridge(resolve, bridge):
    sock = FakeSocket([(discovery_response(LOCATION), ("192.168.1.2", 1900))])
    found = list(BridgeFinder(timeout=0.2, sock=sock, request_timeout=3.0))
    assert len(found) == 1
    assert found[0].ok
    assert found[0].get_bridge() is bridge
    assert found[0].location == LOCATION
    assert found[0].src_addr == ("192.168.1.2", 1900)
    resolve.assert_called_once_with(LOCATION, request_timeout=3.0)


def test_duplicate_locations_resolved_once(resolve):
    sock = FakeSocket([
        (discovery_response(LOCATION), ("192.168.1.2", 1900)),
        (discovery_response(LOCATION), ("192.168.1.3", 1900)),
        (discovery_response(LOCATION), ("192.168.1.2", 1900)),
    ])
    found = list(BridgeFinder(timeout=0.2, sock=sock))
    assert len(found) == 1
    assert resolve.call_count == 1


def test_distinct_locations_each_resolved(resolve):
    other = "http://192.168.1.7:80/description.xml"
    sock = FakeSocket([
        (discovery_response(LOCATION), ("192.168.1.2", 1900)),
        (discovery_response(other), ("192.168.1.7", 1900)),
    ])
    finder = BridgeFinder(timeout=0.2, sock=sock)
    assert [f.location for f in finder] == [LOCATION, other]
    assert finder.seen_urls == {LOCATION, other}


def test_malformed_packet_does_not_end_session(resolve):
    sock = FakeSocket([
        (discovery_response(location=None), ("192.168.1.9", 1900)),
        (b"junk", ("192.168.1.9", 1900)),
        (discovery_response(LOCATION), ("192.168.1.2", 1900)),
    ])
    found = list(BridgeFinder(timeout=0.2, sock=sock))
    assert [f.location for f in found] == [LOCATION]


def test_spurious_timeouts_are_retried(resolve):
    sock = FakeSocket([
        socket.timeout("timed out"),
        BlockingIOError(errno.EAGAIN, "Resource temporarily unavailable"),
        (discovery_response(LOCATION), ("192.168.1.2", 1900)),
    ])
    found = list(BridgeFinder(timeout=0.2, sock=sock))
    assert len(found) == 1


def test_resolution_failure_is_yielded():
    failure = TransportError("connection refused")
    sock = FakeSocket([
        (discovery_response(LOCATION), ("192.168.1.2", 1900)),
        (discovery_response(LOCATION), ("192.168.1.2", 1900)),
    ])
    with mock.patch.object(Bridge, "from_description_url", side_effect=failure) as patched:
        found = list(BridgeFinder(timeout=0.2, sock=sock))
    assert len(found) == 1
    assert not found[0].ok
    assert found[0].error is failure
    with pytest.raises(TransportError):
        found[0].get_bridge()
    patched.assert_called_once()


def test_receive_failure_ends_session_with_transport_error():
    sock = FakeSocket([OSError(errno.ECONNREFUSED, "Connection refused")])
    finder = BridgeFinder(timeout=5.0, sock=sock)
    with pytest.raises(TransportError):
        next(finder)
    assert sock.closed
    with pytest.raises(StopIteration):
        next(finder)


def test_close_ends_iteration():
    sock = FakeSocket([(discovery_response(LOCATION), ("192.168.1.2", 1900))])
    finder = BridgeFinder(timeout=5.0, sock=sock)
    finder.close()
    assert sock.closed
    assert list(finder) == []


def test_receive_time_is_taken_before_resolution(bridge):
    resolve_times = []

    def slow_resolve(location, request_timeout):
        time.sleep(0.05)
        resolve_times.append(time.monotonic())
        return bridge

    sock = FakeSocket([(discovery_response(LOCATION), ("192.168.1.2", 1900))])
    with mock.patch.object(Bridge, "from_description_url", side_effect=slow_resolve):
        before = time.monotonic()
        found = next(BridgeFinder(timeout=1.0, sock=sock))
    assert before <= found.monotonic_time
    assert found.monotonic_time + 0.04 <= resolve_times[0]

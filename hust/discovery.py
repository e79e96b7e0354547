#
# Copyright (c) 2026 The hust contributors
#
# MIT License - See LICENSE file accompanying this package.
#

"""
BridgeFinder -- A blocking SSDP discovery session that:

  1. Sends one discovery request to the SSDP multicast address (239.255.255.250:1900)
  2. Receives and decodes discovery responses from devices on the local network
  3. Resolves each distinct advertised description URL into a Bridge, until a timeout elapses
"""

from __future__ import annotations

import socket
import time

from .internal_types import *
from .pkg_logging import logger
from .constants import (
    SSDP_MULTICAST_ADDRESS,
    SSDP_PORT,
    DISCOVERY_MX,
    DISCOVERY_SEARCH_TARGET,
    DEFAULT_DISCOVERY_TIMEOUT,
    DEFAULT_REQUEST_TIMEOUT,
    MAX_DATAGRAM_SIZE,
  )
from .exceptions import HustError, TransportError, DiscoveryParseError
from .ssdp_datagram import SsdpDatagram
from .bridge import Bridge

DISCOVERY_REQUEST = SsdpDatagram(
    "M-SEARCH * HTTP/1.1",
    headers={
        "HOST": f"{SSDP_MULTICAST_ADDRESS}:{SSDP_PORT}",
        "MAN": "ssdp:discover",
        "MX": DISCOVERY_MX,
        "ST": DISCOVERY_SEARCH_TARGET,
    },
  )
"""The SSDP service discovery request"""

RESPONSE_STATEMENT_PREFIX = "HTTP/1.1 200 OK"

def parse_discovery_answer(data: bytes) -> str:
    """Extracts the description URL from one discovery response datagram.

    Raises DiscoveryParseError if the datagram is not a 200 OK response with a
    LOCATION header.
    """
    datagram = SsdpDatagram(raw_data=data)
    if not datagram.statement_line.startswith(RESPONSE_STATEMENT_PREFIX):
        raise DiscoveryParseError(f"Not a discovery response: {datagram.statement_line!r}")
    location = datagram.hdr_location
    if location is None:
        raise DiscoveryParseError(f"Discovery response has no LOCATION header: {datagram}")
    return location


class DiscoveredBridge:
    """The outcome of resolving one distinct discovery response."""

    src_addr: HostAndPort
    """The address the discovery response came from"""

    location: str
    """The description document URL advertised in the response"""

    bridge: Optional[Bridge]
    """The resolved bridge, or None if resolution failed"""

    error: Optional[HustError]
    """The resolution failure, or None if resolution succeeded"""

    monotonic_time: float
    """The local time (time.monotonic()) at which the response was received."""

    def __init__(
            self,
            src_addr: HostAndPort,
            location: str,
            bridge: Optional[Bridge]=None,
            error: Optional[HustError]=None,
            monotonic_time: Optional[float]=None
          ):
        assert (bridge is None) != (error is None)
        self.src_addr = src_addr
        self.location = location
        self.bridge = bridge
        self.error = error
        self.monotonic_time = time.monotonic() if monotonic_time is None else monotonic_time

    @property
    def ok(self) -> bool:
        return self.bridge is not None

    def get_bridge(self) -> Bridge:
        """Returns the resolved bridge, or raises the error that prevented resolution."""
        if self.error is not None:
            raise self.error
        assert self.bridge is not None
        return self.bridge

    def __repr__(self) -> str:
        outcome = f"bridge={self.bridge}" if self.ok else f"error={self.error!r}"
        return f"DiscoveredBridge(src_addr={self.src_addr}, location={self.location!r}, {outcome})"


class BridgeFinder(Iterator[DiscoveredBridge]):
    """An iterator over the bridges in this network.

    Construction binds a socket and sends the discovery request. Each call to
    next() blocks until a novel bridge is found and resolved, or until the
    timeout measured from construction elapses, at which point iteration ends
    for good. Duplicate and malformed responses are skipped silently. A bridge
    whose description cannot be fetched or decoded is still yielded, with its
    error.

    Usage:
        with BridgeFinder(timeout=5.0) as finder:
            for found in finder:
                print(found.get_bridge().friendly_name)
    """

    timeout: float
    """Timeout (in seconds) after which the iteration will end"""

    end_time: float
    """The time.monotonic() value at which the iteration will end"""

    sock: Optional[socket.socket]
    """The socket on which the responses are expected. None once the session is over."""

    seen_urls: Set[str]
    """Enables deduplication of the received description URLs"""

    request_timeout: float
    """The HTTP timeout used when resolving each bridge description"""

    _exhausted: bool = False
    _closed: bool = False

    def __init__(
            self,
            timeout: float=DEFAULT_DISCOVERY_TIMEOUT,
            bind_address: str="0.0.0.0",
            multicast_interface: Optional[str]=None,
            multicast_address: str=SSDP_MULTICAST_ADDRESS,
            multicast_port: int=SSDP_PORT,
            request_timeout: float=DEFAULT_REQUEST_TIMEOUT,
            sock: Optional[socket.socket]=None,
          ) -> None:
        """Create a discovery session and send the discovery request.

        Parameters:
            timeout:             The amount of time (in seconds) to wait for responses.
            bind_address:        The local IP address to bind to. Ignored if sock is provided.
            multicast_interface: The local IP address of the interface to send the
                                   multicast request on. Default: chosen by the OS.
            multicast_address:   The multicast address to send the request to.
            multicast_port:      The multicast port to send the request to.
            request_timeout:     The HTTP timeout used to fetch each bridge description.
            sock:                An already bound datagram socket to use instead of
                                   creating one. It is owned (and closed) by this object.
        """
        self.timeout = timeout
        self.request_timeout = request_timeout
        self.seen_urls = set()
        self.sock = None
        try:
            if sock is None:
                sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM, socket.IPPROTO_UDP)
                self.sock = sock
                sock.bind((bind_address, 0))
            else:
                self.sock = sock
            if multicast_interface is not None:
                sock.setsockopt(socket.IPPROTO_IP, socket.IP_MULTICAST_IF, socket.inet_aton(multicast_interface))
            logger.debug(f"Sending discovery request to {multicast_address}:{multicast_port}: {DISCOVERY_REQUEST}")
            sock.sendto(DISCOVERY_REQUEST.raw_data, (multicast_address, multicast_port))
        except OSError as e:
            self.close()
            raise TransportError(f"Unable to send discovery request: {e}") from e
        self.end_time = time.monotonic() + timeout

    def close(self) -> None:
        """Release the socket. Any blocked or later call to next() ends the iteration."""
        self._closed = True
        self._finish()

    def _finish(self) -> None:
        self._exhausted = True
        sock = self.sock
        self.sock = None
        if sock is not None:
            sock.close()

    def __enter__(self) -> BridgeFinder:
        return self

    def __exit__(
            self,
            exc_type: Optional[Type[BaseException]],
            exc: Optional[BaseException],
            tb: Optional[TracebackType]
          ) -> None:
        self.close()

    def __iter__(self) -> BridgeFinder:
        return self

    def _receive(self, remaining_time: float) -> Optional[Tuple[bytes, HostAndPort]]:
        """Receives one datagram, or returns None if remaining_time elapses first."""
        sock = self.sock
        if sock is None:
            return None
        try:
            sock.settimeout(remaining_time)
            data, addr = sock.recvfrom(MAX_DATAGRAM_SIZE)
        except (socket.timeout, BlockingIOError, InterruptedError):
            return None
        except OSError as e:
            closed = self._closed
            self._finish()
            if closed:
                return None
            raise TransportError(f"Discovery receive failed: {e}") from e
        return (data, addr)

    def __next__(self) -> DiscoveredBridge:
        while not self._exhausted:
            remaining_time = self.end_time - time.monotonic()
            if remaining_time <= 0.0:
                logger.debug("Discovery timeout elapsed")
                self._finish()
                break
            received = self._receive(remaining_time)
            if received is None:
                continue
            data, src_addr = received
            received_time = time.monotonic()
            try:
                location = parse_discovery_answer(data)
            except DiscoveryParseError as e:
                logger.debug(f"Skipping malformed response from {src_addr}: {e}")
                continue
            if location in self.seen_urls:
                logger.debug(f"Skipping duplicate response from {src_addr} for {location}")
                continue
            self.seen_urls.add(location)
            logger.debug(f"Discovered {location} from {src_addr}")
            try:
                bridge = Bridge.from_description_url(location, request_timeout=self.request_timeout)
            except HustError as e:
                logger.debug(f"Unable to resolve {location}: {e}")
                return DiscoveredBridge(src_addr, location, error=e, monotonic_time=received_time)
            return DiscoveredBridge(src_addr, location, bridge=bridge, monotonic_time=received_time)
        raise StopIteration


def find_bridges(timeout: float=DEFAULT_DISCOVERY_TIMEOUT, **kwargs: Any) -> BridgeFinder:
    """Yield all bridges that can be found in the network within `timeout` seconds.

    Keyword arguments are passed to BridgeFinder.

    Example:
        for found in find_bridges(2.0):
            print(found.get_bridge())
    """
    return BridgeFinder(timeout=timeout, **kwargs)

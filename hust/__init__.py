# Copyright (c) 2026 The hust contributors
#
# MIT License - See LICENSE file accompanying this package.
#

"""
Package hust discovers and controls networked lighting bridges (Philips Hue style).

Bridges are found on the local network with an SSDP M-SEARCH multicast request.
Each responder advertises the URL of a UPnP description document, which is
fetched and decoded into a Bridge. A Bridge can then register a user (the link
button on the bridge must be pressed first) and, with that user, list and
modify lights through the bridge's JSON-over-HTTP API.

Control calls answer with a list of "success" and "error" sections; any
success section makes the call a success, and otherwise the bridge's own
error entries are raised in a BridgeApiError.
"""

from .version import __version__

from .internal_types import Jsonable, JsonableDict

from .exceptions import (
    HustError,
    TransportError,
    DecodeError,
    DescriptorError,
    DiscoveryParseError,
    BridgeApiError,
  )

from .response import (
    SectionKind,
    ApiErrorEntry,
    ResponseSection,
    parse_response_sections,
    interpret_registration,
    interpret_mutation,
  )
from .lights import Light, LightState
from .bridge import Bridge, BridgeDevice, parse_description
from .ssdp_datagram import SsdpDatagram
from .discovery import BridgeFinder, DiscoveredBridge, find_bridges, parse_discovery_answer
from .util import CaseInsensitiveDict
from .constants import (
    SSDP_MULTICAST_ADDRESS,
    SSDP_PORT,
    DEFAULT_DISCOVERY_TIMEOUT,
    DEFAULT_REQUEST_TIMEOUT,
    DEFAULT_DEVICE_TYPE,
  )

__all__ = [
    '__version__',
    'Jsonable', 'JsonableDict',
    'HustError', 'TransportError', 'DecodeError', 'DescriptorError', 'DiscoveryParseError', 'BridgeApiError',
    'SectionKind', 'ApiErrorEntry', 'ResponseSection',
    'parse_response_sections', 'interpret_registration', 'interpret_mutation',
    'Light', 'LightState',
    'Bridge', 'BridgeDevice', 'parse_description',
    'SsdpDatagram',
    'BridgeFinder', 'DiscoveredBridge', 'find_bridges', 'parse_discovery_answer',
    'CaseInsensitiveDict',
    'SSDP_MULTICAST_ADDRESS', 'SSDP_PORT',
    'DEFAULT_DISCOVERY_TIMEOUT', 'DEFAULT_REQUEST_TIMEOUT', 'DEFAULT_DEVICE_TYPE',
]

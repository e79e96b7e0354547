# Copyright (c) 2026 The hust contributors
#
# MIT License - See LICENSE file accompanying this package.
#

"""Constants used by this package"""

SSDP_MULTICAST_ADDRESS = "239.255.255.250"
"""The multicast address used by SSDP for UDP multicast."""

SSDP_PORT = 1900
"""The port number used by SSDP for UDP multicast."""

DISCOVERY_MX = 10
"""The MX (maximum response delay, in seconds) advertised in the discovery request."""

DISCOVERY_SEARCH_TARGET = "ssdp:all"
"""The ST (search target) advertised in the discovery request."""

MAX_DATAGRAM_SIZE = 8192
"""The largest discovery response datagram that will be read."""

DEFAULT_DISCOVERY_TIMEOUT = 5.0
"""The default amount of time (in seconds) that a discovery session collects responses."""

DEFAULT_REQUEST_TIMEOUT = 10.0
"""The default timeout (in seconds) for a single HTTP request to a bridge."""

DEFAULT_DEVICE_TYPE = "Hust Hue API client"
"""The client identifier sent as "devicetype" when registering a user."""

KEYRING_SERVICE = "hust"
"""The keyring service name under which registered usernames are stored."""

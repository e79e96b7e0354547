"""
Shared pytest fixtures for hust tests
"""

import socket
import time
from unittest.mock import Mock

import pytest
import requests

from hust import Bridge, BridgeDevice
from hust.config import UserStore


HUE_DESCRIPTION_XML = b"""<?xml version="1.0" encoding="UTF-8" ?>
<root xmlns="urn:schemas-upnp-org:device-1-0">
<specVersion>
<major>1</major>
<minor>0</minor>
</specVersion>
<URLBase>http://192.168.1.2:80/</URLBase>
<device>
<deviceType>urn:schemas-upnp-org:device:Basic:1</deviceType>
<friendlyName>Philips hue (192.168.1.2)</friendlyName>
<manufacturer>Royal Philips Electronics</manufacturer>
<manufacturerURL>http://www.philips.com</manufacturerURL>
<modelDescription>Philips hue Personal Wireless Lighting</modelDescription>
<modelName>Philips hue bridge 2015</modelName>
<modelNumber>BSB002</modelNumber>
<serialNumber>001788255acc</serialNumber>
<UDN>uuid:2f402f80-da50-11e1-9b23-001788255acc</UDN>
</device>
</root>
"""


def discovery_response(location="http://192.168.1.2:80/description.xml"):
    """Build a bridge's answer to an M-SEARCH request"""
    lines = [
        "HTTP/1.1 200 OK",
        "HOST: 239.255.255.250:1900",
        "EXT:",
        "CACHE-CONTROL: max-age=100",
    ]
    if location is not None:
        lines.append(f"LOCATION: {location}")
    lines += [
        "SERVER: Linux/3.14.0 UPnP/1.0 IpBridge/1.26.0",
        "hue-bridgeid: 001788FFFE255ACC",
        "ST: upnp:rootdevice",
        "USN: uuid:2f402f80-da50-11e1-9b23-001788255acc::upnp:rootdevice",
    ]
    return ("\r\n".join(lines) + "\r\n\r\n").encode("utf-8")


class FakeSocket:
    """Stands in for a bound UDP socket. Queued items are returned by recvfrom in order;
    exception instances in the queue are raised instead. An empty queue behaves like
    a quiet network: recvfrom sleeps for the configured timeout and times out."""

    def __init__(self, items=()):
        self.items = list(items)
        self.sent = []
        self.sockopts = []
        self.timeouts = []
        self.closed = False

    def settimeout(self, timeout):
        self.timeouts.append(timeout)

    def setsockopt(self, level, optname, value):
        self.sockopts.append((level, optname, value))

    def sendto(self, data, addr):
        self.sent.append((data, addr))
        return len(data)

    def recvfrom(self, bufsize):
        if self.closed:
            raise OSError(9, "Bad file descriptor")
        if self.items:
            item = self.items.pop(0)
            if isinstance(item, BaseException):
                raise item
            return item
        time.sleep(self.timeouts[-1] if self.timeouts else 0)
        raise socket.timeout("timed out")

    def close(self):
        self.closed = True


def make_response(json_data=None, content=None, status_code=200):
    """Build a stand-in for a requests.Response"""
    response = Mock()
    response.status_code = status_code
    response.content = content
    if json_data is None:
        response.json.side_effect = ValueError("Expecting value: line 1 column 1 (char 0)")
    else:
        response.json.return_value = json_data
    if status_code >= 400:
        response.raise_for_status.side_effect = requests.HTTPError(f"{status_code} Client Error")
    return response


class MemoryUserStore(UserStore):
    """A UserStore that keeps usernames in a dict"""

    def __init__(self, usernames=None):
        self.usernames = dict(usernames or {})

    def get_username(self, bridge_id):
        return self.usernames[bridge_id]

    def set_username(self, bridge_id, username):
        self.usernames[bridge_id] = username

    def delete_username(self, bridge_id):
        del self.usernames[bridge_id]


@pytest.fixture
def description_xml():
    return HUE_DESCRIPTION_XML


@pytest.fixture
def bridge():
    device = BridgeDevice(
        udn="uuid:2f402f80-da50-11e1-9b23-001788255acc",
        friendly_name="Philips hue (192.168.1.2)",
        model_name="Philips hue bridge 2015",
        serial_number="001788255acc",
    )
    return Bridge("http://192.168.1.2:80/", device)


@pytest.fixture
def user_store():
    return MemoryUserStore()

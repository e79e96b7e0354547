#
# Copyright (c) 2026 The hust contributors
#
# MIT License - See LICENSE file accompanying this package.
#

"""
Bridge -- A client for a single lighting bridge that can:

  1. Be created from the description document URL advertised in SSDP discovery
  2. Register a user (requires the link button on the bridge to be pressed)
  3. List the lights attached to the bridge, with their state
  4. Modify the state of a light (e.g., switch it on or off)

All calls are blocking, and each one makes a fresh HTTP request.
"""

from __future__ import annotations

from urllib.parse import urlsplit
from xml.etree import ElementTree

import requests

from .internal_types import *
from .pkg_logging import logger
from .constants import DEFAULT_DEVICE_TYPE, DEFAULT_REQUEST_TIMEOUT
from .exceptions import BridgeApiError, DecodeError, DescriptorError, TransportError
from .response import parse_response_sections, interpret_registration, interpret_mutation
from .lights import Light, lights_from_json

class BridgeDevice:
    """Core device information about a bridge, from its description document."""

    _udn: str
    _device_type: str
    _manufacturer: str
    _model_name: str
    _model_description: str
    _serial_number: str
    _friendly_name: str

    _xml_fields: Dict[str, str] = {
        "UDN": "udn",
        "deviceType": "device_type",
        "manufacturer": "manufacturer",
        "modelName": "model_name",
        "modelDescription": "model_description",
        "serialNumber": "serial_number",
        "friendlyName": "friendly_name",
    }

    _required_xml_fields: Tuple[str, ...] = ("UDN", "friendlyName")

    def __init__(
            self,
            udn: str,
            friendly_name: str,
            device_type: str="",
            manufacturer: str="",
            model_name: str="",
            model_description: str="",
            serial_number: str="",
          ):
        self._udn = udn
        self._friendly_name = friendly_name
        self._device_type = device_type
        self._manufacturer = manufacturer
        self._model_name = model_name
        self._model_description = model_description
        self._serial_number = serial_number

    @property
    def udn(self) -> str:
        """The unique device name, e.g. "uuid:2f402f80-da50-11e1-9b23-001788255acc"."""
        return self._udn

    @property
    def friendly_name(self) -> str:
        return self._friendly_name

    @property
    def device_type(self) -> str:
        return self._device_type

    @property
    def manufacturer(self) -> str:
        return self._manufacturer

    @property
    def model_name(self) -> str:
        return self._model_name

    @property
    def model_description(self) -> str:
        return self._model_description

    @property
    def serial_number(self) -> str:
        return self._serial_number

    @classmethod
    def from_xml_element(cls, device_elem: ElementTree.Element) -> BridgeDevice:
        values: Dict[str, str] = {}
        for child in device_elem:
            xml_name = _local_name(child.tag)
            if xml_name in cls._xml_fields:
                values[cls._xml_fields[xml_name]] = (child.text or "").strip()
        for xml_name in cls._required_xml_fields:
            if values.get(cls._xml_fields[xml_name], "") == "":
                raise DescriptorError(f"Bridge description has no {xml_name}")
        return cls(**values)

    def to_json(self) -> JsonableDict:
        return {
            "UDN": self.udn,
            "deviceType": self.device_type,
            "manufacturer": self.manufacturer,
            "modelName": self.model_name,
            "modelDescription": self.model_description,
            "serialNumber": self.serial_number,
            "friendlyName": self.friendly_name,
        }

    def __repr__(self) -> str:
        return f"BridgeDevice(udn={self.udn!r}, friendly_name={self.friendly_name!r}, model_name={self.model_name!r})"


def _local_name(tag: str) -> str:
    """Strips an ElementTree "{namespace}" prefix from a tag."""
    return tag.rsplit('}', 1)[-1]

def _find_child(elem: ElementTree.Element, name: str) -> Optional[ElementTree.Element]:
    for child in elem:
        if _local_name(child.tag) == name:
            return child
    return None

def parse_description(
        xml_text: Union[str, bytes],
        location: Optional[str]=None,
        request_timeout: float=DEFAULT_REQUEST_TIMEOUT
      ) -> Bridge:
    """Decodes a UPnP device description document into a Bridge.

    The base URL comes from the document's URLBase element or, if that is
    absent, from the scheme and host of `location` (the URL the document
    was fetched from).

    Raises DescriptorError if the document is malformed or lacks required fields.
    """
    try:
        root = ElementTree.fromstring(xml_text)
    except ElementTree.ParseError as e:
        raise DescriptorError(f"Bridge description is not valid XML: {e}") from e
    if _local_name(root.tag) != "root":
        raise DescriptorError(f"Bridge description has unexpected root element {root.tag!r}")
    device_elem = _find_child(root, "device")
    if device_elem is None:
        raise DescriptorError("Bridge description has no device element")
    device = BridgeDevice.from_xml_element(device_elem)

    url_base_elem = _find_child(root, "URLBase")
    url_base = "" if url_base_elem is None else (url_base_elem.text or "").strip()
    if url_base == "":
        if location is None:
            raise DescriptorError("Bridge description has no URLBase")
        parts = urlsplit(location)
        if parts.scheme == "" or parts.netloc == "":
            raise DescriptorError(f"Bridge description has no URLBase and location {location!r} is not a URL")
        url_base = f"{parts.scheme}://{parts.netloc}/"
    return Bridge(url_base, device, request_timeout=request_timeout)


class Bridge:
    """
    An object to communicate with a bridge.

    The properties describe the (static) identity of the bridge. The methods
    send commands to it. A username obtained from register_user() must be
    passed to every authenticated call; it is not stored here, since one bridge
    may serve several registered users.
    """

    _url_base: str
    _device: BridgeDevice

    _request_timeout: float

    def __init__(self, url_base: str, device: BridgeDevice, request_timeout: float=DEFAULT_REQUEST_TIMEOUT):
        if not url_base.endswith('/'):
            url_base += '/'
        self._url_base = url_base
        self._device = device
        self._request_timeout = request_timeout

    @classmethod
    def from_description_url(cls, url: str, request_timeout: float=DEFAULT_REQUEST_TIMEOUT) -> Bridge:
        """Creates a Bridge from a description URL like the ones returned by SSDP discovery.

        Raises TransportError if the document cannot be fetched, or DescriptorError
        if it cannot be decoded.
        """
        logger.debug(f"Fetching bridge description from {url}")
        try:
            response = requests.get(url, timeout=request_timeout)
            response.raise_for_status()
        except requests.RequestException as e:
            raise TransportError(f"Unable to fetch bridge description from {url}: {e}") from e
        bridge = parse_description(response.content, location=url, request_timeout=request_timeout)
        logger.debug(f"Resolved {url} to {bridge}")
        return bridge

    @property
    def url_base(self) -> str:
        """The base URL of the bridge, which all api/ resources are below. Always ends with '/'."""
        return self._url_base

    @property
    def request_timeout(self) -> float:
        """The timeout (in seconds) applied to each HTTP request."""
        return self._request_timeout

    @property
    def device(self) -> BridgeDevice:
        """The device properties of this bridge."""
        return self._device

    @property
    def friendly_name(self) -> str:
        """The unique but user-friendly name of the bridge."""
        return self._device.friendly_name

    def __str__(self) -> str:
        return f"Bridge('{self.friendly_name}', url_base='{self._url_base}')"

    def __repr__(self) -> str:
        return f"Bridge({self._url_base!r}, {self._device!r})"

    def to_json(self) -> JsonableDict:
        return {
            "URLBase": self._url_base,
            "device": self._device.to_json(),
        }

    def _send(self, method: str, path: str, body: Optional[JsonableDict]=None) -> Jsonable:
        """Sends one request to <url_base><path> and returns the decoded JSON response body."""
        url = self._url_base + path
        logger.debug(f"{method} {url} {body}")
        try:
            if method == "GET":
                response = requests.get(url, timeout=self._request_timeout)
            elif method == "POST":
                response = requests.post(url, json=body, timeout=self._request_timeout)
            elif method == "PUT":
                response = requests.put(url, json=body, timeout=self._request_timeout)
            else:
                raise ValueError(f"Unsupported HTTP method {method}")
            # requests' JSONDecodeError is also a RequestException, so decode here
            try:
                result = response.json()
            except ValueError as e:
                raise DecodeError(f"{method} {url}: response is not valid JSON: {e}") from e
        except requests.RequestException as e:
            raise TransportError(f"{method} {url} failed: {e}") from e
        logger.debug(f"{method} {url} returned {result}")
        return result

    def register_user(self, devicetype: str=DEFAULT_DEVICE_TYPE) -> str:
        """Registers a user and returns its name.

        Save the name to communicate further with the bridge, e.g. to switch lights.

        Note that the link button on the bridge has to be pressed shortly before
        this call. If it was not, BridgeApiError is raised with the bridge's
        "link button not pressed" error; it is safe to retry after prompting.
        """
        data = self._send("POST", "api", {"devicetype": devicetype})
        return interpret_registration(parse_response_sections(data))

    def _decode_light_response(self, data: Jsonable) -> Jsonable:
        # An invalid user gets an error section list instead of the expected object
        if isinstance(data, list):
            sections = parse_response_sections(data)
            raise BridgeApiError([ s.error for s in sections if s.error is not None ])
        return data

    def get_all_lights(self, user: str) -> Dict[str, Light]:
        """List all lights connected to this bridge, bundled with their state.

        `user` is a username returned by register_user(). If the bridge rejects
        it, BridgeApiError is raised.
        """
        data = self._decode_light_response(self._send("GET", f"api/{user}/lights"))
        return lights_from_json(data)

    def get_light(self, user: str, light: str) -> Light:
        """Get the attributes and state of a single light."""
        data = self._decode_light_response(self._send("GET", f"api/{user}/lights/{light}"))
        return Light.from_json(data)

    def modify_light(self, user: str, light: str, key: str, value: Jsonable) -> None:
        """Set an attribute of a light.

        `light` is the identifier of the light; all identifiers are the keys of
        get_all_lights(). `key` can be any attribute of LightState, and `value`
        must have the type the bridge expects for it. No validation is done here.

        The call succeeds if the bridge reports success for any part of the
        request; otherwise BridgeApiError is raised with the reported errors.
        """
        data = self._send("PUT", f"api/{user}/lights/{light}/state", {key: value})
        interpret_mutation(parse_response_sections(data))

    def switch_light(self, user: str, light: str, on: bool) -> None:
        """Switch a light on or off."""
        self.modify_light(user, light, "on", on)

    def set_brightness(self, user: str, light: str, bri: int) -> None:
        """Set the brightness of a light (1-254 on most bridges)."""
        self.modify_light(user, light, "bri", bri)

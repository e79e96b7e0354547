#
# Copyright (c) 2026 The hust contributors
#
# MIT License - See LICENSE file accompanying this package.
#

"""Attributes of lights attached to a bridge"""

from __future__ import annotations

from .internal_types import *
from .exceptions import DecodeError

class LightState:
    """Current state of a light"""

    on: bool = False
    bri: int = 0
    """Brightness"""
    ct: int = 0
    """Color temperature"""
    alert: str = ""
    """Alert mode"""
    colormode: str = ""
    mode: str = ""
    reachable: bool = False

    json_data: JsonableDict
    """The state object as received from the bridge, including any unrecognized fields."""

    def __init__(self, **kwargs: Any):
        self.json_data = {}
        for name, value in kwargs.items():
            if not hasattr(LightState, name):
                raise TypeError(f"Unknown LightState attribute {name!r}")
            setattr(self, name, value)

    @classmethod
    def from_json(cls, obj: Jsonable) -> LightState:
        if not isinstance(obj, dict):
            raise DecodeError(f"Light state is not an object: {obj!r}")
        state = cls()
        state.json_data = obj
        state.on = bool(obj.get("on", False))
        try:
            state.bri = int(obj.get("bri", 0))
            state.ct = int(obj.get("ct", 0))
        except (TypeError, ValueError) as e:
            raise DecodeError(f"Light state has non-integer bri/ct: {obj!r}") from e
        state.alert = str(obj.get("alert", ""))
        state.colormode = str(obj.get("colormode", ""))
        state.mode = str(obj.get("mode", ""))
        state.reachable = bool(obj.get("reachable", False))
        return state

    def __repr__(self) -> str:
        return (f"LightState(on={self.on}, bri={self.bri}, ct={self.ct}, alert={self.alert!r}, "
                f"colormode={self.colormode!r}, mode={self.mode!r}, reachable={self.reachable})")


class Light:
    """Attributes of a light"""

    uniqueid: str = ""
    light_type: str = ""
    """The light's "type" field, e.g. "Extended color light"."""
    name: str = ""
    modelid: str = ""
    manufacturername: str = ""
    productid: str = ""
    state: LightState
    swversion: str = ""
    swconfigid: str = ""

    json_data: JsonableDict

    def __init__(self, state: Optional[LightState]=None, **kwargs: Any):
        self.state = LightState() if state is None else state
        self.json_data = {}
        for name, value in kwargs.items():
            if not hasattr(Light, name):
                raise TypeError(f"Unknown Light attribute {name!r}")
            setattr(self, name, value)

    @classmethod
    def from_json(cls, obj: Jsonable) -> Light:
        if not isinstance(obj, dict):
            raise DecodeError(f"Light record is not an object: {obj!r}")
        light = cls(state=LightState.from_json(obj.get("state", {})))
        light.json_data = obj
        light.uniqueid = str(obj.get("uniqueid", ""))
        light.light_type = str(obj.get("type", ""))
        light.name = str(obj.get("name", ""))
        light.modelid = str(obj.get("modelid", ""))
        light.manufacturername = str(obj.get("manufacturername", ""))
        light.productid = str(obj.get("productid", ""))
        light.swversion = str(obj.get("swversion", ""))
        light.swconfigid = str(obj.get("swconfigid", ""))
        return light

    def __repr__(self) -> str:
        return f"Light(name={self.name!r}, uniqueid={self.uniqueid!r}, type={self.light_type!r}, state={self.state!r})"


def lights_from_json(obj: Jsonable) -> Dict[str, Light]:
    """Decodes a mapping of light id to light record, as returned by GET <base>api/<user>/lights."""
    if not isinstance(obj, dict):
        raise DecodeError(f"Light listing is not an object: {obj!r}")
    return { light_id: Light.from_json(record) for light_id, record in obj.items() }

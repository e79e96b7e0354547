#
# Copyright (c) 2026 The hust contributors
#
# MIT License - See LICENSE file accompanying this package.
#

"""
Interpretation of bridge control-call responses.

Every mutating or authenticating call to a bridge answers with a JSON list of
sections, each of which is a single-key object:

    [ {"success": {"username": "83b7780291a6ceffbe0bd049104df"}} ]
    [ {"error": {"type": 101, "address": "", "description": "link button not pressed"}} ]

A single call can address several resources, so one response may mix success
and error sections. Any success section makes the whole call a success; errors
only surface when no success section is present at all.
"""

from __future__ import annotations

from enum import Enum

from .internal_types import *
from .pkg_logging import logger
from .exceptions import BridgeApiError, DecodeError

class SectionKind(Enum):
    """The discriminant of a response section; the value is the key used on the wire."""
    ERROR = "error"
    SUCCESS = "success"


class ApiErrorEntry:
    """One error reported by a bridge."""

    error_type: int
    """The bridge's numeric error type (e.g., 1 for "unauthorized user", 101 for
       "link button not pressed")."""

    address: str
    """The resource the error applies to (e.g., "/lights/1/state/on")."""

    description: str
    """The bridge's human-readable description of the error."""

    def __init__(self, error_type: int, address: str="", description: str=""):
        self.error_type = error_type
        self.address = address
        self.description = description

    @classmethod
    def from_json(cls, obj: Jsonable) -> ApiErrorEntry:
        if not isinstance(obj, dict):
            raise DecodeError(f"Bridge error entry is not an object: {obj!r}")
        error_type = obj.get("type", 0)
        if not isinstance(error_type, int) or isinstance(error_type, bool):
            raise DecodeError(f"Bridge error entry has non-integer type: {obj!r}")
        return cls(
            error_type,
            address=str(obj.get("address", "")),
            description=str(obj.get("description", "")),
          )

    def to_json(self) -> JsonableDict:
        return {
            "type": self.error_type,
            "address": self.address,
            "description": self.description,
        }

    def __str__(self) -> str:
        if self.address == "":
            return f"{self.description} (type {self.error_type})"
        return f"{self.description} (type {self.error_type}, address {self.address})"

    def __repr__(self) -> str:
        return f"ApiErrorEntry({self.error_type!r}, address={self.address!r}, description={self.description!r})"

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, ApiErrorEntry):
            return False
        return (self.error_type == other.error_type and
                self.address == other.address and
                self.description == other.description)


class ResponseSection:
    """One section of a bridge response: either an error entry or a success payload."""

    kind: SectionKind
    error: Optional[ApiErrorEntry] = None
    """The error entry. Set iff kind is SectionKind.ERROR."""

    payload: Optional[JsonableDict] = None
    """The success payload. Set iff kind is SectionKind.SUCCESS."""

    def __init__(
            self,
            kind: SectionKind,
            error: Optional[ApiErrorEntry]=None,
            payload: Optional[JsonableDict]=None
          ):
        if kind == SectionKind.ERROR:
            assert error is not None and payload is None
        else:
            assert payload is not None and error is None
        self.kind = kind
        self.error = error
        self.payload = payload

    @classmethod
    def error_section(cls, error: ApiErrorEntry) -> ResponseSection:
        return cls(SectionKind.ERROR, error=error)

    @classmethod
    def success_section(cls, payload: JsonableDict) -> ResponseSection:
        return cls(SectionKind.SUCCESS, payload=payload)

    @classmethod
    def from_json(cls, obj: Jsonable) -> ResponseSection:
        """Decode one wire section. The discriminant is the object's only key."""
        if not isinstance(obj, dict) or len(obj) != 1:
            raise DecodeError(f"Bridge response section is not a single-key object: {obj!r}")
        key, value = next(iter(obj.items()))
        try:
            kind = SectionKind(key)
        except ValueError as e:
            raise DecodeError(f"Unknown bridge response section kind {key!r}") from e
        if kind == SectionKind.ERROR:
            return cls.error_section(ApiErrorEntry.from_json(value))
        if not isinstance(value, dict):
            raise DecodeError(f"Bridge success payload is not an object: {value!r}")
        return cls.success_section(value)

    @property
    def is_error(self) -> bool:
        return self.kind == SectionKind.ERROR

    @property
    def is_success(self) -> bool:
        return self.kind == SectionKind.SUCCESS

    def __repr__(self) -> str:
        if self.is_error:
            return f"ResponseSection(error={self.error!r})"
        return f"ResponseSection(success={self.payload!r})"


def parse_response_sections(data: Jsonable) -> List[ResponseSection]:
    """Decodes an already JSON-decoded response body into its sections.

    Raises DecodeError if the body is not a list of well-formed sections.
    """
    if not isinstance(data, list):
        raise DecodeError(f"Bridge response is not a list of sections: {data!r}")
    return [ ResponseSection.from_json(obj) for obj in data ]

def interpret_registration(sections: Iterable[ResponseSection]) -> str:
    """Extracts the newly registered username from a registration response.

    The first success section whose payload carries "username" wins, and any
    error sections are then ignored. Otherwise raises BridgeApiError with the
    collected errors, which may be an empty list.
    """
    errors: List[ApiErrorEntry] = []
    for section in sections:
        if section.is_error:
            assert section.error is not None
            errors.append(section.error)
        else:
            assert section.payload is not None
            if "username" in section.payload:
                username = section.payload["username"]
                if len(errors) > 0:
                    logger.debug(f"Registration succeeded; ignoring errors {errors}")
                return username if isinstance(username, str) else str(username)
    raise BridgeApiError(errors)

def interpret_mutation(sections: Iterable[ResponseSection]) -> None:
    """Checks the response to a call that modified bridge state.

    Succeeds if any section is a success section. Otherwise raises BridgeApiError
    carrying every error section in response order.
    """
    errors: List[ApiErrorEntry] = []
    success = False
    for section in sections:
        if section.is_success:
            success = True
        else:
            assert section.error is not None
            errors.append(section.error)
    if success:
        if len(errors) > 0:
            logger.debug(f"Partial success; ignoring errors {errors}")
        return
    raise BridgeApiError(errors)

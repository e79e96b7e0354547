#
# Copyright (c) 2026 The hust contributors
#
# MIT License - See LICENSE file accompanying this package.
#

"""Exceptions defined by this package"""

from __future__ import annotations

from typing import TYPE_CHECKING, Iterable, List, Optional

if TYPE_CHECKING:
    from .response import ApiErrorEntry

class HustError(Exception):
  """Base class for all error exceptions defined by this package."""
  pass

class TransportError(HustError):
  """A socket or HTTP failure talking to a bridge. Fatal to the current call."""
  pass

class DecodeError(HustError):
  """A response body could not be decoded (bad JSON, bad XML, or an unexpected shape)."""
  pass

class DescriptorError(DecodeError):
  """A bridge description document is malformed or lacks required fields."""
  pass

class DiscoveryParseError(HustError):
  """A discovery response datagram is malformed. The discovery iterator skips these."""
  pass

class BridgeApiError(HustError):
  """A well-formed bridge response that reports failure.

  Carries the device's own error entries, in response order. The list may be
  empty if the bridge reported neither success nor any error.
  """
  errors: List[ApiErrorEntry]

  def __init__(self, errors: Iterable[ApiErrorEntry], msg: Optional[str]=None):
    self.errors = list(errors)
    if msg is None:
      if len(self.errors) == 0:
        msg = "Bridge reported failure without any error entries"
      else:
        msg = "; ".join(str(e) for e in self.errors)
    super().__init__(msg)

  @property
  def descriptions(self) -> List[str]:
    """The description text of each error entry, in order."""
    return [e.description for e in self.errors]

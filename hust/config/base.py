# Copyright (c) 2026 The hust contributors
#
# MIT License - See LICENSE file accompanying this package.
#

"""Storage of usernames registered with bridges.

A username is a bearer token for its bridge, so stores should keep it somewhere
appropriate for a secret.
"""

from typing import Optional

from ..util import full_type

class UserStore:
  """Maps a bridge identifier (its UDN) to the username registered with it."""

  def get_username(self, bridge_id: str) -> str:
    """Returns the stored username. Raises KeyError if there is none."""
    raise NotImplementedError(f"{full_type(self)} does not implement get_username")

  def set_username(self, bridge_id: str, username: str) -> None:
    raise NotImplementedError(f"{full_type(self)} does not implement set_username")

  def delete_username(self, bridge_id: str) -> None:
    raise NotImplementedError(f"{full_type(self)} does not implement delete_username")

  def username_exists(self, bridge_id: str) -> bool:
    try:
      self.get_username(bridge_id)
    except KeyError:
      return False

    return True

  def find_username(self, bridge_id: str) -> Optional[str]:
    """Returns the stored username, or None if there is none."""
    try:
      return self.get_username(bridge_id)
    except KeyError:
      return None

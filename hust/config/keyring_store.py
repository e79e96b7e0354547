# Copyright (c) 2026 The hust contributors
#
# MIT License - See LICENSE file accompanying this package.
#

"""Username storage in the system keyring."""

import keyring
import keyring.errors

from ..constants import KEYRING_SERVICE
from ..pkg_logging import logger
from .base import UserStore

class KeyringUserStore(UserStore):
  """Keeps one username per bridge in the system keyring, under a single service name."""

  _keyring_service: str

  def __init__(self, service: str=KEYRING_SERVICE):
    self._keyring_service = service

  @property
  def service(self) -> str:
    return self._keyring_service

  def get_username(self, bridge_id: str) -> str:
    result = keyring.get_password(self._keyring_service, bridge_id)
    if result is None:
      raise KeyError(f"KeyringUserStore: service '{self._keyring_service}', bridge '{bridge_id}' has no stored username")
    return result

  def set_username(self, bridge_id: str, username: str) -> None:
    logger.debug(f"Storing username for bridge '{bridge_id}' in keyring service '{self._keyring_service}'")
    keyring.set_password(self._keyring_service, bridge_id, username)

  def delete_username(self, bridge_id: str) -> None:
    try:
      keyring.delete_password(self._keyring_service, bridge_id)
    except keyring.errors.PasswordDeleteError as e:
      raise KeyError(f"KeyringUserStore: service '{self._keyring_service}', bridge '{bridge_id}' has no stored username") from e

from .base import UserStore
from .keyring_store import KeyringUserStore

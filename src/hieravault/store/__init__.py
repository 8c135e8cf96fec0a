"""
Secret store clients.
"""

from hieravault.store.base import BaseStoreClient
from hieravault.store.vault import VaultStoreClient

__all__ = [
    "BaseStoreClient",
    "VaultStoreClient",
]

"""
Vault backend for hierarchical configuration lookups.
"""

from hieravault.backend import VaultBackend
from hieravault.config import BackendConfig, load_config
from hieravault.errors import (
    ConfigInvalidError,
    HieraVaultError,
    InvalidOverrideFlagError,
    KeyNotFoundError,
    StoreUnavailableError,
    TypeMismatchError,
)
from hieravault.functions import vault_lookup, vault_lookup_array, vault_lookup_hash
from hieravault.host import HierarchyHost, LookupHost
from hieravault.models import ResolutionType

__all__ = [
    "VaultBackend",
    "BackendConfig",
    "load_config",
    "HierarchyHost",
    "LookupHost",
    "ResolutionType",
    "vault_lookup",
    "vault_lookup_array",
    "vault_lookup_hash",
    # Errors
    "HieraVaultError",
    "ConfigInvalidError",
    "StoreUnavailableError",
    "InvalidOverrideFlagError",
    "TypeMismatchError",
    "KeyNotFoundError",
]

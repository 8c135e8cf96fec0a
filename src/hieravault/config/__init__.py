"""
Backend configuration.

Provides:
- Validated backend settings (mounts, override behavior, default field policy)
- Vault connection settings with VAULT_* environment defaults
- YAML configuration file discovery and loading
"""

from hieravault.config.loader import (
    LoadedConfig,
    get_config_path,
    load_config,
    parse_config,
)
from hieravault.config.settings import (
    BackendConfig,
    FieldBehavior,
    FieldParse,
    OverrideBehavior,
    StoreSettings,
)

__all__ = [
    # Settings
    "BackendConfig",
    "FieldBehavior",
    "FieldParse",
    "OverrideBehavior",
    "StoreSettings",
    # Loader
    "LoadedConfig",
    "get_config_path",
    "load_config",
    "parse_config",
]

"""
Configuration file loading.

Search order:
1. Explicit path (--config flag)
2. ./hieravault.yaml (current directory)
3. ~/.hieravault/config.yaml (user home)
4. Default configuration

The file holds a ``vault:`` section with backend settings and an optional
``hierarchy:`` list consumed by the bundled host.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import structlog
import yaml

from hieravault.config.settings import BackendConfig
from hieravault.errors import ConfigInvalidError

logger = structlog.get_logger()

CONFIG_FILENAME = "hieravault.yaml"


@dataclass
class LoadedConfig:
    """Parsed configuration file."""

    backend: BackendConfig = field(default_factory=BackendConfig)
    hierarchy: list[str] = field(default_factory=list)
    path: Path | None = None


def get_config_path(explicit_path: str | Path | None = None) -> Path | None:
    """
    Find the configuration file to use.

    Returns:
        Path to config file or None if not found
    """
    if explicit_path:
        path = Path(explicit_path)
        if path.exists():
            return path
        raise ConfigInvalidError(
            f"configuration file not found: {path}", details={"path": str(path)}
        )

    cwd_config = Path.cwd() / CONFIG_FILENAME
    if cwd_config.exists():
        return cwd_config

    home_config = Path.home() / ".hieravault" / "config.yaml"
    if home_config.exists():
        return home_config

    return None


def parse_config(data: dict[str, Any] | None, path: Path | None = None) -> LoadedConfig:
    """Parse an already-loaded configuration mapping."""
    data = data or {}
    if not isinstance(data, dict):
        raise ConfigInvalidError("configuration must be a mapping")

    hierarchy = data.get("hierarchy") or []
    if isinstance(hierarchy, str):
        hierarchy = [hierarchy]
    if not isinstance(hierarchy, list):
        raise ConfigInvalidError(
            f"invalid value for hierarchy: '{hierarchy}', expected a list",
            details={"setting": "hierarchy"},
        )

    vault_section = data.get("vault") or {}
    if not isinstance(vault_section, dict):
        raise ConfigInvalidError(
            "invalid value for vault: expected a mapping", details={"setting": "vault"}
        )

    return LoadedConfig(
        backend=BackendConfig.from_dict(vault_section),
        hierarchy=[str(level) for level in hierarchy],
        path=path,
    )


def load_config(path: str | Path | None = None) -> LoadedConfig:
    """
    Load configuration from file, or defaults when no file exists.

    Args:
        path: Optional explicit config file path

    Raises:
        ConfigInvalidError: if the file cannot be parsed or holds invalid values
    """
    config_path = get_config_path(path)
    if config_path is None:
        logger.debug("no_config_file_found")
        return LoadedConfig()

    try:
        with open(config_path) as f:
            data = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        raise ConfigInvalidError(
            f"failed to read configuration: {e}", details={"path": str(config_path)}
        ) from e

    logger.debug("loaded_config", path=str(config_path))
    return parse_config(data, config_path)

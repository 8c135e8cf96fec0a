"""
Caller-side lookup helpers for ``flag`` override behavior.

These build the override directive the backend expects and apply the
``vault_only`` contract: a key that is not found in the store returns the
caller's default, or raises when no default was given.

    vault_lookup(backend, "db_password", scope, generate=20)
    vault_lookup_hash(backend, "db", scope, default={}, flag="vault")
"""

from __future__ import annotations

from typing import Any, Mapping

from hieravault.backend import VaultBackend
from hieravault.config.settings import OverrideBehavior
from hieravault.errors import ConfigInvalidError, KeyNotFoundError
from hieravault.models import OverrideFlag, ResolutionType

NOTSET = object()


def build_directive(
    flag: OverrideFlag | str,
    override: Any = None,
    generate: int | None = None,
) -> dict[str, Any]:
    directive: dict[str, Any] = {"flag": str(flag)}
    if override is not None:
        directive["override"] = override
    if generate is not None:
        directive["generate"] = generate
    return directive


def _lookup(
    backend: VaultBackend,
    key: str,
    scope: Mapping[str, Any],
    resolution_type: ResolutionType,
    default: Any,
    override: Any,
    generate: int | None,
    flag: OverrideFlag | str | None,
) -> Any:
    if backend.config.override_behavior != OverrideBehavior.FLAG:
        raise ConfigInvalidError(
            "vault lookup functions require override_behavior 'flag'",
            details={"override_behavior": str(backend.config.override_behavior)},
        )

    flag = flag or backend.config.flag_default
    answer = backend.lookup(key, scope, build_directive(flag, override, generate), resolution_type)
    if answer is not None:
        return answer

    if default is not NOTSET:
        return default
    if flag == OverrideFlag.VAULT_ONLY:
        raise KeyNotFoundError(
            f"could not find data item {key} in vault", details={"key": key}
        )
    return None


def vault_lookup(
    backend: VaultBackend,
    key: str,
    scope: Mapping[str, Any],
    default: Any = NOTSET,
    override: Any = None,
    generate: int | None = None,
    flag: OverrideFlag | str | None = None,
) -> Any:
    """Scalar lookup: first match in hierarchy order."""
    return _lookup(
        backend, key, scope, ResolutionType.SCALAR, default, override, generate, flag
    )


def vault_lookup_array(
    backend: VaultBackend,
    key: str,
    scope: Mapping[str, Any],
    default: Any = NOTSET,
    override: Any = None,
    flag: OverrideFlag | str | None = None,
) -> Any:
    """Sequence lookup: one entry per matching hierarchy level."""
    return _lookup(
        backend, key, scope, ResolutionType.SEQUENCE, default, override, None, flag
    )


def vault_lookup_hash(
    backend: VaultBackend,
    key: str,
    scope: Mapping[str, Any],
    default: Any = NOTSET,
    override: Any = None,
    flag: OverrideFlag | str | None = None,
) -> Any:
    """Associative lookup: deep merge, higher levels win."""
    return _lookup(
        backend, key, scope, ResolutionType.ASSOCIATIVE, default, override, None, flag
    )

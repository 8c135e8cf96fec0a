"""
Data models shared by the lookup engine.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import Any


class ResolutionType(StrEnum):
    """Shape of the answer the caller expects back."""

    SCALAR = "scalar"
    SEQUENCE = "sequence"
    ASSOCIATIVE = "associative"

    @classmethod
    def parse(cls, value: ResolutionType | str | None) -> ResolutionType:
        """Accept the host's native names (priority/array/hash) as well."""
        if value is None:
            return cls.SCALAR
        if isinstance(value, cls):
            return value
        aliases = {
            "priority": cls.SCALAR,
            "array": cls.SEQUENCE,
            "hash": cls.ASSOCIATIVE,
        }
        name = str(value).lstrip(":").lower()
        if name in aliases:
            return aliases[name]
        return cls(name)


class OverrideFlag(StrEnum):
    """Values accepted for the 'flag' entry of an override directive."""

    VAULT = "vault"
    VAULT_ONLY = "vault_only"


class DecisionKind(StrEnum):
    """What the lookup should do with the secret store."""

    SKIP = "skip"
    READ = "read"
    READ_OR_FAIL = "read_or_fail"
    READ_OR_GENERATE = "read_or_generate"


@dataclass(frozen=True)
class LookupDecision:
    """Outcome of interpreting the override parameter for one lookup.

    ``override`` is the effective override forwarded to hierarchy enumeration;
    ``generate_length`` is set only for READ_OR_GENERATE.
    """

    kind: DecisionKind
    override: Any = None
    flag: OverrideFlag | None = None
    generate_length: int | None = None

    @property
    def reads_store(self) -> bool:
        return self.kind != DecisionKind.SKIP

    @property
    def generates(self) -> bool:
        return self.kind == DecisionKind.READ_OR_GENERATE


@dataclass(frozen=True)
class CandidatePath:
    """A fully interpolated store path and the mount it was built from."""

    mount: str
    source: str
    path: str

    def __str__(self) -> str:
        return self.path

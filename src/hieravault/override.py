"""
Override policy.

Turns the override parameter of a lookup into a ``LookupDecision``.

In ``normal`` mode the store is always read and the override is passed on
unchanged. In ``flag`` mode the store is read only when the override is a
directive carrying a 'flag' entry:

    {"flag": "vault" | "vault_only", "generate": 16, "override": "nodes/web01"}

A 'generate' length above the configured minimum enables generate-on-miss.
The directive's own 'override' entry, if any, becomes the effective override.
"""

from __future__ import annotations

from typing import Any, Mapping

import structlog

from hieravault.config.settings import BackendConfig, OverrideBehavior
from hieravault.errors import InvalidOverrideFlagError
from hieravault.models import DecisionKind, LookupDecision, OverrideFlag

logger = structlog.get_logger()


class OverridePolicy:
    """Decides whether and how a lookup consults the secret store."""

    def __init__(self, config: BackendConfig):
        self.config = config

    def decide(self, override: Any) -> LookupDecision:
        if self.config.override_behavior == OverrideBehavior.NORMAL:
            return LookupDecision(DecisionKind.READ, override=override)

        if not isinstance(override, Mapping):
            logger.debug(
                "vault_not_read",
                reason="override parameter is not a hash while override_behavior is 'flag'",
            )
            return LookupDecision(DecisionKind.SKIP)

        if "flag" not in override:
            logger.debug(
                "vault_not_read",
                reason="'flag' element missing from override while override_behavior is 'flag'",
            )
            return LookupDecision(DecisionKind.SKIP)

        flag = self._parse_flag(override["flag"])
        effective = override.get("override")
        length = self._generate_length(override.get("generate"))

        if length is not None:
            return LookupDecision(
                DecisionKind.READ_OR_GENERATE,
                override=effective,
                flag=flag,
                generate_length=length,
            )
        return LookupDecision(DecisionKind.READ_OR_FAIL, override=effective, flag=flag)

    def _parse_flag(self, value: Any) -> OverrideFlag:
        try:
            return OverrideFlag(value)
        except (TypeError, ValueError):
            allowed = [member.value for member in OverrideFlag]
            raise InvalidOverrideFlagError(
                f"invalid value '{value}' for 'flag' element in override parameter, "
                f"expected one of {allowed}, while override_behavior is 'flag'",
                details={"flag": str(value)},
            ) from None

    def _generate_length(self, value: Any) -> int | None:
        if value is None or isinstance(value, bool):
            return None
        try:
            length = int(value)
        except (TypeError, ValueError, OverflowError):
            logger.debug("generate_ignored", reason="not an integer")
            return None
        if length > self.config.generate_min_length:
            return length
        return None

"""
Lookup host interface and a bundled hierarchy implementation.

The backend relies on four services from the host lookup framework:
string interpolation, hierarchy enumeration, answer post-processing and
precedence-aware deep merging. ``HierarchyHost`` provides all four for
stand-alone use.
"""

from __future__ import annotations

import re
from typing import Any, Iterator, Mapping, Protocol, Sequence

INTERPOLATION_PATTERN = re.compile(r"%\{(?:::)?([^}]*)\}")


class LookupHost(Protocol):
    """Services the backend consumes from the host lookup framework."""

    def interpolate(
        self, template: str, scope: Mapping[str, Any], extra: Mapping[str, Any] | None = None
    ) -> str: ...

    def datasources(self, scope: Mapping[str, Any], override: Any = None) -> Iterator[str]: ...

    def parse_answer(self, value: Any, scope: Mapping[str, Any]) -> Any: ...

    def merge_answer(self, new: dict[str, Any], existing: dict[str, Any]) -> dict[str, Any]: ...


def _dig(scope: Mapping[str, Any], name: str) -> Any:
    if name in scope:
        return scope[name]
    current: Any = scope
    for part in name.split("."):
        if isinstance(current, Mapping) and part in current:
            current = current[part]
        else:
            return None
    return current


class HierarchyHost:
    """Hiera-style host driven by an ordered list of hierarchy templates.

    Templates use ``%{name}`` (or ``%{::name}``) placeholders; dotted names
    reach into nested scope mappings. Unknown names interpolate to "".
    """

    def __init__(self, hierarchy: Sequence[str] | None = None):
        self.hierarchy = list(hierarchy or [])

    def interpolate(
        self, template: str, scope: Mapping[str, Any], extra: Mapping[str, Any] | None = None
    ) -> str:
        extra = extra or {}

        def replace_match(match: re.Match[str]) -> str:
            name = match.group(1).strip()
            value = extra[name] if name in extra else _dig(scope, name)
            return "" if value is None else str(value)

        return INTERPOLATION_PATTERN.sub(replace_match, template)

    def datasources(self, scope: Mapping[str, Any], override: Any = None) -> Iterator[str]:
        """Yield interpolated hierarchy levels, the override level first."""
        levels = list(self.hierarchy)
        if isinstance(override, str) and override:
            levels.insert(0, override)

        for level in levels:
            source = self.interpolate(level, scope)
            if not source.strip("/"):
                continue
            yield source

    def parse_answer(self, value: Any, scope: Mapping[str, Any]) -> Any:
        if isinstance(value, str):
            return self.interpolate(value, scope)
        if isinstance(value, Mapping):
            return {key: self.parse_answer(item, scope) for key, item in value.items()}
        if isinstance(value, list):
            return [self.parse_answer(item, scope) for item in value]
        return value

    def merge_answer(self, new: dict[str, Any], existing: dict[str, Any]) -> dict[str, Any]:
        """Deep merge ``new`` under ``existing``; keys already set in ``existing`` win."""
        merged = dict(existing)
        for key, value in new.items():
            if key not in merged:
                merged[key] = value
            elif isinstance(merged[key], dict) and isinstance(value, dict):
                merged[key] = self.merge_answer(value, merged[key])
        return merged

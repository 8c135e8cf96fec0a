from __future__ import annotations

from typing import Any, Iterator, Mapping

from hieravault.config.settings import BackendConfig
from hieravault.host import LookupHost
from hieravault.models import CandidatePath


class PathResolver:
    """Builds the ordered candidate store paths for a key.

    Paths have the shape ``mount/[source/]key``; mounts are tried in
    configuration order and, within a mount, sources in hierarchy order.
    """

    def __init__(self, config: BackendConfig, host: LookupHost):
        self.config = config
        self.host = host

    def mounts(self, key: str, scope: Mapping[str, Any]) -> list[str]:
        return [
            self.host.interpolate(mount, scope, {"key": key}).rstrip("/")
            for mount in self.config.mounts
        ]

    def sources(self, scope: Mapping[str, Any], override: Any = None) -> Iterator[str]:
        if not self.config.use_hierarchy:
            yield "/"
            return
        for source in self.host.datasources(scope, override):
            yield f"/{source.strip('/')}/"

    def candidates(
        self, mount: str, key: str, scope: Mapping[str, Any], override: Any = None
    ) -> Iterator[CandidatePath]:
        resolved_key = self.host.interpolate(key, scope, {"key": key}).lstrip("/")
        for source in self.sources(scope, override):
            yield CandidatePath(
                mount=mount,
                source=source.strip("/"),
                path=f"{mount}{source}{resolved_key}",
            )

    def first_candidate(
        self, key: str, scope: Mapping[str, Any], override: Any = None
    ) -> CandidatePath | None:
        """Highest-priority path: first source of the first mount."""
        mounts = self.mounts(key, scope)
        if not mounts:
            return None
        return next(self.candidates(mounts[0], key, scope, override), None)

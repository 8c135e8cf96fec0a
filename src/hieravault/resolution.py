"""
Resolution across candidate paths.

- scalar: the first path with an answer wins and iteration stops,
  including across mounts.
- sequence: every answer (a list or a single scalar) is appended as one
  entry, in path order, across all mounts.
- associative: every answer (a mapping) is deep-merged; keys set by an
  earlier path are not overwritten by later ones.

A shape mismatch fails the lookup rather than skipping the offending path.
"""

from __future__ import annotations

from typing import Any, Mapping

import structlog

from hieravault.errors import TypeMismatchError
from hieravault.extract import FieldExtractor
from hieravault.host import LookupHost
from hieravault.logging import sanitize_path
from hieravault.models import ResolutionType
from hieravault.paths import PathResolver
from hieravault.store.base import BaseStoreClient

logger = structlog.get_logger()

_SCALAR_TYPES = (str, int, float, bool)


def _type_name(value: Any) -> str:
    return type(value).__name__


class ResolutionMerger:
    """Walks candidate paths and combines answers per resolution type."""

    def __init__(
        self,
        resolver: PathResolver,
        extractor: FieldExtractor,
        store: BaseStoreClient,
        host: LookupHost,
    ):
        self.resolver = resolver
        self.extractor = extractor
        self.store = store
        self.host = host

    def resolve(
        self,
        key: str,
        scope: Mapping[str, Any],
        override: Any = None,
        resolution_type: ResolutionType = ResolutionType.SCALAR,
    ) -> Any:
        answer: Any = None

        for mount in self.resolver.mounts(key, scope):
            for candidate in self.resolver.candidates(mount, key, scope, override):
                logger.debug("looking_in_path", path=sanitize_path(candidate.path))
                value = self.extractor.extract(self.store.read(candidate.path), scope)
                if value is None:
                    continue

                if resolution_type == ResolutionType.SEQUENCE:
                    if not isinstance(value, (list, *_SCALAR_TYPES)):
                        raise TypeMismatchError(
                            f"type mismatch: expected a list and got {_type_name(value)}",
                            details={"key": key, "expected": "list", "got": _type_name(value)},
                        )
                    answer = answer if answer is not None else []
                    answer.append(value)
                elif resolution_type == ResolutionType.ASSOCIATIVE:
                    if not isinstance(value, dict):
                        raise TypeMismatchError(
                            f"type mismatch: expected a hash and got {_type_name(value)}",
                            details={"key": key, "expected": "hash", "got": _type_name(value)},
                        )
                    answer = self.host.merge_answer(value, answer if answer is not None else {})
                else:
                    return value

        return answer

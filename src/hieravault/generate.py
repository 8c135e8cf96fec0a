from __future__ import annotations

import secrets
import string
from typing import Any, Mapping

import structlog

from hieravault.config.settings import BackendConfig
from hieravault.logging import sanitize_path
from hieravault.paths import PathResolver
from hieravault.store.base import BaseStoreClient

logger = structlog.get_logger()

PASSWORD_ALPHABET = string.ascii_letters + string.digits


def generate_password(length: int) -> str:
    """Random alphanumeric string of ``length`` characters."""
    return "".join(secrets.choice(PASSWORD_ALPHABET) for _ in range(length))


class GenerateWorkflow:
    """Generates a secret for an unresolved key and stores it.

    The secret is written only to the highest-priority path (first source
    of the first mount), so lookups from nodes with different hierarchies
    should use a shared override path. If the write is not acknowledged
    the generated value is discarded and the lookup stays unresolved.
    """

    def __init__(self, config: BackendConfig, resolver: PathResolver, store: BaseStoreClient):
        self.config = config
        self.resolver = resolver
        self.store = store

    def run(self, key: str, scope: Mapping[str, Any], length: int, override: Any = None) -> str | None:
        field = self.config.default_field
        if not field:
            return None

        target = self.resolver.first_candidate(key, scope, override)
        if target is None:
            return None

        value = generate_password(length)
        logger.debug("storing_generated_secret", path=sanitize_path(target.path))
        if self.store.write(target.path, {field: value}):
            return value

        logger.warning("generated_secret_discarded", path=sanitize_path(target.path))
        return None

"""
Vault lookup backend.

The host lookup framework calls ``lookup`` for every requested key; the
answer is either a resolved value or ``None``, which tells the host to ask
the next backend.
"""

from __future__ import annotations

from typing import Any, Mapping

import structlog

from hieravault.config.settings import BackendConfig
from hieravault.errors import StoreUnavailableError
from hieravault.extract import FieldExtractor
from hieravault.generate import GenerateWorkflow
from hieravault.host import LookupHost
from hieravault.logging import bind_context
from hieravault.models import DecisionKind, ResolutionType
from hieravault.override import OverridePolicy
from hieravault.paths import PathResolver
from hieravault.resolution import ResolutionMerger
from hieravault.store.base import BaseStoreClient
from hieravault.store.vault import VaultStoreClient

logger = structlog.get_logger()


class VaultBackend:
    """Resolves lookup keys against a Vault server.

    Construction validates the configuration (raising ConfigInvalidError)
    and makes the first connection attempt; an unreachable store is not an
    error at this point.
    """

    def __init__(
        self,
        config: BackendConfig | Mapping[str, Any] | None,
        host: LookupHost,
        store: BaseStoreClient | None = None,
    ):
        logger.debug("vault_backend_starting")
        if not isinstance(config, BackendConfig):
            config = BackendConfig.from_dict(dict(config or {}))

        self.config = config
        self.host = host
        self.store = store or VaultStoreClient(config.store)

        self.policy = OverridePolicy(config)
        self.resolver = PathResolver(config, host)
        self.extractor = FieldExtractor(config, host)
        self.merger = ResolutionMerger(self.resolver, self.extractor, self.store, host)
        self.generator = GenerateWorkflow(config, self.resolver, self.store)

        self.store.ensure_connected()

    def lookup(
        self,
        key: str,
        scope: Mapping[str, Any],
        override: Any = None,
        resolution_type: ResolutionType | str | None = ResolutionType.SCALAR,
    ) -> Any:
        resolution_type = ResolutionType.parse(resolution_type)
        decision = self.policy.decide(override)
        if not decision.reads_store:
            return None

        if not self.store.ensure_connected():
            if decision.kind == DecisionKind.READ:
                return None
            raise StoreUnavailableError(
                "cannot skip, because vault is unavailable and vault must be read, "
                "while override_behavior is 'flag'",
                details={"key": key},
            )

        log = bind_context(key=key, resolution_type=str(resolution_type))
        log.debug("looking_up_key", decision=str(decision.kind))
        answer = self.merger.resolve(key, scope, decision.override, resolution_type)

        if answer is None and decision.generates and self.config.default_field:
            answer = self.generator.run(
                key, scope, decision.generate_length, decision.override
            )
            if answer is not None:
                log.debug("generated_secret_stored")

        return answer

"""
HashiCorp Vault store client.

The connection handle is created lazily and checked against the seal status
on every ``ensure_connected`` call. Any failure drops the handle so the next
lookup reconnects. The handle is replaced atomically under a lock; reads work
on a snapshot so an invalidation never pulls a client out from under a
request already in flight.
"""

from __future__ import annotations

import threading
from typing import Any, Callable, Mapping

import hvac
import requests
import structlog
from hvac.exceptions import InvalidPath, VaultError

from hieravault.config.settings import StoreSettings
from hieravault.errors import RemoteReadError, RemoteWriteError, StoreUnavailableError
from hieravault.logging import sanitize_error, sanitize_path
from hieravault.store.base import BaseStoreClient

logger = structlog.get_logger()

_CONNECT_ERRORS = (
    VaultError,
    requests.exceptions.RequestException,
    StoreUnavailableError,
    OSError,
    ValueError,
)


def _error_lines(exc: VaultError) -> list[str]:
    errors = getattr(exc, "errors", None) or []
    if isinstance(errors, str):
        errors = [errors]
    return [str(line).rstrip() for line in errors]


class VaultStoreClient(BaseStoreClient):
    """Vault client for generic (key/value) secret mounts."""

    def __init__(
        self,
        settings: StoreSettings | None = None,
        client_factory: Callable[[], hvac.Client] | None = None,
    ):
        self.settings = settings or StoreSettings()
        self._client_factory = client_factory or self._build_client
        self._client: hvac.Client | None = None
        self._lock = threading.RLock()

    def _build_client(self) -> hvac.Client:
        if self.settings.ciphers:
            logger.warning("vault_ssl_ciphers_unsupported", ciphers=self.settings.ciphers)

        return hvac.Client(
            url=self.settings.addr,
            token=self.settings.token,
            namespace=self.settings.namespace,
            verify=self.settings.verify(),
            cert=self.settings.cert(),
            timeout=self.settings.timeout,
        )

    @property
    def connected(self) -> bool:
        return self._client is not None

    def _check_unsealed(self, client: hvac.Client) -> None:
        if client.sys.is_sealed():
            raise StoreUnavailableError("vault is sealed", details={"address": self.settings.addr})

    def ensure_connected(self) -> bool:
        with self._lock:
            if self._client is None:
                try:
                    client = self._client_factory()
                    self._check_unsealed(client)
                except _CONNECT_ERRORS as e:
                    logger.warning(
                        "vault_backend_skipped",
                        reason="configuration error",
                        error=sanitize_error(e),
                    )
                    return False
                self._client = client
                logger.debug("vault_client_configured", address=self.settings.addr)
                return True

            try:
                self._check_unsealed(self._client)
            except _CONNECT_ERRORS as e:
                self.invalidate()
                logger.warning(
                    "vault_unavailable",
                    reason="unavailable or configuration error",
                    error=sanitize_error(e),
                )
                return False
            return True

    def invalidate(self) -> None:
        with self._lock:
            self._client = None

    def read(self, path: str) -> dict[str, Any] | None:
        client = self._client
        if client is None:
            logger.debug("vault_read_skipped", path=sanitize_path(path), reason="not connected")
            return None

        try:
            record = self._read(client, path)
        except requests.exceptions.RequestException:
            logger.debug("vault_read_connection_failed", path=sanitize_path(path))
            return None
        except RemoteReadError as e:
            logger.warning("vault_read_failed", path=sanitize_path(path), errors=e.details["errors"])
            return None

        if record is not None:
            logger.debug("vault_read_secret", path=sanitize_path(path))
        return record

    def _read(self, client: hvac.Client, path: str) -> dict[str, Any] | None:
        try:
            response = client.read(path)
        except InvalidPath:
            return None
        except VaultError as e:
            raise RemoteReadError(
                f"could not read secret {path}", details={"errors": _error_lines(e)}
            ) from e

        # hvac hands back the raw response when the body is not JSON
        if isinstance(response, requests.Response):
            if not response.ok:
                raise RemoteReadError(
                    f"could not read secret {path}",
                    details={"errors": [f"HTTP {response.status_code}"]},
                )
            return None
        if not response:
            return None
        data = response.get("data")
        if not isinstance(data, dict):
            return None
        return data

    def write(self, path: str, fields: Mapping[str, Any]) -> bool:
        client = self._client
        if client is None:
            logger.debug("vault_write_skipped", path=sanitize_path(path), reason="not connected")
            return False

        try:
            self._write(client, path, fields)
        except requests.exceptions.RequestException:
            logger.debug("vault_write_connection_failed", path=sanitize_path(path))
            return False
        except RemoteWriteError as e:
            logger.warning(
                "vault_write_failed", path=sanitize_path(path), errors=e.details["errors"]
            )
            return False

        logger.debug("vault_wrote_secret", path=sanitize_path(path))
        return True

    def _write(self, client: hvac.Client, path: str, fields: Mapping[str, Any]) -> None:
        try:
            result = client.write_data(path, data=dict(fields))
        except VaultError as e:
            raise RemoteWriteError(
                f"could not write secret {path}", details={"errors": _error_lines(e)}
            ) from e

        if isinstance(result, requests.Response) and not result.ok:
            raise RemoteWriteError(
                f"could not write secret {path}",
                details={"errors": [f"HTTP {result.status_code}"]},
            )

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Mapping


class BaseStoreClient(ABC):
    """Base class for secret store clients.

    Implementations never raise from ``read``/``write``; failures are logged
    and reported as a miss or an unacknowledged write.
    """

    @abstractmethod
    def ensure_connected(self) -> bool:
        """Create or re-validate the connection. Returns whether one is usable."""
        pass

    @abstractmethod
    def invalidate(self) -> None:
        """Drop the current connection so the next call reconnects."""
        pass

    @abstractmethod
    def read(self, path: str) -> dict[str, Any] | None:
        """Read the secret record at ``path``."""
        pass

    @abstractmethod
    def write(self, path: str, fields: Mapping[str, Any]) -> bool:
        """Write ``fields`` to ``path``. Returns whether the write was acknowledged."""
        pass

    @property
    def connected(self) -> bool:
        return False

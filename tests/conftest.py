"""Root test configuration."""

import logging
from typing import Any, Mapping

import pytest
import structlog
from hieravault.host import HierarchyHost
from hieravault.store.base import BaseStoreClient


def pytest_configure(config):
    """Configure structlog for tests to suppress debug/info output."""
    logging.basicConfig(level=logging.WARNING, force=True)
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.processors.add_log_level,
            structlog.processors.format_exc_info,
            structlog.dev.ConsoleRenderer(),
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )


class MemoryStore(BaseStoreClient):
    """In-memory store client that records every call."""

    def __init__(
        self,
        records: Mapping[str, Mapping[str, Any]] | None = None,
        available: bool = True,
        writable: bool = True,
    ):
        self.records = {path: dict(record) for path, record in (records or {}).items()}
        self.available = available
        self.writable = writable
        self.reads: list[str] = []
        self.writes: list[tuple[str, dict[str, Any]]] = []
        self.connect_calls = 0

    @property
    def connected(self) -> bool:
        return self.available

    def ensure_connected(self) -> bool:
        self.connect_calls += 1
        return self.available

    def invalidate(self) -> None:
        self.available = False

    def read(self, path: str) -> dict[str, Any] | None:
        self.reads.append(path)
        record = self.records.get(path)
        return dict(record) if record is not None else None

    def write(self, path: str, fields: Mapping[str, Any]) -> bool:
        self.writes.append((path, dict(fields)))
        if not self.writable:
            return False
        self.records[path] = dict(fields)
        return True


@pytest.fixture
def make_store():
    """Factory for in-memory store clients."""
    return MemoryStore


@pytest.fixture
def host():
    """Host with a three-level hierarchy."""
    return HierarchyHost(["nodes/%{fqdn}", "%{environment}", "common"])


@pytest.fixture
def scope():
    return {"fqdn": "web01.example.com", "environment": "production"}

"""Tests for generate.py."""

import string

from hieravault.config.settings import BackendConfig
from hieravault.generate import GenerateWorkflow, generate_password
from hieravault.paths import PathResolver


class TestGeneratePassword:
    """Tests for generate_password."""

    def test_length_and_alphabet(self):
        """Generates alphanumeric strings of the requested length."""
        password = generate_password(24)

        assert len(password) == 24
        assert set(password) <= set(string.ascii_letters + string.digits)

    def test_values_differ(self):
        """Consecutive passwords are not identical."""
        assert generate_password(32) != generate_password(32)


class TestGenerateWorkflow:
    """Tests for GenerateWorkflow."""

    def workflow(self, store, host, **settings):
        settings.setdefault("use_hierarchy", True)
        settings.setdefault("default_field", "value")
        config = BackendConfig(**settings)
        return GenerateWorkflow(config, PathResolver(config, host), store)

    def test_writes_first_candidate(self, make_store, host, scope):
        """The secret is stored at the first path of the first mount only."""
        store = make_store()
        workflow = self.workflow(store, host, mounts=["secret", "shared"])

        value = workflow.run("db", scope, 12)

        assert len(value) == 12
        assert store.writes == [("secret/nodes/web01.example.com/db", {"value": value})]

    def test_override_path(self, make_store, host, scope):
        """An override level becomes the storage path."""
        store = make_store()
        workflow = self.workflow(store, host)

        workflow.run("db", scope, 10, override="shared")

        assert store.writes[0][0] == "secret/shared/db"

    def test_write_failure_discards(self, make_store, host, scope):
        """An unacknowledged write leaves the lookup unresolved."""
        store = make_store(writable=False)
        workflow = self.workflow(store, host)

        assert workflow.run("db", scope, 12) is None
        assert len(store.writes) == 1

    def test_requires_default_field(self, make_store, host, scope):
        """Nothing is generated without a default field."""
        store = make_store()
        workflow = self.workflow(store, host, default_field=None)

        assert workflow.run("db", scope, 12) is None
        assert store.writes == []

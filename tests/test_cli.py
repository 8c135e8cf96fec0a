"""Tests for cli.py."""

import json
from unittest.mock import patch

import pytest
import yaml
from hieravault.cli import build_parser, main
from hieravault.errors import ExitCode


@pytest.fixture
def config_file(tmp_path):
    path = tmp_path / "hieravault.yaml"
    path.write_text(
        yaml.dump(
            {
                "hierarchy": ["nodes/%{fqdn}", "common"],
                "vault": {
                    "use_hierarchy": True,
                    "default_field": "value",
                    "override_behavior": "flag",
                },
            }
        )
    )
    return path


@pytest.fixture
def cli_store(make_store):
    store = make_store({"secret/common/db": {"value": "s3cret"}})
    with patch("hieravault.backend.VaultStoreClient", return_value=store), patch(
        "hieravault.cli.configure_logging"
    ):
        yield store


class TestParser:
    """Tests for argument parsing."""

    def test_scope_pairs(self):
        """--scope collects name=value pairs."""
        args = build_parser().parse_args(["lookup", "db", "--scope", "a=1", "--scope", "b=x=y"])

        assert dict(args.scope) == {"a": "1", "b": "x=y"}

    def test_invalid_scope(self):
        """Malformed scope variables are rejected."""
        with pytest.raises(SystemExit):
            build_parser().parse_args(["lookup", "db", "--scope", "novalue"])

    def test_override_json(self):
        """--override-json is decoded."""
        args = build_parser().parse_args(["lookup", "db", "--override-json", '{"flag": "vault"}'])

        assert args.override_json == {"flag": "vault"}


class TestLookupCommand:
    """Tests for hieravault lookup."""

    def test_prints_answer(self, config_file, cli_store, capsys):
        """A found key is printed as JSON."""
        code = main(
            [
                "--config",
                str(config_file),
                "lookup",
                "db",
                "--scope",
                "fqdn=web01",
                "--override-json",
                '{"flag": "vault"}',
            ]
        )

        assert code == ExitCode.SUCCESS
        assert json.loads(capsys.readouterr().out) == "s3cret"

    def test_not_found(self, config_file, cli_store, capsys):
        """A skipped or missing key exits 1 with no output."""
        code = main(["--config", str(config_file), "lookup", "db"])

        assert code == ExitCode.NOT_FOUND
        assert capsys.readouterr().out == ""
        assert cli_store.reads == []

    def test_invalid_flag(self, config_file, cli_store):
        """Lookup errors map to their exit code."""
        code = main(
            ["--config", str(config_file), "lookup", "db", "--override-json", '{"flag": "x"}']
        )

        assert code == ExitCode.LOOKUP_ERROR

    def test_missing_config(self, tmp_path, cli_store):
        """A missing explicit config file is a configuration error."""
        code = main(["--config", str(tmp_path / "missing.yaml"), "lookup", "db"])

        assert code == ExitCode.CONFIG_ERROR


class TestCheckCommand:
    """Tests for hieravault check."""

    def test_available(self, config_file, cli_store, capsys):
        """Exits 0 when the store is reachable."""
        assert main(["--config", str(config_file), "check"]) == ExitCode.SUCCESS
        assert "available" in capsys.readouterr().out

    def test_unavailable(self, config_file, cli_store, capsys):
        """Exits with the store error code when unreachable."""
        cli_store.available = False

        assert main(["--config", str(config_file), "check"]) == ExitCode.STORE_ERROR
        assert "unavailable" in capsys.readouterr().out


def test_no_command(capsys):
    """Without a command, help is printed."""
    assert main([]) == 1
    assert "usage" in capsys.readouterr().out

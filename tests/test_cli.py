"""Tests for the command line interface."""

import pytest
from click.testing import CliRunner

from teacal.cli import main


@pytest.fixture
def runner(tmp_path, monkeypatch):
    """CLI runner with a throwaway data dir and no remote store."""
    monkeypatch.setenv("TEACAL_DATA_DIR", str(tmp_path / "data"))
    monkeypatch.setenv("TEACAL_SUPABASE_URL", "")
    monkeypatch.setenv("TEACAL_SUPABASE_ANON_KEY", "")
    monkeypatch.delenv("TEACAL_USER", raising=False)
    cli_runner = CliRunner()
    result = cli_runner.invoke(main, ["init"])
    assert result.exit_code == 0, result.output
    return cli_runner


class TestCli:
    """End-to-end CLI flows against the local store."""

    def test_requires_init(self, tmp_path, monkeypatch):
        """Test commands refuse to run before init."""
        monkeypatch.setenv("TEACAL_DATA_DIR", str(tmp_path / "empty"))
        result = CliRunner().invoke(main, ["records", "list", "-u", "alice"])
        assert result.exit_code == 1
        assert "teacal init" in result.output

    def test_register_and_login(self, runner):
        """Test account creation and login."""
        result = runner.invoke(main, ["register", "--username", "alice", "--password", "secret1"])
        assert result.exit_code == 0, result.output
        assert "Registered alice" in result.output

        result = runner.invoke(main, ["login", "--username", "alice", "--password", "nope!!"])
        assert result.exit_code == 1
        assert "invalid username or password" in result.output

    def test_short_password(self, runner):
        """Test validation errors exit non-zero."""
        result = runner.invoke(main, ["register", "--username", "bob", "--password", "123"])
        assert result.exit_code == 1
        assert "[ERROR]" in result.output

    def test_log_and_list(self, runner):
        """Test logging a drink and listing it."""
        runner.invoke(main, ["register", "--username", "alice", "--password", "secret1"])

        result = runner.invoke(
            main,
            ["records", "add", "珍珠奶茶", "-u", "alice", "--sweetness", "半糖", "-t", "珍珠"],
        )
        assert result.exit_code == 0, result.output
        assert "219 kcal" in result.output

        result = runner.invoke(main, ["records", "list", "-u", "alice"])
        assert result.exit_code == 0
        assert "珍珠奶茶" in result.output
        assert "from local store" in result.output

    def test_budget(self, runner):
        """Test setting and showing the weekly budget."""
        result = runner.invoke(main, ["budget", "set", "1500", "-u", "alice"])
        assert result.exit_code == 0, result.output

        result = runner.invoke(main, ["budget", "show", "-u", "alice"])
        assert "Budget:    1500 kcal" in result.output

        result = runner.invoke(main, ["budget", "set", "0", "-u", "alice"])
        assert result.exit_code == 1

    def test_prefs(self, runner):
        """Test preference values are parsed as JSON when possible."""
        runner.invoke(main, ["prefs", "set", "notifications", "true", "-u", "alice"])
        result = runner.invoke(main, ["prefs", "show", "-u", "alice"])
        assert "notifications" in result.output
        assert "true" in result.output

    def test_calories(self, runner):
        """Test the estimate command."""
        result = runner.invoke(
            main, ["calories", "-s", "medium", "--sweetness", "半糖", "-t", "珍珠", "-e"]
        )
        assert result.exit_code == 0, result.output
        assert "Total: 219 kcal" in result.output
        assert "To burn it off:" in result.output

    def test_sync_without_remote(self, runner):
        """Test sync commands in local-only mode."""
        result = runner.invoke(main, ["sync", "status"])
        assert "offline" in result.output

        result = runner.invoke(main, ["sync", "migrate", "-u", "alice"])
        assert result.exit_code == 1
        assert "remote store not configured" in result.output

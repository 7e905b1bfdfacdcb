"""
Tests for CLI functionality.
"""

import json
from unittest.mock import patch

import pytest
from click.testing import CliRunner

from brewdeck.cli import cli


@pytest.fixture
def runner():
    return CliRunner()


class TestHelp:
    """Tests for CLI help output."""

    def test_cli_help(self, runner):
        result = runner.invoke(cli, ['--help'])

        assert result.exit_code == 0
        assert 'brewdeck CLI' in result.output
        for command in ['status', 'list', 'refresh', 'install', 'uninstall', 'upgrade', 'search', 'serve']:
            assert command in result.output

    def test_install_help(self, runner):
        result = runner.invoke(cli, ['install', '--help'])

        assert result.exit_code == 0
        assert '--cask' in result.output
        assert '--progress' in result.output

    def test_install_requires_name(self, runner):
        result = runner.invoke(cli, ['install'])

        assert result.exit_code != 0


class TestStatusCommand:
    """Tests for the status command."""

    def test_found(self, runner, app_env):
        result = runner.invoke(cli, ['status'])

        assert result.exit_code == 0
        assert 'Homebrew 4.2.0' in result.output
        assert str(app_env.path) in result.output

    def test_not_found(self, runner, app_env, monkeypatch, tmp_path):
        monkeypatch.setenv("BREWDECK_BREW_PATHS", json.dumps([str(tmp_path / "missing")]))

        result = runner.invoke(cli, ['status'])

        assert result.exit_code == 1
        assert 'Homebrew not installed' in result.output


class TestInventoryCommands:
    """Tests for refresh and list."""

    def test_refresh_then_list(self, runner, app_env):
        """Test that list shows what refresh recorded."""
        app_env.seed(formulae="wget 1.21.1\n", casks="firefox 121.0\n")

        refreshed = runner.invoke(cli, ['refresh'])
        listed = runner.invoke(cli, ['list', '--kind', 'formula'])

        assert refreshed.exit_code == 0
        assert 'firefox' in refreshed.output
        assert 'wget' in listed.output
        assert 'firefox' not in listed.output

    def test_list_json(self, runner, app_env):
        app_env.seed(casks="firefox 121.0\n")
        runner.invoke(cli, ['refresh'])

        result = runner.invoke(cli, ['list', '--json'])

        data = json.loads(result.output)
        assert [(p["name"], p["kind"]) for p in data] == [("firefox", "cask")]

    def test_list_empty(self, runner, app_env):
        result = runner.invoke(cli, ['list'])

        assert result.exit_code == 0
        assert 'No packages installed' in result.output

    def test_missing_brew(self, runner, app_env, monkeypatch, tmp_path):
        """Test that refresh without brew exits with an error."""
        monkeypatch.setenv("BREWDECK_BREW_PATHS", json.dumps([str(tmp_path / "missing")]))

        result = runner.invoke(cli, ['refresh'])

        assert result.exit_code == 1
        assert 'Homebrew executable not found' in result.output


class TestActionCommands:
    """Tests for install, uninstall and upgrade."""

    def test_install_and_uninstall(self, runner, app_env):
        installed = runner.invoke(cli, ['install', 'wget'])

        assert installed.exit_code == 0
        assert '==> Installing wget' in installed.output
        assert 'wget 1.0' in app_env.installed("formulae")
        assert 'wget' in runner.invoke(cli, ['list']).output

        removed = runner.invoke(cli, ['uninstall', 'wget'])
        assert removed.exit_code == 0
        assert 'No packages installed' in runner.invoke(cli, ['list']).output

    def test_install_cask_with_progress(self, runner, app_env):
        result = runner.invoke(cli, ['install', '--cask', '--progress', 'iterm2'])

        assert result.exit_code == 0
        assert 'Installed iterm2' in result.output
        assert 'iterm2 1.0' in app_env.installed("casks")

    def test_failed_command(self, runner, app_env):
        """Test that brew's output is shown and the exit status is 1."""
        result = runner.invoke(cli, ['upgrade', 'wget'])

        assert result.exit_code == 1
        assert 'brew failed (exit 1)' in result.output
        assert 'already installed' in result.output

    def test_invalid_name(self, runner, app_env):
        result = runner.invoke(cli, ['install', '--', '-x'])

        assert result.exit_code == 1
        assert "Invalid package name" in result.output


class TestSearchCommand:
    """Tests for catalog search."""

    def test_search(self, runner, app_env, catalog_state):
        with patch("brewdeck.cli.get_catalog_state", return_value=catalog_state):
            result = runner.invoke(cli, ['search', 'wget'])

        assert result.exit_code == 0
        assert 'Formulae (1)' in result.output
        assert 'wget - Internet file retriever' in result.output
        assert 'Casks (1)' in result.output
        assert 'wget-gui' in result.output

    def test_search_limit(self, runner, app_env, catalog_state):
        with patch("brewdeck.cli.get_catalog_state", return_value=catalog_state):
            result = runner.invoke(cli, ['search', '--limit', '1'])

        assert 'Formulae (3)' in result.output
        assert 'jq' not in result.output

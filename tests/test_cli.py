"""Tests for CLI interface."""

from unittest.mock import patch

import pytest
from typer.testing import CliRunner

from nmclean.cli import app

runner = CliRunner()


@pytest.fixture
def no_config(tmp_path):
    """CLI args pointing at a config file that does not exist."""
    return ["--config", str(tmp_path / "none.json")]


def _make_target(base, rel, size):
    target = base / rel
    target.mkdir(parents=True)
    (target / "index.js").write_bytes(b"x" * size)


class TestVersion:
    def test_version_flag(self):
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert "nmclean version" in result.stdout

    def test_version_short_flag(self):
        result = runner.invoke(app, ["-v"])
        assert result.exit_code == 0
        assert "nmclean version" in result.stdout


class TestHelp:
    def test_help_flag(self):
        result = runner.invoke(app, ["--help"])
        assert result.exit_code == 0
        assert "clean" in result.stdout
        assert "scan" in result.stdout

    def test_clean_help(self):
        result = runner.invoke(app, ["clean", "--help"])
        assert result.exit_code == 0
        assert "--dry-run" in result.stdout
        assert "--target" in result.stdout


class TestScan:
    def test_reports_found_folders(self, tmp_path, no_config):
        root = tmp_path / "work"
        _make_target(root, "a/node_modules", 100)
        _make_target(root, "b/node_modules", 50)

        result = runner.invoke(app, no_config + ["scan", str(root)])
        assert result.exit_code == 0
        assert "2 folders, 150 B total" in result.stdout
        assert (root / "a" / "node_modules").exists()

    def test_custom_target(self, tmp_path, no_config):
        root = tmp_path / "work"
        _make_target(root, "a/.venv", 10)

        result = runner.invoke(app, no_config + ["scan", str(root), "--target", ".venv"])
        assert result.exit_code == 0
        assert "1 folders" in result.stdout

    def test_nothing_found(self, tmp_path, no_config):
        result = runner.invoke(app, no_config + ["scan", str(tmp_path)])
        assert result.exit_code == 0
        assert "No node_modules folders found" in result.stdout

    def test_missing_root(self, tmp_path, no_config):
        result = runner.invoke(app, no_config + ["scan", str(tmp_path / "nope")])
        assert result.exit_code == 1
        assert "Not a directory" in result.stdout

    def test_bad_config_file(self, tmp_path):
        config = tmp_path / "config.json"
        config.write_text("{broken")
        result = runner.invoke(app, ["--config", str(config), "scan", str(tmp_path)])
        assert result.exit_code == 1
        assert "Configuration error" in result.stdout


class TestClean:
    @patch("nmclean.tui.run_tui")
    def test_launches_tui_with_options(self, mock_run, tmp_path, no_config):
        result = runner.invoke(
            app, no_config + ["clean", str(tmp_path), "-t", ".venv", "--dry-run", "-y", "--workers", "3"]
        )
        assert result.exit_code == 0

        config = mock_run.call_args[0][0]
        assert config.root == tmp_path
        assert config.target_name == ".venv"
        assert config.dry_run
        assert not config.confirm_delete
        assert config.max_workers == 3

    @patch("nmclean.tui.run_tui")
    def test_default_command_uses_cwd(self, mock_run, tmp_path, no_config, monkeypatch):
        monkeypatch.chdir(tmp_path)
        result = runner.invoke(app, no_config)
        assert result.exit_code == 0

        config = mock_run.call_args[0][0]
        assert config.root == tmp_path
        assert config.target_name == "node_modules"
        assert config.confirm_delete

    @patch("nmclean.tui.run_tui")
    def test_options_without_command(self, mock_run, tmp_path, no_config, monkeypatch):
        monkeypatch.chdir(tmp_path)
        result = runner.invoke(app, no_config + ["--target", ".venv", "--dry-run", "-y", "--workers", "2"])
        assert result.exit_code == 0

        config = mock_run.call_args[0][0]
        assert config.root == tmp_path
        assert config.target_name == ".venv"
        assert config.dry_run
        assert not config.confirm_delete
        assert config.max_workers == 2

    @patch("nmclean.tui.run_tui")
    def test_options_before_command(self, mock_run, tmp_path, no_config):
        result = runner.invoke(app, no_config + ["-t", ".venv", "clean", str(tmp_path)])
        assert result.exit_code == 0

        config = mock_run.call_args[0][0]
        assert config.root == tmp_path
        assert config.target_name == ".venv"

    def test_invalid_target(self, tmp_path, no_config):
        result = runner.invoke(app, no_config + ["clean", str(tmp_path), "-t", "a/b"])
        assert result.exit_code == 1
        assert "Configuration error" in result.stdout

"""Tests for the top-level cli group."""

from pathlib import Path

from click.testing import CliRunner

from ghp.cli.cli import cli
from ghp.config import CONFIG_DIR_ENV_VAR


def test_help_lists_command_groups() -> None:
    result = CliRunner().invoke(cli, ["-h"])

    assert result.exit_code == 0
    for name in ("hooks", "dashboard-hooks", "dashboard", "worktree", "pr"):
        assert name in result.output


def test_invalid_config_is_reported(tmp_path: Path) -> None:
    (tmp_path / "config.toml").write_text("branch_pattern = [", encoding="utf-8")

    result = CliRunner().invoke(cli, ["hooks", "list"], env={CONFIG_DIR_ENV_VAR: str(tmp_path)})

    assert result.exit_code == 1
    assert "Invalid TOML" in result.output


def test_real_context_reads_config_dir(tmp_path: Path) -> None:
    result = CliRunner().invoke(
        cli, ["--no-input", "hooks", "list"], env={CONFIG_DIR_ENV_VAR: str(tmp_path)}
    )

    assert result.exit_code == 0
    assert "No event hooks registered." in result.output

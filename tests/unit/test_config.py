"""Tests for config.toml loading."""

from pathlib import Path

import pytest

from ghp.config import (
    ConfigError,
    GhpConfig,
    dashboard_hooks_path,
    default_config_dir,
    event_hooks_path,
    load_config,
)
from ghp.naming import DEFAULT_BRANCH_PATTERN


def test_missing_config_returns_defaults(tmp_path: Path) -> None:
    assert load_config(tmp_path) == GhpConfig.default()


def test_load_config_reads_all_keys(tmp_path: Path) -> None:
    (tmp_path / "config.toml").write_text(
        'branch_pattern = "{number}-{title}"\n'
        'main_branch = "trunk"\n'
        'worktree_path = "/srv/worktrees"\n'
        'username = "alice"\n'
        "\n"
        "[hooks]\n"
        'on_failure = "continue"\n',
        encoding="utf-8",
    )

    config = load_config(tmp_path)

    assert config.branch_pattern == "{number}-{title}"
    assert config.main_branch == "trunk"
    assert config.worktree_path == Path("/srv/worktrees")
    assert config.username == "alice"
    assert config.hooks_on_failure == "continue"


def test_partial_config_keeps_defaults(tmp_path: Path) -> None:
    (tmp_path / "config.toml").write_text('username = "bob"\n', encoding="utf-8")

    config = load_config(tmp_path)

    assert config.username == "bob"
    assert config.branch_pattern == DEFAULT_BRANCH_PATTERN
    assert config.main_branch == "main"
    assert config.hooks_on_failure is None


def test_invalid_toml_raises_config_error(tmp_path: Path) -> None:
    (tmp_path / "config.toml").write_text("username = [unclosed\n", encoding="utf-8")

    with pytest.raises(ConfigError, match="Invalid TOML"):
        load_config(tmp_path)


def test_invalid_on_failure_raises_config_error(tmp_path: Path) -> None:
    (tmp_path / "config.toml").write_text('[hooks]\non_failure = "retry"\n', encoding="utf-8")

    with pytest.raises(ConfigError, match="on_failure"):
        load_config(tmp_path)


def test_default_config_dir_honours_env_override(tmp_path: Path) -> None:
    assert default_config_dir({"GHP_CONFIG_DIR": str(tmp_path)}) == tmp_path
    assert default_config_dir({}) == Path.home() / ".config" / "ghp-cli"


def test_registry_paths(tmp_path: Path) -> None:
    assert event_hooks_path(tmp_path) == tmp_path / "event-hooks.json"
    assert dashboard_hooks_path(tmp_path) == tmp_path / "dashboard-hooks.json"


def test_unsafe_username_raises_config_error(tmp_path: Path) -> None:
    (tmp_path / "config.toml").write_text('username = "alice; rm -rf ~"\n', encoding="utf-8")

    with pytest.raises(ConfigError, match="Invalid username"):
        load_config(tmp_path)

"""Tests for the hooks command group."""

import json
from pathlib import Path

from click.testing import CliRunner

from ghp.cli.cli import cli
from ghp.config import GhpConfig, event_hooks_path
from ghp.context import GhpContext
from ghp.hooks.registry import EventHookRegistry
from tests.test_utils.builders import make_hook


def _ctx(tmp_path: Path, **kwargs: object) -> GhpContext:
    return GhpContext.for_test(config_dir=tmp_path, **kwargs)


def _seed(tmp_path: Path, *hooks: object) -> None:
    EventHookRegistry(path=event_hooks_path(tmp_path), hooks=list(hooks)).save()


def test_add_writes_registry(tmp_path: Path) -> None:
    runner = CliRunner()

    result = runner.invoke(
        cli,
        [
            "hooks", "add", "lint",
            "--event", "pre-pr",
            "--command", "make lint",
            "--mode", "blocking",
            "--timeout", "5000",
            "--warn-code", "2",
        ],  # fmt: skip
        obj=_ctx(tmp_path),
    )

    assert result.exit_code == 0, result.output
    assert "Added hook" in result.output
    data = json.loads(event_hooks_path(tmp_path).read_text(encoding="utf-8"))
    assert data["hooks"][0]["name"] == "lint"
    assert data["hooks"][0]["mode"] == "blocking"
    assert data["hooks"][0]["timeout"] == 5000
    assert data["hooks"][0]["exitCodes"]["warn"] == [2]
    assert data["hooks"][0]["exitCodes"]["success"] == [0]


def test_add_duplicate_fails(tmp_path: Path) -> None:
    _seed(tmp_path, make_hook("lint"))

    result = CliRunner().invoke(
        cli,
        ["hooks", "add", "lint", "--event", "pre-pr", "--command", "x"],
        obj=_ctx(tmp_path),
    )

    assert result.exit_code == 1
    assert 'Hook "lint" already exists' in result.output


def test_add_invalid_name_fails(tmp_path: Path) -> None:
    result = CliRunner().invoke(
        cli,
        ["hooks", "add", "bad name", "--event", "pre-pr", "--command", "x"],
        obj=_ctx(tmp_path),
    )

    assert result.exit_code == 1
    assert "Invalid hook: name:" in result.output
    assert not event_hooks_path(tmp_path).exists()


def test_add_rejects_unknown_event(tmp_path: Path) -> None:
    result = CliRunner().invoke(
        cli,
        ["hooks", "add", "lint", "--event", "pre-deploy", "--command", "x"],
        obj=_ctx(tmp_path),
    )

    assert result.exit_code == 2


def test_list_and_show(tmp_path: Path) -> None:
    _seed(tmp_path, make_hook("lint", "pre-pr"), make_hook("notify", "pr-created", enabled=False))
    runner = CliRunner()

    listed = runner.invoke(cli, ["hooks", "list"], obj=_ctx(tmp_path))
    filtered = runner.invoke(cli, ["hooks", "list", "--event", "pr-created"], obj=_ctx(tmp_path))
    shown = runner.invoke(cli, ["hooks", "show", "lint"], obj=_ctx(tmp_path))

    assert listed.exit_code == 0
    assert "lint" in listed.output
    assert "notify" in listed.output
    assert "(disabled)" in listed.output
    assert "lint" not in filtered.output
    assert json.loads(shown.stdout)["command"] == "run-lint"


def test_list_empty(tmp_path: Path) -> None:
    result = CliRunner().invoke(cli, ["hooks", "list"], obj=_ctx(tmp_path))

    assert result.exit_code == 0
    assert "No event hooks registered." in result.output


def test_show_missing_hook(tmp_path: Path) -> None:
    result = CliRunner().invoke(cli, ["hooks", "show", "nope"], obj=_ctx(tmp_path))

    assert result.exit_code == 1
    assert 'Hook "nope" not found' in result.output


def test_enable_disable_remove(tmp_path: Path) -> None:
    _seed(tmp_path, make_hook("lint"))
    runner = CliRunner()

    disabled = runner.invoke(cli, ["hooks", "disable", "lint"], obj=_ctx(tmp_path))
    assert disabled.exit_code == 0
    assert EventHookRegistry.load(event_hooks_path(tmp_path)).get("lint").enabled is False

    enabled = runner.invoke(cli, ["hooks", "enable", "lint"], obj=_ctx(tmp_path))
    assert enabled.exit_code == 0
    assert EventHookRegistry.load(event_hooks_path(tmp_path)).get("lint").enabled is True

    removed = runner.invoke(cli, ["hooks", "remove", "lint"], obj=_ctx(tmp_path))
    assert removed.exit_code == 0
    assert EventHookRegistry.load(event_hooks_path(tmp_path)).hooks() == []

    missing = runner.invoke(cli, ["hooks", "remove", "lint"], obj=_ctx(tmp_path))
    assert missing.exit_code == 1


def test_events_shows_counts_and_policy(tmp_path: Path) -> None:
    _seed(tmp_path, make_hook("a", "pre-pr"), make_hook("b", "pre-pr"))
    config = GhpConfig(
        branch_pattern="{user}/{number}-{title}",
        main_branch="main",
        worktree_path=tmp_path / "wt",
        username=None,
        hooks_on_failure="continue",
    )

    result = CliRunner().invoke(cli, ["hooks", "events"], obj=_ctx(tmp_path, config=config))

    assert result.exit_code == 0
    lines = {line.split()[0]: line for line in result.output.splitlines()}
    assert "2 enabled" in lines["pre-pr"]
    assert "on-failure: continue" in lines["pre-pr"]
    assert "0 enabled" in lines["worktree-removed"]

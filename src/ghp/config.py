"""ghp configuration loaded from ``config.toml``.

The configuration directory is ``$GHP_CONFIG_DIR`` when set, otherwise
``~/.config/ghp-cli``. It also holds the hook registries.

Example config.toml:
  branch_pattern = "{user}/{number}-{title}"
  main_branch = "main"
  worktree_path = "~/.ghp/worktrees"
  username = "alice"

  [hooks]
  on_failure = "continue"
"""

import os
import tomllib
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

from ghp.hooks.types import ON_FAILURE_POLICIES, OnFailure
from ghp.naming import DEFAULT_BRANCH_PATTERN
from ghp.validation import InvalidInputError, validate_safe_string

CONFIG_DIR_ENV_VAR = "GHP_CONFIG_DIR"
CONFIG_FILE = "config.toml"
EVENT_HOOKS_FILE = "event-hooks.json"
DASHBOARD_HOOKS_FILE = "dashboard-hooks.json"
DEFAULT_WORKTREE_PATH = "~/.ghp/worktrees"


class ConfigError(Exception):
    """config.toml exists but cannot be used."""


@dataclass(frozen=True)
class GhpConfig:
    branch_pattern: str
    main_branch: str
    worktree_path: Path
    username: str | None
    hooks_on_failure: OnFailure | None

    @staticmethod
    def default() -> "GhpConfig":
        return GhpConfig(
            branch_pattern=DEFAULT_BRANCH_PATTERN,
            main_branch="main",
            worktree_path=Path(DEFAULT_WORKTREE_PATH).expanduser(),
            username=None,
            hooks_on_failure=None,
        )


def default_config_dir(env: Mapping[str, str] | None = None) -> Path:
    environ = os.environ if env is None else env
    override = environ.get(CONFIG_DIR_ENV_VAR)
    if override:
        return Path(override).expanduser()
    return Path.home() / ".config" / "ghp-cli"


def event_hooks_path(config_dir: Path) -> Path:
    return config_dir / EVENT_HOOKS_FILE


def dashboard_hooks_path(config_dir: Path) -> Path:
    return config_dir / DASHBOARD_HOOKS_FILE


def load_config(config_dir: Path) -> GhpConfig:
    """Load config.toml from config_dir if present; otherwise return defaults.

    Raises:
        ConfigError: If the file is not valid TOML or a value has the wrong type
    """
    cfg_path = config_dir / CONFIG_FILE
    if not cfg_path.exists():
        return GhpConfig.default()

    try:
        data = tomllib.loads(cfg_path.read_text(encoding="utf-8"))
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"Invalid TOML in {cfg_path}: {e}") from e

    defaults = GhpConfig.default()
    hooks = data.get("hooks", {})
    if not isinstance(hooks, dict):
        raise ConfigError(f"[hooks] in {cfg_path} must be a table")

    on_failure = hooks.get("on_failure")
    if on_failure is not None and on_failure not in ON_FAILURE_POLICIES:
        raise ConfigError(
            f"hooks.on_failure must be one of {', '.join(ON_FAILURE_POLICIES)}, got {on_failure!r}"
        )

    username = data.get("username")
    if username is not None:
        try:
            validate_safe_string(str(username), "username")
        except InvalidInputError as e:
            raise ConfigError(f"{e} in {cfg_path}") from e
    worktree_path = data.get("worktree_path")
    return GhpConfig(
        branch_pattern=str(data.get("branch_pattern", defaults.branch_pattern)),
        main_branch=str(data.get("main_branch", defaults.main_branch)),
        worktree_path=(
            Path(str(worktree_path)).expanduser()
            if worktree_path is not None
            else defaults.worktree_path
        ),
        username=str(username) if username is not None else None,
        hooks_on_failure=on_failure,
    )

"""Application context with dependency injection."""

from dataclasses import dataclass
from pathlib import Path

from ghp.config import (
    GhpConfig,
    dashboard_hooks_path,
    default_config_dir,
    event_hooks_path,
    load_config,
)
from ghp.dashboard.registry import DashboardHookRegistry
from ghp.git.abc import Git
from ghp.git.real import RealGit
from ghp.github.pr.abc import PullRequestCreator
from ghp.github.pr.real import GhPullRequestCreator
from ghp.hooks.executor import EventHookExecutor
from ghp.hooks.prompter import ClickHookPrompter, HookPrompter, NonInteractiveHookPrompter
from ghp.hooks.registry import EventHookRegistry
from ghp.shell.abc import ShellRunner
from ghp.shell.real import RealShellRunner


@dataclass(frozen=True)
class GhpContext:
    """Immutable context holding all dependencies for ghp commands.

    Created at the CLI entry point and passed to commands through
    ``click.Context.obj``. Hook registries are loaded fresh on each access
    so that every command sees the file as it is on disk.
    """

    git: Git
    shell: ShellRunner
    pr_creator: PullRequestCreator
    prompter: HookPrompter
    config: GhpConfig
    config_dir: Path
    cwd: Path

    def load_event_hooks(self) -> EventHookRegistry:
        return EventHookRegistry.load(event_hooks_path(self.config_dir))

    def load_dashboard_hooks(self) -> DashboardHookRegistry:
        return DashboardHookRegistry.load(dashboard_hooks_path(self.config_dir))

    def hook_executor(self, registry: EventHookRegistry | None = None) -> EventHookExecutor:
        return EventHookExecutor(
            registry if registry is not None else self.load_event_hooks(),
            self.shell,
            self.prompter,
        )

    @staticmethod
    def for_test(
        *,
        git: Git | None = None,
        shell: ShellRunner | None = None,
        pr_creator: PullRequestCreator | None = None,
        prompter: HookPrompter | None = None,
        config: GhpConfig | None = None,
        config_dir: Path | None = None,
        cwd: Path | None = None,
    ) -> "GhpContext":
        """Create a context with fakes for every dependency not given.

        ``config_dir`` should be a temporary directory when the test touches
        hook registries.
        """
        from ghp.git.fake import FakeGit
        from ghp.github.pr.fake import FakePullRequestCreator
        from ghp.hooks.fake import FakeHookPrompter
        from ghp.shell.fake import FakeShellRunner

        return GhpContext(
            git=git or FakeGit(),
            shell=shell or FakeShellRunner(),
            pr_creator=pr_creator or FakePullRequestCreator(),
            prompter=prompter or FakeHookPrompter(interactive=False),
            config=config or GhpConfig.default(),
            config_dir=config_dir or Path("/nonexistent/ghp-config"),
            cwd=cwd or Path("/repo"),
        )


def create_context(*, interactive: bool = True) -> GhpContext:
    """Create the production context with real implementations.

    With interactive=False no prompt is ever shown and interactive hooks
    behave as blocking ones.

    Raises:
        ConfigError: If config.toml is invalid
    """
    config_dir = default_config_dir()
    return GhpContext(
        git=RealGit(),
        shell=RealShellRunner(),
        pr_creator=GhPullRequestCreator(),
        prompter=ClickHookPrompter() if interactive else NonInteractiveHookPrompter(),
        config=load_config(config_dir),
        config_dir=config_dir,
        cwd=Path.cwd(),
    )

"""Event hook types.

Event hooks are shell commands registered against a lifecycle event. The
command is a template; ``${...}`` placeholders are filled from the event's
payload before it runs.
"""

import re
from dataclasses import asdict, dataclass
from typing import Any, ClassVar, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

EventType = Literal[
    "issue-created",
    "issue-started",
    "pre-pr",
    "pr-creating",
    "pr-created",
    "pr-merged",
    "worktree-created",
    "worktree-removed",
]
EVENT_TYPES: tuple[EventType, ...] = (
    "issue-created",
    "issue-started",
    "pre-pr",
    "pr-creating",
    "pr-created",
    "pr-merged",
    "worktree-created",
    "worktree-removed",
)

# fire-and-forget: never aborts. blocking: failure aborts.
# interactive: always shows output and asks the operator.
HookMode = Literal["fire-and-forget", "blocking", "interactive"]
HOOK_MODES: tuple[HookMode, ...] = ("fire-and-forget", "blocking", "interactive")

OnFailure = Literal["fail-fast", "continue"]
ON_FAILURE_POLICIES: tuple[OnFailure, ...] = ("fail-fast", "continue")

HookOutcome = Literal["success", "warn", "abort", "continue"]

DEFAULT_EVENT_HOOK_TIMEOUT_MS = 30_000
DEFAULT_CONTINUE_PROMPT = "Continue?"

HOOK_NAME_PATTERN = re.compile(r"^[\w-]{1,63}$")


class HookExitCodes(BaseModel):
    """Exit code classification. Codes in none of the lists abort."""

    model_config = ConfigDict(frozen=True)

    success: tuple[int, ...] = (0,)
    abort: tuple[int, ...] = (1,)
    warn: tuple[int, ...] = ()


DEFAULT_EXIT_CODES = HookExitCodes()


class EventHook(BaseModel):
    """A registered lifecycle hook.

    Field aliases match the camelCase keys of the registry file, and both
    spellings are accepted on construction.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: str
    event: EventType
    command: str
    display_name: str = Field(default="", alias="displayName")
    enabled: bool = True
    mode: HookMode = "fire-and-forget"
    timeout_ms: int = Field(default=DEFAULT_EVENT_HOOK_TIMEOUT_MS, alias="timeout", gt=0)
    exit_codes: HookExitCodes | None = Field(default=None, alias="exitCodes")
    continue_prompt: str | None = Field(default=None, alias="continuePrompt")

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        if not HOOK_NAME_PATTERN.match(v):
            raise ValueError(
                "must be 1-63 characters of letters, numbers, dashes and underscores"
            )
        return v

    @field_validator("command")
    @classmethod
    def validate_command(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("must not be empty")
        return v

    @property
    def label(self) -> str:
        return self.display_name or self.name

    def to_json_dict(self) -> dict[str, Any]:
        """Serialize using the registry file's key names."""
        data = self.model_dump(by_alias=True, exclude_none=True)
        if not self.display_name:
            data["displayName"] = self.name
        return data


@dataclass(frozen=True)
class HookResult:
    """Outcome of executing one hook, from either extension point.

    ``aborted`` is the only field workflows act on; ``outcome`` records how
    the exit code (or the operator) classified the run.
    """

    hook_name: str
    success: bool
    output: str = ""
    stderr: str = ""
    error: str | None = None
    aborted: bool = False
    duration_ms: int = 0
    exit_code: int | None = None
    mode: HookMode | None = None
    outcome: HookOutcome | None = None


def should_abort(results: list[HookResult]) -> bool:
    """True iff any result asks the workflow to stop."""
    return any(result.aborted for result in results)


def first_aborted(results: list[HookResult]) -> HookResult | None:
    for result in results:
        if result.aborted:
            return result
    return None


# ============================================================================
# Event payloads
# ============================================================================


@dataclass(frozen=True)
class IssueSnapshot:
    number: int
    title: str
    url: str
    body: str = ""


@dataclass(frozen=True)
class PullRequestSnapshot:
    number: int
    title: str
    url: str
    body: str = ""


@dataclass(frozen=True)
class MergedPullRequestSnapshot:
    number: int
    title: str
    url: str
    merged_at: str


@dataclass(frozen=True)
class WorktreeSnapshot:
    path: str
    name: str


@dataclass(frozen=True)
class DiffStat:
    additions: int
    deletions: int
    files_changed: int


def _without_none(data: dict[str, Any]) -> dict[str, Any]:
    return {key: value for key, value in data.items() if value is not None}


class _Payload:
    event: ClassVar[EventType]

    def to_dict(self) -> dict[str, Any]:
        """JSON-serializable form, omitting absent optional sections."""
        return _without_none(asdict(self))


@dataclass(frozen=True)
class IssueCreatedPayload(_Payload):
    event: ClassVar[EventType] = "issue-created"

    repo: str
    issue: IssueSnapshot


@dataclass(frozen=True)
class IssueStartedPayload(_Payload):
    event: ClassVar[EventType] = "issue-started"

    repo: str
    issue: IssueSnapshot
    branch: str


@dataclass(frozen=True)
class PrePrPayload(_Payload):
    event: ClassVar[EventType] = "pre-pr"

    repo: str
    branch: str
    base: str
    changed_files: tuple[str, ...]
    diff_stat: DiffStat


@dataclass(frozen=True)
class PrCreatingPayload(_Payload):
    event: ClassVar[EventType] = "pr-creating"

    repo: str
    branch: str
    base: str
    title: str
    body: str


@dataclass(frozen=True)
class PrCreatedPayload(_Payload):
    event: ClassVar[EventType] = "pr-created"

    repo: str
    pr: PullRequestSnapshot
    branch: str
    issue: IssueSnapshot | None = None


@dataclass(frozen=True)
class PrMergedPayload(_Payload):
    event: ClassVar[EventType] = "pr-merged"

    repo: str
    pr: MergedPullRequestSnapshot
    branch: str
    base: str


@dataclass(frozen=True)
class WorktreeCreatedPayload(_Payload):
    event: ClassVar[EventType] = "worktree-created"

    repo: str
    branch: str
    worktree: WorktreeSnapshot
    issue: IssueSnapshot | None = None


@dataclass(frozen=True)
class WorktreeRemovedPayload(_Payload):
    event: ClassVar[EventType] = "worktree-removed"

    repo: str
    branch: str
    worktree: WorktreeSnapshot
    issue: IssueSnapshot | None = None


EventPayload = (
    IssueCreatedPayload
    | IssueStartedPayload
    | PrePrPayload
    | PrCreatingPayload
    | PrCreatedPayload
    | PrMergedPayload
    | WorktreeCreatedPayload
    | WorktreeRemovedPayload
)

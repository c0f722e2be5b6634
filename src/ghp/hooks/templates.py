"""Template variable substitution for event hook commands."""

import json
import re
from typing import Any

from ghp.hooks.types import (
    DiffStat,
    EventPayload,
    IssueCreatedPayload,
    IssueSnapshot,
    IssueStartedPayload,
    MergedPullRequestSnapshot,
    PrCreatedPayload,
    PrCreatingPayload,
    PrePrPayload,
    PrMergedPayload,
    PullRequestSnapshot,
    WorktreeCreatedPayload,
    WorktreeRemovedPayload,
    WorktreeSnapshot,
)
from ghp.shell.abc import shell_escape

_PLACEHOLDER = re.compile(r"\$\{([A-Za-z_][A-Za-z0-9_.]*)\}")


def _json_arg(value: dict[str, Any]) -> str:
    return shell_escape(json.dumps(value))


def _issue_variables(issue: IssueSnapshot | None) -> dict[str, str]:
    if issue is None:
        return {}
    return {
        "issue.number": str(issue.number),
        "issue.title": shell_escape(issue.title),
        "issue.body": shell_escape(issue.body),
        "issue.url": shell_escape(issue.url),
        "issue.json": _json_arg(
            {"number": issue.number, "title": issue.title, "body": issue.body, "url": issue.url}
        ),
    }


def _pr_variables(pr: PullRequestSnapshot | MergedPullRequestSnapshot) -> dict[str, str]:
    variables = {
        "pr.number": str(pr.number),
        "pr.title": shell_escape(pr.title),
        "pr.url": shell_escape(pr.url),
    }
    match pr:
        case PullRequestSnapshot(body=body):
            variables["pr.body"] = shell_escape(body)
            variables["pr.merged_at"] = shell_escape("")
            pr_json = {"number": pr.number, "title": pr.title, "body": body, "url": pr.url}
        case MergedPullRequestSnapshot(merged_at=merged_at):
            variables["pr.body"] = shell_escape("")
            variables["pr.merged_at"] = shell_escape(merged_at)
            pr_json = {"number": pr.number, "title": pr.title, "url": pr.url, "merged_at": merged_at}
    variables["pr.json"] = _json_arg(pr_json)
    return variables


def _worktree_variables(worktree: WorktreeSnapshot) -> dict[str, str]:
    return {
        "worktree.path": shell_escape(worktree.path),
        "worktree.name": shell_escape(worktree.name),
    }


def _diff_stat_variables(diff_stat: DiffStat) -> dict[str, str]:
    return {
        "diff_stat.additions": str(diff_stat.additions),
        "diff_stat.deletions": str(diff_stat.deletions),
        "diff_stat.files_changed": str(diff_stat.files_changed),
    }


def template_variables(payload: EventPayload) -> dict[str, str]:
    """Map each placeholder available for payload to its substituted text.

    Numbers appear raw; every string value is shell-escaped.
    """
    variables = {"repo": shell_escape(payload.repo)}
    match payload:
        case IssueCreatedPayload(issue=issue):
            variables.update(_issue_variables(issue))
        case IssueStartedPayload(issue=issue, branch=branch):
            variables.update(_issue_variables(issue))
            variables["branch"] = shell_escape(branch)
        case PrePrPayload(branch=branch, base=base, changed_files=files, diff_stat=diff_stat):
            variables["branch"] = shell_escape(branch)
            variables["base"] = shell_escape(base)
            variables["changed_files"] = shell_escape("\n".join(files))
            variables.update(_diff_stat_variables(diff_stat))
        case PrCreatingPayload(branch=branch, base=base, title=title, body=body):
            variables["branch"] = shell_escape(branch)
            variables["base"] = shell_escape(base)
            variables["title"] = shell_escape(title)
            variables["body"] = shell_escape(body)
        case PrCreatedPayload(pr=pr, branch=branch, issue=issue):
            variables.update(_pr_variables(pr))
            variables.update(_issue_variables(issue))
            variables["branch"] = shell_escape(branch)
        case PrMergedPayload(pr=pr, branch=branch, base=base):
            variables.update(_pr_variables(pr))
            variables["branch"] = shell_escape(branch)
            variables["base"] = shell_escape(base)
        case WorktreeCreatedPayload(branch=branch, worktree=worktree, issue=issue) | (
            WorktreeRemovedPayload(branch=branch, worktree=worktree, issue=issue)
        ):
            variables.update(_issue_variables(issue))
            variables.update(_worktree_variables(worktree))
            variables["branch"] = shell_escape(branch)
    return variables


def substitute_template_variables(command: str, payload: EventPayload) -> str:
    """Fill ``${...}`` placeholders in command from payload.

    Substitution is a single pass, so placeholder-like text inside a
    substituted value is never expanded. Placeholders the payload does not
    provide are left untouched.

    Examples:
        >>> substitute_template_variables("notify ${issue.number} ${branch}", payload)
        "notify 42 'alice/42-fix-bug'"
    """
    variables = template_variables(payload)
    return _PLACEHOLDER.sub(lambda m: variables.get(m.group(1), m.group(0)), command)

"""Workflow layer: multi-step git and GitHub operations with hook checkpoints.

Workflows never raise; failures are reported as ``success=False`` results.
"""

from ghp.workflows.issue import create_issue_workflow, start_issue_workflow
from ghp.workflows.pr import create_pr_workflow, fire_pr_merged_hooks
from ghp.workflows.worktree import create_worktree_workflow, remove_worktree_workflow

__all__ = [
    "create_issue_workflow",
    "create_pr_workflow",
    "create_worktree_workflow",
    "fire_pr_merged_hooks",
    "remove_worktree_workflow",
    "start_issue_workflow",
]

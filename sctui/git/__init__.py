"""Git helpers for sc-tui.

Return type conventions:
- Functions returning GitResult: caller must check .success before using output.
- Functions returning bool: True on success/condition met, False otherwise.
- execute_git_operation() returns a GitBranchResult and never raises.
"""

from sctui.git.runner import GitResult, run_git
from sctui.git.branch import (
    RepoType,
    branch_exists,
    create_branch,
    create_worktree,
    detect_repo_type,
    generate_worktree_path,
    suggested_branch_name,
)
from sctui.git.operations import (
    GitBranchRequest,
    GitBranchResult,
    GitOperation,
    default_operation_for,
    execute_git_operation,
    find_in_progress_state_id,
    move_story_to_in_progress,
)

__all__ = [
    "GitResult",
    "run_git",
    # branch
    "RepoType",
    "branch_exists",
    "create_branch",
    "create_worktree",
    "detect_repo_type",
    "generate_worktree_path",
    "suggested_branch_name",
    # operations
    "GitBranchRequest",
    "GitBranchResult",
    "GitOperation",
    "default_operation_for",
    "execute_git_operation",
    "find_in_progress_state_id",
    "move_story_to_in_progress",
]

"""
Git branch/worktree creation for a story, and the follow-up state change.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional

from sctui.api import ShortcutApi, Story, WorkflowState
from sctui.api.client import ShortcutApiError
from sctui.git.branch import RepoType, branch_exists, create_branch, create_worktree

logger = logging.getLogger(__name__)


class GitOperation(str, Enum):
    CREATE_BRANCH = "branch"
    CREATE_WORKTREE = "worktree"


@dataclass
class GitBranchRequest:
    story_id: int
    branch_name: str
    operation: GitOperation
    worktree_path: str = ""  # only used for CREATE_WORKTREE
    cwd: Path = Path(".")


@dataclass
class GitBranchResult:
    success: bool
    message: str
    story_id: int
    branch_name: str
    operation: GitOperation
    worktree_path: Optional[str] = None  # set on successful worktree creation


def default_operation_for(repo_type: RepoType) -> GitOperation:
    """Bare repositories get a worktree; normal ones a plain branch."""
    if repo_type == RepoType.BARE:
        return GitOperation.CREATE_WORKTREE
    return GitOperation.CREATE_BRANCH


def execute_git_operation(request: GitBranchRequest) -> GitBranchResult:
    if request.operation == GitOperation.CREATE_WORKTREE:
        return _create_worktree(request)
    return _create_branch(request)


def _result(request: GitBranchRequest, success: bool, message: str) -> GitBranchResult:
    worktree = request.worktree_path if success and request.operation == GitOperation.CREATE_WORKTREE else None
    return GitBranchResult(
        success=success,
        message=message,
        story_id=request.story_id,
        branch_name=request.branch_name,
        operation=request.operation,
        worktree_path=worktree,
    )


def _create_branch(request: GitBranchRequest) -> GitBranchResult:
    if branch_exists(request.cwd, request.branch_name):
        return _result(request, False, f"Branch '{request.branch_name}' already exists")

    result = create_branch(request.cwd, request.branch_name)
    if not result.success:
        logger.warning(f"git checkout -b {request.branch_name} failed: {result.error}")
        return _result(request, False, f"Failed to create branch '{request.branch_name}': {result.error}")
    return _result(request, True, f"Created and switched to branch '{request.branch_name}'")


def _create_worktree(request: GitBranchRequest) -> GitBranchResult:
    result = create_worktree(request.cwd, request.branch_name, request.worktree_path)
    if not result.success:
        logger.warning(f"git worktree add {request.worktree_path} failed: {result.error}")
        return _result(request, False, f"Failed to create worktree: {result.error}")
    return _result(
        request, True, f"Created worktree '{request.branch_name}' at '{request.worktree_path}'"
    )


def find_in_progress_state_id(states: list[WorkflowState]) -> Optional[int]:
    """First state of type "started", or whose name mentions progress/doing."""
    for state in states:
        name = state.name.lower()
        if state.state_type == "started" or "progress" in name or "doing" in name:
            return state.id
    return None


def move_story_to_in_progress(
    client: ShortcutApi,
    story_id: int,
    states: list[WorkflowState],
) -> Optional[Story]:
    """Move a story to the in-progress state. Returns the updated story, or None."""
    if story_id <= 0:
        return None

    target = find_in_progress_state_id(states)
    if target is None:
        logger.info("No in-progress state found, leaving story where it is")
        return None

    try:
        story = client.update_story_state(story_id, target)
    except ShortcutApiError as e:
        logger.warning(f"Failed to move story {story_id} to in progress: {e}")
        return None
    logger.info(f"Moved story {story_id} to state {target}")
    return story

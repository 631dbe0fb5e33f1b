"""Branch and worktree helpers for starting work on a story."""

import re
from enum import Enum
from pathlib import Path

from sctui.api import Story
from sctui.git.runner import GitResult, run_git

SLUG_WORDS = 5


class RepoType(str, Enum):
    NORMAL = "normal"
    BARE = "bare"
    NOT_A_REPO = "not_a_repo"


def detect_repo_type(cwd: Path) -> RepoType:
    if not run_git(["rev-parse", "--git-dir"], cwd).success:
        return RepoType.NOT_A_REPO

    result = run_git(["rev-parse", "--is-bare-repository"], cwd)
    if not result.success:
        return RepoType.NOT_A_REPO
    if result.stdout.strip().lower() == "true":
        return RepoType.BARE
    return RepoType.NORMAL


def branch_exists(cwd: Path, branch: str) -> bool:
    result = run_git(["show-ref", "--verify", "--quiet", f"refs/heads/{branch}"], cwd)
    return result.success


def create_branch(cwd: Path, branch: str) -> GitResult:
    """Create a branch and switch to it."""
    return run_git(["checkout", "-b", branch], cwd)


def create_worktree(cwd: Path, branch: str, worktree_path: str) -> GitResult:
    """Create a worktree at worktree_path on a new branch."""
    return run_git(["worktree", "add", "-b", branch, worktree_path], cwd)


def generate_worktree_path(branch: str) -> str:
    """Sibling directory named after the branch, e.g. ../sc-12-fix-login."""
    safe = branch.replace("/", "-").replace("\\", "-").replace(" ", "-")
    return f"../{safe}"


def slugify(text: str, max_words: int = SLUG_WORDS) -> str:
    words = re.findall(r"[a-z0-9]+", text.lower())
    return "-".join(words[:max_words])


def suggested_branch_name(story: Story) -> str:
    """The branch name Shortcut suggests, else sc-<id>-<slug of the name>."""
    if story.formatted_vcs_branch_name:
        return story.formatted_vcs_branch_name
    slug = slugify(story.name)
    return f"sc-{story.id}-{slug}" if slug else f"sc-{story.id}"

"""
sc-tui branch - Create a git branch (or worktree) for a story and start it.
"""

from pathlib import Path

from sctui.api import ShortcutApi
from sctui.api.client import ShortcutApiError
from sctui.commands.common import InvalidStoryId, load_states, parse_story_id
from sctui.git import (
    GitBranchRequest,
    GitOperation,
    RepoType,
    default_operation_for,
    detect_repo_type,
    execute_git_operation,
    generate_worktree_path,
    move_story_to_in_progress,
    suggested_branch_name,
)


def cmd_branch(args, client: ShortcutApi, cwd: Path = None) -> int:
    """
    Branch name: --name if given, the suggested name with --default, otherwise
    prompt with the suggestion pre-filled. Bare repositories and --worktree get
    a worktree next to the repository.
    """
    cwd = cwd or Path.cwd()
    try:
        story_id = parse_story_id(args.id)
    except InvalidStoryId as e:
        print(f"ERROR: {e}")
        return 2

    repo_type = detect_repo_type(cwd)
    if repo_type == RepoType.NOT_A_REPO:
        print("ERROR: Not in a git repository")
        return 2

    try:
        story = client.get_story(story_id)
    except ShortcutApiError as e:
        print(f"ERROR: Failed to load story {story_id}: {e}")
        return 1

    suggestion = suggested_branch_name(story)
    if args.name:
        branch = args.name.strip()
    elif args.default:
        branch = suggestion
    else:
        entered = input(f"Branch name [{suggestion}]: ").strip()
        branch = entered or suggestion

    operation = GitOperation.CREATE_WORKTREE if args.worktree else default_operation_for(repo_type)
    result = execute_git_operation(GitBranchRequest(
        story_id=story.id,
        branch_name=branch,
        operation=operation,
        worktree_path=generate_worktree_path(branch),
        cwd=cwd,
    ))
    if not result.success:
        print(f"ERROR: {result.message}")
        return 1
    print(result.message)

    try:
        states = load_states(client)
    except ShortcutApiError as e:
        print(f"WARNING: Could not load workflow states: {e}")
        return 0
    updated = move_story_to_in_progress(client, story.id, states)
    if updated is not None:
        print(f"#{story.id} moved to in progress")
    return 0

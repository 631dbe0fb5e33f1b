"""
Carries out engine intents against the Shortcut API.

Runs between engine iterations. Each outcome is fed back into AppState (as a
replaced/merged story or status text); API failures never propagate.
"""

import logging
from pathlib import Path
from typing import Optional

from sctui.api import ShortcutApi, Workflow, flatten_workflow_states
from sctui.api.client import ShortcutApiError
from sctui.git import (
    GitBranchRequest,
    RepoType,
    default_operation_for,
    detect_repo_type,
    execute_git_operation,
    generate_worktree_path,
    move_story_to_in_progress,
    suggested_branch_name,
)
from sctui.ui.intents import (
    AddCommentIntent,
    CreateStoryIntent,
    MoveStoryIntent,
    PendingIntents,
    UpdateDetailsIntent,
)
from sctui.ui.state import AppState

logger = logging.getLogger(__name__)


class IntentRunner:
    """Executes PendingIntents synchronously and reports back to the engine."""

    def __init__(
        self,
        api: ShortcutApi,
        state: AppState,
        workflows: list[Workflow],
        cwd: Optional[Path] = None,
    ):
        self.api = api
        self.state = state
        self.workflows = workflows
        self.cwd = cwd or Path.cwd()

    def run(self, pending: PendingIntents) -> None:
        if pending.create:
            self._guard("Create story", self._create, pending.create)
        if pending.edit:
            self._guard("Update story", self._edit, pending.edit)
        if pending.move:
            self._guard("Move story", self._move, pending.move)
        if pending.comment:
            self._guard("Add comment", self._comment, pending.comment)
        if pending.take_ownership is not None:
            self._guard("Take ownership", self._take_ownership, pending.take_ownership)
        if pending.branch is not None:
            self._branch(pending.branch)
        if pending.load_more:
            self._load_more()
        if pending.refresh:
            self._guard("Refresh", self._refresh)

    def _guard(self, what: str, func, *args) -> None:
        try:
            func(*args)
        except ShortcutApiError as e:
            logger.warning(f"{what} failed: {e}")
            self.state.set_status(f"{what} failed: {e}")

    def load_members(self) -> None:
        """Fill the member cache and remember who we are."""
        try:
            for member in self.api.get_members():
                self.state.add_member_to_cache(member.id, member.display_name)
            me = self.api.get_current_member()
        except ShortcutApiError as e:
            logger.warning(f"Could not load members: {e}")
            self.state.set_status(f"Could not load members: {e}")
            return
        self.state.set_current_user_id(me.id)
        self.state.add_member_to_cache(me.id, me.display_name)

    def _current_member_id(self) -> str:
        if self.state.current_user_id is None:
            me = self.api.get_current_member()
            self.state.set_current_user_id(me.id)
            self.state.add_member_to_cache(me.id, me.display_name)
        return self.state.current_user_id

    def _create(self, intent: CreateStoryIntent) -> None:
        if not self.workflows or not self.workflows[0].states:
            self.state.set_status("Create story failed: no workflow states available")
            return
        first_state = self.workflows[0].states[0]
        story = self.api.create_story(
            name=intent.name,
            description=intent.description,
            story_type=intent.story_type,
            requested_by_id=self._current_member_id(),
            workflow_state_id=first_state.id,
        )
        self.state.add_created_story(story)
        self.state.set_status(f"Created #{story.id}: {story.name}")

    def _edit(self, intent: UpdateDetailsIntent) -> None:
        story = self.api.update_story_details(
            intent.story_id,
            name=intent.name,
            description=intent.description,
            story_type=intent.story_type,
        )
        self.state.replace_story(story)
        self.state.set_status(f"Updated #{story.id}")

    def _move(self, intent: MoveStoryIntent) -> None:
        story = self.api.update_story_state(intent.story_id, intent.workflow_state_id)
        self.state.replace_story(story)
        self.state.set_status(f"Moved #{story.id} to {self.state.state_name(story.workflow_state_id)}")

    def _comment(self, intent: AddCommentIntent) -> None:
        self.api.add_comment(intent.story_id, intent.text)
        self.state.replace_story(self.api.get_story(intent.story_id))
        self.state.set_status(f"Comment added to #{intent.story_id}")

    def _take_ownership(self, story_id: int) -> None:
        member_id = self._current_member_id()
        story = self.state.find_story(story_id)
        if story is not None and story.owner_ids == [member_id]:
            self.state.set_status(f"You already own #{story_id}")
            return
        updated = self.api.update_story_owners(story_id, [member_id])
        self.state.replace_story(updated)
        self.state.set_status(f"Took ownership of #{story_id}")

    def _branch(self, story_id: int) -> None:
        story = self.state.find_story(story_id)
        if story is None:
            return

        repo_type = detect_repo_type(self.cwd)
        if repo_type == RepoType.NOT_A_REPO:
            self.state.set_status("Not in a git repository")
            return

        branch = suggested_branch_name(story)
        operation = default_operation_for(repo_type)
        result = execute_git_operation(GitBranchRequest(
            story_id=story.id,
            branch_name=branch,
            operation=operation,
            worktree_path=generate_worktree_path(branch),
            cwd=self.cwd,
        ))
        if not result.success:
            self.state.set_status(result.message)
            return

        updated = move_story_to_in_progress(self.api, story.id, flatten_workflow_states(self.workflows))
        if updated is not None:
            self.state.replace_story(updated)
        self.state.set_status(result.message)

    def _load_more(self) -> None:
        try:
            page = self.api.search_stories_page(self.state.search_query, self.state.next_page_token)
        except ShortcutApiError as e:
            logger.warning(f"Load more failed: {e}")
            self.state.load_more_failed()
            self.state.set_status(f"Load more failed: {e}")
            return
        before = self.state.total_loaded_stories
        self.state.merge_stories(page.stories, page.next_page_token)
        added = self.state.total_loaded_stories - before
        self.state.set_status(f"Loaded {added} more stories ({self.state.total_loaded_stories} total)")

    def _refresh(self) -> None:
        page = self.api.search_stories_page(self.state.search_query)
        self.state.reset_stories(page.stories, page.next_page_token)
        self.state.set_status(f"Refreshed: {self.state.total_loaded_stories} stories")

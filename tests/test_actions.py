"""Tests for sctui.ui.actions module (intent execution against a fake API)."""

from dataclasses import replace
from pathlib import Path
from unittest.mock import patch

from sctui.api import (
    Comment,
    CurrentMember,
    Member,
    StoriesPage,
    Story,
    Workflow,
    WorkflowState,
    flatten_workflow_states,
)
from sctui.api.client import ShortcutApiError
from sctui.git import GitBranchResult, GitOperation, RepoType
from sctui.ui.actions import IntentRunner
from sctui.ui.intents import (
    AddCommentIntent,
    CreateStoryIntent,
    MoveStoryIntent,
    PendingIntents,
    UpdateDetailsIntent,
)
from sctui.ui.state import AppState


WORKFLOWS = [Workflow(id=1, name="Eng", states=[
    WorkflowState(id=10, name="To Do", position=0, state_type="unstarted"),
    WorkflowState(id=20, name="In Progress", position=1, state_type="started"),
    WorkflowState(id=30, name="Done", position=2, state_type="done"),
])]


class FakeApi:
    """In-memory ShortcutApi that records calls."""

    def __init__(self, stories):
        self.stories = {s.id: s for s in stories}
        self.calls = []
        self.fail = set()  # method names that raise
        self.pages = {}  # token -> StoriesPage
        self.next_id = 100

    def _call(self, name, *args):
        self.calls.append((name,) + args)
        if name in self.fail:
            raise ShortcutApiError(500, f"{name} exploded")

    def search_stories_page(self, query, next_page_token=None):
        self._call("search_stories_page", query, next_page_token)
        return self.pages.get(next_page_token, StoriesPage(list(self.stories.values()), None))

    def get_story(self, story_id):
        self._call("get_story", story_id)
        return self.stories[story_id]

    def get_workflows(self):
        return WORKFLOWS

    def get_members(self):
        self._call("get_members")
        return [Member(id="u1", name="Ann", mention_name="ann"), Member(id="u2", name="Bob", mention_name="bob")]

    def get_current_member(self):
        self._call("get_current_member")
        return CurrentMember(id="u1", name="Ann", mention_name="ann")

    def update_story_state(self, story_id, workflow_state_id):
        self._call("update_story_state", story_id, workflow_state_id)
        self.stories[story_id] = replace(self.stories[story_id], workflow_state_id=workflow_state_id)
        return self.stories[story_id]

    def update_story_owners(self, story_id, owner_ids):
        self._call("update_story_owners", story_id, owner_ids)
        self.stories[story_id] = replace(self.stories[story_id], owner_ids=list(owner_ids))
        return self.stories[story_id]

    def update_story_details(self, story_id, name, description, story_type):
        self._call("update_story_details", story_id, name, description, story_type)
        self.stories[story_id] = replace(
            self.stories[story_id], name=name, description=description, story_type=story_type
        )
        return self.stories[story_id]

    def create_story(self, name, description, story_type, requested_by_id, workflow_state_id):
        self._call("create_story", name, description, story_type, requested_by_id, workflow_state_id)
        story = Story(id=self.next_id, name=name, description=description, story_type=story_type,
                      workflow_state_id=workflow_state_id, position=0)
        self.stories[story.id] = story
        return story

    def add_comment(self, story_id, text):
        self._call("add_comment", story_id, text)
        comment = Comment(id=1, text=text, author_id="u1")
        self.stories[story_id] = replace(
            self.stories[story_id], comments=self.stories[story_id].comments + [comment]
        )
        return comment


def _setup(stories=None):
    stories = stories or [
        Story(id=1, name="One", workflow_state_id=10, position=1),
        Story(id=2, name="Two", workflow_state_id=10, position=2),
    ]
    api = FakeApi(stories)
    engine = AppState(list(stories), flatten_workflow_states(WORKFLOWS), "owner:ann is:story", "p2")
    return api, engine, IntentRunner(api, engine, WORKFLOWS, cwd=Path("/repo"))


class TestMembers:
    """Member cache and current user loading."""

    def test_load_members(self):
        """Members are cached by display name and the current user is set."""
        api, engine, runner = _setup()
        runner.load_members()
        assert engine.current_user_id == "u1"
        assert engine.member_cache["u2"] == "Bob (bob)"

    def test_load_members_failure_sets_status(self):
        """A failed member fetch is reported in the status line."""
        api, engine, runner = _setup()
        api.fail.add("get_members")
        runner.load_members()
        assert engine.current_user_id is None
        assert "Could not load members" in engine.status_message


class TestStoryIntents:
    """Story intents run against the API and feed results back."""

    def test_move(self):
        """A move updates the loaded story and names the new state."""
        api, engine, runner = _setup()
        runner.run(PendingIntents(move=MoveStoryIntent(story_id=1, workflow_state_id=30)))
        assert engine.find_story(1).workflow_state_id == 30
        assert "Done" in engine.status_message

    def test_move_failure_reported(self):
        """A failed move leaves the story as it was and reports the error."""
        api, engine, runner = _setup()
        api.fail.add("update_story_state")
        runner.run(PendingIntents(move=MoveStoryIntent(story_id=1, workflow_state_id=30)))
        assert engine.find_story(1).workflow_state_id == 10
        assert "Move story failed" in engine.status_message

    def test_edit(self):
        """An edit replaces the loaded story with the updated one."""
        api, engine, runner = _setup()
        runner.run(PendingIntents(edit=UpdateDetailsIntent(1, "Renamed", "d", "bug")))
        assert engine.find_story(1).name == "Renamed"

    def test_comment_refetches_story(self):
        """After commenting the story is fetched again to pick up the comment."""
        api, engine, runner = _setup()
        runner.run(PendingIntents(comment=AddCommentIntent(story_id=2, text="hello")))
        assert ("get_story", 2) in api.calls
        assert engine.find_story(2).comments[0].text == "hello"

    def test_take_ownership_uses_current_member(self):
        """Taking ownership assigns the current member."""
        api, engine, runner = _setup()
        runner.run(PendingIntents(take_ownership=1))
        assert engine.find_story(1).owner_ids == ["u1"]
        assert engine.current_user_id == "u1"

    def test_create_in_first_state(self):
        """New stories are created in the first workflow state, requested by the current user."""
        api, engine, runner = _setup()
        engine.set_current_user_id("u1")
        runner.run(PendingIntents(create=CreateStoryIntent("New", "", "chore")))
        assert ("create_story", "New", "", "chore", "u1", 10) in api.calls
        assert engine.total_loaded_stories == 3


class TestPaging:
    """Load more and refresh."""

    def test_load_more_merges(self):
        """The next page is merged and the token advanced."""
        api, engine, runner = _setup()
        api.pages["p2"] = StoriesPage([Story(id=3, name="Three", workflow_state_id=20, position=3)], None)
        engine.request_load_more()
        runner.run(engine.take_intents())
        assert engine.total_loaded_stories == 3
        assert not engine.is_loading
        assert not engine.has_more_stories()

    def test_load_more_failure(self):
        """A failed page clears the loading flag and reports the error."""
        api, engine, runner = _setup()
        api.fail.add("search_stories_page")
        engine.request_load_more()
        runner.run(engine.take_intents())
        assert not engine.is_loading
        assert "Load more failed" in engine.status_message

    def test_refresh_keeps_members(self):
        """Refresh replaces stories but keeps the member cache."""
        api, engine, runner = _setup()
        runner.load_members()
        api.pages[None] = StoriesPage([Story(id=9, name="Nine", workflow_state_id=10, position=0)], "n")
        runner.run(PendingIntents(refresh=True))
        assert [s.id for s in engine.flat_list] == [9]
        assert engine.current_user_id == "u1"
        assert engine.member_cache["u2"] == "Bob (bob)"
        assert engine.next_page_token == "n"


class TestBranch:
    """Git branch creation from a story."""

    @patch("sctui.ui.actions.execute_git_operation")
    @patch("sctui.ui.actions.detect_repo_type")
    def test_branch_moves_story_in_progress(self, mock_detect, mock_exec):
        """A created branch moves the story to the started state."""
        api, engine, runner = _setup()
        mock_detect.return_value = RepoType.NORMAL
        mock_exec.return_value = GitBranchResult(
            success=True, message="Created and switched to branch 'sc-1-one'",
            story_id=1, branch_name="sc-1-one", operation=GitOperation.CREATE_BRANCH,
        )
        runner.run(PendingIntents(branch=1))
        assert mock_exec.call_args[0][0].branch_name == "sc-1-one"
        assert engine.find_story(1).workflow_state_id == 20
        assert "sc-1-one" in engine.status_message

    @patch("sctui.ui.actions.detect_repo_type")
    def test_not_a_repo(self, mock_detect):
        """Outside a repository nothing runs and the status says why."""
        api, engine, runner = _setup()
        mock_detect.return_value = RepoType.NOT_A_REPO
        runner.run(PendingIntents(branch=1))
        assert engine.status_message == "Not in a git repository"

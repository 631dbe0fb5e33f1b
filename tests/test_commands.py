"""Tests for sctui.commands modules."""

import argparse
import io
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest
from rich.console import Console

from sctui.api import Comment, CurrentMember, StoriesPage, Story, Workflow, WorkflowState
from sctui.api.client import ShortcutApiError
from sctui.commands.add import cmd_add
from sctui.commands.branch import cmd_branch
from sctui.commands.comment import cmd_comment
from sctui.commands.common import InvalidStoryId, find_done_state, parse_story_id
from sctui.commands.edit import cmd_edit
from sctui.commands.finish import cmd_finish
from sctui.commands.show import cmd_show
from sctui.git import GitBranchResult, GitOperation, RepoType
from sctui.lib.config import Credentials


def _story(story_id=42, **kwargs):
    kwargs.setdefault("name", "Fix login")
    kwargs.setdefault("workflow_state_id", 10)
    kwargs.setdefault("position", 0)
    return Story(id=story_id, **kwargs)


def _workflows():
    return [Workflow(id=1, name="Eng", states=[
        WorkflowState(id=10, name="To Do", position=0, state_type="unstarted"),
        WorkflowState(id=20, name="In Progress", position=1, state_type="started"),
        WorkflowState(id=30, name="Done", position=2, state_type="done"),
        WorkflowState(id=40, name="Archived", position=3, state_type="done"),
    ])]


def _client():
    client = MagicMock()
    client.get_workflows.return_value = _workflows()
    client.get_current_member.return_value = CurrentMember(id="u1", name="Ann", mention_name="ann")
    return client


class TestParseStoryId:
    """Story id parsing and state lookups."""

    def test_plain_and_prefixed(self):
        """Plain numbers and sc- prefixes in any case are accepted."""
        assert parse_story_id("42") == 42
        assert parse_story_id("sc-42") == 42
        assert parse_story_id("SC-7") == 7

    @pytest.mark.parametrize("value", ["", "abc", "sc-", "-3", "0", "42x"])
    def test_invalid(self, value):
        """Anything else raises InvalidStoryId."""
        with pytest.raises(InvalidStoryId):
            parse_story_id(value)

    def test_first_done_state(self):
        """The first state of type done is picked."""
        assert find_done_state(_workflows()[0].states).id == 30


class TestAdd:
    """sc-tui add."""

    def test_creates_in_first_state(self, capsys):
        """Stories are created in the first state, requested by the current member."""
        client = _client()
        client.create_story.return_value = _story(99, name="New")
        args = argparse.Namespace(name="New", description="", type="bug")
        assert cmd_add(args, client) == 0
        client.create_story.assert_called_once_with(
            name="New", description="", story_type="bug", requested_by_id="u1", workflow_state_id=10
        )
        assert "Created #99" in capsys.readouterr().out

    def test_empty_name(self):
        """A blank name is a usage error."""
        args = argparse.Namespace(name="  ", description="", type="feature")
        assert cmd_add(args, _client()) == 2

    def test_api_failure(self, capsys):
        """API errors print ERROR and exit 1."""
        client = _client()
        client.create_story.side_effect = ShortcutApiError(400, "bad")
        args = argparse.Namespace(name="x", description="", type="feature")
        assert cmd_add(args, client) == 1
        assert "ERROR" in capsys.readouterr().out


class TestFinish:
    """sc-tui finish."""

    def test_moves_to_first_done(self):
        """The story moves to the first done state."""
        client = _client()
        client.update_story_state.return_value = _story(workflow_state_id=30)
        assert cmd_finish(argparse.Namespace(id="sc-42"), client) == 0
        client.update_story_state.assert_called_once_with(42, 30)

    def test_invalid_id(self):
        """A bad id is a usage error."""
        assert cmd_finish(argparse.Namespace(id="nope"), _client()) == 2


class TestEdit:
    """sc-tui edit."""

    def _args(self, **kwargs):
        base = {"id": "42", "name": None, "description": None, "type": None}
        base.update(kwargs)
        return argparse.Namespace(**base)

    def test_updates_changed_fields(self):
        """Unspecified fields keep the story's current values."""
        client = _client()
        client.get_story.return_value = _story(description="old", story_type="feature")
        client.update_story_details.return_value = _story(story_type="bug")
        assert cmd_edit(self._args(type="bug"), client) == 0
        client.update_story_details.assert_called_once_with(
            42, name="Fix login", description="old", story_type="bug"
        )

    def test_unchanged_makes_no_update(self, capsys):
        """Values equal to the current ones skip the update."""
        client = _client()
        client.get_story.return_value = _story()
        assert cmd_edit(self._args(name="Fix login"), client) == 0
        client.update_story_details.assert_not_called()
        assert "unchanged" in capsys.readouterr().out

    def test_nothing_requested(self):
        """Editing with no field flags is a usage error."""
        assert cmd_edit(self._args(), _client()) == 2


class TestComment:
    """sc-tui comment."""

    def test_message_flag(self):
        """The -m text is posted."""
        client = _client()
        client.add_comment.return_value = Comment(id=5, text="hi")
        assert cmd_comment(argparse.Namespace(id="42", message="hi"), client) == 0
        client.add_comment.assert_called_once_with(42, "hi")

    def test_reads_stdin(self, monkeypatch):
        """Without -m the text is read from stdin."""
        client = _client()
        client.add_comment.return_value = Comment(id=5, text="from stdin\n")
        monkeypatch.setattr("sys.stdin", io.StringIO("from stdin\n"))
        assert cmd_comment(argparse.Namespace(id="42", message=None), client) == 0
        client.add_comment.assert_called_once_with(42, "from stdin\n")

    def test_empty_comment(self):
        """A blank comment is a usage error."""
        assert cmd_comment(argparse.Namespace(id="42", message="  "), _client()) == 2


class TestShow:
    """sc-tui show."""

    def _args(self, **kwargs):
        base = {"id": None, "search": None, "all": False, "requester": False, "story_type": None, "limit": None}
        base.update(kwargs)
        return argparse.Namespace(**base)

    def test_lists_stories(self):
        """Stories matching the default owner query are listed."""
        client = _client()
        client.search_stories_page.return_value = StoriesPage([_story(1, name="Alpha"), _story(2, name="Beta")], None)
        console = Console(file=io.StringIO(), width=120)
        creds = Credentials(api_key="k", user_id="ann")
        assert cmd_show(self._args(), client, creds, console) == 0
        out = console.file.getvalue()
        assert "Alpha" in out and "Beta" in out
        client.search_stories_page.assert_called_once_with("owner:ann is:story", None)

    def test_single_story(self):
        """An id prints that story in full."""
        client = _client()
        client.get_story.return_value = _story(description="Details here")
        console = Console(file=io.StringIO(), width=120)
        assert cmd_show(self._args(id="sc-42"), client, Credentials(api_key="k", user_id="ann"), console) == 0
        assert "Details here" in console.file.getvalue()

    def test_bracketed_names_printed_literally(self):
        """Names with square brackets are printed as text, not styles."""
        client = _client()
        client.get_workflows.return_value = [Workflow(id=1, name="Eng", states=[
            WorkflowState(id=10, name="Review [qa]", position=0, state_type="started"),
        ])]
        client.search_stories_page.return_value = StoriesPage([_story(1, name="Fix [/] parser")], None)
        console = Console(file=io.StringIO(), width=120)
        assert cmd_show(self._args(), client, Credentials(api_key="k", user_id="ann"), console) == 0
        out = console.file.getvalue()
        assert "Review [qa]" in out
        assert "Fix [/] parser" in out


class TestBranch:
    """sc-tui branch."""

    def _args(self, **kwargs):
        base = {"id": "42", "default": True, "worktree": False, "name": None}
        base.update(kwargs)
        return argparse.Namespace(**base)

    def _ok(self, request_branch="sc-42-fix-login"):
        return GitBranchResult(
            success=True, message="Created", story_id=42,
            branch_name=request_branch, operation=GitOperation.CREATE_BRANCH,
        )

    @patch("sctui.commands.branch.execute_git_operation")
    @patch("sctui.commands.branch.detect_repo_type")
    def test_default_name_and_moves_story(self, mock_detect, mock_exec):
        """--default uses the suggested name and moves the story to started."""
        mock_detect.return_value = RepoType.NORMAL
        mock_exec.return_value = self._ok()
        client = _client()
        client.get_story.return_value = _story()
        client.update_story_state.return_value = _story(workflow_state_id=20)

        assert cmd_branch(self._args(), client, cwd=Path("/repo")) == 0
        request = mock_exec.call_args[0][0]
        assert request.branch_name == "sc-42-fix-login"
        assert request.operation == GitOperation.CREATE_BRANCH
        client.update_story_state.assert_called_once_with(42, 20)

    @patch("sctui.commands.branch.execute_git_operation")
    @patch("sctui.commands.branch.detect_repo_type")
    def test_worktree_flag(self, mock_detect, mock_exec):
        """--worktree creates a sibling worktree."""
        mock_detect.return_value = RepoType.NORMAL
        mock_exec.return_value = self._ok("mine")
        client = _client()
        client.get_story.return_value = _story()
        cmd_branch(self._args(worktree=True, name="mine"), client, cwd=Path("/repo"))
        request = mock_exec.call_args[0][0]
        assert request.operation == GitOperation.CREATE_WORKTREE
        assert request.worktree_path == "../mine"

    @patch("sctui.commands.branch.detect_repo_type")
    def test_not_a_repo(self, mock_detect):
        """Outside a repository the command is a usage error."""
        mock_detect.return_value = RepoType.NOT_A_REPO
        assert cmd_branch(self._args(), _client(), cwd=Path("/tmp")) == 2

    @patch("sctui.commands.branch.execute_git_operation")
    @patch("sctui.commands.branch.detect_repo_type")
    def test_git_failure(self, mock_detect, mock_exec):
        """A failed git operation exits 1 and leaves the story alone."""
        mock_detect.return_value = RepoType.NORMAL
        mock_exec.return_value = GitBranchResult(
            success=False, message="Branch exists", story_id=42,
            branch_name="x", operation=GitOperation.CREATE_BRANCH,
        )
        client = _client()
        client.get_story.return_value = _story()
        assert cmd_branch(self._args(), client, cwd=Path("/repo")) == 1
        client.update_story_state.assert_not_called()

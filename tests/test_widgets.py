"""Tests for sctui.ui.widgets render functions."""

import io

from rich.console import Console

from sctui.api import Story, WorkflowState
from sctui.ui.keys import KeyEvent
from sctui.ui.state import AppState
from sctui.ui.widgets import render_board, render_list, render_popup, render_status


def _text(renderable):
    console = Console(file=io.StringIO(), width=160, color_system=None)
    console.print(renderable)
    return console.file.getvalue()


def _engine():
    states = [
        WorkflowState(id=10, name="To Do", position=0),
        WorkflowState(id=20, name="Done", position=1),
    ]
    stories = [
        Story(id=1, name="Write docs", workflow_state_id=10, position=1, owner_ids=["u1"]),
        Story(id=2, name="Ship it", workflow_state_id=20, position=2, story_type="bug"),
        Story(id=3, name="Orphan", workflow_state_id=99, position=3),
    ]
    engine = AppState(stories, states, "q", None)
    engine.add_member_to_cache("u1", "Ann (ann)")
    engine.set_current_user_id("u1")
    return engine


def _tall_engine(count=60):
    states = [WorkflowState(id=10, name="Backlog", position=0)]
    stories = [
        Story(id=i, name=f"Task {i:02d}", workflow_state_id=10, position=i)
        for i in range(1, count + 1)
    ]
    return AppState(stories, states)


class TestRender:
    """Board, list, popup and status rendering."""

    def test_board_has_columns_and_counts(self):
        """Each column header carries its story count; unknown-state stories are left out."""
        out = _text(render_board(_engine()))
        assert "To Do (1)" in out
        assert "Done (1)" in out
        assert "*#1 Write docs" in out
        assert "Orphan" not in out

    def test_list_shows_unknown_state(self):
        """The flat list keeps stories whose state is not loaded."""
        out = _text(render_list(_engine()))
        assert "Orphan" in out
        assert "Unknown" in out
        assert "Ann (ann)" in out

    def test_list_window(self):
        """Only the visible window of the flat list is drawn."""
        engine = _engine()
        engine.set_visible_rows(1)
        out = _text(render_list(engine))
        assert "Write docs" in out
        assert "Ship it" not in out

    def test_no_popup(self):
        """Nothing is drawn when no popup is open."""
        assert render_popup(_engine()) is None

    def test_detail_popup(self):
        """Detail shows the story id and a placeholder for an empty description."""
        engine = _engine()
        engine.handle_key(KeyEvent("enter"))
        out = _text(render_popup(engine))
        assert "#1" in out
        assert "(no description)" in out

    def test_status_bar(self):
        """Status bar shows the loaded count and the board hints."""
        out = _text(render_status(_engine()))
        assert "3 stories" in out
        assert "q quit" in out


class TestColumnHeaders:
    """State names from the tracker are shown literally."""

    def test_closing_tag_in_state_name(self):
        """A name that looks like a closing markup tag renders as text."""
        engine = AppState([], [WorkflowState(id=10, name="Done [/]", position=0)])
        assert "Done [/] (0)" in _text(render_board(engine))

    def test_bracketed_state_name_kept(self):
        """Bracketed words in a name are not swallowed as styles."""
        engine = AppState([], [WorkflowState(id=10, name="Review [qa]", position=0)])
        assert "Review [qa] (0)" in _text(render_board(engine))


class TestColumnWindow:
    """A column taller than the screen is windowed around the selected row."""

    def test_selection_below_fold_is_drawn(self):
        """Moving to the last story scrolls it into the drawn window."""
        engine = _tall_engine()
        engine.set_visible_rows(5, column_rows=10)
        for _ in range(59):
            engine.handle_key(KeyEvent("j"))
        out = _text(render_board(engine))
        assert "#60 Task 60" in out
        assert "#51 Task 51" in out
        assert "#50 Task 50" not in out
        assert "#1 Task 01" not in out

    def test_top_of_column_before_scrolling(self):
        """Without movement only the first column_rows stories are drawn."""
        engine = _tall_engine()
        engine.set_visible_rows(5, column_rows=10)
        out = _text(render_board(engine))
        assert "#10 Task 10" in out
        assert "#11 Task 11" not in out
        assert "Backlog (60)" in out

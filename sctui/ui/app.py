"""
Textual shell for the story board.

The screen forwards every key to AppState, runs the resulting intents through
IntentRunner, then redraws. Nothing here decides what a key means.
"""

import logging
from typing import Optional

from textual import events
from textual.app import App, ComposeResult
from textual.containers import Container
from textual.screen import Screen

from sctui.lib.constants import LINES_PER_LIST_ITEM
from sctui.ui.actions import IntentRunner
from sctui.ui.keys import KeyEvent
from sctui.ui.state import AppState
from sctui.ui.widgets import BoardView, PopupView, StatusBar

logger = logging.getLogger(__name__)


class BoardScreen(Screen):
    """Single screen; owns no bindings so every key reaches the engine."""

    inherit_bindings = False

    CSS = """
    BoardScreen {
        layers: base overlay;
    }

    #board-box {
        layer: base;
        height: 1fr;
        padding: 0 1;
    }

    #popup {
        layer: overlay;
        width: 80%;
        height: auto;
        max-height: 80%;
        offset: 10% 10%;
        background: $surface;
    }

    #status-bar {
        dock: bottom;
        height: 1;
        background: $surface;
        padding: 0 1;
    }
    """

    def __init__(self, engine: AppState, runner: IntentRunner) -> None:
        super().__init__()
        self.engine = engine
        self.runner = runner

    def compose(self) -> ComposeResult:
        yield Container(BoardView(id="board"), id="board-box")
        yield PopupView(id="popup")
        yield StatusBar(id="status-bar")

    def on_mount(self) -> None:
        self.redraw()

    def on_resize(self, event: events.Resize) -> None:
        self.redraw()

    def on_key(self, event: events.Key) -> None:
        event.stop()
        event.prevent_default()
        self.engine.handle_key(KeyEvent(key=event.key, character=event.character))

        pending = self.engine.take_intents()
        if not pending.is_empty():
            self.runner.run(pending)

        if self.engine.should_quit:
            self.app.exit()
            return
        self.redraw()

    def redraw(self) -> None:
        board_box = self.query_one("#board-box", Container)
        height = board_box.content_size.height
        if height > 0:
            # One line of the board goes to the column headers
            self.engine.set_visible_rows(max(1, height // LINES_PER_LIST_ITEM), column_rows=max(1, height - 1))

        self.query_one("#board", BoardView).draw(self.engine)
        self.query_one("#popup", PopupView).draw(self.engine)
        self.query_one("#status-bar", StatusBar).draw(self.engine)


class StoryBoardApp(App):
    """sc-tui main application."""

    TITLE = "sc-tui"

    def __init__(self, engine: AppState, runner: IntentRunner, title: Optional[str] = None) -> None:
        super().__init__()
        self.engine = engine
        self.runner = runner
        if title:
            self.title = title

    def on_mount(self) -> None:
        logger.info(f"Board started with {self.engine.total_loaded_stories} stories")
        self.push_screen(BoardScreen(self.engine, self.runner))

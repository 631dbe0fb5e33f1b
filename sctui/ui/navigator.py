"""
Selection cursors for the board.

Grouped mode keeps a (column, row) cursor plus a scroll offset for the active
column; flat mode keeps a list index plus its own scroll offset. Each mode's
cursor is independent of the other's.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from sctui.api import Story
from sctui.ui.view_model import ViewModel

DEFAULT_VISIBLE_ROWS = 10


def _scroll_window(selected: int, offset: int, visible: int, total: int) -> int:
    """Move the window the least amount that keeps the selection visible."""
    visible = max(1, visible)
    if selected < offset:
        offset = selected
    elif selected >= offset + visible:
        offset = selected - visible + 1
    return min(max(offset, 0), max(0, total - visible))


class ViewMode(str, Enum):
    COLUMNS = "columns"
    LIST = "list"


@dataclass
class Navigator:
    mode: ViewMode = ViewMode.COLUMNS
    selected_column: int = 0
    selected_row: int = 0
    list_selected_index: int = 0
    list_scroll_offset: int = 0
    visible_rows: int = DEFAULT_VISIBLE_ROWS  # stories that fit in the flat list window
    column_scroll_offset: int = 0
    column_rows: int = DEFAULT_VISIBLE_ROWS  # stories that fit in one column

    def toggle_mode(self, view: ViewModel) -> None:
        """Switch presentation; the entered mode's cursor starts from the top."""
        if self.mode == ViewMode.COLUMNS:
            self.mode = ViewMode.LIST
            self.list_selected_index = 0
            self.list_scroll_offset = 0
        else:
            self.mode = ViewMode.COLUMNS
            self.selected_column = 0
            self.selected_row = 0
            self.column_scroll_offset = 0
        self.clamp(view)

    def next(self, view: ViewModel) -> None:
        if self.mode == ViewMode.LIST:
            total = len(view.flat)
            if total == 0:
                return
            self.list_selected_index = (self.list_selected_index + 1) % total
            self.update_list_scroll(total)
        else:
            size = self._column_size(view)
            if size == 0:
                return
            self.selected_row = (self.selected_row + 1) % size
            self.update_column_scroll(size)

    def previous(self, view: ViewModel) -> None:
        if self.mode == ViewMode.LIST:
            total = len(view.flat)
            if total == 0:
                return
            self.list_selected_index = (self.list_selected_index - 1) % total
            self.update_list_scroll(total)
        else:
            size = self._column_size(view)
            if size == 0:
                return
            self.selected_row = (self.selected_row - 1) % size
            self.update_column_scroll(size)

    def next_column(self, view: ViewModel) -> None:
        if self.mode != ViewMode.COLUMNS or not view.columns:
            return
        self.selected_column = (self.selected_column + 1) % len(view.columns)
        self.selected_row = 0
        self.column_scroll_offset = 0

    def previous_column(self, view: ViewModel) -> None:
        if self.mode != ViewMode.COLUMNS or not view.columns:
            return
        self.selected_column = (self.selected_column - 1) % len(view.columns)
        self.selected_row = 0
        self.column_scroll_offset = 0

    def set_visible_rows(self, visible_rows: int, view: ViewModel, column_rows: Optional[int] = None) -> None:
        self.visible_rows = max(1, visible_rows)
        if column_rows is not None:
            self.column_rows = max(1, column_rows)
        self.update_list_scroll(len(view.flat))
        self.update_column_scroll(self._column_size(view))

    def update_list_scroll(self, total: int) -> None:
        self.list_scroll_offset = _scroll_window(
            self.list_selected_index, self.list_scroll_offset, self.visible_rows, total
        )

    def update_column_scroll(self, size: int) -> None:
        self.column_scroll_offset = _scroll_window(
            self.selected_row, self.column_scroll_offset, self.column_rows, size
        )

    def clamp(self, view: ViewModel) -> None:
        """Pull every index back inside the current view's bounds."""
        if view.columns:
            self.selected_column = min(max(self.selected_column, 0), len(view.columns) - 1)
        else:
            self.selected_column = 0
        size = self._column_size(view)
        self.selected_row = min(max(self.selected_row, 0), size - 1) if size else 0
        self.update_column_scroll(size)

        total = len(view.flat)
        self.list_selected_index = min(max(self.list_selected_index, 0), total - 1) if total else 0
        self.update_list_scroll(total)

    def select_story(self, view: ViewModel, story_id: int) -> bool:
        """Point the active mode's cursor at a story. Returns False if it is not shown."""
        if self.mode == ViewMode.LIST:
            idx = view.flat_index_of(story_id)
            if idx is None:
                return False
            self.list_selected_index = idx
            self.update_list_scroll(len(view.flat))
            return True

        pos = view.column_index_of(story_id)
        if pos is None:
            return False
        if pos[0] != self.selected_column:
            self.column_scroll_offset = 0
        self.selected_column, self.selected_row = pos
        self.update_column_scroll(self._column_size(view))
        return True

    def selected_story(self, view: ViewModel) -> Optional[Story]:
        if self.mode == ViewMode.LIST:
            if 0 <= self.list_selected_index < len(view.flat):
                return view.flat[self.list_selected_index]
            return None

        if not (0 <= self.selected_column < len(view.columns)):
            return None
        stories = view.columns[self.selected_column].stories
        if 0 <= self.selected_row < len(stories):
            return stories[self.selected_row]
        return None

    def _column_size(self, view: ViewModel) -> int:
        if 0 <= self.selected_column < len(view.columns):
            return len(view.columns[self.selected_column].stories)
        return 0

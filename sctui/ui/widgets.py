"""Widgets that draw AppState. They only read the engine, never mutate it."""

from typing import Optional

from rich.console import Group, RenderableType
from rich.panel import Panel
from rich.table import Table
from rich.text import Text
from textual.widgets import Static

from sctui.api import Story
from sctui.lib.constants import STORY_TYPES
from sctui.ui.forms import FormField, StoryForm
from sctui.ui.navigator import ViewMode
from sctui.ui.popups import CommentPopup, CreatePopup, EditPopup, StateSelectorPopup
from sctui.ui.state import AppState

TYPE_COLORS = {"feature": "yellow", "bug": "red", "chore": "blue"}
SELECTED_STYLE = "reverse"
OWNED_MARK = "*"

HINTS = {
    "none": "j/k move  h/l column  v view  enter detail  m move  a add  e edit  o own  n more  r refresh  g branch  q quit",
    "detail": "c comment  esc close",
    "state_selector": "j/k choose  enter confirm  esc cancel",
    "create": "tab next field  enter/ctrl+s submit  arrows change type  esc cancel",
    "edit": "tab next field  enter/ctrl+s save  arrows change type  esc cancel",
    "comment": "enter newline  ctrl+enter/ctrl+s submit  esc cancel",
}


def _story_line(state: AppState, story: Story, selected: bool) -> Text:
    mark = OWNED_MARK if state.is_owned_by_current_user(story) else " "
    line = Text(f"{mark}#{story.id} ", style="bold" if mark == OWNED_MARK else "")
    line.append(story.name)
    if selected:
        line.stylize(SELECTED_STYLE)
    return line


def render_board(state: AppState) -> RenderableType:
    if not state.columns:
        return Text("No workflow states", style="dim")

    table = Table(expand=True, show_lines=False, box=None, padding=(0, 1))
    cells = []
    for col_idx, column in enumerate(state.columns):
        active = col_idx == state.selected_column
        header = Text(f"{column.name} ({len(column)})")
        table.add_column(header, header_style="bold cyan" if active else "bold", ratio=1, no_wrap=True)
        # Only the active column scrolls; the others show their top rows
        start = state.column_scroll_offset if active else 0
        window = column.stories[start:start + state.column_rows]
        lines = [
            _story_line(state, story, active and start + offset == state.selected_row)
            for offset, story in enumerate(window)
        ]
        cells.append(Text("\n").join(lines) if lines else Text("-", style="dim"))
    table.add_row(*cells)
    return table


def render_list(state: AppState) -> RenderableType:
    """Flat list window: two lines per story, starting at the scroll offset."""
    stories = state.flat_list
    if not stories:
        return Text("No stories", style="dim")

    start = state.list_scroll_offset
    window = stories[start:start + state.visible_rows]
    lines = []
    for offset, story in enumerate(window):
        selected = start + offset == state.list_selected_index
        lines.append(_story_line(state, story, selected))
        owners = ", ".join(state.owner_names(story)) or "unowned"
        detail = Text(f"   {state.state_name(story.workflow_state_id)}  ", style="dim")
        detail.append(story.story_type, style=TYPE_COLORS.get(story.story_type, ""))
        detail.append(f"  {owners}", style="dim")
        lines.append(detail)
    return Text("\n").join(lines)


def render_detail(state: AppState, story: Story) -> RenderableType:
    body = Text()
    body.append(story.name + "\n", style="bold")
    body.append(f"State: {state.state_name(story.workflow_state_id)}   ")
    body.append(f"Type: {story.story_type}\n", style=TYPE_COLORS.get(story.story_type, ""))
    body.append(f"Owners: {', '.join(state.owner_names(story)) or 'none'}\n")
    if story.labels:
        body.append(f"Labels: {', '.join(label.name for label in story.labels)}\n")
    if story.app_url:
        body.append(f"{story.app_url}\n", style="dim underline")
    body.append("\n")
    body.append(story.description or "(no description)")
    if story.comments:
        body.append("\n\nComments:\n", style="bold")
        for comment in story.comments:
            author = state.member_cache.get(comment.author_id, comment.author_id or "unknown")
            body.append(f"{author}: ", style="cyan")
            body.append(comment.text + "\n")
    return Panel(body, title=f"#{story.id}", border_style="green")


def render_state_selector(state: AppState, data: StateSelectorPopup) -> RenderableType:
    lines = []
    for idx, ws in enumerate(data.candidates):
        lines.append(Text(f" {ws.name} ", style=SELECTED_STYLE if idx == data.index else ""))
    body = Text("\n").join(lines) if lines else Text("No other states", style="dim")
    return Panel(body, title=f"Move #{data.story_id} to", border_style="cyan")


def _field(label: str, value: str, focused: bool) -> Text:
    text = Text(f"{label}: ", style="bold cyan" if focused else "bold")
    text.append(value + ("_" if focused else ""))
    return text


def _render_form(form: StoryForm, title: str) -> RenderableType:
    types = Text("Type: ", style="bold cyan" if form.focus == FormField.TYPE else "bold")
    for idx, name in enumerate(STORY_TYPES):
        style = SELECTED_STYLE if idx == form.type_index else "dim"
        types.append(f" {name} ", style=style)
    return Panel(
        Group(
            _field("Name", form.name.text, form.focus == FormField.NAME),
            _field("Description", form.description.text, form.focus == FormField.DESCRIPTION),
            types,
        ),
        title=title,
        border_style="yellow",
    )


def render_popup(state: AppState) -> Optional[RenderableType]:
    data = state.popup
    if data is None:
        return None
    if state.show_detail:
        story = state.popup_story()
        return render_detail(state, story) if story else None
    if isinstance(data, StateSelectorPopup):
        return render_state_selector(state, data)
    if isinstance(data, CreatePopup):
        return _render_form(data.form, "New story")
    if isinstance(data, EditPopup):
        return _render_form(data.form, f"Edit #{data.story_id}")
    if isinstance(data, CommentPopup):
        return Panel(Text(data.buffer.text + "_"), title=f"Comment on #{data.story_id}", border_style="magenta")
    return None


def render_status(state: AppState) -> Text:
    text = Text()
    if state.is_loading:
        text.append("Loading... ", style="yellow")
    more = "+" if state.has_more_stories() else ""
    text.append(f"{state.total_loaded_stories}{more} stories  ", style="dim")
    if state.status_message:
        text.append(state.status_message + "  ")
    text.append(HINTS.get(state.popup_state, ""), style="dim")
    return text


class BoardView(Static):
    """Grouped columns or the flat list, depending on the engine's mode."""

    def draw(self, state: AppState) -> None:
        self.update(render_list(state) if state.mode == ViewMode.LIST else render_board(state))


class PopupView(Static):
    """Overlay for the open popup; hidden when none is open."""

    def draw(self, state: AppState) -> None:
        renderable = render_popup(state)
        self.display = renderable is not None
        if renderable is not None:
            self.update(renderable)


class StatusBar(Static):

    def draw(self, state: AppState) -> None:
        self.update(render_status(state))

"""
Application state engine.

AppState is the single owner of everything the board shows: the loaded
stories, the derived view model, selection cursors, the open popup and the
intents waiting for the I/O layer. All changes go through its methods. It never
talks to the network; remote work is requested through intent fields and the
results are fed back through merge_stories, replace_story and friends.
"""

import logging
from typing import Optional

from sctui.api import Story, WorkflowState
from sctui.ui import popups as popup_states
from sctui.ui.forms import FormField
from sctui.ui.intents import (
    AddCommentIntent,
    CreateStoryIntent,
    MoveStoryIntent,
    PendingIntents,
    UpdateDetailsIntent,
)
from sctui.ui.keys import KeyEvent, dispatch
from sctui.ui.navigator import Navigator, ViewMode
from sctui.ui.pagination import merge
from sctui.ui.popups import (
    CommentPopup,
    CreatePopup,
    DetailPopup,
    EditPopup,
    PopupController,
    StateSelectorPopup,
)
from sctui.ui.view_model import Column, ViewModel, rebuild

logger = logging.getLogger(__name__)


class AppState:
    def __init__(
        self,
        stories: list[Story],
        workflow_states: list[WorkflowState],
        search_query: str = "",
        next_page_token: Optional[str] = None,
    ):
        self.workflow_states = list(workflow_states)
        self.search_query = search_query
        self.next_page_token = next_page_token
        self.stories, _ = merge([], stories, next_page_token)

        self.view: ViewModel = rebuild(self.stories, self.workflow_states)
        self.nav = Navigator()
        self.popups = PopupController(self.workflow_states)

        self.is_loading = False
        self.status_message = ""
        self.member_cache: dict[str, str] = {}  # member id -> display name
        self.current_user_id: Optional[str] = None

        # Intents
        self.create_requested: Optional[CreateStoryIntent] = None
        self.edit_requested: Optional[UpdateDetailsIntent] = None
        self.move_to_state_requested: Optional[MoveStoryIntent] = None
        self.add_comment_requested: Optional[AddCommentIntent] = None
        self.take_ownership_requested: Optional[int] = None
        self.branch_requested: Optional[int] = None
        self.load_more_requested = False
        self.refresh_requested = False
        self.should_quit = False

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @property
    def mode(self) -> ViewMode:
        return self.nav.mode

    @property
    def columns(self) -> list[Column]:
        return self.view.columns

    @property
    def flat_list(self) -> list[Story]:
        return self.view.flat

    @property
    def selected_column(self) -> int:
        return self.nav.selected_column

    @property
    def selected_row(self) -> int:
        return self.nav.selected_row

    @property
    def list_selected_index(self) -> int:
        return self.nav.list_selected_index

    @property
    def list_scroll_offset(self) -> int:
        return self.nav.list_scroll_offset

    @property
    def visible_rows(self) -> int:
        return self.nav.visible_rows

    @property
    def column_scroll_offset(self) -> int:
        return self.nav.column_scroll_offset

    @property
    def column_rows(self) -> int:
        return self.nav.column_rows

    @property
    def total_loaded_stories(self) -> int:
        return len(self.stories)

    def has_more_stories(self) -> bool:
        return self.next_page_token is not None

    def selected_story(self) -> Optional[Story]:
        return self.nav.selected_story(self.view)

    def find_story(self, story_id: int) -> Optional[Story]:
        for story in self.stories:
            if story.id == story_id:
                return story
        return None

    def state_name(self, workflow_state_id: int) -> str:
        return self.view.state_name(workflow_state_id)

    @property
    def popup_state(self) -> str:
        return self.popups.state

    @property
    def popup(self):
        """Data of the open popup, or None."""
        return self.popups.data

    @property
    def show_detail(self) -> bool:
        return self.popups.state == popup_states.DETAIL

    @property
    def show_state_selector(self) -> bool:
        return self.popups.state == popup_states.STATE_SELECTOR

    @property
    def show_create_popup(self) -> bool:
        return self.popups.state == popup_states.CREATE

    @property
    def show_edit_popup(self) -> bool:
        return self.popups.state == popup_states.EDIT

    @property
    def show_comment_popup(self) -> bool:
        return self.popups.state == popup_states.COMMENT

    def popup_story(self) -> Optional[Story]:
        """Story the open popup is about (None for create or when closed)."""
        story_id = getattr(self.popups.data, "story_id", None)
        return self.find_story(story_id) if story_id is not None else None

    def owner_names(self, story: Story) -> list[str]:
        return [self.member_cache.get(owner_id, owner_id) for owner_id in story.owner_ids]

    def is_owned_by_current_user(self, story: Story) -> bool:
        return self.current_user_id is not None and self.current_user_id in story.owner_ids

    # ------------------------------------------------------------------
    # Feed-back from the I/O layer
    # ------------------------------------------------------------------

    def merge_stories(self, stories: list[Story], next_page_token: Optional[str]) -> None:
        """Add a fetched page. Selection follows the selected story if it is still shown."""
        before = len(self.stories)
        self.stories, self.next_page_token = merge(self.stories, stories, next_page_token)
        self._rebuild()
        self.is_loading = False
        self.load_more_requested = False
        logger.debug(f"Loaded {len(self.stories) - before} more stories, {len(self.stories)} total")

    def load_more_failed(self) -> None:
        self.is_loading = False
        self.load_more_requested = False

    def replace_story(self, story: Story) -> None:
        for idx, existing in enumerate(self.stories):
            if existing.id == story.id:
                self.stories[idx] = story
                self._rebuild()
                return
        logger.debug(f"replace_story: story {story.id} is not loaded, ignoring")

    def add_created_story(self, story: Story) -> None:
        if self.find_story(story.id) is not None:
            self.replace_story(story)
            return
        self.stories.append(story)
        self._rebuild()

    def reset_stories(self, stories: list[Story], next_page_token: Optional[str]) -> None:
        """Replace the whole story set (refresh). Cursors return to the start."""
        self.stories, self.next_page_token = merge([], stories, next_page_token)
        self.view = rebuild(self.stories, self.workflow_states)
        self.nav.selected_column = 0
        self.nav.selected_row = 0
        self.nav.list_selected_index = 0
        self.nav.list_scroll_offset = 0
        self.nav.column_scroll_offset = 0
        self.nav.clamp(self.view)
        self.is_loading = False
        self.load_more_requested = False

    def set_current_user_id(self, member_id: str) -> None:
        self.current_user_id = member_id

    def add_member_to_cache(self, member_id: str, display_name: str) -> None:
        self.member_cache[member_id] = display_name

    def set_status(self, text: str) -> None:
        self.status_message = text

    def set_visible_rows(self, visible_rows: int, column_rows: Optional[int] = None) -> None:
        """Window sizes from the screen: list items, and story lines per column."""
        self.nav.set_visible_rows(visible_rows, self.view, column_rows)

    def request_load_more(self) -> bool:
        """Ask for the next page unless one is already loading or none is left."""
        if self.is_loading:
            return False
        if self.next_page_token is None:
            self.set_status("No more stories to load")
            return False
        self.load_more_requested = True
        self.is_loading = True
        return True

    def take_intents(self) -> PendingIntents:
        """Hand pending requests to the I/O layer and clear them."""
        pending = PendingIntents(
            create=self.create_requested,
            edit=self.edit_requested,
            move=self.move_to_state_requested,
            comment=self.add_comment_requested,
            take_ownership=self.take_ownership_requested,
            branch=self.branch_requested,
            load_more=self.load_more_requested,
            refresh=self.refresh_requested,
        )
        self.create_requested = None
        self.edit_requested = None
        self.move_to_state_requested = None
        self.add_comment_requested = None
        self.take_ownership_requested = None
        self.branch_requested = None
        self.load_more_requested = False
        self.refresh_requested = False
        return pending

    def _rebuild(self) -> None:
        selected = self.selected_story()
        self.view = rebuild(self.stories, self.workflow_states)
        self.nav.clamp(self.view)
        if selected is not None:
            self.nav.select_story(self.view, selected.id)

    # ------------------------------------------------------------------
    # Input
    # ------------------------------------------------------------------

    def handle_key(self, event: KeyEvent) -> None:
        action = dispatch(self.popups.state, event)
        if action is None:
            return
        logger.debug(f"key {event.key!r} -> {action}")
        getattr(self, f"_do_{action}")(event)

    # Board

    def _do_quit(self, event: KeyEvent) -> None:
        self.should_quit = True

    def _do_next(self, event: KeyEvent) -> None:
        self.nav.next(self.view)

    def _do_previous(self, event: KeyEvent) -> None:
        self.nav.previous(self.view)

    def _do_next_column(self, event: KeyEvent) -> None:
        self.nav.next_column(self.view)

    def _do_previous_column(self, event: KeyEvent) -> None:
        self.nav.previous_column(self.view)

    def _do_toggle_view(self, event: KeyEvent) -> None:
        self.nav.toggle_mode(self.view)

    def _do_open_detail(self, event: KeyEvent) -> None:
        self.popups.open_detail(story=self.selected_story())

    def _do_open_state_selector(self, event: KeyEvent) -> None:
        self.popups.open_state_selector(story=self.selected_story())

    def _do_open_create(self, event: KeyEvent) -> None:
        self.popups.open_create()

    def _do_open_edit(self, event: KeyEvent) -> None:
        self.popups.open_edit(story=self.selected_story())

    def _do_take_ownership(self, event: KeyEvent) -> None:
        story = self.selected_story()
        if story is not None:
            self.take_ownership_requested = story.id

    def _do_load_more(self, event: KeyEvent) -> None:
        self.request_load_more()

    def _do_refresh(self, event: KeyEvent) -> None:
        self.refresh_requested = True

    def _do_git_branch(self, event: KeyEvent) -> None:
        story = self.selected_story()
        if story is not None:
            self.branch_requested = story.id

    # Shared

    def _do_close_popup(self, event: KeyEvent) -> None:
        self.popups.close()

    # Detail

    def _do_open_comment(self, event: KeyEvent) -> None:
        if isinstance(self.popups.data, DetailPopup):
            self.popups.open_comment(story=self.popup_story())

    # State selector

    def _do_selector_next(self, event: KeyEvent) -> None:
        if isinstance(self.popups.data, StateSelectorPopup):
            self.popups.data.next()

    def _do_selector_previous(self, event: KeyEvent) -> None:
        if isinstance(self.popups.data, StateSelectorPopup):
            self.popups.data.previous()

    def _do_selector_confirm(self, event: KeyEvent) -> None:
        data = self.popups.data
        if not isinstance(data, StateSelectorPopup):
            return
        target = data.selected
        if target is not None:
            self.move_to_state_requested = MoveStoryIntent(
                story_id=data.story_id, workflow_state_id=target.id
            )
        self.popups.close()

    # Create / edit

    def _form(self):
        data = self.popups.data
        if isinstance(data, (CreatePopup, EditPopup)):
            return data.form
        return None

    def _do_form_focus_next(self, event: KeyEvent) -> None:
        form = self._form()
        if form is not None:
            form.focus_next()

    def _do_form_focus_previous(self, event: KeyEvent) -> None:
        form = self._form()
        if form is not None:
            form.focus_previous()

    def _do_form_insert(self, event: KeyEvent) -> None:
        form = self._form()
        if form is not None and event.character:
            form.insert(event.character)

    def _do_form_backspace(self, event: KeyEvent) -> None:
        form = self._form()
        if form is not None:
            form.backspace()

    def _do_form_type_next(self, event: KeyEvent) -> None:
        form = self._form()
        if form is not None and form.focus == FormField.TYPE:
            form.next_type()

    def _do_form_type_previous(self, event: KeyEvent) -> None:
        form = self._form()
        if form is not None and form.focus == FormField.TYPE:
            form.previous_type()

    def _do_form_enter(self, event: KeyEvent) -> None:
        form = self._form()
        if form is None:
            return
        if form.focus == FormField.DESCRIPTION:
            form.insert("\n")
        else:
            self._submit_form()

    def _do_form_submit(self, event: KeyEvent) -> None:
        self._submit_form()

    def _do_form_cancel(self, event: KeyEvent) -> None:
        self.popups.close()

    def _submit_form(self) -> None:
        data = self.popups.data
        if not isinstance(data, (CreatePopup, EditPopup)):
            return
        if data.form.name.is_blank():
            return

        name, description, story_type = data.form.values()
        name = name.strip()
        if isinstance(data, CreatePopup):
            self.create_requested = CreateStoryIntent(
                name=name, description=description, story_type=story_type
            )
        elif data.is_changed():
            self.edit_requested = UpdateDetailsIntent(
                story_id=data.story_id,
                name=name,
                description=description,
                story_type=story_type,
            )
        self.popups.close()

    # Comment

    def _do_comment_insert(self, event: KeyEvent) -> None:
        if isinstance(self.popups.data, CommentPopup) and event.character:
            self.popups.data.buffer.insert(event.character)

    def _do_comment_backspace(self, event: KeyEvent) -> None:
        if isinstance(self.popups.data, CommentPopup):
            self.popups.data.buffer.backspace()

    def _do_comment_newline(self, event: KeyEvent) -> None:
        if isinstance(self.popups.data, CommentPopup):
            self.popups.data.buffer.insert("\n")

    def _do_comment_submit(self, event: KeyEvent) -> None:
        data = self.popups.data
        if not isinstance(data, CommentPopup) or data.buffer.is_blank():
            return
        self.add_comment_requested = AddCommentIntent(story_id=data.story_id, text=data.buffer.text)
        self.popups.close()

"""Popup state machine using the transitions library.

At most one popup is open at a time. Each popup owns its own input buffers,
which are dropped whenever the popup closes.

Usage:
    from sctui.ui.popups import PopupController

    popups = PopupController()
    popups.open_detail(story=story)   # none -> detail
    popups.open_comment(story=story)  # detail -> comment
    popups.close()                    # comment -> none
"""

import logging
from dataclasses import dataclass, field
from typing import Optional, Union

from transitions import Machine

from sctui.api import Story, WorkflowState
from sctui.ui.forms import StoryForm, TextBuffer

logger = logging.getLogger(__name__)


NONE = "none"
DETAIL = "detail"
STATE_SELECTOR = "state_selector"
CREATE = "create"
EDIT = "edit"
COMMENT = "comment"

STATES = [
    {"name": NONE},
    {"name": DETAIL, "on_enter": "_enter_detail", "on_exit": "_clear_popup_data"},
    {"name": STATE_SELECTOR, "on_enter": "_enter_state_selector", "on_exit": "_clear_popup_data"},
    {"name": CREATE, "on_enter": "_enter_create", "on_exit": "_clear_popup_data"},
    {"name": EDIT, "on_enter": "_enter_edit", "on_exit": "_clear_popup_data"},
    {"name": COMMENT, "on_enter": "_enter_comment", "on_exit": "_clear_popup_data"},
]

STATE_NAMES = [s["name"] for s in STATES]

# Every popup but create needs a story passed as story=...
TRANSITIONS = [
    {"trigger": "open_detail", "source": NONE, "dest": DETAIL, "conditions": "_has_story"},
    {"trigger": "open_state_selector", "source": NONE, "dest": STATE_SELECTOR, "conditions": "_has_story"},
    {"trigger": "open_create", "source": NONE, "dest": CREATE},
    {"trigger": "open_edit", "source": NONE, "dest": EDIT, "conditions": "_has_story"},
    # Comments are written from the detail view only
    {"trigger": "open_comment", "source": DETAIL, "dest": COMMENT, "conditions": "_has_story"},
    {"trigger": "close", "source": [DETAIL, STATE_SELECTOR, CREATE, EDIT, COMMENT], "dest": NONE},
]


@dataclass
class DetailPopup:
    story_id: int


@dataclass
class StateSelectorPopup:
    story_id: int
    candidates: list[WorkflowState]  # every known state except the story's current one
    index: int = 0

    def next(self) -> None:
        if self.candidates:
            self.index = (self.index + 1) % len(self.candidates)

    def previous(self) -> None:
        if self.candidates:
            self.index = (self.index - 1) % len(self.candidates)

    @property
    def selected(self) -> Optional[WorkflowState]:
        if 0 <= self.index < len(self.candidates):
            return self.candidates[self.index]
        return None


@dataclass
class CreatePopup:
    form: StoryForm = field(default_factory=StoryForm)


@dataclass
class EditPopup:
    story_id: int
    form: StoryForm
    seed: tuple[str, str, str]  # (name, description, type) at open time

    def is_changed(self) -> bool:
        return self.form.values() != self.seed


@dataclass
class CommentPopup:
    story_id: int
    buffer: TextBuffer = field(default_factory=TextBuffer)


PopupData = Union[DetailPopup, StateSelectorPopup, CreatePopup, EditPopup, CommentPopup]


class PopupController:
    """Tracks which popup is open and the buffers that belong to it.

    Triggers that are not valid from the current state are ignored and
    return False, as do triggers whose guard fails.
    """

    def __init__(self, workflow_states: Optional[list[WorkflowState]] = None):
        """
        Args:
            workflow_states: Known states in column order, used for the state selector
        """
        self.workflow_states = list(workflow_states or [])
        self.data: Optional[PopupData] = None

        self.machine = Machine(
            model=self,
            states=STATES,
            transitions=TRANSITIONS,
            initial=NONE,
            auto_transitions=False,
            ignore_invalid_triggers=True,
            send_event=True,
            after_state_change="_log_transition",
        )

    def _has_story(self, event) -> bool:
        return isinstance(event.kwargs.get("story"), Story)

    def _enter_detail(self, event) -> None:
        self.data = DetailPopup(story_id=event.kwargs["story"].id)

    def _enter_state_selector(self, event) -> None:
        story = event.kwargs["story"]
        candidates = [s for s in self.workflow_states if s.id != story.workflow_state_id]
        self.data = StateSelectorPopup(story_id=story.id, candidates=candidates)

    def _enter_create(self, event) -> None:
        self.data = CreatePopup()

    def _enter_edit(self, event) -> None:
        story = event.kwargs["story"]
        form = StoryForm.from_story(story)
        self.data = EditPopup(story_id=story.id, form=form, seed=form.values())

    def _enter_comment(self, event) -> None:
        self.data = CommentPopup(story_id=event.kwargs["story"].id)

    def _clear_popup_data(self, event) -> None:
        self.data = None

    def _log_transition(self, event) -> None:
        logger.debug(f"[popup] {event.transition.source} -> {event.transition.dest} ({event.event.name})")

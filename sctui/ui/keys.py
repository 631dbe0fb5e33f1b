"""
Key dispatch table.

Maps (popup state, key name) to an engine action name. Only the active popup's
keymap is consulted; the base keymap applies when no popup is open. Key names
follow Textual's naming ("j", "down", "shift+tab", "ctrl+s").
"""

from dataclasses import dataclass
from typing import Optional

from sctui.ui.popups import COMMENT, CREATE, DETAIL, EDIT, NONE, STATE_SELECTOR


@dataclass(frozen=True)
class KeyEvent:
    key: str
    character: Optional[str] = None

    @property
    def is_printable(self) -> bool:
        return (
            self.character is not None
            and len(self.character) == 1
            and self.character.isprintable()
        )

    @classmethod
    def char(cls, character: str) -> "KeyEvent":
        """Event for a typed character (space is named "space" like Textual does)."""
        return cls(key="space" if character == " " else character, character=character)


def _bind(state: str, keys: list[str], action: str) -> dict[tuple[str, str], str]:
    return {(state, key): action for key in keys}


def _form_keys(state: str) -> dict[tuple[str, str], str]:
    return {
        **_bind(state, ["tab"], "form_focus_next"),
        **_bind(state, ["shift+tab"], "form_focus_previous"),
        **_bind(state, ["backspace"], "form_backspace"),
        **_bind(state, ["enter"], "form_enter"),
        **_bind(state, ["ctrl+s"], "form_submit"),
        **_bind(state, ["down", "right"], "form_type_next"),
        **_bind(state, ["up", "left"], "form_type_previous"),
        **_bind(state, ["escape"], "form_cancel"),
    }


KEYMAP: dict[tuple[str, str], str] = {
    # Board
    **_bind(NONE, ["q"], "quit"),
    **_bind(NONE, ["j", "down"], "next"),
    **_bind(NONE, ["k", "up"], "previous"),
    **_bind(NONE, ["l", "right"], "next_column"),
    **_bind(NONE, ["h", "left"], "previous_column"),
    **_bind(NONE, ["v"], "toggle_view"),
    **_bind(NONE, ["enter"], "open_detail"),
    **_bind(NONE, ["m"], "open_state_selector"),
    **_bind(NONE, ["a"], "open_create"),
    **_bind(NONE, ["e"], "open_edit"),
    **_bind(NONE, ["o"], "take_ownership"),
    **_bind(NONE, ["n"], "load_more"),
    **_bind(NONE, ["r"], "refresh"),
    **_bind(NONE, ["g"], "git_branch"),
    # Detail
    **_bind(DETAIL, ["escape", "enter"], "close_popup"),
    **_bind(DETAIL, ["c"], "open_comment"),
    # State selector
    **_bind(STATE_SELECTOR, ["j", "down"], "selector_next"),
    **_bind(STATE_SELECTOR, ["k", "up"], "selector_previous"),
    **_bind(STATE_SELECTOR, ["enter"], "selector_confirm"),
    **_bind(STATE_SELECTOR, ["escape"], "close_popup"),
    # Create / edit
    **_form_keys(CREATE),
    **_form_keys(EDIT),
    # Comment
    **_bind(COMMENT, ["backspace"], "comment_backspace"),
    **_bind(COMMENT, ["enter"], "comment_newline"),
    # many terminals report ctrl+enter as ctrl+j
    **_bind(COMMENT, ["ctrl+enter", "ctrl+j", "ctrl+s"], "comment_submit"),
    **_bind(COMMENT, ["escape"], "close_popup"),
}

# Popups that take free text; printable keys without a binding are typed
TEXT_INPUT_ACTIONS = {
    CREATE: "form_insert",
    EDIT: "form_insert",
    COMMENT: "comment_insert",
}


def dispatch(popup_state: str, event: KeyEvent) -> Optional[str]:
    """Return the action for a key in the given popup state, or None to ignore it."""
    action = KEYMAP.get((popup_state, event.key))
    if action is not None:
        return action
    if event.is_printable:
        return TEXT_INPUT_ACTIONS.get(popup_state)
    return None

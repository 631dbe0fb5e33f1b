"""
Helpers shared by the sc-tui subcommands.
"""

import re
from typing import Optional

from sctui.api import ShortcutApi, WorkflowState, flatten_workflow_states


class InvalidStoryId(ValueError):
    """Story id argument is neither `42` nor `sc-42`."""


_STORY_ID_RE = re.compile(r"^(?:sc-)?(\d+)$", re.IGNORECASE)


def parse_story_id(value: str) -> int:
    match = _STORY_ID_RE.match(value.strip())
    if not match or int(match.group(1)) <= 0:
        raise InvalidStoryId(f"Invalid story id '{value}' (expected 42 or sc-42)")
    return int(match.group(1))


def load_states(client: ShortcutApi) -> list[WorkflowState]:
    return flatten_workflow_states(client.get_workflows())


def state_name(states: list[WorkflowState], state_id: int) -> str:
    for state in states:
        if state.id == state_id:
            return state.name
    return "Unknown"


def find_done_state(states: list[WorkflowState]) -> Optional[WorkflowState]:
    for state in states:
        if state.state_type == "done":
            return state
    return None

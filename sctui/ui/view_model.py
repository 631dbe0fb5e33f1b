"""
Board view model.

Derives the two presentations of a story set: one column per workflow state
(grouped mode) and a single position-ordered list (flat mode).
"""

from dataclasses import dataclass, field
from typing import Iterable, Optional

from sctui.api import Story, WorkflowState
from sctui.lib.constants import UNKNOWN_STATE_NAME


def story_sort_key(story: Story) -> tuple[int, int]:
    return (story.position, story.id)


@dataclass
class Column:
    """One workflow state and the stories currently in it."""
    state: WorkflowState
    stories: list[Story] = field(default_factory=list)

    @property
    def name(self) -> str:
        return self.state.name

    def __len__(self) -> int:
        return len(self.stories)


@dataclass
class ViewModel:
    columns: list[Column]
    flat: list[Story]
    state_names: dict[int, str]  # workflow_state_id -> name

    def state_name(self, workflow_state_id: int) -> str:
        return self.state_names.get(workflow_state_id, UNKNOWN_STATE_NAME)

    def column_index_of(self, story_id: int) -> Optional[tuple[int, int]]:
        """(column, row) of a story in grouped mode, or None if not shown there."""
        for col_idx, column in enumerate(self.columns):
            for row_idx, story in enumerate(column.stories):
                if story.id == story_id:
                    return col_idx, row_idx
        return None

    def flat_index_of(self, story_id: int) -> Optional[int]:
        for idx, story in enumerate(self.flat):
            if story.id == story_id:
                return idx
        return None


def rebuild(stories: Iterable[Story], workflow_states: list[WorkflowState]) -> ViewModel:
    """Build a view model from the current stories and known states.

    Columns follow the order of `workflow_states` and exist even when empty.
    Stories in a state that is not known are left out of the columns but stay
    in the flat list.
    """
    stories = list(stories)
    columns = [Column(state=state) for state in workflow_states]
    by_state = {column.state.id: column for column in columns}

    for story in stories:
        column = by_state.get(story.workflow_state_id)
        if column is not None:
            column.stories.append(story)

    for column in columns:
        column.stories.sort(key=story_sort_key)

    return ViewModel(
        columns=columns,
        flat=sorted(stories, key=story_sort_key),
        state_names={state.id: state.name for state in workflow_states},
    )

"""
Outbound requests raised by the engine and carried out by the I/O layer.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass
class CreateStoryIntent:
    name: str
    description: str
    story_type: str


@dataclass
class UpdateDetailsIntent:
    story_id: int
    name: str
    description: str
    story_type: str


@dataclass
class MoveStoryIntent:
    story_id: int
    workflow_state_id: int


@dataclass
class AddCommentIntent:
    story_id: int
    text: str


@dataclass
class PendingIntents:
    """Everything requested since the last hand-off."""
    create: Optional[CreateStoryIntent] = None
    edit: Optional[UpdateDetailsIntent] = None
    move: Optional[MoveStoryIntent] = None
    comment: Optional[AddCommentIntent] = None
    take_ownership: Optional[int] = None  # story id
    branch: Optional[int] = None  # story id
    load_more: bool = False
    refresh: bool = False

    def is_empty(self) -> bool:
        return not any((
            self.create, self.edit, self.move, self.comment,
            self.take_ownership is not None, self.branch is not None,
            self.load_more, self.refresh,
        ))

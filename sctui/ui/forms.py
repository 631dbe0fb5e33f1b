"""Input buffers for the create, edit and comment popups."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from sctui.api import Story
from sctui.lib.constants import STORY_TYPES


class FormField(str, Enum):
    NAME = "name"
    DESCRIPTION = "description"
    TYPE = "type"


# Tab order; wraps at both ends
FIELD_RING = (FormField.NAME, FormField.DESCRIPTION, FormField.TYPE)


def story_type_index(story_type: str) -> int:
    """Position of a type in STORY_TYPES; unknown types map to 0 (feature)."""
    try:
        return STORY_TYPES.index(story_type)
    except ValueError:
        return 0


@dataclass
class TextBuffer:
    text: str = ""

    def insert(self, char: str) -> None:
        self.text += char

    def backspace(self) -> None:
        self.text = self.text[:-1]

    def is_blank(self) -> bool:
        return not self.text.strip()


@dataclass
class StoryForm:
    """Name/description/type fields with a focus ring."""
    name: TextBuffer = field(default_factory=TextBuffer)
    description: TextBuffer = field(default_factory=TextBuffer)
    type_index: int = 0
    focus: FormField = FormField.NAME

    @classmethod
    def from_story(cls, story: Story) -> "StoryForm":
        return cls(
            name=TextBuffer(story.name),
            description=TextBuffer(story.description),
            type_index=story_type_index(story.story_type),
        )

    @property
    def story_type(self) -> str:
        return STORY_TYPES[self.type_index % len(STORY_TYPES)]

    def focus_next(self) -> None:
        idx = FIELD_RING.index(self.focus)
        self.focus = FIELD_RING[(idx + 1) % len(FIELD_RING)]

    def focus_previous(self) -> None:
        idx = FIELD_RING.index(self.focus)
        self.focus = FIELD_RING[(idx - 1) % len(FIELD_RING)]

    def focused_buffer(self) -> Optional[TextBuffer]:
        if self.focus == FormField.NAME:
            return self.name
        if self.focus == FormField.DESCRIPTION:
            return self.description
        return None

    def insert(self, char: str) -> None:
        buf = self.focused_buffer()
        if buf is not None:
            buf.insert(char)

    def backspace(self) -> None:
        buf = self.focused_buffer()
        if buf is not None:
            buf.backspace()

    def next_type(self) -> None:
        self.type_index = (self.type_index + 1) % len(STORY_TYPES)

    def previous_type(self) -> None:
        self.type_index = (self.type_index - 1) % len(STORY_TYPES)

    def values(self) -> tuple[str, str, str]:
        return self.name.text, self.description.text, self.story_type

"""
Shortcut domain records and the API capability interface.

Records are built by the client from JSON payloads and handed to the UI engine.
They are treated as immutable: an update replaces the whole record.
"""

from dataclasses import dataclass, field
from typing import Optional, Protocol


@dataclass
class Label:
    id: int
    name: str
    color: str = ""

    @classmethod
    def from_dict(cls, data: dict) -> "Label":
        return cls(id=data["id"], name=data.get("name", ""), color=data.get("color") or "")


@dataclass
class Comment:
    id: int
    text: str
    author_id: str = ""
    created_at: str = ""
    updated_at: str = ""

    @classmethod
    def from_dict(cls, data: dict) -> "Comment":
        return cls(
            id=data["id"],
            text=data.get("text") or "",
            author_id=data.get("author_id") or "",
            created_at=data.get("created_at") or "",
            updated_at=data.get("updated_at") or "",
        )


@dataclass
class Story:
    """A unit of work in the tracker."""
    id: int
    name: str
    workflow_state_id: int
    position: int
    description: str = ""
    story_type: str = "feature"  # feature, bug, chore
    owner_ids: list[str] = field(default_factory=list)
    app_url: str = ""
    labels: list[Label] = field(default_factory=list)
    comments: list[Comment] = field(default_factory=list)
    epic_id: Optional[int] = None
    formatted_vcs_branch_name: Optional[str] = None
    created_at: str = ""
    updated_at: str = ""

    @classmethod
    def from_dict(cls, data: dict) -> "Story":
        return cls(
            id=data["id"],
            name=data.get("name", ""),
            workflow_state_id=data["workflow_state_id"],
            position=data.get("position", 0),
            description=data.get("description") or "",
            story_type=data.get("story_type") or "feature",
            owner_ids=list(data.get("owner_ids") or []),
            app_url=data.get("app_url") or "",
            labels=[Label.from_dict(label) for label in data.get("labels") or []],
            comments=[Comment.from_dict(c) for c in data.get("comments") or []],
            epic_id=data.get("epic_id"),
            formatted_vcs_branch_name=data.get("formatted_vcs_branch_name"),
            created_at=data.get("created_at") or "",
            updated_at=data.get("updated_at") or "",
        )


@dataclass
class WorkflowState:
    """One stage of a board. `state_type` is unstarted, started or done."""
    id: int
    name: str
    position: int
    state_type: str = ""
    color: str = ""

    @classmethod
    def from_dict(cls, data: dict) -> "WorkflowState":
        return cls(
            id=data["id"],
            name=data.get("name", ""),
            position=data.get("position", 0),
            state_type=data.get("type") or data.get("state_type") or "",
            color=data.get("color") or "",
        )


@dataclass
class Workflow:
    id: int
    name: str
    states: list[WorkflowState] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict) -> "Workflow":
        return cls(
            id=data["id"],
            name=data.get("name", ""),
            states=[WorkflowState.from_dict(s) for s in data.get("states") or []],
        )


@dataclass
class Member:
    """Workspace member as returned by the members listing."""
    id: str
    name: str
    mention_name: str

    @property
    def display_name(self) -> str:
        return f"{self.name} ({self.mention_name})"

    @classmethod
    def from_dict(cls, data: dict) -> "Member":
        profile = data.get("profile") or {}
        return cls(
            id=data["id"],
            name=profile.get("name", ""),
            mention_name=profile.get("mention_name", ""),
        )


@dataclass
class CurrentMember:
    """The member that owns the API token."""
    id: str
    name: str
    mention_name: str

    @property
    def display_name(self) -> str:
        return f"{self.name} ({self.mention_name})"

    @classmethod
    def from_dict(cls, data: dict) -> "CurrentMember":
        return cls(
            id=data["id"],
            name=data.get("name", ""),
            mention_name=data.get("mention_name", ""),
        )


@dataclass
class StoriesPage:
    """One page of search results plus the token for the next page (None when exhausted)."""
    stories: list[Story]
    next_page_token: Optional[str] = None
    total: Optional[int] = None


def flatten_workflow_states(workflows: list[Workflow]) -> list[WorkflowState]:
    """All states across workflows, in workflow order then position, deduplicated by id."""
    seen: set[int] = set()
    states = []
    for workflow in workflows:
        for state in sorted(workflow.states, key=lambda s: (s.position, s.id)):
            if state.id in seen:
                continue
            seen.add(state.id)
            states.append(state)
    return states


class ShortcutApi(Protocol):
    """Remote operations the application depends on.

    Implemented by ShortcutClient and by test doubles.
    """

    def search_stories_page(self, query: str, next_page_token: Optional[str] = None) -> StoriesPage: ...

    def get_story(self, story_id: int) -> Story: ...

    def get_workflows(self) -> list[Workflow]: ...

    def get_members(self) -> list[Member]: ...

    def get_current_member(self) -> CurrentMember: ...

    def update_story_state(self, story_id: int, workflow_state_id: int) -> Story: ...

    def update_story_owners(self, story_id: int, owner_ids: list[str]) -> Story: ...

    def update_story_details(
        self, story_id: int, name: str, description: str, story_type: str
    ) -> Story: ...

    def create_story(
        self,
        name: str,
        description: str,
        story_type: str,
        requested_by_id: str,
        workflow_state_id: int,
    ) -> Story: ...

    def add_comment(self, story_id: int, text: str) -> Comment: ...

"""
Shortcut REST API client.

Thin synchronous wrapper over httpx. Every call either returns domain records
or raises ShortcutApiError; there is no retry.
"""

import logging
from typing import Any, Optional

import httpx
from pydantic import BaseModel

from sctui.api import (
    Comment,
    CurrentMember,
    Member,
    StoriesPage,
    Story,
    Workflow,
)
from sctui.lib.constants import DEFAULT_BASE_URL, DEFAULT_HTTP_TIMEOUT, DEFAULT_PAGE_SIZE

logger = logging.getLogger(__name__)


class ShortcutApiError(Exception):
    """Request failed or returned a non-2xx response."""

    def __init__(self, status_code: Optional[int], message: str):
        self.status_code = status_code  # None for transport errors
        self.message = message
        prefix = f"HTTP {status_code}: " if status_code is not None else ""
        super().__init__(f"{prefix}{message}")


# Request bodies

class StoryStateUpdate(BaseModel):
    workflow_state_id: int


class StoryOwnersUpdate(BaseModel):
    owner_ids: list[str]


class StoryDetailsUpdate(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None
    story_type: Optional[str] = None


class StoryCreate(BaseModel):
    name: str
    description: str = ""
    story_type: str = "feature"
    workflow_state_id: int
    requested_by_id: Optional[str] = None
    owner_ids: Optional[list[str]] = None


class CommentCreate(BaseModel):
    text: str


def parse_next_token(next_value: Optional[str]) -> Optional[str]:
    """Extract the pagination token from the search response's `next` field.

    The API returns a relative URL carrying a `next` query parameter; a bare
    token is returned unchanged.
    """
    if not next_value:
        return None
    if "?" not in next_value:
        return next_value
    return httpx.URL(next_value).params.get("next") or None


class ShortcutClient:
    """ShortcutApi implementation over HTTP."""

    def __init__(
        self,
        api_token: str,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = DEFAULT_HTTP_TIMEOUT,
        page_size: int = DEFAULT_PAGE_SIZE,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        """
        Args:
            api_token: Shortcut API token
            base_url: API root, e.g. https://api.app.shortcut.com/api/v3
            timeout: Per-request timeout in seconds
            page_size: Stories per search page
            transport: Optional httpx transport (tests pass a MockTransport)
        """
        self.page_size = page_size
        self._http = httpx.Client(
            base_url=base_url.rstrip("/"),
            headers={"Shortcut-Token": api_token, "Content-Type": "application/json"},
            timeout=timeout,
            transport=transport,
        )

    def close(self) -> None:
        self._http.close()

    def __enter__(self) -> "ShortcutClient":
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    def _request(self, method: str, path: str, body: Optional[BaseModel] = None, **kwargs) -> Any:
        if body is not None:
            kwargs["json"] = body.model_dump(exclude_none=True)
        logger.debug(f"{method} {path}")
        try:
            response = self._http.request(method, path, **kwargs)
        except httpx.TimeoutException as e:
            raise ShortcutApiError(None, f"Request timed out: {method} {path}") from e
        except httpx.RequestError as e:
            raise ShortcutApiError(None, f"Request failed: {e}") from e

        if response.is_error:
            message = response.text.strip() or response.reason_phrase
            logger.warning(f"{method} {path} failed: {response.status_code} {message}")
            raise ShortcutApiError(response.status_code, message)

        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as e:
            raise ShortcutApiError(response.status_code, f"Invalid JSON in response: {e}") from e

    def search_stories_page(self, query: str, next_page_token: Optional[str] = None) -> StoriesPage:
        params: dict[str, Any] = {"query": query, "page_size": self.page_size}
        if next_page_token:
            params["next"] = next_page_token
        data = self._request("GET", "/search/stories", params=params) or {}
        return StoriesPage(
            stories=[Story.from_dict(s) for s in data.get("data") or []],
            next_page_token=parse_next_token(data.get("next")),
            total=data.get("total"),
        )

    def get_story(self, story_id: int) -> Story:
        return Story.from_dict(self._request("GET", f"/stories/{story_id}"))

    def get_workflows(self) -> list[Workflow]:
        return [Workflow.from_dict(w) for w in self._request("GET", "/workflows") or []]

    def get_members(self) -> list[Member]:
        return [Member.from_dict(m) for m in self._request("GET", "/members") or []]

    def get_current_member(self) -> CurrentMember:
        return CurrentMember.from_dict(self._request("GET", "/member"))

    def update_story_state(self, story_id: int, workflow_state_id: int) -> Story:
        body = StoryStateUpdate(workflow_state_id=workflow_state_id)
        return Story.from_dict(self._request("PUT", f"/stories/{story_id}", body))

    def update_story_owners(self, story_id: int, owner_ids: list[str]) -> Story:
        body = StoryOwnersUpdate(owner_ids=owner_ids)
        return Story.from_dict(self._request("PUT", f"/stories/{story_id}", body))

    def update_story_details(
        self,
        story_id: int,
        name: Optional[str] = None,
        description: Optional[str] = None,
        story_type: Optional[str] = None,
    ) -> Story:
        body = StoryDetailsUpdate(name=name, description=description, story_type=story_type)
        return Story.from_dict(self._request("PUT", f"/stories/{story_id}", body))

    def create_story(
        self,
        name: str,
        description: str,
        story_type: str,
        requested_by_id: Optional[str],
        workflow_state_id: int,
        owner_ids: Optional[list[str]] = None,
    ) -> Story:
        body = StoryCreate(
            name=name,
            description=description,
            story_type=story_type,
            workflow_state_id=workflow_state_id,
            requested_by_id=requested_by_id,
            owner_ids=owner_ids,
        )
        return Story.from_dict(self._request("POST", "/stories", body))

    def add_comment(self, story_id: int, text: str) -> Comment:
        body = CommentCreate(text=text)
        return Comment.from_dict(self._request("POST", f"/stories/{story_id}/comments", body))

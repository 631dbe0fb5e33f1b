"""Search query construction and the initial story load."""

import logging
from typing import Optional

from sctui.api import ShortcutApi, Story
from sctui.ui.pagination import merge

logger = logging.getLogger(__name__)


def build_search_query(
    username: Optional[str],
    search: Optional[str] = None,
    all_stories: bool = False,
    requester: bool = False,
    story_type: Optional[str] = None,
) -> str:
    """
    Build a Shortcut search query.

    A custom search is used verbatim. Otherwise stories are filtered by owner
    (default) or requester, unless all_stories is set.
    """
    if search:
        return search

    parts = []
    if not all_stories and username:
        parts.append(f"requester:{username}" if requester else f"owner:{username}")
    if story_type:
        parts.append(f"type:{story_type}")
    parts.append("is:story")
    return " ".join(parts)


def load_initial_stories(
    client: ShortcutApi,
    query: str,
    limit: int,
) -> tuple[list[Story], Optional[str]]:
    """
    Fetch whole pages until at least `limit` stories are loaded or results run out.

    Stops early when a page adds nothing new.

    Returns:
        (stories, token for the next page or None)
    """
    stories: list[Story] = []
    token: Optional[str] = None

    while len(stories) < limit:
        page = client.search_stories_page(query, token)
        before = len(stories)
        stories, token = merge(stories, page.stories, page.next_page_token)
        if len(stories) == before:
            logger.debug("Page added no new stories, stopping")
            break
        if token is None:
            break

    logger.info(f"Loaded {len(stories)} stories for query {query!r}")
    return stories, token

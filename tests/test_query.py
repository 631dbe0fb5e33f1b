"""Tests for sctui.lib.query module."""

from unittest.mock import MagicMock

from sctui.api import StoriesPage, Story
from sctui.lib.query import build_search_query, load_initial_stories


def _story(story_id):
    return Story(id=story_id, name=f"Story {story_id}", workflow_state_id=10, position=story_id)


class TestBuildSearchQuery:
    """Search query construction."""

    def test_owner_by_default(self):
        """Owned stories are the default filter."""
        assert build_search_query("ann") == "owner:ann is:story"

    def test_requester(self):
        """--requester filters on requester."""
        assert build_search_query("ann", requester=True) == "requester:ann is:story"

    def test_all_stories(self):
        """--all drops the user filter."""
        assert build_search_query("ann", all_stories=True) == "is:story"

    def test_story_type(self):
        """A story type adds a type filter."""
        assert build_search_query("ann", story_type="bug") == "owner:ann type:bug is:story"

    def test_custom_search_wins(self):
        """A custom search replaces every other filter."""
        assert build_search_query("ann", search="label:x", story_type="bug") == "label:x"

    def test_no_username(self):
        """Without a username no user filter is added."""
        assert build_search_query(None) == "is:story"


class TestLoadInitialStories:
    """Initial paging."""

    def test_pages_until_limit(self):
        """Pages are fetched until the limit is reached, keeping whole pages."""
        client = MagicMock()
        client.search_stories_page.side_effect = [
            StoriesPage([_story(1), _story(2)], "p2"),
            StoriesPage([_story(3), _story(4)], "p3"),
        ]
        stories, token = load_initial_stories(client, "q", 3)
        assert [s.id for s in stories] == [1, 2, 3, 4]
        assert token == "p3"
        assert client.search_stories_page.call_count == 2
        client.search_stories_page.assert_any_call("q", "p2")

    def test_stops_when_exhausted(self):
        """A missing token ends paging."""
        client = MagicMock()
        client.search_stories_page.return_value = StoriesPage([_story(1)], None)
        stories, token = load_initial_stories(client, "q", 50)
        assert len(stories) == 1
        assert token is None

    def test_stops_when_page_adds_nothing(self):
        """A page with only known stories ends paging."""
        client = MagicMock()
        client.search_stories_page.return_value = StoriesPage([_story(1)], "same")
        stories, _ = load_initial_stories(client, "q", 50)
        assert len(stories) == 1
        assert client.search_stories_page.call_count == 2

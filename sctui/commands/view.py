"""
sc-tui view - Interactive story board.
"""

import logging

from sctui.api import ShortcutApi, flatten_workflow_states
from sctui.api.client import ShortcutApiError
from sctui.lib.config import Credentials
from sctui.lib.query import build_search_query, load_initial_stories
from sctui.ui.actions import IntentRunner
from sctui.ui.app import StoryBoardApp
from sctui.ui.state import AppState

logger = logging.getLogger(__name__)


def cmd_view(args, client: ShortcutApi, creds: Credentials) -> int:
    """Load the first stories and run the board until the user quits."""
    query = build_search_query(
        creds.user_id,
        search=args.search,
        all_stories=args.all,
        requester=args.requester,
        story_type=args.story_type,
    )
    limit = args.limit or creds.fetch_limit

    try:
        workflows = client.get_workflows()
        stories, next_token = load_initial_stories(client, query, limit)
    except ShortcutApiError as e:
        print(f"ERROR: Failed to load stories: {e}")
        return 1

    logger.info(f"Starting board with {len(stories)} stories for {query!r}")
    engine = AppState(stories, flatten_workflow_states(workflows), query, next_token)
    runner = IntentRunner(client, engine, workflows)
    runner.load_members()

    title = f"sc-tui: {creds.workspace}" if creds.workspace else "sc-tui"
    StoryBoardApp(engine, runner, title=title).run()
    return 0

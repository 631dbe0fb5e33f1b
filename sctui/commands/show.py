"""
sc-tui show - Print stories (or one story) without the TUI.
"""

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from sctui.api import ShortcutApi
from sctui.api.client import ShortcutApiError
from sctui.commands.common import InvalidStoryId, load_states, parse_story_id, state_name
from sctui.lib.config import Credentials
from sctui.lib.query import build_search_query, load_initial_stories


def cmd_show(args, client: ShortcutApi, creds: Credentials, console: Console = None) -> int:
    console = console or Console()

    try:
        story_id = parse_story_id(args.id) if args.id else None
    except InvalidStoryId as e:
        print(f"ERROR: {e}")
        return 2

    try:
        states = load_states(client)
        if story_id is not None:
            return _show_one(console, client, states, story_id)

        query = build_search_query(
            creds.user_id,
            search=args.search,
            all_stories=args.all,
            requester=args.requester,
            story_type=args.story_type,
        )
        stories, next_token = load_initial_stories(client, query, args.limit or creds.fetch_limit)
    except ShortcutApiError as e:
        print(f"ERROR: {e}")
        return 1

    if not stories:
        console.print("No stories found.")
        return 0

    table = Table(title=escape(query))
    table.add_column("ID", justify="right", style="cyan")
    table.add_column("State")
    table.add_column("Type")
    table.add_column("Name")
    for story in sorted(stories, key=lambda s: (s.position, s.id)):
        table.add_row(
            str(story.id),
            escape(state_name(states, story.workflow_state_id)),
            story.story_type,
            escape(story.name),
        )
    console.print(table)
    if next_token:
        console.print(f"[dim]More stories available; raise --limit above {len(stories)} to see them.[/dim]")
    return 0


def _show_one(console: Console, client: ShortcutApi, states, story_id: int) -> int:
    story = client.get_story(story_id)
    console.print(f"[bold]#{story.id} {escape(story.name)}[/bold]")
    console.print(f"State: {state_name(states, story.workflow_state_id)}   Type: {story.story_type}", markup=False)
    if story.owner_ids:
        console.print(f"Owners: {', '.join(story.owner_ids)}", markup=False)
    if story.app_url:
        console.print(story.app_url, markup=False)
    console.print()
    if story.description:
        console.print(story.description, markup=False)
    else:
        console.print("[dim](no description)[/dim]")
    for comment in story.comments:
        console.print(f"\n[cyan]{comment.author_id}[/cyan] {comment.created_at}")
        console.print(comment.text, markup=False)
    return 0

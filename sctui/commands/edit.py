"""
sc-tui edit - Change a story's name, description or type.
"""

from sctui.api import ShortcutApi
from sctui.api.client import ShortcutApiError
from sctui.commands.common import InvalidStoryId, parse_story_id


def cmd_edit(args, client: ShortcutApi) -> int:
    """Update only the fields given on the command line; no call if nothing changes."""
    try:
        story_id = parse_story_id(args.id)
    except InvalidStoryId as e:
        print(f"ERROR: {e}")
        return 2

    if args.name is None and args.description is None and args.type is None:
        print("ERROR: Nothing to change (use --name, --description or --type)")
        return 2
    if args.name is not None and not args.name.strip():
        print("ERROR: Story name cannot be empty")
        return 2

    try:
        story = client.get_story(story_id)
        name = args.name.strip() if args.name is not None else story.name
        description = args.description if args.description is not None else story.description
        story_type = args.type or story.story_type

        if (name, description, story_type) == (story.name, story.description, story.story_type):
            print(f"#{story_id} unchanged")
            return 0

        updated = client.update_story_details(
            story_id, name=name, description=description, story_type=story_type
        )
    except ShortcutApiError as e:
        print(f"ERROR: Failed to update story {story_id}: {e}")
        return 1

    print(f"Updated #{updated.id}: {updated.name}")
    return 0

"""
sc-tui add - Create a story.
"""

from sctui.api import ShortcutApi
from sctui.api.client import ShortcutApiError


def cmd_add(args, client: ShortcutApi) -> int:
    """Create a story in the first state of the first workflow, requested by the current member."""
    name = args.name.strip()
    if not name:
        print("ERROR: Story name cannot be empty")
        return 2

    try:
        workflows = client.get_workflows()
        if not workflows or not workflows[0].states:
            print("ERROR: No workflow states available")
            return 1
        first_state = workflows[0].states[0]
        me = client.get_current_member()
        story = client.create_story(
            name=name,
            description=args.description or "",
            story_type=args.type,
            requested_by_id=me.id,
            workflow_state_id=first_state.id,
        )
    except ShortcutApiError as e:
        print(f"ERROR: Failed to create story: {e}")
        return 1

    print(f"Created #{story.id}: {story.name}")
    if story.app_url:
        print(story.app_url)
    return 0

"""
sc-tui finish - Move a story to the first done state.
"""

from sctui.api import ShortcutApi
from sctui.api.client import ShortcutApiError
from sctui.commands.common import InvalidStoryId, find_done_state, load_states, parse_story_id


def cmd_finish(args, client: ShortcutApi) -> int:
    try:
        story_id = parse_story_id(args.id)
    except InvalidStoryId as e:
        print(f"ERROR: {e}")
        return 2

    try:
        done = find_done_state(load_states(client))
        if done is None:
            print("ERROR: No workflow state of type 'done' found")
            return 1
        story = client.update_story_state(story_id, done.id)
    except ShortcutApiError as e:
        print(f"ERROR: Failed to finish story {story_id}: {e}")
        return 1

    print(f"#{story.id} moved to {done.name}")
    return 0

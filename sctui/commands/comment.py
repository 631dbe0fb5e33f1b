"""
sc-tui comment - Add a comment to a story.
"""

import sys

from sctui.api import ShortcutApi
from sctui.api.client import ShortcutApiError
from sctui.commands.common import InvalidStoryId, parse_story_id


def cmd_comment(args, client: ShortcutApi) -> int:
    """Comment text comes from -m, or from stdin when -m is not given."""
    try:
        story_id = parse_story_id(args.id)
    except InvalidStoryId as e:
        print(f"ERROR: {e}")
        return 2

    text = args.message if args.message is not None else sys.stdin.read()
    if not text.strip():
        print("ERROR: Comment text cannot be empty")
        return 2

    try:
        comment = client.add_comment(story_id, text)
    except ShortcutApiError as e:
        print(f"ERROR: Failed to comment on story {story_id}: {e}")
        return 1

    print(f"Comment {comment.id} added to #{story_id}")
    return 0

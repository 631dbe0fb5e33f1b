"""Merge fetched search pages into the loaded story set."""

import logging
from typing import Iterable, Optional

from sctui.api import Story

logger = logging.getLogger(__name__)


def merge(
    existing: list[Story],
    incoming: Iterable[Story],
    next_token: Optional[str],
) -> tuple[list[Story], Optional[str]]:
    """
    Append stories from a new page, skipping ids that are already loaded.

    Existing records win over incoming ones, and within a page the first
    occurrence of an id wins. The returned token always replaces the previous
    one; None means there are no more pages.

    Returns:
        (merged stories, updated token)
    """
    merged = list(existing)
    seen = {story.id for story in merged}
    skipped = 0

    for story in incoming:
        if story.id in seen:
            skipped += 1
            continue
        seen.add(story.id)
        merged.append(story)

    added = len(merged) - len(existing)
    logger.debug(f"[pagination] merged {added} new stories ({skipped} duplicates), more={next_token is not None}")
    return merged, next_token

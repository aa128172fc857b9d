"""Artwork selection for feed items and channels."""

import logging
from typing import Callable

from .models import ChannelMetadata, ItemMetadata

logger = logging.getLogger(__name__)

Probe = Callable[[str], bool]

YTIMG_BASE = "https://i.ytimg.com/vi_webp"


def item_thumbnail_candidates(item_id: str) -> list[str]:
    """High-resolution thumbnail URLs for a YouTube item, best first."""
    return [
        f"{YTIMG_BASE}/{item_id}/maxresdefault.webp",
        f"{YTIMG_BASE}/{item_id}/maxresdefault.jpg",
    ]


def resolve_item_thumbnail(item: ItemMetadata, probe: Probe) -> str:
    """Return the best live thumbnail URL for an item.

    The first candidate that answers with a 200 wins. Items from other
    platforms, and items for which no candidate is live, keep the
    thumbnail from their sidecar.
    """
    if not item.id or not item.is_youtube:
        return item.thumbnail

    for candidate in item_thumbnail_candidates(item.id):
        if probe(candidate):
            return candidate

    logger.info(f"No high-resolution thumbnail for {item.id}; keeping {item.thumbnail}")
    return item.thumbnail


def resolve_channel_thumbnail(
    override: str, channel: ChannelMetadata, probe: Probe
) -> str:
    """Return the channel artwork URL, or "" when there is none.

    A blank override falls back to the avatar from the channel sidecar. An
    override that is not live is dropped rather than replaced.
    """
    candidate = override or channel.thumbnail
    if candidate and probe(candidate):
        return candidate

    if candidate:
        logger.warning(f"Channel thumbnail is not reachable: {candidate}")
    return ""


def attachment_filename(url: str) -> str:
    """Local file name the notification attachment is saved under."""
    if url.endswith(".webp"):
        return "maxresdefault.webp"
    return "maxresdefault.jpg"

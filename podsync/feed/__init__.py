"""Podcast feed documents and feed-bridge polling."""

from .bridge import BridgeFeed, BridgeItem, fetch_bridge_feed
from .document import INSERTION_MARKER, FeedDocument, feed_path
from .models import FeedEntry

__all__ = [
    "INSERTION_MARKER",
    "BridgeFeed",
    "BridgeItem",
    "FeedDocument",
    "FeedEntry",
    "feed_path",
    "fetch_bridge_feed",
]

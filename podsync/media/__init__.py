"""Downloaded media handling: metadata, artwork and retention."""

from .extractor import extract_channel, extract_item, load_channel, load_item
from .models import ChannelMetadata, ItemMetadata
from .retention import sweep
from .thumbnails import resolve_channel_thumbnail, resolve_item_thumbnail

__all__ = [
    "ChannelMetadata",
    "ItemMetadata",
    "extract_channel",
    "extract_item",
    "load_channel",
    "load_item",
    "resolve_channel_thumbnail",
    "resolve_item_thumbnail",
    "sweep",
]

"""Normalize downloader info sidecars into metadata records."""

import json
import logging
from pathlib import Path
from typing import Any

from podsync.errors import MetadataError

from .models import ChannelMetadata, ItemMetadata

logger = logging.getLogger(__name__)

AVATAR_THUMBNAIL_ID = "avatar_uncropped"

_ITEM_TEXT_FIELDS = (
    "id",
    "title",
    "description",
    "webpage_url",
    "uploader_url",
    "channel_url",
    "thumbnail",
    "duration_string",
)


def _text(blob: dict[str, Any], key: str, default: str = "") -> str:
    value = blob.get(key)
    if value is None:
        return default
    return str(value)


def _number(blob: dict[str, Any], key: str) -> float:
    try:
        return float(blob.get(key) or 0)
    except (TypeError, ValueError):
        return 0


def read_sidecar(path: Path) -> dict[str, Any]:
    """Read an info sidecar as a JSON object.

    Raises:
        MetadataError: If the file is unreadable or does not hold a JSON object
    """
    try:
        blob = json.loads(Path(path).read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        raise MetadataError(f"Cannot read sidecar {path}: {e}") from e

    if not isinstance(blob, dict):
        raise MetadataError(f"Sidecar {path} is not a JSON object")
    return blob


def extract_item(blob: dict[str, Any]) -> ItemMetadata:
    """Build an ItemMetadata from a sidecar blob.

    Missing or null keys fall back to "" (and "0:0" for the duration), so
    the record can always be rendered. Extra keys are ignored.
    """
    fields = {key: _text(blob, key) for key in _ITEM_TEXT_FIELDS}
    fields["duration_string"] = _text(blob, "duration_string", "0:0")
    fields["filesize_approx"] = _number(blob, "filesize_approx")
    fields["extractor"] = _text(blob, "extractor_key") or _text(blob, "extractor")

    item = ItemMetadata(**fields)
    if not item.id:
        logger.warning("Sidecar has no item id; it will be treated as already published")
    return item


def load_item(path: Path) -> ItemMetadata:
    """Read and normalize an item info sidecar."""
    return extract_item(read_sidecar(path))


def extract_channel(blob: dict[str, Any]) -> ChannelMetadata:
    """Build ChannelMetadata from a channel-level sidecar blob.

    The thumbnail list is scanned from the end, so when several entries
    carry the avatar id the last listed one is used.
    """
    thumbnail = ""
    thumbnails = blob.get("thumbnails") or []
    for candidate in reversed(thumbnails):
        if not isinstance(candidate, dict):
            continue
        if candidate.get("id") == AVATAR_THUMBNAIL_ID:
            thumbnail = _text(candidate, "url")
            break

    return ChannelMetadata(description=_text(blob, "description"), thumbnail=thumbnail)


def load_channel(path: Path) -> ChannelMetadata:
    """Read and normalize a channel info sidecar."""
    return extract_channel(read_sidecar(path))

"""Notification events and their message formatting."""

from html import escape

from pydantic import BaseModel

from podsync.media.models import ItemMetadata

SEPARATOR = "--------------------------------------------"


class NotificationEvent(BaseModel):
    """One alert about a newly published item; sent once, never stored."""

    title: str
    message: str
    thumbnail: str
    url: str
    token: str
    user: str


def _html(*parts: str) -> str:
    body = "<br /><br />".join(escape(p).replace("\n", "<br />") for p in parts)
    return f"<html><body>{body}</body></html>"


def podcast_event(source_name: str, item: ItemMetadata, token: str, user: str) -> NotificationEvent:
    """Alert for an item added to a podcast feed."""
    return NotificationEvent(
        title=f"RSS Podcast Downloaded ({source_name})",
        message=_html(item.title, SEPARATOR, item.description),
        thumbnail=item.thumbnail,
        url=item.webpage_url,
        token=token,
        user=user,
    )


def upload_event(source_name: str, item: ItemMetadata, token: str, user: str) -> NotificationEvent:
    """Alert for a new upload on a notify-only channel."""
    return NotificationEvent(
        title=f"RSS YouTube Video Uploaded ({source_name})",
        message=_html(item.title, item.webpage_url, SEPARATOR, item.description),
        thumbnail=item.thumbnail,
        url=item.webpage_url,
        token=token,
        user=user,
    )

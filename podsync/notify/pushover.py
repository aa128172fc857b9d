"""Notification delivery through the Pushover messages API."""

import logging
import mimetypes
from contextlib import ExitStack
from pathlib import Path

import httpx

from podsync.config import Settings
from podsync.errors import NotificationError
from podsync.media.thumbnails import attachment_filename
from podsync.net import download_file

from .models import NotificationEvent

logger = logging.getLogger(__name__)


class PushoverNotifier:
    """Service for sending notifications via the Pushover API."""

    def __init__(self, settings: Settings, client: httpx.Client):
        """Initialize the notifier with settings and a shared HTTP client."""
        self.api_url = settings.pushover_api_url
        self.scratch_dir = Path(settings.config_dir)
        self.client = client

    def _fetch_attachment(self, thumbnail: str) -> Path | None:
        if not thumbnail:
            return None

        destination = self.scratch_dir / attachment_filename(thumbnail)
        try:
            return download_file(self.client, thumbnail, destination)
        except (httpx.HTTPError, OSError) as e:
            logger.warning(f"Sending without attachment, cannot fetch {thumbnail}: {e}")
            return None

    def send(self, event: NotificationEvent) -> None:
        """
        Deliver one notification.

        The thumbnail is saved under the scratch directory first and
        attached to the message.

        Args:
            event: The notification to send

        Raises:
            NotificationError: If the API does not accept the message
        """
        data = {
            "token": event.token,
            "user": event.user,
            "title": event.title,
            "message": event.message,
            "html": "1",
            "url": event.url,
        }
        attachment = self._fetch_attachment(event.thumbnail)

        try:
            with ExitStack() as stack:
                files = None
                if attachment is not None:
                    content_type = mimetypes.guess_type(attachment.name)[0] or "image/jpeg"
                    handle = stack.enter_context(attachment.open("rb"))
                    files = {"attachment": (attachment.name, handle, content_type)}
                response = self.client.post(self.api_url, data=data, files=files)
        except (httpx.HTTPError, OSError) as e:
            raise NotificationError(f"Cannot send notification {event.title!r}: {e}") from e

        if response.status_code != 200:
            raise NotificationError(
                f"Notification {event.title!r} rejected. Status: {response.status_code}, "
                f"Response: {response.text}"
            )
        logger.info(f"Notification sent: {event.title}")

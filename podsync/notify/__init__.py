"""Operator notifications for newly published items."""

from .models import NotificationEvent, podcast_event, upload_event
from .pushover import PushoverNotifier

__all__ = ["NotificationEvent", "PushoverNotifier", "podcast_event", "upload_event"]

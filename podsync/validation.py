"""Pre-flight checks run before each source is processed."""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable

from podsync.config import BridgeSource, ChannelSource, NotifySource, Settings

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of the checks for one source, computed fresh per source."""

    source: str
    checks: dict[str, bool] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return all(self.checks.values())

    @property
    def failures(self) -> list[str]:
        return [name for name, passed in self.checks.items() if not passed]


def path_exists(path: Path | str) -> bool:
    return bool(str(path)) and Path(path).exists()


def _finish(source: str, checks: dict[str, bool]) -> ValidationResult:
    result = ValidationResult(source, checks)
    if result.ok:
        logger.info(f"Valid - {source}")
    else:
        for name in result.failures:
            logger.warning(f"Not valid - {source}: {name}")
    return result


def _credentials(settings: Settings, token: str) -> dict[str, bool]:
    return {
        "pushover_user_key": bool(settings.pushover_user_key),
        "pushover_token": bool(token),
    }


def validate_channel(source: ChannelSource, settings: Settings) -> ValidationResult:
    """Check a podcast channel and the global paths it depends on."""
    checks = {
        "media_folder": path_exists(settings.media_folder),
        "rss_folder": path_exists(settings.rss_folder),
        "rss_template": path_exists(settings.rss_template),
        "config_dir": path_exists(settings.config_dir),
        "name": bool(source.name),
        "channel_id": bool(source.channel_id),
        "file_format": bool(source.file_format),
        "file_quality": bool(source.file_quality),
        "youtube_url": bool(source.youtube_url),
        "playlist_items": bool(settings.playlist_items),
        "download_archive": path_exists(source.download_archive),
    }
    checks.update(
        _credentials(settings, source.notify_token or settings.pushover_podcast_token)
    )
    return _finish(source.name or source.channel_id or "<unnamed channel>", checks)


def validate_notify(source: NotifySource, settings: Settings) -> ValidationResult:
    """Check a notify-only source."""
    checks = {
        "media_folder_notify": path_exists(settings.media_folder_notify),
        "config_dir": path_exists(settings.config_dir),
        "name": bool(source.name),
        "youtube_url": bool(source.youtube_url),
        "playlist_items": bool(settings.playlist_items),
    }
    checks.update(
        _credentials(settings, source.notify_token or settings.pushover_notify_token)
    )
    return _finish(source.name or "<unnamed notify source>", checks)


def validate_bridge(
    source: BridgeSource, settings: Settings, probe: Callable[[str], bool]
) -> ValidationResult:
    """Check a feed-bridge source, including that its feed answers with 200."""
    checks = {
        "media_folder": path_exists(settings.media_folder),
        "rss_folder": path_exists(settings.rss_folder),
        "rss_template": path_exists(settings.rss_template),
        "config_dir": path_exists(settings.config_dir),
        "name": bool(source.name),
        "channel_id": bool(source.channel_id),
        "file_format": bool(source.file_format),
        "file_quality": bool(source.file_quality),
        "download_archive": bool(source.download_archive),
        "username": bool(source.username),
        "playlist_items": bool(settings.playlist_items),
    }
    checks.update(
        _credentials(settings, source.notify_token or settings.pushover_podcast_token)
    )
    checks["bridge_feed"] = bool(source.bridge_feed) and probe(source.feed_url)
    return _finish(source.name or source.username or "<unnamed bridge>", checks)

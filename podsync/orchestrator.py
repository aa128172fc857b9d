"""Run orchestration: validate, download, publish, notify and clean up each source."""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Callable

import httpx

from podsync.config import BridgeSource, ChannelSource, NotifySource, Settings, SourcesFile
from podsync.errors import PodsyncError, RetrievalError
from podsync.feed import FeedDocument, FeedEntry, feed_path, fetch_bridge_feed
from podsync.media import (
    ChannelMetadata,
    ItemMetadata,
    load_channel,
    load_item,
    resolve_channel_thumbnail,
    resolve_item_thumbnail,
    sweep,
)
from podsync.net import UrlProbe
from podsync.notify import PushoverNotifier, podcast_event, upload_event
from podsync.validation import (
    ValidationResult,
    validate_bridge,
    validate_channel,
    validate_notify,
)
from podsync.ytdlp import RetrievalResult, YtDlpClient, find_sidecar_groups, read_archive

logger = logging.getLogger(__name__)


def _local_now() -> datetime:
    return datetime.now().astimezone()


@dataclass
class RunReport:
    """What happened to every source during one run."""

    processed: list[str] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)
    failed: list[str] = field(default_factory=list)
    new_entries: int = 0
    notifications: int = 0

    @property
    def ok(self) -> bool:
        return not self.failed


class Orchestrator:
    """Processes every configured source strictly one after another.

    A source that fails validation is skipped. A source that fails while
    being processed is logged and recorded in the report; the remaining
    sources still run.
    """

    def __init__(
        self,
        settings: Settings,
        sources: SourcesFile,
        client: httpx.Client,
        ytdlp: YtDlpClient | None = None,
        notifier: PushoverNotifier | None = None,
        probe: Callable[[str], bool] | None = None,
        clock: Callable[[], datetime] = _local_now,
    ):
        self.settings = settings
        self.sources = sources
        self.client = client
        self.ytdlp = ytdlp or YtDlpClient(settings.ytdlp_binary)
        self.notifier = notifier or PushoverNotifier(settings, client)
        self.probe = probe or UrlProbe(client)
        self.clock = clock
        self.report = RunReport()

    def run(self) -> RunReport:
        """Process podcast channels, then notify-only sources, then bridges."""
        self.report = RunReport()

        for channel in self.sources.podcasts:
            self._guard(validate_channel(channel, self.settings), self.sync_channel, channel)

        for notify in self.sources.notify:
            self._guard(validate_notify(notify, self.settings), self.notify_uploads, notify)

        for bridge in self.sources.bridges:
            self._guard(
                validate_bridge(bridge, self.settings, self.probe), self.sync_bridge, bridge
            )

        logger.info(
            f"Run finished: {len(self.report.processed)} processed, "
            f"{len(self.report.skipped)} skipped, {len(self.report.failed)} failed, "
            f"{self.report.new_entries} new entries"
        )
        return self.report

    def _guard(self, validation: ValidationResult, action, source) -> None:
        if not validation.ok:
            logger.warning(
                f"Skipping {validation.source}: {', '.join(validation.failures)} not valid"
            )
            self.report.skipped.append(validation.source)
            return

        logger.info(f"Processing {validation.source}")
        try:
            action(source)
        except PodsyncError as e:
            logger.error(f"Source {validation.source} failed: {e}", exc_info=True)
            self.report.failed.append(validation.source)
            return
        self.report.processed.append(validation.source)

    def _retrieve(self, command: list[str]) -> RetrievalResult:
        result = self.ytdlp.run(command)
        if not result.ok:
            raise RetrievalError(result)
        return result

    def _channel_dir(self, channel: ChannelSource) -> Path:
        return Path(self.settings.media_folder) / channel.channel_id

    def _podcast_token(self, source: ChannelSource) -> str:
        return source.notify_token or self.settings.pushover_podcast_token

    def _resolve_item(self, item: ItemMetadata) -> ItemMetadata:
        thumbnail = resolve_item_thumbnail(item, self.probe)
        item = item.model_copy(update={"thumbnail": thumbnail})
        logger.info(
            f"Item {item.id}: title={item.title!r} thumbnail={item.thumbnail} "
            f"webpage={item.webpage_url} duration={item.duration_string}"
        )
        return item

    def sync_channel(self, channel: ChannelSource) -> int:
        """Download a channel's newest items and publish them to its feed."""
        media_root = self.settings.media_folder
        self._retrieve(
            self.ytdlp.channel_info_command(
                media_root,
                channel.channel_id,
                channel.file_format,
                channel.file_quality,
                channel.youtube_url,
            )
        )
        self._retrieve(
            self.ytdlp.download_command(
                media_root,
                channel.channel_id,
                channel.file_format,
                channel.file_quality,
                self.settings.playlist_items,
                channel.download_archive,
                channel.youtube_url,
            )
        )

        channel_sidecar = self._channel_dir(channel) / f"{channel.channel_id}.info.json"
        added = self.publish(channel, lambda: load_channel(channel_sidecar))
        self.sweep(channel)
        return added

    def publish(
        self, channel: ChannelSource, channel_metadata: Callable[[], ChannelMetadata]
    ) -> int:
        """
        Merge every downloaded item of a channel into its feed document.

        The feed is created on the first item if it does not exist yet; only
        then is ``channel_metadata`` consulted. Each item that is actually
        appended produces exactly one notification.

        Returns:
            Number of entries appended
        """
        document = FeedDocument(feed_path(self.settings.rss_folder, channel.channel_id))
        added = 0

        for group in find_sidecar_groups(self._channel_dir(channel)):
            media = group.media(channel.file_format)
            if not group.info_json.is_file() or not media.is_file():
                logger.info(f"Skipping {group.stem}: info sidecar or {media.name} missing")
                continue

            item = load_item(group.info_json)
            if document.exists() and document.contains(item.id):
                logger.debug(f"Item ({item.id}) already in feed")
                continue
            item = self._resolve_item(item)

            if not document.exists():
                meta = channel_metadata()
                image = resolve_channel_thumbnail(channel.channel_thumbnail, meta, self.probe)
                document.ensure(
                    self.settings.rss_template,
                    link=item.channel_url,
                    title=channel.name,
                    image=image,
                    description=meta.description,
                )

            entry = FeedEntry.from_item(
                item,
                published=self.clock(),
                http_host=self.settings.http_host,
                channel_id=channel.channel_id,
                file_format=channel.file_format,
            )
            if not document.append_if_new(entry):
                continue

            added += 1
            self.report.new_entries += 1
            self.notifier.send(
                podcast_event(
                    channel.name, item, self._podcast_token(channel), self.settings.pushover_user_key
                )
            )
            self.report.notifications += 1

        return added

    def sweep(self, channel: ChannelSource) -> None:
        removed = sweep(
            self._channel_dir(channel),
            self.settings.retention_hours,
            keep={channel.channel_id},
        )
        if removed:
            logger.info(f"Removed {len(removed)} expired files for {channel.name}")

    def sync_bridge(self, bridge: BridgeSource) -> int:
        """Download a bounded batch of bridge items and publish them."""
        try:
            feed = fetch_bridge_feed(self.client, bridge.feed_url)
        except (httpx.HTTPError, ValueError) as e:
            raise PodsyncError(f"Cannot read bridge feed {bridge.feed_url}: {e}") from e

        archived = {entry.item_id for entry in read_archive(Path(bridge.download_archive))}

        for item in feed.batch(self.settings.bridge_batch_size):
            if item.item_id in archived:
                logger.info(f"Bridge item {item.item_id} already downloaded")
                continue

            logger.info(f"Bridge item: {item.title!r} {item.url}")
            self._retrieve(
                self.ytdlp.download_command(
                    self.settings.media_folder,
                    bridge.channel_id,
                    bridge.file_format,
                    bridge.file_quality,
                    self.settings.playlist_items,
                    bridge.download_archive,
                    item.url,
                )
            )

        added = self.publish(
            bridge, lambda: ChannelMetadata(description=feed.title, thumbnail=feed.icon)
        )
        self.sweep(bridge)
        return added

    def notify_uploads(self, source: NotifySource) -> int:
        """Send one alert per new upload; no feed is written."""
        media_root = self.settings.media_folder_notify
        self._retrieve(
            self.ytdlp.notify_command(
                media_root,
                self.settings.playlist_items,
                self.settings.notify_archive,
                source.youtube_url,
            )
        )

        token = source.notify_token or self.settings.pushover_notify_token
        sent = 0
        for group in find_sidecar_groups(Path(media_root)):
            if not group.info_json.is_file():
                continue

            item = self._resolve_item(load_item(group.info_json))
            group.description.unlink(missing_ok=True)
            group.info_json.unlink(missing_ok=True)

            self.notifier.send(
                upload_event(source.name, item, token, self.settings.pushover_user_key)
            )
            self.report.notifications += 1
            sent += 1

        return sent

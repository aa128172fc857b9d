"""Tests for thumbnail resolution."""

from unittest.mock import MagicMock

from podsync.media import ChannelMetadata, ItemMetadata
from podsync.media.thumbnails import (
    attachment_filename,
    item_thumbnail_candidates,
    resolve_channel_thumbnail,
    resolve_item_thumbnail,
)

DEFAULT_THUMB = "https://i.ytimg.com/vi/abc123/hqdefault.jpg"


def make_item(extractor: str = "youtube") -> ItemMetadata:
    return ItemMetadata(id="abc123", thumbnail=DEFAULT_THUMB, extractor=extractor)


class TestItemThumbnail:
    """Tests for resolve_item_thumbnail."""

    def test_no_candidate_live_keeps_default(self):
        """Both high-resolution candidates failing keeps the sidecar thumbnail."""
        probe = MagicMock(return_value=False)

        result = resolve_item_thumbnail(make_item(), probe)

        assert result == DEFAULT_THUMB
        assert [c.args[0] for c in probe.call_args_list] == item_thumbnail_candidates("abc123")

    def test_first_live_candidate_wins(self):
        """The webp candidate is preferred and the jpg is not probed."""
        probe = MagicMock(return_value=True)

        result = resolve_item_thumbnail(make_item(), probe)

        assert result == "https://i.ytimg.com/vi_webp/abc123/maxresdefault.webp"
        probe.assert_called_once()

    def test_falls_back_to_second_candidate(self):
        """The jpg candidate is used when only it is live."""
        probe = MagicMock(side_effect=[False, True])

        result = resolve_item_thumbnail(make_item(), probe)

        assert result == "https://i.ytimg.com/vi_webp/abc123/maxresdefault.jpg"

    def test_other_platforms_are_not_probed(self):
        """Items from other extractors keep their own thumbnail."""
        probe = MagicMock(return_value=True)

        result = resolve_item_thumbnail(make_item(extractor="TikTok"), probe)

        assert result == DEFAULT_THUMB
        probe.assert_not_called()


class TestChannelThumbnail:
    """Tests for resolve_channel_thumbnail."""

    def test_blank_override_uses_channel_avatar(self):
        channel = ChannelMetadata(thumbnail="https://yt3.example/avatar.jpg")
        probe = MagicMock(return_value=True)

        assert resolve_channel_thumbnail("", channel, probe) == "https://yt3.example/avatar.jpg"

    def test_live_override_is_used(self):
        channel = ChannelMetadata(thumbnail="https://yt3.example/avatar.jpg")
        probe = MagicMock(return_value=True)

        result = resolve_channel_thumbnail("https://cdn.example/art.png", channel, probe)

        assert result == "https://cdn.example/art.png"
        probe.assert_called_once_with("https://cdn.example/art.png")

    def test_dead_override_is_not_substituted(self):
        """A dead override leaves the channel without artwork."""
        channel = ChannelMetadata(thumbnail="https://yt3.example/avatar.jpg")
        probe = MagicMock(return_value=False)

        assert resolve_channel_thumbnail("https://cdn.example/art.png", channel, probe) == ""

    def test_no_candidate_at_all(self):
        probe = MagicMock()

        assert resolve_channel_thumbnail("", ChannelMetadata(), probe) == ""
        probe.assert_not_called()


def test_attachment_filename():
    assert attachment_filename("https://x/maxresdefault.webp") == "maxresdefault.webp"
    assert attachment_filename("https://x/maxresdefault.jpg") == "maxresdefault.jpg"
    assert attachment_filename("https://x/image.png?size=2") == "maxresdefault.jpg"

"""Tests for feed-bridge polling."""

from unittest.mock import MagicMock

import httpx
import pytest

from podsync.feed import BridgeItem, fetch_bridge_feed

BRIDGE_URL = "http://bridge/?action=display&bridge=TikTokBridge&format=Json&username=%40someone"

SAMPLE_FEED = {
    "version": "https://jsonfeed.org/version/1",
    "title": "someone - TikTok",
    "icon": "https://www.tiktok.com/favicon.ico",
    "items": [
        {"id": "1", "url": "https://www.tiktok.com/@someone/video/7300000000000000001", "title": "One"},
        {"id": "2", "url": "https://www.tiktok.com/@someone/video/7300000000000000002", "title": "Two"},
        {"id": "3", "title": "No url"},
        {"id": "4", "url": "https://www.tiktok.com/@someone/video/7300000000000000004"},
    ],
}


def mock_client(payload):
    response = MagicMock()
    response.json = MagicMock(return_value=payload)
    response.raise_for_status = MagicMock()
    client = MagicMock()
    client.get.return_value = response
    return client


def test_fetch_bridge_feed():
    """Items are parsed and entries without a URL are skipped."""
    client = mock_client(SAMPLE_FEED)

    feed = fetch_bridge_feed(client, BRIDGE_URL)

    client.get.assert_called_once_with(BRIDGE_URL)
    assert feed.title == "someone - TikTok"
    assert feed.icon == "https://www.tiktok.com/favicon.ico"
    assert [i.title for i in feed.items] == ["One", "Two", ""]


def test_batch_is_bounded():
    feed = fetch_bridge_feed(mock_client(SAMPLE_FEED), BRIDGE_URL)

    assert len(feed.batch(2)) == 2
    assert len(feed.batch(5)) == 3


def test_http_error_raises():
    client = MagicMock()
    client.get.side_effect = httpx.ConnectError("refused")

    with pytest.raises(httpx.ConnectError):
        fetch_bridge_feed(client, BRIDGE_URL)


def test_non_object_payload_raises():
    with pytest.raises(ValueError):
        fetch_bridge_feed(mock_client(["not", "a", "feed"]), BRIDGE_URL)


@pytest.mark.parametrize(
    "url",
    [
        "https://www.tiktok.com/@someone/video/7300000000000000001",
        "https://www.tiktok.com/@someone/video/7300000000000000001/",
        "https://www.tiktok.com/@someone/video/7300000000000000001?lang=en",
    ],
)
def test_item_id_from_url(url):
    assert BridgeItem(url=url).item_id == "7300000000000000001"

"""Feed-bridge polling for short-form-video accounts."""

import logging

import httpx
from pydantic import BaseModel, ConfigDict, Field, ValidationError

logger = logging.getLogger(__name__)


class BridgeItem(BaseModel):
    """One entry of a bridge feed; only the page URL is needed to download it."""

    model_config = ConfigDict(extra="ignore")

    url: str
    title: str = ""

    @property
    def item_id(self) -> str:
        """Platform id, taken from the last path segment of the item URL."""
        return self.url.split("?", 1)[0].rstrip("/").rsplit("/", 1)[-1]


class BridgeFeed(BaseModel):
    """A JSON Feed document as served by a feed-bridge."""

    model_config = ConfigDict(extra="ignore")

    title: str = ""
    icon: str = ""
    items: list[BridgeItem] = Field(default_factory=list)

    def batch(self, size: int) -> list[BridgeItem]:
        """The newest ``size`` items (fewer if the feed is shorter)."""
        return self.items[:size]


def fetch_bridge_feed(client: httpx.Client, url: str) -> BridgeFeed:
    """
    Fetch and parse a bridge feed.

    Entries without a URL are skipped rather than failing the whole feed.

    Args:
        client: HTTP client
        url: Full bridge feed URL (endpoint prefix plus username)

    Returns:
        The parsed feed

    Raises:
        httpx.HTTPError: If the request fails or returns an error status
        ValueError: If the body is not a JSON object
    """
    response = client.get(url)
    response.raise_for_status()
    data = response.json()

    if not isinstance(data, dict):
        raise ValueError(f"Bridge feed {url} is not a JSON object")

    items = []
    for raw in data.get("items") or []:
        try:
            items.append(BridgeItem.model_validate(raw))
        except ValidationError:
            logger.warning(f"Skipping malformed bridge item in {url}: {raw!r}")
            continue

    feed = BridgeFeed(
        title=str(data.get("title") or ""),
        icon=str(data.get("icon") or ""),
        items=items,
    )
    logger.info(f"Bridge feed {feed.title!r} has {len(feed.items)} items")
    return feed

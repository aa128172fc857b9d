"""HTTP helpers shared by the validator, thumbnail resolver and notifier."""

import logging
from pathlib import Path

import httpx

logger = logging.getLogger(__name__)


class UrlProbe:
    """Checks whether URLs answer with a live 200 response.

    Only an exact 200 counts; every other status and every transport error
    means the URL is unreachable.
    """

    def __init__(self, client: httpx.Client):
        self._client = client

    def __call__(self, url: str) -> bool:
        if not url:
            return False

        logger.info(f"URL check: {url}")
        try:
            response = self._client.get(url)
        except httpx.HTTPError as e:
            logger.warning(f"URL unreachable: {url} ({type(e).__name__}: {e})")
            return False

        if response.status_code != 200:
            logger.warning(f"URL unreachable: {url} (status {response.status_code})")
            return False

        logger.debug(f"URL status: {response.status_code} {url}")
        return True


def make_client(timeout: float) -> httpx.Client:
    """Create the HTTP client used for the whole run."""
    return httpx.Client(timeout=timeout, follow_redirects=True)


def download_file(client: httpx.Client, url: str, destination: Path) -> Path:
    """Save the body of ``url`` to ``destination``.

    Raises:
        httpx.HTTPError: If the request fails or returns an error status
    """
    response = client.get(url)
    response.raise_for_status()
    destination.write_bytes(response.content)
    logger.info(f"Downloaded {url} to {destination}")
    return destination

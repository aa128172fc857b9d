"""Persistent per-channel podcast feed documents."""

import logging
import os
import re
import tempfile
from pathlib import Path

from podsync.errors import FeedDocumentError

from .models import FeedEntry, xml_text

logger = logging.getLogger(__name__)

INSERTION_MARKER = "<!-- INSERT_ITEMS_HERE -->"

TEMPLATE_TOKENS = {
    "link": "[CHANNEL_LINK]",
    "title": "[PODCAST_TITLE]",
    "image": "[PODCAST_IMAGE]",
    "description": "[PODCAST_DESCRIPTION]",
}
_TOKEN_RE = re.compile("|".join(re.escape(t) for t in TEMPLATE_TOKENS.values()))


def feed_path(rss_folder: Path, channel_id: str) -> Path:
    """Location of a channel's feed document."""
    return Path(rss_folder) / f"{channel_id}RSS.xml"


def render_template(
    template: str, *, link: str, title: str, image: str, description: str
) -> str:
    """Substitute the channel placeholders of a feed template in one pass."""
    values = {
        TEMPLATE_TOKENS["link"]: xml_text(link),
        TEMPLATE_TOKENS["title"]: xml_text(title),
        TEMPLATE_TOKENS["image"]: xml_text(image),
        TEMPLATE_TOKENS["description"]: xml_text(description),
    }
    return _TOKEN_RE.sub(lambda m: values[m.group(0)], template)


class FeedDocument:
    """A channel's feed file: created once from a template, then only appended to.

    The file's existence is the only initialization marker. Entries are
    spliced in front of the insertion marker, so the newest entry sits
    directly above it. Every write replaces the whole file atomically.
    """

    def __init__(self, path: Path):
        self.path = Path(path)

    def exists(self) -> bool:
        return self.path.is_file()

    def read(self) -> str:
        try:
            return self.path.read_text(encoding="utf-8")
        except OSError as e:
            raise FeedDocumentError(f"Cannot read feed {self.path}: {e}") from e

    def contains(self, item_id: str) -> bool:
        """Whether the id occurs anywhere in the raw document."""
        return item_id in self.read()

    def ensure(
        self,
        template_path: Path,
        *,
        link: str,
        title: str,
        image: str,
        description: str,
    ) -> bool:
        """Create the document from the template unless it already exists.

        Returns:
            True if the document was created by this call

        Raises:
            FeedDocumentError: If the template is unreadable, lacks the
                insertion marker, or the document cannot be written
        """
        if self.exists():
            return False

        try:
            template = Path(template_path).read_text(encoding="utf-8")
        except OSError as e:
            raise FeedDocumentError(f"Cannot read feed template {template_path}: {e}") from e

        if template.count(INSERTION_MARKER) != 1:
            raise FeedDocumentError(
                f"Feed template {template_path} must contain {INSERTION_MARKER} exactly once"
            )

        content = render_template(
            template, link=link, title=title, image=image, description=description
        )
        self._write(content)
        logger.info(f"Created feed document {self.path}")
        return True

    def append_if_new(self, entry: FeedEntry) -> bool:
        """Splice ``entry`` into the document unless its id is already there.

        Returns:
            True if the entry was appended, False if the id was present

        Raises:
            FeedDocumentError: If the document cannot be read or written, or
                its insertion marker is missing or duplicated
        """
        content = self.read()
        if entry.item_id in content:
            logger.info(f"Item ({entry.item_id}) already in feed {self.path.name}")
            return False

        if content.count(INSERTION_MARKER) != 1:
            raise FeedDocumentError(
                f"Feed {self.path} must contain {INSERTION_MARKER} exactly once"
            )

        content = content.replace(INSERTION_MARKER, entry.render() + INSERTION_MARKER)
        self._write(content)
        logger.info(f"Item added to feed {self.path.name}: {entry.item_id}")
        return True

    def _write(self, content: str) -> None:
        """Replace the document in full, never leaving a partial file behind."""
        tmp_name = None
        try:
            fd, tmp_name = tempfile.mkstemp(
                dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp"
            )
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                handle.write(content)
            os.chmod(tmp_name, 0o644)
            os.replace(tmp_name, self.path)
        except OSError as e:
            if tmp_name is not None:
                Path(tmp_name).unlink(missing_ok=True)
            raise FeedDocumentError(f"Cannot write feed {self.path}: {e}") from e

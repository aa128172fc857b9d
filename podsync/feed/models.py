"""Feed entry records and their RSS serialization."""

from datetime import datetime
from xml.sax.saxutils import escape

from pydantic import BaseModel

from podsync.media.models import ItemMetadata

PUB_DATE_FORMAT = "%d/%m/%Y %I:%M:%S %z"

ENCLOSURE_TYPES = {
    "mp3": "audio/mpeg",
    "m4a": "audio/mp4",
}
DEFAULT_ENCLOSURE_TYPE = "video/mpeg"

CHAPTER_URL_PLACEHOLDER = "[ITEM_CHAPTER_URL]"


def xml_text(value: str) -> str:
    """Escape a value for element text or a double-quoted attribute."""
    return escape(value, {'"': "&quot;"})


def cdata(value: str) -> str:
    """Wrap a value in a CDATA section, splitting any embedded terminator.

    Comment openers are split the same way, so uploader text can never
    reproduce the document's insertion marker in the raw file.
    """
    value = value.replace("]]>", "]]]]><![CDATA[>").replace("<!--", "<!-]]><![CDATA[-")
    return "<![CDATA[" + value + "]]>"


def format_pub_date(moment: datetime) -> str:
    """Render a publish timestamp, e.g. ``05/03/2024 09:15:00 +0100``."""
    if moment.tzinfo is None:
        moment = moment.astimezone()
    return moment.strftime(PUB_DATE_FORMAT)


def enclosure_type(file_format: str) -> str:
    return ENCLOSURE_TYPES.get(file_format.lower(), DEFAULT_ENCLOSURE_TYPE)


def enclosure_url(http_host: str, channel_id: str, item_id: str, file_format: str) -> str:
    """Public URL of a downloaded media file."""
    return f"{http_host}podcasts/{channel_id}/{item_id}.{file_format}"


class FeedEntry(BaseModel):
    """One <item> of a podcast feed."""

    item_id: str
    title: str
    description: str
    link: str
    guid: str
    pub_date: str
    author: str
    author_url: str
    image: str
    keywords: str
    enclosure_url: str
    enclosure_type: str
    enclosure_length: int
    duration: str

    @classmethod
    def from_item(
        cls,
        item: ItemMetadata,
        *,
        published: datetime,
        http_host: str,
        channel_id: str,
        file_format: str,
    ) -> "FeedEntry":
        """Build the entry for a downloaded item.

        ``item.thumbnail`` is used as the entry image, so resolve it first.
        """
        return cls(
            item_id=item.id,
            title=item.title,
            description=item.description,
            link=item.webpage_url,
            guid=item.webpage_url or item.id,
            pub_date=format_pub_date(published),
            author=item.uploader_url,
            author_url=item.channel_url,
            image=item.thumbnail,
            keywords=(item.extractor or "youtube").lower(),
            enclosure_url=enclosure_url(http_host, channel_id, item.id, file_format),
            enclosure_type=enclosure_type(file_format),
            enclosure_length=int(item.filesize_approx),
            duration=item.duration_string,
        )

    def render(self) -> str:
        """Serialize the entry as an indented RSS <item> block."""
        image = xml_text(self.image)
        lines = [
            "<item>",
            f"\t<title>{cdata(self.title)}</title>",
            f"\t<description>{cdata(self.description)}</description>",
            f"\t<link>{xml_text(self.link)}</link>",
            f'\t<guid isPermaLink="false">{xml_text(self.guid)}</guid>',
            f"\t<pubDate>{xml_text(self.pub_date)}</pubDate>",
            f'\t<podcast:chapters url="{CHAPTER_URL_PLACEHOLDER}" type="application/json"/>',
            f"\t<itunes:subtitle>{cdata(self.author)}</itunes:subtitle>",
            f"\t<itunes:summary>{cdata(self.author)}</itunes:summary>",
            f"\t<itunes:author>{cdata(self.author)}</itunes:author>",
            f"\t<author>{cdata(self.author)}</author>",
            f'\t<itunes:image href="{image}"/>',
            "\t<itunes:explicit>No</itunes:explicit>",
            f"\t<itunes:keywords>{xml_text(self.keywords)}</itunes:keywords>",
            (
                f'\t<enclosure url="{xml_text(self.enclosure_url)}" '
                f'type="{xml_text(self.enclosure_type)}" length="{self.enclosure_length}"/>'
            ),
            (
                f'\t<podcast:person href="{xml_text(self.author_url)}" img="{image}">'
                f"{xml_text(self.author)}</podcast:person>"
            ),
            f'\t<podcast:images srcset="{image} 2000w"/>',
            f"\t<itunes:duration>{xml_text(self.duration)}</itunes:duration>",
            "</item>",
        ]
        return "".join(f"\t\t{line}\n" for line in lines)

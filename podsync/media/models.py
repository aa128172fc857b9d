"""Pydantic models for downloaded media metadata."""

from pydantic import BaseModel


class ItemMetadata(BaseModel):
    """Represents one downloaded item, as described by its info sidecar."""

    id: str = ""
    title: str = ""
    description: str = ""
    webpage_url: str = ""
    uploader_url: str = ""
    channel_url: str = ""
    thumbnail: str = ""
    # Free-form token such as "5:30"; not guaranteed to be numeric
    duration_string: str = "0:0"
    filesize_approx: float = 0
    extractor: str = ""

    @property
    def is_youtube(self) -> bool:
        return self.extractor.lower() == "youtube"


class ChannelMetadata(BaseModel):
    """Channel-level details used when a feed document is first created."""

    description: str = ""
    thumbnail: str = ""

"""Configuration management for YouTube Podcast Sync."""

from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env", env_prefix="PODSYNC_", extra="ignore"
    )

    # Folders
    media_folder: Path = Path("./podcasts")
    media_folder_notify: Path = Path("./notify")
    rss_folder: Path = Path("./rss")
    rss_template: Path = Path("./rss/template.xml")
    config_dir: Path = Path("./config")
    sources_file: Path = Path("./config/sources.json")

    # Enclosure URLs are built as <http_host>podcasts/<channel>/<id>.<ext>
    http_host: str = "http://localhost/"

    # Retrieval
    ytdlp_binary: str = "yt-dlp"
    playlist_items: str = "1,2"
    bridge_batch_size: int = Field(default=5, ge=1)
    retention_hours: int = Field(default=168, ge=1)

    # Pushover
    pushover_api_url: str = "https://api.pushover.net/1/messages.json"
    pushover_user_key: str = Field(default="")
    pushover_podcast_token: str = Field(default="")
    pushover_notify_token: str = Field(default="")

    http_timeout: float = 15.0

    # Environment
    env: str = Field(default="dev", pattern="^(dev|prod)$")
    log_level: str = Field(default="INFO")

    @property
    def notify_archive(self) -> Path:
        """Download archive shared by all notify-only sources."""
        return self.config_dir / "youtube-dl-notify.txt"


_settings: Settings | None = None


def get_settings() -> Settings:
    """Get cached settings instance (singleton pattern)."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


class _Source(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    name: str = ""
    youtube_url: str = ""
    # Overrides the kind-wide Pushover application token
    notify_token: str = ""


class ChannelSource(_Source):
    """A channel whose items are downloaded and published as a podcast feed."""

    channel_id: str = ""
    file_format: str = ""
    file_quality: str = ""
    download_archive: str = ""
    channel_thumbnail: str = ""


class NotifySource(_Source):
    """A channel that only raises upload alerts, without a feed."""


class BridgeSource(ChannelSource):
    """A short-form-video account polled through a feed-bridge endpoint."""

    bridge_feed: str = ""
    username: str = ""

    @property
    def feed_url(self) -> str:
        return self.bridge_feed + self.username


class SourcesFile(BaseModel):
    """The sources document: every channel the run will visit."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    podcasts: list[ChannelSource] = Field(default_factory=list)
    notify: list[NotifySource] = Field(default_factory=list)
    bridges: list[BridgeSource] = Field(default_factory=list)


def load_sources(path: Path) -> SourcesFile:
    """Parse the JSON sources document.

    Raises:
        OSError: If the file cannot be read
        pydantic.ValidationError: If the document is not valid JSON or has
            wrongly typed fields
    """
    return SourcesFile.model_validate_json(Path(path).read_text(encoding="utf-8"))

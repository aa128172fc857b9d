"""Tests for configuration module."""

import json
import os
from pathlib import Path
from unittest.mock import patch

import pytest
from pydantic import ValidationError

from podsync.config import Settings, get_settings, load_sources


def test_settings_defaults():
    """Test that settings use sensible defaults."""
    with patch.dict(os.environ, {}, clear=True):
        settings = Settings(_env_file=None)

        assert settings.media_folder == Path("./podcasts")
        assert settings.playlist_items == "1,2"
        assert settings.bridge_batch_size == 5
        assert settings.retention_hours == 168
        assert settings.pushover_api_url == "https://api.pushover.net/1/messages.json"
        assert settings.env == "dev"
        assert settings.notify_archive == Path("./config/youtube-dl-notify.txt")


def test_settings_env_override():
    """Test that environment variables override defaults."""
    with patch.dict(
        os.environ,
        {
            "PODSYNC_MEDIA_FOLDER": "/srv/podcasts",
            "PODSYNC_HTTP_HOST": "https://pods.example.com/",
            "PODSYNC_PLAYLIST_ITEMS": "1-5",
            "PODSYNC_PUSHOVER_USER_KEY": "user-key",
            "PODSYNC_ENV": "prod",
        },
        clear=True,
    ):
        settings = Settings(_env_file=None)

        assert settings.media_folder == Path("/srv/podcasts")
        assert settings.http_host == "https://pods.example.com/"
        assert settings.playlist_items == "1-5"
        assert settings.pushover_user_key == "user-key"
        assert settings.env == "prod"


def test_settings_validation_error():
    """Test that an unknown environment name is rejected."""
    with patch.dict(os.environ, {"PODSYNC_ENV": "staging"}, clear=True):
        with pytest.raises(ValidationError) as exc_info:
            Settings(_env_file=None)

        error_fields = {e["loc"][0] for e in exc_info.value.errors()}
        assert "env" in error_fields


def test_get_settings_singleton():
    """Test that get_settings returns the same instance."""
    with patch.dict(os.environ, {}, clear=True):
        import podsync.config

        podsync.config._settings = None
        try:
            settings1 = get_settings()
            settings2 = get_settings()

            assert settings1 is settings2
        finally:
            podsync.config._settings = None


def test_load_sources(tmp_path):
    """Test parsing of the sources document."""
    path = tmp_path / "sources.json"
    path.write_text(
        json.dumps(
            {
                "podcasts": [
                    {
                        "name": "Channel",
                        "channel_id": "UC123",
                        "file_format": "mp4",
                        "file_quality": "best",
                        "download_archive": "/config/archive.txt",
                        "youtube_url": "https://www.youtube.com/channel/UC123",
                        "comment": "ignored",
                    }
                ],
                "notify": [{"name": "Uploads", "youtube_url": "https://youtube.com/@x"}],
                "bridges": [
                    {
                        "name": "someone (TikTok)",
                        "channel_id": "TikTok",
                        "username": "someone",
                        "bridge_feed": "http://bridge/?username=%40",
                    }
                ],
            }
        )
    )

    sources = load_sources(path)

    assert sources.podcasts[0].channel_id == "UC123"
    assert sources.podcasts[0].channel_thumbnail == ""
    assert sources.notify[0].name == "Uploads"
    assert sources.bridges[0].feed_url == "http://bridge/?username=%40someone"


def test_sources_are_immutable(tmp_path):
    """Sources are read once and cannot change during a run."""
    path = tmp_path / "sources.json"
    path.write_text('{"podcasts": [{"name": "Channel"}]}')

    sources = load_sources(path)

    with pytest.raises(ValidationError):
        sources.podcasts[0].name = "Other"


def test_load_sources_invalid_json(tmp_path):
    """Test that a broken document raises a validation error."""
    path = tmp_path / "sources.json"
    path.write_text("{not json")

    with pytest.raises(ValidationError):
        load_sources(path)

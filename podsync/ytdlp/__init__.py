"""Downloader integration for YouTube Podcast Sync."""

from .client import (
    ArchiveEntry,
    RetrievalResult,
    RetrievalStatus,
    SidecarGroup,
    YtDlpClient,
    find_sidecar_groups,
    read_archive,
)

__all__ = [
    "ArchiveEntry",
    "RetrievalResult",
    "RetrievalStatus",
    "SidecarGroup",
    "YtDlpClient",
    "find_sidecar_groups",
    "read_archive",
]

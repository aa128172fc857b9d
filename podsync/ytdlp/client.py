"""yt-dlp invocation and the files it leaves behind."""

import enum
import logging
import subprocess
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)

# yt-dlp exits with 2 on invalid options; nothing a later run would fix
USAGE_ERROR_EXIT_CODE = 2

_COMMON_FLAGS = [
    "--restrict-filenames",
    "--add-metadata",
]
_SAFETY_FLAGS = [
    "--abort-on-error",
    "--abort-on-unavailable-fragment",
    "--no-overwrites",
    "--continue",
]


class RetrievalStatus(enum.Enum):
    SUCCESS = "success"
    RETRIABLE = "retriable"
    FATAL = "fatal"


@dataclass(frozen=True)
class RetrievalResult:
    """Outcome of one downloader run."""

    status: RetrievalStatus
    returncode: int
    output: str = ""

    @property
    def ok(self) -> bool:
        return self.status is RetrievalStatus.SUCCESS


class YtDlpClient:
    """Builds and runs yt-dlp commands.

    Output layout is ``<root>/<channel>/<item-id>.<ext>`` with an
    ``.info.json`` and a ``.description`` sidecar next to every download.
    """

    def __init__(self, binary: str = "yt-dlp"):
        self.binary = binary

    def channel_info_command(
        self, media_root: Path, channel_id: str, file_format: str, file_quality: str, url: str
    ) -> list[str]:
        """Fetch only the channel-level info sidecar."""
        output = f"{media_root}/{channel_id}/{channel_id}.%(ext)s"
        return [
            self.binary, "-v",
            "-o", output,
            "--playlist-items", "0",
            "--write-info-json",
            *_COMMON_FLAGS,
            "--merge-output-format", file_format,
            "--format", file_quality,
            *_SAFETY_FLAGS,
            url,
        ]

    def download_command(
        self,
        media_root: Path,
        channel_id: str,
        file_format: str,
        file_quality: str,
        playlist_items: str,
        archive: str,
        url: str,
    ) -> list[str]:
        """Download new items of a channel, skipping those in the archive."""
        output = f"{media_root}/{channel_id}/%(id)s.%(ext)s"
        return [
            self.binary, "-v",
            "-o", output,
            "--playlist-items", playlist_items,
            "--write-info-json",
            "--no-write-playlist-metafiles",
            "--download-archive", str(archive),
            *_COMMON_FLAGS,
            "--merge-output-format", file_format,
            "--format", file_quality,
            *_SAFETY_FLAGS,
            "--write-description",
            url,
        ]

    def notify_command(
        self, media_root: Path, playlist_items: str, archive: Path, url: str
    ) -> list[str]:
        """Write sidecars for new uploads without downloading the media."""
        output = f"{media_root}/%(id)s.%(ext)s"
        return [
            self.binary, "-v",
            "-o", output,
            "--skip-download",
            "--playlist-items", playlist_items,
            "--write-info-json",
            "--no-write-playlist-metafiles",
            "--download-archive", str(archive),
            *_COMMON_FLAGS,
            "--merge-output-format", "mp4",
            "--format", "best",
            *_SAFETY_FLAGS,
            "--write-description",
            url,
        ]

    def run(self, command: list[str]) -> RetrievalResult:
        """Run a command to completion and classify its exit status."""
        logger.info(f"Running: {' '.join(command)}")
        try:
            completed = subprocess.run(command, capture_output=True, text=True)
        except OSError as e:
            logger.error(f"Cannot start {command[0]}: {e}")
            return RetrievalResult(RetrievalStatus.FATAL, -1, str(e))

        output = completed.stdout + completed.stderr
        if completed.returncode == 0:
            logger.info("Command successfully executed")
            logger.debug(output)
            return RetrievalResult(RetrievalStatus.SUCCESS, 0, output)

        logger.error(f"{command[0]} exited with {completed.returncode}:\n{output}")
        status = (
            RetrievalStatus.FATAL
            if completed.returncode == USAGE_ERROR_EXIT_CODE
            else RetrievalStatus.RETRIABLE
        )
        return RetrievalResult(status, completed.returncode, output)


@dataclass(frozen=True)
class SidecarGroup:
    """The files one download produced, keyed by their shared basename."""

    directory: Path
    stem: str

    @property
    def description(self) -> Path:
        return self.directory / f"{self.stem}.description"

    @property
    def info_json(self) -> Path:
        return self.directory / f"{self.stem}.info.json"

    def media(self, file_format: str) -> Path:
        return self.directory / f"{self.stem}.{file_format}"


def find_sidecar_groups(directory: Path) -> list[SidecarGroup]:
    """Every download under ``directory``, found through its description sidecar."""
    if not directory.is_dir():
        return []
    return [
        SidecarGroup(path.parent, path.name.split(".", 1)[0])
        for path in sorted(directory.rglob("*.description"))
    ]


@dataclass(frozen=True)
class ArchiveEntry:
    """One line of a download archive: ``<platform> <item-id>``."""

    platform: str
    item_id: str

    def render(self) -> str:
        return f"{self.platform} {self.item_id}"

    @classmethod
    def parse(cls, line: str) -> "ArchiveEntry | None":
        parts = line.split()
        if len(parts) != 2:
            return None
        return cls(parts[0], parts[1])


def read_archive(path: Path) -> set[ArchiveEntry]:
    """Entries of a download archive; a missing archive is empty."""
    try:
        lines = Path(path).read_text(encoding="utf-8").splitlines()
    except FileNotFoundError:
        return set()

    entries = set()
    for line in lines:
        entry = ArchiveEntry.parse(line)
        if entry is not None:
            entries.add(entry)
    return entries

"""Cleanup of downloaded artifacts past the retention window."""

import logging
import time
from collections import defaultdict
from pathlib import Path
from typing import Iterable

logger = logging.getLogger(__name__)

DEFAULT_RETENTION_HOURS = 168


def artifact_stem(path: Path) -> str:
    """Basename shared by every file of one download (``abc.info.json`` -> ``abc``)."""
    return path.name.split(".", 1)[0]


def group_artifacts(directory: Path) -> dict[str, list[Path]]:
    """Group the files directly under ``directory`` by artifact stem."""
    groups: dict[str, list[Path]] = defaultdict(list)
    if not directory.is_dir():
        return {}

    for path in sorted(directory.iterdir()):
        if path.is_file():
            groups[artifact_stem(path)].append(path)
    return dict(groups)


def sweep(
    directory: Path,
    max_age_hours: int = DEFAULT_RETENTION_HOURS,
    now: float | None = None,
    keep: Iterable[str] = (),
) -> list[Path]:
    """Delete artifact groups older than ``max_age_hours``.

    A group's age is taken from its newest file, so a group is only removed
    once every file in it has aged out. Stems listed in ``keep`` are never
    touched. Deletion is best effort: files that vanish first are skipped.

    Returns:
        The paths that were removed
    """
    now = time.time() if now is None else now
    cutoff = now - max_age_hours * 3600
    kept = set(keep)
    removed: list[Path] = []

    for stem, files in group_artifacts(directory).items():
        if stem in kept:
            continue

        try:
            newest = max(f.stat().st_mtime for f in files)
        except FileNotFoundError:
            continue
        if newest >= cutoff:
            continue

        for path in files:
            try:
                path.unlink()
            except FileNotFoundError:
                continue
            removed.append(path)
        logger.info(f"Removed expired artifacts for {stem} in {directory}")

    return removed

"""Matching video lookup and playback position helpers."""

from __future__ import annotations

import logging
import math
import os
from pathlib import Path
from typing import Optional

from .timecode import seconds_from_timestamp

logger = logging.getLogger(__name__)

VIDEO_SUFFIX = ".mp4"

MIN_PLAYBACK_RATE = 0.1
MAX_PLAYBACK_RATE = 3.0


def lookup_video(base_name: str, root: Path) -> Optional[Path]:
    """
    Find ``<base_name>.mp4`` anywhere under ``root``.

    The name comparison is case-insensitive; hidden files and directories
    are skipped. The first regular file found wins.
    """
    if not root.is_dir():
        return None

    target = (base_name + VIDEO_SUFFIX).casefold()

    for dirpath, dirnames, filenames in os.walk(root):
        dirnames[:] = sorted(d for d in dirnames if not d.startswith("."))
        for name in sorted(filenames):
            if name.startswith(".") or name.casefold() != target:
                continue
            candidate = Path(dirpath) / name
            if candidate.is_file():
                return candidate

    return None


def matching_video_for(subtitle_path: Path, root: Optional[Path]) -> Optional[Path]:
    """Look up the video sharing the subtitle file's base name."""
    if root is None:
        return None
    found = lookup_video(subtitle_path.stem, root)
    if found:
        logger.debug(f"Matched video {found} for {subtitle_path.name}")
    else:
        logger.debug(f"No video for {subtitle_path.name} under {root}")
    return found


def seek_target(timestamp: str) -> Optional[float]:
    return seconds_from_timestamp(timestamp)


def adjust_playback_rate(current: float, delta: float) -> float:
    """Clamp ``current + delta`` to the allowed range, rounded to 0.1."""
    raw = current + delta
    clamped = max(MIN_PLAYBACK_RATE, min(MAX_PLAYBACK_RATE, raw))
    return math.floor(clamped * 10 + 0.5) / 10.0


class PlaybackState:
    """Which video is loaded and how fast it plays."""

    def __init__(self) -> None:
        self.video_path: Optional[Path] = None
        self.rate: float = 1.0
        self.position: float = 0.0

    def load(self, path: Optional[Path]) -> bool:
        """Switch to ``path``; returns False if it was already current."""
        if path == self.video_path:
            return False
        self.video_path = path
        self.position = 0.0
        return True

    def seek(self, timestamp: str) -> Optional[float]:
        """Move to a subtitle timestamp; None when nothing can be played."""
        if self.video_path is None:
            return None
        seconds = seek_target(timestamp)
        if seconds is None:
            return None
        self.position = seconds
        return seconds

    def adjust_rate(self, delta: float) -> float:
        new_rate = adjust_playback_rate(self.rate, delta)
        if abs(new_rate - self.rate) > 0.0001:
            self.rate = new_rate
        return self.rate

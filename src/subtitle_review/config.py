"""Configuration and constants."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional
from pathlib import Path

from dotenv import load_dotenv

# Load environment variables once
load_dotenv()


# Default locations in the user's home directory
DEFAULT_TYPOS_FILENAME = ".subtitle_correct_typos.json"
DEFAULT_STATE_FILENAME = ".subtitle_review_state.json"

# Folder picked by default when it exists under the working directory
DEFAULT_ARTICLES_DIRNAME = "articles"

# Content font size bounds
MIN_FONT_SIZE = 10.0
MAX_FONT_SIZE = 30.0
DEFAULT_FONT_SIZE = 20.0


def default_root(cwd: Optional[Path] = None) -> Path:
    """``<cwd>/articles`` when it exists, otherwise ``<cwd>``."""
    cwd = cwd or Path.cwd()
    suggested = cwd / DEFAULT_ARTICLES_DIRNAME
    return suggested if suggested.exists() else cwd


def _env_path(name: str) -> Optional[Path]:
    value = os.environ.get(name)
    return Path(value).expanduser() if value else None


@dataclass
class AppConfig:
    """Configuration for the subtitle review session."""

    # Folders
    root_dir: Optional[Path] = None
    video_root_dir: Optional[Path] = None

    # Storage
    typo_corrections_path: Optional[Path] = None
    state_path: Optional[Path] = None

    # Editor
    content_font_size: float = DEFAULT_FONT_SIZE

    def __post_init__(self):
        """Fill unset paths from the environment, then from defaults."""
        if self.root_dir is None:
            self.root_dir = _env_path("SUBTITLE_REVIEW_ROOT")
        if self.video_root_dir is None:
            self.video_root_dir = _env_path("SUBTITLE_REVIEW_VIDEO_ROOT")
        if self.typo_corrections_path is None:
            self.typo_corrections_path = (
                _env_path("SUBTITLE_REVIEW_TYPOS_FILE") or Path.home() / DEFAULT_TYPOS_FILENAME
            )
        if self.state_path is None:
            self.state_path = (
                _env_path("SUBTITLE_REVIEW_STATE_FILE") or Path.home() / DEFAULT_STATE_FILENAME
            )

    @classmethod
    def from_args(cls, args) -> "AppConfig":
        """Create config from argparse namespace."""
        def path_arg(name: str) -> Optional[Path]:
            value = getattr(args, name, None)
            return Path(value).expanduser() if value else None

        return cls(
            root_dir=path_arg('root'),
            video_root_dir=path_arg('video_root'),
            typo_corrections_path=path_arg('typos_file'),
            state_path=path_arg('state_file'),
        )

    def validate(self) -> Optional[str]:
        """
        Validate configuration.

        Returns:
            Error message if invalid, None if valid
        """
        if self.root_dir is not None and not self.root_dir.exists():
            return f"Root folder not found: {self.root_dir}"

        if self.video_root_dir is not None and not self.video_root_dir.is_dir():
            return f"Video folder not found: {self.video_root_dir}"

        if self.typo_corrections_path is not None and self.typo_corrections_path.is_dir():
            return f"Typo corrections path is a directory: {self.typo_corrections_path}"

        if not MIN_FONT_SIZE <= self.content_font_size <= MAX_FONT_SIZE:
            return f"Font size must be {MIN_FONT_SIZE:g}-{MAX_FONT_SIZE:g}, got {self.content_font_size:g}"

        return None

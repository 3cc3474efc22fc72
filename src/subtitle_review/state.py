"""Persisted preferences: last used subtitle and video folders."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Optional
from dataclasses import dataclass, asdict
from datetime import datetime

from .document import dump_json_atomic

logger = logging.getLogger(__name__)


@dataclass
class AppState:
    """最近使用的目录记录。"""

    root_path: Optional[str] = None
    video_root_path: Optional[str] = None
    updated_at: str = ""

    def touch(self) -> None:
        self.updated_at = datetime.now().isoformat()

    @property
    def root(self) -> Optional[Path]:
        return Path(self.root_path) if self.root_path else None

    @property
    def video_root(self) -> Optional[Path]:
        return Path(self.video_root_path) if self.video_root_path else None


def save_state(state: AppState, path: Path) -> bool:
    """
    保存状态到文件。

    Returns:
        True if successful
    """
    try:
        dump_json_atomic(asdict(state), path)
        logger.debug(f"State saved to {path}")
        return True
    except (OSError, TypeError) as e:
        logger.error(f"Failed to save state: {e}")
        return False


def load_state(path: Path) -> Optional[AppState]:
    """
    从文件加载状态。

    Returns:
        AppState if found and valid, None otherwise
    """
    if not path.exists():
        return None

    try:
        with path.open('r', encoding='utf-8') as f:
            data = json.load(f)
        return AppState(**data)
    except (OSError, ValueError, TypeError) as e:
        logger.warning(f"Failed to load state file: {e}")
        return None


def clear_state(path: Path) -> None:
    """删除状态文件。"""
    try:
        if path.exists():
            path.unlink()
            logger.debug(f"State file deleted: {path}")
    except OSError as e:
        logger.warning(f"Failed to delete state file: {e}")

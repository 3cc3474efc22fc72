"""Headless review session: the state an editor front end binds to."""

from __future__ import annotations

import logging
import os
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, Iterable, List, Optional

from .config import AppConfig, MAX_FONT_SIZE, MIN_FONT_SIZE, default_root
from .document import ArticleDocument, ArticleLoadError
from .file_tree import (
    build_tree,
    find_node_by_id,
    find_node_by_path,
    first_file_node,
    load_review_states,
)
from .models import ArticleContent, FileNode, ReviewState, TypoCorrection, ValidationIssue
from .state import AppState, load_state, save_state
from .typos import TypoCorrectionStore
from .validation import ContentFilter, filter_entries, normalize_keyword, validate_article
from .video import PlaybackState, matching_video_for

logger = logging.getLogger(__name__)


def utc_timestamp() -> str:
    """Current time as ISO-8601 UTC, e.g. ``2025-10-02T12:34:56Z``."""
    return datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


def is_accessible(path: Optional[Path]) -> bool:
    return path is not None and path.exists() and os.access(path, os.R_OK)


class ReviewSession:
    """
    One operator's review session over a folder of subtitle files.

    Holds the file tree, the open document, per-file review states, the
    typo dictionary and the video pairing. Errors that a user should see
    are stored in ``load_error`` instead of being raised.
    """

    def __init__(self, config: AppConfig, cwd: Optional[Path] = None):
        self.config = config

        self.file_tree: List[FileNode] = []
        self.selected_node_id: Optional[str] = None
        self.document: Optional[ArticleDocument] = None
        self.load_error: Optional[str] = None
        self.review_states: Dict[Path, ReviewState] = {}
        self.validation_issues: List[ValidationIssue] = []
        self.last_replacement_count: Optional[int] = None
        self.search_text: str = ""
        self._font_size = config.content_font_size

        self.typos = TypoCorrectionStore(config.typo_corrections_path)
        self.typos.load()

        self.video_root: Optional[Path] = None
        self.playback = PlaybackState()

        self._state = load_state(config.state_path) or AppState()
        self.root = self._configure_initial_root(config.root_dir, default_root(cwd))
        self._configure_initial_video_root(config.video_root_dir)
        self.refresh_tree()

    # -- persisted folders ------------------------------------------------

    def _persist(self) -> None:
        self._state.touch()
        save_state(self._state, self.config.state_path)

    def _configure_initial_root(self, explicit: Optional[Path], fallback: Path) -> Path:
        if explicit is not None:
            if not is_accessible(explicit):
                self.load_error = "Cannot access the selected folder, check permissions."
            return explicit

        restored = self._state.root
        if restored is not None:
            if is_accessible(restored):
                self._persist()
                return restored
            self.load_error = "Cannot access the last used folder, please choose again."
            self._state.root_path = None
            self._persist()

        if not is_accessible(fallback):
            self.load_error = "Cannot access the default folder, please choose another."
        return fallback

    def _configure_initial_video_root(self, explicit: Optional[Path]) -> None:
        candidate = explicit or self._state.video_root
        if candidate is None:
            return
        if is_accessible(candidate):
            self.video_root = candidate
            if explicit is None:
                self._persist()
        elif explicit is None:
            self._state.video_root_path = None
            self._persist()

    # -- tree and selection ----------------------------------------------

    def refresh_tree(self) -> None:
        tree = build_tree(self.root)
        self.file_tree = tree
        self.review_states = load_review_states(tree)

        if self.document is not None:
            # 未保存的状态优先于磁盘上的状态
            state = self.document.article.review_state
            if state is not None:
                self.review_states[self.document.path] = state
            node = find_node_by_path(tree, self.document.path)
            if node is not None:
                self.selected_node_id = node.id
                return

        if self.selected_node is None:
            first = first_file_node(tree)
            if first is not None:
                self.select_node(first.id)
            else:
                self.selected_node_id = None

    @property
    def selected_node(self) -> Optional[FileNode]:
        if self.selected_node_id is None:
            return None
        return find_node_by_id(self.file_tree, self.selected_node_id)

    def select_folder(self, path: Path) -> bool:
        if not is_accessible(path) or not path.is_dir():
            self.load_error = "Cannot access the selected folder, check permissions."
            self._state.root_path = None
            self._persist()
            return False

        self.root = path
        self._state.root_path = str(path)
        self._persist()
        self.load_error = None
        self.last_replacement_count = None
        self.selected_node_id = None
        self.document = None
        self.refresh_tree()
        return True

    def select_node(self, node_id: Optional[str]) -> None:
        self.selected_node_id = node_id
        self._load_selected_article()

    def select_path(self, path: Path) -> bool:
        node = find_node_by_path(self.file_tree, path)
        if node is None:
            self.load_error = f"Not in the current folder: {path}"
            return False
        self.select_node(node.id)
        return self.document is not None

    def _load_selected_article(self) -> None:
        node = self.selected_node
        if node is None or node.is_directory:
            self.document = None
            self.playback.load(None)
            return

        try:
            document = ArticleDocument.open(node.path)
        except ArticleLoadError as e:
            logger.warning(f"Failed to load {node.path}: {e}")
            self.document = None
            self.playback.load(None)
            self.load_error = str(e)
            self.last_replacement_count = None
            return

        self.document = document
        state = document.article.review_state
        if state is not None:
            self.review_states[node.path] = state

        self.load_error = None
        self.validation_issues = []
        self.last_replacement_count = None
        self.load_matching_video()

    # -- editing ----------------------------------------------------------

    @property
    def content_font_size(self) -> float:
        return self._font_size

    @content_font_size.setter
    def content_font_size(self, value: float) -> None:
        self._font_size = max(MIN_FONT_SIZE, min(MAX_FONT_SIZE, value))

    def review_state_for(self, path: Path) -> ReviewState:
        return self.review_states.get(path, ReviewState.NOT_STARTED)

    def save_changes(self) -> bool:
        document = self.document
        if document is None:
            return False

        state = self.review_state_for(document.path)
        document.article.reviewState = state.value
        document.article.reviewedAt = utc_timestamp()

        try:
            document.save()
        except ArticleLoadError as e:
            self.load_error = str(e)
            return False

        # 保存后至少标记为进行中
        if state is ReviewState.NOT_STARTED:
            self.review_states[document.path] = ReviewState.IN_PROGRESS
        return True

    def mark_reviewed(self, state: ReviewState) -> None:
        document = self.document
        if document is None:
            return
        self.review_states[document.path] = state
        document.article.reviewState = state.value
        document.article.reviewedAt = utc_timestamp()

    def run_validation(self) -> List[ValidationIssue]:
        if self.document is None:
            self.validation_issues = []
        else:
            self.validation_issues = validate_article(self.document.article)
        return self.validation_issues

    def visible_entries(self, content_filter: ContentFilter = ContentFilter.ALL) -> List[ArticleContent]:
        """Entries of the open document under the current search text and filter."""
        if self.document is None:
            return []
        keyword = normalize_keyword(self.search_text)
        return filter_entries(self.document.article.content, content_filter, keyword)

    # -- typo corrections -------------------------------------------------

    @property
    def typo_corrections(self) -> List[TypoCorrection]:
        return self.typos.corrections

    def replace_typos_in_content(self) -> Optional[int]:
        if self.document is None:
            self.last_replacement_count = None
            return None

        if not self.typos:
            self.last_replacement_count = 0
            return 0

        working = self.document.article.copy()
        count = self.typos.apply(working.content)
        self.document.article = working
        self.last_replacement_count = count
        logger.info(f"Replaced {count} occurrences in {self.document.path.name}")
        return count

    def update_typo_corrections(self, corrections: Iterable[TypoCorrection]) -> None:
        self.typos.update(corrections)
        self.last_replacement_count = None

    def add_typo_correction(self, source: str, replacement: str) -> None:
        self.typos.add(source, replacement)
        self.last_replacement_count = None

    def reset_typo_corrections(self) -> None:
        self.update_typo_corrections([])

    @property
    def typo_corrections_file_path(self) -> str:
        return self.typos.file_path

    # -- video ------------------------------------------------------------

    def set_video_root(self, path: Path) -> bool:
        if not is_accessible(path) or not path.is_dir():
            self.load_error = "Cannot access the selected video folder, check permissions."
            return False
        self.video_root = path
        self._state.video_root_path = str(path)
        self._persist()
        self.load_matching_video()
        return True

    def clear_video_root(self) -> None:
        self._state.video_root_path = None
        self._persist()
        self.video_root = None
        self.playback.load(None)

    def load_matching_video(self) -> Optional[Path]:
        if self.video_root is None or self.document is None:
            self.playback.load(None)
            return None
        found = matching_video_for(self.document.path, self.video_root)
        self.playback.load(found)
        return found

    @property
    def current_video(self) -> Optional[Path]:
        return self.playback.video_path

    def play_at(self, timestamp: str) -> Optional[float]:
        return self.playback.seek(timestamp)

    def adjust_playback_rate(self, delta: float) -> float:
        return self.playback.adjust_rate(delta)

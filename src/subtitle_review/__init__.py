"""
Subtitle Review - review and correct JSON subtitle transcripts.

Features:
- Folder tree of subtitle documents with per-file review state
- Editing with unsaved-change tracking and revert
- Timestamp format/order and metadata validation
- Personal typo correction dictionary with batch replacement
- Matching video lookup and seek targets from subtitle timestamps
"""

__version__ = "1.0.0"

from .models import Article, ArticleContent, FileNode, ReviewState, Severity, TypoCorrection, ValidationIssue
from .document import (
    ArticleDocument,
    ArticleDecodeError,
    ArticleLoadError,
    decode_article,
    encode_article,
    load_article,
    save_article,
    validate_article_file,
)
from .file_tree import build_tree, first_file_node, load_review_states, read_review_state
from .validation import ContentFilter, filter_entries, validate_article
from .typos import TypoCorrectionStore, replace_typos, sanitize_corrections
from .video import PlaybackState, adjust_playback_rate, lookup_video
from .timecode import is_valid_timestamp, seconds_from_timestamp
from .config import AppConfig
from .session import ReviewSession

__all__ = [
    # Models
    "Article",
    "ArticleContent",
    "FileNode",
    "ReviewState",
    "Severity",
    "TypoCorrection",
    "ValidationIssue",
    "AppConfig",
    # Documents
    "ArticleDocument",
    "ArticleDecodeError",
    "ArticleLoadError",
    "decode_article",
    "encode_article",
    "load_article",
    "save_article",
    "validate_article_file",
    # Tree
    "build_tree",
    "first_file_node",
    "load_review_states",
    "read_review_state",
    # Validation
    "ContentFilter",
    "filter_entries",
    "validate_article",
    # Typos
    "TypoCorrectionStore",
    "replace_typos",
    "sanitize_corrections",
    # Video
    "PlaybackState",
    "adjust_playback_rate",
    "lookup_video",
    # Timecodes
    "is_valid_timestamp",
    "seconds_from_timestamp",
    # Session
    "ReviewSession",
]

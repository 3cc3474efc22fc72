"""Data models for subtitle review documents."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional


def _new_id() -> str:
    return uuid.uuid4().hex


class ReviewState(Enum):
    """Per-file review progress, stored as ``reviewState`` in each document."""

    NOT_STARTED = "notStarted"
    IN_PROGRESS = "inProgress"
    COMPLETED = "completed"

    @property
    def display_name(self) -> str:
        return _REVIEW_STATE_NAMES[self]

    @property
    def icon_name(self) -> str:
        return _REVIEW_STATE_ICONS[self]

    @classmethod
    def parse(cls, raw: Any) -> Optional["ReviewState"]:
        """Parse a raw value, returning None for anything unrecognised."""
        if not isinstance(raw, str):
            return None
        try:
            return cls(raw)
        except ValueError:
            return None


_REVIEW_STATE_NAMES = {
    ReviewState.NOT_STARTED: "Not started",
    ReviewState.IN_PROGRESS: "In progress",
    ReviewState.COMPLETED: "Completed",
}

_REVIEW_STATE_ICONS = {
    ReviewState.NOT_STARTED: "circle",
    ReviewState.IN_PROGRESS: "clock",
    ReviewState.COMPLETED: "checkmark.circle.fill",
}


@dataclass
class ArticleContent:
    """One timed subtitle line."""

    timestample: str
    text: str
    important: Optional[bool] = None

    # 本地标识，不写入文件
    id: str = field(default_factory=_new_id, repr=False, compare=False)

    @property
    def is_important(self) -> bool:
        return bool(self.important)

    @property
    def is_blank(self) -> bool:
        return not self.text.strip()

    def copy(self, **changes) -> "ArticleContent":
        """Create a copy with optional field changes (id is preserved)."""
        return ArticleContent(
            timestample=changes.get('timestample', self.timestample),
            text=changes.get('text', self.text),
            important=changes.get('important', self.important),
            id=self.id,
        )


@dataclass
class Article:
    """A decoded subtitle document: metadata plus ordered content entries."""

    duration: Optional[int] = None
    previewImageURL: Optional[str] = None
    description: Optional[str] = None
    prepareDate: Optional[str] = None
    creationDate: Optional[str] = None
    height: Optional[int] = None
    title: Optional[str] = None
    type: Optional[str] = None
    width: Optional[int] = None
    resolution: Optional[str] = None
    version: Optional[str] = None
    authors: List[str] = field(default_factory=list)
    bitrate: Optional[int] = None
    url: Optional[str] = None
    uploadDate: Optional[str] = None
    content: List[ArticleContent] = field(default_factory=list)
    correctedAt: Optional[str] = None
    reviewState: Optional[str] = None
    reviewedAt: Optional[str] = None

    # Keys we do not model are carried through untouched
    extra: Dict[str, Any] = field(default_factory=dict, repr=False)

    @property
    def review_state(self) -> Optional[ReviewState]:
        return ReviewState.parse(self.reviewState)

    def copy(self) -> "Article":
        """Deep-enough copy: lists and entries are duplicated."""
        return Article(
            duration=self.duration,
            previewImageURL=self.previewImageURL,
            description=self.description,
            prepareDate=self.prepareDate,
            creationDate=self.creationDate,
            height=self.height,
            title=self.title,
            type=self.type,
            width=self.width,
            resolution=self.resolution,
            version=self.version,
            authors=list(self.authors),
            bitrate=self.bitrate,
            url=self.url,
            uploadDate=self.uploadDate,
            content=[entry.copy() for entry in self.content],
            correctedAt=self.correctedAt,
            reviewState=self.reviewState,
            reviewedAt=self.reviewedAt,
            extra=dict(self.extra),
        )


class Severity(Enum):
    WARNING = "warning"
    ERROR = "error"


@dataclass(frozen=True)
class ValidationIssue:
    """A single problem reported by the article checks."""

    message: str
    severity: Severity
    suggestion: Optional[str] = None

    @property
    def is_error(self) -> bool:
        return self.severity is Severity.ERROR


@dataclass
class TypoCorrection:
    """A (source -> replacement) pair in the user's correction dictionary."""

    source: str
    replacement: str
    id: str = field(default_factory=_new_id, compare=False)

    def to_dict(self) -> Dict[str, str]:
        return {"id": self.id, "replacement": self.replacement, "source": self.source}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TypoCorrection":
        source = data.get("source")
        replacement = data.get("replacement")
        if not isinstance(source, str) or not isinstance(replacement, str):
            raise ValueError(f"Invalid typo correction: {data!r}")
        raw_id = data.get("id")
        if isinstance(raw_id, str) and raw_id:
            return cls(source=source, replacement=replacement, id=raw_id)
        return cls(source=source, replacement=replacement)


@dataclass
class FileNode:
    """A tree entry: a directory or a ``.json`` subtitle file."""

    path: Path
    is_directory: bool
    children: Optional[List["FileNode"]] = None
    id: str = field(default_factory=_new_id, compare=False)

    @property
    def name(self) -> str:
        return self.path.name

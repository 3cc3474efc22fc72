"""Article checks and content filtering."""

from __future__ import annotations

from enum import Enum
from typing import List, Optional, Sequence

from .models import Article, ArticleContent, Severity, ValidationIssue
from .timecode import is_valid_timestamp, seconds_from_timestamp


class ContentFilter(Enum):
    ALL = "all"
    MATCHES = "matches"
    MISSING = "missing"

    @property
    def title(self) -> str:
        return {
            ContentFilter.ALL: "All",
            ContentFilter.MATCHES: "Matches",
            ContentFilter.MISSING: "Missing text",
        }[self]


def validate_article(article: Article) -> List[ValidationIssue]:
    """
    Check an article's entries and metadata.

    Entry checks run in list order: blank text, timestamp format, then
    ordering against the previous entry. Metadata warnings follow.

    Returns:
        Issues in the order they were found
    """
    issues: List[ValidationIssue] = []
    previous = None

    for entry in article.content:
        ts = entry.timestample

        if entry.is_blank:
            issues.append(ValidationIssue(
                message=f"Text at {ts} is empty",
                severity=Severity.ERROR,
                suggestion="Fill in the subtitle text",
            ))

        if not is_valid_timestamp(ts):
            issues.append(ValidationIssue(
                message=f"{ts} is not a valid timestamp",
                severity=Severity.ERROR,
                suggestion="Use the 00:00:00 format",
            ))

        # 按总秒数比较，00:90:00 与 01:30:00 等价
        current = seconds_from_timestamp(ts)
        if previous is not None and current is not None and current < previous:
            issues.append(ValidationIssue(
                message=f"Time {ts} is earlier than the previous subtitle",
                severity=Severity.WARNING,
                suggestion="Check the ordering",
            ))

        # 无法解析时也要覆盖，避免跨条目比较
        previous = current

    if article.duration is None:
        issues.append(ValidationIssue(
            message="Missing duration field",
            severity=Severity.WARNING,
            suggestion="Add the video duration",
        ))
    if not article.title:
        issues.append(ValidationIssue(
            message="Missing title",
            severity=Severity.WARNING,
            suggestion="Fill in title",
        ))
    if not article.url:
        issues.append(ValidationIssue(
            message="Missing video URL",
            severity=Severity.WARNING,
            suggestion="Fill in url",
        ))

    return issues


def has_errors(issues: Sequence[ValidationIssue]) -> bool:
    return any(issue.is_error for issue in issues)


def normalize_keyword(text: Optional[str]) -> Optional[str]:
    """Trim and lowercase a search string; None when blank."""
    if not text:
        return None
    trimmed = text.strip()
    return trimmed.lower() if trimmed else None


def matches_keyword(entry: ArticleContent, keyword: str) -> bool:
    return keyword in entry.text.lower() or keyword in entry.timestample.lower()


def filter_entries(
    entries: Sequence[ArticleContent],
    content_filter: ContentFilter = ContentFilter.ALL,
    keyword: Optional[str] = None,
) -> List[ArticleContent]:
    """Select the entries the content list should display."""
    if content_filter is ContentFilter.MISSING:
        return [e for e in entries if e.is_blank]
    if content_filter is ContentFilter.MATCHES and keyword:
        return [e for e in entries if matches_keyword(e, keyword)]
    return list(entries)


def count_matching(entries: Sequence[ArticleContent], keyword: Optional[str]) -> int:
    if not keyword:
        return len(entries)
    return sum(1 for e in entries if matches_keyword(e, keyword))


def count_missing(entries: Sequence[ArticleContent]) -> int:
    return sum(1 for e in entries if e.is_blank)

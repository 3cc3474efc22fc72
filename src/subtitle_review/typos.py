"""Typo correction dictionary: persistence and batch replacement."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Dict, Iterable, List, Sequence, Tuple

from .document import dump_json_atomic
from .models import ArticleContent, TypoCorrection

logger = logging.getLogger(__name__)


def sanitize_corrections(items: Iterable[TypoCorrection]) -> List[TypoCorrection]:
    """
    Normalize a list of corrections.

    Both sides are trimmed, pairs with an empty side are dropped, and a later
    duplicate source overwrites the replacement of the first occurrence. The
    result is sorted by source, case-insensitively.
    """
    unique: Dict[str, TypoCorrection] = {}

    for item in items:
        source = item.source.strip()
        replacement = item.replacement.strip()
        if not source or not replacement:
            continue

        existing = unique.get(source)
        if existing is not None:
            existing.replacement = replacement
        else:
            unique[source] = TypoCorrection(source=source, replacement=replacement, id=item.id)

    return sorted(unique.values(), key=lambda c: (c.source.casefold(), c.source))


def replace_typos(entries: Sequence[ArticleContent], corrections: Sequence[TypoCorrection]) -> int:
    """
    Apply corrections to entry texts in place.

    Corrections run in order against each entry, so a later correction sees
    the output of an earlier one.

    Returns:
        Total number of occurrences replaced
    """
    total = 0
    for entry in entries:
        text = entry.text
        for correction in corrections:
            target = correction.source
            if not target:
                continue
            count = text.count(target)
            if count:
                total += count
                text = text.replace(target, correction.replacement)
        entry.text = text
    return total


def add_working_correction(
    working: List[TypoCorrection], source: str, replacement: str
) -> Tuple[List[TypoCorrection], str]:
    """
    Add or update a pair in an unsaved working list.

    Returns:
        (sorted working list, feedback message); the message is empty when
        either side is blank and nothing changed
    """
    source = source.strip()
    replacement = replacement.strip()
    if not source or not replacement:
        return working, ""

    for item in working:
        if item.source.strip() == source:
            item.replacement = replacement
            message = "Updated existing correction"
            break
    else:
        working.append(TypoCorrection(source=source, replacement=replacement))
        message = "Added new correction"

    working.sort(key=lambda c: (c.source.casefold(), c.source))
    return working, message


class TypoCorrectionStore:
    """The user's correction dictionary, persisted as a JSON array."""

    def __init__(self, path: Path):
        self.path = path
        self._corrections: List[TypoCorrection] = []
        self._loading = False

    @property
    def corrections(self) -> List[TypoCorrection]:
        return list(self._corrections)

    @property
    def file_path(self) -> str:
        return str(self.path)

    def load(self) -> List[TypoCorrection]:
        """
        Load corrections from disk.

        A missing file is created with ``[]``; an empty or unreadable file
        yields an empty dictionary.
        """
        self._loading = True
        try:
            self._corrections = self._read()
        finally:
            self._loading = False

        logger.info(f"Loaded {len(self._corrections)} typo corrections")
        return self.corrections

    def _read(self) -> List[TypoCorrection]:
        if not self.path.exists():
            try:
                self.path.parent.mkdir(parents=True, exist_ok=True)
                self.path.write_text("[]", encoding="utf-8")
            except OSError as e:
                logger.error(f"Failed to create typo storage {self.path}: {e}")
            return []

        try:
            raw = self.path.read_text(encoding="utf-8")
            if not raw.strip():
                return []
            data = json.loads(raw)
            if not isinstance(data, list):
                raise ValueError("expected a JSON array")
            return sanitize_corrections(TypoCorrection.from_dict(item) for item in data)
        except (OSError, ValueError, AttributeError) as e:
            logger.error(f"Failed to load typo corrections: {e}")
            return []

    def save(self) -> bool:
        """
        Write corrections to disk.

        Returns:
            True if successful
        """
        if self._loading:
            return False

        try:
            dump_json_atomic([c.to_dict() for c in self._corrections], self.path)
        except OSError as e:
            logger.error(f"Failed to save typo corrections: {e}")
            return False

        logger.debug(f"Typo corrections saved to {self.path}")
        return True

    def update(self, items: Iterable[TypoCorrection]) -> List[TypoCorrection]:
        self._corrections = sanitize_corrections(items)
        self.save()
        return self.corrections

    def add(self, source: str, replacement: str) -> List[TypoCorrection]:
        return self.update(self._corrections + [TypoCorrection(source=source, replacement=replacement)])

    def remove(self, source: str) -> bool:
        """Remove a correction by source; returns False when not present."""
        source = source.strip()
        remaining = [c for c in self._corrections if c.source != source]
        if len(remaining) == len(self._corrections):
            return False
        self.update(remaining)
        return True

    def reset(self) -> None:
        self.update([])

    def apply(self, entries: Sequence[ArticleContent]) -> int:
        return replace_typos(entries, self._corrections)

    def __len__(self) -> int:
        return len(self._corrections)

    def __bool__(self) -> bool:
        return len(self._corrections) > 0

"""Subtitle article JSON loading, saving and in-memory editing."""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

from .models import Article, ArticleContent

logger = logging.getLogger(__name__)

# JSON key -> Article attribute, in the order the fields are declared
_STRING_FIELDS = {
    "previewImageURL": "previewImageURL",
    "description": "description",
    "prepareDate": "prepareDate",
    "creationDate": "creationDate",
    "title": "title",
    "__type": "type",
    "resolution": "resolution",
    "__version": "version",
    "url": "url",
    "uploadDate": "uploadDate",
    "correctedAt": "correctedAt",
    "reviewState": "reviewState",
    "reviewedAt": "reviewedAt",
}

_INT_FIELDS = {
    "duration": "duration",
    "height": "height",
    "width": "width",
    "bitrate": "bitrate",
}

_KNOWN_KEYS = set(_STRING_FIELDS) | set(_INT_FIELDS) | {"authors", "content"}

MAX_ARTICLE_SIZE = 50 * 1024 * 1024  # 50MB


class ArticleLoadError(Exception):
    """The article file could not be read or written."""


class ArticleDecodeError(ArticleLoadError):
    """The article JSON does not match the expected document shape."""

    def __init__(self, reason: str, path: Sequence[Any] = ()):
        self.reason = reason
        self.coding_path = ".".join(str(p) for p in path)
        if self.coding_path:
            message = f"Cannot load JSON: {reason}. Path: {self.coding_path}."
        else:
            message = f"Cannot load JSON: {reason}."
        super().__init__(message)


def _type_name(value: Any) -> str:
    if value is None:
        return "null"
    return type(value).__name__


def _require_key(data: Dict[str, Any], key: str, path: List[Any]) -> Any:
    if key not in data:
        raise ArticleDecodeError(f"missing required field '{key}'", path)
    value = data[key]
    if value is None:
        raise ArticleDecodeError("required value is null", path + [key])
    return value


def _decode_str(value: Any, path: List[Any]) -> str:
    if not isinstance(value, str):
        raise ArticleDecodeError(f"type mismatch (expected string, got {_type_name(value)})", path)
    return value


def _decode_int(value: Any, path: List[Any]) -> int:
    # bool 是 int 的子类，需要单独排除
    if isinstance(value, bool):
        raise ArticleDecodeError("type mismatch (expected integer, got bool)", path)
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    raise ArticleDecodeError(f"type mismatch (expected integer, got {_type_name(value)})", path)


def _decode_content_entry(item: Any, path: List[Any]) -> ArticleContent:
    if not isinstance(item, dict):
        raise ArticleDecodeError(f"type mismatch (expected object, got {_type_name(item)})", path)

    timestample = _decode_str(_require_key(item, "timestample", path), path + ["timestample"])
    text = _decode_str(_require_key(item, "text", path), path + ["text"])

    important = item.get("important")
    if important is not None and not isinstance(important, bool):
        raise ArticleDecodeError(
            f"type mismatch (expected bool, got {_type_name(important)})", path + ["important"]
        )

    return ArticleContent(timestample=timestample, text=text, important=important)


def decode_article(data: Any) -> Article:
    """
    Build an Article from decoded JSON.

    Raises:
        ArticleDecodeError: if a required field is missing or has the wrong type
    """
    if not isinstance(data, dict):
        raise ArticleDecodeError(f"type mismatch (expected object, got {_type_name(data)})")

    article = Article()

    for key, attr in _STRING_FIELDS.items():
        value = data.get(key)
        if value is not None:
            setattr(article, attr, _decode_str(value, [key]))

    for key, attr in _INT_FIELDS.items():
        value = data.get(key)
        if value is not None:
            setattr(article, attr, _decode_int(value, [key]))

    authors = _require_key(data, "authors", [])
    if not isinstance(authors, list):
        raise ArticleDecodeError(f"type mismatch (expected array, got {_type_name(authors)})", ["authors"])
    article.authors = [_decode_str(a, ["authors", i]) for i, a in enumerate(authors)]

    content = _require_key(data, "content", [])
    if not isinstance(content, list):
        raise ArticleDecodeError(f"type mismatch (expected array, got {_type_name(content)})", ["content"])
    article.content = [_decode_content_entry(item, ["content", i]) for i, item in enumerate(content)]

    article.extra = {k: v for k, v in data.items() if k not in _KNOWN_KEYS}
    return article


def encode_article(article: Article) -> Dict[str, Any]:
    """Convert an Article back to its JSON object (None fields omitted)."""
    data: Dict[str, Any] = dict(article.extra)

    for key, attr in {**_STRING_FIELDS, **_INT_FIELDS}.items():
        value = getattr(article, attr)
        if value is not None:
            data[key] = value

    data["authors"] = list(article.authors)

    entries = []
    for entry in article.content:
        item: Dict[str, Any] = {"timestample": entry.timestample, "text": entry.text}
        # 仅在为 True 时写入，旧文件保持不变
        if entry.important:
            item["important"] = True
        entries.append(item)
    data["content"] = entries

    return data


def dump_json_atomic(data: Any, path: Path) -> None:
    """Write pretty, key-sorted JSON via a temp file and os.replace."""
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp = path.with_name(path.name + ".tmp")
    try:
        tmp.write_text(
            json.dumps(data, ensure_ascii=False, indent=2, sort_keys=True),
            encoding="utf-8",
        )
        os.replace(tmp, path)
    finally:
        if tmp.exists():
            tmp.unlink()


def validate_article_file(path: Path) -> Optional[str]:
    """
    Validate an article file before loading.

    Returns:
        Error message if invalid, None if valid
    """
    if not path.exists():
        return f"File not found: {path}"

    if not path.is_file():
        return f"Not a file: {path}"

    suffix = path.suffix.lower()
    if suffix != '.json':
        return f"Invalid file extension: {suffix} (expected .json)"

    size = path.stat().st_size
    if size == 0:
        return "File is empty"
    if size > MAX_ARTICLE_SIZE:
        return f"File too large: {size / 1024 / 1024:.1f}MB (max 50MB)"

    return None


def load_article(path: Path) -> Article:
    """
    Read and decode an article file.

    Raises:
        ArticleDecodeError: malformed JSON or unexpected document shape
        ArticleLoadError: the file could not be read
    """
    try:
        raw = path.read_text(encoding="utf-8-sig")
    except OSError as e:
        raise ArticleLoadError(f"Cannot load JSON: {e}") from e

    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        raise ArticleDecodeError(f"data corrupted ({e.msg} at line {e.lineno} column {e.colno})") from e

    article = decode_article(data)
    logger.debug(f"Loaded {len(article.content)} entries from {path}")
    return article


def save_article(article: Article, path: Path) -> None:
    """
    Save an article as pretty-printed JSON with sorted keys.

    Raises:
        ArticleLoadError: the file could not be written
    """
    try:
        dump_json_atomic(encode_article(article), path)
    except OSError as e:
        raise ArticleLoadError(f"Save failed: {e}") from e

    logger.info(f"Saved {len(article.content)} entries to {path}")


class ArticleDocument:
    """An open article with unsaved-change tracking."""

    def __init__(self, article: Article, path: Path):
        self.article = article
        self.path = path
        self._original = article.copy()

    @classmethod
    def open(cls, path: Path) -> "ArticleDocument":
        return cls(load_article(path), path)

    @property
    def has_unsaved_changes(self) -> bool:
        return self.article != self._original

    def _index_of(self, entry_id: str) -> Optional[int]:
        for i, entry in enumerate(self.article.content):
            if entry.id == entry_id:
                return i
        return None

    def entry(self, entry_id: str) -> Optional[ArticleContent]:
        index = self._index_of(entry_id)
        return None if index is None else self.article.content[index]

    def add_content_entry(self) -> ArticleContent:
        entry = ArticleContent(timestample="00:00:00", text="")
        self.article.content.append(entry)
        return entry

    def remove_content_entry(self, entry_id: str) -> None:
        self.article.content = [e for e in self.article.content if e.id != entry_id]

    def move_content_entry(self, entry_id: str, up: bool) -> None:
        """Swap an entry with its neighbour; no-op at either end."""
        index = self._index_of(entry_id)
        if index is None:
            return
        target = index - 1 if up else index + 1
        if target < 0 or target >= len(self.article.content):
            return
        content = self.article.content
        content[index], content[target] = content[target], content[index]

    def toggle_important(self, entry_id: str) -> None:
        entry = self.entry(entry_id)
        if entry is not None:
            entry.important = None if entry.important else True

    def update_author(self, index: int, value: str) -> None:
        if 0 <= index < len(self.article.authors):
            self.article.authors[index] = value

    def add_author(self) -> None:
        self.article.authors.append("")

    def remove_author(self, index: int) -> None:
        if 0 <= index < len(self.article.authors):
            del self.article.authors[index]

    def save(self) -> None:
        save_article(self.article, self.path)
        self._original = self.article.copy()

    def revert_changes(self) -> None:
        self.article = self._original.copy()

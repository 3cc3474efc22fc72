"""Shared fixtures."""

import json
from pathlib import Path

import pytest


def sample_article(**overrides):
    data = {
        "__type": "video",
        "__version": "2",
        "title": "Sample talk",
        "url": "https://example.com/v/1",
        "duration": 120,
        "authors": ["Ada"],
        "content": [
            {"timestample": "00:00:01", "text": "Hello teh world"},
            {"timestample": "00:00:05", "text": "Second line", "important": True},
            {"timestample": "00:00:09", "text": "teh end"},
        ],
    }
    data.update(overrides)
    return data


@pytest.fixture
def write_article():
    def _write(path: Path, **overrides) -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(sample_article(**overrides), ensure_ascii=False), encoding="utf-8")
        return path
    return _write


@pytest.fixture
def article_data():
    return sample_article

"""Tests for persisted preferences."""

import json
import pytest
from pathlib import Path

from subtitle_review.state import AppState, clear_state, load_state, save_state


class TestAppState:

    def test_save_and_load(self, tmp_path):
        path = tmp_path / "state.json"
        state = AppState(root_path="/data/subs", video_root_path="/data/videos")
        state.touch()

        assert save_state(state, path)
        loaded = load_state(path)
        assert loaded == state
        assert loaded.root == Path("/data/subs")
        assert loaded.video_root == Path("/data/videos")

    def test_load_missing(self, tmp_path):
        assert load_state(tmp_path / "missing.json") is None

    def test_load_corrupt(self, tmp_path):
        path = tmp_path / "state.json"
        path.write_text("{broken")
        assert load_state(path) is None

    def test_load_unexpected_keys(self, tmp_path):
        path = tmp_path / "state.json"
        path.write_text(json.dumps({"bookmark": "abc"}))
        assert load_state(path) is None

    def test_empty_paths(self):
        state = AppState()
        assert state.root is None
        assert state.video_root is None

    def test_clear(self, tmp_path):
        path = tmp_path / "state.json"
        save_state(AppState(root_path="/x"), path)
        clear_state(path)
        assert not path.exists()
        clear_state(path)

"""Directory tree of subtitle JSON files."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Dict, Iterator, List, Optional, Sequence

from .models import FileNode, ReviewState

logger = logging.getLogger(__name__)

SUBTITLE_SUFFIX = ".json"


def _is_hidden(path: Path) -> bool:
    return path.name.startswith(".")


def _sort_key(path: Path) -> tuple:
    # 目录在前，然后按名称（不区分大小写）排序
    try:
        is_dir = path.is_dir()
    except OSError:
        is_dir = False
    return (not is_dir, path.name.casefold(), path.name)


def _make_node(path: Path) -> Optional[FileNode]:
    if path.is_dir():
        try:
            children_paths = [p for p in path.iterdir() if not _is_hidden(p)]
        except OSError as e:
            logger.debug(f"Skipping unreadable directory {path}: {e}")
            return None

        children: List[FileNode] = []
        for child in sorted(children_paths, key=_sort_key):
            node = _make_node(child)
            if node is not None:
                children.append(node)

        # 空目录（或没有 JSON 的目录）不显示
        if not children:
            return None
        return FileNode(path=path, is_directory=True, children=children)

    if path.is_file() and path.suffix.lower() == SUBTITLE_SUFFIX:
        return FileNode(path=path, is_directory=False)

    return None


def build_tree(root: Path) -> List[FileNode]:
    """
    Build the subtitle file tree under ``root``.

    Only ``.json`` files and directories that (transitively) contain one are
    kept. Hidden entries are skipped.

    Returns:
        The root's children when it is a directory, ``[node]`` when it is a
        single JSON file, ``[]`` otherwise
    """
    if not root.exists():
        logger.warning(f"Root does not exist: {root}")
        return []

    node = _make_node(root)
    if node is None:
        return []
    if node.is_directory:
        return node.children or []
    return [node]


def find_node_by_path(nodes: Sequence[FileNode], path: Path) -> Optional[FileNode]:
    for candidate in nodes:
        if candidate.path == path:
            return candidate
        found = find_node_by_path(candidate.children or [], path)
        if found is not None:
            return found
    return None


def find_node_by_id(nodes: Sequence[FileNode], node_id: str) -> Optional[FileNode]:
    for candidate in nodes:
        if candidate.id == node_id:
            return candidate
        found = find_node_by_id(candidate.children or [], node_id)
        if found is not None:
            return found
    return None


def first_file_node(nodes: Sequence[FileNode]) -> Optional[FileNode]:
    """Return the first file in depth-first order."""
    for candidate in nodes:
        if candidate.is_directory:
            found = first_file_node(candidate.children or [])
            if found is not None:
                return found
        else:
            return candidate
    return None


def iter_file_nodes(nodes: Sequence[FileNode]) -> Iterator[FileNode]:
    for candidate in nodes:
        if candidate.is_directory:
            yield from iter_file_nodes(candidate.children or [])
        else:
            yield candidate


def read_review_state(path: Path) -> Optional[ReviewState]:
    """Read only the ``reviewState`` key of a subtitle file."""
    if path.suffix.lower() != SUBTITLE_SUFFIX:
        return None

    try:
        data = json.loads(path.read_text(encoding="utf-8-sig"))
    except (OSError, ValueError):
        return None

    if not isinstance(data, dict):
        return None
    return ReviewState.parse(data.get("reviewState"))


def load_review_states(nodes: Sequence[FileNode]) -> Dict[Path, ReviewState]:
    """Map every file in the tree to its stored review state, if any."""
    result: Dict[Path, ReviewState] = {}
    for node in iter_file_nodes(nodes):
        state = read_review_state(node.path)
        if state is not None:
            result[node.path] = state
    return result

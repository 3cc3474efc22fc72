"""Command-line interface for Subtitle Review."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Sequence

from tqdm import tqdm

from .config import AppConfig, default_root
from .document import ArticleLoadError, load_article, save_article, validate_article_file
from .file_tree import build_tree, iter_file_nodes, load_review_states
from .models import FileNode, ReviewState
from .session import ReviewSession
from .typos import TypoCorrectionStore
from .validation import (
    ContentFilter,
    filter_entries,
    has_errors,
    normalize_keyword,
    validate_article,
)

logger = logging.getLogger(__name__)

STATE_MARKS = {
    ReviewState.NOT_STARTED: "[ ]",
    ReviewState.IN_PROGRESS: "[~]",
    ReviewState.COMPLETED: "[x]",
}


def setup_logging(verbose: bool = False) -> None:
    """Configure logging."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(message)s",
        datefmt="%H:%M:%S"
    )


def parse_arguments(argv: Sequence[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        prog="subtitle-review",
        description="Review and correct JSON subtitle transcripts",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s tree articles/                   # Show files and review state
  %(prog)s validate articles/               # Check every file
  %(prog)s typos add "teh" "the"            # Add a correction
  %(prog)s fix-typos articles/ --dry-run    # Count replacements only
  %(prog)s status talk.json completed       # Mark a file as reviewed
  %(prog)s video talk.json --at 00:01:30    # Find the matching video
        """
    )

    # Storage
    parser.add_argument("--typos-file", help="Typo corrections file (or set SUBTITLE_REVIEW_TYPOS_FILE)")
    parser.add_argument("--state-file", help="Preferences file (or set SUBTITLE_REVIEW_STATE_FILE)")

    # Misc
    parser.add_argument("-v", "--verbose", action="store_true", help="Verbose logging")

    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("tree", help="Show the subtitle file tree")
    p.add_argument("root", nargs="?", default=None, help="Folder to scan")

    p = sub.add_parser("validate", help="Check timestamps, text and metadata")
    p.add_argument("paths", nargs="+", help="Files or folders")

    p = sub.add_parser("fix-typos", help="Apply the typo dictionary")
    p.add_argument("paths", nargs="+", help="Files or folders")
    p.add_argument("--dry-run", action="store_true", help="Count replacements without saving")

    p = sub.add_parser("typos", help="Manage the typo dictionary")
    typos_sub = p.add_subparsers(dest="typos_command", required=True)
    typos_sub.add_parser("list", help="List corrections")
    t = typos_sub.add_parser("add", help="Add or update a correction")
    t.add_argument("source")
    t.add_argument("replacement")
    t = typos_sub.add_parser("remove", help="Remove a correction")
    t.add_argument("source")
    typos_sub.add_parser("reset", help="Remove all corrections")

    p = sub.add_parser("status", help="Show or set a file's review state")
    p.add_argument("file")
    p.add_argument("state", nargs="?", choices=[s.value for s in ReviewState])

    p = sub.add_parser("search", help="List entries matching a keyword")
    p.add_argument("file")
    p.add_argument("keyword", nargs="?", default="")
    p.add_argument("--missing", action="store_true", help="List entries with empty text instead")

    p = sub.add_parser("video", help="Find the video matching a subtitle file")
    p.add_argument("file")
    p.add_argument("--video-root", help="Folder to search (remembered for next time)")
    p.add_argument("--at", dest="timestamp", help="Print the seek target for this timestamp")

    return parser.parse_args(argv)


def collect_article_paths(paths: Sequence[str]) -> List[Path]:
    """Expand files and folders into a list of JSON files."""
    result: List[Path] = []
    for raw in paths:
        path = Path(raw).expanduser().resolve()
        if path.is_dir():
            result.extend(node.path for node in iter_file_nodes(build_tree(path)))
        else:
            result.append(path)
    return result


def _print_tree(nodes: Sequence[FileNode], states, depth: int = 0) -> None:
    indent = "  " * depth
    for node in nodes:
        if node.is_directory:
            print(f"{indent}{node.name}/")
            _print_tree(node.children or [], states, depth + 1)
        else:
            state = states.get(node.path, ReviewState.NOT_STARTED)
            print(f"{indent}{STATE_MARKS[state]} {node.name}")


def cmd_tree(args: argparse.Namespace, config: AppConfig) -> int:
    root = (config.root_dir or default_root()).resolve()
    tree = build_tree(root)
    if not tree:
        logger.warning(f"No JSON files under {root}")
        return 0

    states = load_review_states(tree)
    print(f"{root}")
    _print_tree(tree, states, 1)
    return 0


def cmd_validate(args: argparse.Namespace, config: AppConfig) -> int:
    paths = collect_article_paths(args.paths)
    if not paths:
        logger.error("No JSON files found")
        return 1

    failed = 0
    for path in tqdm(paths, desc="Validating", disable=len(paths) < 2):
        error = validate_article_file(path)
        if error:
            logger.error(error)
            failed += 1
            continue

        try:
            article = load_article(path)
        except ArticleLoadError as e:
            logger.error(f"{path}: {e}")
            failed += 1
            continue

        issues = validate_article(article)
        if not issues:
            continue

        tqdm.write(f"{path}:")
        for issue in issues:
            hint = f" ({issue.suggestion})" if issue.suggestion else ""
            tqdm.write(f"  {issue.severity.value.upper():7} {issue.message}{hint}")
        if has_errors(issues):
            failed += 1

    logger.info(f"Checked {len(paths)} files, {failed} with errors")
    return 1 if failed else 0


def cmd_fix_typos(args: argparse.Namespace, config: AppConfig) -> int:
    store = TypoCorrectionStore(config.typo_corrections_path)
    store.load()
    if not store:
        logger.warning(f"No typo corrections in {store.file_path}")
        return 0

    paths = collect_article_paths(args.paths)
    total = 0
    changed_files = 0
    failed = 0

    for path in tqdm(paths, desc="Correcting", disable=len(paths) < 2):
        try:
            article = load_article(path)
        except ArticleLoadError as e:
            logger.error(f"{path}: {e}")
            continue

        count = store.apply(article.content)
        if not count:
            continue

        if not args.dry_run:
            try:
                save_article(article, path)
            except ArticleLoadError as e:
                logger.error(f"{path}: {e}")
                failed += 1
                continue

        total += count
        changed_files += 1
        logger.debug(f"{path.name}: {count} replacements")

    action = "Would replace" if args.dry_run else "Replaced"
    logger.info(f"{action} {total} occurrences in {changed_files}/{len(paths)} files")
    return 1 if failed else 0


def cmd_typos(args: argparse.Namespace, config: AppConfig) -> int:
    store = TypoCorrectionStore(config.typo_corrections_path)
    store.load()

    if args.typos_command == "list":
        if not store:
            print("No custom corrections")
        for c in store.corrections:
            print(f"{c.source} -> {c.replacement}")
    elif args.typos_command == "add":
        if not args.source.strip() or not args.replacement.strip():
            logger.error("Both source and replacement are required")
            return 1
        store.add(args.source, args.replacement)
        logger.info(f"Saved {len(store)} corrections to {store.file_path}")
    elif args.typos_command == "remove":
        if not store.remove(args.source):
            logger.error(f"No correction for '{args.source}'")
            return 1
    elif args.typos_command == "reset":
        store.reset()
        logger.info("All corrections removed")
    return 0


def _open_session(file: str, config: AppConfig) -> tuple[ReviewSession, Path, bool]:
    """Start a session rooted at the file's folder with the file selected."""
    path = Path(file).expanduser().resolve()
    config.root_dir = path.parent
    session = ReviewSession(config)
    opened = session.select_path(path)
    return session, path, opened


def cmd_status(args: argparse.Namespace, config: AppConfig) -> int:
    session, path, opened = _open_session(args.file, config)
    if not opened:
        logger.error(session.load_error or f"Cannot open {path}")
        return 1

    state = session.review_state_for(path)
    if args.state:
        # 打印写入文件的状态，而非保存后的内存状态
        state = ReviewState(args.state)
        session.mark_reviewed(state)
        if not session.save_changes():
            logger.error(session.load_error)
            return 1

    print(f"{STATE_MARKS[state]} {state.display_name}  {path.name}")
    if session.document.article.reviewedAt:
        print(f"reviewed at {session.document.article.reviewedAt}")
    return 0


def cmd_search(args: argparse.Namespace, config: AppConfig) -> int:
    path = Path(args.file).expanduser().resolve()
    try:
        article = load_article(path)
    except ArticleLoadError as e:
        logger.error(str(e))
        return 1

    keyword = normalize_keyword(args.keyword)
    content_filter = ContentFilter.MISSING if args.missing else ContentFilter.MATCHES
    entries = filter_entries(article.content, content_filter, keyword)

    for entry in entries:
        flag = "*" if entry.is_important else " "
        print(f"{flag} {entry.timestample}  {entry.text}")
    logger.info(f"{len(entries)}/{len(article.content)} entries")
    return 0


def cmd_video(args: argparse.Namespace, config: AppConfig) -> int:
    session, path, opened = _open_session(args.file, config)
    if not opened:
        logger.error(session.load_error or f"Cannot open {path}")
        return 1

    if args.video_root:
        if not session.set_video_root(Path(args.video_root).expanduser().resolve()):
            logger.error(session.load_error)
            return 1

    if session.video_root is None:
        logger.error("No video folder configured, use --video-root")
        return 1

    video = session.current_video
    if video is None:
        logger.error(f"No {path.stem}.mp4 under {session.video_root}")
        return 1

    print(video)
    if args.timestamp:
        seconds = session.play_at(args.timestamp)
        if seconds is None:
            logger.error(f"Invalid timestamp: {args.timestamp}")
            return 1
        print(f"seek {seconds:.0f}s")
    return 0


COMMANDS = {
    "tree": cmd_tree,
    "validate": cmd_validate,
    "fix-typos": cmd_fix_typos,
    "typos": cmd_typos,
    "status": cmd_status,
    "search": cmd_search,
    "video": cmd_video,
}


def run(args: argparse.Namespace) -> int:
    """Dispatch a parsed command."""
    config = AppConfig.from_args(args)

    error = config.validate()
    if error:
        logger.error(error)
        return 1

    return COMMANDS[args.command](args, config)


def main(argv: Sequence[str] | None = None) -> None:
    """CLI entry point."""
    args = parse_arguments(argv)
    setup_logging(args.verbose)

    try:
        sys.exit(run(args))
    except KeyboardInterrupt:
        print("\nInterrupted by user.")
        sys.exit(130)
    except Exception as e:
        logging.error(f"Fatal error: {e}")
        if args.verbose:
            import traceback
            traceback.print_exc()
        sys.exit(1)


if __name__ == "__main__":
    main()

from __future__ import annotations

import argparse
import sys
import time
from importlib import metadata
from pathlib import Path

import tomllib
from rich.console import Console
from rich.markup import escape
from rich.table import Table
from rich.text import Text

from .app import AppState
from .client import RoyalClient
from .config import ReaderConfig, default_log_path
from .errors import ReaderError
from .logging_utils import configure_logging
from .models import format_age
from .reading import ReadingPaneState
from .service import FictionService
from .storage import load_fiction_ids, load_fictions, save_fiction_ids, save_fictions


def _read_local_version() -> str | None:
    try:
        pyproject_path = Path(__file__).resolve().parents[2] / "pyproject.toml"
    except IndexError:  # pragma: no cover - defensive
        return None
    try:
        with pyproject_path.open("rb") as fh:
            data = tomllib.load(fh)
    except (FileNotFoundError, tomllib.TOMLDecodeError):
        return None
    return data.get("project", {}).get("version")


try:
    __version__ = metadata.version("royalreader")
except metadata.PackageNotFoundError:
    __version__ = _read_local_version() or "0.0.0+unknown"


def _add_version_flag(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "-v",
        "--version",
        action="version",
        version=f"royalreader {__version__}",
    )


def _add_common_options(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--state",
        help="Path of the tracked-fiction file (default: $ROYALREADER_STATE or ~/.cache/royalreader/fictions).",
    )
    parser.add_argument(
        "--base-url",
        help="Site to fetch from (default: $ROYALREADER_BASE_URL or https://www.royalroad.com).",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        help="HTTP timeout in seconds for each page request (default: 30).",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable verbose debug logging (page requests, extraction counts).",
    )


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        description="Terminal reader for Royal Road fictions. Subcommands: add, remove, list, chapters, read.",
    )
    _add_version_flag(ap)
    _add_common_options(ap)
    ap.add_argument(
        "--log-file",
        help="Where the reader writes its log while the screen is in use "
        "(default: ~/.cache/royalreader/royalreader.log).",
    )
    return ap


def build_add_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="royalreader add",
        description="Fetch fictions by ID and add them to the tracked list.",
    )
    _add_common_options(ap)
    ap.add_argument("ids", nargs="+", type=int, help="Numeric fiction IDs.")
    return ap


def build_remove_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="royalreader remove",
        description="Remove fiction IDs from the tracked list.",
    )
    _add_common_options(ap)
    ap.add_argument("ids", nargs="+", type=int, help="Numeric fiction IDs.")
    return ap


def build_list_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="royalreader list",
        description="Fetch every tracked fiction and print a summary.",
    )
    _add_common_options(ap)
    return ap


def build_chapters_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="royalreader chapters",
        description="Print the chapter list of a fiction.",
    )
    _add_common_options(ap)
    ap.add_argument("fiction_id", type=int, help="Numeric fiction ID.")
    ap.add_argument(
        "--oldest-first",
        action="store_true",
        help="List chapters in source order instead of most recent first.",
    )
    return ap


def build_read_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="royalreader read",
        description="Print one chapter as wrapped plain text.",
    )
    _add_common_options(ap)
    ap.add_argument("fiction_id", type=int, help="Numeric fiction ID.")
    ap.add_argument("chapter", type=int, help="1-based chapter number in source order.")
    ap.add_argument(
        "--width",
        type=int,
        default=80,
        help="Wrap width in characters (default: 80).",
    )
    return ap


def _config_from_args(args: argparse.Namespace) -> ReaderConfig:
    log_file = getattr(args, "log_file", None)
    try:
        config = ReaderConfig.from_env()
    except ValueError as exc:
        raise SystemExit(str(exc)) from exc
    return config.with_overrides(
        base_url=args.base_url,
        timeout=args.timeout,
        state_path=Path(args.state).expanduser() if args.state else None,
        log_path=Path(log_file).expanduser() if log_file else None,
        debug=bool(args.debug),
    )


def _build_service(config: ReaderConfig) -> FictionService:
    return FictionService(RoyalClient(config.base_url, timeout=config.timeout))


def _run_reader(args: argparse.Namespace) -> int:
    from .tui import launch

    config = _config_from_args(args)
    configure_logging(config.debug, config.log_path or default_log_path())
    service = _build_service(config)
    try:
        fictions = load_fictions(config.state_path, service)
    except ReaderError as exc:
        raise SystemExit(str(exc)) from exc
    state = launch(AppState.with_fictions(fictions), service)
    try:
        save_fictions(config.state_path, state.fictions.items)
    except ReaderError as exc:
        raise SystemExit(str(exc)) from exc
    return 0


def _run_add(args: argparse.Namespace) -> int:
    config = _config_from_args(args)
    configure_logging(config.debug)
    service = _build_service(config)
    console = Console()
    try:
        tracked = load_fiction_ids(config.state_path)
        failures = 0
        for fiction_id in args.ids:
            if fiction_id in tracked:
                console.print(f"Already tracking {fiction_id}")
                continue
            try:
                fiction = service.fetch_fiction(fiction_id)
            except ReaderError as exc:
                console.print(f"[red]Invalid ID {fiction_id}:[/red] {escape(str(exc))}")
                failures += 1
                continue
            tracked.append(fiction.id)
            console.print(f"Added {escape(fiction.title)} ({len(fiction.chapters)} chapters)")
        save_fiction_ids(config.state_path, tracked)
    except ReaderError as exc:
        raise SystemExit(str(exc)) from exc
    return 1 if failures else 0


def _run_remove(args: argparse.Namespace) -> int:
    config = _config_from_args(args)
    configure_logging(config.debug)
    try:
        tracked = load_fiction_ids(config.state_path)
        dropped = set(args.ids)
        remaining = [fiction_id for fiction_id in tracked if fiction_id not in dropped]
        save_fiction_ids(config.state_path, remaining)
    except ReaderError as exc:
        raise SystemExit(str(exc)) from exc
    removed = len(tracked) - len(remaining)
    print(f"Removed {removed} fiction(s).")
    return 0


def _run_list(args: argparse.Namespace) -> int:
    config = _config_from_args(args)
    configure_logging(config.debug)
    service = _build_service(config)
    try:
        fictions = load_fictions(config.state_path, service)
    except ReaderError as exc:
        raise SystemExit(str(exc)) from exc
    if not fictions:
        print("No tracked fictions. Use 'royalreader add ID'.")
        return 0
    now = int(time.time())
    table = Table(title="Tracked fictions")
    table.add_column("ID", justify="right")
    table.add_column("Title")
    table.add_column("Chapters", justify="right")
    table.add_column("Latest")
    for fiction in fictions:
        latest = (
            f"{format_age(now - fiction.chapters[-1].published_at)} ago" if fiction.chapters else "-"
        )
        table.add_row(str(fiction.id), Text(fiction.title), str(len(fiction.chapters)), latest)
    Console().print(table)
    return 0


def _run_chapters(args: argparse.Namespace) -> int:
    config = _config_from_args(args)
    configure_logging(config.debug)
    service = _build_service(config)
    try:
        fiction = service.fetch_fiction(args.fiction_id)
    except ReaderError as exc:
        raise SystemExit(str(exc)) from exc
    now = int(time.time())
    numbered = list(enumerate(fiction.chapters, start=1))
    if not args.oldest_first:
        numbered.reverse()
    table = Table(title=Text(fiction.title))
    table.add_column("#", justify="right")
    table.add_column("Title")
    table.add_column("Published")
    for number, reference in numbered:
        table.add_row(str(number), Text(reference.title), f"{format_age(now - reference.published_at)} ago")
    Console().print(table)
    return 0


def _run_read(args: argparse.Namespace) -> int:
    config = _config_from_args(args)
    configure_logging(config.debug)
    service = _build_service(config)
    try:
        fiction = service.fetch_fiction(args.fiction_id)
        if not 1 <= args.chapter <= len(fiction.chapters):
            raise SystemExit(
                f"Chapter {args.chapter} out of range; {fiction.title} has {len(fiction.chapters)} chapter(s)."
            )
        chapter = service.fetch_chapter(fiction.chapters[args.chapter - 1])
    except ReaderError as exc:
        raise SystemExit(str(exc)) from exc
    pane = ReadingPaneState()
    pane.open(chapter)
    print(chapter.title)
    print()
    for line in pane.wrap(max(args.width, 1), sys.maxsize):
        print(line)
    return 0


_SUBCOMMANDS = {
    "add": (build_add_parser, _run_add),
    "remove": (build_remove_parser, _run_remove),
    "list": (build_list_parser, _run_list),
    "chapters": (build_chapters_parser, _run_chapters),
    "read": (build_read_parser, _run_read),
}


def main(argv: list[str] | None = None) -> int:
    if argv is None:
        argv = sys.argv[1:]

    if argv and argv[0] in _SUBCOMMANDS:
        build, run = _SUBCOMMANDS[argv[0]]
        sub_args = build().parse_args(argv[1:])
        return run(sub_args)

    parser = build_parser()
    args = parser.parse_args(argv)
    return _run_reader(args)


if __name__ == "__main__":
    raise SystemExit(main())

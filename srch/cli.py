import argparse
import logging
import os
import stat
import sys
from typing import List, Optional

from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from srch.config import load_config
from srch.errors import SrchError
from srch.output_formatter import OutputFormatter, OutputWriter
from srch.pattern_matcher import PatternMatcher
from srch.search_coordinator import SearchCoordinator
from srch.search_spec import SearchSpec

error_console = Console(stderr=True)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="srch",
        description="Search files, or piped input, for lines matching a regular expression.",
        epilog="Examples:\n"
        "  srch 'func \\w+' src/           # Search a directory\n"
        "  srch -B 2 -A 2 TODO            # Two lines of context around each match\n"
        "  srch -v -l vendor              # Files with no match at all\n"
        "  tail -f app.log | srch -i error # Search a live stream\n",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("search", help="Regular expression to search for")
    parser.add_argument("directory", nargs="?", default=".", help="Directory to search (default: ./)")
    parser.add_argument("-i", action="store_true", dest="insensitive", help="Case insensitive search")
    parser.add_argument("-v", action="store_true", dest="invert",
                        help="Return lines that do not match the search term")
    parser.add_argument("-l", action="store_true", dest="file_names_only", help="Print filenames with matches")
    parser.add_argument("--follow", action="store_true", help="Follow symlinks")
    parser.add_argument("-A", type=int, default=0, dest="after", metavar="NUM",
                        help="Return this many lines after the matching line")
    parser.add_argument("-B", type=int, default=0, dest="before", metavar="NUM",
                        help="Return this many lines before the matching line")
    parser.add_argument("--ignore-dir", default="", metavar="DIRS",
                        help="Comma separated list of directories to ignore (eg. --ignore-dir=vendor,node_modules)")
    parser.add_argument("--verbose", action="store_true", help="Log skipped files and run details to stderr")
    return parser


def _setup_logging(verbose: bool):
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=error_console, show_path=False)],
    )


def _is_piped(stream) -> bool:
    """
    True for a pipe or a redirected file. Character devices, a terminal or
    /dev/null alike, leave stdin alone and search the tree.
    """
    try:
        mode = os.fstat(stream.fileno()).st_mode
    except (AttributeError, OSError, ValueError):
        # In-memory streams have no descriptor.
        try:
            return not stream.isatty()
        except (AttributeError, ValueError):
            return False
    return not stat.S_ISCHR(mode)


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    _setup_logging(args.verbose)

    if args.before < 0 or args.after < 0:
        parser.error("-A and -B must not be negative")

    config = load_config()
    ignore_dirs = [name for name in args.ignore_dir.split(",") if name] + config.ignore_dirs
    root = args.directory.rstrip("/") or "/"

    try:
        spec = SearchSpec(
            pattern=args.search,
            case_insensitive=args.insensitive,
            invert=args.invert,
            before_context=args.before,
            after_context=args.after,
            file_names_only=args.file_names_only,
        )
        matcher = PatternMatcher.from_spec(spec)

        console = Console(highlight=False, emoji=False, soft_wrap=True)
        formatter = OutputFormatter.detect(console)
        coordinator = SearchCoordinator(
            spec,
            matcher,
            formatter,
            OutputWriter(formatter, console=console),
            pool_size=config.pool_size,
            flush_interval=config.flush_interval,
        )

        if _is_piped(sys.stdin):
            coordinator.search_stream(sys.stdin)
        else:
            coordinator.search_directory(root, follow_symlinks=args.follow, ignore_dirs=ignore_dirs)
    except SrchError as e:
        error_console.print(f"[bold red]Error: {escape(str(e))}[/bold red]", markup=True, highlight=False)
        return 1
    return 0


def run():
    sys.exit(main())


if __name__ == "__main__":
    run()

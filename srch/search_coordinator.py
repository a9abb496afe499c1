import logging
import os
from typing import IO, Iterable, Optional, Sequence

from srch import context_window
from srch.errors import RootPathError
from srch.file_enumerator import enumerate_files
from srch.line_source import DEFAULT_FLUSH_INTERVAL, FileLineSource, StreamLineSource
from srch.output_formatter import OutputFormatter, OutputWriter
from srch.pattern_matcher import PatternMatcher
from srch.search_result import LineRecord, SearchResult, TreeSearchStats
from srch.search_spec import SearchSpec
from srch.worker_pool import DEFAULT_POOL_SIZE, WorkerPool

logger = logging.getLogger(__name__)


def display_name(path: str) -> str:
    """The path as shown to the user: leading "./" removed."""
    while path.startswith("./"):
        path = path[2:]
    return path


class SearchCoordinator:
    """
    Drives one search run: a single document at a time from a live stream,
    or a tree of files fanned out over a bounded worker pool.
    """

    def __init__(
        self,
        spec: SearchSpec,
        matcher: PatternMatcher,
        formatter: OutputFormatter,
        writer: OutputWriter,
        pool_size: int = DEFAULT_POOL_SIZE,
        flush_interval: float = DEFAULT_FLUSH_INTERVAL,
    ):
        self.spec = spec
        self.matcher = matcher
        self.formatter = formatter
        self.writer = writer
        self.pool_size = pool_size
        self.flush_interval = flush_interval

    # --- Single document ---

    def search_lines(self, lines: Sequence[LineRecord], label: str = "") -> SearchResult:
        return context_window.build_result(label, lines, self.matcher, self.spec)

    def search_file(self, path: str) -> Optional[SearchResult]:
        """
        Searches one file. A file that cannot be opened or read is skipped
        silently: returns None and nothing of it is rendered.
        """
        try:
            lines = FileLineSource(path).read()
        except OSError as e:
            logger.debug("Skipping %s: %s", path, e)
            return None
        return self.search_lines(lines, label=display_name(path))

    def render_file_result(self, result: SearchResult) -> Optional[str]:
        """
        Applies the output policy for tree mode.

        With `file_names_only`, a normal search lists files with a match and
        an inverted one lists files with no match at all. Otherwise the file
        label is followed by its rendered windows, if any line was selected.
        """
        label = self.formatter.file_label(result.file_label)
        if self.spec.file_names_only:
            if result.had_any_match != self.spec.invert:
                return label
            return None
        if not result.has_output:
            return None
        return label + "\n" + self.formatter.format_windows(result.windows, self.matcher)

    def process_file(self, path: str) -> Optional[bool]:
        """
        One tree-mode task.

        Returns:
            None when the file was skipped, otherwise whether anything was
            written for it.
        """
        result = self.search_file(path)
        if result is None:
            return None
        message = self.render_file_result(result)
        if message is None:
            return False
        self.writer.write(message)
        return True

    # --- Stream mode ---

    def search_stream(self, stream: IO[str]) -> int:
        """
        Searches a live stream slice by slice, writing each slice's output as
        soon as it is ready. `file_names_only` has no meaning here.

        Returns:
            The number of messages written.
        """
        written = 0
        source = StreamLineSource(stream, flush_interval=self.flush_interval)
        for document in source.documents():
            result = self.search_lines(document)
            if not result.has_output:
                continue
            self.writer.write(self.formatter.format_windows(result.windows, self.matcher))
            written += 1
        return written

    # --- Tree mode ---

    def search_tree(self, paths: Iterable[str]) -> TreeSearchStats:
        """
        Searches every path with at most `pool_size` files in flight. Output
        is written in completion order, not path order.
        """
        paths = list(paths)
        logger.debug("Searching %d files with %d workers", len(paths), self.pool_size)
        with WorkerPool(self.pool_size) as pool:
            for path in paths:
                pool.submit(self.process_file, path)
            outcomes = pool.join()

        stats = TreeSearchStats(files_searched=len(paths))
        for outcome in outcomes:
            if outcome is None:
                stats.files_skipped += 1
            elif outcome:
                stats.files_emitted += 1
        logger.debug("Done: %s", stats)
        return stats

    def search_directory(
        self,
        root: str,
        follow_symlinks: bool = False,
        ignore_dirs: Iterable[str] = (),
    ) -> TreeSearchStats:
        if not os.path.isdir(root):
            raise RootPathError(root)
        paths = enumerate_files(root, follow_symlinks=follow_symlinks, ignore_dirs=ignore_dirs)
        return self.search_tree(paths)

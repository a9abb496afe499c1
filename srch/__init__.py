"""
srch - line-oriented pattern search with context windows.

Usage:
    from srch import SearchSpec, PatternMatcher, OutputFormatter, OutputWriter, SearchCoordinator

    spec = SearchSpec(pattern="TODO", before_context=1, after_context=1)
    formatter = OutputFormatter(interactive=False)
    coordinator = SearchCoordinator(spec, PatternMatcher.from_spec(spec), formatter, OutputWriter(formatter))
    coordinator.search_directory("src")
"""

from srch.errors import PatternError, RootPathError, SrchError
from srch.output_formatter import OutputFormatter, OutputWriter
from srch.pattern_matcher import PatternMatcher
from srch.search_coordinator import SearchCoordinator
from srch.search_result import (
    ContextWindow,
    LineRecord,
    LineRole,
    RenderedLine,
    SearchResult,
    TreeSearchStats,
    WindowBlock,
)
from srch.search_spec import SearchSpec

__all__ = [
    "ContextWindow",
    "LineRecord",
    "LineRole",
    "OutputFormatter",
    "OutputWriter",
    "PatternError",
    "PatternMatcher",
    "RenderedLine",
    "RootPathError",
    "SearchCoordinator",
    "SearchResult",
    "SearchSpec",
    "SrchError",
    "TreeSearchStats",
    "WindowBlock",
]

import enum
from dataclasses import dataclass, field
from typing import List


class LineRole(enum.Enum):
    BEFORE = "before"
    MATCH = "match"
    AFTER = "after"
    PLAIN = "plain"  # inverted mode, no before/after distinction


@dataclass(frozen=True)
class LineRecord:
    """One line of a document. `index` is 0-based, the terminator is stripped."""
    index: int
    text: str


@dataclass(frozen=True)
class ContextWindow:
    """Half-open range [start_index, end_index) of lines emitted around center_index."""
    center_index: int
    start_index: int
    end_index: int

    @property
    def first_line_number(self) -> int:
        return self.start_index + 1

    @property
    def last_line_number(self) -> int:
        return self.end_index


@dataclass
class RenderedLine:
    """A line selected for output, numbered from 1."""
    line_number: int
    role: LineRole
    text: str


@dataclass
class WindowBlock:
    """The rendered lines of one context window."""
    window: ContextWindow
    lines: List[RenderedLine] = field(default_factory=list)
    separated: bool = False  # followed by a "--" line

    @property
    def start_line(self) -> int:
        return self.window.first_line_number

    @property
    def end_line(self) -> int:
        return self.window.last_line_number


@dataclass
class SearchResult:
    """Everything one document produced. Owned by the task that built it."""
    file_label: str
    windows: List[WindowBlock] = field(default_factory=list)
    selected: List[int] = field(default_factory=list)  # the MatchSet, ascending
    had_any_match: bool = False  # pattern matched at least one line, regardless of invert

    @property
    def rendered_lines(self) -> List[RenderedLine]:
        """All windows concatenated in ascending center order. Overlapping windows repeat lines."""
        return [line for block in self.windows for line in block.lines]

    @property
    def has_output(self) -> bool:
        return bool(self.windows)


@dataclass
class TreeSearchStats:
    """Summary of a tree-mode run."""
    files_searched: int = 0
    files_emitted: int = 0
    files_skipped: int = 0  # could not be opened or read

import sys
import threading
from typing import IO, Iterable, Optional

from rich.console import Console
from rich.markup import escape

from srch.pattern_matcher import PatternMatcher
from srch.search_result import LineRole, RenderedLine, WindowBlock

SEPARATOR = "--"

FILE_LABEL_STYLE = "bright_cyan"
MATCH_STYLE = "black on green"
LINE_NUMBER_STYLE = "bright_yellow"

_GLYPHS = {
    LineRole.BEFORE: "-",
    LineRole.MATCH: ":",
    LineRole.AFTER: "+",
    LineRole.PLAIN: ":",
}


class OutputFormatter:
    """
    Decorations for one destination.

    Interactive output is rich markup: colored file labels, line numbers and
    matched spans, with the searched text escaped. Anything else gets the
    text as-is and no line numbers at all.
    """

    def __init__(self, interactive: bool):
        self.interactive = interactive

    @classmethod
    def detect(cls, console: Optional[Console] = None) -> "OutputFormatter":
        console = console or Console()
        return cls(interactive=console.is_terminal)

    def file_label(self, name: str) -> str:
        if not self.interactive:
            return name
        return f"[{FILE_LABEL_STYLE}]{escape(name)}[/{FILE_LABEL_STYLE}]"

    def match_span(self, text: str) -> str:
        if not self.interactive:
            return text
        return f"[{MATCH_STYLE}]{escape(text)}[/{MATCH_STYLE}]"

    def plain_text(self, text: str) -> str:
        if not self.interactive:
            return text
        return escape(text)

    def line_number(self, line_number: int, glyph: str) -> str:
        if not self.interactive:
            return ""
        return f"[{LINE_NUMBER_STYLE}]{line_number}{glyph}[/{LINE_NUMBER_STYLE}]"

    def format_line(self, line: RenderedLine, matcher: PatternMatcher) -> str:
        """`<line-number-decoration> <text>` plus newline."""
        if self.interactive and line.role == LineRole.MATCH:
            text = matcher.highlight(line.text, self.match_span, self.plain_text)
        else:
            text = self.plain_text(line.text)
        return f"{self.line_number(line.line_number, _GLYPHS[line.role])} {text}\n"

    def format_windows(self, blocks: Iterable[WindowBlock], matcher: PatternMatcher) -> str:
        parts = []
        for block in blocks:
            parts.extend(self.format_line(line, matcher) for line in block.lines)
            if block.separated:
                parts.append(SEPARATOR + "\n")
        return "".join(parts)


class OutputWriter:
    """
    The one shared output sink. A single lock is held for each whole
    message so concurrently finishing tasks never interleave lines.
    """

    def __init__(
        self,
        formatter: OutputFormatter,
        console: Optional[Console] = None,
        stream: Optional[IO[str]] = None,
    ):
        self._formatter = formatter
        if console is None:
            console = Console(file=stream or sys.stdout, highlight=False, emoji=False, soft_wrap=True)
        self._console = console
        self._stream = stream or console.file
        self._lock = threading.Lock()

    def write(self, message: str):
        with self._lock:
            if self._formatter.interactive:
                self._console.print(message, markup=True, highlight=False, emoji=False, soft_wrap=True)
            else:
                # Written verbatim: no tab expansion, wrapping or markup.
                self._stream.write(message + "\n")
                self._stream.flush()

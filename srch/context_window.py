from typing import List, Sequence, Tuple

from srch.pattern_matcher import PatternMatcher
from srch.search_result import ContextWindow, LineRecord, LineRole, RenderedLine, SearchResult, WindowBlock
from srch.search_spec import SearchSpec


def select_lines(lines: Sequence[LineRecord], matcher: PatternMatcher, invert: bool) -> Tuple[List[int], bool]:
    """
    Tests every line once.

    Returns:
        The selected indices in ascending order (matching lines, or the
        non-matching ones when `invert` is set), and whether the expression
        matched at least one line. The second value ignores `invert`.
    """
    selected = []
    had_any_match = False
    for record in lines:
        matched = matcher.test(record.text)
        had_any_match = had_any_match or matched
        if matched != invert:
            selected.append(record.index)
    return selected, had_any_match


def compute_window(center: int, before: int, after: int, line_count: int) -> ContextWindow:
    return ContextWindow(
        center_index=center,
        start_index=max(0, center - before),
        end_index=min(line_count, center + 1 + after),
    )


def _role(n: int, center: int, invert: bool) -> LineRole:
    if invert:
        return LineRole.PLAIN
    if n < center:
        return LineRole.BEFORE
    if n == center:
        return LineRole.MATCH
    return LineRole.AFTER


def build_windows(lines: Sequence[LineRecord], selected: Sequence[int], spec: SearchSpec) -> List[WindowBlock]:
    """
    One block per selected index, in ascending order.

    Neighbouring windows are not merged: when they overlap, the shared lines
    are emitted once per window and every window gets its own separator.
    """
    blocks = []
    for center in selected:
        window = compute_window(center, spec.before_context, spec.after_context, len(lines))
        block = WindowBlock(window=window, separated=spec.has_context)
        for n in range(window.start_index, window.end_index):
            block.lines.append(RenderedLine(
                line_number=n + 1,
                role=_role(n, center, spec.invert),
                text=lines[n].text,
            ))
        blocks.append(block)
    return blocks


def build_result(label: str, lines: Sequence[LineRecord], matcher: PatternMatcher, spec: SearchSpec) -> SearchResult:
    """Matches and windows one document."""
    selected, had_any_match = select_lines(lines, matcher, spec.invert)
    return SearchResult(
        file_label=label,
        windows=build_windows(lines, selected, spec),
        selected=selected,
        had_any_match=had_any_match,
    )

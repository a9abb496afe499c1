import re
from typing import Callable, List, Optional

from srch.errors import PatternError
from srch.search_spec import SearchSpec


_LEADING_FLAGS = re.compile(r"(?:\(\?[aiLmsux]+\))*")


def _identity(text: str) -> str:
    return text


class PatternMatcher:
    """
    The compiled search expression.

    The user's expression is wrapped in one capturing group so the matched
    substring can be pulled back out for highlighting. Case-insensitivity is a
    regex flag; the searched text itself is never lower-cased.

    Instances hold no mutable state and can be shared by concurrent tasks.
    """

    def __init__(self, pattern: str, case_insensitive: bool = False):
        self._pattern = pattern
        self._case_insensitive = case_insensitive
        flags = re.IGNORECASE if case_insensitive else 0
        # Global inline flags such as "(?i)" must stay at the very start.
        leading = _LEADING_FLAGS.match(pattern).group(0)
        try:
            self._regex = re.compile(f"{leading}({pattern[len(leading):]})", flags)
        except re.error as e:
            raise PatternError(pattern, str(e)) from e

    @classmethod
    def from_spec(cls, spec: SearchSpec) -> "PatternMatcher":
        return cls(spec.pattern, case_insensitive=spec.case_insensitive)

    @property
    def pattern(self) -> str:
        return self._pattern

    @property
    def case_insensitive(self) -> bool:
        return self._case_insensitive

    @property
    def regex(self) -> "re.Pattern[str]":
        return self._regex

    def test(self, line: str) -> bool:
        """True when the expression matches anywhere in the line."""
        return self._regex.search(line) is not None

    def highlight(
        self,
        line: str,
        decorate: Callable[[str], str],
        between: Optional[Callable[[str], str]] = None,
    ) -> str:
        """
        Rebuilds the line with every matched span passed through `decorate`.

        Args:
            line: The line text.
            decorate: Applied to each matched span (capture group 1).
            between: Applied to the unmatched text around the spans. Lets the
                caller escape markup in the rest of the line without touching
                what the expression sees.

        Returns:
            The decorated line. A line without a match comes back through
            `between` only.
        """
        between = between or _identity
        parts: List[str] = []
        last = 0
        for match in self._regex.finditer(line):
            parts.append(between(line[last:match.start(1)]))
            parts.append(decorate(match.group(1)))
            last = match.end(1)
        parts.append(between(line[last:]))
        return "".join(parts)

import unittest

from srch import context_window
from srch.pattern_matcher import PatternMatcher
from srch.search_result import LineRecord, LineRole
from srch.search_spec import SearchSpec


def _records(texts):
    return [LineRecord(index=i, text=t) for i, t in enumerate(texts)]


_DOCUMENT = _records(["a", "match", "b", "c", "match", "d"])


class TestSearchSpec(unittest.TestCase):
    def test_invert_forces_zero_context(self):
        spec = SearchSpec(pattern="x", invert=True, before_context=3, after_context=2)
        self.assertEqual(spec.before_context, 0)
        self.assertEqual(spec.after_context, 0)
        self.assertFalse(spec.has_context)

    def test_negative_context_rejected(self):
        with self.assertRaises(ValueError):
            SearchSpec(pattern="x", before_context=-1)


class TestSelectLines(unittest.TestCase):
    def test_selects_matching_lines(self):
        selected, had_any = context_window.select_lines(_DOCUMENT, PatternMatcher("match"), invert=False)
        self.assertEqual(selected, [1, 4])
        self.assertTrue(had_any)

    def test_inverted_is_complement(self):
        matcher = PatternMatcher("[abc]")
        normal, _ = context_window.select_lines(_DOCUMENT, matcher, invert=False)
        inverted, _ = context_window.select_lines(_DOCUMENT, matcher, invert=True)
        self.assertEqual(sorted(normal + inverted), list(range(len(_DOCUMENT))))
        self.assertFalse(set(normal) & set(inverted))

    def test_had_any_match_ignores_invert(self):
        selected, had_any = context_window.select_lines(_DOCUMENT, PatternMatcher("match"), invert=True)
        self.assertEqual(selected, [0, 2, 3, 5])
        self.assertTrue(had_any)

    def test_no_match(self):
        selected, had_any = context_window.select_lines(_DOCUMENT, PatternMatcher("zzz"), invert=False)
        self.assertEqual(selected, [])
        self.assertFalse(had_any)

    def test_empty_document(self):
        self.assertEqual(context_window.select_lines([], PatternMatcher("x"), invert=True), ([], False))


class TestComputeWindow(unittest.TestCase):
    def test_clamped_at_start(self):
        window = context_window.compute_window(0, before=3, after=0, line_count=10)
        self.assertEqual((window.start_index, window.end_index), (0, 1))
        self.assertEqual(window.first_line_number, 1)

    def test_clamped_at_end(self):
        window = context_window.compute_window(9, before=0, after=3, line_count=10)
        self.assertEqual((window.start_index, window.end_index), (9, 10))
        self.assertEqual(window.last_line_number, 10)

    def test_line_number_range(self):
        for k in range(6):
            for before in range(4):
                for after in range(4):
                    window = context_window.compute_window(k, before, after, 6)
                    self.assertEqual(window.first_line_number, max(0, k - before) + 1)
                    self.assertEqual(window.last_line_number, min(6, k + 1 + after))


class TestBuildResult(unittest.TestCase):
    def test_two_adjacent_windows_not_merged(self):
        spec = SearchSpec(pattern="match", before_context=1, after_context=1)
        result = context_window.build_result("doc", _DOCUMENT, PatternMatcher("match"), spec)

        self.assertEqual(len(result.windows), 2)
        first, second = result.windows
        self.assertEqual([line.line_number for line in first.lines], [1, 2, 3])
        self.assertEqual([line.line_number for line in second.lines], [4, 5, 6])
        roles = [LineRole.BEFORE, LineRole.MATCH, LineRole.AFTER]
        self.assertEqual([line.role for line in first.lines], roles)
        self.assertEqual([line.role for line in second.lines], roles)
        self.assertTrue(first.separated)
        self.assertTrue(second.separated)
        self.assertTrue(result.had_any_match)

    def test_overlapping_windows_repeat_lines(self):
        document = _records(["x", "hit", "hit", "y"])
        spec = SearchSpec(pattern="hit", before_context=1, after_context=1)
        result = context_window.build_result("doc", document, PatternMatcher("hit"), spec)
        numbers = [line.line_number for line in result.rendered_lines]
        self.assertEqual(numbers, [1, 2, 3, 2, 3, 4])
        self.assertEqual([line.role for line in result.windows[1].lines],
                         [LineRole.BEFORE, LineRole.MATCH, LineRole.AFTER])

    def test_no_context_no_separator(self):
        spec = SearchSpec(pattern="match")
        result = context_window.build_result("doc", _DOCUMENT, PatternMatcher("match"), spec)
        self.assertEqual([line.text for line in result.rendered_lines], ["match", "match"])
        self.assertFalse(any(block.separated for block in result.windows))

    def test_inverted_lines_are_plain(self):
        spec = SearchSpec(pattern="match", invert=True, before_context=2, after_context=2)
        result = context_window.build_result("doc", _DOCUMENT, PatternMatcher("match"), spec)
        self.assertEqual([line.text for line in result.rendered_lines], ["a", "b", "c", "d"])
        self.assertEqual({line.role for line in result.rendered_lines}, {LineRole.PLAIN})
        self.assertEqual([line.line_number for line in result.rendered_lines], [1, 3, 4, 6])
        self.assertTrue(result.had_any_match)

    def test_boundaries(self):
        document = _records(["hit", "x", "y", "z", "hit"])
        spec = SearchSpec(pattern="hit", before_context=3, after_context=3)
        result = context_window.build_result("doc", document, PatternMatcher("hit"), spec)
        self.assertEqual((result.windows[0].start_line, result.windows[0].end_line), (1, 4))
        self.assertEqual((result.windows[1].start_line, result.windows[1].end_line), (2, 5))


if __name__ == '__main__':
    unittest.main()

import unittest

from srch import pattern_matcher
from srch.errors import PatternError
from srch.search_spec import SearchSpec


class TestPatternMatcher(unittest.TestCase):
    def test_matches_anywhere_in_line(self):
        matcher = pattern_matcher.PatternMatcher("match")
        self.assertTrue(matcher.test("a match here"))
        self.assertFalse(matcher.test("nothing"))

    def test_case_sensitive_by_default(self):
        matcher = pattern_matcher.PatternMatcher("abc")
        self.assertFalse(matcher.test("ABC"))

    def test_case_insensitive(self):
        matcher = pattern_matcher.PatternMatcher("abc", case_insensitive=True)
        for line in ["ABC", "AbC", "xxabcxx"]:
            self.assertTrue(matcher.test(line), line)
        self.assertFalse(matcher.test("ab c"))

    def test_pattern_wrapped_in_group(self):
        matcher = pattern_matcher.PatternMatcher("a|b")
        self.assertEqual(matcher.regex.pattern, "(a|b)")
        self.assertEqual(matcher.regex.groups, 1)

    def test_invalid_pattern_raises(self):
        with self.assertRaises(PatternError) as ctx:
            pattern_matcher.PatternMatcher("foo(")
        self.assertEqual(ctx.exception.pattern, "foo(")
        self.assertIn("foo(", str(ctx.exception))

    def test_leading_inline_flags(self):
        matcher = pattern_matcher.PatternMatcher("(?i)foo")
        self.assertEqual(matcher.regex.pattern, "(?i)(foo)")
        self.assertTrue(matcher.test("a FOO b"))
        self.assertEqual(matcher.highlight("xFoOx", lambda s: "<" + s + ">"), "x<FoO>x")

    def test_inline_flag_inside_pattern_stays_put(self):
        matcher = pattern_matcher.PatternMatcher("a(?i:b)")
        self.assertEqual(matcher.regex.pattern, "(a(?i:b))")
        self.assertTrue(matcher.test("aB"))

    def test_from_spec(self):
        spec = SearchSpec(pattern="abc", case_insensitive=True)
        matcher = pattern_matcher.PatternMatcher.from_spec(spec)
        self.assertEqual(matcher.pattern, "abc")
        self.assertTrue(matcher.case_insensitive)
        self.assertTrue(matcher.test("xABCx"))


class TestHighlight(unittest.TestCase):
    def setUp(self):
        self.matcher = pattern_matcher.PatternMatcher("o+", case_insensitive=True)

    def test_decorates_every_span(self):
        result = self.matcher.highlight("foo bOo bar", lambda s: "<" + s + ">")
        self.assertEqual(result, "f<oo> b<Oo> bar")

    def test_keeps_original_case(self):
        result = self.matcher.highlight("FOO", lambda s: "[" + s + "]")
        self.assertEqual(result, "F[OO]")

    def test_between_applies_to_unmatched_text(self):
        result = self.matcher.highlight("xox", lambda s: "<" + s + ">", between=str.upper)
        self.assertEqual(result, "X<o>X")

    def test_no_match_returns_line(self):
        self.assertEqual(self.matcher.highlight("bar", lambda s: "<" + s + ">"), "bar")


if __name__ == '__main__':
    unittest.main()

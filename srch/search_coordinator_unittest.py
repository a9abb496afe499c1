import io
import os
import tempfile
import unittest

from srch import search_coordinator
from srch.errors import RootPathError
from srch.output_formatter import OutputFormatter, OutputWriter
from srch.pattern_matcher import PatternMatcher
from srch.search_result import LineRecord
from srch.search_spec import SearchSpec

_DOCUMENT = "a\nmatch\nb\nc\nmatch\nd\n"


def _coordinator(spec, stream, pool_size=10):
    formatter = OutputFormatter(interactive=False)
    return search_coordinator.SearchCoordinator(
        spec,
        PatternMatcher.from_spec(spec),
        formatter,
        OutputWriter(formatter, stream=stream),
        pool_size=pool_size,
        flush_interval=60,
    )


class TestDisplayName(unittest.TestCase):
    def test_strips_leading_dot_slash(self):
        self.assertEqual(search_coordinator.display_name("./a/b.txt"), "a/b.txt")
        self.assertEqual(search_coordinator.display_name("./.hidden"), ".hidden")
        self.assertEqual(search_coordinator.display_name("src/a.txt"), "src/a.txt")


class TestOutputPolicy(unittest.TestCase):
    """The emitted text for each combination of invert / file_names_only / had_any_match."""

    def setUp(self):
        self.tmpdir = tempfile.TemporaryDirectory()
        self.addCleanup(self.tmpdir.cleanup)
        self.matching = self._write("matching.txt", _DOCUMENT)
        self.clean = self._write("clean.txt", "x\ny\n")
        self.all_matching = self._write("all.txt", "match\nmatch\n")

    def _write(self, name, content):
        path = os.path.join(self.tmpdir.name, name)
        with open(path, "w") as f:
            f.write(content)
        return path

    def _run(self, path, **options):
        stream = io.StringIO()
        emitted = _coordinator(SearchSpec(pattern="match", **options), stream).process_file(path)
        return emitted, stream.getvalue()

    def test_normal_with_match(self):
        emitted, output = self._run(self.matching, before_context=1, after_context=1)
        self.assertTrue(emitted)
        label = search_coordinator.display_name(self.matching)
        self.assertEqual(output, label + "\n a\n match\n b\n--\n c\n match\n d\n--\n\n")

    def test_normal_without_match(self):
        self.assertEqual(self._run(self.clean), (False, ""))

    def test_names_only_with_match(self):
        emitted, output = self._run(self.matching, file_names_only=True)
        self.assertTrue(emitted)
        self.assertEqual(output, search_coordinator.display_name(self.matching) + "\n")

    def test_names_only_without_match(self):
        self.assertEqual(self._run(self.clean, file_names_only=True), (False, ""))

    def test_inverted_lines(self):
        emitted, output = self._run(self.matching, invert=True, before_context=2)
        self.assertTrue(emitted)
        self.assertEqual(output, search_coordinator.display_name(self.matching) + "\n a\n b\n c\n d\n\n")

    def test_inverted_nothing_selected(self):
        self.assertEqual(self._run(self.all_matching, invert=True), (False, ""))

    def test_inverted_names_only_with_match(self):
        self.assertEqual(self._run(self.matching, invert=True, file_names_only=True), (False, ""))

    def test_inverted_names_only_without_match(self):
        emitted, output = self._run(self.clean, invert=True, file_names_only=True)
        self.assertTrue(emitted)
        self.assertEqual(output, search_coordinator.display_name(self.clean) + "\n")

    def test_unreadable_file_skipped(self):
        emitted, output = self._run(os.path.join(self.tmpdir.name, "missing.txt"))
        self.assertIsNone(emitted)
        self.assertEqual(output, "")


class TestSearchLines(unittest.TestCase):
    def test_single_document(self):
        spec = SearchSpec(pattern="match", before_context=1, after_context=1)
        coordinator = _coordinator(spec, io.StringIO())
        lines = [LineRecord(i, t) for i, t in enumerate(_DOCUMENT.splitlines())]
        result = coordinator.search_lines(lines)
        self.assertEqual(result.selected, [1, 4])
        self.assertEqual(len(result.rendered_lines), 6)


class TestSearchStream(unittest.TestCase):
    def test_emits_each_slice(self):
        stream = io.StringIO()
        coordinator = _coordinator(SearchSpec(pattern="match"), stream)
        written = coordinator.search_stream(io.StringIO("match one\nx\nmatch two\n"))
        # The first line is its own slice; the rest arrive together at end-of-input.
        self.assertEqual(written, 2)
        self.assertEqual(stream.getvalue(), " match one\n\n match two\n\n")

    def test_silent_without_match(self):
        stream = io.StringIO()
        coordinator = _coordinator(SearchSpec(pattern="zzz"), stream)
        self.assertEqual(coordinator.search_stream(io.StringIO("a\nb\n")), 0)
        self.assertEqual(stream.getvalue(), "")

    def test_ignores_file_names_only(self):
        stream = io.StringIO()
        coordinator = _coordinator(SearchSpec(pattern="a", file_names_only=True), stream)
        coordinator.search_stream(io.StringIO("a\n"))
        self.assertEqual(stream.getvalue(), " a\n\n")


class TestSearchTree(unittest.TestCase):
    def setUp(self):
        self.tmpdir = tempfile.TemporaryDirectory()
        self.addCleanup(self.tmpdir.cleanup)
        self.paths = []
        for n in range(25):
            path = os.path.join(self.tmpdir.name, f"file{n:02d}.txt")
            with open(path, "w") as f:
                f.write("".join(f"line {i} of file{n:02d} needle\n" for i in range(40)))
            self.paths.append(path)

    def test_every_file_once_and_atomic(self):
        stream = io.StringIO()
        coordinator = _coordinator(SearchSpec(pattern="needle"), stream, pool_size=10)
        stats = coordinator.search_tree(self.paths)

        self.assertEqual(stats.files_searched, 25)
        self.assertEqual(stats.files_emitted, 25)
        self.assertEqual(stats.files_skipped, 0)

        messages = [m for m in stream.getvalue().split("\n\n") if m]
        self.assertEqual(len(messages), 25)
        labels = []
        for message in messages:
            label, *lines = message.split("\n")
            name = os.path.basename(label)[:-len(".txt")]
            self.assertEqual(len(lines), 40)
            for line in lines:
                self.assertTrue(line.endswith(f"of {name} needle"), line)
            labels.append(label)
        self.assertEqual(sorted(labels), sorted(search_coordinator.display_name(p) for p in self.paths))

    def test_same_content_per_file_across_runs(self):
        def run():
            stream = io.StringIO()
            _coordinator(SearchSpec(pattern="needle", before_context=1), stream).search_tree(self.paths)
            return sorted(m for m in stream.getvalue().split("\n\n") if m)

        self.assertEqual(run(), run())

    def test_missing_files_counted_as_skipped(self):
        stream = io.StringIO()
        paths = self.paths[:3] + [os.path.join(self.tmpdir.name, "gone.txt")]
        stats = _coordinator(SearchSpec(pattern="needle"), stream).search_tree(paths)
        self.assertEqual((stats.files_searched, stats.files_emitted, stats.files_skipped), (4, 3, 1))

    def test_search_directory(self):
        stream = io.StringIO()
        stats = _coordinator(SearchSpec(pattern="file07", file_names_only=True), stream).search_directory(
            self.tmpdir.name)
        self.assertEqual(stats.files_searched, 25)
        self.assertEqual(stream.getvalue(), search_coordinator.display_name(self.paths[7]) + "\n")

    def test_search_directory_missing_root(self):
        coordinator = _coordinator(SearchSpec(pattern="x"), io.StringIO())
        with self.assertRaises(RootPathError):
            coordinator.search_directory(os.path.join(self.tmpdir.name, "nope"))

    def test_search_directory_root_is_file(self):
        coordinator = _coordinator(SearchSpec(pattern="x"), io.StringIO())
        with self.assertRaises(RootPathError):
            coordinator.search_directory(self.paths[0])


if __name__ == '__main__':
    unittest.main()

import io
import os
import tempfile
import unittest

from srch import line_source


class TestFileLineSource(unittest.TestCase):
    def setUp(self):
        self.tmpdir = tempfile.TemporaryDirectory()
        self.addCleanup(self.tmpdir.cleanup)

    def _write(self, name, content, mode="w"):
        path = os.path.join(self.tmpdir.name, name)
        with open(path, mode) as f:
            f.write(content)
        return path

    def test_reads_lines_without_terminator(self):
        path = self._write("a.txt", "one\ntwo\n\nfour\n")
        records = line_source.FileLineSource(path).read()
        self.assertEqual([r.text for r in records], ["one", "two", "", "four"])
        self.assertEqual([r.index for r in records], [0, 1, 2, 3])

    def test_keeps_unterminated_last_line(self):
        path = self._write("b.txt", "one\ntwo")
        self.assertEqual([r.text for r in line_source.FileLineSource(path)], ["one", "two"])

    def test_invalid_utf8_is_replaced(self):
        path = self._write("c.bin", b"ok\n\xff\xfe\n", mode="wb")
        records = line_source.FileLineSource(path).read()
        self.assertEqual(records[0].text, "ok")
        self.assertEqual(len(records), 2)

    def test_missing_file_raises(self):
        with self.assertRaises(OSError):
            line_source.FileLineSource(os.path.join(self.tmpdir.name, "missing")).read()

    def test_directory_raises(self):
        with self.assertRaises(OSError):
            line_source.FileLineSource(self.tmpdir.name).read()


class TestStreamLineSource(unittest.TestCase):
    def test_first_line_flushes_then_rest_at_end(self):
        stream = io.StringIO("a\nb\nc\n")
        documents = list(line_source.StreamLineSource(stream, flush_interval=60).documents())
        self.assertEqual([[r.text for r in doc] for doc in documents], [["a"], ["b", "c"]])

    def test_each_slice_restarts_numbering(self):
        stream = io.StringIO("a\nb\nc")
        documents = list(line_source.StreamLineSource(stream, flush_interval=60).documents())
        self.assertEqual([r.index for r in documents[-1]], [0, 1])
        self.assertEqual(documents[-1][-1].text, "c")

    def test_empty_stream(self):
        self.assertEqual(list(line_source.StreamLineSource(io.StringIO("")).documents()), [])

    def test_flushes_while_producer_is_idle(self):
        read_fd, write_fd = os.pipe()
        reader = os.fdopen(read_fd, "r")
        writer = os.fdopen(write_fd, "w")
        self.addCleanup(reader.close)

        documents = line_source.StreamLineSource(reader, flush_interval=0.05).documents()
        writer.write("first\n")
        writer.flush()
        self.assertEqual([r.text for r in next(documents)], ["first"])

        writer.write("second\nthird\n")
        writer.flush()
        # The pipe stays open; the slice must still come out on the timer.
        collected = []
        while len(collected) < 2:
            collected.extend(r.text for r in next(documents))
        self.assertEqual(collected, ["second", "third"])

        writer.close()
        self.assertEqual(list(documents), [])

    def test_invalid_utf8_is_replaced(self):
        stream = io.TextIOWrapper(io.BytesIO(b"needle one\n\xff\xfe bin\nneedle two\n"), encoding="utf-8")
        documents = list(line_source.StreamLineSource(stream, flush_interval=60).documents())
        texts = [r.text for doc in documents for r in doc]
        self.assertEqual(texts, ["needle one", "\ufffd\ufffd bin", "needle two"])

    def test_read_error_drops_pending_lines(self):
        class _Failing:
            def __iter__(self):
                yield "a\n"
                yield "b\n"
                raise OSError("boom")

        source = line_source.StreamLineSource(_Failing(), flush_interval=60)
        documents = [[r.text for r in doc] for doc in source.documents()]
        self.assertEqual(documents, [["a"]])


if __name__ == '__main__':
    unittest.main()

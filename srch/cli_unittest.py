import io
import os
import tempfile
import unittest
from unittest.mock import patch

from srch import cli
from srch.config import SrchConfig


class _Terminal(io.StringIO):
    def isatty(self):
        return True


class TestBuildParser(unittest.TestCase):
    def test_flags(self):
        args = cli.build_parser().parse_args(
            ["-i", "-v", "-l", "--follow", "-A", "2", "-B", "3", "--ignore-dir=vendor,dist", "term", "src/"])
        self.assertTrue(args.insensitive)
        self.assertTrue(args.invert)
        self.assertTrue(args.file_names_only)
        self.assertTrue(args.follow)
        self.assertEqual((args.after, args.before), (2, 3))
        self.assertEqual(args.ignore_dir, "vendor,dist")
        self.assertEqual((args.search, args.directory), ("term", "src/"))

    def test_defaults(self):
        args = cli.build_parser().parse_args(["term"])
        self.assertEqual(args.directory, ".")
        self.assertEqual((args.after, args.before), (0, 0))

    def test_missing_search_term(self):
        with patch("sys.stderr", io.StringIO()), self.assertRaises(SystemExit) as ctx:
            cli.build_parser().parse_args([])
        self.assertEqual(ctx.exception.code, 2)


class TestMain(unittest.TestCase):
    def setUp(self):
        self.tmpdir = tempfile.TemporaryDirectory()
        self.addCleanup(self.tmpdir.cleanup)
        with open(os.path.join(self.tmpdir.name, "a.txt"), "w") as f:
            f.write("one\nneedle\nthree\n")
        os.makedirs(os.path.join(self.tmpdir.name, "skip"))
        with open(os.path.join(self.tmpdir.name, "skip", "b.txt"), "w") as f:
            f.write("needle\n")

        config_patch = patch.object(cli, "load_config", return_value=SrchConfig(ignore_dirs=["skip"]))
        config_patch.start()
        self.addCleanup(config_patch.stop)

        # Terminal detection must only see the patched stdout.
        env = patch.dict(os.environ)
        env.start()
        self.addCleanup(env.stop)
        for key in ("FORCE_COLOR", "TTY_COMPATIBLE", "TTY_INTERACTIVE"):
            os.environ.pop(key, None)

    def _main(self, argv, stdin=None):
        stdout = io.StringIO()
        with patch("sys.stdout", stdout), patch("sys.stdin", stdin or _Terminal()):
            code = cli.main(argv)
        return code, stdout.getvalue()

    def test_tree_search(self):
        code, output = self._main(["-B", "1", "needle", self.tmpdir.name + "/"])
        self.assertEqual(code, 0)
        label = os.path.join(self.tmpdir.name, "a.txt")
        self.assertEqual(output, f"{label}\n one\n needle\n--\n\n")

    def test_no_match_is_success(self):
        code, output = self._main(["absent", self.tmpdir.name])
        self.assertEqual((code, output), (0, ""))

    def test_stdin_search_ignores_path(self):
        code, output = self._main(["needle", "/does/not/exist"], stdin=io.StringIO("needle\nhay\n"))
        self.assertEqual(code, 0)
        self.assertEqual(output, " needle\n\n")

    def test_stdin_with_invalid_utf8(self):
        stdin = io.TextIOWrapper(io.BytesIO(b"needle one\n\xff\xfe bin\nneedle two\n"), encoding="utf-8")
        code, output = self._main(["needle"], stdin=stdin)
        self.assertEqual(code, 0)
        self.assertIn(" needle one\n", output)
        self.assertIn(" needle two\n", output)

    def test_dev_null_stdin_searches_tree(self):
        with open(os.devnull, "r") as devnull:
            code, output = self._main(["needle", self.tmpdir.name], stdin=devnull)
        self.assertEqual(code, 0)
        self.assertIn(os.path.join(self.tmpdir.name, "a.txt"), output)

    def test_pipe_stdin_is_streamed(self):
        read_fd, write_fd = os.pipe()
        with os.fdopen(write_fd, "w") as writer:
            writer.write("needle\n")
        with os.fdopen(read_fd, "r") as reader:
            code, output = self._main(["needle", self.tmpdir.name], stdin=reader)
        self.assertEqual((code, output), (0, " needle\n\n"))

    def test_redirected_file_stdin_is_streamed(self):
        path = os.path.join(self.tmpdir.name, "a.txt")
        with open(path, "r") as redirected:
            code, output = self._main(["needle", "/does/not/exist"], stdin=redirected)
        self.assertEqual((code, output), (0, " needle\n\n"))

    def test_missing_root_is_fatal(self):
        with patch.object(cli.error_console, "print") as error:
            code, output = self._main(["needle", os.path.join(self.tmpdir.name, "nope")])
        self.assertEqual(code, 1)
        self.assertEqual(output, "")
        self.assertIn("Folder not found", error.call_args[0][0])

    def test_invalid_pattern_is_fatal(self):
        with patch.object(cli.error_console, "print") as error:
            code, _ = self._main(["[unclosed", self.tmpdir.name])
        self.assertEqual(code, 1)
        self.assertIn("Invalid search pattern", error.call_args[0][0])


if __name__ == '__main__':
    unittest.main()

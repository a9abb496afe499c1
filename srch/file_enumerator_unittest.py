import os
import tempfile
import unittest

from srch import file_enumerator


class TestEnumerateFiles(unittest.TestCase):
    def setUp(self):
        self.tmpdir = tempfile.TemporaryDirectory()
        self.addCleanup(self.tmpdir.cleanup)
        self.root = self.tmpdir.name
        for rel in ["a.txt", "src/b.py", "src/deep/c.py", "vendor/d.txt", ".git/config", ".cache/e.txt"]:
            path = os.path.join(self.root, rel)
            os.makedirs(os.path.dirname(path), exist_ok=True)
            with open(path, "w") as f:
                f.write("x\n")

    def _relative(self, paths):
        return [os.path.relpath(p, self.root) for p in paths]

    def test_default_exclusions(self):
        files = self._relative(file_enumerator.enumerate_files(self.root))
        self.assertEqual(files, ["a.txt", "src/b.py", "src/deep/c.py", "vendor/d.txt"])

    def test_ignore_dirs(self):
        files = self._relative(file_enumerator.enumerate_files(self.root, ignore_dirs=["vendor", "deep", ""]))
        self.assertEqual(files, ["a.txt", "src/b.py"])

    def test_paths_keep_root_prefix(self):
        cwd = os.getcwd()
        self.addCleanup(os.chdir, cwd)
        os.chdir(self.root)
        self.assertIn("./a.txt", file_enumerator.enumerate_files("."))

    @unittest.skipUnless(hasattr(os, "symlink"), "symlinks not supported")
    def test_symlinks_only_when_following(self):
        os.symlink(os.path.join(self.root, "src"), os.path.join(self.root, "link"))
        os.symlink(os.path.join(self.root, "a.txt"), os.path.join(self.root, "alias.txt"))

        files = self._relative(file_enumerator.enumerate_files(self.root))
        self.assertNotIn("alias.txt", files)
        self.assertFalse(any(f.startswith("link") for f in files))

        followed = self._relative(file_enumerator.enumerate_files(self.root, follow_symlinks=True))
        self.assertIn("alias.txt", followed)
        # "link" and "src" are the same real directory, walked once.
        self.assertEqual(len([f for f in followed if f.endswith("b.py")]), 1)

    @unittest.skipUnless(hasattr(os, "symlink"), "symlinks not supported")
    def test_symlink_cycle(self):
        os.symlink(self.root, os.path.join(self.root, "src", "loop"))
        files = file_enumerator.enumerate_files(self.root, follow_symlinks=True)
        self.assertEqual(len(files), len(set(os.path.realpath(f) for f in files)))


if __name__ == '__main__':
    unittest.main()

"""Tests for paths module."""

import os
import unittest
from pathlib import Path
from tempfile import TemporaryDirectory
from unittest.mock import patch

from buildtree.paths import glob, globber, look_path, replace_suffix, touch


class TestGlob(unittest.TestCase):
    def test_results_sorted_per_pattern_and_concatenated(self):
        with TemporaryDirectory() as tmpdir:
            root = Path(tmpdir)
            for name in ("b.c", "a.c", "z.h", "m.h"):
                (root / name).write_text("")

            result = glob(str(root / "*.h"), str(root / "*.c"))

            self.assertEqual(
                [os.path.basename(p) for p in result],
                ["m.h", "z.h", "a.c", "b.c"],
            )

    def test_no_matches(self):
        with TemporaryDirectory() as tmpdir:
            self.assertEqual(glob(os.path.join(tmpdir, "*.rs")), [])

    def test_globber_is_lazy(self):
        with TemporaryDirectory() as tmpdir:
            files = globber(os.path.join(tmpdir, "*.c"))
            self.assertEqual(files(), [])

            Path(tmpdir, "main.c").write_text("")
            self.assertEqual([os.path.basename(p) for p in files()], ["main.c"])


class TestTouch(unittest.TestCase):
    def test_creates_file_and_parents(self):
        with TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "stamps" / "configured"
            touch(str(path))
            self.assertTrue(path.is_file())

    def test_truncates_existing_file(self):
        with TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "stamp"
            path.write_text("old")
            touch(path)
            self.assertEqual(path.read_text(), "")


class TestReplaceSuffix(unittest.TestCase):
    def test_replaces_last_suffix(self):
        self.assertEqual(replace_suffix("src/main.c", ".o"), "src/main.o")
        self.assertEqual(replace_suffix("lib.tar.gz", ".zst"), "lib.tar.zst")

    def test_no_suffix(self):
        for path in ("Makefile", ".hidden", "dir.d/file"):
            with self.subTest(path=path):
                with self.assertRaises(ValueError):
                    replace_suffix(path, ".o")


class TestLookPath(unittest.TestCase):
    def test_first_found_name_returned(self):
        found = {"clang": "/usr/bin/clang", "gcc": "/usr/bin/gcc"}
        with patch("buildtree.paths.shutil.which", side_effect=found.get):
            self.assertEqual(look_path("icc", "clang", "gcc"), "clang")

    def test_none_found(self):
        with patch("buildtree.paths.shutil.which", return_value=None):
            self.assertEqual(look_path("icc", "xlc"), "")


if __name__ == "__main__":
    unittest.main()

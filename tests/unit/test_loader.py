"""Tests for loader module."""

import unittest
from pathlib import Path
from tempfile import TemporaryDirectory

from buildtree.loader import BuildScriptError, find_build_script, load_targets_function

SCRIPT = """
from buildtree import command, target_default

def targets(ctx):
    return [target_default("all", command("true"))]
"""


class TestFindBuildScript(unittest.TestCase):
    def test_found_in_start_dir(self):
        with TemporaryDirectory() as tmpdir:
            root = Path(tmpdir).resolve()
            (root / "build.py").write_text(SCRIPT)

            self.assertEqual(find_build_script(root), root / "build.py")

    def test_found_in_parent(self):
        with TemporaryDirectory() as tmpdir:
            root = Path(tmpdir).resolve()
            (root / "buildtree.py").write_text(SCRIPT)
            nested = root / "a" / "b"
            nested.mkdir(parents=True)

            self.assertEqual(find_build_script(nested), root / "buildtree.py")

    def test_build_py_preferred(self):
        with TemporaryDirectory() as tmpdir:
            root = Path(tmpdir).resolve()
            (root / "buildtree.py").write_text(SCRIPT)
            (root / "build.py").write_text(SCRIPT)

            self.assertEqual(find_build_script(root), root / "build.py")


class TestLoadTargetsFunction(unittest.TestCase):
    def test_returns_targets_function(self):
        with TemporaryDirectory() as tmpdir:
            script = Path(tmpdir) / "build.py"
            script.write_text(SCRIPT)

            targets = load_targets_function(script)

            self.assertTrue(callable(targets))
            self.assertEqual(targets(None)[0].name, "all")

    def test_missing_targets_function(self):
        with TemporaryDirectory() as tmpdir:
            script = Path(tmpdir) / "build.py"
            script.write_text("TARGETS = []\n")

            with self.assertRaises(BuildScriptError) as cm:
                load_targets_function(script)
            self.assertIn("targets(ctx)", str(cm.exception))

    def test_broken_script(self):
        with TemporaryDirectory() as tmpdir:
            script = Path(tmpdir) / "build.py"
            script.write_text("def targets(ctx:\n")

            with self.assertRaises(BuildScriptError):
                load_targets_function(script)


if __name__ == "__main__":
    unittest.main()

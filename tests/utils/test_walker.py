import os
import tempfile
import unittest
from pathlib import Path

from dupblock.utils.walker import FileContext, walk, walk_files


class FileContextTest(unittest.TestCase):
    """Test FileContext class functionality."""

    def test_name_property_read_only(self):
        context = FileContext(None, "test.txt")
        self.assertEqual("test.txt", context.name)

        with self.assertRaises(AttributeError):
            context.name = "other.txt"

    def test_parent_property_raises_on_none(self):
        context = FileContext(None, "root")

        with self.assertRaises(LookupError) as cm:
            _ = context.parent

        self.assertIn("no parent", str(cm.exception))

    def test_stat_raises_when_unavailable(self):
        context = FileContext(None, "test")

        with self.assertRaises(LookupError) as cm:
            _ = context.stat

        self.assertIn("stat not available", str(cm.exception))

    def test_stat_is_cached(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            test_file = Path(tmpdir) / "test.txt"
            test_file.write_text("content")
            context = FileContext(None, "test.txt", test_file)

            st = context.stat
            self.assertEqual(7, st.st_size)
            self.assertIs(st, context.stat)

    def test_relative_path_nested(self):
        root = FileContext(None, None)
        dir1 = FileContext(root, "dir1")
        dir2 = FileContext(dir1, "dir2")
        file_ctx = FileContext(dir2, "file.txt")

        self.assertIsNone(root.relative_path)
        self.assertEqual("dir1/dir2/file.txt", file_ctx.relative_path)

    def test_is_file_and_is_dir(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            test_file = Path(tmpdir) / "test.txt"
            test_file.write_text("content")
            test_dir = Path(tmpdir) / "subdir"
            test_dir.mkdir()

            file_context = FileContext(None, "test.txt", test_file)
            dir_context = FileContext(None, "subdir", test_dir)

            self.assertTrue(file_context.is_file())
            self.assertFalse(file_context.is_dir())
            self.assertTrue(dir_context.is_dir())
            self.assertFalse(dir_context.is_file())

    def test_broken_symlink_is_neither_file_nor_dir(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            link = Path(tmpdir) / "broken"
            os.symlink(Path(tmpdir) / "missing", link)

            context = FileContext(None, "broken", link)

            self.assertIsNone(context.stat)
            self.assertFalse(context.is_file())
            self.assertFalse(context.is_dir())

    def test_symlink_to_file_is_file(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            target = Path(tmpdir) / "target.txt"
            target.write_text("content")
            link = Path(tmpdir) / "link.txt"
            os.symlink(target, link)

            self.assertTrue(FileContext(None, "link.txt", link).is_file())


class WalkTest(unittest.TestCase):
    """Test recursive traversal."""

    def test_walk_visits_entries_in_name_order(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            root = Path(tmpdir)
            (root / "b").mkdir()
            (root / "b" / "inner.txt").write_text("x")
            (root / "a.txt").write_text("x")
            (root / "c.txt").write_text("x")

            visited = [context.relative_path for _, context in walk(root, FileContext(None, None, root))]

            self.assertEqual(["a.txt", "b", "b/inner.txt", "c.txt"], visited)

    def test_walk_files_skips_directories(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            root = Path(tmpdir)
            (root / "sub" / "deeper").mkdir(parents=True)
            (root / "sub" / "deeper" / "file.txt").write_text("x")

            files = [(path, context.relative_path) for path, context in walk_files(root)]

            self.assertEqual([(root / "sub" / "deeper" / "file.txt", "sub/deeper/file.txt")], files)

    def test_walk_follows_directory_symlink(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            root = Path(tmpdir) / "root"
            outside = Path(tmpdir) / "outside"
            root.mkdir()
            outside.mkdir()
            (outside / "file.txt").write_text("x")
            os.symlink(outside, root / "link")

            files = [context.relative_path for _, context in walk_files(root)]

            self.assertEqual(["link/file.txt"], files)

    def test_walk_stops_at_symlink_loop(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            root = Path(tmpdir)
            (root / "a" / "b").mkdir(parents=True)
            (root / "a" / "b" / "file.txt").write_text("x")
            os.symlink(root / "a", root / "a" / "b" / "up")

            files = [context.relative_path for _, context in walk_files(root)]

            self.assertEqual(["a/b/file.txt"], files)

    def test_sibling_symlinks_to_same_directory_are_both_walked(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            root = Path(tmpdir) / "root"
            shared = Path(tmpdir) / "shared"
            root.mkdir()
            shared.mkdir()
            (shared / "file.txt").write_text("x")
            os.symlink(shared, root / "one")
            os.symlink(shared, root / "two")

            files = [context.relative_path for _, context in walk_files(root)]

            self.assertEqual(["one/file.txt", "two/file.txt"], files)


if __name__ == '__main__':
    unittest.main()

import unittest
from pathlib import Path

from dupblock.glob.pattern import (
    PatternError,
    compile_pattern,
    normalize_pattern,
    split_base,
    translate_suffix,
)
from dupblock.settings import ConfigurationError


class PatternCompileTest(unittest.TestCase):
    """Test compilation of glob patterns into base directory and matcher."""

    def test_normalize_strips_relative_and_absolute_prefixes(self):
        self.assertEqual("src/*.c", normalize_pattern("./src/*.c"))
        self.assertEqual("src/*.c", normalize_pattern("/src/*.c"))
        self.assertEqual("src/*.c", normalize_pattern("././/src/*.c"))

    def test_split_base_stops_before_glob_segment(self):
        self.assertEqual(("src", "**/*.py"), split_base("src/**/*.py"))
        self.assertEqual(("src/lib", "a*/b.py"), split_base("src/lib/a*/b.py"))
        self.assertEqual(("src", "?.py"), split_base("src/?.py"))

    def test_split_base_without_directory(self):
        self.assertEqual((".", "*.c"), split_base("*.c"))

    def test_split_base_literal_pattern(self):
        self.assertEqual(("docs/index.md", ""), split_base("docs/index.md"))

    def test_compile_sets_base_dir(self):
        compiled = compile_pattern("./foo/**/*.cpp")
        self.assertEqual(Path("foo"), compiled.base_dir)
        self.assertEqual("./foo/**/*.cpp", compiled.pattern)

    def test_single_star_stays_within_segment(self):
        compiled = compile_pattern("*.c")
        self.assertTrue(compiled.matches("main.c"))
        self.assertTrue(compiled.matches(".c"))
        self.assertFalse(compiled.matches("sub/main.c"))
        self.assertFalse(compiled.matches("main.cpp"))

    def test_question_mark_matches_one_character(self):
        compiled = compile_pattern("src/file?.txt")
        self.assertTrue(compiled.matches("file1.txt"))
        self.assertFalse(compiled.matches("file.txt"))
        self.assertFalse(compiled.matches("file12.txt"))
        self.assertFalse(compiled.matches("file/.txt"))

    def test_double_star_crosses_directories(self):
        compiled = compile_pattern("src/**/*.txt")
        self.assertTrue(compiled.matches("a.txt"))
        self.assertTrue(compiled.matches("sub/b.txt"))
        self.assertTrue(compiled.matches("sub/deeper/c.txt"))
        self.assertFalse(compiled.matches("c.md"))

    def test_trailing_double_star_matches_everything(self):
        compiled = compile_pattern("lib/**")
        self.assertTrue(compiled.matches("a"))
        self.assertTrue(compiled.matches("x/y/z.bin"))

    def test_double_star_inside_name(self):
        compiled = compile_pattern("src/a**z")
        self.assertTrue(compiled.matches("az"))
        self.assertTrue(compiled.matches("a/b/z"))
        self.assertFalse(compiled.matches("b/z"))

    def test_double_star_glued_to_name_needs_a_directory(self):
        compiled = compile_pattern("src/x**/y.txt")
        self.assertFalse(compiled.matches("xy.txt"))
        self.assertTrue(compiled.matches("x/y.txt"))
        self.assertTrue(compiled.matches("xa/b/y.txt"))

    def test_double_star_segment_matches_no_directory(self):
        compiled = compile_pattern("src/a/**/y.txt")
        self.assertEqual(Path("src/a"), compiled.base_dir)
        self.assertTrue(compiled.matches("y.txt"))
        self.assertTrue(compiled.matches("b/c/y.txt"))
        self.assertFalse(compiled.matches("ay.txt"))

    def test_literal_characters_are_escaped(self):
        compiled = compile_pattern("dir/a+b(1)[x].*")
        self.assertTrue(compiled.matches("a+b(1)[x].txt"))
        self.assertFalse(compiled.matches("aab(1)[x].txt"))
        self.assertFalse(compiled.matches("a+b1x.txt"))

    def test_literal_pattern_matches_everything_under_base(self):
        compiled = compile_pattern("src/main.c")
        self.assertEqual(Path("src/main.c"), compiled.base_dir)
        self.assertTrue(compiled.matches("main.c"))
        self.assertTrue(compiled.matches("any/thing"))

    def test_translate_empty_suffix(self):
        self.assertEqual(translate_suffix("**"), translate_suffix(""))

    def test_empty_pattern_is_configuration_error(self):
        with self.assertRaises(PatternError) as cm:
            compile_pattern("")

        self.assertIsInstance(cm.exception, ConfigurationError)
        self.assertIn("empty pattern", str(cm.exception))


if __name__ == '__main__':
    unittest.main()

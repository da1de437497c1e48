"""Testing for exclusion patterns."""

import unittest

from tarhelper import exclude


class MatchPathTest(unittest.TestCase):

  def test_wildcards_stay_in_one_component(self):
    self.assertTrue(exclude.match_path("*.tmp", "drop.tmp"))
    self.assertFalse(exclude.match_path("*.tmp", "dir/drop.tmp"))
    self.assertTrue(exclude.match_path("dir/*", "dir/x"))
    self.assertFalse(exclude.match_path("dir/*", "dir/x/y"))
    self.assertTrue(exclude.match_path("*/x", "dir/x"))
    self.assertTrue(exclude.match_path("a?c", "abc"))
    self.assertFalse(exclude.match_path("a?c", "a/c"))

  def test_character_classes(self):
    self.assertTrue(exclude.match_path("[ab].txt", "a.txt"))
    self.assertFalse(exclude.match_path("[ab].txt", "c.txt"))
    self.assertTrue(exclude.match_path("[!ab].txt", "c.txt"))

  def test_case_sensitive(self):
    self.assertFalse(exclude.match_path("*.TMP", "drop.tmp"))

  def test_literal(self):
    self.assertTrue(exclude.match_path("sub", "sub"))
    self.assertFalse(exclude.match_path("sub", "subdir"))


class ShouldExcludeTest(unittest.TestCase):

  def test_no_patterns(self):
    self.assertFalse(exclude.should_exclude([], "anything"))

  def test_matches_full_path_or_basename(self):
    self.assertTrue(exclude.should_exclude(["a/b"], "a/b"))
    self.assertTrue(exclude.should_exclude(["b"], "a/b"))
    self.assertTrue(exclude.should_exclude(["*.o"], "x/y/z.o"))
    self.assertFalse(exclude.should_exclude(["a"], "a/b"))

  def test_logs_exclusion(self):
    with self.assertLogs("tarhelper.exclude", level="INFO") as logs:
      self.assertTrue(exclude.should_exclude(["x", "*.tmp"], "d/f.tmp"))
    self.assertEqual(len(logs.records), 1)
    self.assertIn("d/f.tmp", logs.output[0])


class NormalizePatternTest(unittest.TestCase):

  def test_strips_one_leading_slash(self):
    self.assertEqual(exclude.normalize_pattern("/sub"), "sub")
    self.assertEqual(exclude.normalize_pattern("sub/x"), "sub/x")
    self.assertEqual(exclude.normalize_pattern("*.tmp"), "*.tmp")


if __name__ == "__main__":
  unittest.main()

import unittest

from storage_folders.models import ObjectEntry
from storage_folders.paths import (
    ancestor_folders,
    child_name,
    filter_shallow,
    index_folders,
    is_boundary_prefix,
    is_retained,
)


class AncestorFoldersTests(unittest.TestCase):
    def test_yields_every_ancestor_shallowest_first(self):
        self.assertEqual(["a/", "a/b/"], list(ancestor_folders("a/b/c.txt")))

    def test_root_level_key_has_no_folder(self):
        self.assertEqual([], list(ancestor_folders("e.txt")))

    def test_marker_object_implies_its_own_folder(self):
        self.assertEqual(["a/", "a/b/"], list(ancestor_folders("a/b/")))


class IndexFoldersTests(unittest.TestCase):
    def test_collects_and_deduplicates_folders(self):
        keys = ["a/b.txt", "a/c/d.txt", "e.txt", "a/c/f.txt"]

        self.assertEqual({"a/", "a/c/"}, index_folders(keys))

    def test_accepts_object_entries(self):
        entries = [ObjectEntry("docs/2024/report.pdf", 10), ObjectEntry("docs/readme.md", None)]

        self.assertEqual({"docs/", "docs/2024/"}, index_folders(entries))

    def test_every_folder_is_a_proper_ancestor_of_some_key(self):
        keys = ["x/y/z/1.bin", "x/2.bin", "q/", "top.txt"]

        folders = index_folders(keys)

        self.assertNotIn("", folders)
        for folder in folders:
            self.assertTrue(any(folder in ancestor_folders(key) for key in keys))
        self.assertEqual({"x/", "x/y/", "x/y/z/", "q/"}, folders)

    def test_empty_input(self):
        self.assertEqual(set(), index_folders([]))


class ShallowFilterTests(unittest.TestCase):
    def test_keeps_prefix_and_immediate_children(self):
        folders = {"a/", "a/c/", "a/c/e/", "b/"}

        self.assertEqual({"a/", "a/c/", "b/"}, filter_shallow(folders, "a/"))

    def test_empty_prefix_keeps_top_level_only(self):
        folders = {"a/", "a/c/", "b/", "b/d/e/"}

        self.assertEqual({"a/", "b/"}, filter_shallow(folders, ""))

    def test_folders_outside_prefix_are_kept(self):
        self.assertTrue(is_retained("other/deep/path/", "a/"))

    def test_non_boundary_prefix_is_applied_literally(self):
        self.assertTrue(is_retained("a/", "a/c"))
        self.assertTrue(is_retained("a/c/", "a/c"))
        self.assertFalse(is_retained("a/c/d/", "a/c"))

    def test_boundary_prefix(self):
        self.assertTrue(is_boundary_prefix(""))
        self.assertTrue(is_boundary_prefix("a/"))
        self.assertFalse(is_boundary_prefix("a/c"))


class ChildNameTests(unittest.TestCase):
    def test_direct_member_has_no_child(self):
        self.assertIsNone(child_name("a/b.txt", "a/"))
        self.assertIsNone(child_name("a/", "a/"))

    def test_nested_key_reports_next_component(self):
        self.assertEqual("c", child_name("a/c/d/e.txt", "a/"))


if __name__ == "__main__":
    unittest.main()

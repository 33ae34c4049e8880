import os
import tempfile
import unittest

from serato2rb.data.cratedatabase import CrateDatabase, list_crate_files
from serato2rb.data.playlisttree import build_playlist_tree
from serato_blobs import crate_data

class CrateDatabaseTestCase(unittest.TestCase):
    def setUp(self):
        self.db = CrateDatabase()

    def test_deduplication_across_crates(self):
        self.db.load_crate_buffer(crate_data(["Music/Song.mp3", "Music/Other.mp3"]), "First.crate")
        self.db.load_crate_buffer(crate_data(["Music/Third.mp3", "Music/Song.mp3"]), "Second.crate")

        self.assertEqual([track.path for track in self.db["tracks"]],
            ["Music/Song.mp3", "Music/Other.mp3", "Music/Third.mp3"])
        self.assertEqual(self.db["track_index"], {"Music/Song.mp3": 0, "Music/Other.mp3": 1, "Music/Third.mp3": 2})

        root = build_playlist_tree(self.db["crates"], self.db["track_index"])
        first, second = root.children
        self.assertEqual(first.tracks, [0, 1])
        self.assertEqual(second.tracks, [2, 0])

    def test_duplicate_within_crate(self):
        included = self.db.load_crate_buffer(crate_data(["a.mp3", "a.mp3"]), "Dup.crate")
        self.assertEqual(included, 2)
        self.assertEqual(len(self.db["tracks"]), 1)
        self.assertEqual(self.db.get_track_index("a.mp3"), 0)

    def test_track_filter(self):
        included = self.db.load_crate_buffer(crate_data(["House/a.mp3", "Techno/b.mp3"]), "Mix.crate", track_filter="House")
        self.assertEqual(included, 1)
        self.assertEqual(list(self.db["track_index"]), ["House/a.mp3"])
        self.assertEqual(len(self.db["crates"][0].tracks), 2)

        root = build_playlist_tree(self.db["crates"], self.db["track_index"])
        self.assertEqual(root.children[0].tracks, [0])

    def test_unknown_track(self):
        with self.assertRaises(KeyError):
            self.db.get_track_index("missing.mp3")

    def test_failed_crate_is_recorded_and_skipped(self):
        result = self.db.load_crate_buffer(crate_data(["a.mp3"], version="9.9/Unknown"), "Broken.crate")
        self.assertIsNone(result)
        self.db.load_crate_buffer(crate_data(["b.mp3"]), "Good.crate")

        self.assertEqual(len(self.db["crates"]), 1)
        self.assertEqual(list(self.db["track_index"]), ["b.mp3"])
        self.assertEqual(len(self.db["errors"]), 1)
        self.assertTrue(self.db["errors"][0].startswith("Failed to load crate: Broken.crate: "))

    def test_missing_crate_file(self):
        self.assertIsNone(self.db.load_crate_file("/nonexistent/Subcrates/Gone.crate"))
        self.assertEqual(len(self.db["errors"]), 1)

    def test_load_crate_file(self):
        with tempfile.TemporaryDirectory() as tmp:
            filename = os.path.join(tmp, "Techno%%Peak.crate")
            with open(filename, "wb") as f:
                f.write(crate_data(["x.mp3"]))
            self.assertEqual(self.db.load_crate_file(filename), 1)
        self.assertEqual(self.db["crates"][0].name, ["Techno", "Peak"])

class ListCrateFilesTestCase(unittest.TestCase):
    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        subcrates = os.path.join(self.tmp.name, "Subcrates")
        os.makedirs(os.path.join(subcrates, "nested"))
        for name in ["b%%Mix.crate", "a.crate", "notes.txt", os.path.join("nested", "c.crate")]:
            with open(os.path.join(subcrates, name), "wb") as f:
                f.write(b"")

    def tearDown(self):
        self.tmp.cleanup()

    def test_sorted_crates_only(self):
        self.assertEqual(list_crate_files(self.tmp.name), ["a.crate", "b%%Mix.crate", os.path.join("nested", "c.crate")])

    def test_include_only(self):
        self.assertEqual(list_crate_files(self.tmp.name, include_only=["b%%Mix.crate", "zzz.crate"]), ["b%%Mix.crate"])

    def test_crate_filter(self):
        self.assertEqual(list_crate_files(self.tmp.name, crate_filter="Mix"), ["b%%Mix.crate"])

    def test_missing_subcrates(self):
        with tempfile.TemporaryDirectory() as tmp:
            with self.assertRaises(FileNotFoundError):
                list_crate_files(tmp)

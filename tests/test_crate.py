import unittest

from serato2rb.seratolib.crate import crate_name_from_filename, parse_crate
from serato2rb.seratolib.exceptions import MalformedHeaderError, MissingRequiredChildError, TruncatedSectionError, UnsupportedVersionError
from serato_blobs import crate_data, section, string16

class CrateParserTestCase(unittest.TestCase):
    def test_tracks_in_source_order(self):
        paths = ["Music/b.mp3", "Music/a.mp3", "Music/c.mp3"]
        crate = parse_crate(crate_data(paths), "/serato/Subcrates/House%%Deep.crate")

        self.assertEqual(crate.version, "1.0/Serato ScratchLive Crate")
        self.assertEqual(crate.name, ["House", "Deep"])
        self.assertEqual([track.path for track in crate.tracks], paths)

    def test_empty_crate(self):
        crate = parse_crate(crate_data([]), "Empty.crate")
        self.assertEqual(crate.name, ["Empty"])
        self.assertEqual(crate.tracks, [])

    def test_unsupported_version(self):
        with self.assertRaises(UnsupportedVersionError) as cm:
            parse_crate(crate_data(["a.mp3"], version="2.0/Serato Crate"), "x.crate")
        self.assertIn("2.0/Serato Crate", str(cm.exception))

    def test_no_sections(self):
        with self.assertRaises(MalformedHeaderError):
            parse_crate(b"", "x.crate")

    def test_first_node_not_version(self):
        data = section("otrk", section("ptrk", string16("a.mp3"))) + crate_data([])
        with self.assertRaises(MalformedHeaderError):
            parse_crate(data, "x.crate")

    def test_track_without_path(self):
        data = crate_data(["a.mp3"]) + section("otrk", section("tvcn", string16("song")))
        with self.assertRaises(MissingRequiredChildError):
            parse_crate(data, "x.crate")

    def test_truncated_crate(self):
        data = crate_data(["a.mp3", "b.mp3"])
        with self.assertRaises(TruncatedSectionError):
            parse_crate(data[:-3], "x.crate")

    def test_ignores_other_top_level_nodes(self):
        data = crate_data(["a.mp3"]) + section("ovct", section("tvcn", string16("artist")))
        crate = parse_crate(data, "x.crate")
        self.assertEqual([track.path for track in crate.tracks], ["a.mp3"])

class CrateNameTestCase(unittest.TestCase):
    def test_hierarchy(self):
        self.assertEqual(crate_name_from_filename("A%%B%%Mix1.crate"), ["A", "B", "Mix1"])

    def test_single_segment(self):
        self.assertEqual(crate_name_from_filename("/x/Subcrates/Warmup.crate"), ["Warmup"])

    def test_dots_in_name(self):
        self.assertEqual(crate_name_from_filename("Vol. 2%%Mr. Scruff.crate"), ["Vol. 2", "Mr. Scruff"])

    def test_single_percent_is_kept(self):
        self.assertEqual(crate_name_from_filename("100% Techno.crate"), ["100% Techno"])

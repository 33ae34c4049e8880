import logging
import os

from serato2rb.core.mount import directory_stat, resolve_mount_path
from serato2rb.core.progress import Progress
from serato2rb.data.cratedatabase import CrateDatabase, list_crate_files
from serato2rb.data.playlisttree import build_playlist_tree
from serato2rb.data.trackprovider import read_track_metadata
from serato2rb.export.rekordbox import export_to_rekordbox_xml
from serato2rb.seratolib.exceptions import TrackReadError

def is_inside(path, directory):
  return os.path.commonpath([path, directory]) == directory

# crates -> deduplicated tracks -> track metadata -> playlist tree -> rekordbox xml
class Converter:
  def __init__(self, serato_dir, music_dir=None, include_crates=None, crate_filter=None, track_filter=None, progress=None, mount_path=None):
    self.serato_dir = os.path.abspath(serato_dir)
    self.music_dir = os.path.abspath(music_dir) if music_dir else None
    self.include_crates = include_crates
    self.crate_filter = crate_filter
    self.track_filter = track_filter
    self.progress = progress if progress is not None else Progress()
    self.mount_path = mount_path
    self.db = CrateDatabase()
    self.collection = {} # track index -> metadata dict

  @property
  def errors(self):
    return self.db["errors"]

  def record_error(self, message):
    self.progress.error(message)
    self.db["errors"] += [message]

  def prepare(self):
    directory_stat(self.serato_dir)
    if self.music_dir is not None:
      directory_stat(self.music_dir)
    if self.mount_path is None:
      self.mount_path = resolve_mount_path(self.serato_dir)
    self.progress.report("Resolved mount path: `{}`".format(self.mount_path))

  def load_crates(self):
    self.progress.report("Loading crates...")
    crate_files = list_crate_files(self.serato_dir, self.include_crates, self.crate_filter)
    self.progress.start_crate_scan(len(crate_files))
    self.progress.report("Found ({}) crates matching selected filters.".format(len(crate_files)))

    for name in crate_files:
      path = os.path.join(self.serato_dir, "Subcrates", name)
      self.progress.report("Loading crate: {}".format(path))
      self.progress.crate_scanned()
      included = self.db.load_crate_file(path, self.track_filter)
      if included is not None:
        crate = self.db["crates"][-1]
        self.progress.report("  found total {} tracks, will include {}".format(len(crate.tracks), included))
    return self.db["crates"]

  def resolve_track_path(self, track):
    return os.path.normpath(os.path.join(self.mount_path, track.path.lstrip("/")))

  def load_tracks(self):
    self.progress.report("Loading tracks...")
    self.progress.start_track_scan(len(self.db["tracks"]))

    for index, track in enumerate(self.db["tracks"]):
      path = self.resolve_track_path(track)
      self.progress.report("Loading track meta-data: {}".format(track.path))
      self.progress.track_scanned()
      if self.music_dir is not None and not is_inside(path, self.music_dir):
        self.record_error("Track not in the music library: {}".format(path))
        continue
      try:
        self.collection[index] = read_track_metadata(path, index)
      except (OSError, TrackReadError) as e:
        self.record_error("Failed to load track: {}: {}".format(track.path, e))
    return self.collection

  def build(self):
    return build_playlist_tree(self.db["crates"], self.db["track_index"])

  def run(self, xml_path):
    self.prepare()
    self.load_crates()
    self.load_tracks()
    self.progress.report("Generating Rekordbox XML")
    export_to_rekordbox_xml(self.collection, self.build(), xml_path)
    self.progress.finish()
    self.progress.report("Export completed")
    if len(self.errors) > 0:
      logging.debug("conversion finished with %d errors", len(self.errors))
    return self.errors

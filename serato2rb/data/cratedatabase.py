import os
import logging

from serato2rb.seratolib.crate import parse_crate
from serato2rb.seratolib.exceptions import SeratoParseError

CRATE_EXTENSION = ".crate"

# returns all crate file names below Subcrates, relative to it and sorted
def list_crate_files(serato_dir, include_only=None, crate_filter=None):
  subcrates_dir = os.path.join(serato_dir, "Subcrates")
  if not os.path.isdir(subcrates_dir):
    raise FileNotFoundError("Directory '{}' does not exist".format(subcrates_dir))
  crate_files = []
  for root, dirs, files in os.walk(subcrates_dir):
    for filename in files:
      name = os.path.relpath(os.path.join(root, filename), subcrates_dir)
      if not name.endswith(CRATE_EXTENSION):
        continue
      if include_only and name not in include_only:
        continue
      if crate_filter and crate_filter not in name:
        continue
      crate_files += [name]
  return sorted(crate_files)

class CrateDatabase(dict):
  def __init__(self):
    super().__init__(crates=[], tracks=[], track_index={}, errors=[])

  def get_track_index(self, path):
    if path not in self["track_index"]:
      raise KeyError("CrateDatabase: track {} not found".format(path))
    return self["track_index"][path]

  # the first sighting of a path assigns its index, later ones reuse it
  def add_track(self, track):
    if track.path not in self["track_index"]:
      self["tracks"] += [track]
      self["track_index"][track.path] = len(self["tracks"])-1
    return self["track_index"][track.path]

  def add_crate(self, crate, track_filter=None):
    self["crates"] += [crate]
    included = 0
    for track in crate.tracks:
      if track_filter and track_filter not in track.path:
        continue
      self.add_track(track)
      included += 1
    logging.debug("crate %s: %d tracks, %d included", "/".join(crate.name), len(crate.tracks), included)
    return included

  def record_error(self, message):
    logging.error(message)
    self["errors"] += [message]

  # returns the number of included tracks or None if the crate could not be loaded
  def load_crate_buffer(self, data, filename, track_filter=None):
    logging.debug("Loading crate \"%s\" from buffer", filename)
    try:
      crate = parse_crate(data, filename)
    except SeratoParseError as e:
      self.record_error("Failed to load crate: {}: {}".format(os.path.basename(filename), e))
      return None
    return self.add_crate(crate, track_filter)

  def load_crate_file(self, filename, track_filter=None):
    logging.info("Loading crate \"%s\"", filename)
    try:
      with open(filename, "rb") as f:
        data = f.read()
    except OSError as e:
      self.record_error("Failed to load crate: {}: {}".format(os.path.basename(filename), e))
      return None
    return self.load_crate_buffer(data, filename, track_filter)

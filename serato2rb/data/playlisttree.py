import logging

ROOT_FOLDER_NAME = "ROOT"

class PlaylistFolder:
  def __init__(self, name, children=None):
    self.name = name
    self.children = children if children is not None else [] # folders and playlists

  def __repr__(self):
    return "PlaylistFolder({!r}, {} children)".format(self.name, len(self.children))

class Playlist:
  def __init__(self, name, tracks=None):
    self.name = name
    self.tracks = tracks if tracks is not None else [] # indices into the deduplicated track list

  def __repr__(self):
    return "Playlist({!r}, {} tracks)".format(self.name, len(self.tracks))

# builds the folder hierarchy from "%%" separated crate names, one builder per build
class PlaylistTreeBuilder:
  def __init__(self, track_index):
    self.track_index = track_index # track path -> index
    self.root = PlaylistFolder(ROOT_FOLDER_NAME)
    self.folders = {} # tuple of path segments -> PlaylistFolder

  # returns the folder for path, creating it and all missing parents
  def get_folder(self, path):
    if len(path) == 0:
      return self.root
    key = tuple(path)
    if key in self.folders:
      return self.folders[key]
    folder = PlaylistFolder(path[-1])
    self.folders[key] = folder
    self.get_folder(path[:-1]).children += [folder]
    logging.debug("created playlist folder %s", "/".join(path))
    return folder

  def add_crate(self, crate):
    parent = self.get_folder(crate.name[:-1])
    tracks = [self.track_index[track.path] for track in crate.tracks if track.path in self.track_index]
    playlist = Playlist(crate.name[-1], tracks)
    parent.children += [playlist]
    return playlist

  def build(self, crates):
    for crate in crates:
      self.add_crate(crate)
    logging.info("Built playlist tree with %d folders and %d playlists", len(self.folders), len(crates))
    return self.root

def build_playlist_tree(crates, track_index):
  return PlaylistTreeBuilder(track_index).build(crates)

import logging
import os

from .exceptions import MalformedHeaderError, MissingRequiredChildError, UnsupportedVersionError
from .section import decode_sections, dump_node

CRATE_VERSION = "1.0/Serato ScratchLive Crate"
CRATE_NAME_DELIMITER = "%%" # serato encodes the folder hierarchy in the file name

class CrateTrack:
  def __init__(self, path):
    self.path = path # relative to the mount root of the serato directory

  def __repr__(self):
    return "CrateTrack({!r})".format(self.path)

class Crate:
  def __init__(self, name, version, tracks):
    self.name = name # list of path segments, the last one is the playlist name
    self.version = version
    self.tracks = tracks

  def __repr__(self):
    return "Crate({!r}, {} tracks)".format("/".join(self.name), len(self.tracks))

def find_node(nodes, tag):
  return next((node for node in nodes if node.tag == tag), None)

def find_required_node(nodes, tag, parent):
  node = find_node(nodes, tag)
  if node is None:
    raise MissingRequiredChildError("node '{}' has no '{}' child".format(parent, tag))
  return node

def crate_name_from_filename(filename):
  basename = os.path.basename(filename)
  return os.path.splitext(basename)[0].split(CRATE_NAME_DELIMITER)

def parse_crate(data, filename):
  nodes = decode_sections(data)
  if len(nodes) == 0:
    raise MalformedHeaderError("no sections found in crate '{}'".format(filename))
  for line in dump_node(nodes[0]):
    logging.debug(line)

  version = nodes[0]
  if version.tag != "vrsn":
    raise MalformedHeaderError("expected node type 'vrsn', got '{}'".format(version.tag))
  if version.value != CRATE_VERSION:
    raise UnsupportedVersionError("unsupported crate version: '{}'".format(version.value))

  tracks = []
  for node in nodes[1:]:
    if node.tag != "otrk":
      continue
    path = find_required_node(node.children, "ptrk", node.tag).value
    tracks += [CrateTrack(path)]

  return Crate(crate_name_from_filename(filename), version.value, tracks)

import logging
import os

import mutagen
from mutagen.id3 import ID3

from serato2rb.seratolib.beatgrid import parse_beatgrid
from serato2rb.seratolib.exceptions import SeratoParseError, TrackReadError
from serato2rb.seratolib.markers2 import parse_markers2

GEOB_MIME_TYPE = "application/octet-stream"
MARKERS2_DESCRIPTION = "Serato Markers2"
BEATGRID_DESCRIPTION = "Serato BeatGrid"

def empty_metadata(path, track_id, size=0):
  return {
    "path": path,
    "track_id": track_id,
    "size": size,
    "name": "",
    "artist": "",
    "composer": "",
    "album": "",
    "grouping": "",
    "genre": "",
    "kind": "",
    "disc_number": 0,
    "track_number": 0,
    "year": 0,
    "average_bpm": 0,
    "comments": "",
    "play_count": 0,
    "remixer": "",
    "tonal_key": "",
    "label": "",
    "mix_name": "",
    "total_time": 0,
    "bit_rate": 0,
    "sample_rate": 0,
    "color": None, # argb
    "cue_points": [],
    "loop_entries": [],
    "beatgrid_markers": None,
    "bpm_lock": False,
    "has_warnings": False
  }

# joins the text of all frames with the given id
def frame_text(tags, frame_id):
  return ", ".join(str(text) for frame in tags.getall(frame_id) for text in frame.text)

# "3/12" -> 3
def leading_number(text, convert=int):
  try:
    return convert(text.split("/")[0].strip())
  except ValueError:
    return 0

def read_id3_fields(metadata, tags):
  metadata["name"] = frame_text(tags, "TIT2")
  metadata["artist"] = frame_text(tags, "TPE1")
  metadata["composer"] = frame_text(tags, "TCOM")
  metadata["album"] = frame_text(tags, "TALB")
  metadata["grouping"] = frame_text(tags, "TIT1")
  metadata["genre"] = frame_text(tags, "TCON")
  metadata["disc_number"] = leading_number(frame_text(tags, "TPOS"))
  metadata["track_number"] = leading_number(frame_text(tags, "TRCK"))
  metadata["year"] = leading_number(frame_text(tags, "TDRC")[:4])
  metadata["average_bpm"] = leading_number(frame_text(tags, "TBPM"), float)
  metadata["comments"] = frame_text(tags, "COMM")
  metadata["remixer"] = frame_text(tags, "TPE4")
  metadata["tonal_key"] = frame_text(tags, "TKEY")
  metadata["label"] = frame_text(tags, "TPUB")
  metadata["play_count"] = leading_number(frame_text(tags, "TXXX:SERATO_PLAYCOUNT"))

# merges a serato geob payload into metadata, a broken payload only flags a warning
def apply_geob_frame(metadata, description, data):
  try:
    if description == MARKERS2_DESCRIPTION:
      markers = parse_markers2(data)
      if markers.color is not None:
        metadata["color"] = markers.color
      metadata["cue_points"] = markers.cue_points
      metadata["loop_entries"] = markers.loop_entries
      metadata["bpm_lock"] = markers.bpm_lock
    elif description == BEATGRID_DESCRIPTION:
      metadata["beatgrid_markers"] = parse_beatgrid(data)
    else:
      logging.debug("ignoring GEOB frame \"%s\"", description)
      return False
  except SeratoParseError as e:
    logging.warning("Failed to parse GEOB frame \"%s\" of %s, skipping: %s", description, metadata["path"], e)
    metadata["has_warnings"] = True
    return False
  return True

def read_track_metadata(path, track_id):
  if not os.path.isfile(path):
    raise FileNotFoundError("File '{}' does not exist".format(path))
  try:
    audio = mutagen.File(path)
  except mutagen.MutagenError as e:
    raise TrackReadError("failed to read tags of \"{}\": {}".format(path, e))
  if audio is None:
    raise TrackReadError("unsupported audio file \"{}\"".format(path))

  metadata = empty_metadata(path, track_id, os.path.getsize(path))
  metadata["kind"] = "{} File".format(type(audio).__name__)
  metadata["total_time"] = getattr(audio.info, "length", 0)
  metadata["bit_rate"] = getattr(audio.info, "bitrate", 0)
  metadata["sample_rate"] = getattr(audio.info, "sample_rate", 0)

  # serato only writes its geob frames into id3 tags
  if not isinstance(audio.tags, ID3):
    logging.debug("no ID3 tags in %s", path)
    return metadata

  read_id3_fields(metadata, audio.tags)
  for frame in audio.tags.getall("GEOB"):
    if frame.mime != GEOB_MIME_TYPE:
      continue
    apply_geob_frame(metadata, frame.desc, frame.data)
  return metadata

import logging

from construct import Array, Computed, Container, ConstructError, Float32b, IfThenElse, Int32ub, ListContainer, Padding, StreamError, Struct, this

from .exceptions import MalformedHeaderError, TruncatedSectionError

# file format from https://github.com/Holzhaus/serato-tags

BeatGridNonTerminalMarker = Struct(
  "position" / Float32b, # in seconds
  "beats_till_next_marker" / Int32ub,
  "bpm" / Computed(None)
)

# the last marker stores the tempo instead of a beat count
BeatGridTerminalMarker = Struct(
  "position" / Float32b,
  "beats_till_next_marker" / Computed(None),
  "bpm" / Float32b
)

BeatGrid = Struct(
  Padding(2), # version, always 0x0100
  "marker_count" / Int32ub,
  "markers" / Array(this.marker_count, IfThenElse(this._index < this.marker_count-1,
    BeatGridNonTerminalMarker, BeatGridTerminalMarker))
)

def parse_beatgrid(data):
  try:
    parsed = BeatGrid.parse(data)
  except StreamError as e:
    raise TruncatedSectionError("beatgrid data truncated: {}".format(e))
  except ConstructError as e:
    raise MalformedHeaderError("invalid beatgrid data: {}".format(e))
  logging.debug("parsed %d beatgrid markers", parsed.marker_count)
  return ListContainer(Container(position=marker.position, beats_till_next_marker=marker.beats_till_next_marker,
    bpm=marker.bpm) for marker in parsed.markers)

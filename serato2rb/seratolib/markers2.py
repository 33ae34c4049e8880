import base64
import binascii
import io
import logging
import re

from construct import Array, Const, Container, ConstructError, CString, ExprAdapter, GreedyBytes, GreedyString, If, Int8ub, Int32ub, ListContainer, NullTerminated, Padding, Prefixed, StreamError, Struct, this

from .exceptions import MalformedHeaderError, TruncatedSectionError

# file format from https://github.com/Holzhaus/serato-tags

# the geob payload is a base64 string (wrapped every 72 chars), optionally followed by null padding
Markers2Base64 = NullTerminated(GreedyBytes, require=False)

Markers2Magic = Const(b"\x01\x01")

# only 1 counts as true
SeratoBool = ExprAdapter(Int8ub, lambda obj, ctx: obj == 1, lambda obj, ctx: 1 if obj else 0)

# names may be unterminated if they fill the element
MarkerName = NullTerminated(GreedyString("utf-8"), require=False)

Markers2Element = Struct(
  "name" / CString("ascii"), # an empty name ends the list
  "data" / If(this.name != "", Prefixed(Int32ub, GreedyBytes))
)

Markers2Color = Struct(
  "color" / Array(4, Int8ub) # argb, alpha is always 0
)

Markers2Cue = Struct(
  Padding(1),
  "index" / Int8ub,
  "position_ms" / Int32ub,
  Padding(1),
  "color" / Array(3, Int8ub), # rgb
  Padding(2),
  "name" / MarkerName
)

Markers2Loop = Struct(
  Padding(1),
  "index" / Int8ub,
  "start_ms" / Int32ub,
  "end_ms" / Int32ub,
  Padding(4), # 0xffffffff
  "color" / Array(4, Int8ub), # argb
  Padding(1),
  "locked" / SeratoBool,
  "name" / MarkerName
)

Markers2BpmLock = Struct(
  "locked" / SeratoBool
)

def decode_markers2_base64(data):
  encoded = re.sub(rb"[^A-Za-z0-9+/]", b"", Markers2Base64.parse(data))
  # serato omits the padding and sometimes leaves a dangling sextet
  if len(encoded) % 4 == 1:
    encoded += b"A=="
  else:
    encoded += b"=" * (-len(encoded) % 4)
  try:
    return base64.b64decode(encoded)
  except binascii.Error as e:
    raise MalformedHeaderError("invalid markers2 base64 data: {}".format(e))

def parse_markers2_elements(payload):
  stream = io.BytesIO(payload)
  try:
    Markers2Magic.parse_stream(stream)
  except ConstructError:
    raise MalformedHeaderError("invalid markers2 header {}".format(payload[:2].hex()))

  elements = []
  try:
    while stream.tell() < len(payload):
      element = Markers2Element.parse_stream(stream)
      if element.name == "":
        break
      elements += [element]
  except StreamError as e:
    raise TruncatedSectionError("markers2 element truncated after {} elements: {}".format(len(elements), e))
  except ConstructError as e:
    raise MalformedHeaderError("invalid markers2 element: {}".format(e))
  return elements

def parse_markers2(data):
  result = Container(color=None, cue_points=ListContainer(), loop_entries=ListContainer(), bpm_lock=False)

  for element in parse_markers2_elements(decode_markers2_base64(data)):
    try:
      if element.name == "COLOR":
        result.color = Markers2Color.parse(element.data).color
      elif element.name == "CUE":
        cue = Markers2Cue.parse(element.data)
        result.cue_points += [Container(index=cue.index, position_ms=cue.position_ms, color=cue.color, name=cue.name)]
      elif element.name == "LOOP":
        loop = Markers2Loop.parse(element.data)
        result.loop_entries += [Container(index=loop.index, start_ms=loop.start_ms, end_ms=loop.end_ms,
          color=loop.color, locked=loop.locked, name=loop.name)]
      elif element.name == "BPMLOCK":
        result.bpm_lock = Markers2BpmLock.parse(element.data).locked
      else:
        logging.debug("ignoring unknown markers2 element %s (%d bytes)", element.name, len(element.data))
    except StreamError as e:
      raise TruncatedSectionError("markers2 {} element truncated: {}".format(element.name, e))
    except ConstructError as e:
      raise MalformedHeaderError("invalid markers2 {} element: {}".format(element.name, e))

  logging.debug("parsed %d cue points and %d loops from markers2", len(result.cue_points), len(result.loop_entries))
  return result

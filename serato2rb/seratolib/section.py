import logging

from construct import Adapter, Bytes, Container, ConstructError, GreedyBytes, Int32ub, ListContainer, Struct

from .exceptions import MalformedHeaderError, TruncatedSectionError

# file format from https://github.com/Holzhaus/serato-tags

# leaf tags, every other tag contains nested sections
STRING_TAGS = ["vrsn", "tvcn", "tvcw", "ptrk"]
INTEGER_TAGS = ["brev"]

class SectionTagAdapter(Adapter):
  def _decode(self, obj, context, path):
    return obj.decode("ascii", errors="replace")
SectionTag = SectionTagAdapter(Bytes(4))

# utf-16-be, ends at the first zero code unit or the end of the payload
class String16Adapter(Adapter):
  def _decode(self, obj, context, path):
    even = len(obj) - len(obj) % 2
    return obj[:even].decode("utf-16-be", errors="replace").split("\x00", 1)[0]
String16 = String16Adapter(GreedyBytes)

# width is the payload size, first byte is the least significant one
class VarUIntAdapter(Adapter):
  def _decode(self, obj, context, path):
    return int.from_bytes(obj, "little")
VarUInt = VarUIntAdapter(GreedyBytes)

LeafContent = dict([(tag, String16) for tag in STRING_TAGS] + [(tag, VarUInt) for tag in INTEGER_TAGS])

SectionHeader = Struct(
  "tag" / SectionTag,
  "length" / Int32ub
)
SECTION_HEADER_SIZE = SectionHeader.sizeof()

def decode_leaf(tag, payload):
  try:
    return LeafContent[tag].parse(payload)
  except ConstructError as e:
    raise MalformedHeaderError("failed to decode '{}' section: {}".format(tag, e))

# containers are walked with an explicit stack of (children, end) instead of recursion
def decode_sections(data, offset=0, end=None):
  if end is None:
    end = len(data)
  if offset < 0 or end > len(data) or offset > end:
    raise TruncatedSectionError("section range {}:{} outside of {} bytes".format(offset, end, len(data)))

  nodes = ListContainer()
  stack = [(nodes, end)]
  pos = offset
  while len(stack) > 0:
    children, limit = stack[-1]
    if pos == limit:
      stack.pop()
      continue
    if limit-pos < SECTION_HEADER_SIZE:
      raise TruncatedSectionError("partial section header at offset {}, {} bytes left".format(pos, limit-pos))
    header = SectionHeader.parse(data[pos:pos+SECTION_HEADER_SIZE])
    body_start = pos+SECTION_HEADER_SIZE
    body_end = body_start+header.length
    if body_end > limit:
      raise TruncatedSectionError("section '{}' at offset {} declares {} bytes, only {} left".format(
        header.tag, pos, header.length, limit-body_start))

    if header.tag in LeafContent:
      children += [Container(tag=header.tag, value=decode_leaf(header.tag, data[body_start:body_end]), children=ListContainer())]
      pos = body_end
    else:
      node = Container(tag=header.tag, value=None, children=ListContainer())
      children += [node]
      stack += [(node.children, body_end)]
      pos = body_start

  logging.debug("decoded %d top level sections from %d bytes", len(nodes), end-offset)
  return nodes

def dump_node(node, indent=0):
  value = "" if node.value is None else node.value
  lines = ["{}{}: {}".format("  "*indent, node.tag, value)]
  for child in node.children:
    lines += dump_node(child, indent+1)
  return lines

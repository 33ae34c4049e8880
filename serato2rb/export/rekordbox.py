import logging
from urllib.parse import quote
from xml.dom import minidom
from xml.etree.ElementTree import Element, SubElement, tostring

from serato2rb.data.playlisttree import PlaylistFolder

PRODUCT_NAME = "serato2rekordbox"
PRODUCT_VERSION = "7.0.5"
LOCATION_PREFIX = "file://localhost"

POSITION_MARK_CUE = 0
POSITION_MARK_LOOP = 4

# rgb or argb -> "0xRRGGBB", alpha is dropped
def format_color(color):
  return "0x" + "".join("{:02X}".format(x) for x in list(color)[-3:])

def format_location(path):
  return LOCATION_PREFIX + quote(path, safe="/")

# stringifies all values, None drops the attribute
def set_attributes(element, **attributes):
  for name, value in attributes.items():
    if value is not None:
      element.set(name, str(value))
  return element

def add_track(collection_element, track):
  element = set_attributes(SubElement(collection_element, "TRACK"),
    TrackID=track["track_id"],
    Name=track["name"],
    Artist=track["artist"],
    Composer=track["composer"],
    Album=track["album"],
    Grouping=track["grouping"],
    Genre=track["genre"],
    Kind=track["kind"],
    Size=track["size"],
    TotalTime=int(round(track["total_time"])),
    DiscNumber=track["disc_number"],
    TrackNumber=track["track_number"],
    Year=track["year"],
    AverageBpm=track["average_bpm"],
    BitRate=track["bit_rate"],
    SampleRate=track["sample_rate"],
    Comments=track["comments"],
    PlayCount=track["play_count"],
    Rating=0,
    Location=format_location(track["path"]),
    Remixer=track["remixer"],
    Tonality=track["tonal_key"],
    Label=track["label"],
    Mix=track["mix_name"],
    Colour=format_color(track["color"]) if track["color"] is not None else None)

  for tempo in track["beatgrid_markers"] or []:
    set_attributes(SubElement(element, "TEMPO"),
      Inizio=tempo.position,
      Bpm=tempo.bpm,
      Battito=tempo.beats_till_next_marker)

  for cue in track["cue_points"]:
    set_attributes(SubElement(element, "POSITION_MARK"),
      Name=cue.name,
      Type=POSITION_MARK_CUE,
      Start=cue.position_ms/1000,
      Num=cue.index)

  for loop in track["loop_entries"]:
    set_attributes(SubElement(element, "POSITION_MARK"),
      Name=loop.name,
      Type=POSITION_MARK_LOOP,
      Start=loop.start_ms/1000,
      End=loop.end_ms/1000,
      Num=loop.index)
  return element

def add_playlist_node(parent_element, node, collection):
  if isinstance(node, PlaylistFolder):
    element = set_attributes(SubElement(parent_element, "NODE"), Type=0, Name=node.name, Count=len(node.children))
    for child in node.children:
      add_playlist_node(element, child, collection)
  else:
    # KeyType 1 references collection tracks by location, tracks that failed to load are left out
    track_ids = [track_id for track_id in node.tracks if track_id in collection]
    element = set_attributes(SubElement(parent_element, "NODE"), Type=1, KeyType=1, Name=node.name, Entries=len(track_ids))
    for track_id in track_ids:
      set_attributes(SubElement(element, "TRACK"), Key=format_location(collection[track_id]["path"]))
  return element

# collection maps track index -> metadata dict, root_folder is the PlaylistFolder tree
def generate_xml(collection, root_folder):
  root = set_attributes(Element("DJ_PLAYLISTS"), Version="1.0.0")
  set_attributes(SubElement(root, "PRODUCT"), Name=PRODUCT_NAME, Version=PRODUCT_VERSION, Company=PRODUCT_NAME)
  collection_element = set_attributes(SubElement(root, "COLLECTION"), Entries=len(collection))
  for track_id in sorted(collection):
    add_track(collection_element, collection[track_id])
  add_playlist_node(SubElement(root, "PLAYLISTS"), root_folder, collection)
  return root

def render_xml(root):
  return minidom.parseString(tostring(root, encoding="utf-8")).toprettyxml(indent="  ", encoding="UTF-8")

def export_to_rekordbox_xml(collection, root_folder, xml_path):
  data = render_xml(generate_xml(collection, root_folder))
  with open(xml_path, "wb") as f:
    f.write(data)
  logging.info("Exported to \"%s\"", xml_path)
  return data

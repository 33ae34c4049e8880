import argparse
import logging
import sys

from serato2rb.core.converter import Converter
from serato2rb.core.progress import Progress

def log_progress(percent, message, level):
  if level >= logging.ERROR:
    message = "**!!! ERROR: {}**".format(message)
  logging.log(level, "[%.1f%%] %s", percent, message)

def parse_args(argv=None):
  parser = argparse.ArgumentParser(prog='serato2rekordbox', description='Convert Serato crates to a Rekordbox XML collection')
  parser.add_argument('serato_dir', help='Path to the Serato directory')
  parser.add_argument('xml_path', help='Where to save the Rekordbox XML file')
  parser.add_argument('-c', dest='crates', action='append', default=[], metavar='CRATE_FILE', help='Export only the given crate, a file name relative to Subcrates (may be given multiple times)')
  parser.add_argument('-f', dest='crate_filter', metavar='FILTER', help='Filter crates by name')
  parser.add_argument('-t', dest='track_filter', metavar='FILTER', help='Filter tracks by path')
  parser.add_argument('-m', dest='music_dir', metavar='DIR', help='Music library directory, tracks outside of it are reported as errors')
  parser.add_argument('-q', '--quiet', action='store_const', dest='loglevel', const=logging.WARNING, help='Only display warning messages', default=logging.INFO)
  parser.add_argument('-d', '--debug', action='store_const', dest='loglevel', const=logging.DEBUG, help='Display verbose debugging information')
  return parser.parse_args(argv)

def main(argv=None):
  args = parse_args(argv)
  logging.basicConfig(level=args.loglevel, format='%(levelname)-7s %(module)s: %(message)s')

  if args.music_dir:
    logging.info("Using music library directory: `%s`", args.music_dir)
  logging.info("Using Serato directory: `%s`", args.serato_dir)
  logging.info("Will save Rekordbox XML to: `%s`", args.xml_path)
  if args.crates:
    logging.info("Exporting only crates: %s", ", ".join(args.crates))
  if args.crate_filter:
    logging.info("Filtering crates by: %s", args.crate_filter)
  if args.track_filter:
    logging.info("Filtering tracks by: %s", args.track_filter)

  progress = Progress(log_progress)
  converter = Converter(args.serato_dir, music_dir=args.music_dir, include_crates=args.crates or None,
    crate_filter=args.crate_filter, track_filter=args.track_filter, progress=progress)
  try:
    errors = converter.run(args.xml_path)
  except Exception as e:
    logging.debug("conversion aborted", exc_info=True)
    progress.finish()
    progress.error("Unexpected error: {}".format(e))
    return 1

  if len(errors) > 0:
    print("\n**Error Summary:**", file=sys.stderr)
    for error in errors:
      print(" - {}".format(error), file=sys.stderr)
    return 2
  return 0

import os

def directory_stat(path):
  try:
    stat = os.stat(path)
  except FileNotFoundError:
    raise FileNotFoundError("Directory '{}' does not exist".format(path))
  if not os.path.isdir(path):
    raise NotADirectoryError("Path '{}' is not a directory".format(path))
  return stat

# serato stores track paths relative to the root of the volume holding the serato directory
def resolve_mount_path(path):
  path = os.path.abspath(path)
  last_dev = None
  last_path = None
  while True:
    stat = directory_stat(path)
    if last_dev is not None and stat.st_dev != last_dev:
      return last_path
    last_dev = stat.st_dev
    last_path = path
    parent = os.path.dirname(path)
    if parent == path:
      return path
    path = parent

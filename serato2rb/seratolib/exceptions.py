class SeratoParseError(Exception):
  pass

# missing or wrong magic bytes, missing version node
class MalformedHeaderError(SeratoParseError):
  pass

# declared length runs past the enclosing section or buffer
class TruncatedSectionError(SeratoParseError):
  pass

class MissingRequiredChildError(SeratoParseError):
  pass

class UnsupportedVersionError(SeratoParseError):
  pass

# audio file exists but mutagen could not make sense of it
class TrackReadError(Exception):
  pass

import logging

# weights of the scan phases, the remainder is spent on writing the xml
CRATE_SCAN_SHARE = 0.2
TRACK_SCAN_SHARE = 0.75

class Progress:
  def __init__(self, callback=None):
    self.callback = callback # called as callback(percent, message, level)
    self.crate_scan_progress = 0
    self.crate_scan_total = 1
    self.track_scan_progress = 0
    self.track_scan_total = 1
    self.complete = False

  def start_crate_scan(self, total):
    self.crate_scan_progress = 0
    self.crate_scan_total = total or 1

  def start_track_scan(self, total):
    self.track_scan_progress = 0
    self.track_scan_total = total or 1

  def crate_scanned(self):
    self.crate_scan_progress += 1

  def track_scanned(self):
    self.track_scan_progress += 1

  def finish(self):
    self.complete = True

  def percent(self):
    if self.complete:
      return 100.0
    crate_scan = self.crate_scan_progress/self.crate_scan_total*CRATE_SCAN_SHARE
    track_scan = self.track_scan_progress/self.track_scan_total*TRACK_SCAN_SHARE
    return (crate_scan+track_scan)*100

  def report(self, message, level=logging.INFO):
    if self.callback is not None:
      self.callback(self.percent(), message, level)
    else:
      logging.log(level, "[%.1f%%] %s", self.percent(), message)

  def error(self, message):
    self.report(message, logging.ERROR)

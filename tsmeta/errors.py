from typing import TYPE_CHECKING

if TYPE_CHECKING:
  from tsmeta.meta import MetaInfo

class ExtractionError(Exception):
  """
  Fatal failure of an extraction. `records` holds the records that were
  produced before the failure, filled in by the pipeline drivers.
  """
  def __init__(self, *args):
    super().__init__(*args)
    self.records: list['MetaInfo'] = []

class ReadError(ExtractionError):
  pass

class MalformedHeaderError(ExtractionError):
  pass

class OverrunError(ExtractionError):
  def __init__(self, expected: int, actual: int):
    super().__init__(f'overrun; expected {expected} got {actual}')
    self.expected = expected
    self.actual = actual

class StreamNotFoundError(ExtractionError):
  pass

class DecodeError(ExtractionError):
  pass

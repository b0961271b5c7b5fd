#!/usr/bin/env python3

from tsmeta.errors import MalformedHeaderError, OverrunError
from tsmeta.mpeg2ts import pes
from tsmeta.mpeg2ts.pes import PESHeader

class PESAccumulator:
  """
  Collects the payload chunks of one PES packet, starting from the chunk that
  holds its header, up to the size declared by that header.
  An accumulator is single use: once `write` returned True or raised, drop it.
  """

  def __init__(self):
    self.header: PESHeader | None = None
    self.packet_size: int = 0
    self.data: bytearray = bytearray()
    self.terminated: bool = False

  def write(self, chunk: bytes | bytearray | memoryview) -> bool:
    if self.terminated:
      raise RuntimeError('write to a completed PES accumulator')

    if self.header is None:
      if not pes.sniff(chunk):
        self.terminated = True
        raise MalformedHeaderError('first chunk must contain a PES header')
      try:
        self.header = PESHeader(chunk)
      except MalformedHeaderError as e:
        self.terminated = True
        raise MalformedHeaderError(f'failed PES parse: {e}') from e
      self.data = bytearray(self.header.data())
      self.packet_size = self.header.packet_size()
    else:
      self.data += chunk

    return self.__check_done()

  def __check_done(self) -> bool:
    if len(self.data) > self.packet_size:
      self.terminated = True
      raise OverrunError(self.packet_size, len(self.data))
    if len(self.data) == self.packet_size:
      self.terminated = True
      return True
    return False

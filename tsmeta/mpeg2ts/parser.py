#!/usr/bin/env python3

from typing import Generic, TypeVar
from collections import deque

from tsmeta.mpeg2ts import ts
from tsmeta.mpeg2ts.section import Section, crc32

T = TypeVar('T', bound=Section)

class SectionParser(Generic[T]):
  """
  Reassembles PSI sections carried on one PID.
  Only sections with a matching CRC_32 are handed out.
  """

  def __init__(self, B: type[T]):
    self.section: bytearray | None = None
    self.queue: deque[T] = deque()
    self.B = B

  def __iter__(self) -> 'SectionParser[T]':
    return self

  def __next__(self) -> T:
    if not self.queue:
      raise StopIteration()
    return self.queue.popleft()

  def push(self, packet: bytes | bytearray | memoryview) -> None:
    payload = ts.payload(packet)
    if not payload: return

    if ts.payload_unit_start_indicator(packet):
      pointer_field = payload[0]
      if self.section is not None:
        self.section += payload[1:1 + pointer_field]
        self.__collect()
      self.section = bytearray(payload[1 + pointer_field:])
    elif self.section is not None:
      self.section += payload
    self.__collect()

  def __collect(self) -> None:
    while self.section is not None:
      if self.section and self.section[0] == ts.STUFFING_BYTE[0]:
        self.section = None
        return
      if len(self.section) < Section.BASIC_HEADER_SIZE: return
      length = Section.BASIC_HEADER_SIZE + (((self.section[1] & 0x0F) << 8) | self.section[2])
      if len(self.section) < length: return

      section, self.section = self.section[:length], self.section[length:]
      if length >= Section.EXTENDED_HEADER_SIZE + Section.CRC_SIZE and crc32(section) == 0:
        self.queue.append(self.B(section))
      if not self.section:
        self.section = None

#!/usr/bin/env python3

from typing import Iterator

from tsmeta.mpeg2ts.section import Section

class PATSection(Section):
  def __init__(self, payload: bytes | bytearray | memoryview = b''):
    super().__init__(payload)
    # (program_number, program_map_PID), program_number 0 points at the network PID
    self.entry: list[tuple[int, int]] = [
      ((self.payload[offset + 0] << 8) | self.payload[offset + 1], ((self.payload[offset + 2] & 0x1F) << 8) | self.payload[offset + 3])
      for offset in range(Section.EXTENDED_HEADER_SIZE, Section.BASIC_HEADER_SIZE + self.section_length() - Section.CRC_SIZE, 4)
    ]

  def programs(self) -> list[tuple[int, int]]:
    return [(program_number, program_map_PID) for program_number, program_map_PID in self.entry if program_number != 0]

  def __iter__(self) -> Iterator[tuple[int, int]]:
    return iter(self.entry)

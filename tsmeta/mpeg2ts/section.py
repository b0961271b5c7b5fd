#!/usr/bin/env python3

def crc32(data: bytes | bytearray | memoryview) -> int:
  crc = 0xFFFFFFFF
  for byte in data:
    crc ^= byte << 24
    for _ in range(8):
      crc = ((crc << 1) ^ 0x04C11DB7) if (crc & 0x80000000) else (crc << 1)
      crc &= 0xFFFFFFFF
  return crc

class Section:
  BASIC_HEADER_SIZE = 3
  EXTENDED_HEADER_SIZE = 8
  CRC_SIZE = 4

  def __init__(self, payload: bytes | bytearray | memoryview = b''):
    self.payload = memoryview(payload)

  def table_id(self) -> int:
    return self.payload[0]

  def section_syntax_indicator(self) -> bool:
    return (self.payload[1] & 0x80) != 0

  def section_length(self) -> int:
    return ((self.payload[1] & 0x0F) << 8) | self.payload[2]

  def table_id_extension(self) -> int:
    return (self.payload[3] << 8) | self.payload[4]

  def CRC32(self) -> int:
    # zero when the trailing CRC_32 field matches
    return crc32(self.payload[:Section.BASIC_HEADER_SIZE + self.section_length()])

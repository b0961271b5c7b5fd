#!/usr/bin/env python3

from tsmeta.errors import MalformedHeaderError

PACKET_START_CODE_PREFIX = 0x000001

# stream_id
STREAM_ID_PRIVATE_STREAM_1 = 0xBD
STREAM_ID_PADDING_STREAM = 0xBE
STREAM_ID_PRIVATE_STREAM_2 = 0xBF
STREAM_ID_ECM_STREAM = 0xF0
STREAM_ID_EMM_STREAM = 0xF1
STREAM_ID_DSM_CC_STREAM = 0xF2
STREAM_ID_ITU_T_H222_1_TYPE_E = 0xF8
STREAM_ID_PROGRAM_STREAM_DIRECTORY = 0xFF

# stream_ids whose PES packets never carry the optional PES header
NO_OPTIONAL_HEADER_STREAM_IDS = frozenset([
  STREAM_ID_PADDING_STREAM,
  STREAM_ID_PRIVATE_STREAM_2,
  STREAM_ID_ECM_STREAM,
  STREAM_ID_EMM_STREAM,
  STREAM_ID_DSM_CC_STREAM,
  STREAM_ID_ITU_T_H222_1_TYPE_E,
  STREAM_ID_PROGRAM_STREAM_DIRECTORY,
])

# PTS_DTS_flags
PTS_DTS_INDICATOR_NONE = 0b00
PTS_DTS_INDICATOR_FORBIDDEN = 0b01
PTS_DTS_INDICATOR_ONLY_PTS = 0b10
PTS_DTS_INDICATOR_BOTH = 0b11

def sniff(data: bytes | bytearray | memoryview) -> bool:
  return len(data) >= 3 and ((data[0] << 16) | (data[1] << 8) | data[2]) == PACKET_START_CODE_PREFIX

def extract_time(data: bytes | bytearray | memoryview) -> int:
  """
  Decodes a 33-bit PTS/DTS from its 5 byte field:

    '0010' or '0011' or '0001' | [32..30] | marker
    [29..22]
    [21..15] | marker
    [14..7]
    [6..0] | marker
  """
  if len(data) < 5:
    raise MalformedHeaderError(f'invalid length for timestamp: {len(data)} Too short to parse')
  a = (data[0] >> 1) & 0x07
  b = data[1] & 0xFF
  c = (data[2] >> 1) & 0x7F
  d = data[3] & 0xFF
  e = (data[4] >> 1) & 0x7F
  return (a << 30) | (b << 22) | (c << 15) | (d << 7) | e

class PESHeader:
  """
  Header of a PES packet, parsed from the first payload chunk of the unit.

    packet_start_code_prefix  24
    stream_id                  8
    PES_packet_length         16  (counted after this field)
    '10'                       2  \\
    ...                             |
    data_alignment_indicator   1    | optional PES header,
    ...                             | absent for NO_OPTIONAL_HEADER_STREAM_IDS
    PTS_DTS_flags              2    |
    ...                             |
    PES_header_data_length     8    |
    PTS, DTS, ..., stuffing  var  /
    PES_packet_data_byte     var
  """
  HEADER_SIZE = 6

  def __init__(self, data: bytes | bytearray | memoryview):
    if len(data) < PESHeader.HEADER_SIZE:
      raise MalformedHeaderError(f'invalid length for PES header: {len(data)} Too short to parse')
    data = memoryview(data)

    self.__packet_start_code_prefix: int = (data[0] << 16) | (data[1] << 8) | data[2]
    self.__stream_id: int = data[3]
    self.__PES_packet_length: int = (data[4] << 8) | data[5]
    self.__data_alignment: bool = False
    self.__PTS_DTS_indicator: int = PTS_DTS_INDICATOR_NONE
    self.__pts: int | None = None
    self.__dts: int | None = None
    self.__data_start_index: int = PESHeader.HEADER_SIZE

    if self.has_optional_header():
      if len(data) > 6:
        self.__data_alignment = (data[6] & 0x04) != 0
      if len(data) >= 9:
        self.__PTS_DTS_indicator = (data[7] & 0xC0) >> 6
        self.__data_start_index = 9 + data[8]

        if self.has_pts() and len(data) >= 14:
          self.__pts = extract_time(data[9:14])
          if self.has_dts() and len(data) >= 19:
            self.__dts = extract_time(data[14:19])

    self.__data: bytes = bytes(data[self.__data_start_index:])

  def packet_start_code_prefix(self) -> int:
    return self.__packet_start_code_prefix

  def stream_id(self) -> int:
    return self.__stream_id

  def PES_packet_length(self) -> int:
    return self.__PES_packet_length

  def has_optional_header(self) -> bool:
    return self.__stream_id not in NO_OPTIONAL_HEADER_STREAM_IDS

  def data_alignment(self) -> bool:
    return self.__data_alignment

  def PTS_DTS_indicator(self) -> int:
    return self.__PTS_DTS_indicator

  def has_pts(self) -> bool:
    return (self.__PTS_DTS_indicator & PTS_DTS_INDICATOR_ONLY_PTS) != 0

  def has_dts(self) -> bool:
    return self.__PTS_DTS_indicator == PTS_DTS_INDICATOR_BOTH

  def pts(self) -> int | None:
    return self.__pts

  def dts(self) -> int | None:
    return self.__dts

  def data_start_index(self) -> int:
    return self.__data_start_index

  def data(self) -> bytes:
    return self.__data

  def packet_size(self) -> int:
    # payload bytes still expected from the first chunk onward
    return self.__PES_packet_length - (self.__data_start_index - PESHeader.HEADER_SIZE)

  def __str__(self) -> str:
    lines = [
      'PES',
      '---',
      f'Packet Start Code Prefix: {self.__packet_start_code_prefix:X}',
      f'Stream Id: {self.__stream_id:X}',
      f'PES Packet Length: {self.__PES_packet_length}',
    ]
    if self.has_optional_header():
      lines.append(f'PTS DTS Indicator: {self.__PTS_DTS_indicator:b}')
      if self.has_pts(): lines.append(f'PTS: {self.__pts}')
      if self.has_dts(): lines.append(f'DTS: {self.__dts}')
    return '\n'.join(lines)

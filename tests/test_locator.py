"""Tests for PSI sections and the metadata stream locator."""

import pytest

from tsmeta.errors import StreamNotFoundError
from tsmeta.locator import MetadataStreamLocator
from tsmeta.mpeg2ts import ts
from tsmeta.mpeg2ts.parser import SectionParser
from tsmeta.mpeg2ts.pat import PATSection
from tsmeta.mpeg2ts.pmt import PMTSection
from tsmeta.mpeg2ts.section import Section, crc32

from streams import PAT, PMT, PMT_PID, VIDEO_PID, null_packet, packet, packetize_section


def test_crc32_mpeg2():
  assert crc32(b'123456789') == 0x0376E6E7


def test_section_crc_roundtrip():
  section = Section(PAT([(1, PMT_PID)]))
  assert section.CRC32() == 0
  assert section.table_id() == 0x00
  assert section.section_syntax_indicator()
  assert section.table_id_extension() == 1


def test_pat_section():
  pat = PATSection(PAT([(0, 0x10), (1, 0x1000), (2, 0x1100)]))
  assert list(pat) == [(0, 0x10), (1, 0x1000), (2, 0x1100)]
  assert pat.programs() == [(1, 0x1000), (2, 0x1100)]


def test_pmt_section():
  pmt = PMTSection(PMT(7, [(0x1B, 0x100), (0x0F, 0x101), (0x15, 0x102)]))
  assert pmt.program_number() == 7
  assert pmt.PCR_PID == VIDEO_PID
  assert [(stream_type, pid) for stream_type, pid, _ in pmt] == [(0x1B, 0x100), (0x0F, 0x101), (0x15, 0x102)]
  assert pmt.find(0x15) == 0x102
  assert pmt.find(0x86) is None


def test_section_parser_spanning_packets():
  pmt = PMT(1, [(0x06, 0x200 + index) for index in range(60)])
  packets = packetize_section(PMT_PID, pmt)
  assert len(packets) > 1
  parser: SectionParser[PMTSection] = SectionParser(PMTSection)

  for p in packets[:-1]:
    parser.push(p)
    assert list(parser) == []
  parser.push(packets[-1])

  sections = list(parser)
  assert len(sections) == 1
  assert sections[0].find(0x06) == 0x200


def test_section_parser_drops_bad_crc():
  section = bytearray(PAT([(1, PMT_PID)]))
  section[-1] ^= 0xFF
  parser: SectionParser[PATSection] = SectionParser(PATSection)
  for p in packetize_section(0x00, bytes(section)):
    parser.push(p)
  assert list(parser) == []


def test_section_parser_ignores_continuation_without_start():
  parser: SectionParser[PATSection] = SectionParser(PATSection)
  parser.push(packet(0x00, PAT([(1, PMT_PID)])))
  assert list(parser) == []


def test_locator_resolves_metadata_pid():
  locator = MetadataStreamLocator()
  assert locator.push(null_packet()) is None
  for p in packetize_section(0x00, PAT([(1, PMT_PID)])):
    assert locator.push(p) is None
  for p in packetize_section(PMT_PID, PMT(1, [(0x1B, 0x100), (0x15, 0x102)])):
    locator.push(p)
  assert locator.PID == 0x102
  assert locator.finish() == 0x102


def test_locator_custom_stream_type():
  locator = MetadataStreamLocator(stream_type=0x86)
  for p in packetize_section(0x00, PAT([(1, PMT_PID)])) + packetize_section(PMT_PID, PMT(1, [(0x15, 0x102), (0x86, 0x103)])):
    locator.push(p)
  assert locator.PID == 0x103


def test_locator_no_metadata_stream():
  locator = MetadataStreamLocator()
  for p in packetize_section(0x00, PAT([(1, PMT_PID)])):
    locator.push(p)
  with pytest.raises(StreamNotFoundError):
    for p in packetize_section(PMT_PID, PMT(1, [(0x1B, 0x100)])):
      locator.push(p)


def test_locator_checks_every_program():
  locator = MetadataStreamLocator()
  for p in packetize_section(0x00, PAT([(1, 0x1000), (2, 0x1100)])):
    locator.push(p)
  for p in packetize_section(0x1000, PMT(1, [(0x1B, 0x100)])):
    locator.push(p)
  assert locator.PID is None
  for p in packetize_section(0x1100, PMT(2, [(0x1B, 0x200), (0x15, 0x202)])):
    locator.push(p)
  assert locator.PID == 0x202


def test_locator_program_number():
  locator = MetadataStreamLocator(program_number=2)
  for p in packetize_section(0x00, PAT([(1, 0x1000), (2, 0x1100)])):
    locator.push(p)
  # program 1 is not looked at
  for p in packetize_section(0x1000, PMT(1, [(0x15, 0x102)])):
    locator.push(p)
  assert locator.PID is None
  for p in packetize_section(0x1100, PMT(2, [(0x15, 0x202)])):
    locator.push(p)
  assert locator.PID == 0x202


def test_locator_unknown_program_number():
  locator = MetadataStreamLocator(program_number=9)
  with pytest.raises(StreamNotFoundError):
    for p in packetize_section(0x00, PAT([(1, PMT_PID)])):
      locator.push(p)


def test_locator_finish_without_pid():
  locator = MetadataStreamLocator()
  locator.push(null_packet())
  with pytest.raises(StreamNotFoundError):
    locator.finish()


def test_payload_skips_adaptation_field():
  p = packet(0x102, b'abc', unit_start=True)
  assert len(p) == ts.PACKET_SIZE
  assert ts.pid(p) == 0x102
  assert ts.payload_unit_start_indicator(p)
  assert ts.has_adaptation_field(p)
  assert bytes(ts.payload(p)) == b'abc'


def test_section_parser_skips_packet_filled_by_adaptation_field():
  filler = packet(0x00, b'', unit_start=True)
  assert ts.payload_begin(filler) == ts.PACKET_SIZE
  assert bytes(ts.payload(filler)) == b''

  parser: SectionParser[PATSection] = SectionParser(PATSection)
  parser.push(filler)
  for p in packetize_section(0x00, PAT([(1, PMT_PID)])):
    parser.push(p)
  assert [list(pat) for pat in parser] == [[(1, PMT_PID)]]

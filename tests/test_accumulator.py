"""Tests for PES reassembly."""

import pytest

from tsmeta.errors import MalformedHeaderError, OverrunError
from tsmeta.mpeg2ts.accumulator import PESAccumulator

from streams import PES


def chunks(data: bytes, size: int = 184) -> list[bytes]:
  return [data[begin:begin + size] for begin in range(0, len(data), size)]


def test_reassembles_declared_length():
  payload = bytes(range(256)) * 3
  parts = chunks(PES(payload, pts=90000))
  accumulator = PESAccumulator()

  results = [accumulator.write(part) for part in parts]

  assert results == [False] * (len(parts) - 1) + [True]
  assert accumulator.header is not None
  assert accumulator.header.pts() == 90000
  assert accumulator.packet_size == len(payload)
  assert bytes(accumulator.data) == payload


def test_single_chunk_unit_is_done_immediately():
  accumulator = PESAccumulator()
  assert accumulator.write(PES(b'hello', pts=1)) is True
  assert bytes(accumulator.data) == b'hello'


def test_zero_expected_size_is_done_on_header():
  accumulator = PESAccumulator()
  assert accumulator.write(PES(b'')) is True
  assert accumulator.packet_size == 0
  assert accumulator.data == bytearray()


def test_overrun_on_crossing_chunk():
  data = PES(b'x' * 300, pts=0, PES_packet_length=3 + 5 + 250)
  first, second = data[:184], data[184:]
  accumulator = PESAccumulator()

  assert accumulator.write(first) is False
  with pytest.raises(OverrunError) as e:
    accumulator.write(second)
  assert e.value.expected == 250
  assert e.value.actual == 300


def test_overrun_on_first_chunk():
  with pytest.raises(OverrunError):
    PESAccumulator().write(PES(b'abcdef', pts=0, PES_packet_length=3 + 5 + 2))


def test_first_chunk_must_hold_pes_header():
  with pytest.raises(MalformedHeaderError):
    PESAccumulator().write(b'\x47' * 184)


def test_first_chunk_too_short_for_header():
  with pytest.raises(MalformedHeaderError):
    PESAccumulator().write(b'\x00\x00\x01\xbd')


def test_terminal_accumulator_rejects_writes():
  accumulator = PESAccumulator()
  assert accumulator.write(PES(b'done', pts=0))
  with pytest.raises(RuntimeError):
    accumulator.write(b'more')


def test_errored_accumulator_rejects_writes():
  accumulator = PESAccumulator()
  with pytest.raises(MalformedHeaderError):
    accumulator.write(b'garbage')
  with pytest.raises(RuntimeError):
    accumulator.write(PES(b'', pts=0))

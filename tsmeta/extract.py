"""
Extraction of timed ID3 metadata from an MPEG-TS byte stream.

`read` and `iterate` take a blocking reader (anything with `read(n)`), `stream`
and `read_async` take an async one (anything with `readexactly(n)`, e.g.
asyncio.StreamReader, BufferingAsyncReader or an aiohttp response's content).
Extraction stops at the first error: end of input, including a truncated last
packet, is a normal finish and every other failure raises an ExtractionError.
"""

import asyncio
import logging
from collections import deque
from typing import AsyncIterator, BinaryIO, Iterator, Protocol

import aiohttp

from tsmeta.errors import ExtractionError, ReadError
from tsmeta.id3.decoder import parse_id3
from tsmeta.locator import METADATA_STREAM_TYPE, MetadataStreamLocator
from tsmeta.meta import MetaInfo
from tsmeta.mpeg2ts import ts
from tsmeta.mpeg2ts.accumulator import PESAccumulator

DEFAULT_QUEUE_SIZE = 100

class AsyncPacketReader(Protocol):
  async def readexactly(self, n: int) -> bytes | bytearray | memoryview: ...

class Extractor:
  """
  Push-based extraction: `push` every transport packet in order, then iterate
  to take the records completed so far. Call `finish` at end of input.
  """

  def __init__(self, pid: int | None = None, stream_type: int = METADATA_STREAM_TYPE, program_number: int | None = None):
    self.PID: int | None = pid
    self.locator: MetadataStreamLocator | None = None if pid is not None else MetadataStreamLocator(stream_type, program_number)
    self.accumulator = PESAccumulator()
    self.queue: deque[MetaInfo] = deque()

  def __iter__(self) -> 'Extractor':
    return self

  def __next__(self) -> MetaInfo:
    if not self.queue:
      raise StopIteration()
    return self.queue.popleft()

  def push(self, packet: bytes | bytearray | memoryview) -> None:
    if self.PID is None:
      # packets consumed while locating are not replayed
      if self.locator is not None: self.PID = self.locator.push(packet)
      return
    if ts.pid(packet) != self.PID: return

    if not self.accumulator.write(ts.payload(packet)): return
    accumulator, self.accumulator = self.accumulator, PESAccumulator()
    logging.debug('PES packet completed (%d bytes)\n%s', len(accumulator.data), accumulator.header)
    self.queue.append(parse_id3(accumulator.header, accumulator.data))

  def finish(self) -> None:
    if self.PID is None and self.locator is not None:
      self.locator.finish()
    if self.accumulator.header is not None:
      logging.debug('discarding incomplete PES packet (%d of %s bytes)', len(self.accumulator.data), self.accumulator.packet_size)
    logging.debug('end of input')

def read_packet(reader: BinaryIO) -> bytes:
  packet = b''
  while len(packet) < ts.PACKET_SIZE:
    try:
      data = reader.read(ts.PACKET_SIZE - len(packet))
    except OSError as e:
      raise ReadError(f'failed packet read: {e}') from e
    if not data: raise EOFError
    packet += data
  return packet

async def read_packet_async(reader: AsyncPacketReader) -> bytes | bytearray | memoryview:
  try:
    return await reader.readexactly(ts.PACKET_SIZE)
  except (OSError, aiohttp.ClientError) as e:
    raise ReadError(f'failed packet read: {e}') from e

def iterate(reader: BinaryIO, pid: int | None = None, stream_type: int = METADATA_STREAM_TYPE, program_number: int | None = None) -> Iterator[MetaInfo]:
  extractor = Extractor(pid, stream_type, program_number)
  while True:
    try:
      packet = read_packet(reader)
    except EOFError:
      break
    extractor.push(packet)
    yield from extractor
  extractor.finish()

def read(reader: BinaryIO, pid: int | None = None, stream_type: int = METADATA_STREAM_TYPE, program_number: int | None = None) -> list[MetaInfo]:
  records: list[MetaInfo] = []
  try:
    for record in iterate(reader, pid, stream_type, program_number):
      records.append(record)
  except ExtractionError as e:
    e.records = records
    raise
  return records

async def stream(reader: AsyncPacketReader, pid: int | None = None, stream_type: int = METADATA_STREAM_TYPE, program_number: int | None = None, maxsize: int = DEFAULT_QUEUE_SIZE) -> AsyncIterator[MetaInfo]:
  """
  Yields records as they complete. Extraction runs in a background task that
  waits whenever `maxsize` records are queued but not yet consumed.
  Closing the generator (see contextlib.aclosing) cancels the task.
  """
  # asyncio.Queue treats 0 and below as unbounded
  if maxsize < 1:
    raise ValueError(f'maxsize must be at least 1, got {maxsize}')
  queue: asyncio.Queue[MetaInfo | Exception | None] = asyncio.Queue(maxsize)

  async def produce() -> None:
    extractor = Extractor(pid, stream_type, program_number)
    try:
      while True:
        try:
          packet = await read_packet_async(reader)
        except EOFError:
          break
        extractor.push(packet)
        for record in extractor:
          await queue.put(record)
      extractor.finish()
    except Exception as e:
      await queue.put(e)
      return
    await queue.put(None)

  producer = asyncio.create_task(produce())
  try:
    while True:
      item = await queue.get()
      if item is None: break
      if isinstance(item, Exception): raise item
      yield item
  finally:
    producer.cancel()
    await asyncio.gather(producer, return_exceptions=True)

async def read_async(reader: AsyncPacketReader, pid: int | None = None, stream_type: int = METADATA_STREAM_TYPE, program_number: int | None = None, maxsize: int = DEFAULT_QUEUE_SIZE) -> list[MetaInfo]:
  records: list[MetaInfo] = []
  try:
    async for record in stream(reader, pid, stream_type, program_number, maxsize):
      records.append(record)
  except ExtractionError as e:
    e.records = records
    raise
  return records

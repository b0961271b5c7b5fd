#!/usr/bin/env python3

import asyncio
import aiohttp

import argparse
import logging
import os
import stat
import sys
from contextlib import aclosing

from tsmeta.errors import ExtractionError, ReadError
from tsmeta.extract import DEFAULT_QUEUE_SIZE, AsyncPacketReader, stream
from tsmeta.locator import METADATA_STREAM_TYPE
from tsmeta.meta import MetaInfo
from tsmeta.mpeg2ts import ts
from tsmeta.util.reader import BufferingAsyncReader

def integer(value: str) -> int:
  return int(value, 0)

def positive(value: str) -> int:
  number = int(value)
  if number < 1:
    raise argparse.ArgumentTypeError(f'must be at least 1: {value}')
  return number

def build_parser() -> argparse.ArgumentParser:
  parser = argparse.ArgumentParser(description=('tsmeta: timed ID3 metadata extractor for MPEG-TS'))

  parser.add_argument('-i', '--input', type=str, nargs='?', default='-', help='ts file or http(s) URL, stdin by default')
  parser.add_argument('-p', '--pid', type=integer, nargs='?', help='metadata PID, skips the PAT/PMT lookup')
  parser.add_argument('-s', '--SID', type=int, nargs='?', help='program number to look the metadata stream up in')
  parser.add_argument('--stream-type', type=integer, nargs='?', default=METADATA_STREAM_TYPE)
  parser.add_argument('-q', '--queue-size', type=positive, nargs='?', default=DEFAULT_QUEUE_SIZE)
  parser.add_argument('--json', action='store_true', help='print one JSON object per record')
  parser.add_argument('-v', '--verbose', action='store_true')
  return parser

def format_record(record: MetaInfo, as_json: bool = False) -> str:
  return record.model_dump_json() if as_json else str(record)

async def extract(reader: AsyncPacketReader, args: argparse.Namespace) -> int:
  try:
    async with aclosing(stream(reader, args.pid, args.stream_type, args.SID, args.queue_size)) as records:
      async for record in records:
        print(format_record(record, args.json), flush=True)
  except ExtractionError as e:
    logging.error(f'failed MD: {e}')
    return 1
  return 0

async def main(argv: list[str] | None = None) -> int:
  args = build_parser().parse_args(argv)

  logging.basicConfig(
    level=logging.DEBUG if args.verbose else logging.INFO,
    format='%(levelname)s :: %(message)s',
    stream=sys.stderr,
  )

  if args.input.startswith(('http://', 'https://')):
    async with aiohttp.ClientSession() as session:
      try:
        async with session.get(args.input) as response:
          if response.status // 100 != 2:
            raise ReadError(f'HTTP {response.status} for {args.input}')
          return await extract(response.content, args)
      except (ReadError, aiohttp.ClientError) as e:
        logging.error(f'failed open: {e}')
        return 1

  if args.input == '-':
    if os.name == 'nt' or stat.S_ISREG(os.fstat(sys.stdin.buffer.fileno()).st_mode):
      return await extract(BufferingAsyncReader(sys.stdin.buffer, ts.PACKET_SIZE * 16), args)
    loop = asyncio.get_running_loop()
    reader = asyncio.StreamReader()
    protocol = asyncio.StreamReaderProtocol(reader)
    await loop.connect_read_pipe(lambda: protocol, sys.stdin.buffer)
    return await extract(reader, args)

  try:
    file = open(args.input, 'rb')
  except OSError as e:
    logging.error(f'failed open: {e}')
    return 1
  with file:
    return await extract(BufferingAsyncReader(file, ts.PACKET_SIZE * 16), args)

if __name__ == '__main__':
  sys.exit(asyncio.run(main()))

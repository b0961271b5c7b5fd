import io
import logging

from mutagen import MutagenError
from mutagen.id3 import ID3, Frame, PRIV, TextFrame, UrlFrame, WXXX

from tsmeta.errors import DecodeError
from tsmeta.meta import MetaInfo, Value
from tsmeta.mpeg2ts.pes import PESHeader

SEPARATOR = '\x00'

def frame_value(frame: Frame) -> str:
  match frame:
    case PRIV():
      return frame.owner + SEPARATOR + frame.data.decode('utf-8', errors='replace')
    case WXXX():
      return frame.desc + SEPARATOR + frame.url
    case UrlFrame():
      return frame.url
    case TextFrame():
      text = SEPARATOR.join(str(text) for text in frame.text)
      # TXXX, COMM: the description comes first
      if hasattr(frame, 'desc'): return frame.desc + SEPARATOR + text
      return text
    case _:
      return frame.pprint().split('=', 1)[-1]

def decode(data: bytes | bytearray | memoryview) -> dict[str, str]:
  try:
    tags = ID3(io.BytesIO(bytes(data)), translate=False, load_v1=False)
  except MutagenError as e:
    raise DecodeError(f'failed ID3 parse: {e}') from e
  return { frame.FrameID: frame_value(frame) for frame in tags.values() }

def split_value(raw: str) -> Value:
  split = raw.split(SEPARATOR)
  if len(split) == 2:
    return Value(prefix=split[0], value=split[1])
  return Value(value=raw)

def parse_id3(header: PESHeader, data: bytes | bytearray | memoryview) -> MetaInfo:
  try:
    tags = decode(data)
  except DecodeError:
    logging.debug(f'undecodable metadata payload ({len(data)} bytes): {bytes(data).hex()}')
    raise
  return MetaInfo(
    pts=header.pts() or 0,
    metadata={ tag: split_value(raw) for tag, raw in tags.items() },
  )

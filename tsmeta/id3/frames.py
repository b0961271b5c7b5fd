ID3_HEADER = bytes([0x49, 0x44, 0x33, 0x04, 0x00, 0x00]) # 'ID3', v2.4.0, no flags

def synchsafe(size: int) -> bytes:
  return bytes([
    ((size & 0xFE00000) >> 21),
    ((size & 0x01FC000) >> 14),
    ((size & 0x0003F80) >>  7),
    ((size & 0x000007F) >>  0),
  ])

def frame(frame_id: str, payload: bytes | bytearray | memoryview) -> bytes:
  return b''.join([
    frame_id.encode('ascii'),
    synchsafe(len(payload)),
    (0).to_bytes(2, byteorder='big'),
    payload,
  ])

def ID3(*frames: bytes) -> bytes:
  body = b''.join(frames)
  return b''.join([
    ID3_HEADER,
    synchsafe(len(body)),
    body,
  ])

def TXXX_frame(description: str, text: str) -> bytes:
  return frame('TXXX', b''.join([
    b'\x03', # utf-8
    description.encode('utf-8'),
    b'\x00',
    text.encode('utf-8'),
    b'\x00'
  ]))

def text_frame(frame_id: str, *texts: str) -> bytes:
  return frame(frame_id, b'\x03' + b'\x00'.join(text.encode('utf-8') for text in texts))

def PRIV_frame(owner: str, data: bytes | bytearray | memoryview) -> bytes:
  return frame('PRIV', owner.encode('utf-8') + b'\x00' + bytes(data))

def TXXX(description: str, text: str) -> bytes:
  return ID3(TXXX_frame(description, text))

def PRIV(owner: str, data: bytes | bytearray | memoryview) -> bytes:
  return ID3(PRIV_frame(owner, data))

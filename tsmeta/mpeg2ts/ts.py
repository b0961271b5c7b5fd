#!/usr/bin/env python3

PACKET_SIZE = 188
HEADER_SIZE = 4
SYNC_BYTE = b'\x47'
STUFFING_BYTE = b'\xff'
HZ = 90000

def payload_unit_start_indicator(packet: bytes | bytearray | memoryview) -> bool:
  return (packet[1] & 0x40) != 0

def pid(packet: bytes | bytearray | memoryview) -> int:
  return ((packet[1] & 0x1F) << 8) | packet[2]

def has_adaptation_field(packet: bytes | bytearray | memoryview) -> bool:
  return (packet[3] & 0x20) != 0

def has_payload(packet: bytes | bytearray | memoryview) -> bool:
  return (packet[3] & 0x10) != 0

def adaptation_field_length(packet: bytes | bytearray | memoryview) -> int:
  return packet[HEADER_SIZE] if has_adaptation_field(packet) else 0

def payload_begin(packet: bytes | bytearray | memoryview) -> int:
  return min(PACKET_SIZE, HEADER_SIZE + (1 + adaptation_field_length(packet) if has_adaptation_field(packet) else 0))

def payload(packet: bytes | bytearray | memoryview) -> memoryview:
  if not has_payload(packet): return memoryview(b'')
  return memoryview(packet)[payload_begin(packet):PACKET_SIZE]

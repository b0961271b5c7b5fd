import logging

from tsmeta.errors import StreamNotFoundError
from tsmeta.mpeg2ts import ts
from tsmeta.mpeg2ts.pat import PATSection
from tsmeta.mpeg2ts.pmt import PMTSection
from tsmeta.mpeg2ts.parser import SectionParser

METADATA_STREAM_TYPE = 0x15 # Metadata carried in PES packets

class MetadataStreamLocator:
  """
  Finds the elementary PID carrying `stream_type` by following the PAT to each
  program's PMT. Feed packets with `push` until `PID` is set.
  """

  def __init__(self, stream_type: int = METADATA_STREAM_TYPE, program_number: int | None = None):
    self.stream_type = stream_type
    self.program_number = program_number
    self.PID: int | None = None
    self.PAT_Parser: SectionParser[PATSection] = SectionParser(PATSection)
    self.PMT_Parsers: dict[int, SectionParser[PMTSection]] | None = None
    self.pending: set[int] = set()

  def push(self, packet: bytes | bytearray | memoryview) -> int | None:
    if self.PID is not None: return self.PID

    PID = ts.pid(packet)
    if PID == 0x00 and self.PMT_Parsers is None:
      self.PAT_Parser.push(packet)
      for PAT in self.PAT_Parser:
        self.__PAT(PAT)
        break
    elif self.PMT_Parsers is not None and PID in self.PMT_Parsers:
      parser = self.PMT_Parsers[PID]
      parser.push(packet)
      for PMT in parser:
        self.__PMT(PMT)
        if self.PID is not None: break

    return self.PID

  def __PAT(self, PAT: PATSection) -> None:
    programs = [
      (program_number, program_map_PID) for program_number, program_map_PID in PAT.programs()
      if self.program_number is None or program_number == self.program_number
    ]
    if not programs:
      raise StreamNotFoundError('no program found in PAT' if self.program_number is None else f'program {self.program_number} not found in PAT')
    self.PMT_Parsers = { program_map_PID: SectionParser(PMTSection) for _, program_map_PID in programs }
    self.pending = set(program_number for program_number, _ in programs)
    logging.debug(f'PAT: programs {programs}')

  def __PMT(self, PMT: PMTSection) -> None:
    program_number = PMT.program_number()
    if program_number not in self.pending: return
    self.pending.discard(program_number)

    if (elementary_PID := PMT.find(self.stream_type)) is not None:
      logging.info(f'metadata stream found in program {program_number}: PID 0x{elementary_PID:04x}')
      self.PID = elementary_PID
    elif not self.pending:
      raise StreamNotFoundError('no metadata stream found')

  def finish(self) -> int:
    if self.PID is None:
      raise StreamNotFoundError('no metadata stream found')
    return self.PID

from pydantic import BaseModel, ConfigDict, NonNegativeInt

from tsmeta.mpeg2ts import ts

class Value(BaseModel):
  model_config = ConfigDict(frozen=True)

  prefix: str = ''  # text before the NUL separator, e.g. the TXXX description
  value: str

  def __str__(self) -> str:
    return f'{self.prefix}/{self.value}'

class MetaInfo(BaseModel):
  model_config = ConfigDict(frozen=True)

  pts: NonNegativeInt  # 90kHz clock
  metadata: dict[str, Value]

  def pts_seconds(self) -> float:
    return self.pts / ts.HZ

  def __str__(self) -> str:
    tags = ', '.join(f'{tag}: {value}' for tag, value in self.metadata.items())
    return f'{self.pts_seconds():.1f}: {{{tags}}}'

from pydantic import BaseModel


class WorldFileStatus(BaseModel):
  exists: bool
  fileName: str
  size: int
  lastModified: str

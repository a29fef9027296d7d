from pydantic import BaseModel, Field
from typing import List

# online == ONLINE_UNKNOWN means the server answered a TCP connect but the
# player count could not be read
ONLINE_UNKNOWN = -1
DEFAULT_MAX_PLAYERS = 8

class PlayerStatus(BaseModel):
  online: int = Field(default=0, ge=ONLINE_UNKNOWN)
  players: List[str] = Field(default_factory=list)
  maxPlayers: int = Field(default=0, ge=0)
  serverOnline: bool = False
  configured: bool = False

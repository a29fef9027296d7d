from fastapi import APIRouter, Depends
from terramap_server.dependencies import get_status_probe
from terramap_server.schemas.players import PlayerStatus
from terramap_server.services.player_service import StatusProbe

router = APIRouter()

@router.get("/players", response_model=PlayerStatus)
async def get_players(probe: StatusProbe = Depends(get_status_probe)):
  """Always 200: reachability is reported in the body (serverOnline)."""
  return await probe.probe()

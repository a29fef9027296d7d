from fastapi import Request
from terramap_server.schemas.config import ServerSettings
from terramap_server.services.world_cache import WorldCache
from terramap_server.services.player_service import StatusProbe

def get_settings(request: Request) -> ServerSettings:
  return request.app.state.settings

def get_world_cache(request: Request) -> WorldCache:
  return request.app.state.world_cache

def get_status_probe(request: Request) -> StatusProbe:
  return request.app.state.status_probe

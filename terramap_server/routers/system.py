from fastapi import APIRouter, Depends, status
from fastapi.responses import FileResponse, JSONResponse
from terramap_server.dependencies import get_settings, get_world_cache
from terramap_server.schemas.config import ClientConfig, ServerSettings
from terramap_server.services.world_cache import WorldCache

router = APIRouter()

@router.get("/", include_in_schema=False)
async def index(settings: ServerSettings = Depends(get_settings)):
  index_path = settings.static_dir / "index.html"
  if not index_path.is_file():
    return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content={"error": "index.html not found"})
  return FileResponse(index_path)

@router.get("/api/config", response_model=ClientConfig)
async def get_client_config(settings: ServerSettings = Depends(get_settings)):
  return ClientConfig(
    refreshIntervalSeconds=settings.refresh_interval_seconds,
    worldFileName=settings.world_file_name,
    hasPlayerStatsEnabled=settings.player_stats_enabled
  )

@router.get("/health")
async def health():
  return {"status": "healthy"}

@router.get("/ready")
async def ready(world_cache: WorldCache = Depends(get_world_cache)):
  if await world_cache.exists():
    return {"status": "ready", "worldFile": True}
  return JSONResponse(
    status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
    content={"status": "not ready", "worldFile": False}
  )

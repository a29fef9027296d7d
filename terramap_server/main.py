from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles
import uvicorn
from terramap_server.core.config import load_settings
from terramap_server.core.logger import setup_logger, set_debug_mode
from terramap_server.schemas.config import ServerSettings
from terramap_server.services.world_cache import WorldCache
from terramap_server.services.player_service import StatusProbe
from terramap_server.routers.world import router as world_router
from terramap_server.routers.players import router as players_router
from terramap_server.routers.system import router as system_router

logger = setup_logger("TerraMap")

class AssetStaticFiles(StaticFiles):
  """StaticFiles that lets browsers cache scripts and stylesheets for an hour."""
  def file_response(self, full_path, stat_result, scope, status_code=200):
    response = super().file_response(full_path, stat_result, scope, status_code)
    if str(full_path).endswith((".js", ".css")):
      response.headers["Cache-Control"] = "public, max-age=3600"
    return response

def log_startup(settings: ServerSettings):
  logger.info(f"TerraMap server running on port {settings.port}")
  logger.info(f"World file path: {settings.world_file_path}")
  logger.info(f"Refresh interval: {settings.refresh_interval_seconds} seconds")
  if settings.player_stats_enabled:
    logger.info(f"Terraria REST API: http://{settings.terraria_server_host}:{settings.terraria_rest_port}")
  elif settings.status_probe_configured:
    logger.info(f"Terraria server: {settings.terraria_server_host}:{settings.terraria_server_port} (no REST API token)")
  else:
    logger.info("Terraria server stats: disabled")

def create_app(settings: ServerSettings) -> FastAPI:
  set_debug_mode(settings.debug)

  @asynccontextmanager
  async def lifespan(app: FastAPI):
    log_startup(settings)
    yield

  app = FastAPI(title="TerraMap Server", version="0.1.0", lifespan=lifespan)
  app.state.settings = settings
  app.state.world_cache = WorldCache(settings.world_file_path)
  app.state.status_probe = StatusProbe(settings)

  app.include_router(system_router, tags=["system"])
  app.include_router(world_router, prefix="/api", tags=["world"])
  app.include_router(players_router, prefix="/api", tags=["players"])

  # Mounted last so API routes take precedence
  if settings.static_dir.is_dir():
    app.mount("/", AssetStaticFiles(directory=settings.static_dir, html=False), name="static")
  else:
    logger.warning(f"Static directory {settings.static_dir} not found, assets will not be served")

  return app

settings = load_settings()
app = create_app(settings)

def run():
  # uvicorn.error and uvicorn.access propagate into this logger
  setup_logger("uvicorn")
  uvicorn.run(app, host=settings.host, port=settings.port, log_config=None)

if __name__ == "__main__":
  run()

from fastapi import APIRouter, Depends, Header, status
from fastapi.responses import JSONResponse, Response
from terramap_server.core.errors import WorldFileNotFoundError, WorldFileReadError
from terramap_server.core.logger import setup_logger
from terramap_server.dependencies import get_world_cache
from terramap_server.schemas.world import WorldFileStatus
from terramap_server.services.world_cache import NotModified, WorldCache

router = APIRouter()
logger = setup_logger("TerraMap.WorldAPI")

@router.get("/world", response_class=Response)
async def download_world(
  if_modified_since: str | None = Header(None, alias="If-Modified-Since"),
  world_cache: WorldCache = Depends(get_world_cache)
):
  """
  Download the world file as binary.
  Returns 304 when the client copy is not older than the mtime on disk.
  """
  try:
    result = await world_cache.fetch(if_modified_since)
  except WorldFileNotFoundError as e:
    return JSONResponse(
      status_code=status.HTTP_404_NOT_FOUND,
      content={"error": "World file not found", "path": str(e.path)}
    )
  except WorldFileReadError:
    logger.exception("Error serving world file")
    return JSONResponse(
      status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
      content={"error": "Failed to read world file"}
    )

  if isinstance(result, NotModified):
    return Response(status_code=status.HTTP_304_NOT_MODIFIED)

  return Response(
    content=result.content,
    media_type="application/octet-stream",
    headers={
      "Content-Disposition": f'attachment; filename="{result.file_name}"',
      "Last-Modified": result.http_last_modified,
      "Cache-Control": "no-cache"
    }
  )

@router.get("/world/status", response_model=WorldFileStatus)
async def get_world_status(world_cache: WorldCache = Depends(get_world_cache)):
  """Stat-only world file status for client polling. Never reads the content."""
  try:
    return await world_cache.describe()
  except WorldFileNotFoundError:
    return JSONResponse(
      status_code=status.HTTP_404_NOT_FOUND,
      content={"error": "World file not found", "exists": False}
    )
  except WorldFileReadError:
    logger.exception("Error checking world file status")
    return JSONResponse(
      status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
      content={"error": "Failed to check world file status"}
    )

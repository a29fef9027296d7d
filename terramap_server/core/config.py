from dotenv import load_dotenv
load_dotenv()

import os
from terramap_server.schemas.config import ServerSettings

def load_settings() -> ServerSettings:
  """Read server settings from environment variables.

  Unset variables fall back to the defaults declared on ServerSettings.

  Returns:
      ServerSettings: Validated settings
  """
  env = {
    "host": os.getenv("HOST"),
    "port": os.getenv("PORT"),
    "world_file_path": os.getenv("WORLD_FILE_PATH"),
    "refresh_interval_seconds": os.getenv("REFRESH_INTERVAL_SECONDS"),
    "terraria_server_host": os.getenv("TERRARIA_SERVER_HOST"),
    "terraria_server_port": os.getenv("TERRARIA_SERVER_PORT"),
    "terraria_rest_port": os.getenv("TERRARIA_REST_PORT"),
    "terraria_rest_token": os.getenv("TERRARIA_REST_TOKEN"),
    "static_dir": os.getenv("STATIC_DIR"),
    "debug": os.getenv("DEBUG"),
  }
  return ServerSettings(**{k: v for k, v in env.items() if v is not None})

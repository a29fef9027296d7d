from pathlib import Path
from pydantic import BaseModel, Field


class ServerSettings(BaseModel):
    """Server configuration loaded from the environment (.env supported)"""
    host: str = "0.0.0.0"
    port: int = Field(default=3000, ge=1, le=65535)
    world_file_path: Path = Path("/terraria/worlds/world.wld")
    refresh_interval_seconds: int = Field(default=60, ge=1)
    terraria_server_host: str = ""
    terraria_server_port: int = Field(default=7777, ge=1, le=65535)
    terraria_rest_port: int = Field(default=7878, ge=1, le=65535)
    terraria_rest_token: str = ""
    static_dir: Path = Path("static")
    debug: bool = False

    @property
    def world_file_name(self) -> str:
        return self.world_file_path.name

    @property
    def player_stats_enabled(self) -> bool:
        """REST player stats need both the game host and an API token"""
        return bool(self.terraria_rest_token and self.terraria_server_host)

    @property
    def status_probe_configured(self) -> bool:
        return bool(self.terraria_server_host)


class ClientConfig(BaseModel):
    """Config sent to the browser via /api/config"""
    refreshIntervalSeconds: int
    worldFileName: str
    hasPlayerStatsEnabled: bool

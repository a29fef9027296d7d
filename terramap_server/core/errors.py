from enum import Enum
from pathlib import Path


class WorldFileError(Exception):
    """Base class for failures serving the world file"""
    def __init__(self, path: Path, message: str):
        super().__init__(message)
        self.path = path


class WorldFileNotFoundError(WorldFileError):
    """Raised when the world file is absent from storage"""
    def __init__(self, path: Path):
        super().__init__(path, f"World file not found: {path}")


class WorldFileReadError(WorldFileError):
    """Raised when the world file exists but could not be stat'ed or read"""
    def __init__(self, path: Path):
        super().__init__(path, f"Failed to read world file: {path}")


class UpstreamUnavailableError(Exception):
    """Raised when the game server REST API is unreachable or returns garbage"""
    pass


class ProbeOutcome(Enum):
    CONNECTED = "connected"
    TIMEOUT = "timeout"
    REFUSED = "refused"

    @property
    def reachable(self) -> bool:
        return self is ProbeOutcome.CONNECTED

"""
World Cache - Serve the world save file from memory, re-reading it only when
its modification time changes.
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from email.utils import format_datetime, parsedate_to_datetime
from pathlib import Path
import anyio
from terramap_server.core.errors import WorldFileNotFoundError, WorldFileReadError
from terramap_server.core.logger import setup_logger
from terramap_server.schemas.world import WorldFileStatus

logger = setup_logger("TerraMap.WorldCache")


@dataclass(frozen=True)
class CachedArtifact:
    """One version of the world file. Replaced as a whole, never mutated."""
    mtime_ns: int
    content: bytes


@dataclass(frozen=True)
class WorldArtifact:
    content: bytes
    last_modified: datetime
    file_name: str

    @property
    def http_last_modified(self) -> str:
        return format_datetime(self.last_modified, usegmt=True)


@dataclass(frozen=True)
class NotModified:
    last_modified: datetime


def _mtime_to_datetime(mtime_ns: int) -> datetime:
    return datetime.fromtimestamp(mtime_ns / 1_000_000_000, tz=timezone.utc)


def parse_http_date(value: str | None) -> datetime | None:
    """
    Parse an If-Modified-Since value.
    Accepts RFC 7231 HTTP-dates and, leniently, ISO 8601 timestamps.
    Returns None for missing or unparseable values.
    """
    if not value:
        return None
    try:
        parsed = parsedate_to_datetime(value)
    except (TypeError, ValueError, IndexError):
        try:
            parsed = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
        except ValueError:
            return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


class WorldCache:
    """
    Holds the single in-memory copy of the world file.

    The file is stat'ed on every fetch and read again only when the mtime
    differs from the cached one. A write that lands between the stat and
    the read can leave the new content paired with the older mtime; the
    next fetch after the following change corrects it.
    """
    def __init__(self, world_file_path: Path):
        self.path = Path(world_file_path)
        self._path = anyio.Path(self.path)
        self._cached: CachedArtifact | None = None

    @property
    def file_name(self) -> str:
        return self.path.name

    @property
    def cached(self) -> CachedArtifact | None:
        return self._cached

    async def _stat(self):
        try:
            return await self._path.stat()
        except FileNotFoundError:
            raise WorldFileNotFoundError(self.path) from None
        except OSError as e:
            raise WorldFileReadError(self.path) from e

    async def _read_content(self) -> bytes:
        try:
            return await self._path.read_bytes()
        except OSError as e:
            raise WorldFileReadError(self.path) from e

    async def fetch(self, if_modified_since: str | None = None) -> WorldArtifact | NotModified:
        """
        Return the current world file, or NotModified when the client copy is fresh.

        Args:
            if_modified_since: Raw If-Modified-Since header value, if any.

        Raises:
            WorldFileNotFoundError: The file does not exist.
            WorldFileReadError: Stat or read failed.
        """
        stat_result = await self._stat()
        mtime_ns = stat_result.st_mtime_ns
        last_modified = _mtime_to_datetime(mtime_ns)

        client_time = parse_http_date(if_modified_since)
        if client_time is not None and client_time >= last_modified:
            return NotModified(last_modified=last_modified)

        cached = self._cached
        if cached is None or cached.mtime_ns != mtime_ns:
            content = await self._read_content()
            cached = CachedArtifact(mtime_ns=mtime_ns, content=content)
            self._cached = cached
            logger.info(f"Loaded world file {self.file_name} ({len(content)} bytes)")

        return WorldArtifact(
            content=cached.content,
            last_modified=_mtime_to_datetime(cached.mtime_ns),
            file_name=self.file_name
        )

    async def describe(self) -> WorldFileStatus:
        """Stat-only status for cheap polling. Never reads the file content."""
        stat_result = await self._stat()
        last_modified = _mtime_to_datetime(stat_result.st_mtime_ns)
        return WorldFileStatus(
            exists=True,
            fileName=self.file_name,
            size=stat_result.st_size,
            lastModified=last_modified.isoformat(timespec="milliseconds").replace("+00:00", "Z")
        )

    async def exists(self) -> bool:
        return await self._path.exists()

from datetime import datetime, timezone
from email.utils import format_datetime
import pytest
from terramap_server.core.errors import WorldFileNotFoundError, WorldFileReadError
from terramap_server.services.world_cache import NotModified, WorldArtifact, WorldCache, parse_http_date
from conftest import BASE_MTIME, set_mtime

pytestmark = pytest.mark.anyio


def count_reads(cache: WorldCache, monkeypatch) -> list:
  calls = []
  original = cache._read_content

  async def counting():
    calls.append(1)
    return await original()

  monkeypatch.setattr(cache, "_read_content", counting)
  return calls


def http_date(seconds: float) -> str:
  return format_datetime(datetime.fromtimestamp(seconds, tz=timezone.utc), usegmt=True)


async def test_fetch_missing_file_raises_not_found(tmp_path):
  cache = WorldCache(tmp_path / "missing.wld")
  with pytest.raises(WorldFileNotFoundError) as exc:
    await cache.fetch()
  assert exc.value.path == tmp_path / "missing.wld"


async def test_fetch_reads_once_then_serves_from_memory(world_file, monkeypatch):
  cache = WorldCache(world_file)
  reads = count_reads(cache, monkeypatch)

  first = await cache.fetch()
  second = await cache.fetch()

  assert isinstance(first, WorldArtifact)
  assert first.content == b"world-v1"
  assert second.content == b"world-v1"
  assert first.last_modified == datetime.fromtimestamp(BASE_MTIME, tz=timezone.utc)
  assert first.file_name == "world.wld"
  assert len(reads) == 1


async def test_fetch_rereads_after_mtime_changes(world_file, monkeypatch):
  cache = WorldCache(world_file)
  reads = count_reads(cache, monkeypatch)
  await cache.fetch()

  world_file.write_bytes(b"world-v2-longer")
  set_mtime(world_file, BASE_MTIME + 60)

  changed = await cache.fetch()
  again = await cache.fetch()

  assert changed.content == b"world-v2-longer"
  assert changed.last_modified == datetime.fromtimestamp(BASE_MTIME + 60, tz=timezone.utc)
  assert again.content == b"world-v2-longer"
  assert len(reads) == 2
  assert cache.cached.mtime_ns == (BASE_MTIME + 60) * 1_000_000_000


async def test_fetch_rereads_when_mtime_moves_backwards(world_file):
  cache = WorldCache(world_file)
  await cache.fetch()

  world_file.write_bytes(b"restored-backup")
  set_mtime(world_file, BASE_MTIME - 3600)

  result = await cache.fetch()
  assert result.content == b"restored-backup"


async def test_if_modified_since_not_older_short_circuits(world_file, monkeypatch):
  cache = WorldCache(world_file)
  reads = count_reads(cache, monkeypatch)

  same = await cache.fetch(http_date(BASE_MTIME))
  newer = await cache.fetch(http_date(BASE_MTIME + 3600))

  assert isinstance(same, NotModified)
  assert isinstance(newer, NotModified)
  assert reads == []
  assert cache.cached is None


async def test_if_modified_since_older_serves_current_bytes(world_file):
  cache = WorldCache(world_file)
  result = await cache.fetch(http_date(BASE_MTIME - 1))
  assert isinstance(result, WorldArtifact)
  assert result.content == world_file.read_bytes()


async def test_update_within_same_second_is_served(world_file):
  set_mtime(world_file, BASE_MTIME + 0.2)
  cache = WorldCache(world_file)
  served = await cache.fetch()

  world_file.write_bytes(b"world-v2")
  set_mtime(world_file, BASE_MTIME + 0.8)

  result = await cache.fetch(served.http_last_modified)

  assert served.http_last_modified == "Tue, 14 Nov 2023 22:13:20 GMT"
  assert isinstance(result, WorldArtifact)
  assert result.content == b"world-v2"


async def test_if_modified_since_after_sub_second_mtime_is_not_modified(world_file):
  set_mtime(world_file, BASE_MTIME + 0.75)
  cache = WorldCache(world_file)

  result = await cache.fetch(http_date(BASE_MTIME + 1))

  assert isinstance(result, NotModified)


async def test_unparseable_if_modified_since_is_ignored(world_file):
  cache = WorldCache(world_file)
  result = await cache.fetch("not a date")
  assert isinstance(result, WorldArtifact)


async def test_fetch_directory_raises_read_error(tmp_path):
  cache = WorldCache(tmp_path)
  with pytest.raises(WorldFileReadError):
    await cache.fetch()


async def test_describe_never_reads_content(world_file, monkeypatch):
  cache = WorldCache(world_file)

  async def fail():
    raise AssertionError("describe() must not read the file")

  monkeypatch.setattr(cache, "_read_content", fail)
  status = await cache.describe()

  assert status.exists is True
  assert status.fileName == "world.wld"
  assert status.size == len(b"world-v1")
  assert status.lastModified == "2023-11-14T22:13:20.000Z"
  assert cache.cached is None


async def test_describe_missing_file_raises_not_found(tmp_path):
  cache = WorldCache(tmp_path / "missing.wld")
  with pytest.raises(WorldFileNotFoundError):
    await cache.describe()


def test_parse_http_date_formats():
  expected = datetime.fromtimestamp(BASE_MTIME, tz=timezone.utc)
  assert parse_http_date("Tue, 14 Nov 2023 22:13:20 GMT") == expected
  assert parse_http_date("2023-11-14T22:13:20.000Z") == expected
  assert parse_http_date("") is None
  assert parse_http_date(None) is None
  assert parse_http_date("garbage") is None

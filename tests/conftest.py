import os
import socket
from pathlib import Path
import pytest
from terramap_server.schemas.config import ServerSettings

# 2023-11-14T22:13:20Z
BASE_MTIME = 1_700_000_000


def set_mtime(path: Path, seconds: float) -> None:
  ns = int(seconds * 1_000_000_000)
  os.utime(path, ns=(ns, ns))


@pytest.fixture
def anyio_backend():
  return "asyncio"


@pytest.fixture
def world_file(tmp_path: Path) -> Path:
  path = tmp_path / "world.wld"
  path.write_bytes(b"world-v1")
  set_mtime(path, BASE_MTIME)
  return path


@pytest.fixture
def closed_port() -> int:
  """A local port with nothing listening on it."""
  with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
    sock.bind(("127.0.0.1", 0))
    return sock.getsockname()[1]


@pytest.fixture
def listening_port():
  """A local port that accepts connections into its backlog."""
  sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
  sock.bind(("127.0.0.1", 0))
  sock.listen(8)
  yield sock.getsockname()[1]
  sock.close()


@pytest.fixture
def make_settings(tmp_path: Path):
  def _make(**overrides) -> ServerSettings:
    values = {"world_file_path": tmp_path / "world.wld", "static_dir": tmp_path / "static"}
    values.update(overrides)
    return ServerSettings(**values)
  return _make

"""
Player Service - Best-effort player status from the Terraria server.

Order of attempts:
1. TShock REST API (needs host + token)
2. Plain TCP connect to the game port (needs host)
3. Nothing configured -> default status, no network I/O
"""

import asyncio
import aiohttp
import anyio
from yarl import URL
from terramap_server.core.errors import ProbeOutcome, UpstreamUnavailableError
from terramap_server.core.logger import setup_logger
from terramap_server.schemas.config import ServerSettings
from terramap_server.schemas.players import DEFAULT_MAX_PLAYERS, ONLINE_UNKNOWN, PlayerStatus

logger = setup_logger("TerraMap.Players")

REST_PLAYERS_PATH = "/v2/players/list"
REST_TIMEOUT_SECONDS = 5
PROBE_TIMEOUT_SECONDS = 3

_NAME_KEYS = ("nickname", "username", "name")


def _player_name(entry) -> str:
    if isinstance(entry, str):
        return entry
    if isinstance(entry, dict):
        for key in _NAME_KEYS:
            if isinstance(entry.get(key), str):
                return entry[key]
    raise UpstreamUnavailableError(f"Unrecognised player entry: {entry!r}")


def parse_player_list(data) -> PlayerStatus:
    """
    Build a PlayerStatus from a /v2/players/list payload.

    Raises:
        UpstreamUnavailableError: The payload does not have the expected shape.
    """
    if not isinstance(data, dict):
        raise UpstreamUnavailableError("REST API payload is not an object")

    # TShock reports auth and usage errors in-band
    status = data.get("status")
    if status is not None and str(status) != "200":
        raise UpstreamUnavailableError(f"REST API status {status}: {data.get('error', '')}")

    raw_players = data.get("players") or []
    if not isinstance(raw_players, list):
        raise UpstreamUnavailableError("REST API 'players' is not a list")
    players = [_player_name(p) for p in raw_players]

    try:
        max_players = int(data.get("maxplayers") or DEFAULT_MAX_PLAYERS)
    except (TypeError, ValueError, OverflowError):
        raise UpstreamUnavailableError(f"Invalid maxplayers: {data.get('maxplayers')!r}") from None

    return PlayerStatus(
        online=len(players),
        players=players,
        maxPlayers=max(max_players, 0),
        serverOnline=True,
        configured=True
    )


class StatusProbe:
    """
    Decides how to query the game server and degrades to a valid
    PlayerStatus on every failure. probe() never raises.
    """
    def __init__(
        self,
        settings: ServerSettings,
        rest_timeout: float = REST_TIMEOUT_SECONDS,
        probe_timeout: float = PROBE_TIMEOUT_SECONDS
    ):
        self.settings = settings
        self.rest_timeout = rest_timeout
        self.probe_timeout = probe_timeout

    @property
    def rest_url(self) -> URL:
        return URL.build(
            scheme="http",
            host=self.settings.terraria_server_host,
            port=self.settings.terraria_rest_port,
            path=REST_PLAYERS_PATH
        )

    async def probe(self) -> PlayerStatus:
        if self.settings.player_stats_enabled:
            try:
                return await self.fetch_structured()
            except UpstreamUnavailableError as e:
                logger.warning(f"Error fetching player stats from REST API: {e}")
            except Exception:
                logger.warning("Unexpected error fetching player stats from REST API", exc_info=True)

        if self.settings.status_probe_configured:
            outcome = await self.check_transport()
            return PlayerStatus(
                online=ONLINE_UNKNOWN if outcome.reachable else 0,
                players=[],
                maxPlayers=DEFAULT_MAX_PLAYERS,
                serverOnline=outcome.reachable,
                configured=True
            )

        return PlayerStatus(configured=False, serverOnline=False)

    async def fetch_structured(self) -> PlayerStatus:
        """
        Query the REST API once. No retry: the caller falls back to TCP.

        Raises:
            UpstreamUnavailableError: Non-2xx, network error, timeout or bad payload.
        """
        timeout = aiohttp.ClientTimeout(total=self.rest_timeout)
        try:
            async with aiohttp.ClientSession(timeout=timeout) as session:
                async with session.get(
                    self.rest_url,
                    params={"token": self.settings.terraria_rest_token}
                ) as resp:
                    if not resp.ok:
                        raise UpstreamUnavailableError(f"REST API returned {resp.status}")
                    data = await resp.json(content_type=None)
        except asyncio.TimeoutError:
            raise UpstreamUnavailableError(f"REST API timed out after {self.rest_timeout}s") from None
        except (aiohttp.ClientError, ValueError) as e:
            raise UpstreamUnavailableError(f"{type(e).__name__}: {e}") from e

        return parse_player_list(data)

    async def check_transport(self) -> ProbeOutcome:
        """
        Open and immediately close a TCP connection to the game port.
        The socket is released on connect, timeout and error alike.
        """
        host = self.settings.terraria_server_host
        port = self.settings.terraria_server_port
        try:
            with anyio.fail_after(self.probe_timeout):
                async with await anyio.connect_tcp(host, port):
                    pass
        except TimeoutError:
            logger.debug(f"TCP probe to {host}:{port} timed out after {self.probe_timeout}s")
            return ProbeOutcome.TIMEOUT
        except OSError as e:
            logger.debug(f"TCP probe to {host}:{port} failed: {e}")
            return ProbeOutcome.REFUSED
        return ProbeOutcome.CONNECTED

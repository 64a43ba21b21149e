"""Authoritative game world: connected players, ticks and broadcasts."""

from __future__ import annotations

import asyncio
import itertools
import logging
import random
from typing import Any, Dict, List, Optional, Protocol

from tribalcraft.packets import (
    ServerPacket,
    SetInitPacket,
    UpdatePlayersPacket,
    encode_server_packet,
)
from tribalcraft.server.player import MAP_SIZE, Player

log = logging.getLogger(__name__)


class Writer(Protocol):
    """Anything that can deliver a binary message to one client."""

    async def send(self, message: bytes) -> Any: ...


class Server:
    """Holds every player and the socket used to reach each of them."""

    def __init__(self, region: str = "US East") -> None:
        self.region = region
        self.instance_id = random.getrandbits(64)
        self.players: List[Player] = []
        self.player_ws: Dict[int, Writer] = {}
        self.tick = 0
        self.lock = asyncio.Lock()
        self._ids = itertools.count()

    async def add(self, writer: Writer, name: str) -> int:
        """Place a new player at a random spot and tell everyone about it."""
        player_id = next(self._ids)
        x = random.uniform(0.0, MAP_SIZE)
        y = random.uniform(0.0, MAP_SIZE)

        self.player_ws[player_id] = writer
        self.players.append(Player(player_id, name, x, y))

        await self.send_to_all_except(
            player_id,
            SetInitPacket(is_mine=False, id=player_id, x=x, y=y, name=name),
        )
        await self.send_to_client(
            SetInitPacket(is_mine=True, id=player_id, x=x, y=y, name=name),
            player_id,
        )
        return player_id

    def get_player_by_id(self, player_id: int) -> Optional[Player]:
        return next((p for p in self.players if p.id == player_id), None)

    async def send_to_client(self, packet: ServerPacket, player_id: int) -> None:
        """Send one packet to one client; failures are logged, not raised."""
        try:
            encoded = encode_server_packet(packet)
        except (ValueError, TypeError) as exc:
            log.warning("Error serializing data of type %r: %s", packet, exc)
            return

        writer = self.player_ws.get(player_id)
        if writer is None:
            log.warning("no ws for id %d", player_id)
            return

        try:
            await writer.send(encoded)
        except Exception as exc:  # network failures must not stop the world
            log.warning("Error sending serialized content to client: %s", exc)

    async def send_to_all(self, packet: ServerPacket) -> None:
        for player_id in list(self.player_ws):
            await self.send_to_client(packet, player_id)

    async def send_to_all_except(self, player_id: int, packet: ServerPacket) -> None:
        for other_id in [pid for pid in self.player_ws if pid != player_id]:
            await self.send_to_client(packet, other_id)

    async def update(self) -> None:
        """Advance the world one tick and broadcast every player's position."""
        self.tick += 1
        for player in self.players:
            player.step()
        await self.send_to_all(
            UpdatePlayersPacket(data=[(p.id, p.x, p.y) for p in self.players])
        )
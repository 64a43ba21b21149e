"""Client game state: known players, own player and movement intent."""

from __future__ import annotations

import dataclasses
import logging
import math
from typing import Dict, Iterable, List, Optional, Tuple

from tribalcraft.client.player import Player
from tribalcraft.client.render import RenderUtil
from tribalcraft.packets import MovePacket, SetInitPacket, UpdatePlayersPacket

log = logging.getLogger(__name__)


def _round_hundredths(value: float) -> float:
    scaled = value * 100.0
    return math.copysign(math.floor(abs(scaled) + 0.5), scaled) / 100.0


def move_direction(pressed: Iterable[Tuple[float, float]]) -> Optional[float]:
    """Angle of the summed direction vectors, to two decimals, or None if still."""
    t_x = t_y = 0.0
    for dx, dy in pressed:
        t_x += dx
        t_y += dy
    if t_x == 0.0 and t_y == 0.0:
        return None
    return _round_hundredths(math.atan2(t_y, t_x))


class Game:
    """Everything the client knows about the running game."""

    def __init__(self) -> None:
        self.my_player: Optional[Player] = None
        self.my_player_id: Optional[int] = None
        self.all_players: List[Player] = []
        self.keys: Dict[int, bool] = {}
        self.move_dir: Optional[float] = None
        self.render = RenderUtil()

    def get_player_by_id(self, player_id: int) -> Optional[Player]:
        return next((p for p in self.all_players if p.id == player_id), None)

    def create_player(self, is_mine: bool, player_id: int, x: float, y: float, name: str) -> Player:
        player = Player(player_id, name, x, y)
        if is_mine:
            self.my_player = dataclasses.replace(player)
            self.my_player_id = player_id
        self.all_players.append(player)
        log.debug("%r", self.all_players)
        return player

    def apply_packet(self, packet) -> Optional[MovePacket]:
        """Apply a server packet; returns the movement packet to send back, if any."""
        if isinstance(packet, SetInitPacket):
            self.create_player(packet.is_mine, packet.id, packet.x, packet.y, packet.name)
            return None
        if isinstance(packet, UpdatePlayersPacket):
            for player_id, x, y in packet.data:
                player = self.get_player_by_id(player_id)
                if player is not None:
                    player.apply_position(x, y)
            return MovePacket(dir=self.move_dir)
        return None
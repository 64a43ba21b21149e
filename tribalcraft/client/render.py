"""Drawing of the game world onto a pygame surface."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence

import pygame

from tribalcraft.client.player import Player

MAP_SIZE = 14400.0
BAND_HEIGHT = 2400.0
PLAYER_RADIUS = 35
GRID_COLUMNS = 18.0
GRID_LINE_WIDTH = 4
GRID_ALPHA = 0.06

BACKGROUND = (0, 0, 0)
SNOW = (255, 255, 255)
GRASS = (182, 219, 102)
SAND = (219, 198, 102)
OVERLAY = (0, 0, 70, round(0.35 * 255))
PLAYER_COLOR = (255, 0, 0)


@dataclass
class Camera:
    x: float = 0.0
    y: float = 0.0


def grid_line_positions(offset: float, gap: float, extent: float) -> List[float]:
    """Screen coordinates of grid lines within [0, extent) for a view at offset."""
    if gap <= 0:
        raise ValueError(f"grid gap must be positive, got {gap}")
    positions = []
    pos = math.fmod(-offset, gap)
    while pos < extent:
        if pos >= 0.0:
            positions.append(pos)
        pos += gap
    return positions


def _rect(x: float, y: float, w: float, h: float) -> pygame.Rect:
    return pygame.Rect(round(x), round(y), round(w), round(h))


class RenderUtil:
    """Draws the map, grid and players relative to a scrolling view."""

    def __init__(self) -> None:
        self.x_offset = MAP_SIZE / 2
        self.y_offset = MAP_SIZE / 2
        self.camera = Camera()

    def follow(self, player: Optional[Player], width: float, height: float) -> None:
        """Centre the view on player, if there is one."""
        if player is not None:
            self.x_offset = player.x - width / 2.0
            self.y_offset = player.y - height / 2.0

    def draw(
        self,
        surface: pygame.Surface,
        my_player_id: int,
        players: Sequence[Player],
        delta: float,
    ) -> None:
        """Render one frame; delta is the time since the last frame in seconds."""
        width, height = surface.get_size()
        surface.fill(BACKGROUND)

        my_player = next((p for p in players if p.id == my_player_id), None)
        self.follow(my_player, width, height)

        self._render_background(surface)

        overlay = pygame.Surface((width, height), pygame.SRCALPHA)
        pygame.draw.rect(overlay, OVERLAY, _rect(-self.x_offset, -self.y_offset, MAP_SIZE, MAP_SIZE))
        surface.blit(overlay, (0, 0))

        if my_player is not None:
            self._render_grid_lines(surface, my_player)

        self._render_players(surface, players, delta * 1000.0)

    def _render_background(self, surface: pygame.Surface) -> None:
        left, top = -self.x_offset, -self.y_offset
        pygame.draw.rect(surface, SNOW, _rect(left, top, MAP_SIZE, BAND_HEIGHT))
        pygame.draw.rect(
            surface, GRASS, _rect(left, top + BAND_HEIGHT, MAP_SIZE, MAP_SIZE - 2 * BAND_HEIGHT)
        )
        pygame.draw.rect(
            surface, SAND, _rect(left, top + MAP_SIZE - BAND_HEIGHT, MAP_SIZE, BAND_HEIGHT)
        )

    def _render_grid_lines(self, surface: pygame.Surface, player: Player) -> None:
        width, height = surface.get_size()
        gap = width / GRID_COLUMNS
        layer = pygame.Surface((width, height), pygame.SRCALPHA)
        color = (0, 0, 0, round(GRID_ALPHA * 255))
        for x in grid_line_positions(player.x, gap, width):
            pygame.draw.line(layer, color, (round(x), 0), (round(x), height), GRID_LINE_WIDTH)
        for y in grid_line_positions(player.y, gap, height):
            pygame.draw.line(layer, color, (0, round(y)), (width, round(y)), GRID_LINE_WIDTH)
        surface.blit(layer, (0, 0))

    def _render_players(
        self, surface: pygame.Surface, players: Iterable[Player], delta_ms: float
    ) -> None:
        for player in players:
            player.smooth(delta_ms)
            centre = (round(player.x - self.x_offset), round(player.y - self.y_offset))
            pygame.draw.circle(surface, PLAYER_COLOR, centre, PLAYER_RADIUS)
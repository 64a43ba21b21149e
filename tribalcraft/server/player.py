"""Server-side player state and movement."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional

MAP_SIZE = 14400.0
PLAYER_RADIUS = 35.0
BASE_SPEED = 55.0
DECELERATION = 0.6


@dataclass
class Player:
    """A player in the world, moved once per server tick."""

    id: int
    name: str
    x: float
    y: float
    move_dir: Optional[float] = None
    x_vel: float = 0.0
    y_vel: float = 0.0
    x_accel: float = 0.0
    y_accel: float = 0.0
    lock_movement: bool = False

    def step(self) -> None:
        """Advance one tick: steer or slow down, move, and stay inside the map."""
        if self.move_dir is None:
            self.x_vel -= self.x_vel * DECELERATION
            self.y_vel -= self.y_vel * DECELERATION
        else:
            x_d = math.cos(self.move_dir)
            y_d = math.sin(self.move_dir)
            if x_d != 0.0:
                self.x_vel = BASE_SPEED * x_d
            if y_d != 0.0:
                self.y_vel = BASE_SPEED * y_d

        self.x += self.x_vel
        self.y += self.y_vel

        low, high = PLAYER_RADIUS, MAP_SIZE - PLAYER_RADIUS
        self.x = min(max(self.x, low), high)
        self.y = min(max(self.y, low), high)
"""Client-side view of a player, with the state used for smoothing."""

from __future__ import annotations

from dataclasses import dataclass, field

SMOOTHING_DURATION_MS = 170.0
MAX_SMOOTHING_FACTOR = 1.7


@dataclass
class Player:
    """A player as the client knows it: current, previous and smoothed positions."""

    id: int
    name: str
    x: float
    y: float
    last_x: float = field(init=False)
    last_y: float = field(init=False)
    lerp_x: float = field(init=False)
    lerp_y: float = field(init=False)
    last_lerp_x: float = field(init=False)
    last_lerp_y: float = field(init=False)
    delta: float = 0.0
    time_1: float = 0.0
    time_2: float = 0.0

    def __post_init__(self) -> None:
        self.last_x = self.last_lerp_x = self.lerp_x = self.x
        self.last_y = self.last_lerp_y = self.lerp_y = self.y

    def apply_position(self, x: float, y: float) -> None:
        """Take a new server position, remembering the previous one."""
        self.last_x, self.last_y = self.x, self.y
        self.x, self.y = x, y
        self.time_1 = self.time_2
        self.last_lerp_x, self.last_lerp_y = self.lerp_x, self.lerp_y

    def smooth(self, delta: float) -> None:
        """Advance smoothing by delta milliseconds toward the current position."""
        self.delta += delta
        factor = min(self.delta / SMOOTHING_DURATION_MS, MAX_SMOOTHING_FACTOR)
        self.lerp_x = self.last_lerp_x + (self.x - self.last_lerp_x) * factor
        self.lerp_y = self.last_lerp_y + (self.y - self.last_lerp_y) * factor
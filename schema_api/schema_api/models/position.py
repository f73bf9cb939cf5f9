"""
    Position model - a point on the logical canvas.
"""
from dataclasses import dataclass
from typing import Dict


@dataclass(frozen=True)
class Position:
    """Immutable 2D point in logical canvas units."""
    x: float = 0.0
    y: float = 0.0

    def __add__(self, other: 'Position') -> 'Position':
        return Position(self.x + other.x, self.y + other.y)

    def __sub__(self, other: 'Position') -> 'Position':
        return Position(self.x - other.x, self.y - other.y)

    def to_dict(self) -> Dict[str, float]:
        return {'x': self.x, 'y': self.y}

    @classmethod
    def origin(cls) -> 'Position':
        return cls(0.0, 0.0)

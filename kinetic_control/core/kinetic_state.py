# kinetic_control/core/kinetic_state.py
from dataclasses import dataclass, fields
from typing import Tuple

AXES: Tuple[str, ...] = ("position", "velocity", "acceleration")


@dataclass(frozen=True)
class KineticState:
    """Position, velocity and acceleration of a single kinetic system."""
    position: float = 0.0
    velocity: float = 0.0
    acceleration: float = 0.0

    def __add__(self, other: "KineticState") -> "KineticState":
        return KineticState(self.position + other.position,
                            self.velocity + other.velocity,
                            self.acceleration + other.acceleration)

    def __sub__(self, other: "KineticState") -> "KineticState":
        return KineticState(self.position - other.position,
                            self.velocity - other.velocity,
                            self.acceleration - other.acceleration)

    def __mul__(self, scalar: float) -> "KineticState":
        return KineticState(self.position * scalar,
                            self.velocity * scalar,
                            self.acceleration * scalar)

    __rmul__ = __mul__

    def component(self, axis: str) -> float:
        if axis not in AXES:
            raise ValueError(f"Unknown axis '{axis}', expected one of {AXES}")
        return getattr(self, axis)

    def as_tuple(self) -> Tuple[float, float, float]:
        return tuple(getattr(self, f.name) for f in fields(self))

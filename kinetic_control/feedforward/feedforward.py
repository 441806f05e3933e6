# kinetic_control/feedforward/feedforward.py
import numpy as np
from dataclasses import dataclass

from kinetic_control.core.kinetic_state import KineticState


def _validate_gains(**gains: float):
    for name, value in gains.items():
        if not np.isfinite(value):
            raise ValueError(f"Feedforward gain {name} must be finite, got {value}")


@dataclass(frozen=True)
class BasicFeedforward:
    """kV * v + kA * a + kS * sign(v), evaluated on the reference state."""
    kv: float = 0.0
    ka: float = 0.0
    ks: float = 0.0

    def __post_init__(self):
        _validate_gains(kv=self.kv, ka=self.ka, ks=self.ks)

    def calculate(self, reference: KineticState) -> float:
        return float(self.kv * reference.velocity
                     + self.ka * reference.acceleration
                     + self.ks * np.sign(reference.velocity))


@dataclass(frozen=True)
class ElevatorFeedforward(BasicFeedforward):
    kg: float = 0.0

    def __post_init__(self):
        super().__post_init__()
        _validate_gains(kg=self.kg)

    def calculate(self, reference: KineticState) -> float:
        return self.kg + super().calculate(reference)


@dataclass(frozen=True)
class ArmFeedforward(BasicFeedforward):
    """Gravity term scales with cos(position); position is in radians."""
    kg: float = 0.0

    def __post_init__(self):
        super().__post_init__()
        _validate_gains(kg=self.kg)

    def calculate(self, reference: KineticState) -> float:
        return float(self.kg * np.cos(reference.position)) + super().calculate(reference)

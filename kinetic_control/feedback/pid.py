# kinetic_control/feedback/pid.py
import numpy as np
from dataclasses import dataclass
from typing import Optional, Tuple

from kinetic_control.errors import InvalidMeasurementError, InvalidTimestepError


@dataclass(frozen=True)
class PIDCoefficients:
    kp: float = 0.0
    ki: float = 0.0
    kd: float = 0.0

    def __post_init__(self):
        for name in ("kp", "ki", "kd"):
            if not np.isfinite(getattr(self, name)):
                raise ValueError(f"PID gain {name} must be finite, got {getattr(self, name)}")


def validate_timestep(dt: float):
    if not np.isfinite(dt) or dt <= 0:
        raise InvalidTimestepError(f"Timestep must be positive and finite, got {dt}")


def validate_finite(value: float, what: str = "error"):
    if not np.isfinite(value):
        raise InvalidMeasurementError(f"Non-finite {what}: {value}")


class FeedbackTerm:
    """PID feedback for one axis.

    The derivative contribution is zero on the first call after construction
    or reset, since there is no previous error to differentiate against.
    """

    def __init__(self, coefficients: PIDCoefficients, reset_integral_on_zero_crossover: bool = False):
        self.coefficients = coefficients
        self.reset_integral_on_zero_crossover = reset_integral_on_zero_crossover

        self.integral = 0.0
        self.prev_error: Optional[float] = None
        self.timestamp = 0.0

    def reset(self):
        self.integral = 0.0
        self.prev_error = None
        self.timestamp = 0.0

    def _proportional(self, error: float) -> float:
        return self.coefficients.kp * error

    def compute(self, error: float, dt: float) -> float:
        validate_timestep(dt)
        validate_finite(error)

        if (self.reset_integral_on_zero_crossover and self.prev_error is not None
                and np.sign(error) != np.sign(self.prev_error)):
            self.integral = 0.0
        self.integral += error * dt
        derivative = 0.0 if self.prev_error is None else (error - self.prev_error) / dt

        output = self._proportional(error) + self.coefficients.ki * self.integral + self.coefficients.kd * derivative

        self.prev_error = error
        self.timestamp += dt
        return float(output)

    def get_state(self) -> Tuple[float, Optional[float], float]:
        return self.integral, self.prev_error, self.timestamp

    def set_state(self, state: Tuple[float, Optional[float], float]):
        self.integral, self.prev_error, self.timestamp = state

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.coefficients})"


class SquIDTerm(FeedbackTerm):
    """Square-root proportional term with the usual integral and derivative terms."""

    def _proportional(self, error: float) -> float:
        return self.coefficients.kp * np.sqrt(abs(error)) * np.sign(error)


class BangBangTerm:
    """Full output toward the target: sign(error). Holds no state."""

    def compute(self, error: float, dt: float) -> float:
        validate_timestep(dt)
        validate_finite(error)
        return float(np.sign(error))

    def reset(self):
        pass

    def get_state(self):
        return None

    def set_state(self, state):
        pass

    def __repr__(self) -> str:
        return "BangBangTerm()"

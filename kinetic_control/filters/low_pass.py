# kinetic_control/filters/low_pass.py
from typing import Optional

import numpy as np


def validate_alpha(alpha: float):
    if not np.isfinite(alpha) or not (0 < alpha <= 1.0):
        raise ValueError(f"Low pass gain should be in (0, 1], got {alpha}")


class LowPassFilter:
    """First-order exponential smoothing.

    ``y_n = alpha * x_n + (1 - alpha) * y_{n-1}``. Without a starting estimate
    the first sample passes through unchanged and becomes the initial state.
    """

    def __init__(self, alpha: float, starting_estimate: Optional[float] = None):
        validate_alpha(alpha)
        if starting_estimate is not None and not np.isfinite(starting_estimate):
            raise ValueError(f"Low pass starting estimate must be finite, got {starting_estimate}")
        self.alpha = float(alpha)
        self.starting_estimate = None if starting_estimate is None else float(starting_estimate)
        self.estimate = self.starting_estimate

    def apply(self, value: float) -> float:
        if self.estimate is None:
            self.estimate = float(value)
        else:
            self.estimate = self.alpha * value + (1.0 - self.alpha) * self.estimate
        return self.estimate

    def reset(self):
        self.estimate = self.starting_estimate

    def get_state(self) -> Optional[float]:
        return self.estimate

    def set_state(self, state: Optional[float]):
        self.estimate = state

    def __repr__(self) -> str:
        return f"LowPassFilter(alpha={self.alpha}, starting_estimate={self.starting_estimate})"

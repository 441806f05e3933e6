# kinetic_control/filters/custom.py
from typing import Callable

from kinetic_control.errors import FilterComputationError


class CustomFilter:
    """Wraps a pure ``float -> float`` function, e.g. encoder tick scaling."""

    def __init__(self, fn: Callable[[float], float]):
        if not callable(fn):
            raise ValueError(f"Custom filter must be callable, got {type(fn).__name__}")
        self.fn = fn

    def apply(self, value: float) -> float:
        try:
            return float(self.fn(value))
        except Exception as exc:
            raise FilterComputationError(f"Custom filter {self.name} failed on input {value!r}: {exc}") from exc

    @property
    def name(self) -> str:
        return getattr(self.fn, "__name__", repr(self.fn))

    def reset(self):
        pass

    def get_state(self):
        return None

    def set_state(self, state):
        pass

    def __repr__(self) -> str:
        return f"CustomFilter({self.name})"

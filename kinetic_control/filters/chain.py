# kinetic_control/filters/chain.py
from typing import Iterable, Tuple, Union

from kinetic_control.filters.custom import CustomFilter
from kinetic_control.filters.low_pass import LowPassFilter

Filter = Union[LowPassFilter, CustomFilter]


class FilterChain:
    """Ordered, fixed sequence of filters. Each stage consumes the previous output."""

    def __init__(self, filters: Iterable = ()):
        stages = []
        for f in filters:
            if isinstance(f, (LowPassFilter, CustomFilter)):
                stages.append(f)
            elif callable(f):
                stages.append(CustomFilter(f))
            else:
                raise ValueError(f"Unsupported filter stage: {f!r}")
        self._filters: Tuple[Filter, ...] = tuple(stages)

    @property
    def filters(self) -> Tuple[Filter, ...]:
        return self._filters

    def apply(self, raw: float) -> float:
        value = raw
        for f in self._filters:
            value = f.apply(value)
        return value

    def reset(self):
        for f in self._filters:
            f.reset()

    def get_state(self) -> tuple:
        return tuple(f.get_state() for f in self._filters)

    def set_state(self, state: tuple):
        for f, s in zip(self._filters, state):
            f.set_state(s)

    def __len__(self) -> int:
        return len(self._filters)

    def __repr__(self) -> str:
        return f"FilterChain({list(self._filters)!r})"

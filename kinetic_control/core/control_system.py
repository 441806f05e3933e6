# kinetic_control/core/control_system.py
import logging
import numpy as np
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Dict, Mapping, Optional, Tuple, Union

from kinetic_control.core.kinetic_state import AXES, KineticState
from kinetic_control.errors import UnbuiltControlSystemError
from kinetic_control.feedback.angular import AngleType, wrap
from kinetic_control.feedback.pid import BangBangTerm, FeedbackTerm, validate_finite, validate_timestep
from kinetic_control.filters.chain import FilterChain

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Axis:
    feedback: Optional[Union[FeedbackTerm, BangBangTerm]] = None
    filters: FilterChain = field(default_factory=FilterChain)

    def reset(self):
        if self.feedback is not None:
            self.feedback.reset()
        self.filters.reset()

    def get_state(self) -> tuple:
        feedback_state = None if self.feedback is None else self.feedback.get_state()
        return feedback_state, self.filters.get_state()

    def set_state(self, state: tuple):
        feedback_state, filter_state = state
        if self.feedback is not None:
            self.feedback.set_state(feedback_state)
        self.filters.set_state(filter_state)


class ControlSystem:
    """Closed-loop controller evaluated once per tick by an external loop.

    A bare ``ControlSystem()`` is unbuilt and refuses to evaluate; use
    ``ControlSystem.builder()`` to configure and build one. Structure is fixed
    after ``build()``; only feedback and filter state changes between ticks.
    Instances are not thread-safe.
    """

    def __init__(self):
        self._built = False
        self._axes: Dict[str, Axis] = {}
        self._angle_type: Optional[AngleType] = None
        self._feedforward = None
        self._output_limits: Tuple[float, float] = (-np.inf, np.inf)
        self.last_measurement = KineticState()

    @staticmethod
    def builder():
        from kinetic_control.core.builder import ControlSystemBuilder
        return ControlSystemBuilder()

    def _freeze(self, axes: Dict[str, Axis], angle_type: Optional[AngleType] = None,
                feedforward=None, output_limits: Tuple[float, float] = (-np.inf, np.inf)):
        if self._built:
            raise RuntimeError("Control system is already built")
        unknown = set(axes) - set(AXES)
        if unknown:
            raise ValueError(f"Unknown axes {sorted(unknown)}, expected a subset of {AXES}")

        self._axes = dict(axes)
        self._angle_type = angle_type
        self._feedforward = feedforward
        self._output_limits = output_limits
        self._built = True
        logger.debug("Built control system with axes %s (angular=%s)", list(self._axes), angle_type)

    @property
    def is_built(self) -> bool:
        return self._built

    @property
    def axes(self) -> Mapping[str, Axis]:
        return MappingProxyType(self._axes)

    @property
    def angle_type(self) -> Optional[AngleType]:
        return self._angle_type

    @property
    def angular(self) -> bool:
        return self._angle_type is not None

    @property
    def feedforward(self):
        return self._feedforward

    @property
    def output_limits(self) -> Tuple[float, float]:
        return self._output_limits

    def _require_built(self):
        if not self._built:
            raise UnbuiltControlSystemError("Control system must be built before it is used")

    def _axis_error(self, axis: str, target: float, measured: float) -> float:
        if axis == "position" and self._angle_type is not None:
            return wrap(target, measured, self._angle_type)
        return target - measured

    def evaluate(self, targets: KineticState, measurements: KineticState, dt: float) -> float:
        self._require_built()
        validate_timestep(dt)
        for name, axis in self._axes.items():
            if axis.feedback is not None:
                validate_finite(targets.component(name), f"{name} target")
            validate_finite(measurements.component(name), f"{name} measurement")

        saved = {name: axis.get_state() for name, axis in self._axes.items()}
        try:
            output = 0.0
            filtered = {}
            for name, axis in self._axes.items():
                measured = axis.filters.apply(measurements.component(name))
                validate_finite(measured, f"{name} filtered measurement")
                filtered[name] = measured
                if axis.feedback is not None:
                    error = self._axis_error(name, targets.component(name), measured)
                    output += axis.feedback.compute(error, dt)
            if self._feedforward is not None:
                output += self._feedforward.calculate(targets)
            validate_finite(output, "output")
        except Exception:
            for name, axis in self._axes.items():
                axis.set_state(saved[name])
            raise

        self.last_measurement = KineticState(**{name: filtered.get(name, measurements.component(name))
                                                for name in AXES})
        return float(np.clip(output, self._output_limits[0], self._output_limits[1]))

    def reset(self):
        self._require_built()
        for axis in self._axes.values():
            axis.reset()
        self.last_measurement = KineticState()
        logger.debug("Reset control system")

    def is_within_tolerance(self, goal: KineticState, tolerance: KineticState) -> bool:
        self._require_built()
        for name in AXES:
            difference = self._axis_error(name, goal.component(name), self.last_measurement.component(name))
            # NaN never compares within tolerance
            if not abs(difference) <= tolerance.component(name):
                return False
        return True

    def __repr__(self) -> str:
        if not self._built:
            return "ControlSystem(<unbuilt>)"
        return f"ControlSystem(axes={self._axes!r}, angle_type={self._angle_type}, feedforward={self._feedforward!r})"

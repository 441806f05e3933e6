# kinetic_control/core/builder.py
"""
Two-phase construction of a ControlSystem.

Setters collect configuration and return the builder; ``build()`` validates
it and returns a new, built ControlSystem with its own feedback and filter
state. A builder may be built more than once; instances never share state.

    system = (ControlSystem.builder()
              .angular(AngleType.DEGREES, lambda b: b.pos_pid(0.02, 0.0, 0.001))
              .pos_filter(lambda f: f.custom(ticks_to_degrees).low_pass(0.3))
              .vel_pid(PIDCoefficients(kp=0.1))
              .build())
"""
import logging
import warnings
import numpy as np
from functools import partial
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple, Union

from kinetic_control.core.control_system import Axis, ControlSystem
from kinetic_control.core.kinetic_state import AXES
from kinetic_control.feedback.angular import AngleType
from kinetic_control.feedback.pid import BangBangTerm, FeedbackTerm, PIDCoefficients, SquIDTerm
from kinetic_control.feedforward.feedforward import ArmFeedforward, BasicFeedforward, ElevatorFeedforward
from kinetic_control.filters.chain import FilterChain
from kinetic_control.filters.custom import CustomFilter
from kinetic_control.filters.low_pass import LowPassFilter, validate_alpha

logger = logging.getLogger(__name__)

Gains = Union[PIDCoefficients, float]

FEEDFORWARD_TYPES = {
    "basic": BasicFeedforward,
    "elevator": ElevatorFeedforward,
    "arm": ArmFeedforward,
}

CONFIG_KEYS = frozenset({
    "pos_pid", "vel_pid", "accel_pid",
    "pos_filter", "vel_filter", "accel_filter",
    "angular", "feedforward", "output_limits",
})


def _coefficients(kp: Gains, ki: float, kd: float) -> PIDCoefficients:
    if isinstance(kp, PIDCoefficients):
        return kp
    return PIDCoefficients(kp=kp, ki=ki, kd=kd)


class FilterBuilder:
    def __init__(self):
        self._stages: List[Tuple[str, Any]] = []

    def low_pass(self, alpha: float, starting_estimate: Optional[float] = None) -> "FilterBuilder":
        validate_alpha(alpha)
        self._stages.append(("low_pass", (alpha, starting_estimate)))
        return self

    def custom(self, fn: Callable[[float], float]) -> "FilterBuilder":
        self._stages.append(("custom", CustomFilter(fn)))
        return self

    def build(self) -> FilterChain:
        filters = []
        for kind, stage in self._stages:
            if kind == "low_pass":
                filters.append(LowPassFilter(*stage))
            else:
                filters.append(stage)
        return FilterChain(filters)

    def __len__(self) -> int:
        return len(self._stages)


class ControlSystemBuilder:
    def __init__(self):
        self._feedback: Dict[str, Callable[[], Any]] = {}
        self._filters: Dict[str, FilterBuilder] = {axis: FilterBuilder() for axis in AXES}
        self._angle_type: Optional[AngleType] = None
        self._feedforward = None
        self._output_limits: Tuple[float, float] = (-np.inf, np.inf)

    def _set_feedback(self, axis: str, factory: Callable[[], Any]) -> "ControlSystemBuilder":
        if axis in self._feedback:
            warnings.warn(f"{axis} feedback already configured, replacing it")
        self._feedback[axis] = factory
        return self

    def pos_pid(self, kp: Gains = 0.0, ki: float = 0.0, kd: float = 0.0,
                reset_integral_on_zero_crossover: bool = False) -> "ControlSystemBuilder":
        term = partial(FeedbackTerm, _coefficients(kp, ki, kd),
                       reset_integral_on_zero_crossover=reset_integral_on_zero_crossover)
        return self._set_feedback("position", term)

    def vel_pid(self, kp: Gains = 0.0, ki: float = 0.0, kd: float = 0.0,
                reset_integral_on_zero_crossover: bool = False) -> "ControlSystemBuilder":
        term = partial(FeedbackTerm, _coefficients(kp, ki, kd),
                       reset_integral_on_zero_crossover=reset_integral_on_zero_crossover)
        return self._set_feedback("velocity", term)

    def accel_pid(self, kp: Gains = 0.0, ki: float = 0.0, kd: float = 0.0,
                  reset_integral_on_zero_crossover: bool = False) -> "ControlSystemBuilder":
        term = partial(FeedbackTerm, _coefficients(kp, ki, kd),
                       reset_integral_on_zero_crossover=reset_integral_on_zero_crossover)
        return self._set_feedback("acceleration", term)

    def pos_squid(self, kp: Gains = 0.0, ki: float = 0.0, kd: float = 0.0) -> "ControlSystemBuilder":
        return self._set_feedback("position", partial(SquIDTerm, _coefficients(kp, ki, kd)))

    def vel_squid(self, kp: Gains = 0.0, ki: float = 0.0, kd: float = 0.0) -> "ControlSystemBuilder":
        return self._set_feedback("velocity", partial(SquIDTerm, _coefficients(kp, ki, kd)))

    def pos_bang_bang(self) -> "ControlSystemBuilder":
        return self._set_feedback("position", BangBangTerm)

    def vel_bang_bang(self) -> "ControlSystemBuilder":
        return self._set_feedback("velocity", BangBangTerm)

    def pos_filter(self, configurator: Callable[[FilterBuilder], Any]) -> "ControlSystemBuilder":
        configurator(self._filters["position"])
        return self

    def vel_filter(self, configurator: Callable[[FilterBuilder], Any]) -> "ControlSystemBuilder":
        configurator(self._filters["velocity"])
        return self

    def accel_filter(self, configurator: Callable[[FilterBuilder], Any]) -> "ControlSystemBuilder":
        configurator(self._filters["acceleration"])
        return self

    def angular(self, angle_type: AngleType,
                configurator: Optional[Callable[["ControlSystemBuilder"], Any]] = None) -> "ControlSystemBuilder":
        """Wrap the position error onto the shortest path for ``angle_type``."""
        if not isinstance(angle_type, AngleType):
            raise ValueError(f"Expected an AngleType, got {angle_type!r}")
        self._angle_type = angle_type
        if configurator is not None:
            configurator(self)
        return self

    def feedforward(self, feedforward) -> "ControlSystemBuilder":
        if self._feedforward is not None:
            warnings.warn("feedforward already configured, replacing it")
        self._feedforward = feedforward
        return self

    def basic_ff(self, kv: float = 0.0, ka: float = 0.0, ks: float = 0.0) -> "ControlSystemBuilder":
        return self.feedforward(BasicFeedforward(kv=kv, ka=ka, ks=ks))

    def elevator_ff(self, kg: float = 0.0, kv: float = 0.0, ka: float = 0.0, ks: float = 0.0) -> "ControlSystemBuilder":
        return self.feedforward(ElevatorFeedforward(kv=kv, ka=ka, ks=ks, kg=kg))

    def arm_ff(self, kg: float = 0.0, kv: float = 0.0, ka: float = 0.0, ks: float = 0.0) -> "ControlSystemBuilder":
        return self.feedforward(ArmFeedforward(kv=kv, ka=ka, ks=ks, kg=kg))

    def output_limits(self, lower: float, upper: float) -> "ControlSystemBuilder":
        if np.isnan(lower) or np.isnan(upper) or lower >= upper:
            raise ValueError(f"Output limits must satisfy lower < upper, got ({lower}, {upper})")
        self._output_limits = (float(lower), float(upper))
        return self

    def build(self) -> ControlSystem:
        axes = {}
        for name in AXES:
            feedback = self._feedback[name]() if name in self._feedback else None
            if feedback is None and not len(self._filters[name]):
                continue
            axes[name] = Axis(feedback=feedback, filters=self._filters[name].build())

        if not any(axis.feedback is not None for axis in axes.values()) and self._feedforward is None:
            warnings.warn("Control system has no feedback or feedforward; its output is always zero")

        system = ControlSystem()
        system._freeze(axes, angle_type=self._angle_type, feedforward=self._feedforward,
                       output_limits=self._output_limits)
        return system

    @classmethod
    def from_config(cls, config: Mapping[str, Any]) -> "ControlSystemBuilder":
        """Configure a builder from a plain dict, e.g. one loaded from a config file.

        Recognised keys: ``pos_pid``, ``vel_pid``, ``accel_pid`` (gain dict or
        ``[kp, ki, kd]``), ``pos_filter``, ``vel_filter``, ``accel_filter``
        (list of ``{"low_pass": alpha}`` or ``{"custom": fn}``), ``angular``
        (angle type name), ``feedforward`` (``{"type": "arm", "kg": ...}``)
        and ``output_limits`` (``[lower, upper]``).
        """
        unknown = set(config) - CONFIG_KEYS
        if unknown:
            raise ValueError(f"Unknown control system options: {sorted(unknown)}")

        builder = cls()
        for key, setter in (("pos_pid", builder.pos_pid), ("vel_pid", builder.vel_pid),
                            ("accel_pid", builder.accel_pid)):
            if key in config:
                gains = config[key]
                if isinstance(gains, PIDCoefficients):
                    setter(gains)
                elif isinstance(gains, Mapping):
                    setter(**gains)
                else:
                    setter(*gains)

        for key, setter in (("pos_filter", builder.pos_filter), ("vel_filter", builder.vel_filter),
                            ("accel_filter", builder.accel_filter)):
            if key in config:
                setter(lambda f, stages=config[key]: _configure_filters(f, stages))

        if "angular" in config:
            angle_type = config["angular"]
            if not isinstance(angle_type, AngleType):
                try:
                    angle_type = AngleType[str(angle_type).upper()]
                except KeyError:
                    raise ValueError(f"Unknown angle type '{config['angular']}'") from None
            builder.angular(angle_type)

        if "feedforward" in config:
            params = dict(config["feedforward"])
            kind = params.pop("type", "basic")
            if kind not in FEEDFORWARD_TYPES:
                raise ValueError(f"Unknown feedforward type '{kind}', expected one of {sorted(FEEDFORWARD_TYPES)}")
            builder.feedforward(FEEDFORWARD_TYPES[kind](**params))

        if "output_limits" in config:
            builder.output_limits(*config["output_limits"])

        logger.debug("Configured control system builder from %s", sorted(config))
        return builder


def _configure_filters(builder: FilterBuilder, stages):
    for stage in stages:
        if callable(stage):
            builder.custom(stage)
            continue
        if len(stage) != 1:
            raise ValueError(f"Filter stage must have exactly one key, got {stage!r}")
        (kind, value), = stage.items()
        if kind == "low_pass":
            if isinstance(value, Mapping):
                builder.low_pass(**value)
            else:
                builder.low_pass(value)
        elif kind == "custom":
            builder.custom(value)
        else:
            raise ValueError(f"Unknown filter type '{kind}'")


def control_system(config: Optional[Mapping[str, Any]] = None, **options) -> ControlSystem:
    """Build a ControlSystem directly from config options."""
    merged = dict(config or {})
    merged.update(options)
    return ControlSystemBuilder.from_config(merged).build()

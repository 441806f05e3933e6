from kinetic_control.core import Axis, ControlSystem, ControlSystemBuilder, FilterBuilder, KineticState, control_system
from kinetic_control.errors import (ControlSystemError, FilterComputationError, InvalidMeasurementError,
                                    InvalidTimestepError, UnbuiltControlSystemError)
from kinetic_control.feedback import AngleType, BangBangTerm, FeedbackTerm, PIDCoefficients, SquIDTerm, normalize, wrap
from kinetic_control.feedforward import ArmFeedforward, BasicFeedforward, ElevatorFeedforward
from kinetic_control.filters import CustomFilter, FilterChain, LowPassFilter

__version__ = "0.1.0"

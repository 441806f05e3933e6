from kinetic_control.core.kinetic_state import AXES, KineticState
from kinetic_control.core.control_system import Axis, ControlSystem
from kinetic_control.core.builder import ControlSystemBuilder, FilterBuilder, control_system

__all__ = ["AXES", "KineticState", "Axis", "ControlSystem", "ControlSystemBuilder", "FilterBuilder",
           "control_system"]

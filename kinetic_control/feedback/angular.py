# kinetic_control/feedback/angular.py
import math
from enum import Enum

import numpy as np


class AngleType(Enum):
    RADIANS = 2 * math.pi
    DEGREES = 360.0
    REVOLUTIONS = 1.0

    @property
    def modulus(self) -> float:
        return self.value

    @property
    def half_revolution(self) -> float:
        return self.value / 2


def normalize(difference: float, angle_type: AngleType) -> float:
    """Map an angular difference onto the shortest path, in (-m/2, m/2]."""
    half = angle_type.half_revolution
    wrapped = half - np.mod(half - difference, angle_type.modulus)
    # np.mod can round up to the modulus for tiny negative inputs
    if wrapped <= -half:
        wrapped += angle_type.modulus
    return float(wrapped)


def wrap(target: float, measured: float, angle_type: AngleType) -> float:
    return normalize(target - measured, angle_type)

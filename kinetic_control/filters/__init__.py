from kinetic_control.filters.chain import FilterChain
from kinetic_control.filters.custom import CustomFilter
from kinetic_control.filters.low_pass import LowPassFilter

__all__ = ["FilterChain", "CustomFilter", "LowPassFilter"]

# kinetic_control/errors.py


class ControlSystemError(Exception):
    """Base class for errors raised while evaluating a control system."""
    pass


class InvalidTimestepError(ControlSystemError, ValueError):
    """Raised when the elapsed time of a tick is not strictly positive."""
    pass


class InvalidMeasurementError(ControlSystemError, ValueError):
    """Raised for a non-finite target, measurement or error."""
    pass


class FilterComputationError(ControlSystemError):
    """Raised when a user-supplied filter function fails."""
    pass


class UnbuiltControlSystemError(ControlSystemError, RuntimeError):
    """Raised when a control system is used before it has been built."""
    pass

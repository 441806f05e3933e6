from kinetic_control.feedback.angular import AngleType, normalize, wrap
from kinetic_control.feedback.pid import BangBangTerm, FeedbackTerm, PIDCoefficients, SquIDTerm

__all__ = ["AngleType", "normalize", "wrap", "BangBangTerm", "FeedbackTerm", "PIDCoefficients", "SquIDTerm"]

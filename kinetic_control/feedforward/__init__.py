from kinetic_control.feedforward.feedforward import ArmFeedforward, BasicFeedforward, ElevatorFeedforward

__all__ = ["ArmFeedforward", "BasicFeedforward", "ElevatorFeedforward"]

import math

import pytest

from kinetic_control import ArmFeedforward, BasicFeedforward, ElevatorFeedforward, KineticState


def test_basic_feedforward():
    ff = BasicFeedforward(kv=2.0, ka=0.5, ks=0.1)
    assert ff.calculate(KineticState(0.0, -3.0, 4.0)) == pytest.approx(-6.0 + 2.0 - 0.1)


def test_basic_feedforward_static_term_is_zero_at_rest():
    assert BasicFeedforward(ks=0.3).calculate(KineticState(5.0)) == 0.0


def test_elevator_feedforward_adds_constant_gravity():
    ff = ElevatorFeedforward(kg=0.7, kv=1.0)
    assert ff.calculate(KineticState(100.0, 2.0)) == pytest.approx(2.7)


@pytest.mark.parametrize("position,expected", [(0.0, 1.5), (math.pi / 2, 0.0), (math.pi, -1.5)])
def test_arm_feedforward_scales_with_cosine(position, expected):
    assert ArmFeedforward(kg=1.5).calculate(KineticState(position)) == pytest.approx(expected, abs=1e-12)


def test_gains_must_be_finite():
    with pytest.raises(ValueError):
        BasicFeedforward(kv=math.nan)
    with pytest.raises(ValueError):
        ArmFeedforward(kg=math.inf)

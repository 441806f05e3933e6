import math

import pytest

from kinetic_control import (BangBangTerm, FeedbackTerm, InvalidMeasurementError, InvalidTimestepError, PIDCoefficients,
                             SquIDTerm)


def test_coefficients_are_immutable():
    coefficients = PIDCoefficients(kp=1.0, ki=2.0, kd=3.0)
    with pytest.raises(AttributeError):
        coefficients.kp = 5.0


@pytest.mark.parametrize("gains", [(math.nan, 0, 0), (0, math.inf, 0), (0, 0, -math.inf)])
def test_coefficients_must_be_finite(gains):
    with pytest.raises(ValueError):
        PIDCoefficients(*gains)


def test_negative_gains_are_allowed():
    assert PIDCoefficients(kp=-1.0).kp == -1.0


@pytest.mark.parametrize("dt", [0.001, 0.02, 1.0, 7.5])
def test_zero_error_gives_zero_output(dt):
    term = FeedbackTerm(PIDCoefficients(kp=3.0, ki=1.5, kd=0.7))
    for _ in range(20):
        assert term.compute(0.0, dt) == 0.0


def test_first_call_has_no_derivative_contribution():
    term = FeedbackTerm(PIDCoefficients(kp=0.0, ki=0.0, kd=10.0))
    assert term.compute(5.0, 0.1) == 0.0
    assert term.compute(6.0, 0.1) == pytest.approx(10.0 * (6.0 - 5.0) / 0.1)


def test_first_call_after_reset_has_no_derivative_contribution():
    term = FeedbackTerm(PIDCoefficients(kd=10.0))
    term.compute(1.0, 0.1)
    term.reset()
    assert term.compute(5.0, 0.1) == 0.0


def test_proportional_integral_derivative_sum():
    term = FeedbackTerm(PIDCoefficients(kp=2.0, ki=0.5, kd=0.1))
    first = term.compute(1.0, 0.5)
    assert first == pytest.approx(2.0 * 1.0 + 0.5 * 0.5)
    second = term.compute(3.0, 0.5)
    integral = 1.0 * 0.5 + 3.0 * 0.5
    assert second == pytest.approx(2.0 * 3.0 + 0.5 * integral + 0.1 * (3.0 - 1.0) / 0.5)
    assert term.integral == pytest.approx(integral)
    assert term.prev_error == 3.0
    assert term.timestamp == pytest.approx(1.0)


def test_integral_accumulates_without_clamp():
    term = FeedbackTerm(PIDCoefficients(ki=1.0))
    for _ in range(1000):
        term.compute(10.0, 0.1)
    assert term.integral == pytest.approx(1000.0)


def test_reset_clears_state():
    term = FeedbackTerm(PIDCoefficients(kp=1.0, ki=1.0, kd=1.0))
    term.compute(2.0, 0.1)
    term.compute(3.0, 0.1)
    term.reset()
    assert term.integral == 0.0
    assert term.prev_error is None
    assert term.timestamp == 0.0


@pytest.mark.parametrize("dt", [0.0, -0.01, math.nan, math.inf])
def test_invalid_timestep_leaves_state_unchanged(dt):
    term = FeedbackTerm(PIDCoefficients(kp=1.0, ki=1.0, kd=1.0))
    term.compute(2.0, 0.1)
    before = term.get_state()
    with pytest.raises(InvalidTimestepError):
        term.compute(3.0, dt)
    assert term.get_state() == before


@pytest.mark.parametrize("error", [math.nan, math.inf, -math.inf])
def test_non_finite_error_rejected(error):
    term = FeedbackTerm(PIDCoefficients(kp=1.0))
    with pytest.raises(InvalidMeasurementError):
        term.compute(error, 0.1)
    assert term.get_state() == (0.0, None, 0.0)


def test_invalid_timestep_is_a_value_error():
    with pytest.raises(ValueError):
        FeedbackTerm(PIDCoefficients()).compute(1.0, 0.0)


def test_integral_reset_on_zero_crossover():
    term = FeedbackTerm(PIDCoefficients(ki=1.0), reset_integral_on_zero_crossover=True)
    term.compute(2.0, 1.0)
    term.compute(2.0, 1.0)
    assert term.integral == 4.0
    term.compute(-1.0, 1.0)
    assert term.integral == -1.0


def test_integral_kept_on_zero_crossover_by_default():
    term = FeedbackTerm(PIDCoefficients(ki=1.0))
    term.compute(2.0, 1.0)
    term.compute(-1.0, 1.0)
    assert term.integral == 1.0


@pytest.mark.parametrize("error,expected", [(4.0, 6.0), (-9.0, -9.0), (0.0, 0.0)])
def test_squid_proportional_term(error, expected):
    term = SquIDTerm(PIDCoefficients(kp=3.0))
    assert term.compute(error, 0.1) == pytest.approx(expected)


@pytest.mark.parametrize("error,expected", [(-3.5, -1.0), (0.0, 0.0), (0.01, 1.0)])
def test_bang_bang_outputs_sign_of_error(error, expected):
    assert BangBangTerm().compute(error, 0.1) == expected


def test_bang_bang_is_stateless_and_validates_inputs():
    term = BangBangTerm()
    assert term.get_state() is None
    term.reset()
    with pytest.raises(InvalidTimestepError):
        term.compute(1.0, 0.0)
    with pytest.raises(InvalidMeasurementError):
        term.compute(math.nan, 0.1)

import json
import os

import numpy as np
import pytest

from benchmarks.metrics.convergence import compute_step_metrics, plot_response
from benchmarks.metrics.error_analysis import compute_error_statistics, plot_error_distribution
from benchmarks.metrics.statistical_tests import StatisticalValidator
from benchmarks.systems.pendulum import DEFAULT_CONFIG, PendulumBenchmark, PendulumSimulator


def test_error_statistics():
    stats = compute_error_statistics([1.0, -1.0, 1.0, -1.0])
    assert stats["mean"] == 0.0
    assert stats["rms"] == 1.0
    assert stats["max_abs"] == 1.0


def test_error_statistics_rejects_empty():
    with pytest.raises(ValueError):
        compute_error_statistics([])


def test_step_metrics_first_order_response():
    times = np.linspace(0, 5, 501)
    response = 1.0 - np.exp(-times / 0.5)
    metrics = compute_step_metrics(times, response, 1.0, initial=0.0)
    # first-order lag enters the 2% band at tau * ln(50)
    assert metrics["settling_time"] == pytest.approx(0.5 * np.log(50), abs=0.02)
    assert metrics["overshoot"] == 0.0
    assert abs(metrics["steady_state_error"]) < 0.02


def test_step_metrics_unsettled_response():
    times = np.linspace(0, 1, 11)
    metrics = compute_step_metrics(times, np.zeros(11), 1.0)
    assert np.isnan(metrics["settling_time"])


def test_plots_are_written(tmp_path):
    times = np.linspace(0, 1, 20)
    plot_response(times, times, 1.0, save_path=str(tmp_path / "response.png"))
    plot_error_distribution(list(np.sin(times)), save_path=str(tmp_path / "errors.png"))
    assert (tmp_path / "response.png").exists()
    assert (tmp_path / "errors.png").exists()


def test_statistical_validator_detects_improvement():
    rng = np.random.default_rng(0)
    better = rng.normal(0.1, 0.01, 20)
    worse = rng.normal(0.5, 0.01, 20)
    result = StatisticalValidator().compare(list(better), list(worse))
    assert result["significant"]
    assert result["cohens_d"] < 0


def test_statistical_validator_needs_trials():
    with pytest.raises(ValueError):
        StatisticalValidator().compare([0.1], [0.2, 0.3])


def test_simulator_measurement_is_wrapped():
    simulator = PendulumSimulator(noise_level=0.0)
    measurement = simulator.measure(np.array([-0.5, 1.0]))
    assert measurement.position == pytest.approx(2 * np.pi - 0.5)
    assert measurement.velocity == 1.0


def test_pendulum_trial_regulates_to_target(tmp_path):
    benchmark = PendulumBenchmark(n_trials=1, duration=3.0, output_dir=str(tmp_path))
    result = benchmark.run_single_trial(0, DEFAULT_CONFIG)
    assert result["final_error"] < 0.05
    assert result["mean_abs_error"] < abs(result["error_history"][0])
    assert (tmp_path / "pendulum_trial_pid_0.png").exists()
    with open(os.path.join(tmp_path, "pendulum_trial_pid_0_error.json")) as f:
        assert len(json.load(f)) == 300


def test_statistical_benchmark_writes_summary(tmp_path):
    from benchmarks.systems.pendulum import run_statistical_benchmark

    comparison = run_statistical_benchmark(output_dir=str(tmp_path), n_trials=2)
    assert "Default_vs_Alternative" in comparison["statistical_tests"]
    assert (tmp_path / "pendulum_statistical_benchmark.json").exists()

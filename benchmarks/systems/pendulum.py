import numpy as np
import matplotlib.pyplot as plt
from scipy.integrate import solve_ivp
from kinetic_control import AngleType, KineticState, control_system, normalize
from benchmarks.metrics.convergence import compute_step_metrics
from benchmarks.metrics.error_analysis import compute_error_statistics
from benchmarks.metrics.statistical_tests import StatisticalValidator
import os
import json
from typing import Dict, List, Optional


class PendulumSimulator:
    def __init__(self, m: float = 1.0, l: float = 1.0, g: float = 9.81, b: float = 0.1, noise_level: float = 0.01,
                 rng: Optional[np.random.Generator] = None):
        self.m = m
        self.l = l
        self.g = g
        self.b = b
        self.noise_level = noise_level
        self.rng = rng if rng is not None else np.random.default_rng()

    def dynamics(self, state: np.ndarray, t: float, u: float) -> np.ndarray:
        if not np.isscalar(u):
            raise ValueError(f"Control input must be scalar, got shape {np.shape(u)}")
        theta, dtheta = state
        ddtheta = -self.g / self.l * np.sin(theta) - self.b / (self.m * self.l ** 2) * dtheta + u / (
                    self.m * self.l ** 2)
        return np.array([dtheta, ddtheta])

    def simulate(self, u: float, state: np.ndarray, dt: float) -> np.ndarray:
        if not np.isscalar(u):
            raise ValueError(f"Control input must be scalar, got shape {np.shape(u)}")
        sol = solve_ivp(lambda t, y: self.dynamics(y, t, u), [0, dt], state, method="RK45", t_eval=[dt])
        return sol.y[:, -1]

    def measure(self, state: np.ndarray) -> KineticState:
        # encoder reports the absolute angle in [0, 2pi)
        theta = np.mod(state[0] + self.rng.normal(0, self.noise_level), 2 * np.pi)
        dtheta = state[1] + self.rng.normal(0, self.noise_level)
        return KineticState(position=float(theta), velocity=float(dtheta))


class PendulumBenchmark:
    def __init__(self, n_trials: int = 15, duration: float = 5.0, dt: float = 0.01,
                 output_dir: Optional[str] = None):
        self.n_trials = n_trials
        self.duration = duration
        self.dt = dt
        self.output_dir = output_dir

    def run_single_trial(self, trial_id: int, config: Dict, target_angle: float = 0.0) -> Dict:
        rng = np.random.default_rng(42 + trial_id)
        simulator = PendulumSimulator(rng=rng)
        controller = control_system({k: v for k, v in config.items() if k != "label"})

        n_steps = int(round(self.duration / self.dt))
        initial_theta = rng.uniform(-np.pi / 3, -np.pi / 6)
        state = np.array([initial_theta, 0.0])
        target = KineticState(position=target_angle)

        state_history = [state]
        error_history = []
        control_history = []

        for t in range(n_steps):
            measurement = simulator.measure(state)
            control = controller.evaluate(target, measurement, self.dt)
            state = simulator.simulate(control, state, self.dt)

            error = normalize(target_angle - state[0], AngleType.RADIANS)
            error_history.append(error)
            state_history.append(state)
            control_history.append(control)

        times = np.arange(n_steps) * self.dt
        thetas = np.array([s[0] for s in state_history[1:]])
        result = {
            'trial_id': trial_id,
            'final_error': abs(error_history[-1]),
            'mean_abs_error': float(np.mean(np.abs(error_history))),
            'error_statistics': compute_error_statistics(error_history),
            'step_metrics': compute_step_metrics(times, thetas, target_angle, initial=initial_theta),
            'error_history': error_history,
            'state_history': state_history,
            'control_history': control_history
        }

        if self.output_dir is not None:
            self._save_trial(result, config.get('label', 'pid'), times)
        return result

    def _save_trial(self, result: Dict, label: str, times: np.ndarray):
        os.makedirs(self.output_dir, exist_ok=True)
        trial_id = result['trial_id']
        if trial_id % 5 == 0:
            plt.figure(figsize=(10, 6))
            plt.subplot(2, 1, 1)
            plt.plot(times, [s[0] for s in result['state_history'][1:]], label="Theta")
            plt.xlabel("Time (s)")
            plt.ylabel("Angle (rad)")
            plt.legend()
            plt.grid(True)
            plt.subplot(2, 1, 2)
            plt.plot(times, result['control_history'], label="Control")
            plt.xlabel("Time (s)")
            plt.ylabel("Torque")
            plt.legend()
            plt.grid(True)
            plt.savefig(os.path.join(self.output_dir, f"pendulum_trial_{label}_{trial_id}.png"), dpi=100,
                        bbox_inches="tight")
            plt.close()

        with open(os.path.join(self.output_dir, f"pendulum_trial_{label}_{trial_id}_error.json"), "w") as f:
            json.dump(result['error_history'], f, indent=2)

    def run_benchmark(self, config: Dict) -> Dict:
        print(f"Running {config.get('label', 'pid')} benchmark with {self.n_trials} trials...")
        results = [self.run_single_trial(trial, config) for trial in range(self.n_trials)]
        return self._analyze_results(results)

    def _analyze_results(self, results: List[Dict]) -> Dict:
        final_errors = [r['final_error'] for r in results]
        mean_errors = [r['mean_abs_error'] for r in results]
        settling_times = [r['step_metrics']['settling_time'] for r in results]

        return {
            'summary_statistics': {
                'final_error': compute_error_statistics(final_errors),
                'mean_abs_error': compute_error_statistics(mean_errors),
                'settling_time': {
                    'mean': float(np.nanmean(settling_times)) if not np.all(np.isnan(settling_times)) else float('nan'),
                    'settled_trials': int(np.sum(~np.isnan(settling_times)))
                }
            },
            'raw_results': results
        }

    def compare_configurations(self, config1: Dict, config2: Dict, config1_name: str = "Default",
                               config2_name: str = "Alternative") -> Dict:
        print(f"Comparing {config1_name} and {config2_name}")
        results1 = self.run_benchmark(dict(config1, label=config1_name))
        results2 = self.run_benchmark(dict(config2, label=config2_name))

        errors1 = [r['mean_abs_error'] for r in results1['raw_results']]
        errors2 = [r['mean_abs_error'] for r in results2['raw_results']]
        validator = StatisticalValidator()

        return {
            config1_name: results1,
            config2_name: results2,
            'statistical_tests': {
                f'{config1_name}_vs_{config2_name}': validator.compare(errors1, errors2)
            }
        }


DEFAULT_CONFIG = {
    'angular': 'radians',
    'pos_pid': {'kp': 30.0, 'ki': 2.0, 'kd': 4.0},
    'vel_pid': {'kp': 2.0},
    'vel_filter': [{'low_pass': 0.6}],
    'output_limits': (-20.0, 20.0),
}

ALTERNATIVE_CONFIG = {
    'angular': 'radians',
    'pos_pid': {'kp': 15.0, 'ki': 0.5, 'kd': 1.0},
    'output_limits': (-20.0, 20.0),
}


def run_statistical_benchmark(output_dir: str = "benchmarks/results", n_trials: int = 15) -> Dict:
    benchmark = PendulumBenchmark(n_trials=n_trials, output_dir=output_dir)
    comparison = benchmark.compare_configurations(DEFAULT_CONFIG, ALTERNATIVE_CONFIG, "Default", "Alternative")
    os.makedirs(output_dir, exist_ok=True)
    with open(os.path.join(output_dir, "pendulum_statistical_benchmark.json"), "w") as f:
        json.dump(comparison['statistical_tests'], f, indent=2, default=str)

    print("Statistical benchmark completed")
    print(
        f"Default vs Alternative significant difference: {comparison['statistical_tests']['Default_vs_Alternative']['significant']}")
    return comparison


if __name__ == "__main__":
    run_statistical_benchmark()

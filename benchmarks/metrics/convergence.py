# benchmarks/metrics/convergence.py
import numpy as np
import matplotlib.pyplot as plt
from scipy.integrate import trapezoid
from typing import Dict, Optional, Sequence


def compute_step_metrics(times: Sequence[float], response: Sequence[float], target: float,
                         initial: Optional[float] = None, tolerance: float = 0.02) -> Dict[str, float]:
    times = np.asarray(times, dtype=float)
    response = np.asarray(response, dtype=float)
    if len(times) != len(response) or len(times) == 0:
        raise ValueError("times and response must be non-empty and of equal length")

    start = response[0] if initial is None else initial
    step = target - start
    band = tolerance * abs(step) if step != 0 else tolerance

    errors = target - response
    outside = np.nonzero(np.abs(errors) > band)[0]
    if len(outside) == 0:
        settling_time = float(times[0])
    elif outside[-1] == len(times) - 1:
        settling_time = float('nan')
    else:
        settling_time = float(times[outside[-1] + 1])

    overshoot = 0.0
    if step != 0:
        overshoot = float(max(0.0, np.max(-errors * np.sign(step))) / abs(step))

    return {
        "settling_time": settling_time,
        "overshoot": overshoot,
        "steady_state_error": float(errors[-1]),
        "iae": float(trapezoid(np.abs(errors), times)) if len(times) > 1 else 0.0
    }


def plot_response(times: Sequence[float], response: Sequence[float], target: float, save_path: str = None,
                  config_label: str = ""):
    plt.figure(figsize=(8, 4))
    plt.plot(times, response, label=f"Response {config_label}")
    plt.axhline(target, color='k', linestyle='--', label="Target")
    plt.xlabel("Time (s)")
    plt.ylabel("Position")
    plt.title("Closed-Loop Step Response")
    plt.grid(True)
    plt.legend()

    if save_path:
        plt.savefig(save_path, dpi=300, bbox_inches="tight")
    else:
        plt.show()
    plt.close()

import os
from benchmarks.systems.pendulum import run_statistical_benchmark as run_pendulum


def main():
    print("Starting Control System Experiments")
    os.makedirs("benchmarks/results", exist_ok=True)

    print("\nRunning Pendulum Benchmark...")
    run_pendulum(output_dir="benchmarks/results")

    print("\nExperiments completed. Results and plots saved in benchmarks/results/.")

if __name__ == "__main__":
    main()

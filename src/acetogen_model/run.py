# run.py
"""
Default end-to-end run: simulate the baseline culture, export the table and
save the chart. Configuration is the SimulationConfig defaults; there are no
command-line flags.

    python -m acetogen_model.run
"""

from __future__ import annotations

import logging
from pathlib import Path

from .export import write_trajectory_csv
from .simulation import SimulationConfig, Trajectory, run_simulation

logger = logging.getLogger(__name__)

DEFAULT_OUTPUT_DIR = Path("output")


def run_default_simulation(
    output_dir: str | Path = DEFAULT_OUTPUT_DIR,
    config: SimulationConfig | None = None,
    plot: bool = True,
) -> Trajectory:
    if config is None:
        config = SimulationConfig()
    output_dir = Path(output_dir)

    traj = run_simulation(config)
    write_trajectory_csv(traj, output_dir / "trajectory.csv")

    if plot:
        from .plotting import save_trajectory_plot

        save_trajectory_plot(traj, output_dir / "trajectory.png")
        logger.info("saved plot to %s", output_dir / "trajectory.png")
    return traj


def main() -> None:
    import matplotlib
    matplotlib.use("Agg")

    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    run_default_simulation()


if __name__ == "__main__":
    main()

# plotting.py

from __future__ import annotations
from pathlib import Path
from typing import Optional, Sequence

import matplotlib.pyplot as plt

from .simulation import Trajectory


# Population density
def plot_population(
    trajectory: Trajectory,
    ax: Optional[plt.Axes] = None,
    label: str = None,
) -> plt.Axes:
    if ax is None:
        fig, ax = plt.subplots(figsize=(6, 4))

    ax.plot(trajectory.time, trajectory.get("N"), label=label or "N")
    ax.set_xlabel("Time [h]")
    ax.set_ylabel("Population density [cells]")
    ax.set_title("Population")
    ax.grid(True)
    ax.legend()
    return ax


# CO2, H2 and acetate
def plot_metabolites(
    trajectory: Trajectory,
    ax: Optional[plt.Axes] = None,
    species: Sequence[str] = ("C", "H", "A"),
) -> plt.Axes:
    if ax is None:
        fig, ax = plt.subplots(figsize=(6, 4))

    labels = {"C": "CO2", "H": "H2", "A": "Acetate"}
    for name in species:
        ax.plot(trajectory.time, trajectory.get(name), label=labels.get(name, name))
    ax.set_xlabel("Time [h]")
    ax.set_ylabel("Concentration [mM]")
    ax.set_title("Metabolites")
    ax.grid(True)
    ax.legend()
    return ax


def plot_trajectory(trajectory: Trajectory) -> plt.Figure:
    """Population on the left axis, metabolites on the right."""
    fig, (ax_pop, ax_met) = plt.subplots(1, 2, figsize=(12, 4))
    plot_population(trajectory, ax=ax_pop)
    plot_metabolites(trajectory, ax=ax_met)
    if not trajectory.complete:
        fig.suptitle("Incomplete run")
    fig.tight_layout()
    return fig


def save_trajectory_plot(trajectory: Trajectory, path: str | Path, dpi: int = 150) -> Path:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    fig = plot_trajectory(trajectory)
    fig.savefig(path, dpi=dpi)
    plt.close(fig)
    return path

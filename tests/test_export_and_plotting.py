from __future__ import annotations

import matplotlib

matplotlib.use("Agg")

import matplotlib.pyplot as plt
import numpy as np
import pytest

from acetogen_model.export import read_trajectory_csv, write_trajectory_csv
from acetogen_model.parameters import ModelParameters, TimeGrid
from acetogen_model.plotting import plot_trajectory, save_trajectory_plot
from acetogen_model.run import run_default_simulation
from acetogen_model.simulation import SimulationConfig, simulate


@pytest.fixture(scope="module")
def short_run():
    return simulate(ModelParameters(), times=TimeGrid(0.0, 10.0, 1.0))


def test_csv_has_header_and_one_row_per_time(short_run, tmp_path) -> None:
    path = write_trajectory_csv(short_run, tmp_path / "nested" / "trajectory.csv")

    assert path.read_text().splitlines()[0] == "time,N,C,H,A"
    df = read_trajectory_csv(path)
    assert len(df) == 11
    np.testing.assert_allclose(df["time"], short_run.time)
    np.testing.assert_allclose(df["N"], short_run.get("N"), rtol=1e-12)


def test_plot_has_population_and_metabolite_axes(short_run) -> None:
    fig = plot_trajectory(short_run)
    ax_pop, ax_met = fig.axes

    assert len(ax_pop.get_lines()) == 1
    assert [line.get_label() for line in ax_met.get_lines()] == ["CO2", "H2", "Acetate"]
    plt.close(fig)


def test_save_plot_writes_file(short_run, tmp_path) -> None:
    path = save_trajectory_plot(short_run, tmp_path / "trajectory.png")

    assert path.exists()
    assert path.stat().st_size > 0


def test_default_run_writes_outputs(tmp_path) -> None:
    config = SimulationConfig(grid=TimeGrid(0.0, 5.0, 1.0))
    traj = run_default_simulation(tmp_path, config=config)

    assert traj.complete
    assert (tmp_path / "trajectory.csv").exists()
    assert (tmp_path / "trajectory.png").exists()


def test_default_run_leaves_backend_choice_to_caller(tmp_path, monkeypatch) -> None:
    def _no_backend_switch(*args, **kwargs):
        raise AssertionError("backend switched inside run_default_simulation")

    monkeypatch.setattr(matplotlib, "use", _no_backend_switch)
    config = SimulationConfig(grid=TimeGrid(0.0, 3.0, 1.0))
    run_default_simulation(tmp_path, config=config)

    assert (tmp_path / "trajectory.png").exists()

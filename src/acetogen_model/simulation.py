# simulation.py
"""
Single-culture simulation of the acetogen growth model.

The integrator is one of scipy's adaptive OdeSolver classes (LSODA by
default, which switches between Adams and BDF as the system stiffens near
the energetic threshold). Steps are taken one at a time so that a failure can
be reported with the last accepted time and state, and the requested output
times are sampled from each accepted step's dense output.
"""

from __future__ import annotations

from dataclasses import dataclass, field
import logging
from typing import Dict, Optional, Sequence
import warnings

import numpy as np
import pandas as pd
from scipy.integrate import BDF, DOP853, LSODA, RK45, Radau

from .errors import IntegrationError
from .odes import rhs
from .parameters import (
    ModelParameters,
    SolverConfig,
    TimeGrid,
    as_time_points,
    get_default_parameters,
    validate_parameters,
)
from .state_vector import (
    N_STATES,
    STATE_NAMES,
    InitialState,
    StateIx,
    get_initial_state,
    validate_initial_state,
)

logger = logging.getLogger(__name__)

_SOLVERS = {
    "LSODA": LSODA,
    "BDF": BDF,
    "Radau": Radau,
    "RK45": RK45,
    "DOP853": DOP853,
}


@dataclass
class Trajectory:
    """Sampled states of one simulation run."""

    time: np.ndarray     # Shape (n_times,)
    states: np.ndarray   # Shape (n_times, 4), columns ordered by StateIx
    complete: bool = True
    solver: Dict = field(default_factory=dict)
    n_steps: int = 0
    n_rhs_evals: int = 0

    def __len__(self) -> int:
        return len(self.time)

    def __repr__(self) -> str:
        span = f"[{self.time[0]:.2f}, {self.time[-1]:.2f}]" if len(self.time) else "[]"
        return (
            f"Trajectory(n_times={len(self.time)}, t={span}, "
            f"complete={self.complete}, n_steps={self.n_steps})"
        )

    def get(self, name: str) -> np.ndarray:
        """Time series of one state variable (N, C, H or A)."""
        if name not in STATE_NAMES:
            raise KeyError(f"State '{name}' not found. Available: {list(STATE_NAMES)}")
        return self.states[:, StateIx[name]]

    @property
    def final_state(self) -> np.ndarray:
        return self.states[-1].copy()

    def to_frame(self) -> pd.DataFrame:
        """Table with columns time, N, C, H, A; one row per output time."""
        df = pd.DataFrame(self.states, columns=list(STATE_NAMES))
        df.insert(0, "time", self.time)
        return df


@dataclass(frozen=True)
class SimulationConfig:
    """Everything one run depends on; each run is a pure function of this."""

    params: ModelParameters = field(default_factory=get_default_parameters)
    initial: InitialState = field(default_factory=InitialState)
    grid: TimeGrid = field(default_factory=TimeGrid)
    solver: SolverConfig = field(default_factory=SolverConfig)


class _NonFiniteDerivative(Exception):
    def __init__(self, t: float, y: np.ndarray, dydt: np.ndarray):
        self.t = t
        self.y = y
        self.dydt = dydt
        super().__init__(f"non-finite derivative {dydt} at t={t:g}, y={y}")


def simulate(
    params: ModelParameters,
    initial: Optional[InitialState] = None,
    times: TimeGrid | Sequence[float] | np.ndarray | None = None,
    solver: Optional[SolverConfig] = None,
) -> Trajectory:
    """
    Integrate the model from times[0] and sample it at every requested time.

    Args:
        params: ModelParameters instance (validated before integration)
        initial: InitialState (default InitialState())
        times: TimeGrid or explicit strictly increasing output times
            (default TimeGrid(), 0..100 h every hour)
        solver: SolverConfig (default LSODA, rtol=1e-6, atol=1e-9)

    Returns:
        Trajectory with one row per requested time; the first row is the
        initial state itself.

    Raises:
        ParameterError: a parameter or initial value is outside its domain.
        ConfigError: the time points or solver settings are invalid.
        IntegrationError: the solver failed; carries the partial trajectory.
            BDF, Radau and the explicit methods report step-size collapse as
            reason "tolerance"; LSODA keeps shrinking its step internally, so
            the same collapse surfaces as "max_steps" once the step budget
            is spent.
    """
    if initial is None:
        initial = InitialState()
    if times is None:
        times = TimeGrid()
    if solver is None:
        solver = SolverConfig()

    validate_parameters(params)
    validate_initial_state(initial)
    t_eval = as_time_points(times)
    y0 = get_initial_state(initial)

    logger.info("solver_config %s", solver.as_dict())
    logger.debug("parameters %s initial %s", params, initial)

    def fun(t, y):
        dydt = rhs(t, y, params)
        if not np.all(np.isfinite(dydt)):
            raise _NonFiniteDerivative(t, np.array(y, copy=True), dydt)
        return dydt

    solver_kwargs = {"rtol": solver.rtol, "atol": solver.atol}
    if solver.max_step is not None:
        solver_kwargs["max_step"] = solver.max_step

    n_times = t_eval.size
    states = np.empty((n_times, N_STATES), dtype=float)
    states[0] = y0
    k = 1
    n_steps = 0
    t_last = float(t_eval[0])
    y_last = y0.copy()
    ode = None

    def _failure(reason: str, message: str) -> IntegrationError:
        partial = Trajectory(
            time=t_eval[:k].copy(),
            states=states[:k].copy(),
            complete=False,
            solver=solver.as_dict(),
            n_steps=n_steps,
            n_rhs_evals=ode.nfev if ode is not None else 0,
        )
        logger.warning(
            "integration failed (%s) after t=%g with %d/%d samples: %s",
            reason, t_last, k, n_times, message,
        )
        return IntegrationError(reason, t_last, y_last.copy(), message, partial)

    try:
        ode = _SOLVERS[solver.method](fun, t_eval[0], y0, t_eval[-1], **solver_kwargs)
        while k < n_times:
            if n_steps >= solver.max_steps:
                raise _failure("max_steps", f"exceeded {solver.max_steps} solver steps")

            message = ode.step()
            if ode.status == "failed":
                raise _failure("tolerance", message or "step size control failed")
            n_steps += 1

            interp = None
            while k < n_times and t_eval[k] <= ode.t:
                if t_eval[k] == ode.t:
                    states[k] = ode.y
                else:
                    if interp is None:
                        interp = ode.dense_output()
                    states[k] = interp(t_eval[k])
                k += 1

            t_last = float(ode.t)
            y_last = np.array(ode.y, copy=True)
            if ode.status == "finished":
                break
    except _NonFiniteDerivative as exc:
        raise _failure("non_finite", str(exc)) from exc

    if not np.all(np.isfinite(states)):
        raise _failure("non_finite", "interpolated output contains non-finite values")

    traj = Trajectory(
        time=t_eval.copy(),
        states=states,
        complete=True,
        solver=solver.as_dict(),
        n_steps=n_steps,
        n_rhs_evals=ode.nfev,
    )

    negative = states[:, [StateIx.N, StateIx.C, StateIx.H]].min()
    if negative < 0:
        warnings.warn(
            f"sampled states dipped below zero (min {negative:.3g}); "
            "tighten atol or max_step if this matters"
        )

    logger.info(
        "integrated t=[%g, %g] in %d steps (%d rhs evaluations)",
        t_eval[0], t_eval[-1], n_steps, ode.nfev,
    )
    return traj


def run_simulation(config: SimulationConfig) -> Trajectory:
    """Run simulate() with everything taken from one SimulationConfig."""
    return simulate(config.params, config.initial, config.grid, config.solver)

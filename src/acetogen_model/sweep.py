# sweep.py
"""
One-parameter sweeps of the acetogen growth model, with tqdm progress and
failed runs reported as rows rather than exceptions.
"""

from __future__ import annotations

from dataclasses import fields, replace
import logging
import time
from typing import Iterable

import numpy as np
import pandas as pd
from joblib import Parallel, delayed
from tqdm.auto import tqdm

from .diagnostics import growth_halt_time
from .errors import AcetogenModelError, ConfigError
from .parameters import ModelParameters
from .simulation import SimulationConfig, run_simulation
from .state_vector import InitialState
from .thermodynamics import gibbs_free_energy

logger = logging.getLogger(__name__)

PARAMETER_FIELDS = tuple(f.name for f in fields(ModelParameters))
INITIAL_FIELDS = tuple(f.name for f in fields(InitialState))

SWEEP_COLUMNS = (
    "field", "value",
    "final_N", "final_C", "final_H", "final_A", "final_G",
    "halt_time", "failed", "error_message",
)


def _with_value(config: SimulationConfig, name: str, value: float) -> SimulationConfig:
    if name in PARAMETER_FIELDS:
        return replace(config, params=replace(config.params, **{name: value}))
    if name in INITIAL_FIELDS:
        return replace(config, initial=replace(config.initial, **{name: value}))
    raise ConfigError(
        f"unknown sweep field {name!r}; choose from {PARAMETER_FIELDS + INITIAL_FIELDS}"
    )


def _simulate_one(config: SimulationConfig, name: str, value: float) -> dict:
    """
    Run ONE configuration (worker for joblib).
    If validation or integration fails, return a row with failed=True and NaN metrics.
    """
    row = dict(
        field=name,
        value=value,
        final_N=np.nan,
        final_C=np.nan,
        final_H=np.nan,
        final_A=np.nan,
        final_G=np.nan,
        halt_time=np.nan,
        failed=True,
        error_message="",
    )
    run_config = _with_value(config, name, value)
    try:
        traj = run_simulation(run_config)
    except AcetogenModelError as e:
        row["error_message"] = f"{type(e).__name__}: {e}"[:2000]
        return row

    N, C, H, A = traj.final_state
    row.update(
        final_N=float(N),
        final_C=float(C),
        final_H=float(H),
        final_A=float(A),
        final_G=float(gibbs_free_energy(C, H, A, run_config.params)),
        halt_time=growth_halt_time(traj, run_config.params),
        failed=False,
    )
    return row


def run_parameter_sweep(
    name: str,
    values: Iterable[float],
    config: SimulationConfig | None = None,
    n_jobs: int = 1,
    progress: bool = True,
) -> pd.DataFrame:
    """
    Simulate once per value of a single ModelParameters or InitialState field.

    Args:
        name: Field to vary, e.g. "T", "dGo" or "H"
        values: Values to assign to that field
        config: Base configuration (default SimulationConfig())
        n_jobs: joblib workers; 1 runs sequentially
        progress: Show a tqdm progress bar

    Returns:
        DataFrame with one row per value, including a 'failed' column.
    """
    if config is None:
        config = SimulationConfig()
    values = [float(v) for v in values]
    if name not in PARAMETER_FIELDS + INITIAL_FIELDS:
        raise ConfigError(
            f"unknown sweep field {name!r}; choose from {PARAMETER_FIELDS + INITIAL_FIELDS}"
        )

    start_time = time.time()
    logger.info("sweep %s over %d values (n_jobs=%d)", name, len(values), n_jobs)

    rows = []
    with tqdm(total=len(values), desc=f"Sweep {name}", disable=not progress) as pbar:
        if n_jobs == 1:
            results = (_simulate_one(config, name, v) for v in values)
        else:
            # rows arrive in order, as each run completes
            results = Parallel(n_jobs=n_jobs, return_as="generator")(
                delayed(_simulate_one)(config, name, v) for v in values
            )
        for row in results:
            rows.append(row)
            pbar.update(1)

    df = pd.DataFrame(rows, columns=list(SWEEP_COLUMNS))

    elapsed = time.time() - start_time
    logger.info("sweep %s completed %d runs in %.2fs", name, len(values), elapsed)
    n_failed = int(df["failed"].sum())
    if n_failed > 0:
        logger.warning("%d / %d sweep runs failed", n_failed, len(values))
    return df

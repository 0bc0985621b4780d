# diagnostics.py
"""
Rate-law quantities recomputed along a sampled trajectory: available free
energy, the thermodynamic throttle, both Monod factors and the growth rate.
"""

from __future__ import annotations

import numpy as np
import pandas as pd

from .odes import monod
from .parameters import ModelParameters
from .simulation import Trajectory
from .thermodynamics import gibbs_free_energy, thermodynamic_factor

# Growth counts as halted once the throttle has dropped below this
HALTED_FACTOR = 1e-3


def rate_diagnostics(trajectory: Trajectory, params: ModelParameters) -> pd.DataFrame:
    C = trajectory.get("C")
    H = trajectory.get("H")
    A = trajectory.get("A")

    G = gibbs_free_energy(C, H, A, params)
    f = thermodynamic_factor(G)
    monod_C = monod(C, params.Kc)
    monod_H = monod(H, params.Kh)
    u = params.uMax * monod_C * monod_H * f

    return pd.DataFrame(
        {
            "time": trajectory.time,
            "G": G,
            "thermo_factor": f,
            "u": u,
            "monod_C": monod_C,
            "monod_H": monod_H,
        }
    )


def growth_halt_time(trajectory: Trajectory, params: ModelParameters) -> float:
    """
    First output time at which the thermodynamic throttle is below
    HALTED_FACTOR (G well above the -30 kJ/mol threshold); NaN if never.
    """
    diag = rate_diagnostics(trajectory, params)
    halted = diag["thermo_factor"].to_numpy() < HALTED_FACTOR
    if not halted.any():
        return float("nan")
    return float(diag["time"].to_numpy()[np.argmax(halted)])

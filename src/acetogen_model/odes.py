# odes.py
"""
ODE system for thermodynamically limited acetogen growth.

dy/dt = f(t, y, params), y = [N, C, H, A]

    u     = uMax * C/(Kc+C) * H/(Kh+H) * f(G)
    dN/dt = u N
    dC/dt = -(u N / Yc) * C/(Kc+C)
    dH/dt = -(u N / Yh) * H/(Kh+H)
    dA/dt = 0.5 * Fa * u N

The model is autonomous; t is accepted for solver compatibility only.
"""

from __future__ import annotations

import numpy as np

from .parameters import ModelParameters
from .state_vector import N_STATES, StateIx
from .thermodynamics import gibbs_free_energy, thermodynamic_factor

# Acetate formed per unit of growth-linked turnover, on top of Fa
ACETATE_STOICHIOMETRY = 0.5


def monod(S, K):
    """
    Monod saturation S/(K+S). Negative concentrations (integrator overshoot)
    count as empty, so the term stays in [0, 1).
    """
    S = np.maximum(S, 0.0)
    return S / (K + S)


def specific_growth_rate(C, H, A, params: ModelParameters):
    """Thermodynamically corrected growth rate u (1/h)."""
    G = gibbs_free_energy(C, H, A, params)
    return params.uMax * monod(C, params.Kc) * monod(H, params.Kh) * thermodynamic_factor(G)


def growth_rate(y: np.ndarray, params: ModelParameters) -> float:
    return float(specific_growth_rate(y[StateIx.C], y[StateIx.H], y[StateIx.A], params))


def rhs(t: float, y: np.ndarray, params: ModelParameters) -> np.ndarray:
    """
    Full right-hand side of the ODE system dy/dt = f(t, y, params).

    Args:
        t: Time (h). Not used; the system is autonomous.
        y: State vector [N, C, H, A]
        params: ModelParameters instance

    Returns:
        dydt: Derivative vector [4]
    """
    N = y[StateIx.N]
    C = y[StateIx.C]
    H = y[StateIx.H]
    A = y[StateIx.A]

    monod_C = monod(C, params.Kc)
    monod_H = monod(H, params.Kh)
    G = gibbs_free_energy(C, H, A, params)
    u = params.uMax * monod_C * monod_H * thermodynamic_factor(G)

    growth = u * N

    dydt = np.empty(N_STATES, dtype=float)
    dydt[StateIx.N] = growth
    dydt[StateIx.C] = -(growth / params.Yc) * monod_C
    dydt[StateIx.H] = -(growth / params.Yh) * monod_H
    dydt[StateIx.A] = growth * params.Fa * ACETATE_STOICHIOMETRY
    return dydt

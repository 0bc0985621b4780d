# thermodynamics.py
"""
Thermodynamic limitation of acetogenic growth.
----------------------------------------------

Free energy of 2 CO2 + 4 H2 -> acetate + 2 H2O at the current concentrations

    G = dGo + R T ln( [A] * [H2O]^4 / ([C]^2 [H]^4) )

with concentrations converted from mM to M and water taken as 55 M. Growth is
throttled by a logistic switch centred on the free energy needed to make one
ATP (-30 kJ/mol):

    f(G) = 1 / (1 + exp(0.07 (G + 30)))

f -> 1 far below the threshold and f -> 0 once the reaction no longer yields
enough energy. All functions accept scalars or numpy arrays.
"""

from __future__ import annotations

import numpy as np

from .parameters import ModelParameters

WATER_MOLARITY = 55.0  # (M)
ATP_THRESHOLD = -30.0  # (kJ/mol)
THERMO_STEEPNESS = 0.07  # (mol/kJ)

# Reaction stoichiometry: product A^1 H2O^4, substrates C^2 H^4
NU_A = 1
NU_WATER = 4
NU_C = 2
NU_H = 4

MM_PER_M = 1000.0

# Concentrations are floored here (mM) before taking logs; negative overshoot
# maps to the floor, so empty substrate pools give G -> +inf.
CONCENTRATION_FLOOR = 1e-300

# exp(709) is the largest finite double; past that f saturates anyway.
MAX_EXPONENT = 700.0


def reaction_quotient_log(C, H, A):
    """ln Q for the acetogenesis reaction, concentrations in mM."""
    C_M = np.maximum(C, CONCENTRATION_FLOOR) / MM_PER_M
    H_M = np.maximum(H, CONCENTRATION_FLOOR) / MM_PER_M
    A_M = np.maximum(A, CONCENTRATION_FLOOR) / MM_PER_M
    return (
        NU_A * np.log(A_M)
        + NU_WATER * np.log(WATER_MOLARITY)
        - NU_C * np.log(C_M)
        - NU_H * np.log(H_M)
    )


def gibbs_free_energy(C, H, A, params: ModelParameters):
    """Available free energy G (kJ/mol) at the given concentrations (mM)."""
    return params.dGo + params.R * params.T * reaction_quotient_log(C, H, A)


def thermodynamic_factor(G):
    """
    Logistic growth throttle 1 / (1 + e^(0.07 (G + 30))).

    The exponent is clipped so large |G| saturates to 0 or 1 instead of
    overflowing; NaN passes through.
    """
    x = np.clip(THERMO_STEEPNESS * (np.asarray(G, dtype=float) - ATP_THRESHOLD), -MAX_EXPONENT, MAX_EXPONENT)
    f = 1.0 / (1.0 + np.exp(x))
    return f if f.ndim else float(f)

# state_vector.py
# single source of truth for the order of states in the ODE vector y

from __future__ import annotations

from dataclasses import dataclass, fields
from enum import IntEnum
import math

import numpy as np

from .errors import ParameterError


class StateIx(IntEnum):
    N = 0  # population density (cells per unit volume)
    C = 1  # CO2-equivalent electron acceptor (mM)
    H = 2  # H2-equivalent electron donor (mM)
    A = 3  # acetate product (mM)


N_STATES = max(StateIx) + 1  # assumes enum values are 0..N-1

STATE_NAMES = tuple(ix.name for ix in StateIx)


@dataclass(frozen=True)
class InitialState:
    N: float = 1.0 # (cells) Inoculum
    C: float = 100.0 # (mM) CO2
    H: float = 100.0 # (mM) H2
    A: float = 1e-7 # (mM) Acetate; kept above zero, ln(A) appears in the Gibbs energy


def validate_initial_state(initial: InitialState) -> InitialState:
    """N, C, H must be >= 0 and A must be > 0; all finite."""
    for f in fields(initial):
        value = getattr(initial, f.name)
        if not math.isfinite(value):
            raise ParameterError(f.name, value, "must be finite")
        if f.name == "A":
            if value <= 0:
                raise ParameterError(f.name, value, "must be > 0 (ln(A) singular at 0)")
        elif value < 0:
            raise ParameterError(f.name, value, "must be >= 0")
    return initial


def get_initial_state(initial: InitialState | None = None) -> np.ndarray:
    if initial is None:
        initial = InitialState()

    y0 = np.zeros(N_STATES, dtype=float)
    y0[StateIx.N] = initial.N
    y0[StateIx.C] = initial.C
    y0[StateIx.H] = initial.H
    y0[StateIx.A] = initial.A
    return y0

# parameters.py

from __future__ import annotations

from dataclasses import dataclass, fields
import math
from typing import Optional, Sequence

import numpy as np

from .errors import ConfigError, ParameterError


@dataclass(frozen=True)
class ModelParameters:
    dGo: float = -95.0 # (kJ/mol) Standard Gibbs free energy of 2 CO2 + 4 H2 -> acetate + 2 H2O
    uMax: float = 0.5 # (1/h) Maximum specific growth rate
    R: float = 0.008314462618 # (kJ/(mol K)) Gas constant
    T: float = 298.0 # (K) Absolute temperature
    Yc: float = 8.64e6 # (cells/mM) Biomass yield on CO2
    Yh: float = 4.24e6 # (cells/mM) Biomass yield on H2
    Kc: float = 0.0013 # (mM) Half-saturation constant for CO2
    Kh: float = 0.082 # (mM) Half-saturation constant for H2
    Fa: float = 5.48e-6 # (mM/cell) Acetate formed per unit of growth-linked turnover


# Constants that must be strictly positive; dGo only needs to be finite.
POSITIVE_PARAMETERS = ("uMax", "R", "T", "Yc", "Yh", "Kc", "Kh", "Fa")


def get_default_parameters() -> ModelParameters:
    """
    Return a ModelParameters object with all default (literature) values.
    """
    return ModelParameters()


def validate_parameters(params: ModelParameters) -> ModelParameters:
    """Raise ParameterError naming the first field outside its domain."""
    for f in fields(params):
        value = getattr(params, f.name)
        if not math.isfinite(value):
            raise ParameterError(f.name, value, "must be finite")
        if f.name in POSITIVE_PARAMETERS and value <= 0:
            raise ParameterError(f.name, value, "must be > 0")
    return params


@dataclass(frozen=True)
class TimeGrid:
    t0: float = 0.0 # (h) Initial time
    t_end: float = 100.0 # (h) Horizon
    dt: float = 1.0 # (h) Output sampling step

    def points(self) -> np.ndarray:
        """
        Output sampling times t0, t0+dt, ..., t_end (inclusive).

        Computed as t0 + k*dt so rounding does not accumulate; t_end is
        appended when it is not an integer number of steps away.
        """
        if not (math.isfinite(self.t0) and math.isfinite(self.t_end) and math.isfinite(self.dt)):
            raise ConfigError(f"time grid must be finite: {self}")
        if self.dt <= 0:
            raise ConfigError(f"time grid step must be > 0, got dt={self.dt}")
        if self.t_end <= self.t0:
            raise ConfigError(f"time grid end must exceed start: t0={self.t0}, t_end={self.t_end}")

        n_steps = int(math.floor((self.t_end - self.t0) / self.dt + 1e-9))
        t = self.t0 + self.dt * np.arange(n_steps + 1, dtype=float)
        if self.t_end - t[-1] > 1e-9 * self.dt:
            t = np.append(t, self.t_end)
        else:
            t[-1] = self.t_end
        return t


def as_time_points(times: TimeGrid | Sequence[float] | np.ndarray) -> np.ndarray:
    """
    Normalise a TimeGrid or explicit sequence into a read-only array of
    strictly increasing, finite output times.
    """
    if isinstance(times, TimeGrid):
        t = times.points()
    else:
        t = np.array(times, dtype=float)
        if t.ndim != 1 or t.size < 2:
            raise ConfigError("time points must be a 1-D sequence with at least two entries")
        if not np.all(np.isfinite(t)):
            raise ConfigError("time points must be finite")
        if np.any(np.diff(t) <= 0):
            raise ConfigError("time points must be strictly increasing")
    t.setflags(write=False)
    return t


SUPPORTED_METHODS = ("LSODA", "BDF", "Radau", "RK45", "DOP853")


@dataclass(frozen=True)
class SolverConfig:
    """Configuration of the scipy integrator used by simulate()."""

    method: str = "LSODA"
    rtol: float = 1e-6
    atol: float = 1e-9
    max_step: Optional[float] = None
    max_steps: int = 100_000

    def __post_init__(self):
        if self.method not in SUPPORTED_METHODS:
            raise ConfigError(
                f"unsupported solver method {self.method!r}; choose one of {SUPPORTED_METHODS}"
            )
        if not (self.rtol > 0 and self.atol > 0):
            raise ConfigError(f"tolerances must be > 0, got rtol={self.rtol}, atol={self.atol}")
        if self.max_step is not None and not self.max_step > 0:
            raise ConfigError(f"max_step must be > 0 when given, got {self.max_step}")
        if self.max_steps < 1:
            raise ConfigError(f"max_steps must be >= 1, got {self.max_steps}")

    def as_dict(self) -> dict:
        return {
            "method": self.method,
            "rtol": self.rtol,
            "atol": self.atol,
            "max_step": self.max_step,
            "max_steps": self.max_steps,
        }

"""Domain-specific exceptions for the acetogen growth model."""

from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np

if TYPE_CHECKING:  # pragma: no cover
    from .simulation import Trajectory


class AcetogenModelError(RuntimeError):
    """Base class for model errors."""


class ConfigError(AcetogenModelError):
    """Raised when a simulation configuration is invalid."""


class ParameterError(ConfigError, ValueError):
    """Raised when a parameter or initial value violates its domain."""

    def __init__(self, name: str, value: float, constraint: str):
        self.name = name
        self.value = value
        self.constraint = constraint
        super().__init__(f"{name}={value!r} violates constraint: {constraint}")


class NumericsError(AcetogenModelError):
    """Raised when the numerical solver fails."""


class IntegrationError(NumericsError):
    """
    Raised when integration stops before the last requested time point.

    Carries the last successfully integrated time and state, the reason
    ("tolerance", "non_finite" or "max_steps") and the partial trajectory
    sampled up to that point (marked incomplete).
    """

    def __init__(
        self,
        reason: str,
        t_last: float,
        y_last: np.ndarray,
        message: str = "",
        partial: "Trajectory | None" = None,
    ):
        self.reason = reason
        self.t_last = t_last
        self.y_last = y_last
        self.solver_message = message
        self.partial = partial
        super().__init__(
            f"integration failed ({reason}) after t={t_last:g}: {message}"
        )


__all__ = [
    "AcetogenModelError",
    "ConfigError",
    "ParameterError",
    "NumericsError",
    "IntegrationError",
]

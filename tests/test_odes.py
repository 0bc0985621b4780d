from __future__ import annotations

from dataclasses import replace
import math

import numpy as np
import pytest

from acetogen_model.odes import growth_rate, monod, rhs, specific_growth_rate
from acetogen_model.parameters import ModelParameters
from acetogen_model.state_vector import N_STATES, InitialState, StateIx, get_initial_state


def _expected_rhs(y: np.ndarray, p: ModelParameters) -> np.ndarray:
    N, C, H, A = y
    G = p.dGo + p.R * p.T * math.log(
        (A / 1000) * 55**4 / ((C / 1000) ** 2 * (H / 1000) ** 4)
    )
    u = p.uMax * (C / (p.Kc + C)) * (H / (p.Kh + H)) / (1 + math.exp(0.07 * (G + 30)))
    return np.array(
        [
            u * N,
            -(u * N / p.Yc) * (C / (p.Kc + C)),
            -(u * N / p.Yh) * (H / (p.Kh + H)),
            u * N * p.Fa * 0.5,
        ]
    )


@pytest.mark.parametrize(
    "state",
    [
        [1.0, 100.0, 100.0, 1e-7],
        [3.5e6, 80.0, 12.0, 25.0],
        [1e8, 0.5, 0.01, 300.0],
    ],
)
def test_rhs_matches_rate_law(state) -> None:
    params = ModelParameters()
    y = np.array(state)

    assert rhs(0.0, y, params) == pytest.approx(_expected_rhs(y, params), rel=1e-10)


def test_rhs_is_pure() -> None:
    params = ModelParameters()
    y = get_initial_state(InitialState(N=10.0, C=50.0, H=40.0, A=0.2))
    y_before = y.copy()

    first = rhs(0.0, y, params)
    second = rhs(7.0, y, params)

    np.testing.assert_array_equal(y, y_before)
    np.testing.assert_array_equal(first, second)
    assert first.shape == (N_STATES,)
    assert first.dtype == np.float64


def test_product_and_substrate_rates_follow_growth() -> None:
    params = ModelParameters()
    y = np.array([1e5, 60.0, 30.0, 0.5])
    d = rhs(0.0, y, params)

    assert d[StateIx.A] / d[StateIx.N] == pytest.approx(params.Fa * 0.5)
    assert d[StateIx.C] / d[StateIx.N] == pytest.approx(-monod(60.0, params.Kc) / params.Yc)
    assert d[StateIx.H] / d[StateIx.N] == pytest.approx(-monod(30.0, params.Kh) / params.Yh)


def test_growth_halts_when_free_energy_is_unfavourable() -> None:
    params = replace(ModelParameters(), dGo=500.0)
    y = np.array([1e6, 100.0, 100.0, 1e-7])

    assert growth_rate(y, params) < 1e-15
    assert rhs(0.0, y, params)[StateIx.N] < 1e-9


@pytest.mark.parametrize("field", ["Kc", "Kh"])
def test_growth_rate_decreases_with_half_saturation(field) -> None:
    base = ModelParameters()
    rates = [
        specific_growth_rate(1.0, 1.0, 1e-3, replace(base, **{field: k}))
        for k in (0.001, 0.01, 0.1, 1.0)
    ]
    assert all(a > b for a, b in zip(rates, rates[1:]))


def test_negative_substrate_stops_all_fluxes() -> None:
    params = ModelParameters()
    y = np.array([1e6, -1e-12, 50.0, 1.0])

    np.testing.assert_array_equal(rhs(0.0, y, params), np.zeros(4))


def test_monod_is_half_at_half_saturation() -> None:
    assert monod(0.082, 0.082) == pytest.approx(0.5)
    assert monod(0.0, 0.082) == 0.0

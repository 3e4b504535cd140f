'''
Pytest configuration and fixtures for the arima test suite.

Fixtures simulate small AR, ARMA, seasonal and regression processes from a
seeded generator so estimates are reproducible across runs.
'''

from typing import Tuple

import numpy as np
import pandas as pd
import pytest

from arima.core.config import reset_config


def simulate_sarimax(rng: np.random.Generator,
                     n: int,
                     ar: Tuple[float, ...] = (),
                     ma: Tuple[float, ...] = (),
                     seasonal_ar: Tuple[float, ...] = (),
                     s: int = 0,
                     constant: float = 0.0,
                     exog_effect: np.ndarray = None,
                     burn: int = 200) -> np.ndarray:
    """Simulate an additive seasonal ARMA process, discarding a burn-in."""
    total = n + burn
    e = rng.standard_normal(total)
    y = np.zeros(total)
    for t in range(total):
        value = constant + e[t]
        for i, phi in enumerate(ar):
            if t - i - 1 >= 0:
                value += phi * y[t - i - 1]
        for i, Phi in enumerate(seasonal_ar):
            if t - (i + 1) * s >= 0:
                value += Phi * y[t - (i + 1) * s]
        for j, theta in enumerate(ma):
            if t - j - 1 >= 0:
                value += theta * e[t - j - 1]
        y[t] = value
    y = y[burn:]
    if exog_effect is not None:
        y = y + exog_effect
    return y


@pytest.fixture(autouse=True)
def restore_config():
    """Undo configuration changes made by a test."""
    yield
    reset_config()


@pytest.fixture
def rng() -> np.random.Generator:
    """Provide a seeded random number generator for reproducible tests."""
    return np.random.default_rng(42)


@pytest.fixture
def ar1_series(rng: np.random.Generator) -> np.ndarray:
    """AR(1) with coefficient 0.5 and intercept 1.0 (mean 2.0)."""
    return simulate_sarimax(rng, 500, ar=(0.5,), constant=1.0)


@pytest.fixture
def ar2_series(rng: np.random.Generator) -> np.ndarray:
    return simulate_sarimax(rng, 400, ar=(0.6, -0.2), constant=0.5)


@pytest.fixture
def arma11_series(rng: np.random.Generator) -> np.ndarray:
    """ARMA(1,1) with AR 0.5 and MA 0.3."""
    return simulate_sarimax(rng, 2000, ar=(0.5,), ma=(0.3,))


@pytest.fixture
def seasonal_series(rng: np.random.Generator) -> np.ndarray:
    """Seasonal AR with period 4 and coefficient 0.6."""
    return simulate_sarimax(rng, 800, seasonal_ar=(0.6,), s=4)


@pytest.fixture
def random_walk(rng: np.random.Generator) -> np.ndarray:
    return 10.0 + np.cumsum(rng.standard_normal(300))


@pytest.fixture
def exog_data(rng: np.random.Generator) -> Tuple[np.ndarray, np.ndarray]:
    """Series ``2 * x + AR(1) noise`` and its single regressor."""
    x = rng.standard_normal(400)
    y = simulate_sarimax(rng, 400, ar=(0.4,), exog_effect=2.0 * x)
    return y, x


@pytest.fixture
def ar1_frame(ar1_series: np.ndarray) -> pd.Series:
    index = pd.date_range("2000-01-01", periods=len(ar1_series), freq="D")
    return pd.Series(ar1_series, index=index, name="y")

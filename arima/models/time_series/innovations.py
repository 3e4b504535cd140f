# arima/models/time_series/innovations.py
"""
Innovation (one-step residual) computation for SARIMAX models.

Residuals are computed with the conditional-likelihood convention: the first
``burn_in`` innovations are set to zero rather than back-forecast, and only
innovations from ``burn_in`` onwards enter the objective.
"""

import logging
from typing import Optional

import numpy as np

from arima.core.exceptions import ParameterError, RegressorShapeMismatchError
from arima.models.time_series._numba_core import innovation_filter, kernel
from arima.models.time_series.base import ModelOrder

logger = logging.getLogger("arima.models.time_series.innovations")


def n_params(order: ModelOrder, k_exog: int, include_constant: bool = True) -> int:
    """Length of the packed coefficient vector."""
    return order.n_arma_params + k_exog + int(include_constant)


def _prepare(params: np.ndarray, series: np.ndarray, exog: Optional[np.ndarray],
             order: ModelOrder, include_constant: bool):
    series = np.ascontiguousarray(series, dtype=np.float64)
    n = len(series)
    if exog is None:
        exog = np.zeros((n, 0))
    exog = np.ascontiguousarray(exog, dtype=np.float64)
    if exog.ndim != 2 or exog.shape[0] != n:
        raise RegressorShapeMismatchError(
            f"Regressors have {exog.shape[0]} rows but the series has {n} observations",
            array_name="exog",
            expected_shape=f"({n}, k)",
            actual_shape=exog.shape
        )
    params = np.ascontiguousarray(params, dtype=np.float64)
    expected = n_params(order, exog.shape[1], include_constant)
    if params.ndim != 1 or len(params) != expected:
        raise ParameterError(
            f"Coefficient vector has length {params.size}, expected {expected}",
            param_name="params",
            param_value=params.shape,
            constraint=f"length == {expected}"
        )
    return params, series, exog


def residuals(params: np.ndarray,
              series: np.ndarray,
              exog: Optional[np.ndarray],
              order: ModelOrder,
              include_constant: bool = True,
              use_numba: bool = True) -> np.ndarray:
    """Innovations of a differenced series under the given coefficients.

    Args:
        params: Packed coefficient vector ``[AR, SAR, MA, SMA, exog, intercept]``
        series: Differenced series
        exog: Differenced regressors (n x k), or None
        order: Model orders
        include_constant: Whether ``params`` ends with an intercept
        use_numba: Whether to run the compiled kernel

    Returns:
        np.ndarray: Innovations, zero before ``order.burn_in``
    """
    params, series, exog = _prepare(params, series, exog, order, include_constant)
    return kernel(innovation_filter, use_numba)(
        series, exog, params, order.p, order.P, order.q, order.Q, order.s,
        include_constant, order.burn_in
    )


def fitted_values(params: np.ndarray,
                  series: np.ndarray,
                  exog: Optional[np.ndarray],
                  order: ModelOrder,
                  include_constant: bool = True,
                  use_numba: bool = True) -> np.ndarray:
    """One-step predictions ``y[t] - e[t]`` for ``t >= burn_in``."""
    e = residuals(params, series, exog, order, include_constant, use_numba)
    start = order.burn_in
    return np.asarray(series, dtype=np.float64)[start:] - e[start:]


def sum_of_squares(params: np.ndarray,
                   series: np.ndarray,
                   exog: Optional[np.ndarray],
                   order: ModelOrder,
                   include_constant: bool = True,
                   use_numba: bool = True) -> float:
    """Sum of squared innovations over ``t >= burn_in``."""
    e = residuals(params, series, exog, order, include_constant, use_numba)
    return float(np.sum(e[order.burn_in:] ** 2))

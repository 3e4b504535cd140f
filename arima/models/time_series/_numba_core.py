"""
Numba-accelerated kernels for SARIMAX estimation and forecasting.

Every loop that runs once per observation (or once per optimizer evaluation)
lives here: lag differencing and its inverse, the lagged regression matrix, the
innovation filter and the forecast recursion.

All kernels take the packed coefficient vector
``[AR(p), SAR(P), MA(q), SMA(Q), exog(k), intercept]`` together with the order
integers that describe its layout. Each compiled function keeps the plain
Python original on its ``py_func`` attribute; callers select between the two
with ``kernel``.
"""

import logging
from typing import Callable, Tuple

import numpy as np
from numba import jit

logger = logging.getLogger("arima.models.time_series._numba_core")


def kernel(func: Callable, use_numba: bool = True) -> Callable:
    """Return the compiled kernel, or its pure Python version."""
    return func if use_numba else func.py_func


# ============================================================================
# Differencing
# ============================================================================

@jit(nopython=True, cache=True)
def lag_difference(x: np.ndarray, period: int, times: int) -> np.ndarray:
    """
    Apply ``times`` lag-``period`` differences to a series.

    Each pass maps ``z`` to ``z[t] - z[t - period]`` and shortens the series by
    ``period`` observations.

    Args:
        x: Input series
        period: Lag of the difference (1 for ordinary differences)
        times: Number of passes

    Returns:
        np.ndarray: Differenced series of length ``len(x) - period * times``
    """
    result = x.copy()
    for _ in range(times):
        temp = np.zeros(len(result) - period)
        for i in range(len(temp)):
            temp[i] = result[i + period] - result[i]
        result = temp
    return result


@jit(nopython=True, cache=True)
def lag_integrate(values: np.ndarray, last_values: np.ndarray, period: int) -> np.ndarray:
    """
    Undo one lag-``period`` difference.

    Args:
        values: Differenced values following the end of the level series
        last_values: The last ``period`` observations of the level series
        period: Lag of the difference being undone

    Returns:
        np.ndarray: Level values, one per element of ``values``
    """
    n = len(values)
    extended = np.zeros(period + n)
    for i in range(period):
        extended[i] = last_values[i]
    for i in range(n):
        extended[period + i] = values[i] + extended[i]
    return extended[period:]


# ============================================================================
# Design matrix
# ============================================================================

@jit(nopython=True, cache=True)
def lagged_regressors(y: np.ndarray,
                      x: np.ndarray,
                      ar_order: int,
                      seasonal_ar_order: int,
                      period: int,
                      include_constant: bool,
                      start: int) -> Tuple[np.ndarray, np.ndarray]:
    """
    Build the static regression matrix of a SARIMAX model.

    Row ``r`` describes time ``t = start + r`` and holds
    ``[y[t-1], ..., y[t-p], y[t-s], ..., y[t-P*s], x[t, :], 1]``.

    Args:
        y: Differenced series
        x: Differenced exogenous matrix (n x k, k may be zero)
        ar_order: Non-seasonal AR order p
        seasonal_ar_order: Seasonal AR order P
        period: Seasonal period s
        include_constant: Whether to append a column of ones
        start: First time index with a complete set of lags

    Returns:
        Tuple[np.ndarray, np.ndarray]: Regressor matrix and target vector
    """
    n = len(y)
    k = x.shape[1]
    m = n - start
    n_cols = ar_order + seasonal_ar_order + k + (1 if include_constant else 0)
    X = np.zeros((m, n_cols))
    target = np.zeros(m)

    for r in range(m):
        t = start + r
        target[r] = y[t]
        col = 0
        for i in range(1, ar_order + 1):
            X[r, col] = y[t - i]
            col += 1
        for i in range(1, seasonal_ar_order + 1):
            X[r, col] = y[t - i * period]
            col += 1
        for j in range(k):
            X[r, col] = x[t, j]
            col += 1
        if include_constant:
            X[r, col] = 1.0

    return X, target


# ============================================================================
# Innovation filter
# ============================================================================

@jit(nopython=True, cache=True)
def innovation_filter(y: np.ndarray,
                      x: np.ndarray,
                      params: np.ndarray,
                      ar_order: int,
                      seasonal_ar_order: int,
                      ma_order: int,
                      seasonal_ma_order: int,
                      period: int,
                      include_constant: bool,
                      burn_in: int) -> np.ndarray:
    """
    Compute one-step innovations of a SARIMAX model on the differenced scale.

    Innovations before ``burn_in`` are fixed at zero; from ``burn_in`` onwards

        e[t] = y[t] - c - sum AR_i y[t-i] - sum SAR_i y[t-i*s]
                    - sum MA_j e[t-j] - sum SMA_j e[t-j*s] - x[t] @ beta

    in one pass of increasing ``t``.

    Args:
        y: Differenced series
        x: Differenced exogenous matrix (n x k)
        params: Packed coefficient vector
        ar_order: p
        seasonal_ar_order: P
        ma_order: q
        seasonal_ma_order: Q
        period: Seasonal period s
        include_constant: Whether the vector ends with an intercept
        burn_in: First index with a full lag history

    Returns:
        np.ndarray: Innovations, same length as ``y``
    """
    n = len(y)
    k = x.shape[1]
    sar_start = ar_order
    ma_start = sar_start + seasonal_ar_order
    sma_start = ma_start + ma_order
    exog_start = sma_start + seasonal_ma_order
    constant = params[exog_start + k] if include_constant else 0.0

    e = np.zeros(n)
    for t in range(burn_in, n):
        pred = constant
        for i in range(ar_order):
            pred += params[i] * y[t - i - 1]
        for i in range(seasonal_ar_order):
            pred += params[sar_start + i] * y[t - (i + 1) * period]
        for j in range(ma_order):
            pred += params[ma_start + j] * e[t - j - 1]
        for j in range(seasonal_ma_order):
            pred += params[sma_start + j] * e[t - (j + 1) * period]
        for j in range(k):
            pred += params[exog_start + j] * x[t, j]
        e[t] = y[t] - pred

    return e


# ============================================================================
# Forecasting
# ============================================================================

@jit(nopython=True, cache=True)
def forecast_recursion(y_history: np.ndarray,
                       e_history: np.ndarray,
                       x_future: np.ndarray,
                       params: np.ndarray,
                       ar_order: int,
                       seasonal_ar_order: int,
                       ma_order: int,
                       seasonal_ma_order: int,
                       period: int,
                       include_constant: bool,
                       steps: int) -> np.ndarray:
    """
    Multi-step forecasts on the differenced scale.

    Lags that fall inside the history use stored values. Past the boundary the
    AR lags use earlier forecasts and the MA lags use zero, the expected value
    of a future innovation.

    Args:
        y_history: Last ``max(p, s*P)`` differenced observations
        e_history: Last ``max(q, s*Q)`` innovations
        x_future: Differenced future regressors (steps x k)
        params: Packed coefficient vector
        ar_order: p
        seasonal_ar_order: P
        ma_order: q
        seasonal_ma_order: Q
        period: Seasonal period s
        include_constant: Whether the vector ends with an intercept
        steps: Forecast horizon

    Returns:
        np.ndarray: Forecasts of the differenced series
    """
    k = x_future.shape[1]
    sar_start = ar_order
    ma_start = sar_start + seasonal_ar_order
    sma_start = ma_start + ma_order
    exog_start = sma_start + seasonal_ma_order
    constant = params[exog_start + k] if include_constant else 0.0

    n_y = len(y_history)
    n_e = len(e_history)
    y_ext = np.zeros(n_y + steps)
    e_ext = np.zeros(n_e + steps)
    y_ext[:n_y] = y_history
    e_ext[:n_e] = e_history

    forecasts = np.zeros(steps)
    for h in range(steps):
        ty = n_y + h
        te = n_e + h
        pred = constant
        for i in range(ar_order):
            pred += params[i] * y_ext[ty - i - 1]
        for i in range(seasonal_ar_order):
            pred += params[sar_start + i] * y_ext[ty - (i + 1) * period]
        for j in range(ma_order):
            pred += params[ma_start + j] * e_ext[te - j - 1]
        for j in range(seasonal_ma_order):
            pred += params[sma_start + j] * e_ext[te - (j + 1) * period]
        for j in range(k):
            pred += params[exog_start + j] * x_future[h, j]
        y_ext[ty] = pred
        forecasts[h] = pred

    return forecasts

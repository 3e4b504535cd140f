# arima/models/time_series/differencing.py
"""
Stationarising transform for SARIMAX models and its exact inverse.

The forward transform applies ``d`` first differences and then ``D`` seasonal
differences of period ``s``; a series of length ``n`` becomes one of length
``n - d - s*D``. ``integrate`` rebuilds original-scale values from values on
the differenced scale, given enough original-scale history to seed every
intermediate level.
"""

import logging

import numpy as np

from arima.core.exceptions import InsufficientHistoryError, InvalidOrderError
from arima.models.time_series._numba_core import kernel, lag_difference, lag_integrate

logger = logging.getLogger("arima.models.time_series.differencing")


def _check_orders(d: int, D: int, s: int) -> None:
    for name, value in (("d", d), ("D", D), ("s", s)):
        if value < 0:
            raise InvalidOrderError(
                f"{name} must be non-negative, got {value}",
                param_name=name,
                param_value=value,
                constraint=">= 0"
            )
    if D > 0 and s <= 1:
        raise InvalidOrderError(
            f"Seasonal differencing requires a period greater than 1, got s={s}",
            param_name="s",
            param_value=s,
            constraint="s > 1 when D > 0"
        )


def difference(series: np.ndarray, d: int = 0, D: int = 0, s: int = 0,
               use_numba: bool = True) -> np.ndarray:
    """Apply ``d`` first differences followed by ``D`` seasonal differences.

    Args:
        series: One-dimensional float series
        d: Number of first differences
        D: Number of seasonal differences
        s: Seasonal period (only used when ``D > 0``)
        use_numba: Whether to run the compiled kernel

    Returns:
        np.ndarray: Differenced series of length ``len(series) - d - s*D``. The
        input is returned as a copy when ``d == D == 0``.

    Raises:
        InvalidOrderError: If an order is negative, or ``D > 0`` with ``s <= 1``
        InsufficientHistoryError: If ``len(series) < d + s*D + 1``
    """
    _check_orders(d, D, s)
    series = np.ascontiguousarray(series, dtype=np.float64)
    lost = d + (s * D if D else 0)
    if len(series) < lost + 1:
        raise InsufficientHistoryError(
            f"Differencing with d={d}, D={D}, s={s} needs at least {lost + 1} "
            f"observations, got {len(series)}",
            required=lost + 1,
            available=len(series),
            data_name="series"
        )

    diff = kernel(lag_difference, use_numba)
    result = diff(series, 1, d)
    if D:
        result = diff(result, s, D)
    return result


def difference_exog(exog: np.ndarray, d: int = 0, D: int = 0, s: int = 0,
                    use_numba: bool = True) -> np.ndarray:
    """Apply :func:`difference` to every column of a regressor matrix.

    A matrix with no columns passes through with its row count reduced.
    """
    exog = np.asarray(exog, dtype=np.float64)
    lost = d + (s * D if D else 0)
    if exog.shape[1] == 0:
        _check_orders(d, D, s)
        return np.zeros((max(exog.shape[0] - lost, 0), 0))

    columns = [difference(np.ascontiguousarray(exog[:, j]), d, D, s, use_numba)
               for j in range(exog.shape[1])]
    return np.ascontiguousarray(np.column_stack(columns))


def integrate(forecasts: np.ndarray, history: np.ndarray, d: int = 0, D: int = 0,
              s: int = 0, use_numba: bool = True) -> np.ndarray:
    """Map values on the differenced scale back to the original scale.

    ``forecasts`` are taken to follow immediately after ``history``. The
    seasonal differences are undone first, each seeded by the last ``s``
    values of the matching intermediate level of ``history``, then the first
    differences, each seeded by the last value of its level.

    Args:
        forecasts: Values on the differenced scale
        history: Original-scale observations preceding the forecasts; only the
            last ``d + s*D`` are used
        d: Number of first differences
        D: Number of seasonal differences
        s: Seasonal period
        use_numba: Whether to run the compiled kernels

    Returns:
        np.ndarray: Original-scale values, one per forecast

    Raises:
        InsufficientHistoryError: If ``len(history) < d + s*D``
    """
    _check_orders(d, D, s)
    forecasts = np.ascontiguousarray(forecasts, dtype=np.float64)
    history = np.ascontiguousarray(history, dtype=np.float64)
    length = d + (s * D if D else 0)
    if len(history) < length:
        raise InsufficientHistoryError(
            f"Integration with d={d}, D={D}, s={s} needs {length} observations "
            f"of history, got {len(history)}",
            required=length,
            available=len(history),
            data_name="history"
        )
    if length == 0:
        return forecasts.copy()

    history = history[len(history) - length:]
    diff = kernel(lag_difference, use_numba)
    undo = kernel(lag_integrate, use_numba)

    # Intermediate levels of the history, ordered as difference() visits them
    first_levels = [history]
    for _ in range(d):
        first_levels.append(diff(first_levels[-1], 1, 1))
    seasonal_levels = [first_levels[-1]]
    for _ in range(D):
        seasonal_levels.append(diff(seasonal_levels[-1], s, 1))

    result = forecasts
    for j in reversed(range(D)):
        level = seasonal_levels[j]
        result = undo(result, np.ascontiguousarray(level[len(level) - s:]), s)
    for i in reversed(range(d)):
        level = first_levels[i]
        result = undo(result, np.ascontiguousarray(level[len(level) - 1:]), 1)
    return result


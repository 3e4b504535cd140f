# arima/models/time_series/design.py
"""
Lagged regression matrix for the autoregressive part of a SARIMAX model.

The matrix only covers terms that are known before estimation starts (lagged
observations, regressors and the intercept); moving-average terms depend on
the innovations and are handled by the innovation filter. It is used to
compute least-squares starting values for the optimizer.
"""

import logging
from dataclasses import dataclass
from typing import List, Optional

import numpy as np

from arima.core.exceptions import InsufficientHistoryError, RegressorShapeMismatchError
from arima.models.time_series._numba_core import kernel, lagged_regressors
from arima.models.time_series.base import ModelOrder

logger = logging.getLogger("arima.models.time_series.design")


@dataclass(frozen=True)
class DesignMatrix:
    """Regression matrix and target for ``t >= start``.

    Attributes:
        X: Regressors, one row per usable time index
        y: Target values ``series[start:]``
        start: Time index of the first row (the model burn-in)
        column_names: Names of the columns of ``X``
    """

    X: np.ndarray
    y: np.ndarray
    start: int
    column_names: List[str]

    @property
    def nobs(self) -> int:
        return self.X.shape[0]


def design_column_names(order: ModelOrder, k_exog: int, include_constant: bool = True) -> List[str]:
    names = [f"ar.L{i}" for i in range(1, order.p + 1)]
    names += [f"ar.S.L{i * order.s}" for i in range(1, order.P + 1)]
    names += [f"x{j}" for j in range(1, k_exog + 1)]
    if include_constant:
        names.append("intercept")
    return names


def build_design(series: np.ndarray,
                 exog: Optional[np.ndarray],
                 order: ModelOrder,
                 include_constant: bool = True,
                 use_numba: bool = True) -> DesignMatrix:
    """Build the lagged regression matrix of a (differenced) series.

    Row ``r`` holds ``[y[t-1..t-p], y[t-s..t-P*s], x[t, :], 1]`` for
    ``t = burn_in + r``. Rows without a complete lag history are dropped.

    Args:
        series: Differenced series
        exog: Differenced regressors with one row per observation, or None
        order: Model orders
        include_constant: Whether to add an intercept column
        use_numba: Whether to run the compiled kernel

    Returns:
        DesignMatrix: Regressors and target

    Raises:
        RegressorShapeMismatchError: If ``exog`` rows differ from the series length
        InsufficientHistoryError: If no row has a complete lag history
    """
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

    start = order.burn_in
    if n - start < 1:
        raise InsufficientHistoryError(
            f"A differenced series of length {n} leaves no observations after a "
            f"burn-in of {start}",
            required=start + 1,
            available=n,
            data_name="series"
        )

    X, target = kernel(lagged_regressors, use_numba)(
        series, exog, order.p, order.P, order.s, include_constant, start
    )
    logger.debug(f"Design matrix with {X.shape[0]} rows and {X.shape[1]} columns")
    return DesignMatrix(
        X=X,
        y=target,
        start=start,
        column_names=design_column_names(order, exog.shape[1], include_constant)
    )

# arima/core/validation.py

"""
Input validation for the arima package.

These functions sit at the boundary between user data and the numerical core.
They convert NumPy arrays, Pandas objects and plain sequences to contiguous
float64 arrays, and raise the package's exceptions with context when the input
is unusable.
"""

import numbers
from typing import Any, Optional

import numpy as np
import pandas as pd

from arima.core.exceptions import (
    DataError, ForecastError, RegressorShapeMismatchError, raise_dimension_error
)
from arima.core.types import ExogLike, Matrix, SeriesLike, Vector


def _check_finite(array: np.ndarray, data_name: str) -> None:
    if np.isnan(array).any():
        raise DataError(
            f"{data_name} contains NaN values",
            data_name=data_name,
            issue="contains NaN values",
            index=int(np.argwhere(np.isnan(array))[0][0])
        )
    if np.isinf(array).any():
        raise DataError(
            f"{data_name} contains infinite values",
            data_name=data_name,
            issue="contains infinite values",
            index=int(np.argwhere(np.isinf(array))[0][0])
        )


def validate_series(data: SeriesLike, data_name: str = "y") -> Vector:
    """Validate a univariate time series and return it as a float64 vector.

    Args:
        data: Series values as a NumPy array, Pandas Series or sequence
        data_name: Name of the data for error messages

    Returns:
        np.ndarray: Contiguous 1-D float64 copy of the data

    Raises:
        TypeError: If data is None
        DimensionError: If data is not one-dimensional
        DataError: If data is empty or contains NaN/Inf values
    """
    if data is None:
        raise TypeError(f"{data_name} cannot be None")

    if isinstance(data, pd.DataFrame):
        if data.shape[1] != 1:
            raise_dimension_error(
                f"{data_name} must be a single column, got {data.shape[1]} columns",
                array_name=data_name,
                expected_shape="(n,)",
                actual_shape=data.shape
            )
        values = data.iloc[:, 0].to_numpy()
    elif isinstance(data, pd.Series):
        values = data.to_numpy()
    else:
        values = np.asarray(data)

    try:
        array = np.array(values, dtype=np.float64)
    except (TypeError, ValueError) as e:
        raise DataError(
            f"{data_name} must contain real numbers",
            data_name=data_name,
            issue="non-numeric values",
            details=str(e)
        ) from e

    # Column and row vectors are accepted as 1-D series
    if array.ndim == 2 and 1 in array.shape:
        array = array.ravel()
    if array.ndim != 1:
        raise_dimension_error(
            f"{data_name} must be 1-dimensional, got {array.ndim} dimensions",
            array_name=data_name,
            expected_shape="(n,)",
            actual_shape=array.shape
        )

    if array.size == 0:
        raise DataError(f"{data_name} is empty", data_name=data_name, issue="empty series")

    _check_finite(array, data_name)
    return np.ascontiguousarray(array)


def validate_exog(exog: Optional[ExogLike],
                  n_rows: int,
                  n_cols: Optional[int] = None,
                  data_name: str = "x") -> Matrix:
    """Validate exogenous regressors against a required row count.

    ``None`` is treated as a matrix with ``n_rows`` rows and no columns, so a
    model without regressors flows through the same code path.

    Args:
        exog: Regressor rows, one per observation or forecast step
        n_rows: Number of rows required (series length or forecast horizon)
        n_cols: Number of columns required, or None to accept any width
        data_name: Name of the data for error messages

    Returns:
        np.ndarray: Contiguous float64 matrix of shape ``(n_rows, k)``

    Raises:
        RegressorShapeMismatchError: If the row or column count is wrong
        DataError: If the regressors contain NaN/Inf values
    """
    if exog is None:
        array = np.zeros((n_rows, 0))
    else:
        if isinstance(exog, (pd.DataFrame, pd.Series)):
            values = exog.to_numpy()
        else:
            values = np.asarray(exog)
        try:
            array = np.array(values, dtype=np.float64)
        except (TypeError, ValueError) as e:
            raise DataError(
                f"{data_name} must contain real numbers",
                data_name=data_name,
                issue="non-numeric values",
                details=str(e)
            ) from e

        if array.ndim == 1:
            array = array.reshape(-1, 1)
        if array.ndim != 2:
            raise RegressorShapeMismatchError(
                f"{data_name} must be 2-dimensional, got {array.ndim} dimensions",
                array_name=data_name,
                expected_shape="(n, k)",
                actual_shape=array.shape
            )

    if array.shape[0] != n_rows:
        raise RegressorShapeMismatchError(
            f"{data_name} has {array.shape[0]} rows. It should have {n_rows}.",
            array_name=data_name,
            expected_shape=f"({n_rows}, k)",
            actual_shape=array.shape
        )

    if n_cols is not None and array.shape[1] != n_cols:
        raise RegressorShapeMismatchError(
            f"{data_name} has {array.shape[1]} columns. It should have {n_cols}.",
            array_name=data_name,
            expected_shape=f"({n_rows}, {n_cols})",
            actual_shape=array.shape
        )

    _check_finite(array, data_name)
    return np.ascontiguousarray(array)


def validate_horizon(h: Any) -> int:
    """Validate a forecast horizon.

    Args:
        h: Number of steps to forecast

    Returns:
        int: The horizon as a Python int

    Raises:
        ForecastError: If h is not a positive integer
    """
    if isinstance(h, bool) or not isinstance(h, numbers.Integral):
        raise ForecastError(
            f"Forecast horizon must be a positive integer, got {h!r}",
            horizon=h,
            issue="not an integer"
        )
    if h <= 0:
        raise ForecastError(
            f"Forecast horizon must be a positive integer, got {h}",
            horizon=h,
            issue="non-positive horizon"
        )
    return int(h)

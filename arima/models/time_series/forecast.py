# arima/models/time_series/forecast.py
"""
Multi-step forecasting from a fitted SARIMAX state.

Forecasts are produced on the differenced scale by running the model
recursion forward from the stored tails, then mapped back to the original scale
with the stored original-scale history. Forecasting reads the fitted state and
never modifies it.
"""

import logging
from typing import Optional

import numpy as np

from arima.core.exceptions import RegressorShapeMismatchError
from arima.core.types import ExogLike
from arima.core.validation import validate_exog, validate_horizon
from arima.models.time_series._numba_core import forecast_recursion, kernel
from arima.models.time_series.base import FittedState
from arima.models.time_series.differencing import difference_exog, integrate

logger = logging.getLogger("arima.models.time_series.forecast")


def prepare_future_exog(state: FittedState,
                        steps: int,
                        future_exog: Optional[ExogLike]) -> np.ndarray:
    """Validate future regressors and difference them like the fit-time regressors.

    The stored raw regressor tail is prepended so the first future rows can be
    differenced.

    Raises:
        RegressorShapeMismatchError: If regressors are missing, unexpected or
            not of shape ``(steps, k_exog)``
    """
    if state.k_exog == 0:
        if future_exog is not None:
            raise RegressorShapeMismatchError(
                "Regressors were supplied but the model was fit without them",
                array_name="x",
                expected_shape="None",
                actual_shape=np.shape(future_exog)
            )
        return np.zeros((steps, 0))

    if future_exog is None:
        raise RegressorShapeMismatchError(
            f"The model was fit with {state.k_exog} regressors; "
            f"supply x with shape ({steps}, {state.k_exog})",
            array_name="x",
            expected_shape=(steps, state.k_exog),
            actual_shape=None
        )

    future = validate_exog(future_exog, steps, state.k_exog, data_name="x")
    order = state.order
    combined = np.vstack([state.exog_tail, future])
    return difference_exog(combined, order.d, order.D, order.s, state.use_numba)


def forecast(state: FittedState,
             steps: int,
             future_exog: Optional[ExogLike] = None) -> np.ndarray:
    """Forecast ``steps`` periods past the end of the fitted series.

    Args:
        state: Fitted model state
        steps: Forecast horizon (positive)
        future_exog: Regressors for the forecast periods, shape ``(steps, k)``;
            required if and only if the model was fit with regressors

    Returns:
        np.ndarray: Original-scale forecasts of length ``steps``

    Raises:
        ForecastError: If ``steps`` is not a positive integer
        RegressorShapeMismatchError: If the regressors do not match the horizon
            or the fit-time width
    """
    steps = validate_horizon(steps)
    order = state.order
    x_future = prepare_future_exog(state, steps, future_exog)

    differenced = kernel(forecast_recursion, state.use_numba)(
        np.array(state.diff_tail),
        np.array(state.resid_tail),
        np.ascontiguousarray(x_future),
        np.ascontiguousarray(state.coefs),
        order.p, order.P, order.q, order.Q, order.s,
        state.include_constant, steps
    )
    logger.debug(f"Forecast {steps} steps on the differenced scale")

    return integrate(differenced, state.y_tail, order.d, order.D, order.s, state.use_numba)

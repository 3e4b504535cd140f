# arima/models/time_series/sarimax.py
"""
Seasonal ARIMA models with exogenous regressors.

This module provides the ``SARIMAX`` model class. A model is created unfit from
its orders; ``fit`` differences the series (and regressors), estimates the
coefficients by conditional sum of squares and stores an immutable fitted
state; ``predict`` forecasts from that state and maps the forecasts back to
the original scale.

AR, MA, ARMA and ARIMA models are special cases and are available as
classmethod presets on the same class.
"""

import logging
from typing import Any, Optional

import numpy as np
from scipy import stats

from arima.core.base import ModelBase
from arima.core.exceptions import InsufficientHistoryError
from arima.core.parameters import SARIMAXParameters
from arima.core.types import ExogLike, NonSeasonalOrder, SeasonalOrder, SeriesLike
from arima.core.validation import validate_exog, validate_series
from arima.models.time_series.base import (
    FittedState, ModelOrder, SARIMAXConfig, SARIMAXResult, information_criteria
)
from arima.models.time_series.differencing import difference, difference_exog
from arima.models.time_series.estimation import EstimationOutput, estimate
from arima.models.time_series.forecast import forecast as forecast_state
from arima.models.time_series.innovations import fitted_values

logger = logging.getLogger("arima.models.time_series.sarimax")


class SARIMAX(ModelBase[SARIMAXParameters, SARIMAXResult, SeriesLike]):
    """Seasonal ARIMA model with optional exogenous regressors.

    On the differenced series ``w`` the model is

        w[t] = c + sum AR_i w[t-i] + sum SAR_i w[t-i*s]
                 + sum MA_j e[t-j] + sum SMA_j e[t-j*s] + x[t] @ beta + e[t]

    where ``w`` applies ``d`` first differences and ``D`` seasonal differences
    to ``y`` and the regressors ``x`` are differenced the same way. Seasonal
    terms are additive.

    Example:
        >>> model = SARIMAX(order=(1, 1, 1), seasonal_order=(1, 0, 0, 12))
        >>> result = model.fit(y)
        >>> model.predict(12)

    Attributes:
        order: Model orders
        include_constant: Whether an intercept is estimated
    """

    def __init__(self,
                 order: NonSeasonalOrder = (1, 0, 0),
                 seasonal_order: SeasonalOrder = (0, 0, 0, 0),
                 include_constant: bool = True,
                 name: str = "SARIMAX"):
        """Initialize the model.

        Args:
            order: Non-seasonal orders ``(p, d, q)``
            seasonal_order: Seasonal orders ``(P, D, Q, s)``
            include_constant: Whether to estimate an intercept on the differenced scale
            name: A descriptive name for the model

        Raises:
            InvalidOrderError: If an order is negative or non-integer, or the
                seasonal period is not greater than one while P, D or Q is set
        """
        super().__init__(name=name)
        self._order = ModelOrder.from_tuples(order, seasonal_order)
        self.include_constant = bool(include_constant)
        self._state: Optional[FittedState] = None

    # ------------------------------------------------------------------
    # Presets
    # ------------------------------------------------------------------

    @classmethod
    def sarima(cls, order: NonSeasonalOrder, seasonal_order: SeasonalOrder, **kwargs: Any) -> 'SARIMAX':
        """Seasonal ARIMA model ``(p, d, q)(P, D, Q)s``."""
        kwargs.setdefault("name", "SARIMA")
        return cls(order=order, seasonal_order=seasonal_order, **kwargs)

    @classmethod
    def arima(cls, p: int, d: int, q: int, **kwargs: Any) -> 'SARIMAX':
        """Non-seasonal ARIMA(p, d, q) model."""
        kwargs.setdefault("name", "ARIMA")
        return cls(order=(p, d, q), **kwargs)

    @classmethod
    def arma(cls, p: int, q: int, **kwargs: Any) -> 'SARIMAX':
        """ARMA(p, q) model without differencing."""
        kwargs.setdefault("name", "ARMA")
        return cls(order=(p, 0, q), **kwargs)

    @classmethod
    def autoregressive(cls, p: int, **kwargs: Any) -> 'SARIMAX':
        """Pure autoregressive AR(p) model."""
        kwargs.setdefault("name", "AR")
        return cls(order=(p, 0, 0), **kwargs)

    @classmethod
    def moving_average(cls, q: int, **kwargs: Any) -> 'SARIMAX':
        """Pure moving average MA(q) model."""
        kwargs.setdefault("name", "MA")
        return cls(order=(0, 0, q), **kwargs)

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    def order(self) -> ModelOrder:
        return self._order

    @property
    def fitted(self) -> bool:
        return self._state is not None

    @property
    def state(self) -> FittedState:
        """The fitted state used for forecasting.

        Raises:
            ModelNotFitError: If the model has not been fitted
        """
        self._check_fitted("state")
        return self._state

    @property
    def params(self) -> SARIMAXParameters:
        """Estimated coefficients.

        Raises:
            ModelNotFitError: If the model has not been fitted
        """
        self._check_fitted("params")
        return self._state.params

    @property
    def coefs(self) -> np.ndarray:
        """Packed coefficient vector ``[AR, SAR, MA, SMA, exog, intercept]``.

        Raises:
            ModelNotFitError: If the model has not been fitted
        """
        self._check_fitted("coefs")
        return self._state.coefs

    # ------------------------------------------------------------------
    # Fitting and forecasting
    # ------------------------------------------------------------------

    def validate_data(self, data: SeriesLike) -> np.ndarray:
        """Validate the series and check it is long enough for the model orders.

        Returns:
            np.ndarray: The series as a float64 vector

        Raises:
            DataError: If the series is empty, not 1-D or contains NaN/Inf values
            InsufficientHistoryError: If fewer than ``d + s*D + burn_in + 1``
                observations are available
        """
        y = validate_series(data, data_name="y")
        required = self._order.min_length
        if len(y) < required:
            raise InsufficientHistoryError(
                f"SARIMAX{self._order} needs at least {required} observations, got {len(y)}",
                required=required,
                available=len(y),
                data_name="y"
            )
        return y

    def fit(self, data: SeriesLike, x: Optional[ExogLike] = None, **kwargs: Any) -> SARIMAXResult:
        """Fit the model to a series.

        The fitted state is replaced only when estimation succeeds; on any
        error the previous state (or the unfit state) is left untouched.

        Args:
            data: Series to fit, one-dimensional
            x: Exogenous regressors with one row per observation, or None
            **kwargs: Overrides of ``SARIMAXConfig`` fields (``solver``,
                ``fallback_solver``, ``max_iter``, ``tol``, ``use_numba``,
                ``compute_std_errors``, ``step``)

        Returns:
            SARIMAXResult: The estimation results

        Raises:
            DataError: If the series is unusable
            InsufficientHistoryError: If the series is too short for the orders
            RegressorShapeMismatchError: If ``x`` rows differ from the series length
            DegenerateFitError: If estimation yields no finite positive variance
            ParameterError: If an estimation option is unknown or invalid
        """
        config = SARIMAXConfig.from_global(**kwargs)
        y = self.validate_data(data)
        n = len(y)
        exog = validate_exog(x, n, data_name="x")
        k_exog = exog.shape[1]
        order = self._order

        logger.debug(f"Fitting {self._name}{order} to {n} observations with {k_exog} regressors")

        y_diff = difference(y, order.d, order.D, order.s, config.use_numba)
        x_diff = difference_exog(exog, order.d, order.D, order.s, config.use_numba)

        output = estimate(y_diff, x_diff, order, config, self.include_constant)

        params = SARIMAXParameters.from_array(
            output.params,
            ar_order=order.p,
            seasonal_ar_order=order.P,
            ma_order=order.q,
            seasonal_ma_order=order.Q,
            k_exog=k_exog,
            include_constant=self.include_constant,
            seasonal_period=order.s
        ).freeze()

        if not params.is_stationary():
            logger.warning(f"Estimated AR polynomial of {self._name}{order} is not stationary; "
                           "forecasts may diverge")
        if not params.is_invertible():
            logger.warning(f"Estimated MA polynomial of {self._name}{order} is not invertible")

        L = order.integration_length
        state = FittedState(
            order=order,
            params=params,
            include_constant=self.include_constant,
            sigma2=output.sigma2,
            y_tail=y[n - L:],
            diff_tail=y_diff[len(y_diff) - order.ar_lag:],
            resid_tail=output.residuals[len(output.residuals) - order.ma_lag:],
            exog_tail=exog[n - L:],
            k_exog=k_exog,
            converged=output.converged,
            iterations=output.iterations,
            objective=output.objective,
            use_numba=config.use_numba
        )
        result = self._build_result(output, params, y_diff, x_diff, config)

        self._results = result
        self._state = state
        return result

    def _build_result(self,
                      output: EstimationOutput,
                      params: SARIMAXParameters,
                      y_diff: np.ndarray,
                      x_diff: np.ndarray,
                      config: SARIMAXConfig) -> SARIMAXResult:
        order = self._order
        names = params.names(self.include_constant)
        coefs = output.params
        nobs = len(y_diff) - order.burn_in
        df_model = len(coefs) + 1
        df_resid = nobs - df_model

        if output.cov_params is not None:
            variances = np.diag(output.cov_params)
            std_errors = np.full(len(coefs), np.nan)
            positive = np.isfinite(variances) & (variances > 0)
            std_errors[positive] = np.sqrt(variances[positive])
        else:
            std_errors = np.full(len(coefs), np.nan)

        with np.errstate(divide="ignore", invalid="ignore"):
            t_stats = coefs / std_errors
        p_values = 2 * stats.t.sf(np.abs(t_stats), max(df_resid, 1))

        log_likelihood = -0.5 * nobs * (np.log(2 * np.pi * output.sigma2) + 1)
        criteria = information_criteria(log_likelihood, df_model, nobs)

        return SARIMAXResult(
            model_name=self._name,
            convergence=output.converged,
            iterations=output.iterations,
            log_likelihood=float(log_likelihood),
            aic=criteria["aic"],
            bic=criteria["bic"],
            order=order,
            params=dict(zip(names, coefs.tolist())),
            std_errors=dict(zip(names, std_errors.tolist())),
            t_stats=dict(zip(names, t_stats.tolist())),
            p_values=dict(zip(names, p_values.tolist())),
            sigma2=output.sigma2,
            hqic=criteria["hqic"],
            residuals=output.residuals,
            fitted_values=fitted_values(coefs, y_diff, x_diff, order,
                                        self.include_constant, config.use_numba),
            cov_params=output.cov_params,
            nobs=nobs,
            df_model=df_model,
            df_resid=df_resid,
            objective=output.objective,
            message=output.message
        )

    def predict(self, steps: int, x: Optional[ExogLike] = None) -> np.ndarray:
        """Forecast ``steps`` periods past the end of the fitted series.

        Args:
            steps: Forecast horizon
            x: Regressors for the forecast periods, shape ``(steps, k)``;
                required if and only if the model was fit with regressors

        Returns:
            np.ndarray: Original-scale forecasts

        Raises:
            ModelNotFitError: If the model has not been fitted
            ForecastError: If ``steps`` is not a positive integer
            RegressorShapeMismatchError: If ``x`` does not match the horizon or
                the fit-time regressor width
        """
        self._check_fitted("predict")
        return forecast_state(self._state, steps, x)

    def forecast(self,
                 data: SeriesLike,
                 steps: int,
                 x: Optional[ExogLike] = None,
                 x_future: Optional[ExogLike] = None,
                 **kwargs: Any) -> np.ndarray:
        """Fit to ``data`` and forecast ``steps`` periods in one call.

        Args:
            data: Series to fit
            steps: Forecast horizon
            x: Fit-time regressors, or None
            x_future: Regressors for the forecast periods, or None
            **kwargs: Estimation option overrides passed to ``fit``

        Returns:
            np.ndarray: Original-scale forecasts
        """
        self.fit(data, x, **kwargs)
        return self.predict(steps, x_future)

    fit_predict = forecast

    def __repr__(self) -> str:
        (p, d, q), (P, D, Q, s) = self._order.to_tuples()
        return (f"{self.__class__.__name__}(order=({p}, {d}, {q}), "
                f"seasonal_order=({P}, {D}, {Q}, {s}), "
                f"include_constant={self.include_constant}, name='{self._name}', "
                f"fitted={self.fitted})")

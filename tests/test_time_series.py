# tests/test_time_series.py

"""
Tests for SARIMAX estimation and forecasting.

The test suite covers:
- Model orders and their derived lag lengths
- Differencing and its inverse
- The lagged regression matrix and innovation filter
- Conditional sum-of-squares estimation, including a comparison with
  statsmodels' AutoReg for pure autoregressions
- Multi-step forecasting on the original scale
- The SARIMAX model lifecycle: unfit, fit, refit and failed fits
"""

import dataclasses

import numpy as np
import pandas as pd
import pytest
from hypothesis import given, settings
from hypothesis import strategies as st
from statsmodels.tsa.ar_model import AutoReg

from arima.core.exceptions import (
    ConvergenceWarning, DataError, DegenerateFitError, ForecastError,
    InsufficientHistoryError, InvalidOrderError, ModelNotFitError,
    ParameterError, RegressorShapeMismatchError
)
from arima.models.time_series import (
    SARIMAX, ModelOrder, SARIMAXConfig, SARIMAXResult, build_design,
    difference, difference_exog, estimate, fitted_values, integrate, residuals,
    starting_values, sum_of_squares
)
from arima.models.time_series.forecast import forecast, prepare_future_exog
from tests.conftest import simulate_sarimax


class TestModelOrder:
    """Tests for order validation and derived lag lengths."""

    def test_derived_lengths(self):
        order = ModelOrder(p=2, d=1, q=1, P=1, D=1, Q=0, s=12)
        assert order.burn_in == 12
        assert order.integration_length == 13
        assert order.ar_lag == 12
        assert order.ma_lag == 1
        assert order.n_arma_params == 4
        assert order.min_length == 26

    def test_period_ignored_without_seasonal_block(self):
        order = ModelOrder.from_tuples((1, 0, 1), (0, 0, 0, 12))
        assert order.s == 0
        assert order.burn_in == 1
        assert str(order) == "(1,0,1)"

    def test_seasonal_str(self):
        order = ModelOrder.from_tuples((1, 1, 0), (0, 1, 1, 4))
        assert str(order) == "(1,1,0)(0,1,1)4"

    @pytest.mark.parametrize("order, seasonal_order", [
        ((-1, 0, 0), (0, 0, 0, 0)),
        ((0, 0, 0), (1, 0, 0, 1)),
        ((0, 0, 0), (0, 1, 0, 0)),
        ((1.5, 0, 0), (0, 0, 0, 0)),
        ((1, 0), (0, 0, 0, 0)),
        ((1, 0, 0), (0, 0, 0)),
    ])
    def test_invalid_orders(self, order, seasonal_order):
        with pytest.raises(InvalidOrderError):
            ModelOrder.from_tuples(order, seasonal_order)

    def test_invalid_order_is_parameter_error(self):
        with pytest.raises(ParameterError):
            ModelOrder(p=-1)


class TestDifferencing:
    """Tests for lag differencing and integration."""

    def test_first_difference(self):
        y = np.array([1.0, 4.0, 9.0, 16.0])
        np.testing.assert_array_equal(difference(y, d=1), [3.0, 5.0, 7.0])
        np.testing.assert_array_equal(difference(y, d=2), [2.0, 2.0])

    def test_seasonal_difference(self):
        y = np.arange(10, dtype=float) ** 2
        expected = y[4:] - y[:-4]
        np.testing.assert_allclose(difference(y, D=1, s=4), expected)

    def test_no_difference_returns_copy(self):
        y = np.array([1.0, 2.0, 3.0])
        result = difference(y)
        result[0] = 99.0
        assert y[0] == 1.0

    def test_too_short(self):
        with pytest.raises(InsufficientHistoryError) as exc_info:
            difference(np.arange(4.0), d=1, D=1, s=4)
        assert exc_info.value.required == 6
        assert exc_info.value.available == 4

    def test_seasonal_difference_needs_period(self):
        with pytest.raises(InvalidOrderError):
            difference(np.arange(10.0), D=1, s=1)

    def test_exog_columns_differenced_independently(self):
        x = np.column_stack([np.arange(6.0), np.arange(6.0) ** 2])
        result = difference_exog(x, d=1)
        np.testing.assert_array_equal(result[:, 0], np.ones(5))
        np.testing.assert_array_equal(result[:, 1], [1.0, 3.0, 5.0, 7.0, 9.0])

    def test_empty_exog_passes_through(self):
        result = difference_exog(np.zeros((10, 0)), d=1, D=1, s=3)
        assert result.shape == (6, 0)

    def test_integrate_inverts_first_difference(self):
        y = np.array([2.0, 5.0, 4.0, 8.0])
        np.testing.assert_allclose(integrate(np.array([1.0, -2.0]), y, d=1), [9.0, 7.0])

    def test_integrate_needs_history(self):
        with pytest.raises(InsufficientHistoryError):
            integrate(np.zeros(3), np.zeros(4), d=1, D=1, s=4)

    @settings(max_examples=50, deadline=None)
    @given(st.data())
    def test_integrate_recovers_series(self, data):
        d = data.draw(st.integers(min_value=0, max_value=2), label="d")
        D = data.draw(st.integers(min_value=0, max_value=1), label="D")
        s = data.draw(st.integers(min_value=2, max_value=4), label="s")
        L = d + s * D
        n = data.draw(st.integers(min_value=L + 2, max_value=L + 30), label="n")
        y = np.array(data.draw(st.lists(
            st.floats(min_value=-100, max_value=100, allow_nan=False),
            min_size=n, max_size=n
        ), label="y"))
        m = data.draw(st.integers(min_value=L, max_value=n - 1), label="m")

        w = difference(y, d, D, s)
        recovered = integrate(w[m - L:], y[:m], d, D, s)
        np.testing.assert_allclose(recovered, y[m:], atol=1e-6)

    def test_pure_python_kernels_match(self):
        y = np.cumsum(np.arange(20.0))
        np.testing.assert_array_equal(
            difference(y, d=1, D=1, s=3, use_numba=True),
            difference(y, d=1, D=1, s=3, use_numba=False)
        )


class TestDesignMatrix:
    """Tests for the lagged regression matrix."""

    def test_columns(self):
        y = np.arange(10.0)
        x = np.arange(10.0).reshape(-1, 1) * 10
        order = ModelOrder.from_tuples((2, 0, 0), (1, 0, 0, 3))
        design = build_design(y, x, order)

        assert design.start == 3
        assert design.nobs == 7
        assert design.column_names == ["ar.L1", "ar.L2", "ar.S.L3", "x1", "intercept"]
        np.testing.assert_array_equal(design.X[0], [2.0, 1.0, 0.0, 30.0, 1.0])
        np.testing.assert_array_equal(design.y, y[3:])

    def test_without_constant(self):
        design = build_design(np.arange(5.0), None, ModelOrder(p=1), include_constant=False)
        assert design.X.shape == (4, 1)

    def test_exog_row_mismatch(self):
        with pytest.raises(RegressorShapeMismatchError):
            build_design(np.arange(5.0), np.zeros((4, 1)), ModelOrder(p=1))

    def test_no_rows_left(self):
        with pytest.raises(InsufficientHistoryError):
            build_design(np.arange(3.0), None, ModelOrder(p=3))


class TestInnovations:
    """Tests for the innovation filter."""

    def test_burn_in_is_zero(self):
        y = np.array([1.0, 2.0, 0.5, 3.0])
        order = ModelOrder(p=1, q=2)
        e = residuals(np.array([0.5, 0.1, 0.2, 0.0]), y, None, order)
        np.testing.assert_array_equal(e[:2], [0.0, 0.0])

    def test_ar_ma_recursion(self):
        y = np.array([1.0, 2.0, 0.5, 3.0])
        order = ModelOrder(p=1, q=1)
        params = np.array([0.5, 0.4, 1.0])
        e = residuals(params, y, None, order)

        e1 = 2.0 - 1.0 - 0.5 * 1.0
        e2 = 0.5 - 1.0 - 0.5 * 2.0 - 0.4 * e1
        e3 = 3.0 - 1.0 - 0.5 * 0.5 - 0.4 * e2
        np.testing.assert_allclose(e, [0.0, e1, e2, e3])

    def test_additive_seasonal_terms(self):
        y = np.arange(1.0, 9.0)
        order = ModelOrder.from_tuples((1, 0, 0), (1, 0, 0, 4))
        params = np.array([0.3, 0.5])
        e = residuals(params, y, None, order, include_constant=False)
        t = 6
        assert e[t] == pytest.approx(y[t] - 0.3 * y[t - 1] - 0.5 * y[t - 4])

    def test_seasonal_ma_recursion(self):
        y = np.array([1.0, -0.5, 2.0, 0.3, 1.5, -1.0, 0.8, 2.2, -0.4, 1.1])
        order = ModelOrder.from_tuples((0, 0, 1), (0, 0, 1, 4))
        params = np.array([0.4, 0.5, 0.2])
        e = residuals(params, y, None, order)

        expected = np.zeros(10)
        expected[4] = y[4] - 0.2
        expected[5] = y[5] - 0.2 - 0.4 * expected[4]
        expected[6] = y[6] - 0.2 - 0.4 * expected[5]
        expected[7] = y[7] - 0.2 - 0.4 * expected[6]
        expected[8] = y[8] - 0.2 - 0.4 * expected[7] - 0.5 * expected[4]
        expected[9] = y[9] - 0.2 - 0.4 * expected[8] - 0.5 * expected[5]
        np.testing.assert_allclose(e, expected)

    def test_fitted_values_plus_residuals(self, ar1_series):
        order = ModelOrder(p=1)
        params = np.array([0.5, 1.0])
        e = residuals(params, ar1_series, None, order)
        fitted = fitted_values(params, ar1_series, None, order)
        np.testing.assert_allclose(fitted + e[1:], ar1_series[1:])

    def test_sum_of_squares(self, ar1_series):
        order = ModelOrder(p=1)
        params = np.array([0.5, 1.0])
        e = residuals(params, ar1_series, None, order)
        assert sum_of_squares(params, ar1_series, None, order) == pytest.approx(np.sum(e[1:] ** 2))

    def test_wrong_param_length(self):
        with pytest.raises(ParameterError):
            residuals(np.zeros(3), np.arange(5.0), None, ModelOrder(p=1))


class TestEstimation:
    """Tests for conditional sum-of-squares estimation."""

    def test_ar1_recovers_coefficient(self, ar1_series):
        output = estimate(ar1_series, None, ModelOrder(p=1))
        assert output.converged
        assert output.params[0] == pytest.approx(0.5, abs=0.1)
        assert output.params[1] == pytest.approx(1.0, abs=0.2)
        assert output.sigma2 == pytest.approx(1.0, abs=0.2)

    def test_starting_values_are_ols(self, ar2_series):
        order = ModelOrder(p=2)
        start = starting_values(ar2_series, np.zeros((len(ar2_series), 0)), order)
        design = build_design(ar2_series, None, order)
        expected = np.linalg.lstsq(design.X, design.y, rcond=None)[0]
        np.testing.assert_allclose(start, expected)

    def test_ma_starts_at_zero(self, arma11_series):
        start = starting_values(arma11_series, np.zeros((len(arma11_series), 0)),
                                ModelOrder(p=1, q=1))
        assert start[1] == 0.0

    def test_ar_matches_statsmodels_autoreg(self, ar2_series):
        output = estimate(ar2_series, None, ModelOrder(p=2))
        reference = AutoReg(ar2_series, lags=2, trend="c").fit()
        # AutoReg orders the constant first
        np.testing.assert_allclose(output.params[:2], reference.params[1:], atol=1e-5)
        assert output.params[2] == pytest.approx(reference.params[0], abs=1e-5)

    def test_arma11_recovers_coefficients(self, arma11_series):
        output = estimate(arma11_series, None, ModelOrder(p=1, q=1), include_constant=False)
        assert output.params[0] == pytest.approx(0.5, abs=0.1)
        assert output.params[1] == pytest.approx(0.3, abs=0.1)

    def test_zero_order_intercept_is_mean(self, rng):
        y = 3.0 + rng.standard_normal(200)
        output = estimate(y, None, ModelOrder())
        assert output.params[0] == pytest.approx(np.mean(y), abs=1e-6)

    def test_no_free_coefficients(self, random_walk):
        w = difference(random_walk, d=1)
        output = estimate(w, None, ModelOrder(), include_constant=False)
        assert len(output.params) == 0
        assert output.sigma2 == pytest.approx(np.mean(w ** 2))

    def test_zero_variance_is_degenerate(self):
        with pytest.raises(DegenerateFitError):
            estimate(np.zeros(50), None, ModelOrder(p=1), include_constant=False)

    def test_iteration_budget_warns(self, rng):
        y = simulate_sarimax(rng, 500, ar=(0.5, 0.2), ma=(0.6, 0.3))
        config = SARIMAXConfig(max_iter=1, fallback_solver=None)
        with pytest.warns(ConvergenceWarning):
            output = estimate(y, None, ModelOrder(p=2, q=2), config)
        assert not output.converged
        assert np.all(np.isfinite(output.params))

    def test_covariance_is_symmetric(self, ar1_series):
        output = estimate(ar1_series, None, ModelOrder(p=1))
        cov = output.cov_params
        np.testing.assert_allclose(cov, cov.T)
        assert np.all(np.diag(cov) > 0)

    def test_covariance_skipped(self, ar1_series):
        config = SARIMAXConfig(compute_std_errors=False)
        assert estimate(ar1_series, None, ModelOrder(p=1), config).cov_params is None

    def test_covariance_leaves_estimates_unchanged(self, arma11_series):
        order = ModelOrder(p=1, q=1)
        with_cov = estimate(arma11_series, None, order, SARIMAXConfig(compute_std_errors=True))
        without_cov = estimate(arma11_series, None, order, SARIMAXConfig(compute_std_errors=False))
        np.testing.assert_array_equal(with_cov.params, without_cov.params)
        assert with_cov.sigma2 == without_cov.sigma2
        np.testing.assert_array_equal(with_cov.residuals, without_cov.residuals)

    @pytest.mark.parametrize("solver", ["BFGS", "Powell", "Nelder-Mead"])
    def test_alternative_solvers(self, ar1_series, solver):
        config = SARIMAXConfig(solver=solver)
        output = estimate(ar1_series, None, ModelOrder(p=1), config)
        assert output.params[0] == pytest.approx(0.5, abs=0.1)


class TestForecast:
    """Tests for multi-step forecasting."""

    def test_ar1_decays_to_mean(self, ar1_series):
        model = SARIMAX.autoregressive(1)
        model.fit(ar1_series)
        phi = model.params.ar_params[0]
        mu = model.params.constant / (1 - phi)

        forecasts = model.predict(20)
        expected = mu + phi ** np.arange(1, 21) * (ar1_series[-1] - mu)
        np.testing.assert_allclose(forecasts, expected, rtol=1e-10)

    def test_zero_order_forecast_is_constant(self, rng):
        y = 5.0 + rng.standard_normal(100)
        model = SARIMAX(order=(0, 0, 0))
        model.fit(y)
        forecasts = model.predict(7)
        np.testing.assert_allclose(forecasts, np.full(7, model.params.constant))

    def test_random_walk_forecast_is_last_value(self, random_walk):
        model = SARIMAX.arima(0, 1, 0, include_constant=False)
        model.fit(random_walk)
        np.testing.assert_allclose(model.predict(5), np.full(5, random_walk[-1]))

    def test_random_walk_with_drift(self, random_walk):
        model = SARIMAX.arima(0, 1, 0)
        model.fit(random_walk)
        drift = model.params.constant
        expected = random_walk[-1] + drift * np.arange(1, 6)
        np.testing.assert_allclose(model.predict(5), expected)
        assert drift == pytest.approx(np.mean(np.diff(random_walk)), abs=1e-6)

    def test_seasonal_random_walk_repeats_last_season(self, rng):
        y = 20.0 + np.cumsum(rng.standard_normal(80))
        model = SARIMAX(order=(0, 0, 0), seasonal_order=(0, 1, 0, 4), include_constant=False)
        model.fit(y)
        np.testing.assert_allclose(model.predict(8), np.tile(y[-4:], 2))

    def test_seasonal_ar(self, seasonal_series):
        model = SARIMAX(order=(0, 0, 0), seasonal_order=(1, 0, 0, 4))
        model.fit(seasonal_series)
        assert model.params.seasonal_ar_params[0] == pytest.approx(0.6, abs=0.1)

        forecasts = model.predict(4)
        Phi = model.params.seasonal_ar_params[0]
        expected = model.params.constant + Phi * seasonal_series[-4:]
        np.testing.assert_allclose(forecasts, expected)

    def test_ma_forecast_uses_residual_tail(self, rng):
        y = simulate_sarimax(rng, 600, ma=(0.6,), constant=1.0)
        model = SARIMAX.moving_average(1)
        result = model.fit(y)
        c = model.params.constant
        theta = model.params.ma_params[0]

        forecasts = model.predict(3)
        assert forecasts[0] == pytest.approx(c + theta * result.residuals[-1])
        np.testing.assert_allclose(forecasts[1:], [c, c])

    def test_seasonal_ma_forecast_within_period(self, rng):
        e = rng.standard_normal(604)
        y = 0.5 + e[4:] + 0.5 * e[:-4]
        model = SARIMAX(order=(0, 0, 0), seasonal_order=(0, 0, 1, 4))
        result = model.fit(y)
        c = model.params.constant
        Theta = model.params.seasonal_ma_params[0]
        assert Theta == pytest.approx(0.5, abs=0.1)

        forecasts = model.predict(8)
        np.testing.assert_allclose(forecasts[:4], c + Theta * result.residuals[-4:])
        np.testing.assert_allclose(forecasts[4:], np.full(4, c))

    def test_seasonal_differencing_with_exog_and_seasonal_ma(self, rng):
        n = 300
        x = rng.standard_normal((n + 6, 2))
        noise = simulate_sarimax(rng, n, ar=(0.3,), ma=(0.2,))
        seasonal = np.tile([1.0, -1.0, 2.0, 0.5], n // 4)
        y = 50.0 + np.cumsum(noise) + seasonal + x[:n] @ np.array([1.5, -0.5])

        model = SARIMAX(order=(1, 1, 1), seasonal_order=(1, 1, 1, 4))
        model.fit(y, x[:n], max_iter=200)
        state = model.state

        assert state.k_exog == 2
        assert state.exog_tail.shape == (5, 2)
        assert state.resid_tail.shape == (4,)
        np.testing.assert_array_equal(state.y_tail, y[-5:])

        forecasts = model.predict(6, x[n:])
        assert forecasts.shape == (6,)
        assert np.all(np.isfinite(forecasts))
        np.testing.assert_array_equal(forecasts, model.predict(6, x[n:]))

        python = forecast(dataclasses.replace(state, use_numba=False), 6, x[n:])
        np.testing.assert_allclose(python, forecasts)

    def test_exog_forecast(self, exog_data, rng):
        y, x = exog_data
        model = SARIMAX(order=(1, 0, 0))
        model.fit(y, x)
        assert model.params.exog_params[0] == pytest.approx(2.0, abs=0.15)

        x_future = rng.standard_normal((5, 1))
        forecasts = model.predict(5, x_future)
        assert forecasts.shape == (5,)
        assert np.all(np.isfinite(forecasts))

    def test_exog_row_mismatch(self, exog_data):
        y, x = exog_data
        model = SARIMAX(order=(1, 0, 0))
        model.fit(y, x)
        with pytest.raises(RegressorShapeMismatchError):
            model.predict(5, np.zeros((4, 1)))

    def test_exog_column_mismatch(self, exog_data):
        y, x = exog_data
        model = SARIMAX(order=(1, 0, 0))
        model.fit(y, x)
        with pytest.raises(RegressorShapeMismatchError):
            model.predict(5, np.zeros((5, 2)))

    def test_missing_future_exog(self, exog_data):
        y, x = exog_data
        model = SARIMAX(order=(1, 0, 0))
        model.fit(y, x)
        with pytest.raises(RegressorShapeMismatchError):
            model.predict(5)

    def test_unexpected_future_exog(self, ar1_series):
        model = SARIMAX(order=(1, 0, 0))
        model.fit(ar1_series)
        with pytest.raises(RegressorShapeMismatchError):
            model.predict(5, np.zeros((5, 1)))

    def test_exog_differenced_with_tail(self, rng):
        x = np.cumsum(rng.standard_normal(200))
        y = 10.0 + 1.5 * x + rng.standard_normal(200) * 0.1
        model = SARIMAX.arima(0, 1, 0, include_constant=False)
        model.fit(y, x)

        x_future = x[-1] + np.array([1.0, 2.0, 3.0])
        diffs = prepare_future_exog(model.state, 3, x_future.reshape(-1, 1))
        np.testing.assert_allclose(diffs[:, 0], [1.0, 1.0, 1.0])

        beta = model.params.exog_params[0]
        np.testing.assert_allclose(model.predict(3, x_future),
                                   y[-1] + beta * np.array([1.0, 2.0, 3.0]))

    @pytest.mark.parametrize("steps", [0, -1, 1.5, True, "3"])
    def test_invalid_horizon(self, ar1_series, steps):
        model = SARIMAX.autoregressive(1)
        model.fit(ar1_series)
        with pytest.raises(ForecastError):
            model.predict(steps)

    def test_predict_is_idempotent(self, ar1_series):
        model = SARIMAX.arima(1, 1, 1)
        model.fit(ar1_series)
        first = model.predict(10)
        second = model.predict(10)
        np.testing.assert_array_equal(first, second)

    def test_forecast_leaves_state_untouched(self, ar1_series):
        model = SARIMAX.arima(1, 1, 1)
        model.fit(ar1_series)
        state = model.state
        diff_tail = state.diff_tail.copy()
        resid_tail = state.resid_tail.copy()
        coefs = state.coefs.copy()

        forecast(state, 12)

        assert model.state is state
        np.testing.assert_array_equal(state.diff_tail, diff_tail)
        np.testing.assert_array_equal(state.resid_tail, resid_tail)
        np.testing.assert_array_equal(state.coefs, coefs)

    def test_state_tails_are_read_only(self, ar1_series):
        model = SARIMAX.arima(1, 1, 0)
        model.fit(ar1_series)
        with pytest.raises(ValueError):
            model.state.y_tail[0] = 0.0

    def test_longer_horizon_extends_shorter(self, ar1_series):
        model = SARIMAX.arima(2, 1, 1)
        model.fit(ar1_series)
        np.testing.assert_allclose(model.predict(12)[:5], model.predict(5))


class TestSARIMAX:
    """Tests for the model lifecycle."""

    def test_unfit_model(self):
        model = SARIMAX()
        assert not model.fitted
        with pytest.raises(ModelNotFitError):
            model.predict(3)
        with pytest.raises(ModelNotFitError):
            _ = model.params

    def test_default_order(self):
        model = SARIMAX()
        assert model.order == ModelOrder(p=1)
        assert model.include_constant

    @pytest.mark.parametrize("factory, args, tuples, name", [
        (SARIMAX.arima, (1, 1, 2), ((1, 1, 2), (0, 0, 0, 0)), "ARIMA"),
        (SARIMAX.arma, (2, 1), ((2, 0, 1), (0, 0, 0, 0)), "ARMA"),
        (SARIMAX.autoregressive, (3,), ((3, 0, 0), (0, 0, 0, 0)), "AR"),
        (SARIMAX.moving_average, (2,), ((0, 0, 2), (0, 0, 0, 0)), "MA"),
    ])
    def test_presets(self, factory, args, tuples, name):
        model = factory(*args)
        assert model.order.to_tuples() == tuples
        assert model.name == name

    def test_sarima_preset(self):
        model = SARIMAX.sarima((1, 0, 0), (0, 1, 1, 12))
        assert model.order == ModelOrder(p=1, D=1, Q=1, s=12)
        assert model.name == "SARIMA"

    def test_invalid_seasonal_period(self):
        with pytest.raises(InvalidOrderError):
            SARIMAX(order=(0, 0, 0), seasonal_order=(1, 0, 0, 1))

    def test_fit_result(self, ar1_series):
        model = SARIMAX.autoregressive(1)
        result = model.fit(ar1_series)

        assert isinstance(result, SARIMAXResult)
        assert model.fitted
        assert list(result.params) == ["ar.L1", "intercept"]
        assert result.nobs == len(ar1_series) - 1
        assert result.df_model == 3
        assert result.df_resid == result.nobs - 3
        assert np.isfinite(result.aic) and np.isfinite(result.bic) and np.isfinite(result.hqic)
        assert result.std_errors["ar.L1"] > 0
        assert result.p_values["ar.L1"] < 0.01
        assert len(result.fitted_values) == result.nobs
        assert "ar.L1" in result.summary()
        assert result.to_dict()["params"]["ar.L1"] == pytest.approx(result.params["ar.L1"])

    def test_log_likelihood(self, ar1_series):
        model = SARIMAX.autoregressive(1)
        result = model.fit(ar1_series)
        m = result.nobs
        expected = -0.5 * m * (np.log(2 * np.pi * result.sigma2) + 1)
        assert result.log_likelihood == pytest.approx(expected)
        assert result.aic == pytest.approx(-2 * expected + 2 * result.df_model)

    def test_accepts_pandas(self, ar1_frame, ar1_series):
        from_pandas = SARIMAX.autoregressive(1)
        from_pandas.fit(ar1_frame)
        from_numpy = SARIMAX.autoregressive(1)
        from_numpy.fit(ar1_series)
        np.testing.assert_allclose(from_pandas.coefs, from_numpy.coefs)

    def test_exog_dataframe(self, exog_data):
        y, x = exog_data
        model = SARIMAX(order=(1, 0, 0))
        model.fit(pd.Series(y), pd.DataFrame({"x": x}))
        assert model.state.k_exog == 1

    def test_refit_replaces_state(self, ar1_series, random_walk):
        model = SARIMAX.arima(1, 1, 0)
        model.fit(ar1_series)
        first = model.state
        model.fit(random_walk)

        assert model.state is not first
        np.testing.assert_array_equal(model.state.y_tail, random_walk[-1:])

    def test_failed_fit_keeps_previous_state(self, ar1_series):
        model = SARIMAX.arima(2, 1, 0)
        model.fit(ar1_series)
        state = model.state
        result = model.results

        with pytest.raises(InsufficientHistoryError):
            model.fit(ar1_series[:3])

        assert model.state is state
        assert model.results is result

    def test_failed_first_fit_stays_unfit(self):
        model = SARIMAX(order=(1, 0, 0), include_constant=False)
        with pytest.raises(DegenerateFitError):
            model.fit(np.zeros(40))
        assert not model.fitted

    def test_minimum_length(self, rng):
        assert SARIMAX.arima(2, 1, 0).order.min_length == 4
        with pytest.raises(InsufficientHistoryError):
            SARIMAX.arima(2, 1, 0).fit(rng.standard_normal(3))

        model = SARIMAX.arima(0, 1, 0, include_constant=False)
        with pytest.raises(InsufficientHistoryError):
            model.fit(rng.standard_normal(1))
        model.fit(rng.standard_normal(2))
        assert model.fitted

    def test_invalid_data(self):
        model = SARIMAX()
        with pytest.raises(DataError):
            model.fit(np.array([1.0, np.nan, 2.0, 3.0]))
        with pytest.raises(DataError):
            model.fit(np.array([]))

    def test_exog_rows_must_match(self, ar1_series):
        model = SARIMAX()
        with pytest.raises(RegressorShapeMismatchError):
            model.fit(ar1_series, np.zeros((len(ar1_series) - 1, 1)))

    def test_unknown_option(self, ar1_series):
        with pytest.raises(ParameterError):
            SARIMAX().fit(ar1_series, solver_name="BFGS")

    def test_pure_python_matches_compiled(self, ar1_series):
        compiled = SARIMAX.arima(1, 1, 1)
        compiled.fit(ar1_series, use_numba=True)
        python = SARIMAX.arima(1, 1, 1)
        python.fit(ar1_series, use_numba=False)

        np.testing.assert_allclose(python.coefs, compiled.coefs, atol=1e-4)
        np.testing.assert_allclose(python.predict(6), compiled.predict(6), rtol=1e-4)

    def test_fit_predict(self, ar1_series):
        model = SARIMAX.autoregressive(1)
        forecasts = model.forecast(ar1_series, 4)
        np.testing.assert_array_equal(forecasts, model.predict(4))

    def test_repr(self):
        model = SARIMAX.arima(1, 1, 1)
        assert "order=(1, 1, 1)" in repr(model)
        assert "fitted=False" in repr(model)

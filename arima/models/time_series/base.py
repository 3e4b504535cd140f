# arima/models/time_series/base.py
"""
Model order, configuration, fitted state and result types for SARIMAX models.

``ModelOrder`` validates the seven order integers once and derives the lag
lengths every other component depends on. ``SARIMAXConfig`` carries the
estimation options for one fit, ``FittedState`` is the immutable snapshot the
forecast engine reads, and ``SARIMAXResult`` is what ``fit`` hands back to the
caller.
"""

import logging
import numbers
from dataclasses import asdict, dataclass, field, fields, replace
from typing import Any, Dict, Optional, Sequence

import numpy as np

from arima.core.base import ModelResult
from arima.core.config import SUPPORTED_SOLVERS, get_core_config, get_numerical_config
from arima.core.exceptions import InvalidOrderError, ParameterError
from arima.core.parameters import SARIMAXParameters

logger = logging.getLogger("arima.models.time_series.base")


@dataclass(frozen=True)
class ModelOrder:
    """Orders of a seasonal ARIMA model.

    Attributes:
        p: Non-seasonal autoregressive order
        d: Number of first differences
        q: Non-seasonal moving average order
        P: Seasonal autoregressive order
        D: Number of seasonal differences
        Q: Seasonal moving average order
        s: Seasonal period; must exceed one whenever P, D or Q is non-zero and
            is otherwise ignored
    """

    p: int = 0
    d: int = 0
    q: int = 0
    P: int = 0
    D: int = 0
    Q: int = 0
    s: int = 0

    def __post_init__(self) -> None:
        for f in fields(self):
            value = getattr(self, f.name)
            if isinstance(value, bool) or not isinstance(value, numbers.Integral):
                raise InvalidOrderError(
                    f"Order {f.name} must be an integer, got {value!r}",
                    param_name=f.name,
                    param_value=value,
                    constraint="integer"
                )
            if value < 0:
                raise InvalidOrderError(
                    f"Order {f.name} must be non-negative, got {value}",
                    param_name=f.name,
                    param_value=value,
                    constraint=">= 0"
                )
            object.__setattr__(self, f.name, int(value))

        if self.has_seasonal and self.s <= 1:
            raise InvalidOrderError(
                f"Seasonal period must be greater than 1 when seasonal orders are set, got s={self.s}",
                param_name="s",
                param_value=self.s,
                constraint="s > 1 when P, D or Q > 0"
            )

        # Without a seasonal block the period plays no role.
        if not self.has_seasonal:
            object.__setattr__(self, "s", 0)

    @classmethod
    def from_tuples(cls, order: Sequence[int] = (0, 0, 0),
                    seasonal_order: Sequence[int] = (0, 0, 0, 0)) -> 'ModelOrder':
        """Build an order from ``(p, d, q)`` and ``(P, D, Q, s)`` tuples.

        Raises:
            InvalidOrderError: If a tuple has the wrong length or an order is invalid
        """
        if len(order) != 3:
            raise InvalidOrderError(
                f"order must have 3 elements (p, d, q), got {len(order)}",
                param_name="order",
                param_value=tuple(order),
                constraint="length 3"
            )
        if len(seasonal_order) != 4:
            raise InvalidOrderError(
                f"seasonal_order must have 4 elements (P, D, Q, s), got {len(seasonal_order)}",
                param_name="seasonal_order",
                param_value=tuple(seasonal_order),
                constraint="length 4"
            )
        p, d, q = order
        P, D, Q, s = seasonal_order
        return cls(p=p, d=d, q=q, P=P, D=D, Q=Q, s=s)

    @property
    def has_seasonal(self) -> bool:
        return self.P > 0 or self.D > 0 or self.Q > 0

    @property
    def burn_in(self) -> int:
        """Number of leading differenced observations without full lag history."""
        return max(self.p, self.s * self.P, self.q, self.s * self.Q)

    @property
    def integration_length(self) -> int:
        """Observations consumed by differencing."""
        return self.d + self.s * self.D

    @property
    def ar_lag(self) -> int:
        return max(self.p, self.s * self.P)

    @property
    def ma_lag(self) -> int:
        return max(self.q, self.s * self.Q)

    @property
    def n_arma_params(self) -> int:
        return self.p + self.P + self.q + self.Q

    @property
    def min_length(self) -> int:
        """Smallest series length that leaves one usable residual."""
        return self.integration_length + self.burn_in + 1

    def to_tuples(self):
        return (self.p, self.d, self.q), (self.P, self.D, self.Q, self.s)

    def __str__(self) -> str:
        (p, d, q), (P, D, Q, s) = self.to_tuples()
        if self.has_seasonal:
            return f"({p},{d},{q})({P},{D},{Q}){s}"
        return f"({p},{d},{q})"


@dataclass
class SARIMAXConfig:
    """Estimation options for a single fit.

    Defaults are seeded from the ``numerical`` and ``core`` sections of the
    package configuration by ``from_global``.

    Attributes:
        solver: Primary ``scipy.optimize.minimize`` method
        fallback_solver: Method used from the best point when the primary fails
            (None disables the fallback)
        max_iter: Iteration budget for each solver run
        tol: Relative objective decrease that counts as convergence
        use_numba: Whether to run the compiled kernels
        compute_std_errors: Whether to compute the Hessian-based covariance
        step: Relative step for numerical derivatives
    """

    solver: str = "L-BFGS-B"
    fallback_solver: Optional[str] = "Powell"
    max_iter: int = 500
    tol: float = 1e-8
    use_numba: bool = True
    compute_std_errors: bool = True
    step: float = 1e-5

    def __post_init__(self) -> None:
        if self.solver not in SUPPORTED_SOLVERS:
            raise ParameterError(
                f"Invalid solver: {self.solver}",
                param_name="solver",
                param_value=self.solver,
                constraint=f"Must be one of {list(SUPPORTED_SOLVERS)}"
            )
        if self.fallback_solver is not None and self.fallback_solver not in SUPPORTED_SOLVERS:
            raise ParameterError(
                f"Invalid fallback solver: {self.fallback_solver}",
                param_name="fallback_solver",
                param_value=self.fallback_solver,
                constraint=f"Must be None or one of {list(SUPPORTED_SOLVERS)}"
            )
        if isinstance(self.max_iter, bool) or not isinstance(self.max_iter, numbers.Integral) \
                or self.max_iter <= 0:
            raise ParameterError(
                f"Invalid max_iter: {self.max_iter}",
                param_name="max_iter",
                param_value=self.max_iter,
                constraint="Must be a positive integer"
            )
        if not 0 < self.tol < 1:
            raise ParameterError(
                f"Invalid tol: {self.tol}",
                param_name="tol",
                param_value=self.tol,
                constraint="Must be between 0 and 1"
            )
        if not 0 < self.step < 1:
            raise ParameterError(
                f"Invalid step: {self.step}",
                param_name="step",
                param_value=self.step,
                constraint="Must be between 0 and 1"
            )

    @classmethod
    def from_global(cls, **overrides: Any) -> 'SARIMAXConfig':
        """Create a configuration from the package settings plus overrides.

        Raises:
            ParameterError: If an override names an unknown option or is invalid
        """
        numerical = get_numerical_config()
        core = get_core_config()
        config = cls(
            solver=numerical.solver,
            fallback_solver=numerical.fallback_solver,
            max_iter=numerical.max_iterations,
            tol=numerical.tolerance,
            use_numba=core.enable_numba,
            compute_std_errors=numerical.compute_std_errors,
            step=numerical.finite_difference_step
        )
        return config.with_overrides(**overrides) if overrides else config

    def with_overrides(self, **overrides: Any) -> 'SARIMAXConfig':
        """Return a copy with the given fields replaced."""
        valid_keys = {f.name for f in fields(self)}
        unknown = sorted(set(overrides) - valid_keys)
        if unknown:
            raise ParameterError(
                f"Unknown estimation option(s): {', '.join(unknown)}",
                param_name=unknown[0],
                param_value=overrides[unknown[0]],
                constraint=f"Must be one of {sorted(valid_keys)}"
            )
        return replace(self, **overrides)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class FittedState:
    """Everything the forecast engine needs from a fit.

    Instances are never mutated; a refit builds a new one.

    Attributes:
        order: Model orders
        params: Estimated coefficients (read-only arrays)
        include_constant: Whether the model has an intercept
        sigma2: Innovation variance
        y_tail: Last ``integration_length`` observations on the original scale
        diff_tail: Last ``ar_lag`` values of the differenced series
        resid_tail: Last ``ma_lag`` residuals
        exog_tail: Last ``integration_length`` raw exogenous rows
        k_exog: Number of exogenous columns seen at fit time
        converged: Whether the optimizer met its tolerance
        iterations: Number of optimizer iterations
        objective: Final mean squared innovation
        use_numba: Whether forecasting runs the compiled kernels
    """

    order: ModelOrder
    params: SARIMAXParameters
    include_constant: bool
    sigma2: float
    y_tail: np.ndarray
    diff_tail: np.ndarray
    resid_tail: np.ndarray
    exog_tail: np.ndarray
    k_exog: int = 0
    converged: bool = True
    iterations: int = 0
    objective: float = np.nan
    use_numba: bool = True

    def __post_init__(self) -> None:
        for name in ("y_tail", "diff_tail", "resid_tail", "exog_tail"):
            array = np.array(getattr(self, name), dtype=np.float64, copy=True)
            array.flags.writeable = False
            object.__setattr__(self, name, array)

    @property
    def coefs(self) -> np.ndarray:
        """Packed coefficient vector ``[AR, SAR, MA, SMA, exog, intercept]``."""
        return self.params.to_array(self.include_constant)


def information_criteria(log_likelihood: float, n_params: int, nobs: int) -> Dict[str, float]:
    """AIC, BIC and HQIC for a log-likelihood with ``n_params`` free parameters."""
    aic = -2 * log_likelihood + 2 * n_params
    bic = -2 * log_likelihood + np.log(nobs) * n_params
    hqic = -2 * log_likelihood + 2 * np.log(np.log(nobs)) * n_params if nobs > 1 else np.nan
    return {"aic": float(aic), "bic": float(bic), "hqic": float(hqic)}


@dataclass
class SARIMAXResult(ModelResult):
    """Estimation results of a SARIMAX model.

    Attributes:
        order: Model orders
        params: Estimated coefficients keyed by name
        std_errors: Standard errors (NaN when unavailable)
        t_stats: t-statistics (NaN when unavailable)
        p_values: Two-sided p-values (NaN when unavailable)
        sigma2: Innovation variance
        hqic: Hannan-Quinn information criterion
        residuals: Residuals on the differenced scale, zero before the burn-in
        fitted_values: One-step fitted values on the differenced scale
        cov_params: Covariance matrix of the coefficient estimates
        nobs: Number of residuals entering the objective
        df_model: Number of estimated coefficients plus the variance
        df_resid: ``nobs - df_model``
        objective: Final mean squared innovation
        message: Optimizer status message
    """

    order: Optional[ModelOrder] = None
    params: Dict[str, float] = field(default_factory=dict)
    std_errors: Dict[str, float] = field(default_factory=dict)
    t_stats: Dict[str, float] = field(default_factory=dict)
    p_values: Dict[str, float] = field(default_factory=dict)
    sigma2: float = np.nan
    hqic: Optional[float] = None
    residuals: np.ndarray = field(default_factory=lambda: np.zeros(0))
    fitted_values: np.ndarray = field(default_factory=lambda: np.zeros(0))
    cov_params: Optional[np.ndarray] = None
    nobs: Optional[int] = None
    df_model: Optional[int] = None
    df_resid: Optional[int] = None
    objective: float = np.nan
    message: str = ""

    def summary(self) -> str:
        """Generate a text summary of the model results.

        Returns:
            str: A formatted string containing the model results summary.
        """
        header = f"Model: {self.model_name}"
        if self.order is not None:
            header += f" {self.order}"
        header += "\n" + "=" * len(header) + "\n\n"

        convergence_info = f"Convergence: {'Yes' if self.convergence else 'No'}\n"
        convergence_info += f"Iterations: {self.iterations}\n"
        if self.message:
            convergence_info += f"Optimizer message: {self.message}\n"
        convergence_info += "\n"

        param_table = "Parameter Estimates:\n"
        param_table += "-" * 80 + "\n"
        param_table += f"{'Parameter':<15} {'Estimate':>12} {'Std. Error':>12} "
        param_table += f"{'t-stat':>12} {'p-value':>12} {'Significance':>10}\n"
        param_table += "-" * 80 + "\n"

        for param_name, estimate in self.params.items():
            std_err = self.std_errors.get(param_name, np.nan)
            t_stat = self.t_stats.get(param_name, np.nan)
            p_value = self.p_values.get(param_name, np.nan)

            if p_value < 0.01:
                sig = "***"
            elif p_value < 0.05:
                sig = "**"
            elif p_value < 0.1:
                sig = "*"
            else:
                sig = ""

            param_table += f"{param_name:<15} {estimate:>12.6f} {std_err:>12.6f} "
            param_table += f"{t_stat:>12.6f} {p_value:>12.6f} {sig:>10}\n"

        param_table += "-" * 80 + "\n"
        param_table += "Significance codes: *** 0.01, ** 0.05, * 0.1\n\n"

        fit_stats = "Model Statistics:\n"
        fit_stats += "-" * 40 + "\n"
        fit_stats += f"Sigma^2: {self.sigma2:.6f}\n"
        if self.log_likelihood is not None:
            fit_stats += f"Log-Likelihood: {self.log_likelihood:.6f}\n"
        if self.aic is not None:
            fit_stats += f"AIC: {self.aic:.6f}\n"
        if self.bic is not None:
            fit_stats += f"BIC: {self.bic:.6f}\n"
        if self.hqic is not None:
            fit_stats += f"HQIC: {self.hqic:.6f}\n"
        if self.nobs is not None:
            fit_stats += f"Number of observations: {self.nobs}\n"
        if self.df_model is not None:
            fit_stats += f"Degrees of freedom (model): {self.df_model}\n"
        if self.df_resid is not None:
            fit_stats += f"Degrees of freedom (residuals): {self.df_resid}\n"
        fit_stats += "-" * 40 + "\n"

        return header + convergence_info + param_table + fit_stats

    def to_dict(self) -> Dict[str, Any]:
        """Convert the result object to a dictionary.

        Arrays become lists and the order becomes a plain dictionary.
        """
        result_dict = asdict(self)
        for key, value in result_dict.items():
            if isinstance(value, np.ndarray):
                result_dict[key] = value.tolist()
        return result_dict

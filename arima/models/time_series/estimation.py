'''
Conditional sum-of-squares estimation for SARIMAX models.

Estimation runs in two stages on the differenced series:

1. Ordinary least squares on the lagged regression matrix gives starting values
   for the AR, seasonal AR, regression and intercept coefficients; MA
   coefficients start at zero.
2. ``scipy.optimize.minimize`` refines the full coefficient vector against the
   mean squared innovation. When the primary solver reports failure, a fallback
   solver restarts from the best point seen so far.

The best finite coefficient vector ever evaluated is reported even when the
iteration budget runs out; non-convergence is a warning, not an error.
'''

import logging
from dataclasses import dataclass
from typing import Callable, Optional

import numpy as np
from scipy import optimize

from arima.core.exceptions import DegenerateFitError, warn_convergence
from arima.models.time_series._numba_core import innovation_filter, kernel
from arima.models.time_series.base import ModelOrder, SARIMAXConfig
from arima.models.time_series.design import build_design
from arima.models.time_series.innovations import n_params
from arima.utils.differentiation import gradient_2sided, hessian_2sided

logger = logging.getLogger("arima.models.time_series.estimation")

# Solvers that accept an explicit gradient
GRADIENT_SOLVERS = {"L-BFGS-B", "BFGS", "CG", "TNC", "SLSQP"}


@dataclass
class EstimationOutput:
    """Outcome of a conditional sum-of-squares fit.

    Attributes:
        params: Packed coefficient vector ``[AR, SAR, MA, SMA, exog, intercept]``
        sigma2: Mean squared innovation over ``t >= burn_in``
        residuals: Innovations of the differenced series, zero before the burn-in
        converged: Whether a solver met its tolerance
        iterations: Total solver iterations across all runs
        objective: Final value of the objective
        message: Status message of the last solver run
        cov_params: Covariance matrix of the coefficients, or None if not computed
    """

    params: np.ndarray
    sigma2: float
    residuals: np.ndarray
    converged: bool
    iterations: int
    objective: float
    message: str = ""
    cov_params: Optional[np.ndarray] = None


class _BestPoint:
    """Records the lowest finite objective value seen and where it occurred."""

    def __init__(self) -> None:
        self.value = np.inf
        self.x: Optional[np.ndarray] = None

    def update(self, x: np.ndarray, value: float) -> None:
        if np.isfinite(value) and value < self.value:
            self.value = value
            self.x = np.array(x, dtype=np.float64, copy=True)


def starting_values(series: np.ndarray,
                    exog: np.ndarray,
                    order: ModelOrder,
                    include_constant: bool = True,
                    use_numba: bool = True) -> np.ndarray:
    """Least-squares starting values for the packed coefficient vector.

    The AR, seasonal AR, regression and intercept coefficients come from
    ``numpy.linalg.lstsq`` on the lagged regression matrix. MA and seasonal MA
    coefficients start at zero.
    """
    design = build_design(series, exog, order, include_constant, use_numba)
    k = exog.shape[1]
    start = np.zeros(n_params(order, k, include_constant))
    if design.X.shape[1] == 0:
        return start

    coef, _, rank, _ = np.linalg.lstsq(design.X, design.y, rcond=None)
    if rank < design.X.shape[1]:
        logger.debug(f"Rank-deficient design matrix (rank {rank} of {design.X.shape[1]})")

    n_ar = order.p + order.P
    start[:n_ar] = coef[:n_ar]
    start[n_ar + order.q + order.Q:] = coef[n_ar:]
    logger.debug(f"OLS starting values: {dict(zip(design.column_names, np.round(coef, 6)))}")
    return start


def _minimize(objective: Callable[[np.ndarray], float],
              jac: Callable[[np.ndarray], np.ndarray],
              x0: np.ndarray,
              method: str,
              config: SARIMAXConfig) -> optimize.OptimizeResult:
    options = {"maxiter": config.max_iter}
    kwargs = {}
    if method == "L-BFGS-B":
        # ftol is the relative reduction of the objective between iterations
        options["ftol"] = config.tol
    else:
        kwargs["tol"] = config.tol
    if method == "TNC":
        options = {"maxfun": config.max_iter}
    if method in GRADIENT_SOLVERS:
        kwargs["jac"] = jac
    return optimize.minimize(objective, x0, method=method, options=options, **kwargs)


def estimate(series: np.ndarray,
             exog: Optional[np.ndarray],
             order: ModelOrder,
             config: Optional[SARIMAXConfig] = None,
             include_constant: bool = True) -> EstimationOutput:
    """Estimate SARIMAX coefficients by conditional sum of squares.

    Args:
        series: Differenced series
        exog: Differenced regressors (n x k), or None
        order: Model orders
        config: Estimation options; defaults to the package configuration
        include_constant: Whether to estimate an intercept

    Returns:
        EstimationOutput: Coefficients, innovation variance and diagnostics

    Raises:
        InsufficientHistoryError: If no observation survives the burn-in
        RegressorShapeMismatchError: If ``exog`` rows differ from the series length
        DegenerateFitError: If no finite objective value was found or the
            innovation variance is not positive
    """
    if config is None:
        config = SARIMAXConfig.from_global()

    series = np.ascontiguousarray(series, dtype=np.float64)
    if exog is None:
        exog = np.zeros((len(series), 0))
    exog = np.ascontiguousarray(exog, dtype=np.float64)

    x0 = starting_values(series, exog, order, include_constant, config.use_numba)
    burn_in = order.burn_in
    m = len(series) - burn_in
    filter_innovations = kernel(innovation_filter, config.use_numba)

    def innovations(params: np.ndarray) -> np.ndarray:
        return filter_innovations(series, exog, np.ascontiguousarray(params, dtype=np.float64),
                                  order.p, order.P, order.q, order.Q, order.s,
                                  include_constant, burn_in)

    def mean_square(params: np.ndarray) -> float:
        with np.errstate(over="ignore", invalid="ignore"):
            e = innovations(params)[burn_in:]
            value = float(np.dot(e, e) / m)
        return value if np.isfinite(value) else np.inf

    best = _BestPoint()

    def objective(params: np.ndarray) -> float:
        value = mean_square(params)
        best.update(params, value)
        return value

    def gradient(params: np.ndarray) -> np.ndarray:
        return gradient_2sided(objective, params, epsilon=config.step)

    converged = True
    iterations = 0
    message = "No free coefficients"
    objective(x0)

    if len(x0) > 0:
        logger.debug(f"Refining {len(x0)} coefficients with {config.solver}")
        converged, iterations, message = _run_solver(objective, gradient, x0, config.solver, config)

        if not converged and config.fallback_solver and config.fallback_solver != config.solver \
                and best.x is not None:
            logger.info(f"{config.solver} did not converge ({message}); "
                        f"restarting from the best point with {config.fallback_solver}")
            converged, fallback_iterations, message = _run_solver(
                objective, gradient, best.x, config.fallback_solver, config
            )
            iterations += fallback_iterations

    if best.x is None:
        raise DegenerateFitError(
            "Every evaluation of the sum-of-squares objective was non-finite",
            model_type=f"SARIMAX{order}",
            estimation_method="CSS",
            issue="non-finite objective"
        )

    params = best.x
    residuals = innovations(params)
    e = residuals[burn_in:]
    sigma2 = float(np.dot(e, e) / m)
    if not np.isfinite(sigma2) or sigma2 <= 0:
        raise DegenerateFitError(
            f"Innovation variance is {sigma2}; the model fits the data exactly or not at all",
            model_type=f"SARIMAX{order}",
            estimation_method="CSS",
            issue="non-positive variance"
        )

    if not converged:
        logger.warning(f"Estimation did not converge after {iterations} iterations: {message}")
        warn_convergence(
            f"SARIMAX{order} estimation did not converge; using the best coefficients found",
            iterations=iterations,
            tolerance=config.tol,
            final_value=sigma2,
            details=message
        )

    cov_params = None
    if config.compute_std_errors and len(params) > 0:
        cov_params = _covariance(mean_square, params, sigma2, m)

    logger.debug(f"Estimation finished: sigma2={sigma2:.6g}, iterations={iterations}, "
                 f"converged={converged}")
    return EstimationOutput(
        params=params,
        sigma2=sigma2,
        residuals=residuals,
        converged=converged,
        iterations=iterations,
        objective=sigma2,
        message=message,
        cov_params=cov_params
    )


def _run_solver(objective: Callable[[np.ndarray], float],
                gradient: Callable[[np.ndarray], np.ndarray],
                x0: np.ndarray,
                method: str,
                config: SARIMAXConfig):
    """Run one solver; returns ``(success, iterations, message)``."""
    try:
        result = _minimize(objective, gradient, x0, method, config)
    except (ValueError, ArithmeticError, np.linalg.LinAlgError) as e:
        logger.warning(f"Solver {method} failed: {e}")
        return False, 0, f"{method} failed: {e}"

    iterations = int(result.get("nit", result.get("nfev", 0)))
    message = str(result.message)
    logger.debug(f"{method}: success={result.success}, objective={result.fun}, "
                 f"iterations={iterations}")
    return bool(result.success), iterations, message


def _covariance(objective: Callable[[np.ndarray], float],
                params: np.ndarray,
                sigma2: float,
                m: int) -> np.ndarray:
    """Covariance ``2 * sigma2 / m * H^-1`` from the Hessian of the mean squared innovation."""
    hessian = hessian_2sided(objective, params)
    try:
        if not np.all(np.isfinite(hessian)):
            raise np.linalg.LinAlgError("Hessian contains non-finite values")
        return 2.0 * sigma2 / m * np.linalg.inv(hessian)
    except np.linalg.LinAlgError as e:
        logger.warning(f"Could not invert the Hessian of the objective ({e}); "
                       "standard errors are unavailable")
        return np.full((len(params), len(params)), np.nan)

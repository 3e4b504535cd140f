"""
Numerical Differentiation Module

Central finite-difference approximations of gradients and Hessians of scalar
functions. The estimator uses the gradient to drive gradient-based solvers on
the sum-of-squares objective and the Hessian to approximate the covariance of
the estimates.

Functions:
    gradient_2sided: Compute two-sided numerical gradient of a function
    hessian_2sided: Compute two-sided numerical Hessian of a function
"""

import logging
from typing import Optional, Tuple

import numpy as np

from arima.core.exceptions import raise_dimension_error, warn_numeric
from arima.core.types import Matrix, ObjectiveFunction, Vector

logger = logging.getLogger("arima.utils.differentiation")


def _step_sizes(x: np.ndarray, epsilon: Optional[float], power: float) -> np.ndarray:
    """Per-coordinate steps scaled by ``max(|x_i|, 1)``."""
    if epsilon is None:
        epsilon = np.power(np.finfo(float).eps, power)
    return epsilon * np.maximum(np.abs(x), 1.0)


def _as_vector(x: Vector, operation: str) -> np.ndarray:
    x = np.asarray(x, dtype=float)
    if x.ndim != 1:
        raise_dimension_error(
            f"Input to {operation} must be a 1D vector",
            array_name="x",
            expected_shape="(n,)",
            actual_shape=x.shape
        )
    return x


def gradient_2sided(func: ObjectiveFunction,
                    x: Vector,
                    epsilon: Optional[float] = None,
                    args: Tuple = ()) -> Vector:
    """
    Compute two-sided numerical gradient of a function.

    For a function f(x), the gradient is approximated as

    ∂f/∂x_i ≈ [f(x + h_i*e_i) - f(x - h_i*e_i)] / (2*h_i)

    with ``h_i = epsilon * max(|x_i|, 1)``.

    Args:
        func: Function to differentiate, should take a vector and return a scalar
        x: Point at which to compute the gradient
        epsilon: Relative step size. Defaults to the cube root of machine epsilon
        args: Additional arguments to pass to the function

    Returns:
        Gradient vector of the same shape as x

    Raises:
        DimensionError: If x is not a 1D array

    Examples:
        >>> import numpy as np
        >>> from arima.utils.differentiation import gradient_2sided
        >>> def f(x): return x[0]**2 + x[1]**2
        >>> np.round(gradient_2sided(f, np.array([1.0, 2.0])), 6)
        array([2., 4.])
    """
    x = _as_vector(x, "gradient_2sided")
    h = _step_sizes(x, epsilon, 1 / 3)

    n = x.shape[0]
    grad = np.zeros(n, dtype=float)
    x_plus = x.copy()
    x_minus = x.copy()

    for i in range(n):
        x_plus[i] = x[i] + h[i]
        x_minus[i] = x[i] - h[i]
        grad[i] = (func(x_plus, *args) - func(x_minus, *args)) / (2.0 * h[i])
        x_plus[i] = x[i]
        x_minus[i] = x[i]

    if not np.all(np.isfinite(grad)):
        logger.debug(f"Non-finite gradient at indices {np.flatnonzero(~np.isfinite(grad)).tolist()}")

    return grad


def hessian_2sided(func: ObjectiveFunction,
                   x: Vector,
                   epsilon: Optional[float] = None,
                   args: Tuple = ()) -> Matrix:
    """
    Compute two-sided numerical Hessian of a function.

    The Hessian elements are approximated as

    ∂²f/∂x_i² ≈ [f(x + 2h_i*e_i) - 2f(x) + f(x - 2h_i*e_i)] / (4*h_i²)
    ∂²f/∂x_i∂x_j ≈ [f(x + h_i*e_i + h_j*e_j) - f(x + h_i*e_i - h_j*e_j)
                    - f(x - h_i*e_i + h_j*e_j) + f(x - h_i*e_i - h_j*e_j)] / (4*h_i*h_j)

    Args:
        func: Function to differentiate, should take a vector and return a scalar
        x: Point at which to compute the Hessian
        epsilon: Relative step size. Defaults to the fourth root of machine epsilon
        args: Additional arguments to pass to the function

    Returns:
        Symmetric Hessian matrix of shape (n, n) where n is the length of x

    Raises:
        DimensionError: If x is not a 1D array
    """
    x = _as_vector(x, "hessian_2sided")
    h = _step_sizes(x, epsilon, 1 / 4)

    n = x.shape[0]
    hess = np.zeros((n, n), dtype=float)
    f0 = func(x, *args)

    def shifted(i: int, di: float, j: int = -1, dj: float = 0.0) -> float:
        point = x.copy()
        point[i] += di
        if j >= 0:
            point[j] += dj
        return func(point, *args)

    for i in range(n):
        f_plus = shifted(i, 2.0 * h[i])
        f_minus = shifted(i, -2.0 * h[i])
        hess[i, i] = (f_plus - 2.0 * f0 + f_minus) / (4.0 * h[i] * h[i])

    for i in range(n):
        for j in range(i + 1, n):
            f_pp = shifted(i, h[i], j, h[j])
            f_pm = shifted(i, h[i], j, -h[j])
            f_mp = shifted(i, -h[i], j, h[j])
            f_mm = shifted(i, -h[i], j, -h[j])
            hess[i, j] = (f_pp - f_pm - f_mp + f_mm) / (4.0 * h[i] * h[j])
            hess[j, i] = hess[i, j]

    if not np.all(np.isfinite(hess)):
        warn_numeric(
            "Non-finite Hessian elements detected",
            operation="hessian_2sided",
            issue="non_finite_hessian",
            value=hess
        )

    return hess

"""
arima utilities module

Numerical helpers shared by the estimators.
"""

from .differentiation import gradient_2sided, hessian_2sided

__all__ = ["gradient_2sided", "hessian_2sided"]

# arima/models/time_series/__init__.py
"""
arima time series module

Seasonal ARIMA models with exogenous regressors, built from a differencer, a
lagged design builder, an innovation filter, a conditional sum-of-squares
estimator and a forecast engine.
"""

import logging

logger = logging.getLogger("arima.models.time_series")

from .base import FittedState, ModelOrder, SARIMAXConfig, SARIMAXResult
from .design import DesignMatrix, build_design
from .differencing import difference, difference_exog, integrate
from .estimation import EstimationOutput, estimate, starting_values
from .forecast import forecast
from .innovations import fitted_values, residuals, sum_of_squares
from .sarimax import SARIMAX

__all__ = [
    "FittedState",
    "ModelOrder",
    "SARIMAXConfig",
    "SARIMAXResult",
    "DesignMatrix",
    "build_design",
    "difference",
    "difference_exog",
    "integrate",
    "EstimationOutput",
    "estimate",
    "starting_values",
    "forecast",
    "fitted_values",
    "residuals",
    "sum_of_squares",
    "SARIMAX",
]

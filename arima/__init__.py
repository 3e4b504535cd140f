# arima/__init__.py
"""
arima - SARIMAX estimation and forecasting for Python

Fit and forecast univariate Box-Jenkins models: AR, MA, ARMA, ARIMA and
seasonal ARIMA, optionally with exogenous regressors. Coefficients are
estimated by conditional sum of squares and multi-step forecasts are mapped
back to the original scale of the series.

    >>> from arima import SARIMAX
    >>> model = SARIMAX.arima(1, 1, 0)
    >>> model.fit(y)
    >>> model.predict(10)
"""

import logging

from .version import __version__, get_version_info

logger = logging.getLogger("arima")

from . import core
from . import models
from . import utils
from .core.config import get_config, reset_config, set_config
from .core.exceptions import (
    ArimaError,
    ConvergenceWarning,
    DataError,
    DegenerateFitError,
    ForecastError,
    InsufficientHistoryError,
    InvalidOrderError,
    ModelNotFitError,
    RegressorShapeMismatchError,
)
from .models.time_series import SARIMAX, ModelOrder, SARIMAXConfig, SARIMAXResult

__all__ = [
    "__version__",
    "get_version_info",
    "core",
    "models",
    "utils",
    "get_config",
    "reset_config",
    "set_config",
    "ArimaError",
    "ConvergenceWarning",
    "DataError",
    "DegenerateFitError",
    "ForecastError",
    "InsufficientHistoryError",
    "InvalidOrderError",
    "ModelNotFitError",
    "RegressorShapeMismatchError",
    "SARIMAX",
    "ModelOrder",
    "SARIMAXConfig",
    "SARIMAXResult",
]

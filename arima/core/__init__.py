"""
arima core module

Base classes, parameter containers, type aliases, validation utilities,
configuration management and the exception hierarchy shared by the models.
"""

import logging

logger = logging.getLogger("arima.core")

from .base import ModelBase, ModelResult
from .config import (
    ConfigManager,
    get_config,
    get_config_manager,
    get_core_config,
    get_logging_config,
    get_numerical_config,
    initialize_config,
    reset_config,
    set_config,
)
from .exceptions import (
    ArimaError,
    ArimaWarning,
    ConfigurationError,
    ConvergenceWarning,
    DataError,
    DegenerateFitError,
    DimensionError,
    EstimationError,
    ForecastError,
    InsufficientHistoryError,
    InvalidOrderError,
    ModelNotFitError,
    NotFittedError,
    NumericWarning,
    ParameterError,
    RegressorShapeMismatchError,
)
from .parameters import ParameterBase, SARIMAXParameters
from .validation import validate_exog, validate_horizon, validate_series

__all__ = [
    "ModelBase",
    "ModelResult",
    "ConfigManager",
    "get_config",
    "get_config_manager",
    "get_core_config",
    "get_logging_config",
    "get_numerical_config",
    "initialize_config",
    "reset_config",
    "set_config",
    "ArimaError",
    "ArimaWarning",
    "ConfigurationError",
    "ConvergenceWarning",
    "DataError",
    "DegenerateFitError",
    "DimensionError",
    "EstimationError",
    "ForecastError",
    "InsufficientHistoryError",
    "InvalidOrderError",
    "ModelNotFitError",
    "NotFittedError",
    "NumericWarning",
    "ParameterError",
    "RegressorShapeMismatchError",
    "ParameterBase",
    "SARIMAXParameters",
    "validate_exog",
    "validate_horizon",
    "validate_series",
]

# arima/models/__init__.py
"""
arima models module
"""

import logging

logger = logging.getLogger("arima.models")

from . import time_series
from .time_series import SARIMAX

__all__ = ["time_series", "SARIMAX"]

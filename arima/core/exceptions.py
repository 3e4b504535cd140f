'''
Custom exception classes for the arima package.

This module defines the exception hierarchy used throughout the package. Each
exception carries an optional ``details`` string and a ``context`` dictionary so
callers can inspect what went wrong (the offending parameter, the expected and
actual array shapes, the model and operation involved) without parsing messages.

Errors raised by model operations map onto five public failure kinds:

- ``InvalidOrderError``: negative orders or a seasonal period <= 1 with seasonal terms
- ``InsufficientHistoryError``: the series is too short for the requested orders
- ``RegressorShapeMismatchError``: exogenous rows do not match the series or horizon
- ``DegenerateFitError``: estimation produced no finite, positive-variance solution
- ``ModelNotFitError``: ``predict`` was called before ``fit``

Optimizer non-convergence is reported as a ``ConvergenceWarning``, not an error.
'''

import inspect
import warnings
from pathlib import Path
from typing import Any, Dict, Optional, Tuple, Union

import numpy as np


def _format_message(message: str,
                    details: Optional[str],
                    context: Optional[Dict[str, Any]],
                    frame_depth: int) -> str:
    full_message = message
    if details:
        full_message += f"\n\nDetails: {details}"

    if context:
        context_str = "\n".join(f"  {k}: {v}" for k, v in context.items())
        full_message += f"\n\nContext:\n{context_str}"

    frame = inspect.currentframe()
    try:
        for _ in range(frame_depth):
            if frame is None:
                break
            frame = frame.f_back
        if frame is not None:
            caller_info = inspect.getframeinfo(frame)
            full_message += f"\n\nLocation: {Path(caller_info.filename).name}:{caller_info.lineno}"
    finally:
        del frame  # Avoid reference cycles

    return full_message


class ArimaError(Exception):
    """Base exception class for all arima errors.

    Attributes:
        message: The error message
        details: Additional details about the error
        context: Dictionary containing contextual information about the error
    """

    def __init__(self,
                 message: str,
                 details: Optional[str] = None,
                 context: Optional[Dict[str, Any]] = None) -> None:
        self.message = message
        self.details = details
        self.context = context or {}
        super().__init__(_format_message(message, details, context, frame_depth=3))


class ParameterError(ArimaError):
    """Exception raised for invalid model or configuration parameters.

    Attributes:
        param_name: The name of the parameter that caused the error
        param_value: The invalid parameter value
        constraint: Description of the constraint that was violated
    """

    def __init__(self,
                 message: str,
                 param_name: Optional[str] = None,
                 param_value: Optional[Any] = None,
                 constraint: Optional[str] = None,
                 details: Optional[str] = None,
                 context: Optional[Dict[str, Any]] = None) -> None:
        self.param_name = param_name
        self.param_value = param_value
        self.constraint = constraint

        context_dict = context or {}
        if param_name:
            context_dict["Parameter"] = param_name
        if param_value is not None:
            context_dict["Value"] = param_value
        if constraint:
            context_dict["Constraint"] = constraint

        super().__init__(message, details, context_dict)


class InvalidOrderError(ParameterError):
    """Raised when a model order specification is invalid.

    Orders must be non-negative integers and the seasonal period must exceed
    one whenever any seasonal order is non-zero.
    """


class DimensionError(ArimaError):
    """Exception raised when array dimensions are incompatible.

    Attributes:
        array_name: The name of the array that caused the error
        expected_shape: The expected shape of the array
        actual_shape: The actual shape of the array
    """

    def __init__(self,
                 message: str,
                 array_name: Optional[str] = None,
                 expected_shape: Optional[Union[Tuple[int, ...], str]] = None,
                 actual_shape: Optional[Tuple[int, ...]] = None,
                 details: Optional[str] = None,
                 context: Optional[Dict[str, Any]] = None) -> None:
        self.array_name = array_name
        self.expected_shape = expected_shape
        self.actual_shape = actual_shape

        context_dict = context or {}
        if array_name:
            context_dict["Array"] = array_name
        if expected_shape is not None:
            context_dict["Expected Shape"] = expected_shape
        if actual_shape is not None:
            context_dict["Actual Shape"] = actual_shape

        super().__init__(message, details, context_dict)


class RegressorShapeMismatchError(DimensionError):
    """Raised when exogenous regressors do not line up with the series or horizon."""


class DataError(ArimaError):
    """Exception raised when input data is unusable.

    Attributes:
        data_name: The name of the data that caused the error
        issue: Description of the issue with the data
        index: The index or location where the issue was detected
    """

    def __init__(self,
                 message: str,
                 data_name: Optional[str] = None,
                 issue: Optional[str] = None,
                 index: Optional[Union[int, Tuple[int, ...], str]] = None,
                 details: Optional[str] = None,
                 context: Optional[Dict[str, Any]] = None) -> None:
        self.data_name = data_name
        self.issue = issue
        self.index = index

        context_dict = context or {}
        if data_name:
            context_dict["Data"] = data_name
        if issue:
            context_dict["Issue"] = issue
        if index is not None:
            context_dict["Index"] = index

        super().__init__(message, details, context_dict)


class InsufficientHistoryError(DataError):
    """Raised when a series is too short for the requested orders or differencing.

    Attributes:
        required: Minimum number of observations needed
        available: Number of observations supplied
    """

    def __init__(self,
                 message: str,
                 required: Optional[int] = None,
                 available: Optional[int] = None,
                 data_name: Optional[str] = None,
                 details: Optional[str] = None,
                 context: Optional[Dict[str, Any]] = None) -> None:
        self.required = required
        self.available = available

        context_dict = context or {}
        if required is not None:
            context_dict["Required"] = required
        if available is not None:
            context_dict["Available"] = available

        super().__init__(message, data_name=data_name, issue="insufficient history",
                         details=details, context=context_dict)


class EstimationError(ArimaError):
    """Exception raised when model estimation fails.

    Attributes:
        model_type: The type of model being estimated
        estimation_method: The estimation method being used
        issue: Description of the issue that occurred during estimation
    """

    def __init__(self,
                 message: str,
                 model_type: Optional[str] = None,
                 estimation_method: Optional[str] = None,
                 issue: Optional[str] = None,
                 details: Optional[str] = None,
                 context: Optional[Dict[str, Any]] = None) -> None:
        self.model_type = model_type
        self.estimation_method = estimation_method
        self.issue = issue

        context_dict = context or {}
        if model_type:
            context_dict["Model Type"] = model_type
        if estimation_method:
            context_dict["Estimation Method"] = estimation_method
        if issue:
            context_dict["Issue"] = issue

        super().__init__(message, details, context_dict)


class DegenerateFitError(EstimationError):
    """Raised when estimation yields non-finite values or a non-positive variance."""


class ForecastError(ArimaError):
    """Exception raised for invalid forecast requests.

    Attributes:
        horizon: The requested forecast horizon
        issue: Description of the problem
    """

    def __init__(self,
                 message: str,
                 horizon: Optional[Any] = None,
                 issue: Optional[str] = None,
                 details: Optional[str] = None,
                 context: Optional[Dict[str, Any]] = None) -> None:
        self.horizon = horizon
        self.issue = issue

        context_dict = context or {}
        if horizon is not None:
            context_dict["Horizon"] = horizon
        if issue:
            context_dict["Issue"] = issue

        super().__init__(message, details, context_dict)


class NotFittedError(ArimaError):
    """Exception raised when an operation requires a fitted model.

    Attributes:
        model_type: The type of model
        operation: The operation that requires a fitted model
    """

    def __init__(self,
                 message: str,
                 model_type: Optional[str] = None,
                 operation: Optional[str] = None,
                 details: Optional[str] = None,
                 context: Optional[Dict[str, Any]] = None) -> None:
        self.model_type = model_type
        self.operation = operation

        context_dict = context or {}
        if model_type:
            context_dict["Model Type"] = model_type
        if operation:
            context_dict["Operation"] = operation

        super().__init__(message, details, context_dict)


class ModelNotFitError(NotFittedError):
    """Raised when ``predict`` is called on a model that has never been fit."""


class ConfigurationError(ArimaError):
    """Exception raised for invalid configuration settings.

    Attributes:
        setting: The configuration setting that caused the error
        value: The invalid value
        issue: Description of the problem
    """

    def __init__(self,
                 message: str,
                 setting: Optional[str] = None,
                 value: Optional[Any] = None,
                 issue: Optional[str] = None,
                 details: Optional[str] = None,
                 context: Optional[Dict[str, Any]] = None) -> None:
        self.setting = setting
        self.value = value
        self.issue = issue

        context_dict = context or {}
        if setting:
            context_dict["Setting"] = setting
        if value is not None:
            context_dict["Value"] = value
        if issue:
            context_dict["Issue"] = issue

        super().__init__(message, details, context_dict)


class ArimaWarning(Warning):
    """Base warning class for all arima warnings.

    Attributes:
        message: The warning message
        details: Additional details about the warning
        context: Dictionary containing contextual information about the warning
    """

    def __init__(self,
                 message: str,
                 details: Optional[str] = None,
                 context: Optional[Dict[str, Any]] = None) -> None:
        self.message = message
        self.details = details
        self.context = context or {}
        super().__init__(_format_message(message, details, context, frame_depth=3))


class ConvergenceWarning(ArimaWarning):
    """Warning issued when the optimizer stops without meeting its tolerance.

    The best coefficient vector found is still used; check
    ``SARIMAXResult.convergence`` to detect this case programmatically.

    Attributes:
        iterations: The number of iterations performed
        tolerance: The convergence tolerance that was used
        final_value: The best objective value reached
    """

    def __init__(self,
                 message: str,
                 iterations: Optional[int] = None,
                 tolerance: Optional[float] = None,
                 final_value: Optional[float] = None,
                 details: Optional[str] = None,
                 context: Optional[Dict[str, Any]] = None) -> None:
        self.iterations = iterations
        self.tolerance = tolerance
        self.final_value = final_value

        context_dict = context or {}
        if iterations is not None:
            context_dict["Iterations"] = iterations
        if tolerance is not None:
            context_dict["Tolerance"] = tolerance
        if final_value is not None:
            context_dict["Final Value"] = final_value

        super().__init__(message, details, context_dict)


class NumericWarning(ArimaWarning):
    """Warning for numerical issues that do not stop the computation.

    Attributes:
        operation: The operation where the issue was detected
        issue: Description of the numerical issue
        value: The value that may cause numerical issues
    """

    def __init__(self,
                 message: str,
                 operation: Optional[str] = None,
                 issue: Optional[str] = None,
                 value: Optional[Any] = None,
                 details: Optional[str] = None,
                 context: Optional[Dict[str, Any]] = None) -> None:
        self.operation = operation
        self.issue = issue
        self.value = value

        context_dict = context or {}
        if operation:
            context_dict["Operation"] = operation
        if issue:
            context_dict["Issue"] = issue
        if value is not None:
            if isinstance(value, np.ndarray) and value.size > 10:
                context_dict["Value"] = f"Array with shape {value.shape}"
            else:
                context_dict["Value"] = value

        super().__init__(message, details, context_dict)


def raise_dimension_error(message: str,
                          array_name: Optional[str] = None,
                          expected_shape: Optional[Union[Tuple[int, ...], str]] = None,
                          actual_shape: Optional[Tuple[int, ...]] = None,
                          details: Optional[str] = None,
                          context: Optional[Dict[str, Any]] = None) -> None:
    """Raise a DimensionError with consistent formatting.

    Raises:
        DimensionError: The formatted dimension error
    """
    raise DimensionError(message, array_name, expected_shape, actual_shape, details, context)


def warn_convergence(message: str,
                     iterations: Optional[int] = None,
                     tolerance: Optional[float] = None,
                     final_value: Optional[float] = None,
                     details: Optional[str] = None,
                     context: Optional[Dict[str, Any]] = None) -> None:
    """Issue a ConvergenceWarning with consistent formatting."""
    warnings.warn(
        ConvergenceWarning(message, iterations, tolerance, final_value, details, context),
        stacklevel=2
    )


def warn_numeric(message: str,
                 operation: Optional[str] = None,
                 issue: Optional[str] = None,
                 value: Optional[Any] = None,
                 details: Optional[str] = None,
                 context: Optional[Dict[str, Any]] = None) -> None:
    """Issue a NumericWarning with consistent formatting."""
    warnings.warn(
        NumericWarning(message, operation, issue, value, details, context),
        stacklevel=2
    )

'''
Abstract base classes for the arima package.

``ModelBase`` fixes the lifecycle every model follows: it is created unfit,
``fit`` estimates it from data and returns a result object, and operations that
need estimates raise ``ModelNotFitError`` until the first successful fit.
'''

import abc
from dataclasses import dataclass
from typing import Any, Dict, Generic, Optional, TypeVar, cast

import numpy as np

from .exceptions import ModelNotFitError

T = TypeVar('T')  # Generic type for parameters
R = TypeVar('R')  # Generic type for results
D = TypeVar('D')  # Generic type for data


@dataclass
class ModelResult:
    """Base class for all model estimation results.

    Attributes:
        model_name: Name of the estimated model
        convergence: Whether the optimizer met its tolerance
        iterations: Number of optimizer iterations
        log_likelihood: Log-likelihood at the estimates
        aic: Akaike information criterion
        bic: Bayesian information criterion
    """

    model_name: str
    convergence: bool = True
    iterations: int = 0
    log_likelihood: Optional[float] = None
    aic: Optional[float] = None
    bic: Optional[float] = None

    def summary(self) -> str:
        """Generate a text summary of the model results.

        Returns:
            str: A formatted string containing the model results summary.
        """
        header = f"Model: {self.model_name}\n"
        header += "=" * (len(header) - 1) + "\n\n"

        convergence_info = f"Convergence: {'Yes' if self.convergence else 'No'}\n"
        convergence_info += f"Iterations: {self.iterations}\n\n"

        fit_stats = ""
        if self.log_likelihood is not None:
            fit_stats += f"Log-Likelihood: {self.log_likelihood:.6f}\n"
        if self.aic is not None:
            fit_stats += f"AIC: {self.aic:.6f}\n"
        if self.bic is not None:
            fit_stats += f"BIC: {self.bic:.6f}\n"

        return header + convergence_info + fit_stats

    def to_dict(self) -> Dict[str, Any]:
        """Convert the result object to a dictionary."""
        return {
            "model_name": self.model_name,
            "convergence": self.convergence,
            "iterations": self.iterations,
            "log_likelihood": self.log_likelihood,
            "aic": self.aic,
            "bic": self.bic
        }


class ModelBase(abc.ABC, Generic[T, R, D]):
    """Abstract base class for all models in the arima package.

    Type Parameters:
        T: The parameter type for this model
        R: The result type for this model
        D: The data type this model accepts
    """

    def __init__(self, name: str = "Model"):
        """Initialize the model with a name.

        Args:
            name: A descriptive name for the model
        """
        self._name = name
        self._results: Optional[R] = None

    @property
    def name(self) -> str:
        """The model name."""
        return self._name

    @property
    def fitted(self) -> bool:
        """True once ``fit`` has completed successfully."""
        return self._results is not None

    @property
    def results(self) -> R:
        """The results of the most recent successful fit.

        Raises:
            ModelNotFitError: If the model has not been fitted
        """
        self._check_fitted("results")
        return cast(R, self._results)

    def _check_fitted(self, operation: str) -> None:
        if not self.fitted:
            raise ModelNotFitError(
                f"{self.__class__.__name__} has not been fitted. Call fit() first.",
                model_type=self.__class__.__name__,
                operation=operation
            )

    @abc.abstractmethod
    def fit(self, data: D, **kwargs: Any) -> R:
        """Fit the model to the provided data.

        Args:
            data: The data to fit the model to
            **kwargs: Additional keyword arguments for model fitting

        Returns:
            R: The model estimation results
        """
        pass

    @abc.abstractmethod
    def predict(self, steps: int, **kwargs: Any) -> np.ndarray:
        """Forecast ``steps`` periods past the end of the fitted data.

        Raises:
            ModelNotFitError: If the model has not been fitted
        """
        pass

    @abc.abstractmethod
    def validate_data(self, data: D) -> Any:
        """Validate the input data for model fitting."""
        pass

    def summary(self) -> str:
        """Generate a text summary of the model."""
        if not self.fitted:
            return f"Model: {self._name} (not fitted)"

        if hasattr(self._results, "summary") and callable(getattr(self._results, "summary")):
            return cast(Any, self._results).summary()

        return f"Model: {self._name} (fitted)"

    def __str__(self) -> str:
        return self.summary()

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(name='{self._name}', fitted={self.fitted})"

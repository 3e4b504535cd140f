# arima/core/parameters.py

"""
Parameter containers for the arima package.

A fitted SARIMAX model is described by a single packed coefficient vector laid
out as ``[AR(p), SAR(P), MA(q), SMA(Q), exog(k), intercept]``. The optimizer
works on that vector directly; ``SARIMAXParameters`` gives it names, validates
it and converts back and forth.
"""

from dataclasses import asdict, dataclass, field, fields, is_dataclass
from typing import Any, Dict, List, Type, TypeVar

import numpy as np

from .exceptions import ParameterError

P = TypeVar('P', bound='ParameterBase')


class ParameterBase:
    """Base class for all parameter containers.

    Provides the validation and conversion interface shared by parameter types.
    """

    def validate(self) -> None:
        """Validate parameter constraints.

        Raises:
            ParameterError: If parameter constraints are violated
        """
        pass

    def to_dict(self) -> Dict[str, Any]:
        """Convert parameters to a dictionary.

        Returns:
            Dict[str, Any]: Dictionary representation of parameters
        """
        if is_dataclass(self):
            return asdict(self)
        return {k: v for k, v in self.__dict__.items() if not k.startswith('_')}

    def to_array(self) -> np.ndarray:
        """Convert parameters to a NumPy array.

        Raises:
            NotImplementedError: If not implemented by subclass
        """
        raise NotImplementedError("to_array must be implemented by subclass")

    @classmethod
    def from_array(cls: Type[P], array: np.ndarray, **kwargs: Any) -> P:
        """Create parameters from a NumPy array.

        Raises:
            NotImplementedError: If not implemented by subclass
        """
        raise NotImplementedError("from_array must be implemented by subclass")

    def copy(self: P) -> P:
        """Create a copy of the parameter object."""
        if is_dataclass(self):
            return type(self)(**{f.name: np.array(getattr(self, f.name), copy=True)
                                 if isinstance(getattr(self, f.name), np.ndarray)
                                 else getattr(self, f.name)
                                 for f in fields(self)})
        raise NotImplementedError("copy is only available for dataclass parameters")


def _companion_roots(coefficients: np.ndarray) -> np.ndarray:
    """Eigenvalues of the companion matrix of ``1 - c_1 L - ... - c_n L^n``."""
    n = len(coefficients)
    if n == 0 or not np.any(coefficients):
        return np.zeros(0)
    companion = np.zeros((n, n))
    companion[0, :] = coefficients
    companion[1:, :-1] = np.eye(n - 1)
    return np.linalg.eigvals(companion)


@dataclass
class SARIMAXParameters(ParameterBase):
    """Coefficients of a SARIMAX model.

    Seasonal terms are additive: a seasonal AR coefficient ``SAR_i`` multiplies
    ``y[t - i*s]`` directly, alongside the non-seasonal AR terms.

    Attributes:
        ar_params: Non-seasonal autoregressive coefficients (length p)
        seasonal_ar_params: Seasonal autoregressive coefficients (length P)
        ma_params: Non-seasonal moving average coefficients (length q)
        seasonal_ma_params: Seasonal moving average coefficients (length Q)
        exog_params: Regression coefficients on the exogenous columns (length k)
        constant: Intercept on the differenced scale
        seasonal_period: Seasonal period s used to place the seasonal lags
    """

    ar_params: np.ndarray = field(default_factory=lambda: np.zeros(0))
    seasonal_ar_params: np.ndarray = field(default_factory=lambda: np.zeros(0))
    ma_params: np.ndarray = field(default_factory=lambda: np.zeros(0))
    seasonal_ma_params: np.ndarray = field(default_factory=lambda: np.zeros(0))
    exog_params: np.ndarray = field(default_factory=lambda: np.zeros(0))
    constant: float = 0.0
    seasonal_period: int = 0

    def __post_init__(self) -> None:
        for name in ("ar_params", "seasonal_ar_params", "ma_params",
                     "seasonal_ma_params", "exog_params"):
            setattr(self, name, np.atleast_1d(np.asarray(getattr(self, name), dtype=np.float64)))
        self.constant = float(self.constant)
        self.validate()

    def validate(self) -> None:
        """Validate coefficient constraints.

        Raises:
            ParameterError: If any coefficient is non-finite or a seasonal term
                is present without a seasonal period greater than one
        """
        for name in ("ar_params", "seasonal_ar_params", "ma_params",
                     "seasonal_ma_params", "exog_params"):
            values = getattr(self, name)
            if values.ndim != 1:
                raise ParameterError(
                    f"{name} must be one-dimensional",
                    param_name=name,
                    param_value=values.shape,
                    constraint="ndim == 1"
                )
            if not np.all(np.isfinite(values)):
                raise ParameterError(
                    f"{name} must be finite",
                    param_name=name,
                    param_value=values,
                    constraint="finite"
                )
        if not np.isfinite(self.constant):
            raise ParameterError(
                "constant must be finite",
                param_name="constant",
                param_value=self.constant,
                constraint="finite"
            )
        if (len(self.seasonal_ar_params) or len(self.seasonal_ma_params)) and self.seasonal_period <= 1:
            raise ParameterError(
                "Seasonal coefficients require a seasonal period greater than one",
                param_name="seasonal_period",
                param_value=self.seasonal_period,
                constraint="s > 1"
            )

    def to_array(self, include_constant: bool = True) -> np.ndarray:
        """Pack the coefficients as ``[AR, SAR, MA, SMA, exog, intercept]``.

        Args:
            include_constant: Whether to append the intercept

        Returns:
            np.ndarray: Packed coefficient vector
        """
        parts = [self.ar_params, self.seasonal_ar_params, self.ma_params,
                 self.seasonal_ma_params, self.exog_params]
        if include_constant:
            parts.append(np.array([self.constant]))
        return np.concatenate(parts)

    @classmethod
    def from_array(cls, array: np.ndarray, ar_order: int = 0, seasonal_ar_order: int = 0,
                   ma_order: int = 0, seasonal_ma_order: int = 0, k_exog: int = 0,
                   include_constant: bool = True, seasonal_period: int = 0,
                   **kwargs: Any) -> 'SARIMAXParameters':
        """Unpack a coefficient vector produced by ``to_array``.

        Args:
            array: Packed coefficient vector
            ar_order: Number of AR coefficients (p)
            seasonal_ar_order: Number of seasonal AR coefficients (P)
            ma_order: Number of MA coefficients (q)
            seasonal_ma_order: Number of seasonal MA coefficients (Q)
            k_exog: Number of exogenous regressors
            include_constant: Whether the vector ends with an intercept
            seasonal_period: Seasonal period s

        Returns:
            SARIMAXParameters: Parameter object

        Raises:
            ParameterError: If the array length doesn't match the layout
        """
        array = np.asarray(array, dtype=np.float64)
        sizes = [ar_order, seasonal_ar_order, ma_order, seasonal_ma_order, k_exog]
        expected_length = sum(sizes) + int(include_constant)
        if array.ndim != 1 or len(array) != expected_length:
            raise ParameterError(
                f"Array length ({array.size}) doesn't match expected length ({expected_length})",
                param_name="array",
                param_value=array.shape,
                constraint=f"length == {expected_length}"
            )

        splits = np.cumsum(sizes)
        ar, sar, ma, sma, beta = np.split(array[:splits[-1]], splits[:-1])
        return cls(
            ar_params=ar,
            seasonal_ar_params=sar,
            ma_params=ma,
            seasonal_ma_params=sma,
            exog_params=beta,
            constant=array[-1] if include_constant else 0.0,
            seasonal_period=seasonal_period
        )

    def names(self, include_constant: bool = True) -> List[str]:
        """Coefficient names in ``to_array`` order."""
        s = self.seasonal_period
        names = [f"ar.L{i + 1}" for i in range(len(self.ar_params))]
        names += [f"ar.S.L{(i + 1) * s}" for i in range(len(self.seasonal_ar_params))]
        names += [f"ma.L{i + 1}" for i in range(len(self.ma_params))]
        names += [f"ma.S.L{(i + 1) * s}" for i in range(len(self.seasonal_ma_params))]
        names += [f"x{i + 1}" for i in range(len(self.exog_params))]
        if include_constant:
            names.append("intercept")
        return names

    def ar_lag_polynomial(self) -> np.ndarray:
        """Combined AR coefficients indexed by lag (element ``i`` is lag ``i + 1``)."""
        return _combine_lags(self.ar_params, self.seasonal_ar_params, self.seasonal_period)

    def ma_lag_polynomial(self) -> np.ndarray:
        """Combined MA coefficients indexed by lag (element ``i`` is lag ``i + 1``)."""
        return _combine_lags(self.ma_params, self.seasonal_ma_params, self.seasonal_period)

    def is_stationary(self) -> bool:
        """Whether all roots of the combined AR polynomial lie outside the unit circle."""
        return bool(np.all(np.abs(_companion_roots(self.ar_lag_polynomial())) < 1))

    def is_invertible(self) -> bool:
        """Whether all roots of the combined MA polynomial lie outside the unit circle."""
        return bool(np.all(np.abs(_companion_roots(-self.ma_lag_polynomial())) < 1))

    def freeze(self) -> 'SARIMAXParameters':
        """Mark the coefficient arrays read-only and return self."""
        for name in ("ar_params", "seasonal_ar_params", "ma_params",
                     "seasonal_ma_params", "exog_params"):
            getattr(self, name).flags.writeable = False
        return self


def _combine_lags(regular: np.ndarray, seasonal: np.ndarray, s: int) -> np.ndarray:
    max_lag = max(len(regular), len(seasonal) * s if len(seasonal) else 0)
    combined = np.zeros(max_lag)
    combined[:len(regular)] += regular
    for i, value in enumerate(seasonal):
        combined[(i + 1) * s - 1] += value
    return combined

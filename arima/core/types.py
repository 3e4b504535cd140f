# arima/core/types.py

"""
Type aliases shared across the arima package.

These aliases document the intended shape of arrays at function boundaries;
they are plain ``numpy.ndarray``/``pandas`` types at runtime.
"""

from typing import Callable, Sequence, Tuple, Union

import numpy as np
import pandas as pd

Vector = np.ndarray  # 1D array
Matrix = np.ndarray  # 2D array

SeriesLike = Union[np.ndarray, pd.Series, Sequence[float]]
ExogLike = Union[np.ndarray, pd.DataFrame, pd.Series, Sequence[Sequence[float]]]

ObjectiveFunction = Callable[..., float]

NonSeasonalOrder = Tuple[int, int, int]  # (p, d, q)
SeasonalOrder = Tuple[int, int, int, int]  # (P, D, Q, s)

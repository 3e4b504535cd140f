# arima/version.py
"""
arima version information

Version metadata for the package, accessible programmatically via
``arima.__version__``. The package follows semantic versioning
(MAJOR.MINOR.PATCH).
"""

from typing import Any, Dict, Tuple

VERSION_MAJOR = 0
VERSION_MINOR = 1
VERSION_PATCH = 0

__version__ = f"{VERSION_MAJOR}.{VERSION_MINOR}.{VERSION_PATCH}"

__title__ = "arima"
__description__ = "SARIMAX estimation and forecasting for Python"
__license__ = "MIT"

__python_requires__ = ">=3.9"

__dependencies__ = {
    "numpy": ">=1.26.0",
    "scipy": ">=1.11.3",
    "pandas": ">=2.1.1",
    "numba": ">=0.58.0",
}


def get_version_info() -> Dict[str, Any]:
    """
    Get version information about the package.

    Returns:
        Dict containing the version string, its components, the supported
        Python versions and the runtime dependencies.
    """
    return {
        "version": __version__,
        "major": VERSION_MAJOR,
        "minor": VERSION_MINOR,
        "patch": VERSION_PATCH,
        "python_requires": __python_requires__,
        "dependencies": __dependencies__,
        "license": __license__
    }


def get_version_components() -> Tuple[int, int, int]:
    """Get the version components as a ``(major, minor, patch)`` tuple."""
    return (VERSION_MAJOR, VERSION_MINOR, VERSION_PATCH)

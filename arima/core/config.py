'''
Configuration management for the arima package.

Settings are layered, each layer overriding the previous one:

1. Defaults built into the dataclass sections below
2. A JSON file named by the ``ARIMA_CONFIG_FILE`` environment variable
3. Environment variables of the form ``ARIMA_<SECTION>_<OPTION>``
4. Runtime modifications through ``set_config``

The configuration is initialised lazily on first access. Initialisation also
configures the ``arima`` package logger from the logging section.
'''

import json
import logging
import os
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, Optional

from .exceptions import ConfigurationError

logger = logging.getLogger("arima.core.config")

CONFIG_ENV_PREFIX = "ARIMA_"
CONFIG_FILE_ENV = "ARIMA_CONFIG_FILE"

SUPPORTED_SOLVERS = ("L-BFGS-B", "BFGS", "Powell", "Nelder-Mead", "CG", "TNC", "SLSQP")
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass
class CoreConfig:
    """
    Core configuration settings.

    Attributes:
        enable_numba: Whether to run the compiled kernels (False runs the same
            kernels as plain Python)
    """
    enable_numba: bool = True


@dataclass
class NumericalConfig:
    """
    Numerical configuration settings used by the estimator.

    Attributes:
        solver: Primary ``scipy.optimize.minimize`` method
        fallback_solver: Method used when the primary solver reports failure, or
            None to disable the fallback
        max_iterations: Iteration budget for each solver run
        tolerance: Relative objective decrease below which the fit has converged
        finite_difference_step: Relative step for numerical derivatives
        compute_std_errors: Whether to compute a Hessian-based covariance matrix
    """
    solver: str = "L-BFGS-B"
    fallback_solver: Optional[str] = "Powell"
    max_iterations: int = 500
    tolerance: float = 1e-8
    finite_difference_step: float = 1e-5
    compute_std_errors: bool = True


@dataclass
class LoggingConfig:
    """
    Logging configuration settings.

    Attributes:
        log_level: Level of the ``arima`` package logger
        log_file: Path to log file (None for no file logging)
        log_format: Format string for log messages
        log_date_format: Format string for log message timestamps
        console_logging: Whether to log to the console
        file_logging: Whether to log to ``log_file``
    """
    log_level: str = "WARNING"
    log_file: Optional[Path] = None
    log_format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    log_date_format: str = "%Y-%m-%d %H:%M:%S"
    console_logging: bool = True
    file_logging: bool = False


@dataclass
class ArimaConfig:
    """Complete configuration, one attribute per section."""
    core: CoreConfig = field(default_factory=CoreConfig)
    numerical: NumericalConfig = field(default_factory=NumericalConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


# Options that accept None; "none" and "" also map to None
NULLABLE_OPTIONS = ("fallback_solver",)


def _coerce(current_value: Any, value: Any, option: Optional[str] = None) -> Any:
    """Convert ``value`` to the type of ``current_value``."""
    if option in NULLABLE_OPTIONS:
        if value is None or (isinstance(value, str) and value.strip().lower() in ("", "none")):
            return None
        return str(value)
    if isinstance(current_value, bool):
        if isinstance(value, str):
            return value.strip().lower() in ('true', 'yes', '1', 'y')
        return bool(value)
    if isinstance(current_value, Path) or (current_value is None and isinstance(value, str)):
        return Path(value)
    if current_value is None or isinstance(value, type(current_value)):
        return value
    return type(current_value)(value)


class ConfigManager:
    """
    Configuration manager for the arima package.

    Attributes:
        _config: The current configuration object
        _initialized: Whether the configuration manager has been initialized
        _config_file: Path to the JSON configuration file, if any
    """

    def __init__(self):
        self._config = ArimaConfig()
        self._initialized = False
        self._config_file: Optional[Path] = None
        self._modified_keys = set()

    def initialize(self) -> None:
        """
        Initialize the configuration manager.

        Loads the JSON file named by ``ARIMA_CONFIG_FILE``, applies environment
        overrides, validates the result and sets up the package logger.
        """
        if self._initialized:
            return

        config_file = os.environ.get(CONFIG_FILE_ENV)
        if config_file:
            self._config_file = Path(config_file)
            self._load_config_file()

        self._apply_env_overrides()
        self._validate_config()
        self._setup_logging()

        self._initialized = True
        logger.debug("Configuration manager initialized")

    def _load_config_file(self) -> None:
        if self._config_file is None or not self._config_file.exists():
            logger.warning(f"Configuration file not found: {self._config_file}")
            return

        try:
            with open(self._config_file, 'r') as f:
                user_config = json.load(f)
        except (OSError, ValueError) as e:
            logger.warning(f"Failed to load configuration file {self._config_file}: {e}")
            return

        self._update_from_dict(user_config)
        logger.debug(f"Loaded configuration from {self._config_file}")

    def _apply_env_overrides(self) -> None:
        for env_var, value in os.environ.items():
            if not env_var.startswith(CONFIG_ENV_PREFIX) or env_var == CONFIG_FILE_ENV:
                continue

            # ARIMA_NUMERICAL_MAX_ITERATIONS -> ("numerical", "max_iterations")
            parts = env_var[len(CONFIG_ENV_PREFIX):].lower().split('_', 1)
            if len(parts) != 2:
                continue
            section, option = parts

            section_obj = getattr(self._config, section, None)
            if section_obj is None or not hasattr(section_obj, option):
                continue

            try:
                setattr(section_obj, option, _coerce(getattr(section_obj, option), value, option))
                logger.debug(f"Applied environment override: {env_var}={value}")
            except (TypeError, ValueError) as e:
                logger.warning(f"Failed to apply environment override {env_var}: {e}")

    def _setup_logging(self) -> None:
        """Configure the ``arima`` package logger from the logging section."""
        package_logger = logging.getLogger("arima")

        for handler in package_logger.handlers[:]:
            package_logger.removeHandler(handler)

        package_logger.setLevel(getattr(logging, self._config.logging.log_level))

        formatter = logging.Formatter(
            fmt=self._config.logging.log_format,
            datefmt=self._config.logging.log_date_format
        )

        if self._config.logging.console_logging:
            console_handler = logging.StreamHandler()
            console_handler.setFormatter(formatter)
            package_logger.addHandler(console_handler)

        if self._config.logging.file_logging and self._config.logging.log_file:
            try:
                log_file = Path(self._config.logging.log_file)
                log_file.parent.mkdir(parents=True, exist_ok=True)
                file_handler = logging.FileHandler(log_file)
                file_handler.setFormatter(formatter)
                package_logger.addHandler(file_handler)
            except OSError as e:
                logger.warning(f"Failed to set up file logging: {e}")

    def _validate_config(self) -> None:
        """Replace invalid values with their defaults, logging a warning for each."""
        defaults = ArimaConfig()

        numerical = self._config.numerical
        if numerical.solver not in SUPPORTED_SOLVERS:
            logger.warning(f"Invalid solver: {numerical.solver}, using {defaults.numerical.solver}")
            numerical.solver = defaults.numerical.solver
        fallback = numerical.fallback_solver
        if fallback is not None and fallback not in SUPPORTED_SOLVERS:
            logger.warning(f"Invalid fallback_solver: {numerical.fallback_solver}, "
                           f"using {defaults.numerical.fallback_solver}")
            numerical.fallback_solver = defaults.numerical.fallback_solver
        if numerical.max_iterations <= 0:
            logger.warning(f"Invalid max_iterations: {numerical.max_iterations}, must be positive")
            numerical.max_iterations = defaults.numerical.max_iterations
        if not 0 < numerical.tolerance < 1:
            logger.warning(f"Invalid tolerance: {numerical.tolerance}, must be between 0 and 1")
            numerical.tolerance = defaults.numerical.tolerance
        if not 0 < numerical.finite_difference_step < 1:
            logger.warning(f"Invalid finite_difference_step: {numerical.finite_difference_step}, "
                           "must be between 0 and 1")
            numerical.finite_difference_step = defaults.numerical.finite_difference_step

        log_level = str(self._config.logging.log_level).upper()
        if log_level not in LOG_LEVELS:
            logger.warning(f"Invalid log level: {self._config.logging.log_level}, using WARNING")
            log_level = "WARNING"
        self._config.logging.log_level = log_level

    def _update_from_dict(self, config_dict: Dict[str, Any]) -> None:
        for section_name, section_dict in config_dict.items():
            section = getattr(self._config, section_name, None)
            if section is None or not isinstance(section_dict, dict):
                logger.warning(f"Unknown configuration section: {section_name}")
                continue

            for option_name, option_value in section_dict.items():
                if not hasattr(section, option_name):
                    logger.warning(f"Unknown configuration option: {section_name}.{option_name}")
                    continue
                try:
                    setattr(section, option_name,
                            _coerce(getattr(section, option_name), option_value, option_name))
                except (TypeError, ValueError) as e:
                    logger.warning(f"Failed to set {section_name}.{option_name}: {e}")

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert the configuration to a dictionary.

        Returns:
            Dictionary representation of the configuration
        """
        result = {}
        for section_field in fields(self._config):
            section = getattr(self._config, section_field.name)
            section_dict = {}
            for option_field in fields(section):
                value = getattr(section, option_field.name)
                section_dict[option_field.name] = str(value) if isinstance(value, Path) else value
            result[section_field.name] = section_dict
        return result

    def get(self, section: str, option: str, default: Any = None) -> Any:
        """
        Get a configuration value.

        Args:
            section: The configuration section
            option: The configuration option
            default: Default value if the option is not found

        Returns:
            The configuration value, or the default if not found
        """
        section_obj = getattr(self._config, section, None)
        if section_obj is None or not hasattr(section_obj, option):
            return default
        return getattr(section_obj, option)

    def set(self, section: str, option: str, value: Any) -> None:
        """
        Set a configuration value.

        Args:
            section: The configuration section
            option: The configuration option
            value: The value to set

        Raises:
            ConfigurationError: If the section or option is not found, or the
                value cannot be converted to the option's type
        """
        if not hasattr(self._config, section):
            raise ConfigurationError(
                f"Unknown configuration section: {section}",
                setting=f"{section}.{option}",
                value=value,
                issue="Section not found"
            )

        section_obj = getattr(self._config, section)
        if not hasattr(section_obj, option):
            raise ConfigurationError(
                f"Unknown configuration option: {section}.{option}",
                setting=f"{section}.{option}",
                value=value,
                issue="Option not found"
            )

        try:
            typed_value = _coerce(getattr(section_obj, option), value, option)
        except (TypeError, ValueError) as e:
            raise ConfigurationError(
                f"Failed to set configuration option: {section}.{option}",
                setting=f"{section}.{option}",
                value=value,
                issue=str(e)
            ) from e

        setattr(section_obj, option, typed_value)
        self._modified_keys.add(f"{section}.{option}")

        if section == "logging":
            self._setup_logging()

        logger.debug(f"Set configuration option: {section}.{option}={value}")

    def reset(self, section: Optional[str] = None, option: Optional[str] = None) -> None:
        """
        Reset configuration to default values.

        Args:
            section: The configuration section to reset, or None to reset all
            option: The configuration option to reset, or None to reset the entire section

        Raises:
            ConfigurationError: If the section or option is not found
        """
        defaults = ArimaConfig()

        if section is None:
            self._config = defaults
            self._modified_keys.clear()
            self._setup_logging()
            logger.debug("Reset all configuration to defaults")
            return

        if not hasattr(self._config, section):
            raise ConfigurationError(
                f"Unknown configuration section: {section}",
                setting=section,
                issue="Section not found"
            )

        if option is None:
            setattr(self._config, section, getattr(defaults, section))
            self._modified_keys = {k for k in self._modified_keys
                                   if not k.startswith(f"{section}.")}
        else:
            section_obj = getattr(self._config, section)
            if not hasattr(section_obj, option):
                raise ConfigurationError(
                    f"Unknown configuration option: {section}.{option}",
                    setting=f"{section}.{option}",
                    issue="Option not found"
                )
            setattr(section_obj, option, getattr(getattr(defaults, section), option))
            self._modified_keys.discard(f"{section}.{option}")

        if section == "logging":
            self._setup_logging()
        logger.debug(f"Reset configuration: {section}{'.' + option if option else ''}")

    def get_modified_options(self) -> Dict[str, Dict[str, Any]]:
        """Return the options changed through ``set``, grouped by section."""
        result: Dict[str, Dict[str, Any]] = {}
        for key in self._modified_keys:
            section, option = key.split(".", 1)
            result.setdefault(section, {})[option] = self.get(section, option)
        return result

    def get_section(self, section: str) -> Any:
        """
        Get a configuration section object.

        Raises:
            ConfigurationError: If the section is not found
        """
        if not hasattr(self._config, section):
            raise ConfigurationError(
                f"Unknown configuration section: {section}",
                setting=section,
                issue="Section not found"
            )
        return getattr(self._config, section)

    def get_config_file(self) -> Optional[Path]:
        return self._config_file


_config_manager = ConfigManager()


def initialize_config() -> None:
    """Initialize the configuration system if it has not been initialized yet."""
    _config_manager.initialize()


def get_config_manager() -> ConfigManager:
    """
    Get the configuration manager instance.

    Returns:
        The initialized configuration manager
    """
    if not _config_manager._initialized:
        initialize_config()
    return _config_manager


def get_config(section: str, option: str, default: Any = None) -> Any:
    """
    Get a configuration value.

    Args:
        section: The configuration section
        option: The configuration option
        default: Default value if the option is not found

    Returns:
        The configuration value, or the default if not found
    """
    return get_config_manager().get(section, option, default)


def set_config(section: str, option: str, value: Any) -> None:
    """
    Set a configuration value.

    Raises:
        ConfigurationError: If the section or option is not found
    """
    get_config_manager().set(section, option, value)


def reset_config(section: Optional[str] = None, option: Optional[str] = None) -> None:
    """
    Reset configuration to default values.

    Raises:
        ConfigurationError: If the section or option is not found
    """
    get_config_manager().reset(section, option)


def get_core_config() -> CoreConfig:
    return get_config_manager().get_section("core")


def get_numerical_config() -> NumericalConfig:
    """
    Get the numerical configuration.

    Returns:
        The numerical configuration object
    """
    return get_config_manager().get_section("numerical")


def get_logging_config() -> LoggingConfig:
    return get_config_manager().get_section("logging")

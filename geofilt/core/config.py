'''
Configuration management system for geofilt.

This module provides the configuration layer of the toolkit. Settings are
grouped into sections (numerical defaults of the filter engine, logging and
parallel execution) and resolved in layers:

1. Default configurations built into the package
2. A user-specific JSON configuration file
3. Environment variables of the form ``GEOFILT_<SECTION>_<OPTION>``
4. Runtime modifications through ``set_config``

Filter construction reads its defaults (time-domain block size, default
padding policy, default evaluation domain) from the ``numerical`` section;
filter instances copy those values on construction and are immutable
afterwards, so later configuration changes never alter existing filters.
'''

import json
import logging
import os
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional

from geofilt.core.exceptions import ConfigurationError
from geofilt.core.types import LogLevel, PadType

# Set up module-level logger
logger = logging.getLogger("geofilt.core.config")

# Constants for configuration paths and environment variables
CONFIG_ENV_PREFIX = "GEOFILT_"
DEFAULT_CONFIG_FILENAME = "geofilt_config.json"
USER_CONFIG_DIR_ENV = "GEOFILT_CONFIG_DIR"

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class ConfigSection(Enum):
    """Enumeration of configuration sections."""
    CORE = "core"
    NUMERICAL = "numerical"
    LOGGING = "logging"
    PARALLEL = "parallel"


@dataclass
class CoreConfig:
    """
    Core configuration settings.

    Attributes:
        version: The version of the configuration format
        user_config_dir: Directory for the user configuration file
        random_seed: Seed for the default noise generators (None for random)
    """
    version: str = "1.0.0"
    user_config_dir: Path = field(default_factory=lambda: Path.home() / ".geofilt")
    random_seed: Optional[int] = None


@dataclass
class NumericalConfig:
    """
    Numerical configuration settings of the filter engine.

    Attributes:
        block_size: Row block height of the time-domain ARMA evaluation
        default_pad_type: Padding policy used when a filter description omits it
        default_in_frequency_domain: Evaluation domain used when omitted
    """
    block_size: int = 64
    default_pad_type: str = "zero"
    default_in_frequency_domain: bool = False


@dataclass
class LoggingConfig:
    """
    Logging configuration settings.

    Attributes:
        log_level: Default logging level
        log_file: Path to log file (None for no file logging)
        log_format: Format string for log messages
        log_date_format: Format string for log message timestamps
        console_logging: Whether to log to console
        file_logging: Whether to log to file
    """
    log_level: LogLevel = "INFO"
    log_file: Optional[Path] = None
    log_format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    log_date_format: str = "%Y-%m-%d %H:%M:%S"
    console_logging: bool = True
    file_logging: bool = False


@dataclass
class ParallelConfig:
    """
    Parallel execution settings for per-arc processing.

    Attributes:
        max_workers: Number of workers (None for the executor default)
        use_processes: Whether to use processes instead of threads
    """
    max_workers: Optional[int] = None
    use_processes: bool = False


@dataclass
class GeoFiltConfig:
    """Complete configuration combining all sections."""
    core: CoreConfig = field(default_factory=CoreConfig)
    numerical: NumericalConfig = field(default_factory=NumericalConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    parallel: ParallelConfig = field(default_factory=ParallelConfig)


def _convert(current_value: Any, value: Any) -> Any:
    """Convert a raw (string) value to the type of the current setting."""
    if isinstance(current_value, bool):
        if isinstance(value, str):
            return value.strip().lower() in ("true", "yes", "1", "y")
        return bool(value)
    if isinstance(current_value, int):
        return int(value)
    if isinstance(current_value, float):
        return float(value)
    if isinstance(current_value, Path):
        return Path(value)
    if current_value is None and isinstance(value, str):
        # Optional settings: integers where possible, otherwise paths/strings
        if value.strip().lower() in ("", "none", "null"):
            return None
        try:
            return int(value)
        except ValueError:
            return value
    return value


class ConfigManager:
    """
    Configuration manager for geofilt.

    Holds the current configuration and provides methods to get, set, reset
    and persist configuration options.
    """

    def __init__(self) -> None:
        """Initialize the configuration manager with default settings."""
        self._config = GeoFiltConfig()
        self._initialized = False
        self._config_file: Optional[Path] = None

    def initialize(self) -> None:
        """
        Initialize the configuration manager.

        Loads the user configuration file if present, applies environment
        overrides, validates the result and sets up logging.
        """
        if self._initialized:
            return

        self._resolve_user_config_dir()
        self._load_user_config()
        self._apply_env_overrides()
        self._validate_config()
        self._setup_logging()

        self._initialized = True
        logger.debug("Configuration manager initialized")

    def _resolve_user_config_dir(self) -> None:
        """Determine the user configuration directory and file path."""
        env_config_dir = os.environ.get(USER_CONFIG_DIR_ENV)
        if env_config_dir:
            self._config.core.user_config_dir = Path(env_config_dir)
        self._config_file = self._config.core.user_config_dir / DEFAULT_CONFIG_FILENAME

    def _load_user_config(self) -> None:
        """Load the user configuration file if it exists."""
        if not self._config_file or not self._config_file.exists():
            logger.debug("No user configuration file found")
            return

        try:
            with open(self._config_file, "r") as f:
                user_config = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise ConfigurationError(
                "Failed to load user configuration",
                config_file=self._config_file,
                issue=str(e)
            ) from e

        self._update_from_dict(user_config)
        logger.debug(f"Loaded user configuration from {self._config_file}")

    def _apply_env_overrides(self) -> None:
        """Apply ``GEOFILT_<SECTION>_<OPTION>`` environment overrides."""
        for env_var, value in os.environ.items():
            if not env_var.startswith(CONFIG_ENV_PREFIX) or env_var == USER_CONFIG_DIR_ENV:
                continue

            parts = env_var[len(CONFIG_ENV_PREFIX):].lower().split("_", 1)
            if len(parts) != 2:
                continue

            section, option = parts
            try:
                ConfigSection(section)
            except ValueError:
                continue

            section_obj = getattr(self._config, section)
            if not hasattr(section_obj, option):
                continue

            try:
                setattr(section_obj, option, _convert(getattr(section_obj, option), value))
            except (TypeError, ValueError) as e:
                raise ConfigurationError(
                    f"Invalid environment override {env_var}",
                    setting=f"{section}.{option}",
                    value=value,
                    issue=str(e)
                ) from e
            logger.debug(f"Applied environment override: {env_var}={value}")

    def _setup_logging(self) -> None:
        """Configure the package logger from the logging section."""
        settings = self._config.logging
        root_logger = logging.getLogger("geofilt")

        for handler in root_logger.handlers[:]:
            root_logger.removeHandler(handler)

        root_logger.setLevel(getattr(logging, settings.log_level))
        formatter = logging.Formatter(fmt=settings.log_format, datefmt=settings.log_date_format)

        if settings.console_logging:
            console_handler = logging.StreamHandler()
            console_handler.setFormatter(formatter)
            root_logger.addHandler(console_handler)

        if settings.file_logging and settings.log_file:
            log_file = Path(settings.log_file)
            log_file.parent.mkdir(parents=True, exist_ok=True)
            file_handler = logging.FileHandler(log_file)
            file_handler.setFormatter(formatter)
            root_logger.addHandler(file_handler)

    def _validate_config(self) -> None:
        """
        Validate constrained configuration values.

        Raises:
            ConfigurationError: If a value violates its constraint
        """
        numerical = self._config.numerical
        if not isinstance(numerical.block_size, int) or numerical.block_size < 1:
            raise ConfigurationError(
                f"Invalid block_size: {numerical.block_size}, must be a positive integer",
                setting="numerical.block_size",
                value=numerical.block_size
            )
        if numerical.default_pad_type not in PadType.names():
            raise ConfigurationError(
                f"Invalid default_pad_type: {numerical.default_pad_type}",
                setting="numerical.default_pad_type",
                value=numerical.default_pad_type,
                issue=f"Valid options: {PadType.names()}"
            )

        if self._config.logging.log_level not in _LOG_LEVELS:
            raise ConfigurationError(
                f"Invalid log level: {self._config.logging.log_level}",
                setting="logging.log_level",
                value=self._config.logging.log_level,
                issue=f"Valid options: {list(_LOG_LEVELS)}"
            )

        max_workers = self._config.parallel.max_workers
        if max_workers is not None and (not isinstance(max_workers, int) or max_workers < 1):
            raise ConfigurationError(
                f"Invalid max_workers: {max_workers}, must be a positive integer or None",
                setting="parallel.max_workers",
                value=max_workers
            )

    def _update_from_dict(self, config_dict: Dict[str, Any]) -> None:
        """
        Update the configuration from a dictionary of sections.

        Unknown sections and options are reported and skipped.
        """
        for section_name, section_dict in config_dict.items():
            if not hasattr(self._config, section_name):
                logger.warning(f"Unknown configuration section: {section_name}")
                continue

            section = getattr(self._config, section_name)
            for option_name, option_value in section_dict.items():
                if not hasattr(section, option_name):
                    logger.warning(f"Unknown configuration option: {section_name}.{option_name}")
                    continue

                if isinstance(getattr(section, option_name), Path) and isinstance(option_value, str):
                    option_value = Path(option_value)
                setattr(section, option_name, option_value)

    def save_user_config(self) -> Path:
        """
        Save the current configuration to the user configuration file.

        Returns:
            Path: The file that was written
        """
        if self._config_file is None:
            self._resolve_user_config_dir()

        self._config_file.parent.mkdir(parents=True, exist_ok=True)
        with open(self._config_file, "w") as f:
            json.dump(self.to_dict(), f, indent=2)

        logger.debug(f"Saved user configuration to {self._config_file}")
        return self._config_file

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert the configuration to a dictionary.

        Returns:
            Dictionary representation of the configuration
        """
        result: Dict[str, Any] = {}
        for section_name in self.get_sections():
            section = getattr(self._config, section_name)
            section_dict = {}
            for field_name in section.__dataclass_fields__:
                value = getattr(section, field_name)
                if isinstance(value, Path):
                    value = str(value)
                section_dict[field_name] = value
            result[section_name] = section_dict
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
                value is rejected by validation
        """
        section_obj = self._get_section_object(section)

        if not hasattr(section_obj, option):
            raise ConfigurationError(
                f"Unknown configuration option: {section}.{option}",
                setting=f"{section}.{option}",
                value=value,
                issue="Option not found"
            )

        previous = getattr(section_obj, option)
        try:
            typed_value = _convert(previous, value) if isinstance(value, str) else value
        except (TypeError, ValueError) as e:
            raise ConfigurationError(
                f"Failed to set configuration option: {section}.{option}",
                setting=f"{section}.{option}",
                value=value,
                issue=str(e)
            ) from e

        setattr(section_obj, option, typed_value)
        try:
            self._validate_config()
        except ConfigurationError:
            setattr(section_obj, option, previous)
            raise

        if section == ConfigSection.LOGGING.value:
            self._setup_logging()
        logger.debug(f"Set configuration option: {section}.{option}={value}")

    def reset(self, section: Optional[str] = None, option: Optional[str] = None) -> None:
        """
        Reset configuration to default values.

        Args:
            section: The configuration section to reset, or None to reset all
            option: The configuration option to reset, or None to reset the section

        Raises:
            ConfigurationError: If the section or option is not found
        """
        defaults = GeoFiltConfig()

        if section is None:
            self._config = defaults
            self._resolve_user_config_dir()
            logger.debug("Reset all configuration to defaults")
            return

        section_obj = self._get_section_object(section)

        if option is None:
            setattr(self._config, section, getattr(defaults, section))
            logger.debug(f"Reset configuration section: {section}")
            return

        if not hasattr(section_obj, option):
            raise ConfigurationError(
                f"Unknown configuration option: {section}.{option}",
                setting=f"{section}.{option}",
                issue="Option not found"
            )

        setattr(section_obj, option, getattr(getattr(defaults, section), option))
        logger.debug(f"Reset configuration option: {section}.{option}")

    def get_sections(self) -> List[str]:
        """Get a list of all configuration section names."""
        return [member.value for member in ConfigSection]

    def _get_section_object(self, section: str) -> Any:
        if section not in self.get_sections():
            raise ConfigurationError(
                f"Unknown configuration section: {section}",
                setting=section,
                issue="Section not found"
            )
        return getattr(self._config, section)


# Create a singleton instance of the configuration manager
_config_manager = ConfigManager()


def initialize_config() -> None:
    """Initialize the configuration system."""
    _config_manager.initialize()


def get_config_manager() -> ConfigManager:
    """
    Get the configuration manager instance.

    Returns:
        The configuration manager instance
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


def save_config() -> Path:
    """Save the current configuration to the user configuration file."""
    return get_config_manager().save_user_config()

"""
Configuration management and singleton pattern.

This module provides the main configuration loading and management interface,
implementing a singleton pattern to ensure configuration is loaded only once.
"""

import logging
from pathlib import Path
from typing import Optional

from ..models.config import AppConfig, LoggingConfig, RunnerConfig
from ..validation import handle_config_error, ErrorSeverity
from .loader import get_tasks_path, load_main_config, load_tasks_config
from .validators import validate_logging_config, validate_runner_config, validate_tasks_config

logger = logging.getLogger(__name__)

# --- Global Singleton for Configuration ---

_CONFIG: Optional[AppConfig] = None

# Default location of the main configuration file: <repo>/conf/config.toml.
# Overridden by the CLI's --config option and by tests.
DEFAULT_CONFIG_FILE_PATH = Path(__file__).parent.parent.parent.parent / "conf" / "config.toml"
_CONFIG_FILE_PATH = DEFAULT_CONFIG_FILE_PATH


def set_config_path(config_path: Path) -> None:
    """
    Set a custom configuration file path.

    Args:
        config_path: Path to the main config.toml file

    Note:
        The cached configuration is dropped so the next get_config()
        call reads from the new path.
    """
    global _CONFIG_FILE_PATH, _CONFIG
    _CONFIG_FILE_PATH = Path(config_path)
    _CONFIG = None
    logger.info(f"Configuration path set to: {config_path}")


def clear_config_cache() -> None:
    """
    Clear the cached configuration, forcing a reload on next access.
    """
    global _CONFIG
    _CONFIG = None
    logger.debug("Configuration cache cleared")


def _load_config(config_path: Path) -> AppConfig:
    """
    Load the complete application configuration from TOML files.

    Args:
        config_path: Path to the main config.toml file

    Returns:
        Fully validated AppConfig instance

    Raises:
        FileNotFoundError: If configuration files are missing
        ValidationError: If configuration validation fails
        tomllib.TOMLDecodeError: If TOML files are malformed
    """
    try:
        main_config_data = load_main_config(config_path)

        runner_config = validate_runner_config(main_config_data.get("runner", {}))
        logging_config = validate_logging_config(main_config_data.get("logging", {}))

        tasks_path = get_tasks_path(main_config_data, config_path.parent)
        tasks_config = []
        if tasks_path is not None:
            tasks_config = validate_tasks_config(
                load_tasks_config(tasks_path),
                default_timeout=runner_config.default_timeout,
            )

        app_config = AppConfig(
            runner=runner_config,
            logging=logging_config,
            tasks=tasks_config,
        )

        logger.info(f"Successfully loaded configuration with {len(tasks_config)} tasks")
        return app_config

    except FileNotFoundError as e:
        handle_config_error(
            error=e,
            context="loading configuration file",
            severity=ErrorSeverity.CRITICAL,
            reraise=True,
            logger=logger
        )
        raise
    except Exception as e:
        handle_config_error(
            error=e,
            context="processing configuration",
            severity=ErrorSeverity.CRITICAL,
            reraise=True,
            logger=logger
        )
        raise


def get_config() -> AppConfig:
    """
    Get the global application configuration, loading it if necessary.

    When no path has been set and the default config.toml is absent (for
    example in an installed package), built-in defaults are used.

    Returns:
        The singleton AppConfig instance

    Raises:
        FileNotFoundError: If an explicitly set configuration file is missing
        ValidationError: If configuration validation fails
        tomllib.TOMLDecodeError: If TOML files are malformed
    """
    global _CONFIG
    if _CONFIG is None:
        if _CONFIG_FILE_PATH == DEFAULT_CONFIG_FILE_PATH and not _CONFIG_FILE_PATH.exists():
            logger.debug(f"No configuration at {_CONFIG_FILE_PATH}, using defaults")
            _CONFIG = AppConfig(runner=RunnerConfig(), logging=LoggingConfig(), tasks=[])
        else:
            _CONFIG = _load_config(_CONFIG_FILE_PATH)
    return _CONFIG


def is_config_loaded() -> bool:
    """
    Check if configuration has been loaded and cached.
    """
    return _CONFIG is not None


def get_config_info() -> dict:
    """
    Get information about the current configuration state.

    Returns:
        Dictionary with configuration metadata
    """
    return {
        "config_loaded": is_config_loaded(),
        "config_path": str(_CONFIG_FILE_PATH),
        "tasks_count": len(_CONFIG.tasks) if _CONFIG else 0,
        "default_timeout": _CONFIG.runner.default_timeout if _CONFIG else None,
    }

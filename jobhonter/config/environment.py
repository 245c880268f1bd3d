"""Environment variable loading."""

import os
from pathlib import Path
from typing import Optional

from .exceptions import ConfigurationError

VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class EnvironmentConfig:
    """Values read from the process environment.

    Attributes:
        log_level: LOG_LEVEL override, upper-cased, or None
        environment: ENVIRONMENT label attached to log records
        config_path: JOBHONTER_CONFIG path, or None
    """

    def __init__(
        self,
        log_level: Optional[str] = None,
        environment: str = "local",
        config_path: Optional[Path] = None,
    ):
        self.log_level = log_level
        self.environment = environment
        self.config_path = config_path


def load_environment_config() -> EnvironmentConfig:
    """
    Load optional environment variables.

    - LOG_LEVEL: DEBUG, INFO, WARNING, ERROR or CRITICAL
    - ENVIRONMENT: free-form label (default "local")
    - JOBHONTER_CONFIG: path to the YAML configuration file

    Raises:
        ConfigurationError: If LOG_LEVEL holds an unknown level
    """
    log_level = os.getenv("LOG_LEVEL")
    if log_level:
        log_level = log_level.strip().upper()
        if log_level not in VALID_LOG_LEVELS:
            raise ConfigurationError(
                f"Invalid LOG_LEVEL: {log_level}",
                suggestions=[f"Use one of: {', '.join(VALID_LOG_LEVELS)}"],
            )

    config_path = os.getenv("JOBHONTER_CONFIG")

    return EnvironmentConfig(
        log_level=log_level or None,
        environment=(os.getenv("ENVIRONMENT") or "local").strip(),
        config_path=Path(config_path) if config_path else None,
    )

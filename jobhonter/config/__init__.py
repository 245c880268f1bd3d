"""YAML and environment configuration."""

from .environment import EnvironmentConfig, load_environment_config
from .exceptions import ConfigurationError
from .loader import load_config, parse_config
from .models import (
    AdvancedConfig,
    AppConfig,
    LogFormat,
    LoggingConfig,
    LogLevel,
    ModeThresholds,
    ScoringWeights,
    SearchDefaults,
    SourceConfig,
    SourceType,
)

__all__ = [
    "AdvancedConfig",
    "AppConfig",
    "ConfigurationError",
    "EnvironmentConfig",
    "LogFormat",
    "LogLevel",
    "LoggingConfig",
    "ModeThresholds",
    "ScoringWeights",
    "SearchDefaults",
    "SourceConfig",
    "SourceType",
    "load_config",
    "load_environment_config",
    "parse_config",
]

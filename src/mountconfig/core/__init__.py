"""
Core module for mountconfig.
Settings, defaults, errors and logging shared by every other module.
"""

from mountconfig.core.logging import logger, perf_logger, ComponentLogger, PerformanceLogger
from mountconfig.core.defaults import SettingsDefaults, DEFAULTS, DEFAULT_KEY_ENV
from mountconfig.core.settings import Settings, SettingsProvider, build_settings
from mountconfig.core.exceptions import (
    MountConfigError,
    ArgumentError,
    ArgumentNullError,
    FormatError,
    CryptographicError,
    ErrorKind,
    ConfigurationError,
    EncryptionError,
)

__all__ = [
    # Logging
    "logger",
    "perf_logger",
    "ComponentLogger",
    "PerformanceLogger",
    # Settings
    "SettingsDefaults",
    "DEFAULTS",
    "DEFAULT_KEY_ENV",
    "Settings",
    "SettingsProvider",
    "build_settings",
    # Exceptions
    "MountConfigError",
    "ArgumentError",
    "ArgumentNullError",
    "FormatError",
    "CryptographicError",
    "ErrorKind",
    "ConfigurationError",
    "EncryptionError",
]

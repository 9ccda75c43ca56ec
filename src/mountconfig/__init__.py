"""
mountconfig - environment-aware JSON configuration mounted from a directory.

Loads ``{name}.json`` plus ``{name}.{Environment}.json`` from a configurable
mount path, optionally decrypting values encrypted with the legacy cipher.
"""

from mountconfig._version import __version__, __version_info__

# Core components
from mountconfig.core import (
    logger,
    Settings,
    SettingsDefaults,
    SettingsProvider,
    DEFAULTS,
    build_settings,
    MountConfigError,
    ArgumentError,
    ArgumentNullError,
    FormatError,
    CryptographicError,
    ErrorKind,
    ConfigurationError,
    EncryptionError,
)

# Configuration store
from mountconfig.configuration import (
    Configuration,
    ConfigurationBuilder,
    JsonConfigurationSource,
    JsonConfigurationProvider,
    LoadState,
    flatten_json,
)

# Encryption
from mountconfig.encryption import (
    Encryptor,
    DefaultEncryptorFactory,
    EncryptedJsonConfigurationSource,
    EncryptedJsonConfigurationProvider,
)

# Hosting and mounting
from mountconfig.hosting import HostEnvironment, get_settings_provider, get_settings_provider_force
from mountconfig.mount import (
    MountPlan,
    resolve_mount,
    add_mount_configuration,
    add_mount_configuration_from,
    configure_mount_configuration,
    add_encrypted_json_file,
    add_encrypted_mount_configuration,
    add_encrypted_mount_configuration_from,
    configure_encrypted_mount_configuration,
)

__all__ = [
    # Version info
    "__version__",
    "__version_info__",
    # Core
    "logger",
    "Settings",
    "SettingsDefaults",
    "SettingsProvider",
    "DEFAULTS",
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
    # Configuration store
    "Configuration",
    "ConfigurationBuilder",
    "JsonConfigurationSource",
    "JsonConfigurationProvider",
    "LoadState",
    "flatten_json",
    # Encryption
    "Encryptor",
    "DefaultEncryptorFactory",
    "EncryptedJsonConfigurationSource",
    "EncryptedJsonConfigurationProvider",
    # Hosting and mounting
    "HostEnvironment",
    "get_settings_provider",
    "get_settings_provider_force",
    "MountPlan",
    "resolve_mount",
    "add_mount_configuration",
    "add_mount_configuration_from",
    "configure_mount_configuration",
    "add_encrypted_json_file",
    "add_encrypted_mount_configuration",
    "add_encrypted_mount_configuration_from",
    "configure_encrypted_mount_configuration",
]

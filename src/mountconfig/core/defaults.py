"""
Default values for mount settings.

The defaults travel as an explicit immutable record so that a provider can be
built with its own set instead of mutating module state.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class SettingsDefaults:
    """Immutable defaults used by `SettingsProvider`."""

    file_name: str = "appsettings"
    config_mount_path: str = "config"
    hosting_name: str = "Development"
    # Shortest passphrase the legacy cipher can split into key and IV
    minimum_key_length: int = 8


DEFAULTS = SettingsDefaults()

# Environment variable read by the CLI when no --key is given
DEFAULT_KEY_ENV = "ENCODE_KEY"

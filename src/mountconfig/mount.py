"""
Mounting configuration files from a directory.

For a settings object with file name ``appsettings`` and hosting name
``Production`` the files are, under ``{current_directory}/{config_mount_path}``:

1. ``appsettings.json`` - always required
2. ``appsettings.Production.json`` - required only when ``settings.optional``
   is False

The base file is registered before the overlay, so overlay values win.
"""

import os
from typing import Callable, NamedTuple, Optional

from mountconfig.configuration import ConfigurationBuilder, JsonConfigurationSource
from mountconfig.core.exceptions import ArgumentError, ArgumentNullError
from mountconfig.core.logging import logger
from mountconfig.core.settings import Settings, SettingsProvider
from mountconfig.encryption.encryptor import EncryptorFactory
from mountconfig.encryption.provider import EncryptedJsonConfigurationSource


class MountPlan(NamedTuple):
    """The two files to register for one settings object."""

    base_path: str
    required_file: str
    optional_file: str
    optional: bool


def resolve_mount(settings: Settings) -> MountPlan:
    """Compute directory, file names and overlay optionality."""
    if settings is None:
        raise ArgumentNullError("settings")
    return MountPlan(
        base_path=os.path.join(settings.current_directory, settings.config_mount_path),
        required_file=f"{settings.file_name}.json",
        optional_file=f"{settings.file_name}.{settings.hosting_name}.json",
        optional=settings.optional,
    )


def _check_builder(builder: ConfigurationBuilder) -> None:
    if builder is None:
        raise ArgumentNullError("builder")


def _check_filenames(filenames: tuple) -> None:
    if any(filename is None for filename in filenames):
        raise ArgumentNullError("filenames")


# ============================================================================
# PLAIN JSON
# ============================================================================


def add_mount_configuration(
    builder: ConfigurationBuilder, settings: Settings
) -> ConfigurationBuilder:
    """Register the base file and its environment overlay."""
    _check_builder(builder)
    plan = resolve_mount(settings)

    logger.debug(
        "Mounting configuration",
        base_path=plan.base_path,
        required_file=plan.required_file,
        optional_file=plan.optional_file,
        optional=plan.optional,
    )
    builder.set_base_path(plan.base_path)
    builder.add(JsonConfigurationSource(plan.required_file, optional=False))
    builder.add(JsonConfigurationSource(plan.optional_file, optional=plan.optional))
    return builder


def add_mount_configuration_from(
    builder: ConfigurationBuilder, provider: SettingsProvider, *filenames: str
) -> ConfigurationBuilder:
    """
    Mount one file pair per filename, in the given order.

    Lets configuration be split by concern::

        add_mount_configuration_from(builder, provider, "appsettings", "database", "logging")

    Without filenames the default ``appsettings`` is mounted.
    """
    _check_builder(builder)
    if provider is None:
        raise ArgumentNullError("provider")
    _check_filenames(filenames)

    for filename in filenames or (provider.defaults.file_name,):
        add_mount_configuration(builder, provider.get_settings(filename))
    return builder


def configure_mount_configuration(
    builder: ConfigurationBuilder, configure: Callable[[Settings], None]
) -> ConfigurationBuilder:
    """
    Mount default settings after ``configure`` adjusts them.

    Example:
        configure_mount_configuration(builder, lambda s: setattr(s, "file_name", "database"))
    """
    _check_builder(builder)
    if configure is None:
        raise ArgumentNullError("configure")

    settings = SettingsProvider.prepare_default()
    configure(settings)
    return add_mount_configuration(builder, settings)


# ============================================================================
# ENCRYPTED JSON
# ============================================================================


def add_encrypted_json_file(
    builder: ConfigurationBuilder,
    path: str,
    key: str,
    optional: bool = False,
    encryptor_factory: Optional[EncryptorFactory] = None,
) -> ConfigurationBuilder:
    """Register a single encrypted JSON file relative to the builder's base path."""
    _check_builder(builder)
    if path is None:
        raise ArgumentNullError("path")
    if not path.strip():
        raise ArgumentError("Path cannot be empty or whitespace.", param="path")

    return builder.add(
        EncryptedJsonConfigurationSource(
            path, key, optional=optional, encryptor_factory=encryptor_factory
        )
    )


def add_encrypted_mount_configuration(
    builder: ConfigurationBuilder,
    settings: Settings,
    encryptor_factory: Optional[EncryptorFactory] = None,
) -> ConfigurationBuilder:
    """Register the encrypted base file and overlay, both decrypted with ``settings.key``."""
    _check_builder(builder)
    plan = resolve_mount(settings)
    if settings.key is None:
        raise ArgumentError("Settings must carry an encryption key.", param="settings.key")

    logger.debug(
        "Mounting encrypted configuration",
        base_path=plan.base_path,
        required_file=plan.required_file,
        optional_file=plan.optional_file,
        optional=plan.optional,
    )
    builder.set_base_path(plan.base_path)
    add_encrypted_json_file(
        builder, plan.required_file, settings.key, False, encryptor_factory
    )
    add_encrypted_json_file(
        builder, plan.optional_file, settings.key, plan.optional, encryptor_factory
    )
    return builder


def add_encrypted_mount_configuration_from(
    builder: ConfigurationBuilder,
    key: str,
    provider: SettingsProvider,
    *filenames: str,
) -> ConfigurationBuilder:
    """Encrypted counterpart of `add_mount_configuration_from`."""
    _check_builder(builder)
    if key is None:
        raise ArgumentNullError("key")
    if provider is None:
        raise ArgumentNullError("provider")
    _check_filenames(filenames)

    for filename in filenames or (provider.defaults.file_name,):
        settings = provider.get_settings(filename)
        settings.key = key
        add_encrypted_mount_configuration(builder, settings)
    return builder


def configure_encrypted_mount_configuration(
    builder: ConfigurationBuilder, configure: Callable[[Settings], None]
) -> ConfigurationBuilder:
    """Encrypted counterpart of `configure_mount_configuration`; ``configure`` sets the key."""
    _check_builder(builder)
    if configure is None:
        raise ArgumentNullError("configure")

    settings = SettingsProvider.prepare_default()
    configure(settings)
    return add_encrypted_mount_configuration(builder, settings)

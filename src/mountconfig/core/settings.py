"""
Mount settings and the provider that builds them.

Settings:
1. Default values from `SettingsDefaults`
2. Host overrides (environment name, content root)
3. Caller changes, validated field by field on assignment
"""

import os
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, ValidationInfo, field_validator

from mountconfig.core.defaults import DEFAULTS, SettingsDefaults
from mountconfig.core.exceptions import ArgumentError, ArgumentNullError


class Settings(BaseModel):
    """
    Where and what to mount.

    Every string field must be non-empty and not whitespace-only. A bad value
    raises `ArgumentError` (`ArgumentNullError` for None) whose ``param`` names
    the field, both at construction and on assignment.
    """

    model_config = ConfigDict(
        validate_assignment=True,
        extra="forbid",
    )

    current_directory: str = Field(
        default_factory=os.getcwd, description="Base working directory"
    )
    file_name: str = Field(
        default=DEFAULTS.file_name, description="Logical config name without extension"
    )
    config_mount_path: str = Field(
        default=DEFAULTS.config_mount_path, description="Subdirectory holding the files"
    )
    hosting_name: str = Field(
        default=DEFAULTS.hosting_name, description="Environment qualifier of the overlay file"
    )
    optional: bool = Field(default=True, description="Whether the overlay file may be absent")
    key: Optional[str] = Field(default=None, description="Encryption passphrase")

    @field_validator("current_directory", "file_name", "config_mount_path", "hosting_name")
    @classmethod
    def _not_blank(cls, value: str, info: ValidationInfo) -> str:
        if not value.strip():
            raise ValueError(f"{info.field_name} cannot be empty or whitespace")
        return value

    @field_validator("key")
    @classmethod
    def _valid_key(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return value
        if not value.strip():
            raise ValueError("key cannot be empty or whitespace")
        if len(value) < DEFAULTS.minimum_key_length:
            raise ValueError(
                f"key must be at least {DEFAULTS.minimum_key_length} characters long"
            )
        return value

    def __init__(self, **data: Any) -> None:
        try:
            super().__init__(**data)
        except ValidationError as e:
            raise _argument_error(e) from e

    def __setattr__(self, name: str, value: Any) -> None:
        try:
            super().__setattr__(name, value)
        except ValidationError as e:
            raise _argument_error(e) from e

    def copy_with(self, **changes: Any) -> "Settings":
        """Return a validated copy with ``changes`` applied."""
        return Settings(**{**self.model_dump(), **changes})


def _argument_error(exc: ValidationError) -> ArgumentError:
    """Translate the first pydantic error into the package's argument errors."""
    error = exc.errors()[0]
    param = str(error["loc"][0]) if error["loc"] else "settings"
    if error.get("input") is None:
        return ArgumentNullError(param, cause=exc)
    return ArgumentError(f"Invalid value for '{param}': {error['msg']}", param=param, cause=exc)


_UNSET: Any = object()


def build_settings(
    filename: Optional[str] = _UNSET,
    *,
    defaults: SettingsDefaults = DEFAULTS,
    hosting_name_override: Optional[str] = None,
    current_directory_override: Optional[str] = None,
    force_required: bool = False,
) -> Settings:
    """
    Build a fresh `Settings`.

    Args:
        filename: Config name without extension; omitted means the default
        defaults: Defaults record to start from
        hosting_name_override: Environment name supplied by the host
        current_directory_override: Content root supplied by the host
        force_required: Make the environment overlay file mandatory

    Raises:
        ArgumentNullError: filename is None
        ArgumentError: filename is empty or whitespace
    """
    if filename is _UNSET:
        filename = defaults.file_name
    if filename is None:
        raise ArgumentNullError("filename")
    if not filename.strip():
        raise ArgumentError("Filename cannot be empty or whitespace.", param="filename")

    values: dict = {
        "file_name": filename,
        "config_mount_path": defaults.config_mount_path,
        "hosting_name": hosting_name_override
        if hosting_name_override is not None
        else defaults.hosting_name,
        "optional": not force_required,
    }
    if current_directory_override is not None:
        values["current_directory"] = current_directory_override

    return Settings(**values)


class SettingsProvider:
    """
    Hands out a new `Settings` per call.

    A plain provider uses the defaults; a host-derived provider carries the
    environment name and content root, and ``force_required`` makes the
    overlay file mandatory.
    """

    def __init__(
        self,
        defaults: SettingsDefaults = DEFAULTS,
        *,
        hosting_name: Optional[str] = None,
        current_directory: Optional[str] = None,
        force_required: bool = False,
    ) -> None:
        if defaults is None:
            raise ArgumentNullError("defaults")
        self.defaults = defaults
        self.hosting_name = hosting_name
        self.current_directory = current_directory
        self.force_required = force_required

    def get_settings(self, filename: Optional[str] = _UNSET) -> Settings:
        """Settings for ``filename`` (default ``"appsettings"``)."""
        return build_settings(
            filename,
            defaults=self.defaults,
            hosting_name_override=self.hosting_name,
            current_directory_override=self.current_directory,
            force_required=self.force_required,
        )

    @staticmethod
    def prepare_default() -> Settings:
        """Default settings, as the plain provider would return them."""
        return SettingsProvider().get_settings()

    def __repr__(self) -> str:
        return (
            f"SettingsProvider(hosting_name={self.hosting_name!r}, "
            f"current_directory={self.current_directory!r}, "
            f"force_required={self.force_required!r})"
        )

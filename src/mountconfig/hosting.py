"""
Settings providers derived from the hosting environment.
"""

import os
from dataclasses import dataclass
from typing import Optional

from mountconfig.core.defaults import DEFAULTS, SettingsDefaults
from mountconfig.core.exceptions import ArgumentNullError
from mountconfig.core.settings import SettingsProvider

ENVIRONMENT_VARIABLE = "APP_ENVIRONMENT"
PRODUCTION = "Production"


@dataclass(frozen=True)
class HostEnvironment:
    """What the host knows about where the application runs."""

    environment_name: str
    content_root_path: str
    application_name: str = ""

    @classmethod
    def from_environ(
        cls,
        variable: str = ENVIRONMENT_VARIABLE,
        content_root: Optional[str] = None,
        application_name: str = "",
    ) -> "HostEnvironment":
        """
        Environment name from ``variable`` (``Production`` when unset or
        blank), content root from ``content_root`` or the working directory.
        """
        name = os.environ.get(variable, "").strip() or PRODUCTION
        return cls(
            environment_name=name,
            content_root_path=content_root or os.getcwd(),
            application_name=application_name,
        )

    def is_environment(self, name: str) -> bool:
        return self.environment_name.lower() == name.lower()


def get_settings_provider(
    env: HostEnvironment, defaults: SettingsDefaults = DEFAULTS
) -> SettingsProvider:
    """Provider using the host's environment name and content root.

    The environment file stays optional.
    """
    if env is None:
        raise ArgumentNullError("env")
    return SettingsProvider(
        defaults,
        hosting_name=env.environment_name,
        current_directory=env.content_root_path,
    )


def get_settings_provider_force(
    env: HostEnvironment, defaults: SettingsDefaults = DEFAULTS
) -> SettingsProvider:
    """Like `get_settings_provider`, but the environment file must exist."""
    if env is None:
        raise ArgumentNullError("env")
    return SettingsProvider(
        defaults,
        hosting_name=env.environment_name,
        current_directory=env.content_root_path,
        force_required=True,
    )

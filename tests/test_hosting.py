"""Tests for host-derived settings providers."""

import os

import pytest

from mountconfig.core.exceptions import ArgumentNullError
from mountconfig.hosting import (
    HostEnvironment,
    get_settings_provider,
    get_settings_provider_force,
)


@pytest.fixture
def host():
    return HostEnvironment(environment_name="Production", content_root_path="/srv/app")


def test_provider_takes_environment_name_and_content_root(host):
    settings = get_settings_provider(host).get_settings("appsettings")

    assert settings.hosting_name == "Production"
    assert settings.current_directory == "/srv/app"
    assert settings.optional is True


def test_force_provider_requires_overlay(host):
    settings = get_settings_provider_force(host).get_settings("appsettings")

    assert settings.hosting_name == "Production"
    assert settings.optional is False


def test_providers_reject_none_environment():
    with pytest.raises(ArgumentNullError):
        get_settings_provider(None)
    with pytest.raises(ArgumentNullError):
        get_settings_provider_force(None)


def test_from_environ_reads_variable(monkeypatch, tmp_path):
    monkeypatch.setenv("APP_ENVIRONMENT", "Staging")

    env = HostEnvironment.from_environ(content_root=str(tmp_path))

    assert env.environment_name == "Staging"
    assert env.content_root_path == str(tmp_path)


def test_from_environ_defaults_to_production_and_cwd(monkeypatch):
    monkeypatch.delenv("APP_ENVIRONMENT", raising=False)

    env = HostEnvironment.from_environ()

    assert env.environment_name == "Production"
    assert env.content_root_path == os.getcwd()


def test_from_environ_custom_variable(monkeypatch):
    monkeypatch.setenv("MY_ENV", "Development")

    assert HostEnvironment.from_environ("MY_ENV").is_environment("development")

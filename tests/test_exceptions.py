"""Tests for the exception hierarchy."""

import pytest

from mountconfig.core.exceptions import (
    ArgumentError,
    ArgumentNullError,
    ConfigurationError,
    CryptographicError,
    EncryptionError,
    ErrorKind,
    FormatError,
    MountConfigError,
)


def test_argument_errors_are_value_and_type_errors():
    null = ArgumentNullError("filename")

    assert isinstance(null, ArgumentError)
    assert isinstance(null, ValueError)
    assert isinstance(null, TypeError)
    assert null.param == "filename"
    assert str(null) == "Value cannot be None. (Parameter 'filename')"


def test_format_error_is_value_error():
    assert issubclass(FormatError, ValueError)
    assert issubclass(FormatError, MountConfigError)
    assert not issubclass(CryptographicError, ValueError)


def test_configuration_error_context():
    error = ConfigurationError(
        "Configuration file 'app.json' was not found",
        kind=ErrorKind.FILE_NOT_FOUND,
        mount_path="/srv/app/config",
        file_name="app.json",
    )

    assert error.context == {
        "kind": "file_not_found",
        "mount_path": "/srv/app/config",
        "file_name": "app.json",
    }
    assert error.line_info is None


def test_configuration_error_defaults_to_unexpected():
    assert ConfigurationError("boom").kind == ErrorKind.UNEXPECTED


def test_encryption_error_kind_and_key():
    cause = CryptographicError("Bad data. Decryption failed.")
    error = EncryptionError("failed", file_name="secrets.json", key="Database:Password", cause=cause)

    assert isinstance(error, ConfigurationError)
    assert error.kind == ErrorKind.DECRYPT_FAILED
    assert error.key == "Database:Password"
    assert error.context["key"] == "Database:Password"
    assert error.__cause__ is cause


def test_to_dict():
    error = ConfigurationError(
        "Invalid JSON", kind=ErrorKind.PARSE_ERROR, file_name="bad.json", line_info="line 3, column 5",
        cause=ValueError("Expecting ':' delimiter"),
    )
    error.add_suggestion("Validate the file with a JSON linter")

    result = error.to_dict()

    assert result["code"] == "ConfigurationError"
    assert result["message"] == "Invalid JSON"
    assert result["timestamp"].endswith("Z")
    assert result["context"]["line_info"] == "line 3, column 5"
    assert result["cause"] == {"type": "ValueError", "message": "Expecting ':' delimiter"}
    assert result["suggestions"] == ["Validate the file with a JSON linter"]


def test_to_dict_omits_empty_parts():
    result = MountConfigError("plain").to_dict()

    assert "cause" not in result
    assert "suggestions" not in result


@pytest.mark.parametrize("suggestion", ["", None, 42])
def test_add_suggestion_ignores_invalid(suggestion):
    error = MountConfigError("x")

    error.add_suggestion(suggestion)

    assert error.suggestions == []


def test_add_suggestion_ignores_duplicates():
    error = MountConfigError("x")

    error.add_suggestion("Check the key")
    error.add_suggestion("Check the key")

    assert error.suggestions == ["Check the key"]

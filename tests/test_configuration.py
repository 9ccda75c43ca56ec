"""Tests for JSON flattening, the JSON file provider and the builder."""

import pytest

from mountconfig.configuration import (
    Configuration,
    ConfigurationBuilder,
    DuplicateKeyError,
    JsonConfigurationProvider,
    JsonConfigurationSource,
    LoadState,
    flatten_json,
    parse_json,
)
from mountconfig.core.exceptions import ArgumentError, ConfigurationError, ErrorKind


# ---------------------------------------------------------------------------
# flatten_json
# ---------------------------------------------------------------------------


def test_flatten_nested_objects_use_colon_keys():
    flat = flatten_json({"Database": {"Connection": {"Host": "db"}}, "Name": "app"})

    assert flat == {"Database:Connection:Host": "db", "Name": "app"}


def test_flatten_arrays_use_index_segments():
    flat = flatten_json({"Servers": ["a", {"Host": "b"}]})

    assert flat == {"Servers:0": "a", "Servers:1:Host": "b"}


def test_flatten_scalars_become_strings():
    flat = flatten_json({"Port": "5432", "Ssl": True, "Debug": False, "Empty": None})

    assert flat == {"Port": "5432", "Ssl": "True", "Debug": "False", "Empty": ""}


def test_flatten_skips_empty_containers():
    assert flatten_json({"A": {}, "B": [], "C": "x"}) == {"C": "x"}


def test_flatten_rejects_keys_differing_only_by_case():
    with pytest.raises(DuplicateKeyError):
        flatten_json({"Key": "1", "key": "2"})


@pytest.mark.parametrize(
    "text",
    ['{"A": "1", "A": "2"}', '{"A": "1", "a": "2"}', '{"Outer": {"Inner": 1, "INNER": 2}}'],
)
def test_parse_rejects_repeated_member_names(text):
    with pytest.raises(DuplicateKeyError):
        parse_json(text)


def test_parse_allows_same_name_in_different_objects():
    assert parse_json('{"A": {"Id": 1}, "B": {"Id": 2}}') == {"A": {"Id": "1"}, "B": {"Id": "2"}}


# ---------------------------------------------------------------------------
# JsonConfigurationProvider
# ---------------------------------------------------------------------------


def _provider(config_dir, name, optional=False):
    return JsonConfigurationProvider(
        JsonConfigurationSource(name, optional=optional, base_path=str(config_dir.mount))
    )


def test_load_reads_file(config_dir):
    config_dir.write("app.json", {"A": "1", "Nested": {"B": 2.50}})
    provider = _provider(config_dir, "app.json")

    provider.load()

    assert provider.state == LoadState.LOADED
    assert dict(provider.data) == {"A": "1", "Nested:B": "2.5"}


def test_numbers_keep_their_json_text(config_dir):
    config_dir.write_text("app.json", '{"Ratio": 1.50, "Big": 12345678901234567890}')
    provider = _provider(config_dir, "app.json")

    provider.load()

    assert provider.data["Ratio"] == "1.50"
    assert provider.data["Big"] == "12345678901234567890"


def test_missing_required_file_is_file_not_found(config_dir):
    provider = _provider(config_dir, "missing.json")

    with pytest.raises(ConfigurationError) as exc_info:
        provider.load()

    error = exc_info.value
    assert error.kind == ErrorKind.FILE_NOT_FOUND
    assert error.file_name == "missing.json"
    assert error.mount_path == str(config_dir.mount)
    assert provider.state == LoadState.FAILED


def test_missing_optional_file_loads_nothing(config_dir):
    provider = _provider(config_dir, "missing.json", optional=True)

    provider.load()

    assert provider.state == LoadState.LOADED
    assert dict(provider.data) == {}


def test_missing_directory_is_file_not_found(tmp_path):
    provider = JsonConfigurationProvider(
        JsonConfigurationSource("app.json", base_path=str(tmp_path / "nowhere"))
    )

    with pytest.raises(ConfigurationError) as exc_info:
        provider.load()

    assert exc_info.value.kind == ErrorKind.FILE_NOT_FOUND


@pytest.mark.parametrize(
    "text",
    [
        '{\n  "Key": "Value"\n',
        '{\n  "Key": "Value",\n  "InvalidKey"\n}',
        "",
        "   \n\t  ",
        '["item1", "item2"]',
        '"just a string"',
        '{"Key": "a", "key": "b"}',
        '{"Key": "a", "Key": "b"}',
        '{"Value": NaN}',
    ],
    ids=[
        "missing-brace",
        "invalid-syntax",
        "empty",
        "whitespace",
        "array-root",
        "string-root",
        "duplicate-key",
        "exact-duplicate-key",
        "nan",
    ],
)
@pytest.mark.parametrize("optional", [False, True])
def test_malformed_json_is_parse_error_even_when_optional(config_dir, text, optional):
    config_dir.write_text("bad.json", text)
    provider = _provider(config_dir, "bad.json", optional=optional)

    with pytest.raises(ConfigurationError) as exc_info:
        provider.load()

    assert exc_info.value.kind == ErrorKind.PARSE_ERROR
    assert exc_info.value.file_name == "bad.json"
    assert provider.state == LoadState.FAILED


def test_parse_error_reports_line_and_column(config_dir):
    config_dir.write_text("bad.json", '{\n  "A": "1",\n  "B"\n}')
    provider = _provider(config_dir, "bad.json")

    with pytest.raises(ConfigurationError) as exc_info:
        provider.load()

    assert exc_info.value.line_info.startswith("line 3,")


def test_utf8_bom_is_accepted(config_dir):
    (config_dir.mount / "bom.json").write_bytes(b'\xef\xbb\xbf{"A": "1"}')
    provider = _provider(config_dir, "bom.json")

    provider.load()

    assert provider.data["A"] == "1"


def test_unexpected_errors_are_wrapped(config_dir, monkeypatch):
    config_dir.write("app.json", {"A": "1"})
    provider = _provider(config_dir, "app.json")

    def boom(data):
        raise RuntimeError("boom")

    monkeypatch.setattr(provider, "_process", boom)

    with pytest.raises(ConfigurationError) as exc_info:
        provider.load()

    assert exc_info.value.kind == ErrorKind.UNEXPECTED
    assert isinstance(exc_info.value.cause, RuntimeError)
    assert exc_info.value.__cause__ is exc_info.value.cause
    assert dict(provider.data) == {}


def test_source_rejects_blank_path():
    with pytest.raises(ArgumentError):
        JsonConfigurationSource("  ")


# ---------------------------------------------------------------------------
# Configuration and builder
# ---------------------------------------------------------------------------


def test_later_source_wins_key_by_key(config_dir):
    config_dir.write("base.json", {"A": "1", "B": "2"})
    config_dir.write("overlay.json", {"B": "3", "C": "4"})

    config = (
        ConfigurationBuilder()
        .set_base_path(str(config_dir.mount))
        .add_json_file("base.json")
        .add_json_file("overlay.json")
        .build()
    )

    assert config.as_dict() == {"A": "1", "B": "3", "C": "4"}


def test_lookup_ignores_case_and_keeps_first_spelling(config_dir):
    config_dir.write("base.json", {"Database": {"Host": "a"}})
    config_dir.write("overlay.json", {"database": {"host": "b"}})

    config = (
        ConfigurationBuilder()
        .set_base_path(str(config_dir.mount))
        .add_json_file("base.json")
        .add_json_file("overlay.json")
        .build()
    )

    assert config["DATABASE:HOST"] == "b"
    assert "database:host" in config
    assert list(config) == ["Database:Host"]
    assert len(config.providers) == 2


def test_missing_key_raises_key_error_and_get_returns_default():
    config = Configuration({"A": "1"})

    with pytest.raises(KeyError):
        config["B"]
    assert config.get("B", "fallback") == "fallback"


def test_get_section_strips_prefix():
    config = Configuration(
        {"Database:Host": "db", "Database:Port": "5432", "DatabaseName": "x", "Other": "y"}
    )

    section = config.get_section("database")

    assert section.as_dict() == {"Host": "db", "Port": "5432"}


def test_sources_bind_base_path_when_added(tmp_path):
    first = tmp_path / "first"
    second = tmp_path / "second"
    first.mkdir()
    second.mkdir()
    (first / "a.json").write_text('{"Where": "first"}')
    (second / "b.json").write_text('{"Other": "second"}')

    builder = ConfigurationBuilder()
    builder.set_base_path(str(first)).add_json_file("a.json")
    builder.set_base_path(str(second)).add_json_file("b.json")
    config = builder.build()

    assert config["Where"] == "first"
    assert config["Other"] == "second"


def test_build_stops_at_first_failing_source(config_dir):
    config_dir.write("good.json", {"A": "1"})

    builder = (
        ConfigurationBuilder()
        .set_base_path(str(config_dir.mount))
        .add_json_file("good.json")
        .add_json_file("missing.json")
    )

    with pytest.raises(ConfigurationError) as exc_info:
        builder.build()

    assert exc_info.value.kind == ErrorKind.FILE_NOT_FOUND


def test_builder_rejects_blank_base_path():
    with pytest.raises(ArgumentError):
        ConfigurationBuilder().set_base_path("")

"""
Layered key/value configuration built from JSON files.

A `ConfigurationBuilder` collects sources in registration order. `build()`
loads each one and merges the results: a later source wins key by key.
Keys are colon-delimited paths (``"Database:Password"``) compared without
regard to case.
"""

import json
import os
from abc import ABC, abstractmethod
from enum import Enum
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, Iterator, List, Mapping, Optional, Sequence, Tuple

from mountconfig.core.exceptions import (
    ArgumentError,
    ArgumentNullError,
    ConfigurationError,
    ErrorKind,
)
from mountconfig.core.logging import logger, perf_logger

KEY_DELIMITER = ":"


# ============================================================================
# JSON FLATTENING
# ============================================================================


class DuplicateKeyError(ValueError):
    """Two JSON members flatten to the same configuration key."""

    def __init__(self, key: str) -> None:
        self.key = key
        super().__init__(f"A duplicate key '{key}' was found.")


def _reject_constant(name: str) -> Any:
    raise ValueError(f"'{name}' is not a valid JSON value")


def _unique_members(pairs: List[Tuple[str, Any]]) -> Dict[str, Any]:
    obj: Dict[str, Any] = {}
    seen = set()
    for name, value in pairs:
        if name.lower() in seen:
            raise DuplicateKeyError(name)
        seen.add(name.lower())
        obj[name] = value
    return obj


def parse_json(text: str) -> Any:
    """
    Parse JSON text keeping numbers as their literal text.

    Raises:
        DuplicateKeyError: a member name repeats within one object, ignoring case
    """
    return json.loads(
        text,
        object_pairs_hook=_unique_members,
        parse_int=str,
        parse_float=str,
        parse_constant=_reject_constant,
    )


def flatten_json(document: Mapping[str, Any]) -> Dict[str, str]:
    """
    Flatten a parsed JSON object into colon-delimited keys.

    Example:
        {"Database": {"Hosts": ["a", "b"], "Port": 5432, "Ssl": true}}
        ->
        {"Database:Hosts:0": "a", "Database:Hosts:1": "b",
         "Database:Port": "5432", "Database:Ssl": "True"}

    ``null`` becomes an empty string; empty objects and arrays add no key.

    Raises:
        DuplicateKeyError: two members differ only by case
    """
    data: Dict[str, str] = {}
    seen: Dict[str, str] = {}

    def visit(value: Any, path: List[str]) -> None:
        if isinstance(value, dict):
            for name, child in value.items():
                visit(child, path + [name])
        elif isinstance(value, list):
            for index, child in enumerate(value):
                visit(child, path + [str(index)])
        else:
            key = KEY_DELIMITER.join(path)
            if key.lower() in seen:
                raise DuplicateKeyError(key)
            seen[key.lower()] = key
            if value is None:
                data[key] = ""
            elif isinstance(value, bool):
                data[key] = "True" if value else "False"
            else:
                data[key] = str(value)

    for name, child in document.items():
        visit(child, [name])
    return data


# ============================================================================
# CONFIGURATION VIEW
# ============================================================================


class Configuration(Mapping[str, str]):
    """
    Read-only merged configuration.

    Lookup ignores case; iteration yields keys with the spelling of the
    source that first defined them.
    """

    def __init__(
        self,
        data: Optional[Mapping[str, str]] = None,
        providers: Sequence["ConfigurationProvider"] = (),
    ) -> None:
        self._entries: Dict[str, Tuple[str, str]] = {}
        self._providers: Tuple["ConfigurationProvider", ...] = tuple(providers)
        for provider in self._providers:
            self._merge(provider.data)
        if data:
            self._merge(data)

    def _merge(self, data: Mapping[str, str]) -> None:
        for key, value in data.items():
            folded = key.lower()
            if folded in self._entries:
                key = self._entries[folded][0]
            self._entries[folded] = (key, value)

    @property
    def providers(self) -> Tuple["ConfigurationProvider", ...]:
        return self._providers

    def __getitem__(self, key: str) -> str:
        return self._entries[key.lower()][1]

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and key.lower() in self._entries

    def __iter__(self) -> Iterator[str]:
        return (key for key, _ in self._entries.values())

    def __len__(self) -> int:
        return len(self._entries)

    def get_section(self, prefix: str) -> "Configuration":
        """Sub-configuration of every key under ``prefix``, prefix removed."""
        if prefix is None:
            raise ArgumentNullError("prefix")
        head = prefix.lower() + KEY_DELIMITER
        return Configuration(
            {
                key[len(head):]: value
                for key, value in self._entries.values()
                if key.lower().startswith(head)
            }
        )

    def as_dict(self) -> Dict[str, str]:
        return dict(self._entries.values())

    def __repr__(self) -> str:
        return f"Configuration({len(self)} keys)"


# ============================================================================
# SOURCES AND PROVIDERS
# ============================================================================


class LoadState(str, Enum):
    UNLOADED = "unloaded"
    LOADING = "loading"
    LOADED = "loaded"
    FAILED = "failed"


class ConfigurationProvider(ABC):
    """Loads one source into a flat key/value map."""

    def __init__(self) -> None:
        self._data: Dict[str, str] = {}
        self.state: LoadState = LoadState.UNLOADED

    @property
    def data(self) -> Mapping[str, str]:
        return MappingProxyType(self._data)

    @abstractmethod
    def load(self) -> None:
        """Populate `data` from the source."""


class ConfigurationSource(ABC):
    """A registered origin of configuration values."""

    base_path: Optional[str] = None

    @abstractmethod
    def build(self, builder: "ConfigurationBuilder") -> ConfigurationProvider:
        """Create the provider that loads this source."""


class JsonConfigurationSource(ConfigurationSource):
    """A JSON file relative to a base directory."""

    def __init__(self, path: str, optional: bool = False, base_path: Optional[str] = None):
        if path is None:
            raise ArgumentNullError("path")
        if not path.strip():
            raise ArgumentError("Path cannot be empty or whitespace.", param="path")
        self.path = path
        self.optional = optional
        self.base_path = base_path

    @property
    def mount_path(self) -> str:
        return self.base_path if self.base_path is not None else os.getcwd()

    @property
    def full_path(self) -> Path:
        return Path(self.mount_path) / self.path

    def build(self, builder: "ConfigurationBuilder") -> ConfigurationProvider:
        return JsonConfigurationProvider(self)

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(path={self.path!r}, optional={self.optional!r}, "
            f"base_path={self.base_path!r})"
        )


class JsonConfigurationProvider(ConfigurationProvider):
    """
    Loads a JSON file.

    States: UNLOADED -> LOADING -> LOADED | FAILED

    - Missing required file: FILE_NOT_FOUND
    - Missing optional file: loads nothing
    - Unreadable text, invalid JSON, non-object root, duplicate key:
      PARSE_ERROR, optional or not
    - Anything else: UNEXPECTED, original error kept as cause

    Subclasses transform the parsed entries in `_process`; nothing is
    committed unless it returns.
    """

    def __init__(self, source: JsonConfigurationSource) -> None:
        if source is None:
            raise ArgumentNullError("source")
        super().__init__()
        self.source = source

    def load(self) -> None:
        mount_path = self.source.mount_path
        file_name = self.source.path
        self.state = LoadState.LOADING

        try:
            with perf_logger.measure("load_configuration_file", file_name=file_name):
                parsed = self._read(mount_path, file_name)
                data = self._process(parsed) if parsed else parsed
        except ConfigurationError as e:
            self.state = LoadState.FAILED
            logger.error(
                "Configuration file failed to load",
                kind=e.kind.value,
                mount_path=mount_path,
                file_name=file_name,
            )
            raise
        except Exception as e:
            self.state = LoadState.FAILED
            logger.error(
                "Unexpected error loading configuration file",
                mount_path=mount_path,
                file_name=file_name,
                error=str(e),
            )
            raise ConfigurationError(
                f"Unexpected error while loading configuration file '{file_name}' "
                f"from '{mount_path}': {e}",
                kind=ErrorKind.UNEXPECTED,
                mount_path=mount_path,
                file_name=file_name,
                cause=e,
            ) from e

        self._data = data
        self.state = LoadState.LOADED
        logger.debug(
            "Configuration file loaded", file_name=file_name, keys=len(data)
        )

    def _read(self, mount_path: str, file_name: str) -> Dict[str, str]:
        path = Path(mount_path) / file_name

        try:
            text = path.read_text(encoding="utf-8-sig")
        except (FileNotFoundError, NotADirectoryError, IsADirectoryError) as e:
            if self.source.optional:
                logger.debug("Optional configuration file not found", file_name=file_name)
                return {}
            error = ConfigurationError(
                f"The configuration file '{file_name}' was not found and is not optional. "
                f"The expected physical path was '{path}'.",
                kind=ErrorKind.FILE_NOT_FOUND,
                mount_path=mount_path,
                file_name=file_name,
                cause=e,
            )
            error.add_suggestion(f"Create '{file_name}' under '{mount_path}'")
            raise error from e
        except UnicodeDecodeError as e:
            raise ConfigurationError(
                f"Configuration file '{file_name}' is not valid UTF-8 text.",
                kind=ErrorKind.PARSE_ERROR,
                mount_path=mount_path,
                file_name=file_name,
                cause=e,
            ) from e

        try:
            document = parse_json(text)
        except json.JSONDecodeError as e:
            line_info = f"line {e.lineno}, column {e.colno}"
            raise ConfigurationError(
                f"Could not parse the JSON file '{file_name}' ({line_info}): {e.msg}",
                kind=ErrorKind.PARSE_ERROR,
                mount_path=mount_path,
                file_name=file_name,
                line_info=line_info,
                cause=e,
            ) from e
        except ValueError as e:
            raise ConfigurationError(
                f"Could not parse the JSON file '{file_name}': {e}",
                kind=ErrorKind.PARSE_ERROR,
                mount_path=mount_path,
                file_name=file_name,
                cause=e,
            ) from e

        if not isinstance(document, dict):
            raise ConfigurationError(
                f"Top-level JSON element of '{file_name}' must be an object, "
                f"got {type(document).__name__}.",
                kind=ErrorKind.PARSE_ERROR,
                mount_path=mount_path,
                file_name=file_name,
            )

        try:
            return flatten_json(document)
        except DuplicateKeyError as e:
            raise ConfigurationError(
                f"Could not parse the JSON file '{file_name}': {e}",
                kind=ErrorKind.PARSE_ERROR,
                mount_path=mount_path,
                file_name=file_name,
                cause=e,
            ) from e

    def _process(self, data: Dict[str, str]) -> Dict[str, str]:
        return data


# ============================================================================
# BUILDER
# ============================================================================


class ConfigurationBuilder:
    """
    Collects configuration sources and merges them on `build()`.

    Each source keeps the base path that was set when it was added.
    """

    def __init__(self) -> None:
        self._sources: List[ConfigurationSource] = []
        self.base_path: Optional[str] = None

    @property
    def sources(self) -> Tuple[ConfigurationSource, ...]:
        return tuple(self._sources)

    def set_base_path(self, base_path: str) -> "ConfigurationBuilder":
        if base_path is None:
            raise ArgumentNullError("base_path")
        if not str(base_path).strip():
            raise ArgumentError("Base path cannot be empty or whitespace.", param="base_path")
        self.base_path = str(base_path)
        return self

    def add(self, source: ConfigurationSource) -> "ConfigurationBuilder":
        if source is None:
            raise ArgumentNullError("source")
        if source.base_path is None:
            source.base_path = self.base_path
        self._sources.append(source)
        return self

    def add_json_file(self, path: str, optional: bool = False) -> "ConfigurationBuilder":
        return self.add(JsonConfigurationSource(path, optional=optional))

    def build(self) -> Configuration:
        """Load every source in order and merge them, last one wins."""
        providers = [source.build(self) for source in self._sources]
        for provider in providers:
            provider.load()

        configuration = Configuration(providers=providers)
        logger.info(
            "Configuration built", sources=len(providers), keys=len(configuration)
        )
        return configuration

"""
Shared pytest fixtures for the mountconfig test suite.

Pattern:
  1. Create a temp content root with a config/ mount directory.
  2. Write plain or encrypted JSON files into it.
  3. Mount them on a fresh ConfigurationBuilder and build.
"""

import json
from pathlib import Path
from typing import Any, Optional

import pytest

from mountconfig.encryption.encryptor import Encryptor

KEY = "PowerfullPassword"
OTHER_KEY = "AnotherSecretKey99"


class ConfigDir:
    """Helper returned by the config_dir fixture."""

    def __init__(self, root: Path, mount: str = "config") -> None:
        self._root = root
        self._mount = root / mount
        self._mount.mkdir(parents=True, exist_ok=True)

    @property
    def root(self) -> Path:
        """Content root (what Settings.current_directory points to)."""
        return self._root

    @property
    def mount(self) -> Path:
        """Directory holding the JSON files."""
        return self._mount

    def write(self, name: str, document: Any) -> Path:
        path = self._mount / name
        path.write_text(json.dumps(document, indent=2) + "\n", encoding="utf-8")
        return path

    def write_text(self, name: str, text: str) -> Path:
        path = self._mount / name
        path.write_text(text, encoding="utf-8")
        return path

    def write_encrypted(
        self, name: str, flat: dict, key: str = KEY, encryptor: Optional[Encryptor] = None
    ) -> Path:
        """Write a flat {name: plaintext} document with every value encrypted."""
        encryptor = encryptor or Encryptor(key)
        return self.write(name, {k: encryptor.encrypt(v) for k, v in flat.items()})


@pytest.fixture
def config_dir(tmp_path):
    """Fresh content root with an empty config/ directory."""
    return ConfigDir(tmp_path / "app")


@pytest.fixture
def encryptor():
    return Encryptor(KEY)

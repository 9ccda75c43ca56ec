"""
JSON configuration files whose values are encrypted.
"""

from typing import Dict, Optional

from mountconfig.configuration import (
    ConfigurationBuilder,
    ConfigurationProvider,
    JsonConfigurationProvider,
    JsonConfigurationSource,
)
from mountconfig.core.exceptions import (
    ArgumentError,
    ArgumentNullError,
    CryptographicError,
    EncryptionError,
    FormatError,
)
from mountconfig.core.logging import logger
from mountconfig.encryption.encryptor import DefaultEncryptorFactory, EncryptorFactory


class EncryptedJsonConfigurationSource(JsonConfigurationSource):
    """A JSON file whose every value is encrypted with ``key``."""

    def __init__(
        self,
        path: str,
        key: str,
        optional: bool = False,
        base_path: Optional[str] = None,
        encryptor_factory: Optional[EncryptorFactory] = None,
    ):
        super().__init__(path, optional=optional, base_path=base_path)
        self.key = key
        self.encryptor_factory = encryptor_factory

    @property
    def key(self) -> str:
        return self._key

    @key.setter
    def key(self, value: str) -> None:
        if value is None:
            raise ArgumentNullError("key")
        if not value.strip():
            raise ArgumentError("Encryption key cannot be empty or whitespace.", param="key")
        self._key = value

    def build(self, builder: ConfigurationBuilder) -> ConfigurationProvider:
        return EncryptedJsonConfigurationProvider(self)

    def __repr__(self) -> str:
        # Never show the key
        return (
            f"{type(self).__name__}(path={self.path!r}, optional={self.optional!r}, "
            f"base_path={self.base_path!r})"
        )


class EncryptedJsonConfigurationProvider(JsonConfigurationProvider):
    """
    Loads a JSON file, then decrypts every entry.

    The first entry that fails to decrypt aborts the load with an
    `EncryptionError` naming its key; no entry of the file is kept.
    """

    def __init__(self, source: EncryptedJsonConfigurationSource) -> None:
        if source is None:
            raise ArgumentNullError("source")
        super().__init__(source)
        factory = source.encryptor_factory or DefaultEncryptorFactory()
        self._encryptor = factory.create(source.key)

    def _process(self, data: Dict[str, str]) -> Dict[str, str]:
        decrypted: Dict[str, str] = {}
        for key, value in data.items():
            try:
                decrypted[key] = self._encryptor.decrypt(value)
            except (CryptographicError, FormatError) as e:
                mount_path = self.source.mount_path
                file_name = self.source.path
                logger.warning(
                    "Failed to decrypt configuration value",
                    key=key,
                    file_name=file_name,
                )
                error = EncryptionError(
                    f"Failed to decrypt configuration value '{key}' in file '{file_name}'. "
                    "The encryption key may be wrong or the value may not be encrypted.",
                    mount_path=mount_path,
                    file_name=file_name,
                    key=key,
                    cause=e,
                )
                error.add_suggestion("Check that the key matches the one used to encrypt the file")
                raise error from e
        return decrypted

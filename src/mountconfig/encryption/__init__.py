"""
Legacy value encryption for configuration files.
"""

from mountconfig.encryption.cipher import CipherProvider, LegacyDesCipherProvider
from mountconfig.encryption.encryptor import (
    CipherKey,
    DefaultEncryptorFactory,
    Encryptor,
    EncryptorFactory,
    StringEncryptor,
    derive_cipher_key,
)
from mountconfig.encryption.provider import (
    EncryptedJsonConfigurationProvider,
    EncryptedJsonConfigurationSource,
)

__all__ = [
    "CipherProvider",
    "LegacyDesCipherProvider",
    "CipherKey",
    "DefaultEncryptorFactory",
    "Encryptor",
    "EncryptorFactory",
    "StringEncryptor",
    "derive_cipher_key",
    "EncryptedJsonConfigurationProvider",
    "EncryptedJsonConfigurationSource",
]

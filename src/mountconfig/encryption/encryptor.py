"""
String-level encryption of configuration values.

The passphrase is split into the cipher key (first 8 characters) and the IV
(last 8 characters). Existing encrypted files depend on this exact split.
"""

import base64
import binascii
import re
from typing import NamedTuple, Optional, Protocol, runtime_checkable

from mountconfig.core.defaults import DEFAULTS
from mountconfig.core.exceptions import ArgumentError, ArgumentNullError, FormatError
from mountconfig.encryption.cipher import BLOCK_SIZE, CipherProvider, LegacyDesCipherProvider

_WHITESPACE = re.compile(r"\s+")


class CipherKey(NamedTuple):
    key_bytes: bytes
    iv_bytes: bytes


def _check_key(key: str) -> None:
    if key is None:
        raise ArgumentNullError("key")
    if len(key) < DEFAULTS.minimum_key_length:
        raise ArgumentError(
            f"Encryption key must be at least {DEFAULTS.minimum_key_length} characters long.",
            param="key",
        )


def derive_cipher_key(key: str) -> CipherKey:
    """
    Derive key and IV bytes from a passphrase.

    Non-ASCII characters become ``?``. With an 8-character passphrase the key
    and the IV are the same bytes.

    Raises:
        ArgumentNullError: key is None
        ArgumentError: key shorter than the minimum length
    """
    _check_key(key)

    key_bytes = key[:BLOCK_SIZE].encode("ascii", errors="replace")
    iv_bytes = key[-BLOCK_SIZE:].encode("ascii", errors="replace")
    return CipherKey(key_bytes, iv_bytes)


@runtime_checkable
class StringEncryptor(Protocol):
    """Anything that turns text into base64 ciphertext and back."""

    def encrypt(self, plaintext: str) -> str: ...

    def decrypt(self, encrypted: str) -> str: ...


class Encryptor:
    """
    Base64 front end over a `CipherProvider`.

    Usage:
    ```
    encryptor = Encryptor("my-secret-passphrase")
    token = encryptor.encrypt("Password=1234")
    encryptor.decrypt(token)  # "Password=1234"
    ```
    """

    def __init__(self, key: str, cipher: Optional[CipherProvider] = None) -> None:
        if cipher is None:
            cipher_key = derive_cipher_key(key)
            cipher = LegacyDesCipherProvider(cipher_key.key_bytes, cipher_key.iv_bytes)
        else:
            _check_key(key)
        self._cipher = cipher

    def encrypt(self, plaintext: str) -> str:
        """Encrypt ``plaintext`` and return base64 text."""
        if plaintext is None:
            raise ArgumentNullError("plaintext")

        return base64.b64encode(self._cipher.encrypt(plaintext)).decode("ascii")

    def decrypt(self, encrypted: str) -> str:
        """
        Decrypt base64 text produced by `encrypt`.

        Raises:
            ArgumentNullError: encrypted is None
            FormatError: not valid base64
            CryptographicError: wrong key or corrupted data
        """
        if encrypted is None:
            raise ArgumentNullError("encrypted")

        try:
            data = base64.b64decode(_WHITESPACE.sub("", encrypted), validate=True)
        except (binascii.Error, ValueError) as e:
            raise FormatError("The input is not a valid Base-64 string.", cause=e) from e

        return self._cipher.decrypt(data)


class EncryptorFactory(Protocol):
    """Creates encryptors from a passphrase."""

    def create(self, key: str) -> StringEncryptor: ...


class DefaultEncryptorFactory:
    """Factory producing the legacy `Encryptor`."""

    def create(self, key: str) -> StringEncryptor:
        if key is None:
            raise ArgumentNullError("key")
        return Encryptor(key)

"""
Low-level cipher providers.

Only the legacy DES provider exists. It is kept so that values encrypted by
earlier releases keep decrypting; it offers no meaningful protection.
"""

import warnings
from abc import ABC, abstractmethod

from Crypto.Cipher import DES
from Crypto.Util.Padding import pad, unpad

from mountconfig.core.exceptions import ArgumentError, ArgumentNullError, CryptographicError

BLOCK_SIZE = DES.block_size
KEY_SIZE = DES.key_size

_UTF8_BOM = "\ufeff"


class CipherProvider(ABC):
    """Contract for byte-level encryption of text."""

    @abstractmethod
    def encrypt(self, plaintext: str) -> bytes:
        """Encrypt text into raw cipher bytes."""

    @abstractmethod
    def decrypt(self, data: bytes) -> str:
        """Decrypt raw cipher bytes back into text."""

    def close(self) -> None:
        pass

    def __enter__(self) -> "CipherProvider":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


class LegacyDesCipherProvider(CipherProvider):
    """
    DES in CBC mode with PKCS#7 padding over UTF-8 text.

    Same key and IV on every call, so equal plaintexts give equal output.
    """

    def __init__(self, key_bytes: bytes, iv_bytes: bytes) -> None:
        if key_bytes is None:
            raise ArgumentNullError("key_bytes")
        if iv_bytes is None:
            raise ArgumentNullError("iv_bytes")
        if len(key_bytes) != KEY_SIZE:
            raise ArgumentError(f"Key must be exactly {KEY_SIZE} bytes.", param="key_bytes")
        if len(iv_bytes) != BLOCK_SIZE:
            raise ArgumentError(f"IV must be exactly {BLOCK_SIZE} bytes.", param="iv_bytes")

        warnings.warn(
            "DES encryption is deprecated and kept only to read existing values.",
            DeprecationWarning,
            stacklevel=2,
        )
        self._key_bytes = bytes(key_bytes)
        self._iv_bytes = bytes(iv_bytes)

    def _new_cipher(self):
        # CBC objects are stateful, one per operation
        return DES.new(self._key_bytes, DES.MODE_CBC, iv=self._iv_bytes)

    def encrypt(self, plaintext: str) -> bytes:
        if plaintext is None:
            raise ArgumentNullError("plaintext")

        return self._new_cipher().encrypt(pad(plaintext.encode("utf-8"), BLOCK_SIZE))

    def decrypt(self, data: bytes) -> str:
        if data is None:
            raise ArgumentNullError("data")
        if not data:
            return ""

        try:
            padded = self._new_cipher().decrypt(data)
            raw = unpad(padded, BLOCK_SIZE)
        except ValueError as e:
            # Wrong length or padding mismatch, usually a wrong key
            raise CryptographicError("Bad data. Decryption failed.", cause=e) from e

        try:
            text = raw.decode("utf-8")
        except UnicodeDecodeError as e:
            raise CryptographicError("Decrypted data is not valid text.", cause=e) from e

        if text.startswith(_UTF8_BOM):
            text = text[1:]
        return text

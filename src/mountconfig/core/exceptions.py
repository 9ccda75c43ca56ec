"""
Unified exception hierarchy for mountconfig.
Single source of every error raised by the package.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Dict, Any, Optional, List


# ============================================================================
# PART 1: BASE ERROR
# ============================================================================


class MountConfigError(Exception):
    """
    Base error for the whole package.

    Features:
    1. Structured serialization
    2. Rich context
    3. Resolution suggestions
    """

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
        cause: Optional[BaseException] = None,
    ) -> None:
        self.timestamp: datetime = datetime.now(timezone.utc)
        self.message: str = message
        self.code: str = code or self.__class__.__name__
        self.context: Dict[str, Any] = context or {}
        self.cause: Optional[BaseException] = cause
        self.suggestions: List[str] = []
        super().__init__(message)
        if cause is not None:
            self.__cause__ = cause

    def to_dict(self) -> Dict[str, Any]:
        """
        Serialize to a plain dictionary.

        Returns:
            {
                "code": "ConfigurationError",
                "message": "Configuration file 'appsettings.json' was not found",
                "timestamp": "2024-01-20T10:30:00Z",
                "context": {...}
            }
        """
        result: Dict[str, Any] = {
            "code": self.code,
            "message": self.message,
            "timestamp": self.timestamp.isoformat().replace("+00:00", "Z"),
            "context": self.context,
        }

        if self.cause:
            result["cause"] = {"type": type(self.cause).__name__, "message": str(self.cause)}

        if self.suggestions:
            result["suggestions"] = self.suggestions

        return result

    def add_suggestion(self, suggestion: str) -> None:
        """Add a resolution hint, ignoring blanks and duplicates."""
        if not suggestion or not isinstance(suggestion, str):
            return

        if suggestion not in self.suggestions:
            self.suggestions.append(suggestion)


# ============================================================================
# PART 2: PRECONDITION ERRORS
# ============================================================================


class ArgumentError(MountConfigError, ValueError):
    """A parameter has an unacceptable value (blank string, short key...)."""

    def __init__(
        self,
        message: str,
        param: Optional[str] = None,
        cause: Optional[BaseException] = None,
    ) -> None:
        self.param: Optional[str] = param
        super().__init__(message, context={"param": param} if param else None, cause=cause)


class ArgumentNullError(ArgumentError, TypeError):
    """A required parameter was None."""

    def __init__(
        self,
        param: str,
        message: Optional[str] = None,
        cause: Optional[BaseException] = None,
    ) -> None:
        super().__init__(
            message or f"Value cannot be None. (Parameter '{param}')", param=param, cause=cause
        )


# ============================================================================
# PART 3: CIPHER ERRORS
# ============================================================================


class FormatError(MountConfigError, ValueError):
    """Input is not valid base64 text."""

    pass


class CryptographicError(MountConfigError):
    """
    The cipher rejected the data.

    Raised on wrong keys (padding check), truncated blocks, and plaintext
    that does not decode as text.
    """

    pass


# ============================================================================
# PART 4: LOAD ERRORS
# ============================================================================


class ErrorKind(str, Enum):
    """Why a configuration file failed to load."""

    FILE_NOT_FOUND = "file_not_found"
    PARSE_ERROR = "parse_error"
    DECRYPT_FAILED = "decrypt_failed"
    UNEXPECTED = "unexpected"


class ConfigurationError(MountConfigError):
    """
    A configuration file could not be loaded.

    ``kind`` tells the caller what went wrong; ``mount_path`` and
    ``file_name`` locate the file.
    """

    def __init__(
        self,
        message: str,
        kind: ErrorKind = ErrorKind.UNEXPECTED,
        mount_path: Optional[str] = None,
        file_name: Optional[str] = None,
        line_info: Optional[str] = None,
        cause: Optional[BaseException] = None,
    ) -> None:
        self.kind: ErrorKind = kind
        self.mount_path: Optional[str] = mount_path
        self.file_name: Optional[str] = file_name
        self.line_info: Optional[str] = line_info

        context: Dict[str, Any] = {"kind": kind.value}
        if mount_path is not None:
            context["mount_path"] = mount_path
        if file_name is not None:
            context["file_name"] = file_name
        if line_info is not None:
            context["line_info"] = line_info

        super().__init__(message, context=context, cause=cause)


class EncryptionError(ConfigurationError):
    """Decryption failed for one hierarchical configuration key."""

    def __init__(
        self,
        message: str,
        mount_path: Optional[str] = None,
        file_name: Optional[str] = None,
        key: Optional[str] = None,
        cause: Optional[BaseException] = None,
    ) -> None:
        self.key: Optional[str] = key
        super().__init__(
            message,
            kind=ErrorKind.DECRYPT_FAILED,
            mount_path=mount_path,
            file_name=file_name,
            cause=cause,
        )
        if key is not None:
            self.context["key"] = key


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = [
    "MountConfigError",
    "ArgumentError",
    "ArgumentNullError",
    "FormatError",
    "CryptographicError",
    "ErrorKind",
    "ConfigurationError",
    "EncryptionError",
]

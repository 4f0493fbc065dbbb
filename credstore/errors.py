"""
Structured errors for credential operations and translation of native
vault failures into them.
"""

import logging
import platform
from typing import Optional

logger = logging.getLogger(__name__)

if platform.system() == "Windows":
    try:
        import win32api
        FORMAT_MESSAGE_AVAILABLE = True
    except ImportError:
        logger.warning("pywin32 not installed, OS error messages will use the built-in table.")
        FORMAT_MESSAGE_AVAILABLE = False
else:
    FORMAT_MESSAGE_AVAILABLE = False

# Windows error codes
ERROR_ACCESS_DENIED = 5
ERROR_INVALID_PARAMETER = 87
ERROR_NOT_FOUND = 1168
ERROR_NO_SUCH_LOGON_SESSION = 1312
ERROR_INVALID_FLAGS = 1004
ERROR_BAD_USERNAME = 2202

ELEMENT_NOT_FOUND_MESSAGE = "Element not found."

# Messages as FormatMessage returns them on an English system.
_KNOWN_MESSAGES = {
    ERROR_ACCESS_DENIED: "Access is denied.",
    ERROR_INVALID_PARAMETER: "The parameter is incorrect.",
    ERROR_INVALID_FLAGS: "Invalid flags.",
    ERROR_NOT_FOUND: ELEMENT_NOT_FOUND_MESSAGE,
    ERROR_NO_SUCH_LOGON_SESSION: "A specified logon session does not exist. It may already have been terminated.",
    ERROR_BAD_USERNAME: "The specified username is invalid.",
}


class CredentialStoreError(RuntimeError):
    """Base class for all credential store errors."""

    def __init__(self, message: str, target: Optional[str] = None):
        super().__init__(message)
        self.target = target


class ValidationError(CredentialStoreError, ValueError):
    """Raised when required addressing input is empty or missing."""


class AlreadyExists(CredentialStoreError):
    """Raised when saving over an existing target without allow_clobber."""


class NotFound(CredentialStoreError):
    """Raised when the target does not exist or could not be deleted."""


class OperationFailed(CredentialStoreError):
    """Raised when the vault reports a failure or an unmapped native error."""

    def __init__(self, message: str, target: Optional[str] = None, code: Optional[int] = None):
        super().__init__(message, target)
        self.code = code


def _not_found(target: Optional[str], inner: str, os_text: str) -> CredentialStoreError:
    subject = f"'{target}'" if target else "The credential"
    return NotFound(f"{subject} does not exist or could not be deleted.", target)


# Stable code -> error factory. Anything absent falls through to OperationFailed.
ERROR_KINDS = {
    ERROR_NOT_FOUND: _not_found,
}

# Legacy dispatch for native errors that carry only message text.
MESSAGE_KINDS = {
    ELEMENT_NOT_FOUND_MESSAGE: _not_found,
}


def os_message(code: int) -> str:
    """
    Return the platform message for an OS error code.
    Args:
        code: Windows error number
    Returns:
        The message text, or a generic description for unknown codes
    """
    if FORMAT_MESSAGE_AVAILABLE:
        try:
            return win32api.FormatMessage(code).strip()
        except win32api.error as e:
            logger.debug(f"FormatMessage failed for code {code}: {e}")
    return _KNOWN_MESSAGES.get(code, f"Unknown error ({code})")


def error_code(exc: BaseException) -> Optional[int]:
    """Extract the OS error code from an exception or its inner cause."""
    for candidate in (exc, exc.__cause__):
        if candidate is None:
            continue
        for attr in ("code", "winerror"):
            value = getattr(candidate, attr, None)
            if isinstance(value, int):
                return value
    return None


def _inner_message(exc: BaseException) -> str:
    inner = exc.__cause__ if exc.__cause__ is not None else exc
    text = getattr(inner, "strerror", None) or str(inner)
    return text.strip()


def translate(exc: BaseException, target: Optional[str] = None) -> CredentialStoreError:
    """
    Map a native vault exception to a structured error.

    The stable error code is tried first; when the exception carries no code
    the message text is matched exactly as the OS reports it. Message text is
    locale dependent, so the text match only covers the code-less case.
    Args:
        exc: The native exception raised by the vault gateway
        target: Target of the failed operation, used in the message
    Returns:
        NotFound for "element not found", otherwise OperationFailed
    """
    inner = _inner_message(exc)
    code = error_code(exc)
    if code is not None:
        os_text = os_message(code)
        factory = ERROR_KINDS.get(code)
    else:
        os_text = inner
        factory = MESSAGE_KINDS.get(inner)

    if factory is not None:
        return factory(target, inner, os_text)

    logger.debug(f"Unmapped native error for {target}: code={code} message={inner}")
    detail = f"{inner} {os_text}" if os_text and os_text != inner else inner
    prefix = f"Operation on '{target}' failed" if target else "Operation failed"
    if code is not None:
        prefix = f"{prefix} (code {code})"
    return OperationFailed(f"{prefix}: {detail}", target, code)

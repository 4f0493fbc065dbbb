"""
Windows Credential Manager gateway.
Generic credentials of the current user, accessed through pywin32.
"""

import logging
import platform
from typing import List, Optional, Union

from . import config
from .errors import ERROR_NOT_FOUND
from .native import CredentialKind, NativeCredential, NativeVaultError

logger = logging.getLogger(__name__)

if platform.system() == "Windows":
    try:
        import pywintypes
        import win32cred
        WINDOWS_VAULT_AVAILABLE = True
    except ImportError:
        logger.warning("pywin32 not installed, cannot access the Windows Credential Manager.")
        WINDOWS_VAULT_AVAILABLE = False
else:
    WINDOWS_VAULT_AVAILABLE = False

# Persistence constants (CRED_PERSIST_*)
CRED_PERSIST_SESSION = 1
CRED_PERSIST_LOCAL_MACHINE = 2
CRED_PERSIST_ENTERPRISE = 3


def _wrap(error) -> NativeVaultError:
    """Turn a pywintypes.error into a NativeVaultError."""
    return NativeVaultError(error.winerror, error.funcname, error.strerror)


def _to_native(cred: dict) -> NativeCredential:
    return NativeCredential(
        target=cred["TargetName"],
        identity=cred.get("UserName") or None,
        blob=bytes(cred.get("CredentialBlob") or b""),
        kind=CredentialKind(cred["Type"]),
        persist=cred.get("Persist") != CRED_PERSIST_SESSION,
        comment=cred.get("Comment"),
        last_written=cred.get("LastWritten"),
    )


class WindowsVaultGateway:
    """Enumerate, save and delete generic credentials in the Windows vault."""

    def __init__(self, win32cred_module=None, error_type=None):
        """
        Args:
            win32cred_module: Module exposing CredEnumerate/CredWrite/CredDelete (defaults to win32cred)
            error_type: Exception type raised by that module (defaults to pywintypes.error)
        """
        if win32cred_module is None:
            if not WINDOWS_VAULT_AVAILABLE:
                raise RuntimeError("The Windows Credential Manager is not available on this system")
            win32cred_module = win32cred
            error_type = pywintypes.error
        self._cred = win32cred_module
        self._error = error_type

    def enumerate(self, pattern: Optional[str] = None) -> List[NativeCredential]:
        if pattern is not None and not pattern:
            return []
        try:
            creds = self._cred.CredEnumerate(pattern, 0)
        except self._error as e:
            if e.winerror == ERROR_NOT_FOUND:
                return []
            raise _wrap(e) from e
        records = []
        for cred in creds or ():
            if cred["Type"] not in tuple(CredentialKind):
                continue
            records.append(_to_native(cred))
        logger.debug(f"CredEnumerate({pattern!r}) returned {len(records)} generic credentials")
        return records

    def save(self, target: str, identity: str, secret: Union[bytes, bytearray],
             kind: CredentialKind = CredentialKind.GENERIC, persist: bool = True) -> bool:
        if len(secret) > config.CRED_MAX_CREDENTIAL_BLOB_SIZE:
            logger.error(f"Secret for {target} exceeds {config.CRED_MAX_CREDENTIAL_BLOB_SIZE} bytes")
            return False
        credential = {
            "Type": int(kind),
            "TargetName": target,
            "UserName": identity,
            "CredentialBlob": bytes(secret),
            "Persist": CRED_PERSIST_LOCAL_MACHINE if persist else CRED_PERSIST_SESSION,
        }
        try:
            self._cred.CredWrite(credential, 0)
        except self._error as e:
            raise _wrap(e) from e
        return True

    def delete(self, target: str, kind: CredentialKind = CredentialKind.GENERIC) -> bool:
        try:
            self._cred.CredDelete(target, int(kind), 0)
        except self._error as e:
            raise _wrap(e) from e
        return True

"""
Native credential records and the gateway contract to the OS vault.
"""

import datetime
import logging
import platform
import re
import threading
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Dict, List, Optional, Protocol, Tuple, Union

from . import config
from .errors import ERROR_NOT_FOUND, os_message

logger = logging.getLogger(__name__)


class CredentialKind(IntEnum):
    """Credential kinds understood by the vault. Values follow CRED_TYPE_*."""
    GENERIC = 1


@dataclass(frozen=True)
class NativeCredential:
    """A credential record as the vault returns it."""
    target: str
    identity: Optional[str]
    blob: bytes = field(repr=False)
    kind: CredentialKind = CredentialKind.GENERIC
    persist: bool = True
    comment: Optional[str] = None
    last_written: Optional[datetime.datetime] = None


class NativeVaultError(Exception):
    """A vault call failed with an OS error code."""

    def __init__(self, code: int, funcname: str = "", strerror: Optional[str] = None):
        self.code = code
        self.funcname = funcname
        self.strerror = strerror or os_message(code)
        super().__init__(f"{funcname}: {self.strerror}" if funcname else self.strerror)


class VaultGateway(Protocol):
    """Operations the credential store needs from the OS vault."""

    def enumerate(self, pattern: Optional[str] = None) -> List[NativeCredential]:
        ...

    def save(self, target: str, identity: str, secret: Union[bytes, bytearray],
             kind: CredentialKind, persist: bool) -> bool:
        ...

    def delete(self, target: str, kind: CredentialKind) -> bool:
        ...


def compile_pattern(pattern: str) -> 're.Pattern':
    """
    Compile a vault filter, case-insensitive.
    A trailing "*" matches any name starting with the rest of the filter;
    without it the filter must equal the target. Any other "*" is literal.
    """
    if pattern.endswith("*"):
        return re.compile(re.escape(pattern[:-1]) + ".*", re.IGNORECASE | re.DOTALL)
    return re.compile(re.escape(pattern), re.IGNORECASE)


class MemoryVaultGateway:
    """
    Process-local vault with the same contract as the Windows vault.
    Used for tests and on platforms without a supported OS vault.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._records: Dict[Tuple[str, CredentialKind], NativeCredential] = {}

    def enumerate(self, pattern: Optional[str] = None) -> List[NativeCredential]:
        if pattern is not None and not pattern:
            return []
        with self._lock:
            records = list(self._records.values())
        if pattern is None:
            return records
        regex = compile_pattern(pattern)
        return [r for r in records if regex.fullmatch(r.target)]

    def save(self, target: str, identity: str, secret: Union[bytes, bytearray],
             kind: CredentialKind = CredentialKind.GENERIC, persist: bool = True) -> bool:
        if not target:
            raise NativeVaultError(87, "CredWrite")
        if len(secret) > config.CRED_MAX_CREDENTIAL_BLOB_SIZE:
            raise NativeVaultError(87, "CredWrite")
        record = NativeCredential(
            target=target,
            identity=identity or None,
            blob=bytes(secret),
            kind=kind,
            persist=persist,
            last_written=datetime.datetime.now(datetime.timezone.utc),
        )
        with self._lock:
            self._records[(target.casefold(), kind)] = record
        return True

    def delete(self, target: str, kind: CredentialKind = CredentialKind.GENERIC) -> bool:
        with self._lock:
            if self._records.pop((target.casefold(), kind), None) is None:
                raise NativeVaultError(ERROR_NOT_FOUND, "CredDelete")
        return True

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)


def default_gateway() -> VaultGateway:
    """
    Return the OS vault gateway for this platform.
    Falls back to a process-local vault when the Windows vault is unavailable.
    """
    if platform.system() == "Windows":
        from .windows import WINDOWS_VAULT_AVAILABLE, WindowsVaultGateway
        if WINDOWS_VAULT_AVAILABLE:
            return WindowsVaultGateway()
    logger.warning("No supported OS credential vault available, secrets will only be kept in memory.")
    return MemoryVaultGateway()

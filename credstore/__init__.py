"""
credstore - named secrets in the per-user OS credential vault.

NOTICE:
Secrets are stored in the vault of the current user on this device only.
Protection of the stored secret is delegated to the operating system vault;
this package never writes secrets anywhere else.
"""

from .config import StoreSettings
from .convert import SecretRecord, convert
from .errors import (
    AlreadyExists,
    CredentialStoreError,
    NotFound,
    OperationFailed,
    ValidationError,
)
from .native import CredentialKind, MemoryVaultGateway, NativeCredential, default_gateway
from .protect import ProtectedSecret
from .store import CredentialStore, OperationResult
from .target import resolve

__version__ = "1.0.0"

__all__ = [
    "AlreadyExists",
    "CredentialKind",
    "CredentialStore",
    "CredentialStoreError",
    "MemoryVaultGateway",
    "NativeCredential",
    "NotFound",
    "OperationFailed",
    "OperationResult",
    "ProtectedSecret",
    "SecretRecord",
    "StoreSettings",
    "ValidationError",
    "convert",
    "default_gateway",
    "resolve",
]

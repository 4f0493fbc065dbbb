"""
Conversion of native vault records into portable secret records.
"""

from dataclasses import dataclass, field
from typing import Optional

from . import config
from .native import NativeCredential
from .protect import ProtectedSecret


@dataclass(frozen=True)
class SecretRecord:
    """An identity and its secret, detached from the vault."""
    identity: str
    secret: ProtectedSecret = field(repr=False)
    target: Optional[str] = None

    def __repr__(self) -> str:
        return f"SecretRecord(identity={self.identity!r}, target={self.target!r}, secret={config.MASKED_SECRET_TEXT})"


def convert(native: NativeCredential) -> SecretRecord:
    """
    Convert a native credential into a SecretRecord.
    Records stored without a user name get the UNSPECIFIED_IDENTITY placeholder.
    """
    identity = native.identity or config.UNSPECIFIED_IDENTITY
    # Sealed straight from the blob; never decoded to str here.
    secret = ProtectedSecret(native.blob, config.SECRET_ENCODING)
    return SecretRecord(identity=identity, secret=secret, target=native.target)

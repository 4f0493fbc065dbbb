"""
Protected in-memory handle for secret values.

LEGAL NOTICE:
Secrets held by this module are sealed in memory only. Persistent protection
of stored secrets is the job of the operating system vault.
"""

import os
import threading
from typing import Optional, Union

from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes
from cryptography.hazmat.backends import default_backend

from . import config


class _SessionKey:
    """Per-process random key used to seal secrets in memory."""

    KEY_SIZE = 32   # 256 bits for AES-256

    _key: Optional[bytes] = None
    _lock = threading.Lock()

    @classmethod
    def get(cls) -> bytes:
        with cls._lock:
            if cls._key is None:
                cls._key = os.urandom(cls.KEY_SIZE)
            return cls._key


def clear_bytes(data: bytearray) -> None:
    """Overwrite a mutable buffer with zeros."""
    for i in range(len(data)):
        data[i] = 0


class ProtectedSecret:
    """
    A secret sealed with AES-256-GCM under a per-process key.

    The plaintext is only produced on an explicit reveal. Mutable source
    buffers are zeroed once sealed. The object cannot be pickled and its
    repr never shows the value.
    """

    NONCE_SIZE = 12  # 96 bits for GCM

    __slots__ = ("_nonce", "_ciphertext", "_tag", "_length", "encoding")

    def __init__(self, data: Union[bytes, bytearray], encoding: str = config.SECRET_ENCODING):
        """
        Seal raw secret bytes.
        Args:
            data: Encoded secret; a bytearray is zeroed after sealing
            encoding: Codec used to decode the bytes on reveal
        """
        if not isinstance(data, (bytes, bytearray)):
            raise TypeError("ProtectedSecret requires bytes or bytearray")
        self.encoding = encoding
        self._length = len(data)
        self._nonce = os.urandom(self.NONCE_SIZE)
        cipher = Cipher(
            algorithms.AES(_SessionKey.get()),
            modes.GCM(self._nonce),
            backend=default_backend()
        )
        encryptor = cipher.encryptor()
        self._ciphertext = encryptor.update(bytes(data)) + encryptor.finalize()
        self._tag = encryptor.tag
        if isinstance(data, bytearray):
            clear_bytes(data)

    @classmethod
    def from_text(cls, text: str, encoding: str = config.SECRET_ENCODING) -> 'ProtectedSecret':
        """Seal a str secret using the given encoding."""
        buffer = bytearray(text.encode(encoding))
        return cls(buffer, encoding)

    @property
    def cleared(self) -> bool:
        return self._ciphertext is None

    def reveal_bytes(self) -> bytearray:
        """
        Decrypt the secret into a new buffer.
        Callers should clear the returned buffer when done with it.
        Raises:
            ValueError: If the secret was cleared
        """
        if self._ciphertext is None:
            raise ValueError("Secret has been cleared")
        cipher = Cipher(
            algorithms.AES(_SessionKey.get()),
            modes.GCM(self._nonce, self._tag),
            backend=default_backend()
        )
        decryptor = cipher.decryptor()
        return bytearray(decryptor.update(self._ciphertext) + decryptor.finalize())

    def reveal(self) -> str:
        """Return the plaintext secret as a str."""
        buffer = self.reveal_bytes()
        try:
            return buffer.decode(self.encoding)
        finally:
            clear_bytes(buffer)

    def clear(self) -> None:
        """Discard the sealed value."""
        self._ciphertext = None
        self._tag = None
        self._length = 0

    def __len__(self) -> int:
        """Length of the encoded secret in bytes."""
        return self._length

    def __enter__(self) -> 'ProtectedSecret':
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.clear()

    def __reduce__(self):
        raise TypeError("ProtectedSecret cannot be serialized")

    def __repr__(self) -> str:
        state = "cleared" if self.cleared else config.MASKED_SECRET_TEXT
        return f"ProtectedSecret({state})"

    __str__ = __repr__

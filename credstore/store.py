"""
Credential store: named secrets in the OS vault.

Targets are addressed as "namespace/name". The store resolves targets,
checks for collisions before writing and translates native vault failures
into the errors of credstore.errors.
"""

import logging
from dataclasses import dataclass
from typing import Iterable, List, Optional, Union

from . import config
from .config import StoreSettings
from .convert import SecretRecord, convert
from .errors import (
    AlreadyExists,
    CredentialStoreError,
    OperationFailed,
    ValidationError,
    translate,
)
from .native import CredentialKind, NativeCredential, NativeVaultError, VaultGateway, default_gateway
from .protect import ProtectedSecret, clear_bytes
from .target import namespace_prefix, resolve

logger = logging.getLogger(__name__)

# Marks a target argument the caller did not pass at all.
_OMITTED = object()

Secret = Union[str, bytes, bytearray, ProtectedSecret]


@dataclass
class OperationResult:
    """Outcome of a save or remove call."""
    action: str
    target: str
    performed: bool
    error: Optional[CredentialStoreError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def _secret_buffer(secret: Secret, encoding: str) -> bytearray:
    """Copy a secret into a fresh buffer the caller clears after use."""
    if isinstance(secret, ProtectedSecret):
        return secret.reveal_bytes()
    if isinstance(secret, str):
        return bytearray(secret.encode(encoding))
    if isinstance(secret, (bytes, bytearray)):
        return bytearray(secret)
    raise TypeError(f"Unsupported secret type: {type(secret).__name__}")


class CredentialStore:
    """Fetch, save and remove generic credentials in a vault."""

    def __init__(self, gateway: Optional[VaultGateway] = None, settings: Optional[StoreSettings] = None):
        """
        Initialize the credential store.
        Args:
            gateway: Vault gateway; defaults to the OS vault of this platform
            settings: Default namespace and fetch policy
        """
        self.settings = settings or StoreSettings()
        self.gateway = gateway if gateway is not None else default_gateway()

    @property
    def default_namespace(self) -> str:
        return self.settings.default_namespace

    def target_for(self, name: str, namespace: Optional[str] = None) -> str:
        """Resolve a name in the given or default namespace."""
        return resolve(namespace or self.default_namespace, name)

    def fetch(self, target=_OMITTED, name: Optional[str] = None, namespace: Optional[str] = None,
              raw: bool = False, all: bool = False) -> List[Union[SecretRecord, NativeCredential]]:
        """
        Fetch credentials from the vault.

        An explicit target (exact, or a prefix ending in "*") takes precedence over
        a name. Passing target=None or "" explicitly returns nothing, while
        omitting both target and name lists the vault, restricted to the
        namespace unless all is set. An explicit namespace always filters; the
        default namespace filters only while the settings restrict to it.
        Args:
            target: Vault target or filter pattern
            name: Credential name, resolved within namespace
            namespace: Namespace for name resolution and filtering
            raw: Return NativeCredential records instead of SecretRecords
            all: Return every vault record regardless of namespace
        Returns:
            Matching records; empty when nothing matches
        """
        explicit_namespace = bool(namespace)
        namespace = namespace or self.default_namespace

        if target is not _OMITTED:
            if not target:
                return []
            natives = self.gateway.enumerate(target)
        elif name:
            natives = self.gateway.enumerate(resolve(namespace, name))
        else:
            natives = self.gateway.enumerate()
            if not all and (explicit_namespace or self.settings.restrict_to_namespace):
                prefix = namespace_prefix(namespace).casefold()
                natives = [n for n in natives if n.target.casefold().startswith(prefix)]

        natives = [n for n in natives if n.kind == CredentialKind.GENERIC]
        logger.debug(f"Fetched {len(natives)} credentials (target={target if target is not _OMITTED else None}, name={name}, namespace={namespace})")
        if raw:
            return natives
        return [convert(n) for n in natives]

    def get(self, name: Optional[str] = None, namespace: Optional[str] = None,
            target=_OMITTED) -> Optional[SecretRecord]:
        """Return the first matching SecretRecord, or None."""
        records = self.fetch(target=target, name=name, namespace=namespace)
        return records[0] if records else None

    def exists(self, target: str) -> bool:
        return bool(self.fetch(target=target, raw=True))

    def _resolve_for_save(self, identity: str, name: Optional[str], namespace: Optional[str],
                          target: Optional[str]) -> str:
        if target:
            return target
        return self.target_for(name or identity, namespace)

    def save(self, identity: str, secret: Secret, name: Optional[str] = None,
             namespace: Optional[str] = None, target: Optional[str] = None,
             allow_clobber: bool = False, proceed: bool = True) -> OperationResult:
        """
        Save a credential.

        The target is the explicit target, else namespace/name, else
        namespace/identity. The existence check and the write are two separate
        vault calls, so a writer in another process can slip in between them.
        Args:
            identity: User name stored with the secret
            secret: The secret; bytes are taken as already encoded
            allow_clobber: Overwrite an existing credential
            proceed: When False nothing is written and a no-op result is returned
        Raises:
            ValidationError: If no target can be resolved
            AlreadyExists: If the target exists and allow_clobber is False
            OperationFailed: If the vault reports a failure
        """
        if secret is None:
            raise ValidationError("A secret is required to save a credential.")
        target = self._resolve_for_save(identity, name, namespace, target)

        if not allow_clobber and self.exists(target):
            raise AlreadyExists(f"A credential already exists for '{target}'. Use allow_clobber to overwrite it.", target)

        if not proceed:
            logger.info(f"Skipped saving credential {target}")
            return OperationResult("save", target, False)

        buffer = _secret_buffer(secret, config.SECRET_ENCODING)
        try:
            saved = self.gateway.save(target, identity, buffer, CredentialKind.GENERIC, self.settings.persist)
        except NativeVaultError as e:
            error = translate(e, target)
            logger.error(f"Error saving credential {target}: {error}")
            raise error from e
        finally:
            clear_bytes(buffer)

        if not saved:
            logger.error(f"Vault reported failure saving credential {target}")
            raise OperationFailed(f"Unable to save credential '{target}'.", target)

        logger.info(f"Saved credential {target} for {identity or 'no identity'}")
        return OperationResult("save", target, True)

    def remove(self, name: Optional[str] = None, namespace: Optional[str] = None,
               target: Optional[str] = None, proceed: bool = True) -> OperationResult:
        """
        Remove a credential.
        Args:
            name: Credential name, resolved within namespace
            target: Vault target, used as given
            proceed: When False nothing is deleted and a no-op result is returned
        Raises:
            ValidationError: If neither a target nor a name is given
            NotFound: If the credential does not exist
            OperationFailed: If the vault reports any other failure
        """
        if not target:
            if not name:
                raise ValidationError("A name or target is required to remove a credential.")
            target = self.target_for(name, namespace)

        if not proceed:
            logger.info(f"Skipped removing credential {target}")
            return OperationResult("remove", target, False)

        try:
            removed = self.gateway.delete(target, CredentialKind.GENERIC)
        except NativeVaultError as e:
            error = translate(e, target)
            logger.error(f"Error removing credential {target}: {error}")
            raise error from e

        if not removed:
            logger.error(f"Vault reported failure removing credential {target}")
            raise OperationFailed(f"Unable to remove credential '{target}'.", target)

        logger.info(f"Removed credential {target}")
        return OperationResult("remove", target, True)

    def remove_many(self, targets: Iterable[str], proceed: bool = True) -> List[OperationResult]:
        """
        Remove several targets in order.
        ValidationError and OperationFailed are recorded in the result and
        processing continues; NotFound stops the batch.
        """
        results = []
        for target in targets:
            try:
                results.append(self.remove(target=target, proceed=proceed))
            except ValidationError as e:
                logger.error(f"Skipped removing credential {target!r}: {e}")
                results.append(OperationResult("remove", target, False, e))
            except OperationFailed as e:
                results.append(OperationResult("remove", target, False, e))
        return results

    @staticmethod
    def convert(native: NativeCredential) -> SecretRecord:
        """Convert a native vault record into a SecretRecord."""
        return convert(native)

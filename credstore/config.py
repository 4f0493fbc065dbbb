"""
Configuration constants for credstore.
"""

import os
from dataclasses import dataclass

# Application Metadata
APP_NAME = "credstore"  # Use: Name of the package, used in the CLI prog name and log messages. Type: str. Range: Any valid string.
APP_VERSION = "1.0.0"  # Use: Current version of the package. Type: str. Range: Semantic versioning string (e.g., "1.0.0")

# Addressing Settings
DEFAULT_NAMESPACE = "powershell"  # Use: Namespace applied when the caller does not give one. Type: str. Range: Non-empty string without TARGET_SEPARATOR.
TARGET_SEPARATOR = "/"  # Use: Separator between namespace and name in a vault target. Type: str. Range: Single character.
RESTRICT_TO_NAMESPACE_DEFAULT = True  # Use: Whether an unfiltered fetch only returns targets of the default namespace. Type: bool. Range: True or False.

# Record Conversion Settings
UNSPECIFIED_IDENTITY = "**UNSPECIFIED**"  # Use: Identity reported for vault records stored without a user name. Type: str. Range: Any string.
SECRET_ENCODING = "utf-16-le"  # Use: Encoding of the secret blob as the Windows vault stores it. Type: str. Range: Valid Python codec name.
MASKED_SECRET_TEXT = "••••••••"  # Use: Placeholder shown instead of a secret in reprs and CLI output. Type: str. Range: Any string.

# Vault Settings
PERSIST_LOCAL_MACHINE = True  # Use: Persist saved credentials across logon sessions (CRED_PERSIST_LOCAL_MACHINE) rather than the current session only. Type: bool. Range: True or False.
CRED_MAX_CREDENTIAL_BLOB_SIZE = 5 * 512  # Use: Largest secret blob in bytes accepted by the Windows vault. Type: int. Range: Fixed by the OS (2560).

# Environment Variables
ENV_NAMESPACE = "CREDSTORE_NAMESPACE"  # Use: Environment variable overriding DEFAULT_NAMESPACE in StoreSettings.from_env(). Type: str. Range: Any valid variable name.
ENV_RESTRICT = "CREDSTORE_RESTRICT"  # Use: Environment variable overriding RESTRICT_TO_NAMESPACE_DEFAULT ("0"/"false"/"no" disable it). Type: str. Range: Any valid variable name.

# Logging
LOG_FORMAT = '%(asctime)s - %(levelname)s - %(name)s - %(message)s'  # Use: Format passed to logging.basicConfig by the CLI. Type: str. Range: Valid logging format string.

_FALSE_VALUES = ("0", "false", "no", "off")


@dataclass(frozen=True)
class StoreSettings:
    """Settings threaded into a CredentialStore at construction."""
    default_namespace: str = DEFAULT_NAMESPACE
    restrict_to_namespace: bool = RESTRICT_TO_NAMESPACE_DEFAULT
    persist: bool = PERSIST_LOCAL_MACHINE

    def __post_init__(self):
        if not self.default_namespace:
            raise ValueError("default_namespace must be a non-empty string")
        if TARGET_SEPARATOR in self.default_namespace:
            raise ValueError(f"default_namespace may not contain {TARGET_SEPARATOR!r}")

    @classmethod
    def from_env(cls, environ=None) -> 'StoreSettings':
        """
        Build settings from the process environment.
        Args:
            environ: Mapping to read instead of os.environ
        """
        environ = os.environ if environ is None else environ
        namespace = environ.get(ENV_NAMESPACE) or DEFAULT_NAMESPACE
        restrict = RESTRICT_TO_NAMESPACE_DEFAULT
        raw = environ.get(ENV_RESTRICT)
        if raw is not None:
            restrict = raw.strip().lower() not in _FALSE_VALUES
        return cls(default_namespace=namespace, restrict_to_namespace=restrict)

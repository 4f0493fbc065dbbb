"""
Vault target names of the form "namespace/name".
"""

from typing import Tuple

from . import config
from .errors import ValidationError


def resolve(namespace: str, name: str) -> str:
    """
    Combine a namespace and a name into a vault target.
    Args:
        namespace: Group prefix; may not contain the separator
        name: Credential name within the namespace
    Returns:
        The target string "namespace/name"
    """
    if not namespace:
        raise ValidationError("A namespace is required to address a credential.")
    if not name:
        raise ValidationError("A name is required to address a credential.")
    if config.TARGET_SEPARATOR in namespace:
        raise ValidationError(f"Namespace '{namespace}' may not contain '{config.TARGET_SEPARATOR}'.")
    return f"{namespace}{config.TARGET_SEPARATOR}{name}"


def split(target: str) -> Tuple[str, str]:
    """Split a target into (namespace, name). Targets without a separator have an empty namespace."""
    namespace, sep, name = target.partition(config.TARGET_SEPARATOR)
    if not sep:
        return "", target
    return namespace, name


def namespace_prefix(namespace: str) -> str:
    """Prefix shared by every target in a namespace."""
    return f"{namespace}{config.TARGET_SEPARATOR}"

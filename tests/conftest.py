"""Shared fixtures: a credential store backed by the in-memory vault."""

import pytest

from credstore.config import StoreSettings
from credstore.native import MemoryVaultGateway
from credstore.store import CredentialStore


@pytest.fixture
def gateway() -> MemoryVaultGateway:
    return MemoryVaultGateway()


@pytest.fixture
def store(gateway: MemoryVaultGateway) -> CredentialStore:
    return CredentialStore(gateway=gateway, settings=StoreSettings(default_namespace="powershell"))

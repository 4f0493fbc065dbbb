import pytest

from credstore.native import CredentialKind, NativeVaultError
from credstore.windows import (
    CRED_PERSIST_ENTERPRISE,
    CRED_PERSIST_LOCAL_MACHINE,
    CRED_PERSIST_SESSION,
    WindowsVaultGateway,
)


class FakeError(Exception):
    """Shaped like pywintypes.error."""

    def __init__(self, winerror, funcname, strerror):
        super().__init__(winerror, funcname, strerror)
        self.winerror = winerror
        self.funcname = funcname
        self.strerror = strerror


class FakeWin32Cred:
    """Records calls the way win32cred receives them."""

    def __init__(self):
        self.creds = {}
        self.calls = []

    def CredEnumerate(self, Filter, Flags):
        self.calls.append(("CredEnumerate", Filter, Flags))
        if Filter is None:
            found = list(self.creds.values())
        elif Filter.endswith("*"):
            found = [c for c in self.creds.values() if c["TargetName"].lower().startswith(Filter[:-1].lower())]
        else:
            found = [c for c in self.creds.values() if c["TargetName"].lower() == Filter.lower()]
        if not found:
            raise FakeError(1168, "CredEnumerate", "Element not found.")
        return tuple(found)

    def CredWrite(self, Credential, Flags):
        self.calls.append(("CredWrite", Credential, Flags))
        self.creds[Credential["TargetName"].lower()] = dict(Credential, Comment=None, LastWritten=None)

    def CredDelete(self, TargetName, Type, Flags):
        self.calls.append(("CredDelete", TargetName, Type, Flags))
        if self.creds.pop(TargetName.lower(), None) is None:
            raise FakeError(1168, "CredDelete", "Element not found.")


@pytest.fixture
def fake() -> FakeWin32Cred:
    return FakeWin32Cred()


@pytest.fixture
def windows(fake: FakeWin32Cred) -> WindowsVaultGateway:
    return WindowsVaultGateway(win32cred_module=fake, error_type=FakeError)


def test_save_writes_generic_local_machine_credential(windows, fake) -> None:
    assert windows.save("powershell/pester", "pester", b"p\x00w\x00", CredentialKind.GENERIC, True)

    _, credential, flags = fake.calls[-1]
    assert credential["Type"] == 1
    assert credential["TargetName"] == "powershell/pester"
    assert credential["UserName"] == "pester"
    assert credential["CredentialBlob"] == b"p\x00w\x00"
    assert credential["Persist"] == CRED_PERSIST_LOCAL_MACHINE
    assert flags == 0


def test_save_session_persistence(windows, fake) -> None:
    windows.save("powershell/tmp", "tmp", b"x\x00", CredentialKind.GENERIC, False)

    assert fake.calls[-1][1]["Persist"] == CRED_PERSIST_SESSION


def test_save_rejects_oversized_secret(windows, fake) -> None:
    assert windows.save("powershell/big", "big", b"x" * 4096, CredentialKind.GENERIC, True) is False
    assert fake.calls == []


def test_enumerate_converts_records(windows) -> None:
    windows.save("powershell/pester", "", b"p\x00w\x00", CredentialKind.GENERIC, True)

    (record,) = windows.enumerate("powershell/*")

    assert record.target == "powershell/pester"
    assert record.identity is None
    assert record.blob == b"p\x00w\x00"
    assert record.kind is CredentialKind.GENERIC
    assert record.persist is True


def test_enumerate_not_found_is_empty(windows) -> None:
    assert windows.enumerate("nothing/*") == []


def test_enumerate_empty_pattern_skips_the_vault(windows, fake) -> None:
    assert windows.enumerate("") == []
    assert fake.calls == []


def test_enumerate_skips_non_generic_kinds(windows, fake) -> None:
    fake.creds["domain"] = {"Type": 2, "TargetName": "domain", "UserName": "u", "CredentialBlob": b""}

    assert windows.enumerate() == []


def test_delete_wraps_native_error(windows) -> None:
    with pytest.raises(NativeVaultError) as info:
        windows.delete("powershell/missing", CredentialKind.GENERIC)

    assert info.value.code == 1168
    assert isinstance(info.value.__cause__, FakeError)


def test_enumerate_other_errors_are_raised(windows, fake) -> None:
    def denied(Filter, Flags):
        raise FakeError(5, "CredEnumerate", "Access is denied.")

    fake.CredEnumerate = denied

    with pytest.raises(NativeVaultError) as info:
        windows.enumerate()
    assert info.value.code == 5


def test_gateway_requires_pywin32_when_unavailable(monkeypatch) -> None:
    monkeypatch.setattr("credstore.windows.WINDOWS_VAULT_AVAILABLE", False)

    with pytest.raises(RuntimeError):
        WindowsVaultGateway()


def test_enterprise_persistence_is_persistent(windows, fake) -> None:
    fake.creds["powershell/shared"] = {
        "Type": 1,
        "TargetName": "powershell/shared",
        "UserName": "svc",
        "CredentialBlob": b"x\x00",
        "Persist": CRED_PERSIST_ENTERPRISE,
    }

    (record,) = windows.enumerate("powershell/shared")
    assert record.persist is True

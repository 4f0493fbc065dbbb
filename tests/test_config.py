import pytest

from credstore.config import DEFAULT_NAMESPACE, StoreSettings


def test_defaults() -> None:
    settings = StoreSettings()

    assert settings.default_namespace == DEFAULT_NAMESPACE == "powershell"
    assert settings.restrict_to_namespace is True
    assert settings.persist is True


def test_from_env_reads_overrides() -> None:
    settings = StoreSettings.from_env({"CREDSTORE_NAMESPACE": "deploy", "CREDSTORE_RESTRICT": "false"})

    assert settings.default_namespace == "deploy"
    assert settings.restrict_to_namespace is False


def test_from_env_without_variables_uses_defaults() -> None:
    assert StoreSettings.from_env({}) == StoreSettings()


@pytest.mark.parametrize("namespace", ["", "a/b"])
def test_invalid_namespace_is_rejected(namespace) -> None:
    with pytest.raises(ValueError):
        StoreSettings(default_namespace=namespace)

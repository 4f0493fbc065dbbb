import pytest

from credstore.errors import ValidationError
from credstore.target import namespace_prefix, resolve, split


def test_resolve_joins_namespace_and_name() -> None:
    assert resolve("powershell", "pester") == "powershell/pester"


def test_resolve_is_deterministic() -> None:
    assert resolve("ns", "name") == resolve("ns", "name")


@pytest.mark.parametrize(
    "first, second",
    [
        (("ab", "c"), ("a", "bc")),
        (("ns", "x"), ("ns", "y")),
    ],
)
def test_resolve_distinct_pairs_do_not_collide(first, second) -> None:
    assert resolve(*first) != resolve(*second)


def test_resolve_rejects_separator_in_namespace() -> None:
    with pytest.raises(ValidationError):
        resolve("a/b", "c")


@pytest.mark.parametrize("namespace, name", [("", "x"), ("ns", ""), (None, "x"), ("ns", None)])
def test_resolve_rejects_empty_input(namespace, name) -> None:
    with pytest.raises(ValidationError):
        resolve(namespace, name)


def test_split_reverses_resolve() -> None:
    assert split(resolve("powershell", "deploy/key")) == ("powershell", "deploy/key")
    assert split("legacy-target") == ("", "legacy-target")


def test_namespace_prefix() -> None:
    assert namespace_prefix("powershell") == "powershell/"

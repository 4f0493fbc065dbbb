import copy
import pickle

import pytest

from credstore.protect import ProtectedSecret


def test_reveal_returns_original_text() -> None:
    secret = ProtectedSecret.from_text("pesterpw")

    assert secret.reveal() == "pesterpw"
    assert len(secret) == len("pesterpw".encode("utf-16-le"))


def test_source_bytearray_is_zeroed() -> None:
    buffer = bytearray("hunter2".encode("utf-16-le"))

    secret = ProtectedSecret(buffer)

    assert set(buffer) == {0}
    assert secret.reveal() == "hunter2"


def test_sealed_value_is_not_plaintext() -> None:
    secret = ProtectedSecret(b"plain-bytes", encoding="ascii")

    assert secret._ciphertext != b"plain-bytes"
    assert secret.reveal_bytes() == bytearray(b"plain-bytes")


def test_repr_and_str_mask_the_value() -> None:
    secret = ProtectedSecret.from_text("do-not-print")

    assert "do-not-print" not in repr(secret)
    assert "do-not-print" not in str(secret)


def test_cannot_be_pickled_or_copied() -> None:
    secret = ProtectedSecret.from_text("value")

    with pytest.raises(TypeError):
        pickle.dumps(secret)
    with pytest.raises(TypeError):
        copy.copy(secret)


def test_clear_discards_the_value() -> None:
    with ProtectedSecret.from_text("temporary") as secret:
        assert secret.reveal() == "temporary"

    assert secret.cleared
    assert len(secret) == 0
    with pytest.raises(ValueError):
        secret.reveal()


def test_rejects_str_input() -> None:
    with pytest.raises(TypeError):
        ProtectedSecret("not bytes")

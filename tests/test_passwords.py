import hashlib

import pytest

from authdemo.auth.passwords import hash_password, verify_password


def test_argon2_hash_roundtrip():
    h = hash_password("secret1")
    assert h != "secret1"
    assert h.startswith("$argon2")
    assert verify_password(h, "secret1")
    assert not verify_password(h, "secret2")


def test_argon2_hashes_are_salted():
    assert hash_password("secret1") != hash_password("secret1")


def test_sha256_scheme_is_hex_digest():
    h = hash_password("secret1", scheme="sha256")
    assert h == hashlib.sha256(b"secret1").hexdigest()
    assert verify_password(h, "secret1")
    assert not verify_password(h, "Secret1")


def test_empty_inputs():
    with pytest.raises(ValueError):
        hash_password("")
    assert not verify_password("", "secret1")
    assert not verify_password(hash_password("secret1"), "")


def test_unknown_scheme_rejected():
    with pytest.raises(ValueError):
        hash_password("secret1", scheme="md5")


def test_garbage_hash_never_verifies():
    assert not verify_password("not-a-hash", "secret1")

import pytest

from rolegate.auth.passwords import hash_password, needs_rehash, verify_password


def test_hash_then_verify_matches_only_original_plaintext():
    h = hash_password("secret1")
    assert h != "secret1"
    assert verify_password(h, "secret1")
    assert not verify_password(h, "secret2")


def test_hash_is_salted():
    assert hash_password("secret1") != hash_password("secret1")


def test_verify_fails_closed_on_malformed_hash():
    assert verify_password("not-a-real-hash", "secret1") is False
    assert verify_password("$argon2id$v=19$garbage", "secret1") is False
    assert verify_password("$argon2id$v=19$m=65536,t=3,p=4$é", "secret1") is False
    assert verify_password("héllo", "secret1") is False


def test_verify_rejects_empty_inputs():
    assert verify_password("", "secret1") is False
    assert verify_password(hash_password("secret1"), "") is False


def test_hash_rejects_empty_password():
    with pytest.raises(ValueError):
        hash_password("")


def test_fresh_hash_does_not_need_rehash():
    assert needs_rehash(hash_password("secret1")) is False
    assert needs_rehash("not-a-real-hash") is False
    assert needs_rehash("héllo") is False

import pytest

from utils.hashing import get_password_hash, verify_password


def test_hash_is_salted_and_verifies():
    first = get_password_hash("s3cret-pass")
    second = get_password_hash("s3cret-pass")

    assert first != second
    assert first != "s3cret-pass"
    assert verify_password("s3cret-pass", first)
    assert verify_password("s3cret-pass", second)


def test_mismatch_is_false_not_error():
    hashed = get_password_hash("s3cret-pass")
    assert verify_password("wrong-pass", hashed) is False


def test_unreadable_hash_is_false():
    assert verify_password("anything", "not-a-bcrypt-hash") is False
    assert verify_password("anything", "") is False


def test_empty_password_is_rejected():
    with pytest.raises(ValueError):
        get_password_hash("")

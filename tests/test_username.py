import pytest

from models.users import Role
from utils import username as username_module
from utils.username import UsernameExhausted, derive_username, generate_unique_username


@pytest.mark.parametrize(
    "email, expected",
    [
        ("ab@x.com", "abuser"),
        ("John.Doe123@x.com", "johndoe123"),
        ("", "user"),
        ("...@x.com", "user"),
        ("first_last@x.com", "first_last"),
        ("a+b-c@x.com", "abc"),
        ("a+b@x.com", "abuser"),
        ("x" * 40 + "@x.com", "x" * 30),
        ("no-at-sign", "noatsign"),
        ("one@two@x.com", "one"),
    ],
)
def test_derive_username(email, expected):
    assert derive_username(email) == expected


def test_derived_usernames_stay_within_bounds():
    assert len(derive_username("Q" * 100 + "@x.com")) == 30
    assert len(derive_username("q@x.com")) >= 3


def test_free_username_is_used_as_is(db_session):
    assert generate_unique_username(db_session, "john.doe@example.com") == "johndoe"


def test_collisions_take_the_next_numeric_suffix(db_session, make_user):
    make_user(email="johndoe@a.com", username="johndoe")
    make_user(email="johndoe@b.com", username="johndoe1", role=Role.SUPER_ADMIN)

    assert generate_unique_username(db_session, "john.doe@c.com") == "johndoe2"


def test_gives_up_after_bounded_attempts(db_session, monkeypatch):
    monkeypatch.setattr(username_module, "username_exists", lambda db, name: True)

    with pytest.raises(UsernameExhausted):
        generate_unique_username(db_session, "busy@example.com")

import base64
import json
from datetime import timedelta

import pytest

from conftest import encode_raw_claims, fake_user
from models.users import Role
from utils.clock import utcnow
from utils.tokenJWT import (
    InvalidRole,
    InvalidSignatureOrExpired,
    MalformedToken,
    TokenService,
    UnexpectedSigningMethod,
)


@pytest.fixture
def service():
    return TokenService("unit-test-secret", "rgp-backend-enquiry")


def _b64(data: dict) -> str:
    raw = json.dumps(data).encode()
    return base64.urlsafe_b64encode(raw).rstrip(b"=").decode()


class TestIssueAndValidate:
    @pytest.mark.parametrize("role, lifetime", [
        (Role.ADMIN, timedelta(hours=48)),
        (Role.SUPER_ADMIN, timedelta(hours=720)),
    ])
    def test_round_trip(self, service, role, lifetime):
        user = fake_user(role, email="jane@example.com", username="jane")
        claims = service.validate(service.issue(user))

        assert claims.user_id == user.id
        assert claims.subject == user.id
        assert claims.email == "jane@example.com"
        assert claims.username == "jane"
        assert claims.role == role.value
        assert claims.issuer == "rgp-backend-enquiry"
        assert claims.not_before == claims.issued_at
        assert claims.expires_at - claims.issued_at == lifetime

    def test_role_given_as_plain_string(self, service):
        claims = service.validate(service.issue(fake_user("super-admin")))
        assert claims.role == "super-admin"

    def test_unknown_role_cannot_be_issued(self, service):
        with pytest.raises(InvalidRole):
            service.issue(fake_user("guest"))

    def test_expired_token_is_rejected(self, service):
        issued = utcnow() - timedelta(hours=49)
        token = service.issue(fake_user(Role.ADMIN), now=issued)

        with pytest.raises(InvalidSignatureOrExpired):
            service.validate(token)

    def test_super_admin_outlives_admin_window(self, service):
        issued = utcnow() - timedelta(hours=49)
        token = service.issue(fake_user(Role.SUPER_ADMIN), now=issued)

        assert service.validate(token).role == "super-admin"

    def test_not_yet_valid_token_is_rejected(self, service):
        token = service.issue(fake_user(Role.ADMIN), now=utcnow() + timedelta(hours=1))

        with pytest.raises(InvalidSignatureOrExpired):
            service.validate(token)

    def test_wrong_key_is_rejected_like_expiry(self, service):
        other = TokenService("some-other-secret", "rgp-backend-enquiry")
        token = other.issue(fake_user(Role.ADMIN))

        with pytest.raises(InvalidSignatureOrExpired):
            service.validate(token)

    @pytest.mark.parametrize("token", ["", "garbage", "a.b.c", "not.a.jwt.at.all"])
    def test_malformed_token(self, service, token):
        with pytest.raises(MalformedToken):
            service.validate(token)

    def test_non_hmac_algorithm_is_rejected(self, service):
        header = _b64({"alg": "RS256", "typ": "JWT"})
        payload = _b64({"user_id": "x", "role": "admin"})
        token = f"{header}.{payload}.c2lnbmF0dXJl"

        with pytest.raises(UnexpectedSigningMethod):
            service.validate(token)

    def test_alg_none_is_rejected(self, service):
        token = f"{_b64({'alg': 'none', 'typ': 'JWT'})}.{_b64({'user_id': 'x'})}."

        with pytest.raises(UnexpectedSigningMethod):
            service.validate(token)


class TestRefresh:
    def test_refresh_mints_a_new_token_with_fresh_expiry(self, service):
        issued = utcnow() - timedelta(hours=10)
        old = service.issue(fake_user(Role.ADMIN), now=issued)

        new = service.refresh(old)
        old_claims = service.validate(old)
        new_claims = service.validate(new)

        assert new != old
        assert new_claims.user_id == old_claims.user_id
        assert new_claims.role == old_claims.role
        assert new_claims.expires_at > old_claims.expires_at
        assert new_claims.expires_at - new_claims.issued_at == timedelta(hours=48)
        # the old token is untouched and still carries its own expiry
        assert old_claims.expires_at - old_claims.issued_at == timedelta(hours=48)

    def test_refresh_propagates_validation_failure(self, service):
        expired = service.issue(fake_user(Role.ADMIN), now=utcnow() - timedelta(hours=72))

        with pytest.raises(InvalidSignatureOrExpired):
            service.refresh(expired)

    def test_refresh_rejects_unknown_role_in_claims(self, service):
        token = encode_raw_claims(secret="unit-test-secret", role="guest")

        with pytest.raises(InvalidRole):
            service.refresh(token)


@pytest.mark.parametrize("role, expected", [
    (Role.ADMIN, timedelta(hours=48)),
    ("super-admin", timedelta(hours=720)),
    ("guest", timedelta(hours=24)),
    (None, timedelta(hours=24)),
])
def test_expiration_for(role, expected):
    assert TokenService.expiration_for(role) == expected

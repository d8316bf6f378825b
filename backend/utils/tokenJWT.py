# utils/tokenJWT.py
"""
Signed, role-scoped access tokens.

Tokens are HS256 JWTs keyed by a single long-lived secret. The lifetime is
fixed by the role at issuance (admin: 48 hours, super-admin: 30 days) and a
refresh always mints a brand new token instead of extending the old one.
"""
import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional, Union

from jose import jwt, JWTError

from config import settings
from models.users import Role
from utils.clock import utcnow

logger = logging.getLogger(__name__)

HMAC_ALGORITHMS = ["HS256", "HS384", "HS512"]

ROLE_TOKEN_LIFETIMES = {
    Role.ADMIN: timedelta(hours=48),
    Role.SUPER_ADMIN: timedelta(hours=720),
}
DEFAULT_TOKEN_LIFETIME = timedelta(hours=24)


class TokenError(Exception):
    pass


class InvalidRole(TokenError):
    pass


class MalformedToken(TokenError):
    pass


class UnexpectedSigningMethod(TokenError):
    pass


# Signature mismatch and expiry are deliberately reported as one kind
class InvalidSignatureOrExpired(TokenError):
    pass


@dataclass(frozen=True)
class TokenClaims:
    user_id: str
    email: str
    username: str
    role: Optional[str]
    issued_at: datetime
    not_before: datetime
    expires_at: datetime
    issuer: str
    subject: str

    @classmethod
    def from_payload(cls, payload: dict) -> "TokenClaims":
        try:
            return cls(
                user_id=payload["user_id"],
                email=payload.get("email", ""),
                username=payload.get("username", ""),
                role=payload.get("role"),
                issued_at=_from_timestamp(payload["iat"]),
                not_before=_from_timestamp(payload["nbf"]),
                expires_at=_from_timestamp(payload["exp"]),
                issuer=payload.get("iss", ""),
                subject=payload.get("sub", ""),
            )
        except (KeyError, TypeError, ValueError) as exc:
            raise MalformedToken(f"token claims are incomplete: {exc}") from exc


def _from_timestamp(value) -> datetime:
    return datetime.fromtimestamp(int(value), tz=timezone.utc)


def _strict_lifetime(role: Union[Role, str, None]) -> timedelta:
    try:
        return ROLE_TOKEN_LIFETIMES[Role(role)]
    except ValueError as exc:
        raise InvalidRole(f"invalid user role: {role!r}") from exc


class TokenService:
    def __init__(self, secret_key: str, issuer: str, algorithm: str = "HS256"):
        if algorithm not in HMAC_ALGORITHMS:
            raise ValueError(f"unsupported signing algorithm: {algorithm}")
        self._secret_key = secret_key
        self.issuer = issuer
        self.algorithm = algorithm

    def issue(self, user, now: Optional[datetime] = None) -> str:
        """Sign a token for ``user`` (anything with id/email/username/role)."""
        return self._encode(
            user_id=str(user.id),
            email=user.email,
            username=user.username,
            role=user.role,
            now=now,
        )

    def validate(self, token: str) -> TokenClaims:
        try:
            header = jwt.get_unverified_header(token)
            jwt.get_unverified_claims(token)
        except JWTError as exc:
            raise MalformedToken(str(exc)) from exc

        algorithm = header.get("alg") or ""
        if algorithm not in HMAC_ALGORITHMS:
            raise UnexpectedSigningMethod(f"unexpected signing method: {algorithm or 'none'}")

        try:
            payload = jwt.decode(token, self._secret_key, algorithms=HMAC_ALGORITHMS)
        except JWTError as exc:
            # covers ExpiredSignatureError and JWTClaimsError (nbf) as well
            raise InvalidSignatureOrExpired(str(exc)) from exc

        return TokenClaims.from_payload(payload)

    def refresh(self, token: str, now: Optional[datetime] = None) -> str:
        # The role comes from the old claims, not from the store
        claims = self.validate(token)
        return self._encode(
            user_id=claims.user_id,
            email=claims.email,
            username=claims.username,
            role=claims.role,
            now=now,
        )

    @staticmethod
    def expiration_for(role: Union[Role, str, None]) -> timedelta:
        try:
            return ROLE_TOKEN_LIFETIMES[Role(role)]
        except ValueError:
            return DEFAULT_TOKEN_LIFETIME

    def _encode(self, *, user_id: str, email: str, username: str, role, now: Optional[datetime]) -> str:
        lifetime = _strict_lifetime(role)
        issued = now or utcnow()
        payload = {
            "user_id": user_id,
            "email": email,
            "username": username,
            "role": Role(role).value,
            "iat": int(issued.timestamp()),
            "nbf": int(issued.timestamp()),
            "exp": int((issued + lifetime).timestamp()),
            "iss": self.issuer,
            "sub": user_id,
        }
        return jwt.encode(payload, self._secret_key, algorithm=self.algorithm)


_token_service: Optional[TokenService] = None


# Shared service built from settings; the secret is read-only after startup
def get_token_service() -> TokenService:
    global _token_service
    if _token_service is None:
        if settings.uses_default_secret:
            logger.warning("SECRET_KEY is not set; using the insecure default signing key")
        _token_service = TokenService(settings.SECRET_KEY, settings.TOKEN_ISSUER, settings.ALGORITHM)
    return _token_service

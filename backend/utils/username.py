# utils/username.py
"""
Username derivation for provisioned accounts.

Usernames are never supplied by the client: they are derived from the part of
the email before the first ``@``. When the derived name is taken, numeric
suffixes are tried in order (``name1``, ``name2``, ...). The lookup loop is
best-effort only: two concurrent creations can both see a name as free, and
the unique constraint on ``users.username`` rejects the loser at insert time.
"""
import logging
import re

from sqlalchemy.orm import Session

from models.users import User

logger = logging.getLogger(__name__)

FALLBACK_USERNAME = "user"
SHORT_SUFFIX = "user"
MIN_LENGTH = 3
MAX_LENGTH = 30
MAX_SUFFIX_ATTEMPTS = 999

_DISALLOWED = re.compile(r"[^A-Za-z0-9_]")


class UsernameExhausted(Exception):
    pass


def derive_username(email: str) -> str:
    if not email:
        return FALLBACK_USERNAME

    local_part = email.split("@", 1)[0]
    cleaned = _DISALLOWED.sub("", local_part).lower()
    if not cleaned:
        return FALLBACK_USERNAME

    if len(cleaned) < MIN_LENGTH:
        cleaned += SHORT_SUFFIX
    if len(cleaned) > MAX_LENGTH:
        cleaned = cleaned[:MAX_LENGTH]
    return cleaned


def username_exists(db: Session, username: str) -> bool:
    return db.query(User.id).filter(User.username == username).first() is not None


def generate_unique_username(db: Session, email: str) -> str:
    base = derive_username(email)
    candidate = base
    for counter in range(1, MAX_SUFFIX_ATTEMPTS + 1):
        if not username_exists(db, candidate):
            return candidate
        candidate = f"{base}{counter}"

    raise UsernameExhausted(
        f"unable to generate unique username for '{base}' after {MAX_SUFFIX_ATTEMPTS} attempts"
    )

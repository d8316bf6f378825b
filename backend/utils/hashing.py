# utils/hashing.py
import bcrypt

# Work factor for newly created hashes; the salt is embedded in the result
BCRYPT_ROUNDS = 12


def get_password_hash(password: str) -> str:
    if not password:
        raise ValueError("Password must not be empty")
    hashed = bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt(rounds=BCRYPT_ROUNDS))
    return hashed.decode("utf-8")


# A mismatch (or an unreadable hash) is a False result, never an exception
def verify_password(plain_password: str, hashed_password: str) -> bool:
    if not plain_password or not hashed_password:
        return False
    try:
        return bcrypt.checkpw(plain_password.encode("utf-8"), hashed_password.encode("utf-8"))
    except ValueError:
        return False

from fastapi import Request

from utils.errors import UnsupportedMediaType

MAX_EMAIL_LENGTH = 255


# Route dependency for endpoints that accept a JSON body
def require_json(request: Request) -> None:
    content_type = request.headers.get("content-type", "")
    if not content_type.startswith("application/json"):
        raise UnsupportedMediaType("Unsupported media type", "Content-Type must be application/json")


def is_valid_email(email: str) -> bool:
    return 0 < len(email) < MAX_EMAIL_LENGTH and "@" in email and "." in email

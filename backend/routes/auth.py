# backend/routes/auth.py
import logging

from fastapi import APIRouter, Depends, Header, Request, status
from sqlalchemy import func
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session
from typing import Optional

from database import get_db
from models.users import User
from schemas.response import success_response
from schemas.user import SignInResponse, TokenRefreshResponse, UserCreate, UserLogin, UserResponse
from utils.audit import write_log
from utils.auth import authenticate, extract_bearer_token
from utils.clock import utcnow
from utils.errors import Conflict, Forbidden, InternalError, Unauthorized, ValidationError
from utils.hashing import get_password_hash, verify_password
from utils.tokenJWT import InvalidRole, TokenError, TokenService, get_token_service
from utils.username import UsernameExhausted, generate_unique_username
from utils.validation import require_json

router = APIRouter(tags=["Auth"])
logger = logging.getLogger(__name__)


def _client_ip(request: Request) -> Optional[str]:
    return request.client.host if request.client else None


def _find_by_email(db: Session, email: str) -> Optional[User]:
    return db.query(User).filter(func.lower(User.email) == email.strip().lower()).first()


# Provision a new admin or super-admin account
@router.post("/create-user", status_code=status.HTTP_201_CREATED, dependencies=[Depends(require_json)])
def create_user(payload: UserCreate, request: Request, db: Session = Depends(get_db)):
    normalized_email = payload.email.strip().lower()

    if _find_by_email(db, normalized_email):
        write_log(db, user_id=None, action="CREATE_USER", resource="auth", status="FAIL",
                  ip=_client_ip(request), meta={"email": normalized_email, "reason": "Email exists"})
        raise Conflict("User already exists", "Email address is already registered")

    try:
        username = generate_unique_username(db, normalized_email)
    except UsernameExhausted as exc:
        raise InternalError("Failed to create user", str(exc)) from exc

    try:
        password_hash = get_password_hash(payload.password)
    except ValueError as exc:
        raise ValidationError("Invalid password", str(exc)) from exc

    now = utcnow()
    new_user = User(
        username=username,
        first_name=payload.first_name,
        last_name=payload.last_name,
        email=normalized_email,
        password_hash=password_hash,
        profile_pic=payload.profile_pic or "",
        role=payload.role,
        company_name=payload.company_name or "",
        is_active=True,
        created_at=now,
        updated_at=now,
    )
    db.add(new_user)
    try:
        db.commit()
    except IntegrityError as exc:
        # A concurrent creation won the race for the email or username
        db.rollback()
        logger.warning("Unique constraint rejected user %s: %s", normalized_email, exc.orig)
        raise Conflict("User already exists", "Email address or username is already registered") from exc
    db.refresh(new_user)

    write_log(db, user_id=new_user.id, action="CREATE_USER", resource="auth", status="SUCCESS",
              ip=_client_ip(request), meta={"email": new_user.email, "username": new_user.username})
    logger.info("Created %s user %s", new_user.role.value, new_user.username)

    return success_response(status.HTTP_201_CREATED, "User created successfully",
                            UserResponse.model_validate(new_user))


def _sign_in(db: Session, user: User, token_service: TokenService) -> SignInResponse:
    now = utcnow()
    user.last_login = now
    try:
        db.commit()
    except SQLAlchemyError:
        # A failed last_login update does not block the sign-in
        db.rollback()
        logger.exception("Failed to record last_login for user %s", user.id)
    db.refresh(user)

    if not user.is_admin:
        raise InternalError("Sign-in failed", f"invalid user role: {user.role!r}")
    token = token_service.issue(user, now=now)

    return SignInResponse(
        user=UserResponse.model_validate(user),
        message="Sign-in successful",
        login_time=now,
        token=token,
        expires_at=now + token_service.expiration_for(user.role),
        role=user.role,
    )


# Sign in with email and password. Unknown email and wrong password get
# different messages here; /auth/login does not distinguish them.
@router.post("/auth/signin", dependencies=[Depends(require_json)])
def signin(
    payload: UserLogin,
    request: Request,
    db: Session = Depends(get_db),
    token_service: TokenService = Depends(get_token_service),
):
    db_user = _find_by_email(db, payload.email)
    ip = _client_ip(request)

    if db_user is None:
        write_log(db, user_id=None, action="SIGNIN", resource="auth", status="FAIL", ip=ip,
                  meta={"email": payload.email, "reason": "user_not_found"})
        raise Unauthorized("Email not found", "No user exists with this email address")

    if not db_user.is_active:
        write_log(db, user_id=db_user.id, action="SIGNIN", resource="auth", status="FAIL", ip=ip,
                  meta={"email": payload.email, "reason": "account_deactivated"})
        raise Forbidden("Account deactivated", "Your account has been deactivated. Please contact support")

    if not verify_password(payload.password, db_user.password_hash):
        write_log(db, user_id=db_user.id, action="SIGNIN", resource="auth", status="FAIL", ip=ip,
                  meta={"email": payload.email, "reason": "invalid_password"})
        raise Unauthorized("Wrong password", "The password you entered is incorrect")

    response = _sign_in(db, db_user, token_service)
    write_log(db, user_id=db_user.id, action="SIGNIN", resource="auth", status="SUCCESS", ip=ip,
              meta={"email": db_user.email})
    return success_response(status.HTTP_200_OK, "Sign-in successful", response)


# Legacy login: a single generic failure for unknown user and wrong password
@router.post("/auth/login", dependencies=[Depends(require_json)])
def login(
    payload: UserLogin,
    request: Request,
    db: Session = Depends(get_db),
    token_service: TokenService = Depends(get_token_service),
):
    db_user = _find_by_email(db, payload.email)

    if not db_user or not db_user.is_active or not verify_password(payload.password, db_user.password_hash):
        write_log(db, user_id=(db_user.id if db_user else None), action="LOGIN", resource="auth",
                  status="FAIL", ip=_client_ip(request), meta={"email": payload.email})
        raise Unauthorized("Invalid credentials", "Email or password is incorrect")

    response = _sign_in(db, db_user, token_service)
    write_log(db, user_id=db_user.id, action="LOGIN", resource="auth", status="SUCCESS",
              ip=_client_ip(request), meta={"email": db_user.email})
    return success_response(status.HTTP_200_OK, "Login successful", response)


# Exchange a still-valid token for a fresh one with a new expiry
@router.post("/auth/refresh")
def refresh_token(
    authorization: Optional[str] = Header(None, alias="Authorization"),
    token_service: TokenService = Depends(get_token_service),
):
    auth = authenticate(authorization, token_service)
    now = utcnow()
    try:
        token = token_service.refresh(extract_bearer_token(authorization), now=now)
    except InvalidRole as exc:
        raise Unauthorized("Invalid token", str(exc)) from exc
    except TokenError as exc:
        raise Unauthorized("Invalid token", "Token is expired or invalid") from exc

    return success_response(
        status.HTTP_200_OK,
        "Token refreshed successfully",
        TokenRefreshResponse(
            token=token,
            expires_at=now + token_service.expiration_for(auth.role),
            role=auth.role,
        ),
    )

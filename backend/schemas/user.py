from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from models.users import Role
from utils.clock import as_utc


# Schema for user authentication credentials
class UserLogin(BaseModel):
    email: EmailStr
    password: str = Field(min_length=1)


# Provisioning request; the username is always derived from the email
class UserCreate(BaseModel):
    first_name: str = Field(min_length=2, max_length=50)
    last_name: str = Field(min_length=2, max_length=50)
    email: EmailStr
    password: str = Field(min_length=8)
    role: Role
    profile_pic: Optional[str] = None
    company_name: Optional[str] = None


# Full profile; the password hash is never part of a response
class UserResponse(BaseModel):
    id: str
    username: str
    first_name: str
    last_name: str
    email: str
    profile_pic: Optional[str] = None
    role: Role
    company_name: Optional[str] = None
    is_active: bool
    last_login: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)

    @field_validator("last_login", "created_at", "updated_at")
    @classmethod
    def _utc(cls, value: Optional[datetime]) -> Optional[datetime]:
        return as_utc(value)


# Reduced shape used by the user listing
class UserListItem(BaseModel):
    id: str
    first_name: str
    last_name: str
    email: str
    profile_pic: Optional[str] = None
    username: str
    role: Role

    model_config = ConfigDict(from_attributes=True)


class SignInResponse(BaseModel):
    user: UserResponse
    message: str
    login_time: datetime
    token: str
    expires_at: datetime
    role: Role


class TokenRefreshResponse(BaseModel):
    token: str
    expires_at: datetime
    role: str

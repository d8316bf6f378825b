# backend/models/users.py
import enum
import uuid

from sqlalchemy import Boolean, Column, DateTime, Enum, String

from database import Base
from utils.clock import utcnow


# Closed set of access tiers; super-admin is a superset of admin
class Role(str, enum.Enum):
    ADMIN = "admin"
    SUPER_ADMIN = "super-admin"


def new_id() -> str:
    return uuid.uuid4().hex


# Represents an admin or super-admin account; username and email are unique
class User(Base):
    __tablename__ = "users"

    id = Column(String(32), primary_key=True, default=new_id)
    username = Column(String(64), unique=True, nullable=False, index=True)
    first_name = Column(String(50), nullable=False)
    last_name = Column(String(50), nullable=False)
    email = Column(String(254), unique=True, nullable=False, index=True)
    password_hash = Column(String, nullable=False)
    profile_pic = Column(String, nullable=False, default="")
    role = Column(
        Enum(Role, name="user_role", native_enum=False,
             values_callable=lambda roles: [r.value for r in roles]),
        nullable=False,
    )
    company_name = Column(String, nullable=False, default="")
    is_active = Column(Boolean, nullable=False, default=True)

    last_login = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)

    # True for admins and super-admins alike
    @property
    def is_admin(self) -> bool:
        return self.role in (Role.ADMIN, Role.SUPER_ADMIN)

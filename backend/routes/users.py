# backend/routes/users.py
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from database import get_db
from models.users import Role, User
from schemas.response import success_response
from schemas.user import UserListItem
from utils.auth import AuthenticatedRequest, role_required
from utils.errors import NotImplementedYet

router = APIRouter(prefix="/users", tags=["Users"])


# List all accounts, newest first (admin and super-admin)
@router.get("")
def get_all_users(
    db: Session = Depends(get_db),
    auth: AuthenticatedRequest = Depends(role_required(Role.ADMIN)),
):
    users = db.query(User).order_by(User.created_at.desc()).all()
    return success_response(status.HTTP_200_OK, "Users retrieved successfully",
                            [UserListItem.model_validate(u) for u in users])


# Per-user operations are declared but not available yet
@router.get("/{user_id}")
def get_user(user_id: str, auth: AuthenticatedRequest = Depends(role_required(Role.ADMIN))):
    raise NotImplementedYet("Not implemented", "GET /users/{id} is not implemented")


@router.put("/{user_id}")
def update_user(user_id: str, auth: AuthenticatedRequest = Depends(role_required(Role.ADMIN))):
    raise NotImplementedYet("Not implemented", "PUT /users/{id} is not implemented")


@router.delete("/{user_id}")
def delete_user(user_id: str, auth: AuthenticatedRequest = Depends(role_required(Role.ADMIN))):
    raise NotImplementedYet("Not implemented", "DELETE /users/{id} is not implemented")

"""User administration routes."""

from typing import List

from fastapi import APIRouter, Depends, HTTPException, status

from learnhub.config import USER_ROLES
from learnhub.core.dependencies import UserManagerDep
from learnhub.core.permissions import require
from learnhub.schemas.user import User

router = APIRouter(prefix="/api/users", tags=["Users"])


@router.get("", response_model=List[User], summary="List all users")
def list_users(
    user_manager: UserManagerDep,
    current_user=Depends(require("users:list")),
) -> List[User]:
    return [User.model_validate(u) for u in user_manager.list_users()]


@router.get("/role/{role}", response_model=List[User], summary="List users by role")
def list_users_by_role(
    role: str,
    user_manager: UserManagerDep,
    current_user=Depends(require("users:list_by_role")),
) -> List[User]:
    if role not in USER_ROLES:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Invalid role: {role}. Must be 'student', 'teacher', or 'admin'.",
        )
    return [User.model_validate(u) for u in user_manager.list_users_by_role(role)]

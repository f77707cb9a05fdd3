"""User schema definitions.

These models never carry the password hash, so anything built from them is
safe to return from an endpoint.
"""

from datetime import datetime
from typing import Literal, Optional

from pydantic import EmailStr, Field

from learnhub.schemas.base import ApiModel

UserRole = Literal["student", "teacher", "admin"]


class User(ApiModel):
    """Public view of a user."""

    id: int
    email: str
    username: str
    first_name: str
    last_name: str
    role: UserRole
    bio: Optional[str] = None
    profile_pic_url: Optional[str] = None
    created_at: datetime


class ReviewerInfo(ApiModel):
    """Reduced user view attached to reviews."""

    id: int
    first_name: str
    last_name: str
    profile_pic_url: Optional[str] = None


class RegisterRequest(ApiModel):
    username: str = Field(min_length=3, description="Username, at least 3 characters.")
    email: EmailStr = Field(description="Email address, unique per user.")
    password: str = Field(min_length=6, description="Password, at least 6 characters.")
    first_name: str = Field(min_length=1)
    last_name: str = Field(min_length=1)
    role: UserRole = "student"
    bio: Optional[str] = None
    profile_pic_url: Optional[str] = None


class LoginRequest(ApiModel):
    username: str = Field(min_length=1, description="Username or email address.")
    password: str = Field(min_length=1)


class LoginResponse(ApiModel):
    user: User
    token: str


class UpdateProfileRequest(ApiModel):
    email: Optional[EmailStr] = None
    first_name: Optional[str] = Field(default=None, min_length=1)
    last_name: Optional[str] = Field(default=None, min_length=1)
    bio: Optional[str] = None
    profile_pic_url: Optional[str] = None


class ChangePasswordRequest(ApiModel):
    current_password: str = Field(min_length=1)
    new_password: str = Field(min_length=6)

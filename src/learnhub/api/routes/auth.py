"""Authentication routes.

This module handles HTTP endpoints for registration, login, logout and the
current user's profile. A session token travels in the session cookie, or in
an ``Authorization: Bearer`` header for non-browser clients.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Request, Response, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from learnhub.config import (
    ROLE_ADMIN,
    ROLE_STUDENT,
    SESSION_COOKIE_NAME,
    SESSION_COOKIE_SECURE,
    SESSION_EXPIRE_MINUTES,
)
from learnhub.core.dependencies import UserManagerDep
from learnhub.core.exceptions import (
    AuthenticationError,
    EntityNotFoundError,
    UserAlreadyExistsError,
)
from learnhub.schemas.user import (
    ChangePasswordRequest,
    LoginRequest,
    LoginResponse,
    RegisterRequest,
    UpdateProfileRequest,
    User,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Auth"])

# HTTP Bearer token security; the cookie is tried when no header is sent
security = HTTPBearer(auto_error=False)


def _extract_token(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials],
) -> Optional[str]:
    if credentials is not None and credentials.credentials:
        return credentials.credentials
    return request.cookies.get(SESSION_COOKIE_NAME)


def _set_session_cookie(response: Response, token: str) -> None:
    response.set_cookie(
        key=SESSION_COOKIE_NAME,
        value=token,
        max_age=SESSION_EXPIRE_MINUTES * 60,
        httponly=True,
        secure=SESSION_COOKIE_SECURE,
        samesite="lax",
    )


def get_optional_user(
    request: Request,
    user_manager: UserManagerDep,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
):
    """Resolve the caller's session, or None for anonymous requests.

    Invalid, revoked or expired sessions are treated as anonymous.
    """
    token = _extract_token(request, credentials)
    if not token:
        return None
    try:
        return user_manager.resolve_session(token)
    except AuthenticationError as exc:
        logger.debug("Ignoring unusable session: %s", exc)
        return None


def get_current_user(user=Depends(get_optional_user)):
    """Get current authenticated user.

    Raises:
        HTTPException: 401 if the request carries no valid session.
    """
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication required",
        )
    return user


@router.post(
    "/register",
    response_model=User,
    status_code=status.HTTP_201_CREATED,
    summary="Register a new user",
)
def register(
    req: RegisterRequest,
    response: Response,
    user_manager: UserManagerDep,
    caller=Depends(get_optional_user),
) -> User:
    """Register a new user.

    Anyone may register as a student. Teacher and admin accounts can only be
    created by an authenticated admin; in that case the admin's own session
    is kept and no new session is opened.

    Returns:
        The created user without the password hash.

    Raises:
        HTTPException: 400 if the email or username is taken, 403 if a
            privileged role is requested by a non-admin.
    """
    acting_admin = caller is not None and caller.role == ROLE_ADMIN
    if req.role != ROLE_STUDENT and not acting_admin:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Only administrators can create teacher or admin accounts.",
        )

    try:
        user = user_manager.create_user(
            username=req.username,
            email=req.email,
            password=req.password,
            first_name=req.first_name,
            last_name=req.last_name,
            role=req.role,
            bio=req.bio,
            profile_pic_url=req.profile_pic_url,
        )
    except UserAlreadyExistsError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e),
        )

    if not acting_admin:
        # Log the new user in
        _set_session_cookie(response, user_manager.create_session(user.id))

    return User.model_validate(user)


@router.post("/login", response_model=LoginResponse, summary="Log in")
def login(
    req: LoginRequest,
    response: Response,
    user_manager: UserManagerDep,
) -> LoginResponse:
    """Login with username (or email) and password.

    Returns:
        LoginResponse with user information and the session token.

    Raises:
        HTTPException: 401 with the same message for any failed attempt.
    """
    try:
        user = user_manager.authenticate(req.username, req.password)
    except AuthenticationError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=str(e),
        )

    token = user_manager.create_session(user.id)
    _set_session_cookie(response, token)
    logger.info("User %s logged in", user.id)
    return LoginResponse(user=User.model_validate(user), token=token)


@router.post("/logout", summary="Log out")
def logout(
    request: Request,
    response: Response,
    user_manager: UserManagerDep,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> dict:
    """End the current session and clear the session cookie."""
    token = _extract_token(request, credentials)
    if token:
        user_manager.revoke_session(token)
    response.delete_cookie(SESSION_COOKIE_NAME)
    return {"success": True, "message": "Logged out successfully"}


@router.get("/user", response_model=User, summary="Get the current user")
def get_current_user_info(current_user=Depends(get_current_user)) -> User:
    return User.model_validate(current_user)


@router.patch("/user", response_model=User, summary="Update the current user's profile")
def update_current_user(
    req: UpdateProfileRequest,
    user_manager: UserManagerDep,
    current_user=Depends(get_current_user),
) -> User:
    try:
        user = user_manager.update_profile(
            current_user.id, req.model_dump(exclude_unset=True)
        )
    except UserAlreadyExistsError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e),
        )
    except EntityNotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="User not found",
        )
    return User.model_validate(user)


@router.post("/user/password", summary="Change the current user's password")
def change_password(
    req: ChangePasswordRequest,
    user_manager: UserManagerDep,
    current_user=Depends(get_current_user),
) -> dict:
    try:
        user_manager.change_password(
            current_user.id, req.current_password, req.new_password
        )
    except AuthenticationError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e),
        )
    return {"success": True, "message": "Password updated"}

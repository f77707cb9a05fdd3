"""User management utilities.

This module provides user management functionality including user storage,
password hashing, credential authentication, server-side login sessions and
first-run bootstrap of the default accounts.
"""

import logging
import secrets
from datetime import datetime, timedelta
from typing import Any, Dict, Iterable, List, Optional

import bcrypt
import pytz
from jose import JWTError, jwt
from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from learnhub.config import (
    BCRYPT_ROUNDS,
    DEFAULT_AVATAR_URL_TEMPLATE,
    DEFAULT_USERS,
    JWT_ALGORITHM,
    JWT_SECRET_KEY,
    ROLE_STUDENT,
    SESSION_EXPIRE_MINUTES,
    USER_ROLES,
)
from learnhub.core.exceptions import (
    AuthenticationError,
    EntityNotFoundError,
    UserAlreadyExistsError,
)
from learnhub.models.user import UserModel
from learnhub.models.user_session import UserSessionModel

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid credentials"

# bcrypt only looks at the first 72 bytes of a password
_BCRYPT_MAX_BYTES = 72

_PROFILE_FIELDS = ("email", "first_name", "last_name", "bio", "profile_pic_url")
# Optional fields an explicit null clears
_CLEARABLE_PROFILE_FIELDS = ("bio", "profile_pic_url")


def hash_password(password: str) -> str:
    """Hash a password using bcrypt.

    Args:
        password: Plain text password.

    Returns:
        Hashed password (bcrypt hash string, salt embedded).
    """
    password_bytes = password.encode("utf-8")[:_BCRYPT_MAX_BYTES]
    salt = bcrypt.gensalt(rounds=BCRYPT_ROUNDS)
    return bcrypt.hashpw(password_bytes, salt).decode("utf-8")


def verify_password(plain_password: str, hashed_password: Optional[str]) -> bool:
    """Verify a password against a bcrypt hash.

    Args:
        plain_password: Plain text password to verify.
        hashed_password: Bcrypt hash string to verify against.

    Returns:
        True if password matches, False otherwise (including malformed hashes).
    """
    if not plain_password or not hashed_password:
        return False
    password_bytes = plain_password.encode("utf-8")[:_BCRYPT_MAX_BYTES]
    try:
        return bcrypt.checkpw(password_bytes, hashed_password.encode("utf-8"))
    except ValueError:
        logger.warning("Stored password hash is malformed")
        return False


_dummy_hash_value: Optional[str] = None


def _dummy_hash() -> str:
    global _dummy_hash_value
    if _dummy_hash_value is None:
        _dummy_hash_value = hash_password(secrets.token_hex(8))
    return _dummy_hash_value


def default_avatar_url(first_name: str, last_name: str) -> str:
    return DEFAULT_AVATAR_URL_TEMPLATE.format(
        first_name=first_name.replace(" ", "+"),
        last_name=last_name.replace(" ", "+"),
    )


class UserManager:
    """Manages user data persistence, authentication and sessions."""

    def __init__(self, db: Session):
        """Initialize UserManager.

        Args:
            db: SQLAlchemy Session.
        """
        self.db = db

    # --- Lookups ---

    def get_user(self, user_id: int) -> Optional[UserModel]:
        return self.db.get(UserModel, user_id)

    def require_user(self, user_id: int) -> UserModel:
        user = self.get_user(user_id)
        if user is None:
            raise EntityNotFoundError("User", user_id)
        return user

    def get_user_by_username(self, username: str) -> Optional[UserModel]:
        """Get a user by username, ignoring case."""
        return (
            self.db.query(UserModel)
            .filter(func.lower(UserModel.username) == username.lower())
            .first()
        )

    def get_user_by_email(self, email: str) -> Optional[UserModel]:
        """Get a user by email address, ignoring case."""
        return (
            self.db.query(UserModel)
            .filter(func.lower(UserModel.email) == email.lower())
            .first()
        )

    def get_users(self, user_ids: Iterable[int]) -> Dict[int, UserModel]:
        """Fetch several users in one query.

        Args:
            user_ids: User IDs to look up; duplicates are fine.

        Returns:
            Mapping of user ID to user for the IDs that exist.
        """
        ids = set(user_ids)
        if not ids:
            return {}
        models = self.db.query(UserModel).filter(UserModel.id.in_(ids)).all()
        return {m.id: m for m in models}

    def list_users(self) -> List[UserModel]:
        return self.db.query(UserModel).order_by(UserModel.id).all()

    def list_users_by_role(self, role: str) -> List[UserModel]:
        if role not in USER_ROLES:
            raise ValueError(f"Invalid role: {role}")
        return (
            self.db.query(UserModel)
            .filter(UserModel.role == role)
            .order_by(UserModel.id)
            .all()
        )

    # --- Registration and profile ---

    def create_user(
        self,
        username: str,
        email: str,
        password: str,
        first_name: str,
        last_name: str,
        role: str = ROLE_STUDENT,
        bio: Optional[str] = None,
        profile_pic_url: Optional[str] = None,
    ) -> UserModel:
        """Create a new user.

        Args:
            username: Username for the new user.
            email: Email address for the new user.
            password: Plain text password.
            first_name: First name.
            last_name: Last name.
            role: User role ('student', 'teacher', or 'admin').
            bio: Optional biography.
            profile_pic_url: Optional avatar URL; a generated avatar is used
                when omitted.

        Returns:
            Created user model.

        Raises:
            UserAlreadyExistsError: If the email or username is taken.
        """
        if role not in USER_ROLES:
            raise ValueError(f"Invalid role: {role}")
        if self.get_user_by_email(email):
            raise UserAlreadyExistsError("Email already in use")
        if self.get_user_by_username(username):
            raise UserAlreadyExistsError("Username already exists")

        model = UserModel(
            username=username,
            email=email,
            password=hash_password(password),
            first_name=first_name,
            last_name=last_name,
            role=role,
            bio=bio,
            profile_pic_url=profile_pic_url or default_avatar_url(first_name, last_name),
            created_at=datetime.now(pytz.utc),
        )

        # Two concurrent registrations can both pass the checks above; the
        # unique constraints catch the loser.
        try:
            self.db.add(model)
            self.db.commit()
            self.db.refresh(model)
        except IntegrityError as e:
            self.db.rollback()
            raise UserAlreadyExistsError("Email or username already exists") from e

        logger.info("Created user: %s (id=%s, role=%s)", username, model.id, role)
        return model

    def update_profile(self, user_id: int, changes: Dict[str, Any]) -> UserModel:
        """Apply a partial profile update.

        Only profile fields are touched; role, password and creation time
        cannot be changed here.
        An explicit None clears ``bio`` or ``profile_pic_url``.

        Raises:
            EntityNotFoundError: If the user does not exist.
            UserAlreadyExistsError: If the new email belongs to another user.
        """
        user = self.require_user(user_id)
        new_email = changes.get("email")
        if new_email and new_email.lower() != user.email.lower():
            existing = self.get_user_by_email(new_email)
            if existing and existing.id != user.id:
                raise UserAlreadyExistsError("Email already in use")

        for field in _PROFILE_FIELDS:
            if field in changes and changes[field] is not None:
                setattr(user, field, changes[field])
        for field in _CLEARABLE_PROFILE_FIELDS:
            if field in changes and changes[field] is None:
                setattr(user, field, None)

        try:
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            raise UserAlreadyExistsError("Email already in use") from e
        self.db.refresh(user)
        logger.info("Updated profile for user %s", user_id)
        return user

    def change_password(self, user_id: int, current_password: str, new_password: str) -> None:
        user = self.require_user(user_id)
        if not verify_password(current_password, user.password):
            raise AuthenticationError("Current password is incorrect")
        user.password = hash_password(new_password)
        self.db.commit()
        logger.info("Password changed for user %s", user_id)

    # --- Authentication ---

    def authenticate(self, identifier: str, password: str) -> UserModel:
        """Check a username-or-email and password pair.

        Identifiers containing "@" are looked up by email, anything else by
        case-insensitive username. Unknown accounts and wrong passwords fail
        with the same error.

        Raises:
            AuthenticationError: If the credentials do not match a user.
        """
        if "@" in identifier:
            user = self.get_user_by_email(identifier)
        else:
            user = self.get_user_by_username(identifier)

        if user is None:
            # Spend the same hashing time as a real check
            verify_password(password, _dummy_hash())
            logger.warning("Rejected login attempt")
            raise AuthenticationError(INVALID_CREDENTIALS)
        if not verify_password(password, user.password):
            logger.warning("Rejected login attempt")
            raise AuthenticationError(INVALID_CREDENTIALS)
        return user

    # --- Sessions ---

    def create_session(self, user_id: int) -> str:
        """Open a server-side session and return its signed token.

        Args:
            user_id: ID of the authenticated user.

        Returns:
            Encoded JWT whose ``jti`` names the session row.
        """
        now = datetime.now(pytz.utc)
        expires_at = now + timedelta(minutes=SESSION_EXPIRE_MINUTES)
        session_model = UserSessionModel(
            session_id=secrets.token_urlsafe(24),
            user_id=user_id,
            created_at=now,
            expires_at=expires_at,
        )
        self.db.add(session_model)
        self.db.commit()

        payload = {
            "sub": str(user_id),
            "jti": session_model.session_id,
            "exp": expires_at,
        }
        return jwt.encode(payload, JWT_SECRET_KEY, algorithm=JWT_ALGORITHM)

    def _decode_token(self, token: str) -> Dict[str, Any]:
        try:
            payload = jwt.decode(token, JWT_SECRET_KEY, algorithms=[JWT_ALGORITHM])
        except JWTError as e:
            raise AuthenticationError("Invalid authentication credentials") from e
        if not payload.get("sub") or not payload.get("jti"):
            raise AuthenticationError("Invalid authentication credentials")
        return payload

    def resolve_session(self, token: str) -> UserModel:
        """Resolve a session token back to the full user record.

        Raises:
            AuthenticationError: If the token is invalid, the session was
                revoked or expired, or the user no longer exists.
        """
        payload = self._decode_token(token)
        session_model = self.db.get(UserSessionModel, payload["jti"])
        if session_model is None:
            raise AuthenticationError("Session has ended")

        expires_at = session_model.expires_at
        if expires_at.tzinfo is None:
            expires_at = pytz.utc.localize(expires_at)
        if datetime.now(pytz.utc) > expires_at:
            raise AuthenticationError("Session has expired")

        user = self.get_user(session_model.user_id)
        if user is None or str(user.id) != payload["sub"]:
            raise AuthenticationError("User not found")
        return user

    def revoke_session(self, token: str) -> None:
        """End a session. Unknown or malformed tokens are ignored."""
        try:
            payload = self._decode_token(token)
        except AuthenticationError:
            return
        deleted = (
            self.db.query(UserSessionModel)
            .filter(UserSessionModel.session_id == payload["jti"])
            .delete()
        )
        self.db.commit()
        if deleted:
            logger.info("Ended session for user %s", payload["sub"])

    # --- Bootstrap ---

    def ensure_default_users(self) -> List[str]:
        """Create the baseline admin, teacher and student accounts.

        Accounts are matched by username, so running this repeatedly is safe.

        Returns:
            Usernames that were created by this call.
        """
        created = []
        for defaults in DEFAULT_USERS:
            if self.get_user_by_username(defaults["username"]):
                logger.debug("Default user %s already exists", defaults["username"])
                continue
            try:
                self.create_user(**defaults)
            except UserAlreadyExistsError:
                logger.warning(
                    "Default user %s conflicts with an existing account, skipping",
                    defaults["username"],
                )
                continue
            created.append(defaults["username"])
        if created:
            logger.info("Created default users: %s", ", ".join(created))
        return created

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt
from werkzeug.security import check_password_hash, generate_password_hash

from ..common.validators import require_min_length, require_non_empty
from ..core.constants import DEFAULT_JWT_EXPIRES_DAYS
from ..core.exceptions import AuthenticationError, NotFoundError, ValidationError
from ..staff.lookup import as_id
from .model import User
from .repository import UserRepository

logger = logging.getLogger(__name__)

JWT_ALGORITHM = "HS256"
MIN_PASSWORD_LENGTH = 6


@dataclass(frozen=True)
class LoginResult:
    user: User
    token: str


class UserService:
    """Use cases: register and manage accounts."""

    def __init__(self, users: UserRepository):
        self._users = users

    def register(self, *, name: str, username: str, password: str, email: Optional[str] = None) -> User:
        name = require_non_empty(name, "Name")
        username = require_non_empty(username, "Username")
        require_min_length(password, "Password", MIN_PASSWORD_LENGTH)
        email = (email or "").strip().lower() or None

        if self._users.get_by_username(username):
            raise ValidationError("Username already exists")
        if email and self._users.get_by_email(email):
            raise ValidationError("Email already registered")

        user_id = self._users.create_user(
            name=name,
            username=username,
            email=email,
            password_hash=generate_password_hash(password),
        )
        logger.info("User registered: id=%s username=%s", user_id, username)
        return self._users.get_by_id(user_id)

    def list_users(self) -> list[User]:
        return list(self._users.list_all())

    def get(self, *, user_id) -> User:
        user = self._users.get_by_id(as_id(user_id, "User ID"))
        if not user:
            raise NotFoundError("User not found")
        return user

    def update(
        self,
        *,
        user_id,
        name: Optional[str] = None,
        username: Optional[str] = None,
        email: Optional[str] = None,
        password: Optional[str] = None,
    ) -> User:
        """Patch profile fields; a new password is re-hashed."""
        current = self.get(user_id=user_id)

        new_name = require_non_empty(name, "Name") if name is not None else current.name
        new_username = require_non_empty(username, "Username") if username is not None else current.username
        if email is not None and not isinstance(email, str):
            raise ValidationError("Email must be a string")
        new_email = (email.strip().lower() or None) if email is not None else current.email

        if new_username != current.username and self._users.get_by_username(new_username):
            raise ValidationError("Username already exists")
        if new_email and new_email != current.email and self._users.get_by_email(new_email):
            raise ValidationError("Email already registered")

        password_hash = current.password_hash
        if password is not None:
            require_min_length(password, "Password", MIN_PASSWORD_LENGTH)
            password_hash = generate_password_hash(password)

        self._users.update_user(
            user_id=current.user_id,
            name=new_name,
            username=new_username,
            email=new_email,
            password_hash=password_hash,
        )
        return self._users.get_by_id(current.user_id)

    def delete(self, *, user_id) -> None:
        uid = as_id(user_id, "User ID")
        if not self._users.delete(uid):
            raise NotFoundError("User not found")
        logger.info("User deleted: id=%s", uid)


class AuthService:
    """Use case: password login and bearer tokens."""

    def __init__(self, users: UserRepository, *, secret: str, expires_days: int = DEFAULT_JWT_EXPIRES_DAYS):
        if not secret:
            raise ValueError("A JWT secret is required")
        self._users = users
        self._secret = secret
        self._expires_days = int(expires_days)

    def issue_token(self, user: User, *, now: Optional[datetime] = None) -> str:
        issued = now or datetime.now(timezone.utc)
        payload = {
            "sub": str(user.user_id),
            "iat": issued,
            "exp": issued + timedelta(days=self._expires_days),
        }
        return jwt.encode(payload, self._secret, algorithm=JWT_ALGORITHM)

    def login(self, username: str, password: str, *, now: Optional[datetime] = None) -> LoginResult:
        """Accepts a username or an email address."""
        if not username or not password:
            raise ValidationError("Please provide username and password")

        ident = username.strip()
        user = self._users.get_by_username(ident)
        if not user and "@" in ident:
            user = self._users.get_by_email(ident.lower())
        if not user or not user.is_active:
            raise AuthenticationError("Invalid credentials")

        try:
            ok = check_password_hash(user.password_hash, password)
        except ValueError:
            # Unknown hash method (e.g. a placeholder written by hand).
            ok = False
        if not ok:
            logger.info("Failed login for %s", ident)
            raise AuthenticationError("Invalid credentials")

        return LoginResult(user=user, token=self.issue_token(user, now=now))

    def verify_token(self, token: str) -> User:
        if not token:
            raise AuthenticationError("Not authorized, no token")
        try:
            payload = jwt.decode(token, self._secret, algorithms=[JWT_ALGORITHM])
        except jwt.ExpiredSignatureError:
            raise AuthenticationError("Token expired")
        except jwt.InvalidTokenError:
            raise AuthenticationError("Not authorized, token failed")

        try:
            user_id = int(payload.get("sub"))
        except (TypeError, ValueError):
            raise AuthenticationError("Not authorized, token failed")

        user = self._users.get_by_id(user_id)
        if not user or not user.is_active:
            raise AuthenticationError("User not found")
        return user

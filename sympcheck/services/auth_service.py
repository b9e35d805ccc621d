"""
Authentication service for user management.
"""
from datetime import timedelta
from typing import Optional

from sqlalchemy.orm import Session

from sympcheck.core.config import Settings
from sympcheck.core.exceptions import AuthenticationError, ConflictError
from sympcheck.core.logging import security_logger
from sympcheck.core.security import create_access_token, get_password_hash, verify_password
from sympcheck.models.user import User
from sympcheck.schemas.auth import Token


class AuthService:
    """Service for registration, login and profile management."""

    def __init__(self, db: Session, settings: Settings):
        self.db = db
        self.settings = settings

    def get_user_by_id(self, user_id: int) -> Optional[User]:
        """Get user by ID."""
        return self.db.query(User).filter(User.id == user_id).first()

    def get_user_by_email(self, email: str) -> Optional[User]:
        """Get user by email."""
        return self.db.query(User).filter(User.email == email.lower()).first()

    def register(self, email: str, password: str, name: Optional[str] = None,
                 age: Optional[int] = None) -> User:
        """Create a new user.

        Raises:
            ConflictError: the email is already registered.
        """
        if self.get_user_by_email(email):
            raise ConflictError("User with this email already exists")

        user = User(
            email=email.lower(),
            hashed_password=get_password_hash(password),
            name=name,
            age=age,
        )

        self.db.add(user)
        self.db.commit()
        self.db.refresh(user)

        security_logger.log_user_auth(user.id, "register")
        return user

    def authenticate(self, email: str, password: str) -> User:
        """Authenticate user with email and password.

        Raises:
            AuthenticationError: unknown email, wrong password or inactive account.
        """
        user = self.get_user_by_email(email)
        if not user or not verify_password(password, user.hashed_password) or not user.is_active:
            security_logger.log_login_attempt(email, success=False)
            raise AuthenticationError("Invalid email or password")

        security_logger.log_login_attempt(email, success=True)
        return user

    def update_profile(self, user: User, name: Optional[str] = None,
                       age: Optional[int] = None) -> User:
        """Update the mutable profile fields that were supplied."""
        if name is not None:
            user.name = name
        if age is not None:
            user.age = age

        self.db.commit()
        self.db.refresh(user)

        security_logger.log_user_auth(user.id, "profile_update")
        return user

    def issue_token(self, user: User) -> Token:
        """Issue a bearer token for the user."""
        expires_minutes = self.settings.ACCESS_TOKEN_EXPIRE_MINUTES
        access_token = create_access_token(
            data={"sub": str(user.id), "email": user.email},
            settings=self.settings,
            expires_delta=timedelta(minutes=expires_minutes),
        )
        return Token(access_token=access_token, expires_in=expires_minutes * 60)

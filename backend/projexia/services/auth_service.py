"""
Auth Service - local email/password accounts and Google sign-in

Both paths end in the same public projection of the user
(id, name, email, avatarUrl, role); the password hash never leaves here.
"""

from typing import Optional, Dict, Any
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError

from projexia.models.user import User, UserRole
from projexia.schemas.auth import SignupRequest, LoginRequest, GoogleProfile
from projexia.core.exceptions import (
    ValidationError,
    AuthError,
    ConflictError,
    UserNotFoundError,
)
from projexia.core.security import verify_password, get_password_hash, default_avatar_url, normalize_email
from projexia.core.types import generate_uuid, utcnow
from projexia.core.logging_config import logger


# Fixed profile signed in when BYPASS_AUTH is on
TEST_PROFILE = GoogleProfile(
    google_id="1234567890",
    email="test@example.com",
    full_name="Test User",
    avatar_url="https://via.placeholder.com/150",
)


def public_user(user: User) -> Dict[str, Any]:
    """Public projection of a user"""
    return {
        "id": str(user.id),
        "name": user.name,
        "email": user.email,
        "avatar_url": user.avatar_url,
        "role": user.role,
    }


class AuthService:
    """Credential checks and account lookup"""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_user_by_email(self, email: str) -> Optional[User]:
        result = await self.db.execute(select(User).where(User.email == normalize_email(email)))
        return result.scalar_one_or_none()

    async def get_user(self, user_id: str) -> Optional[User]:
        result = await self.db.execute(select(User).where(User.id == str(user_id)))
        return result.scalar_one_or_none()

    async def signup(self, data: SignupRequest) -> Dict[str, Any]:
        if not (data.name and data.email and data.password):
            raise ValidationError("All fields are required")

        email = normalize_email(str(data.email))
        if await self.get_user_by_email(email):
            logger.log_auth_event("signup", success=False, user_email=email, reason="email exists")
            raise ConflictError("User with this email already exists")

        now = utcnow()
        user = User(
            id=generate_uuid(),
            name=data.name,
            email=email,
            hashed_password=get_password_hash(data.password),
            avatar_url=default_avatar_url(email),
            role=UserRole.USER,
            created_at=now,
            updated_at=now,
        )
        self.db.add(user)
        try:
            await self.db.commit()
        except IntegrityError:
            # Lost a race with a concurrent signup for the same address
            await self.db.rollback()
            raise ConflictError("User with this email already exists")

        logger.log_auth_event("signup", success=True, user_email=email, user_id=user.id)
        return public_user(user)

    async def login(self, data: LoginRequest) -> Dict[str, Any]:
        if not (data.email and data.password):
            raise ValidationError("Email and password are required")

        user = await self.get_user_by_email(data.email)
        if not user or not user.hashed_password:
            logger.log_auth_event("login", success=False, user_email=data.email, reason="unknown or oauth-only account")
            raise AuthError()

        if not verify_password(data.password, user.hashed_password):
            logger.log_auth_event("login", success=False, user_email=data.email, reason="password mismatch")
            raise AuthError()

        logger.log_auth_event("login", success=True, user_email=user.email, user_id=user.id)
        return public_user(user)

    async def update_avatar(self, user_id: Optional[str], avatar_url: Optional[str]) -> str:
        if not user_id or not avatar_url:
            raise ValidationError("userId and avatarUrl are required")

        user = await self.get_user(user_id)
        if not user:
            raise UserNotFoundError(user_id)

        user.avatar_url = avatar_url
        user.updated_at = utcnow()
        await self.db.commit()
        logger.info(f"[Auth] Avatar updated for user {user.id}")
        return avatar_url

    async def oauth_login(self, profile: GoogleProfile) -> User:
        """
        Find the user for a Google profile, creating one on first sight.

        An existing local account with the same e-mail gets the Google id
        attached instead of a second account being created.
        """
        result = await self.db.execute(select(User).where(User.google_id == profile.google_id))
        user = result.scalar_one_or_none()

        if user:
            logger.log_auth_event("google_login", success=True, user_email=user.email, user_id=user.id)
            return user

        user = await self.get_user_by_email(profile.email)
        if user:
            user.google_id = profile.google_id
            if not user.avatar_url and profile.avatar_url:
                user.avatar_url = profile.avatar_url
            user.updated_at = utcnow()
            await self.db.commit()
            logger.log_auth_event("google_link", success=True, user_email=user.email, user_id=user.id)
            return user

        email = normalize_email(profile.email)
        now = utcnow()
        user = User(
            id=generate_uuid(),
            google_id=profile.google_id,
            name=profile.full_name or email.split("@")[0],
            email=email,
            hashed_password=None,
            avatar_url=profile.avatar_url or default_avatar_url(email),
            role=UserRole.USER,
            created_at=now,
            updated_at=now,
        )
        self.db.add(user)
        await self.db.commit()

        logger.log_auth_event("google_signup", success=True, user_email=user.email, user_id=user.id)
        return user

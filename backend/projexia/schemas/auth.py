"""Pydantic schemas for authentication"""
from pydantic import EmailStr
from typing import Optional

from projexia.models.user import UserRole
from projexia.schemas.common import CamelModel


class SignupRequest(CamelModel):
    """Local account registration. Presence is checked by the service."""
    name: Optional[str] = None
    email: Optional[EmailStr] = None
    password: Optional[str] = None


class LoginRequest(CamelModel):
    email: Optional[str] = None
    password: Optional[str] = None


class AvatarUpdateRequest(CamelModel):
    user_id: Optional[str] = None
    avatar_url: Optional[str] = None


class UserResponse(CamelModel):
    """Public projection of a user - never includes the password hash"""
    id: str
    name: str
    email: str
    avatar_url: Optional[str] = None
    role: UserRole = UserRole.USER


class AvatarUpdateResponse(CamelModel):
    message: str
    avatar_url: str


class GoogleProfile(CamelModel):
    """User data returned by the OAuth provider"""
    google_id: str
    email: str
    full_name: Optional[str] = None
    avatar_url: Optional[str] = None

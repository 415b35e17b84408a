from sqlalchemy import Column, String, DateTime, Enum as SQLEnum, Text
import enum

from projexia.core.database import Base
from projexia.core.types import GUID, generate_uuid, utcnow


class UserRole(str, enum.Enum):
    """User roles"""
    USER = "user"
    ADMIN = "admin"


class User(Base):
    """User model"""
    __tablename__ = "users"

    id = Column(GUID, primary_key=True, default=generate_uuid)
    name = Column(String(255), nullable=False)
    email = Column(String(255), unique=True, index=True, nullable=False)
    # Null for accounts that only ever signed in through Google
    hashed_password = Column(String(255), nullable=True)
    avatar_url = Column(Text, nullable=True)

    role = Column(
        SQLEnum(UserRole, values_callable=lambda e: [m.value for m in e], native_enum=False),
        default=UserRole.USER,
        nullable=False,
    )

    # OAuth fields
    google_id = Column(String(255), unique=True, nullable=True)

    # Timestamps
    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    def __repr__(self):
        return f"<User {self.email}>"

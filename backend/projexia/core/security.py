from urllib.parse import quote
import bcrypt

from projexia.core.config import settings


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify password"""
    # Bcrypt has a 72 byte limit - truncate password if necessary
    password_bytes = plain_password.encode('utf-8')[:72]
    return bcrypt.checkpw(password_bytes, hashed_password.encode('utf-8'))


def get_password_hash(password: str) -> str:
    """Hash password with configurable rounds (BCRYPT_ROUNDS in .env)"""
    password_bytes = password.encode('utf-8')[:72]
    hashed = bcrypt.hashpw(password_bytes, bcrypt.gensalt(rounds=settings.BCRYPT_ROUNDS))
    return hashed.decode('utf-8')


def default_avatar_url(seed: str) -> str:
    """Deterministic placeholder avatar seeded by e-mail address"""
    return f"{settings.AVATAR_BASE_URL}?seed={quote(seed, safe='')}"


def normalize_email(email: str) -> str:
    """Canonical form used for storing and matching addresses (trimmed, lower-case)"""
    return email.strip().lower()

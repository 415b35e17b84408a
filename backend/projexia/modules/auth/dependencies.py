from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Optional

from projexia.core.database import get_db
from projexia.core.logging_config import set_user_id
from projexia.models.user import User
from projexia.services.auth_service import AuthService

SESSION_USER_KEY = "user_id"
SESSION_STATE_KEY = "oauth_state"


def login_session(request: Request, user: User) -> None:
    """Remember the user in the signed session cookie"""
    request.session.pop(SESSION_STATE_KEY, None)
    request.session[SESSION_USER_KEY] = str(user.id)


def logout_session(request: Request) -> None:
    request.session.clear()


async def get_session_user(
    request: Request,
    db: AsyncSession = Depends(get_db)
) -> Optional[User]:
    """User stored in the session cookie, or None when nobody is signed in"""
    user_id = request.session.get(SESSION_USER_KEY)
    if not user_id:
        return None

    user = await AuthService(db).get_user(user_id)
    if not user:
        # Stale cookie for a user that no longer exists
        request.session.pop(SESSION_USER_KEY, None)
        return None

    set_user_id(str(user.id))
    return user

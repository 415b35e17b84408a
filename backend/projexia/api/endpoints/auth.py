"""
Authentication endpoints

Local signup/login are stateless: identity comes back in the JSON body and
the client keeps it. Google sign-in goes through the redirect flow and
leaves the user id in the signed session cookie instead.
"""

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import RedirectResponse
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Optional
import secrets

from projexia.core.config import settings
from projexia.core.database import get_db
from projexia.core.exceptions import ProjexiaError
from projexia.core.logging_config import logger
from projexia.models.user import User
from projexia.modules.auth.dependencies import (
    SESSION_STATE_KEY,
    get_session_user,
    login_session,
    logout_session,
)
from projexia.modules.oauth.google_provider import google_oauth
from projexia.schemas.auth import (
    SignupRequest,
    LoginRequest,
    AvatarUpdateRequest,
    UserResponse,
    AvatarUpdateResponse,
)
from projexia.schemas.common import MessageResponse
from projexia.services.auth_service import AuthService, TEST_PROFILE, public_user


router = APIRouter(prefix="/auth", tags=["Authentication"])


@router.post("/signup", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def signup(data: SignupRequest, db: AsyncSession = Depends(get_db)):
    """Register a local account"""
    return await AuthService(db).signup(data)


@router.post("/login", response_model=UserResponse)
async def login(data: LoginRequest, db: AsyncSession = Depends(get_db)):
    """Check e-mail and password; wrong e-mail and wrong password look the same"""
    return await AuthService(db).login(data)


@router.put("/me/avatar", response_model=AvatarUpdateResponse)
async def update_avatar(data: AvatarUpdateRequest, db: AsyncSession = Depends(get_db)):
    avatar_url = await AuthService(db).update_avatar(data.user_id, data.avatar_url)
    return AvatarUpdateResponse(message="Avatar updated", avatar_url=avatar_url)


# ============================================
# OAuth Endpoints - Google
# ============================================

@router.get("/google")
async def google_login(request: Request):
    """Start the Google flow by redirecting the browser to the consent screen"""
    if settings.BYPASS_AUTH:
        logger.warning("[Auth] BYPASS_AUTH is on - skipping Google")
        return RedirectResponse(
            url=f"{request.url_for('google_callback')}?bypass=true",
            status_code=status.HTTP_302_FOUND,
        )

    if not google_oauth.configured:
        raise ProjexiaError(
            "Google OAuth is not configured",
            code="OAUTH_NOT_CONFIGURED",
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        )

    state = secrets.token_urlsafe(32)
    request.session[SESSION_STATE_KEY] = state
    return RedirectResponse(
        url=google_oauth.get_authorization_url(state=state),
        status_code=status.HTTP_302_FOUND,
    )


@router.get("/google/callback", name="google_callback")
async def google_callback(
    request: Request,
    code: Optional[str] = None,
    state: Optional[str] = None,
    bypass: Optional[str] = None,
    db: AsyncSession = Depends(get_db)
):
    """Finish the Google flow, sign the user into the session and go back to the app"""
    failure_url = f"{settings.FRONTEND_URL}?error=oauth_failed"
    service = AuthService(db)

    if settings.BYPASS_AUTH and bypass == "true":
        user = await service.oauth_login(TEST_PROFILE)
        login_session(request, user)
        return RedirectResponse(url=settings.FRONTEND_URL, status_code=status.HTTP_302_FOUND)

    expected_state = request.session.get(SESSION_STATE_KEY)
    if not code or not expected_state or state != expected_state:
        logger.log_auth_event("google_oauth", success=False, reason="missing code or state mismatch")
        return RedirectResponse(url=failure_url, status_code=status.HTTP_302_FOUND)

    profile = await google_oauth.authenticate(code)
    if not profile:
        logger.log_auth_event("google_oauth", success=False, reason="provider authentication failed")
        return RedirectResponse(url=failure_url, status_code=status.HTTP_302_FOUND)

    user = await service.oauth_login(profile)
    login_session(request, user)
    return RedirectResponse(url=settings.FRONTEND_URL, status_code=status.HTTP_302_FOUND)


@router.get("/current-user", response_model=Optional[UserResponse])
async def current_user(user: Optional[User] = Depends(get_session_user)):
    """Session user, the test profile under BYPASS_AUTH, or null"""
    if user:
        return public_user(user)
    if settings.BYPASS_AUTH:
        return UserResponse(
            id=TEST_PROFILE.google_id,
            name=TEST_PROFILE.full_name,
            email=TEST_PROFILE.email,
            avatar_url=TEST_PROFILE.avatar_url,
        )
    return None


@router.get("/logout", response_model=MessageResponse)
async def logout(request: Request):
    logout_session(request)
    return MessageResponse(message="Logged out")

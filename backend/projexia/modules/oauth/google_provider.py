"""Google OAuth provider for authentication."""

import httpx
from urllib.parse import urlencode
from typing import Optional, Dict, Any

from projexia.core.config import settings
from projexia.core.logging_config import logger
from projexia.schemas.auth import GoogleProfile


class GoogleOAuthProvider:
    """Handle the Google authorization-code flow."""

    GOOGLE_AUTH_URL = "https://accounts.google.com/o/oauth2/v2/auth"
    GOOGLE_TOKEN_URL = "https://oauth2.googleapis.com/token"
    GOOGLE_USERINFO_URL = "https://www.googleapis.com/oauth2/v3/userinfo"

    def __init__(self, client_id: str, client_secret: str, redirect_uri: str,
                 transport: Optional[httpx.AsyncBaseTransport] = None):
        self.client_id = client_id
        self.client_secret = client_secret
        self.redirect_uri = redirect_uri
        # Lets tests answer Google's endpoints without the network
        self.transport = transport

    @property
    def configured(self) -> bool:
        return bool(self.client_id and self.client_secret)

    def get_authorization_url(self, state: Optional[str] = None) -> str:
        """Generate Google OAuth authorization URL."""
        params = {
            "client_id": self.client_id,
            "redirect_uri": self.redirect_uri,
            "response_type": "code",
            "scope": "openid email profile",
            "access_type": "online",
            "prompt": "select_account",
        }
        if state:
            params["state"] = state

        return f"{self.GOOGLE_AUTH_URL}?{urlencode(params)}"

    async def exchange_code_for_tokens(self, code: str) -> Dict[str, Any]:
        """Exchange authorization code for access tokens."""
        async with httpx.AsyncClient(transport=self.transport) as client:
            response = await client.post(
                self.GOOGLE_TOKEN_URL,
                data={
                    "client_id": self.client_id,
                    "client_secret": self.client_secret,
                    "code": code,
                    "grant_type": "authorization_code",
                    "redirect_uri": self.redirect_uri,
                },
            )
            response.raise_for_status()
            return response.json()

    async def get_user_info(self, access_token: str) -> Dict[str, Any]:
        """Get user information from Google."""
        async with httpx.AsyncClient(transport=self.transport) as client:
            response = await client.get(
                self.GOOGLE_USERINFO_URL,
                headers={"Authorization": f"Bearer {access_token}"},
            )
            response.raise_for_status()
            return response.json()

    async def authenticate(self, code: str) -> Optional[GoogleProfile]:
        """
        Complete OAuth flow: exchange code and get user info.

        Returns the profile if successful, None otherwise.
        """
        try:
            tokens = await self.exchange_code_for_tokens(code)
            access_token = tokens.get("access_token")

            if not access_token:
                logger.error("[GoogleOAuth] No access token received from token exchange")
                return None

            user_info = await self.get_user_info(access_token)
            if not user_info.get("sub") or not user_info.get("email"):
                logger.error("[GoogleOAuth] Profile is missing id or e-mail")
                return None

            return GoogleProfile(
                google_id=user_info["sub"],
                email=user_info["email"],
                full_name=user_info.get("name", ""),
                avatar_url=user_info.get("picture", ""),
            )
        except httpx.HTTPStatusError as e:
            logger.error(f"[GoogleOAuth] HTTP error during authentication: {e.response.status_code} - {e.response.text}")
            return None
        except httpx.RequestError as e:
            logger.error(f"[GoogleOAuth] Request error during authentication: {e}")
            return None


# Singleton instance
google_oauth = GoogleOAuthProvider(
    client_id=settings.GOOGLE_CLIENT_ID,
    client_secret=settings.GOOGLE_CLIENT_SECRET,
    redirect_uri=settings.GOOGLE_REDIRECT_URI,
)

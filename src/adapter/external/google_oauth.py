"""Google OAuth 2.0 adapter.

Builds the consent-screen URL and exchanges an authorization code for the
user's Google identity (stable subject id, email, name, picture).

Endpoints: https://developers.google.com/identity/protocols/oauth2/web-server
"""

import logging
from dataclasses import dataclass
from urllib.parse import urlencode

import httpx
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from domain.model.credentials import OAuthIdentity
from domain.model.errors import OAuthExchangeError

logger = logging.getLogger(__name__)

GOOGLE_AUTH_URL = "https://accounts.google.com/o/oauth2/v2/auth"
GOOGLE_TOKEN_URL = "https://oauth2.googleapis.com/token"
GOOGLE_USERINFO_URL = "https://openidconnect.googleapis.com/v1/userinfo"
GOOGLE_SCOPES = ("openid", "email", "profile")
API_TIMEOUT_SECONDS = 10.0


@dataclass(frozen=True)
class GoogleOAuthConfig:
    """Credentials and redirect targets for the Google provider."""
    client_id: str | None
    client_secret: str | None
    callback_url: str
    frontend_url: str

    @property
    def is_configured(self) -> bool:
        """True when both client credentials are set. No network access."""
        return bool(self.client_id and self.client_secret)


class GoogleOAuthAdapter:
    """Performs the authorization-code exchange against Google."""

    def __init__(self, config: GoogleOAuthConfig):
        self.config = config

    def build_authorization_url(self, state: str) -> str:
        params = {
            "client_id": self.config.client_id,
            "redirect_uri": self.config.callback_url,
            "response_type": "code",
            "scope": " ".join(GOOGLE_SCOPES),
            "state": state,
            "prompt": "select_account",
        }
        return f"{GOOGLE_AUTH_URL}?{urlencode(params)}"

    async def exchange_code(self, code: str) -> OAuthIdentity:
        """Exchange an authorization code for the user's identity.

        Raises:
            OAuthExchangeError: provider rejected the code, returned an
                unusable profile, or could not be reached
        """
        if not self.config.is_configured:
            raise OAuthExchangeError("Google OAuth is not configured")

        try:
            async with httpx.AsyncClient(timeout=API_TIMEOUT_SECONDS) as client:
                token_response = await _post_with_retry(
                    client,
                    GOOGLE_TOKEN_URL,
                    {
                        "client_id": self.config.client_id,
                        "client_secret": self.config.client_secret,
                        "code": code,
                        "grant_type": "authorization_code",
                        "redirect_uri": self.config.callback_url,
                    },
                )
                token_response.raise_for_status()
                access_token = token_response.json().get("access_token")
                if not access_token:
                    raise OAuthExchangeError("Token response has no access_token")

                profile_response = await _get_with_retry(
                    client,
                    GOOGLE_USERINFO_URL,
                    {"Authorization": f"Bearer {access_token}"},
                )
                profile_response.raise_for_status()
                profile = profile_response.json()
        except httpx.HTTPStatusError as e:
            logger.warning(
                "Google OAuth HTTP error",
                extra={"statusCode": e.response.status_code, "url": str(e.request.url)},
            )
            raise OAuthExchangeError("Google rejected the authorization code") from e
        except httpx.RequestError as e:
            logger.warning("Google OAuth request error", extra={"errorType": type(e).__name__})
            raise OAuthExchangeError("Google OAuth is unreachable") from e

        return _to_identity(profile)


def _to_identity(profile: dict) -> OAuthIdentity:
    external_id = profile.get("sub")
    email = profile.get("email")
    if not external_id or not email:
        raise OAuthExchangeError("Google profile is missing id or email")
    if profile.get("email_verified") is False:
        raise OAuthExchangeError("Google email address is not verified")
    return OAuthIdentity(
        external_id=str(external_id),
        email=email,
        name=profile.get("name") or "",
        avatar=profile.get("picture") or "",
    )


# ── HTTP helpers ─────────────────────────────────────────────


# Authorization codes are single use: only retry when the request never left
@retry(
    retry=retry_if_exception_type(httpx.ConnectError),
    stop=stop_after_attempt(3),
    wait=wait_exponential(multiplier=1, min=1, max=4),
    reraise=True,
)
async def _post_with_retry(client: httpx.AsyncClient, url: str, data: dict) -> httpx.Response:
    return await client.post(url, data=data)


@retry(
    retry=retry_if_exception_type((httpx.TimeoutException, httpx.ConnectError)),
    stop=stop_after_attempt(3),
    wait=wait_exponential(multiplier=1, min=1, max=4),
    reraise=True,
)
async def _get_with_retry(client: httpx.AsyncClient, url: str, headers: dict) -> httpx.Response:
    return await client.get(url, headers=headers)

"""Authentication routes.

- POST /auth/register, POST /auth/login: local provider
- GET /auth/google, GET /auth/google/callback: Google OAuth round trip
- GET /auth/google/status: whether Google OAuth is configured
- GET /auth/me: user behind the bearer token

Flow (OAuth):
    Client → GET /auth/google → 302 Google consent (signed state)
    Google → GET /auth/google/callback?code&state → exchange → resolve user
           → 302 {FRONTEND_URL}/auth/callback?token=<jwt>
"""

import logging
from typing import Optional
from urllib.parse import urlencode

from fastapi import APIRouter, Depends, HTTPException, Query, status
from fastapi.responses import RedirectResponse

from adapter.external.google_oauth import GoogleOAuthAdapter
from api.dependencies import (
    get_google_oauth,
    get_settings,
    get_token_service,
    get_user_repo,
    get_user_repo_or_none,
)
from api.models import AuthResponse, GoogleStatusResponse, LoginRequest, RegisterRequest, UserResponse
from api.security import get_current_identity
from api.config import Settings
from domain.model.credentials import LocalCredentials
from domain.model.errors import (
    AccountConflictError,
    DomainError,
    DuplicateError,
    InvalidCredentialsError,
    OAuthExchangeError,
    UpstreamUnavailableError,
)
from domain.model.token import TokenClaims
from domain.model.user import BusinessProfile, UserRole
from port.user_repository import UserRepository
from services import auth_service
from services.token_service import TokenService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


def _unavailable() -> HTTPException:
    return HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail="Database unavailable")


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
async def register(
    request: RegisterRequest,
    repo: UserRepository = Depends(get_user_repo),
    tokens: TokenService = Depends(get_token_service),
):
    """Register a new local user and return a token.

    Raises:
        HTTPException: 400 if the email is already registered
    """
    role = UserRole(request.role)
    business = None
    if role == UserRole.BUSINESS:
        business = BusinessProfile(
            business_name=request.business_name,
            business_email=request.business_email,
            business_phone=request.business_phone,
        )

    try:
        user = auth_service.register_user(
            repo,
            email=request.email,
            password=request.password,
            name=request.name,
            role=role,
            business=business,
        )
    except DuplicateError:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Email already registered")
    except UpstreamUnavailableError:
        raise _unavailable()
    except DomainError as e:
        logger.error("Registration failed", extra={"error": str(e)})
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Registration failed")

    return AuthResponse(
        message="Registration successful",
        token=tokens.issue(user),
        user=UserResponse.from_domain(user),
    )


@router.post("/login", response_model=AuthResponse)
async def login(
    request: LoginRequest,
    repo: UserRepository = Depends(get_user_repo),
    tokens: TokenService = Depends(get_token_service),
):
    """Login with email and password.

    Raises:
        HTTPException: 401 with the same body for unknown email and wrong password
    """
    try:
        user = auth_service.resolve_identity(repo, LocalCredentials(request.email, request.password))
    except InvalidCredentialsError:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid credentials")
    except UpstreamUnavailableError:
        raise _unavailable()

    logger.info("User logged in", extra={"userId": user.id})
    return AuthResponse(
        message="Login successful",
        token=tokens.issue(user),
        user=UserResponse.from_domain(user),
    )


@router.get("/google")
async def google_login(
    google: GoogleOAuthAdapter = Depends(get_google_oauth),
    tokens: TokenService = Depends(get_token_service),
):
    """Redirect to Google's consent screen."""
    if not google.config.is_configured:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail="Google OAuth is not configured")
    return RedirectResponse(
        google.build_authorization_url(state=tokens.issue_state()),
        status_code=status.HTTP_302_FOUND,
    )


@router.get("/google/callback")
async def google_callback(
    code: Optional[str] = Query(None),
    state: Optional[str] = Query(None),
    error: Optional[str] = Query(None),
    google: GoogleOAuthAdapter = Depends(get_google_oauth),
    tokens: TokenService = Depends(get_token_service),
    repo: Optional[UserRepository] = Depends(get_user_repo_or_none),
):
    """Complete the OAuth exchange and hand the token to the frontend."""
    frontend_url = google.config.frontend_url

    def fail(reason: str) -> RedirectResponse:
        return RedirectResponse(
            f"{frontend_url}/login?{urlencode({'error': reason})}",
            status_code=status.HTTP_302_FOUND,
        )

    if error or not code:
        logger.warning("OAuth callback without code", extra={"providerError": error})
        return fail("oauth")
    if not tokens.verify_state(state):
        logger.warning("OAuth callback with invalid state")
        return fail("oauth")
    if repo is None:
        logger.error("OAuth callback while database unavailable")
        return fail("oauth")

    try:
        identity = await google.exchange_code(code)
        user = auth_service.resolve_identity(repo, identity)
    except AccountConflictError:
        return fail("oauth_conflict")
    except (OAuthExchangeError, UpstreamUnavailableError, DomainError) as e:
        logger.warning("OAuth login failed", extra={"error": str(e), "errorType": type(e).__name__})
        return fail("oauth")

    logger.info("User logged in via Google", extra={"userId": user.id})
    return RedirectResponse(
        f"{frontend_url}/auth/callback?{urlencode({'token': tokens.issue(user)})}",
        status_code=status.HTTP_302_FOUND,
    )


@router.get("/google/status", response_model=GoogleStatusResponse)
async def google_status(settings: Settings = Depends(get_settings)):
    """Whether Google OAuth credentials are configured. Makes no network call."""
    return GoogleStatusResponse(google_auth_available=settings.google.is_configured)


@router.get("/me", response_model=UserResponse)
async def get_me(
    identity: TokenClaims = Depends(get_current_identity),
    repo: UserRepository = Depends(get_user_repo),
):
    """Current user for the bearer token.

    Raises:
        HTTPException: 401 if the token is missing or invalid, 404 if the user no longer exists
    """
    try:
        user = repo.get_by_id(identity.user_id)
    except UpstreamUnavailableError:
        raise _unavailable()
    if not user:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    return UserResponse.from_domain(user)

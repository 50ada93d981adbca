"""Bearer-token authentication dependency for protected routes."""

import logging
from typing import Optional
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from api.dependencies import get_token_service
from domain.model.errors import InvalidTokenError
from domain.model.token import TokenClaims
from services.token_service import TokenService

logger = logging.getLogger(__name__)

security = HTTPBearer(auto_error=False)


def get_current_identity(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    tokens: TokenService = Depends(get_token_service),
) -> TokenClaims:
    """Decoded claims of the request's bearer token (required).

    Trusts the token's embedded claims and does not load the user, so role
    changes take effect on the next login.

    Raises:
        HTTPException: 401 when the header is missing or the token does not
            verify. Expired, tampered and malformed tokens look the same.
    """
    if not credentials:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication required",
            headers={"WWW-Authenticate": "Bearer"},
        )

    try:
        return tokens.verify(credentials.credentials)
    except InvalidTokenError as e:
        logger.debug("Rejected bearer token", extra={"reason": type(e).__name__})
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token",
            headers={"WWW-Authenticate": "Bearer"},
        )

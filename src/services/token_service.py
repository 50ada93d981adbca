"""Token service: issues and verifies signed bearer tokens.

Tokens are HS256 JWTs carrying {sub, role, iat, exp, typ}. Nothing is stored
server-side; a token is valid until its embedded expiry.
"""

import logging
import secrets
from datetime import datetime, timedelta, timezone

from jose import ExpiredSignatureError, JWTError, jwt

from domain.model.errors import ExpiredTokenError, InvalidTokenError
from domain.model.token import TokenClaims
from domain.model.user import User

logger = logging.getLogger(__name__)

JWT_ALGORITHM = "HS256"
ACCESS_TOKEN_TTL = timedelta(hours=24)
OAUTH_STATE_TTL = timedelta(minutes=10)

_ACCESS_TYPE = "access"
_STATE_TYPE = "oauth_state"


class TokenService:
    """Signs and verifies access tokens with a server-held secret."""

    def __init__(
        self,
        secret_key: str,
        algorithm: str = JWT_ALGORITHM,
        ttl: timedelta = ACCESS_TOKEN_TTL,
    ):
        if not secret_key:
            raise ValueError("A signing secret is required")
        self._secret_key = secret_key
        self._algorithm = algorithm
        self.ttl = ttl

    def issue(self, user: User, now: datetime | None = None) -> str:
        """Create an access token for user, valid for ttl from now."""
        issued_at = now or datetime.now(timezone.utc)
        payload = {
            "sub": user.id,
            "role": user.role.value,
            "iat": issued_at,
            "exp": issued_at + self.ttl,
            "typ": _ACCESS_TYPE,
        }
        return jwt.encode(payload, self._secret_key, algorithm=self._algorithm)

    def verify(self, token: str, now: datetime | None = None) -> TokenClaims:
        """Verify signature, structure and expiry.

        Expiry is checked against now when given, otherwise the current time.

        Raises:
            ExpiredTokenError: validity window has passed
            InvalidTokenError: bad signature, malformed token, missing claims
        """
        payload = self._decode(token, verify_exp=now is None)
        user_id = payload.get("sub")
        role = payload.get("role")
        if payload.get("typ") != _ACCESS_TYPE or not user_id or not role:
            raise InvalidTokenError("Token is missing required claims")

        try:
            claims = TokenClaims(
                user_id=user_id,
                role=role,
                issued_at=datetime.fromtimestamp(payload["iat"], tz=timezone.utc),
                expires_at=datetime.fromtimestamp(payload["exp"], tz=timezone.utc),
            )
        except (KeyError, TypeError, ValueError) as e:
            raise InvalidTokenError("Token timestamps are malformed") from e

        if now is not None and now >= claims.expires_at:
            raise ExpiredTokenError("Token has expired")
        return claims

    def issue_state(self) -> str:
        """Create the signed, short-lived state parameter for an OAuth round trip."""
        now = datetime.now(timezone.utc)
        payload = {
            "nonce": secrets.token_urlsafe(16),
            "iat": now,
            "exp": now + OAUTH_STATE_TTL,
            "typ": _STATE_TYPE,
        }
        return jwt.encode(payload, self._secret_key, algorithm=self._algorithm)

    def verify_state(self, state: str | None) -> bool:
        if not state:
            return False
        try:
            payload = self._decode(state)
        except InvalidTokenError:
            return False
        return payload.get("typ") == _STATE_TYPE

    def _decode(self, token: str, verify_exp: bool = True) -> dict:
        try:
            return jwt.decode(
                token, self._secret_key, algorithms=[self._algorithm], options={"verify_exp": verify_exp},
            )
        except ExpiredSignatureError as e:
            raise ExpiredTokenError("Token has expired") from e
        except JWTError as e:
            logger.debug(f"JWT verification failed: {e}")
            raise InvalidTokenError("Invalid token") from e

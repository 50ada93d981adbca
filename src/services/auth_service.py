"""Auth service: registration, password handling and identity resolution.

Pure business logic with no HTTP dependencies.
Raises domain errors that route handlers map to HTTP status codes.
"""

import base64
import hashlib
import logging
from functools import lru_cache

import bcrypt

from domain.model.credentials import Credentials, LocalCredentials, OAuthIdentity
from domain.model.errors import (
    AccountConflictError,
    DomainError,
    DuplicateError,
    InvalidCredentialsError,
)
from domain.model.user import AuthProvider, BusinessProfile, User, UserRole, normalize_email
from port.user_repository import UserRepository

logger = logging.getLogger(__name__)

BCRYPT_ROUNDS = 12


def _prehash(password: str) -> bytes:
    # bcrypt only reads 72 bytes; a SHA-256 digest keeps every byte significant
    return base64.b64encode(hashlib.sha256(password.encode("utf-8")).digest())


def hash_password(password: str) -> str:
    salt = bcrypt.gensalt(rounds=BCRYPT_ROUNDS)
    return bcrypt.hashpw(_prehash(password), salt).decode("utf-8")


@lru_cache(maxsize=1)
def _dummy_hash() -> bytes:
    return hash_password("timing-equalizer").encode("utf-8")


def verify_password(user: User, password: str) -> bool:
    """Check password against the user's stored hash.

    False, never an error, for OAuth-only accounts and mismatches.
    bcrypt.checkpw compares in constant time.
    """
    if not user.password_hash:
        return False
    try:
        return bcrypt.checkpw(_prehash(password), user.password_hash.encode("utf-8"))
    except ValueError:
        logger.error("Stored password hash is malformed", extra={"userId": user.id})
        return False


def register_user(
    repo: UserRepository,
    email: str,
    password: str | None,
    name: str,
    role: UserRole = UserRole.CLIENT,
    business: BusinessProfile | None = None,
) -> User:
    """Register a new local user.

    The password is hashed here, before the store call. Business profile
    fields are kept only for BUSINESS accounts.

    Raises:
        DuplicateError: email already registered (case-insensitive)
    """
    email = normalize_email(email)
    if repo.get_by_email(email):
        raise DuplicateError("Email already registered")

    password_hash = hash_password(password) if password is not None else None
    user = repo.create(
        email=email,
        name=name,
        role=role,
        auth_provider=AuthProvider.LOCAL,
        password_hash=password_hash,
        business=business if role == UserRole.BUSINESS else None,
    )
    if not user:
        # Lost a race against a concurrent registration
        if repo.get_by_email(email):
            raise DuplicateError("Email already registered")
        raise DomainError("Failed to create user")

    logger.info("User registered", extra={"userId": user.id, "role": user.role.value})
    return user


def set_password(repo: UserRepository, user: User, password: str) -> None:
    """Hash and store a new password for an existing user."""
    password_hash = hash_password(password)
    if not repo.set_password_hash(user.id, password_hash):
        raise DomainError("Failed to update password")
    user.password_hash = password_hash


def authenticate(repo: UserRepository, email: str, password: str) -> User:
    """Authenticate a user by email and password.

    Unknown email, OAuth-only account and wrong password raise the same
    error, and every path runs one bcrypt comparison.

    Raises:
        InvalidCredentialsError: invalid credentials (deliberately vague)
    """
    user = repo.get_by_email(normalize_email(email))
    if not user or not user.password_hash:
        bcrypt.checkpw(_prehash(password), _dummy_hash())
        raise InvalidCredentialsError()
    if not verify_password(user, password):
        raise InvalidCredentialsError()

    # Login succeeds even if the timestamp write fails
    if not repo.update_last_login(user.id):
        logger.warning("Failed to record last login", extra={"userId": user.id})
    return repo.get_by_id(user.id) or user


def resolve_oauth_identity(repo: UserRepository, identity: OAuthIdentity) -> User:
    """Map an externally asserted identity to a local user.

    1. Known external id: reuse that user.
    2. Same email on an OAuth account without an external id: link it.
       Same email on any other account: AccountConflictError.
    3. Otherwise create an OAuth client account without a password.
    """
    existing = repo.get_by_google_id(identity.external_id)
    if existing:
        return existing

    email = normalize_email(identity.email)
    by_email = repo.get_by_email(email)
    if by_email:
        if by_email.auth_provider == AuthProvider.OAUTH and not by_email.google_id:
            repo.link_google_id(by_email.id, identity.external_id)
            by_email.google_id = identity.external_id
            logger.info("Linked external identity", extra={"userId": by_email.id})
            return by_email
        logger.warning(
            "OAuth login rejected: email belongs to another account",
            extra={"userId": by_email.id, "authProvider": by_email.auth_provider.value},
        )
        raise AccountConflictError(email)

    user = repo.create(
        email=email,
        name=identity.name or email.split("@")[0],
        role=UserRole.CLIENT,
        auth_provider=AuthProvider.OAUTH,
        google_id=identity.external_id,
        avatar=identity.avatar,
    )
    if not user:
        raise DomainError("Failed to create user")

    logger.info("User created from OAuth identity", extra={"userId": user.id})
    return user


def resolve_identity(repo: UserRepository, credentials: Credentials) -> User:
    """Resolve either credential variant to a verified User."""
    if isinstance(credentials, LocalCredentials):
        return authenticate(repo, credentials.email, credentials.password)
    if isinstance(credentials, OAuthIdentity):
        return resolve_oauth_identity(repo, credentials)
    raise TypeError(f"Unsupported credentials: {type(credentials).__name__}")

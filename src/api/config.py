"""Process configuration, read once from the environment.

load_dotenv() runs in api.main before anything calls load_settings().
"""

import os
from dataclasses import dataclass
from functools import lru_cache

from adapter.external.google_oauth import GoogleOAuthConfig

DEFAULT_FRONTEND_URL = "http://localhost:5173"
DEFAULT_CALLBACK_URL = "http://localhost:8000/auth/google/callback"


@dataclass(frozen=True)
class Settings:
    jwt_secret_key: str
    jwt_expiration_hours: int
    google: GoogleOAuthConfig
    frontend_url: str
    cors_origins: list[str]
    app_env: str

    @property
    def is_development(self) -> bool:
        return self.app_env == "development"


@lru_cache(maxsize=1)
def load_settings() -> Settings:
    """Build Settings from environment variables.

    Raises:
        ValueError: JWT_SECRET_KEY is not set
    """
    jwt_secret_key = os.getenv("JWT_SECRET_KEY")
    if not jwt_secret_key:
        raise ValueError(
            "JWT_SECRET_KEY environment variable is required. "
            "Generate a secure key with: openssl rand -hex 32"
        )

    frontend_url = os.getenv("FRONTEND_URL", DEFAULT_FRONTEND_URL).rstrip("/")
    cors_origins_env = os.getenv("CORS_ORIGINS", frontend_url)

    return Settings(
        jwt_secret_key=jwt_secret_key,
        jwt_expiration_hours=int(os.getenv("JWT_EXPIRATION_HOURS", "24")),
        google=GoogleOAuthConfig(
            client_id=os.getenv("GOOGLE_CLIENT_ID") or None,
            client_secret=os.getenv("GOOGLE_CLIENT_SECRET") or None,
            callback_url=os.getenv("GOOGLE_CALLBACK_URL", DEFAULT_CALLBACK_URL),
            frontend_url=frontend_url,
        ),
        frontend_url=frontend_url,
        # Strip whitespace to handle "origin1, origin2"
        cors_origins=[origin.strip() for origin in cors_origins_env.split(",") if origin.strip()],
        app_env=os.getenv("APP_ENV", "production").lower(),
    )

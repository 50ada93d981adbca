from datetime import timedelta
from functools import lru_cache

from fastapi import HTTPException
from pymongo.database import Database

from adapter.external.google_oauth import GoogleOAuthAdapter
from adapter.mongodb.appointment_repository import MongoAppointmentRepository
from adapter.mongodb.connection import get_mongodb_client, DATABASE_NAME
from adapter.mongodb.service_repository import MongoServiceRepository
from adapter.mongodb.user_repository import MongoUserRepository
from api.config import Settings, load_settings
from port.user_repository import UserRepository
from services.dashboard_service import DashboardService
from services.token_service import TokenService


def _get_db_or_none() -> Database | None:
    client = get_mongodb_client()
    if client is None:
        return None
    return client[DATABASE_NAME]


def _get_db() -> Database:
    """Get MongoDB database, raising 503 if unavailable."""
    db = _get_db_or_none()
    if db is None:
        raise HTTPException(status_code=503, detail="Database unavailable")
    return db


def get_settings() -> Settings:
    return load_settings()


def get_user_repo() -> UserRepository:
    return MongoUserRepository(_get_db())


def get_user_repo_or_none() -> UserRepository | None:
    """For browser-facing routes that redirect instead of answering 503."""
    db = _get_db_or_none()
    return MongoUserRepository(db) if db is not None else None


@lru_cache(maxsize=1)
def _token_service(secret_key: str, expiration_hours: int) -> TokenService:
    return TokenService(secret_key, ttl=timedelta(hours=expiration_hours))


def get_token_service() -> TokenService:
    settings = load_settings()
    return _token_service(settings.jwt_secret_key, settings.jwt_expiration_hours)


def get_google_oauth() -> GoogleOAuthAdapter:
    return GoogleOAuthAdapter(load_settings().google)


def get_dashboard_service() -> DashboardService:
    """Dashboard reads degrade to fallbacks instead of failing with 503."""
    db = _get_db_or_none()
    if db is None:
        return DashboardService(users=None, appointments=None, services=None)
    return DashboardService(
        users=MongoUserRepository(db),
        appointments=MongoAppointmentRepository(db),
        services=MongoServiceRepository(db),
    )

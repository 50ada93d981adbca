"""User domain model and business profile value objects."""

from dataclasses import asdict, dataclass, field
from datetime import datetime
from enum import Enum


class UserRole(str, Enum):
    """Role a user account plays in the booking system."""
    CLIENT = 'client'
    BUSINESS = 'business'
    ADMIN = 'admin'


class AuthProvider(str, Enum):
    """How an account authenticates."""
    LOCAL = 'local'
    OAUTH = 'oauth'


WEEKDAYS = ('monday', 'tuesday', 'wednesday', 'thursday', 'friday', 'saturday', 'sunday')


@dataclass(frozen=True)
class Location:
    address: str | None = None
    city: str | None = None
    state: str | None = None
    zip_code: str | None = None
    country: str | None = None


@dataclass(frozen=True)
class DayHours:
    """Opening hours for one weekday, e.g. open='09:00', close='18:00'."""
    open: str | None = None
    close: str | None = None
    is_closed: bool = False


@dataclass
class BusinessProfile:
    """Profile fields only present on accounts with role BUSINESS."""
    business_name: str | None = None
    business_email: str | None = None
    business_phone: str | None = None
    location: Location = field(default_factory=Location)
    service_hours: dict[str, DayHours] = field(default_factory=dict)
    operating_days: list[str] = field(default_factory=list)
    business_images: list[str] = field(default_factory=list)

    def __post_init__(self):
        unknown = [d for d in self.operating_days if d not in WEEKDAYS]
        if unknown:
            raise ValueError(f"Unknown operating days: {unknown}")
        if self.business_email:
            self.business_email = self.business_email.strip().lower()

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict | None) -> 'BusinessProfile | None':
        if not data:
            return None
        return cls(
            business_name=data.get('business_name'),
            business_email=data.get('business_email'),
            business_phone=data.get('business_phone'),
            location=Location(**(data.get('location') or {})),
            service_hours={
                day: DayHours(**hours)
                for day, hours in (data.get('service_hours') or {}).items()
            },
            operating_days=list(data.get('operating_days') or []),
            business_images=list(data.get('business_images') or []),
        )


def normalize_email(email: str) -> str:
    """Canonical form used for every lookup and insert."""
    return email.strip().lower()


@dataclass
class User:
    """Domain model representing a user."""
    id: str
    name: str
    email: str
    created_at: datetime
    updated_at: datetime
    role: UserRole = UserRole.CLIENT
    auth_provider: AuthProvider = AuthProvider.LOCAL
    password_hash: str | None = None
    google_id: str | None = None
    avatar: str = ''
    phone: str | None = None
    is_active: bool = True
    last_login: datetime | None = None
    business: BusinessProfile | None = None

    @property
    def has_password(self) -> bool:
        return bool(self.password_hash)

    def to_public(self) -> dict:
        """Outward representation. Never contains the password hash."""
        return {
            'id': self.id,
            'email': self.email,
            'name': self.name,
            'role': self.role.value,
            'avatar': self.avatar,
        }

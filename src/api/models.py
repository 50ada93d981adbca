"""Pydantic models for API request/response.

The dashboard client speaks camelCase; fields are declared in snake_case
and aliased by CamelModel.
"""

from datetime import datetime
from typing import Optional, Literal
from pydantic import BaseModel, ConfigDict, EmailStr, Field
from pydantic.alias_generators import to_camel

from domain.model.appointment import Appointment, AppointmentStatus
from domain.model.dashboard import DashboardStats, RevenuePoint, StaffUtilization
from domain.model.service import Service
from domain.model.user import User


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ── Auth ─────────────────────────────────────────────────────


class RegisterRequest(CamelModel):
    """Request model for user registration.

    Admin accounts cannot be self-registered.
    """
    email: EmailStr
    password: str = Field(..., min_length=6, description="Raw password, hashed before storage")
    name: str = Field(..., min_length=1, max_length=100)
    role: Literal["client", "business"] = "client"
    business_name: Optional[str] = Field(None, max_length=200)
    business_email: Optional[EmailStr] = None
    business_phone: Optional[str] = Field(None, max_length=50)


class LoginRequest(BaseModel):
    """Request model for user login."""
    email: EmailStr
    password: str


class UserResponse(BaseModel):
    """Public user fields. The password hash is never part of a response."""
    id: str
    email: str
    name: str
    role: str
    avatar: str = ""

    @classmethod
    def from_domain(cls, user: User) -> "UserResponse":
        return cls(**user.to_public())


class AuthResponse(BaseModel):
    """Response model for authentication."""
    message: str
    token: str
    user: UserResponse


class GoogleStatusResponse(CamelModel):
    google_auth_available: bool


# ── Dashboard ────────────────────────────────────────────────


class AppointmentResponse(CamelModel):
    id: str = Field(..., alias="_id")
    user_id: str
    service: str
    service_id: Optional[str] = None
    specialist: str
    date: datetime
    time: str
    status: AppointmentStatus
    price: float
    client_name: str
    client_email: str
    client_phone: Optional[str] = None
    notes: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_domain(cls, appointment: Appointment) -> "AppointmentResponse":
        return cls(
            id=appointment.id,
            user_id=appointment.user_id,
            service=appointment.service,
            service_id=appointment.service_id,
            specialist=appointment.specialist,
            date=appointment.date,
            time=appointment.time,
            status=appointment.status,
            price=appointment.price,
            client_name=appointment.client_name,
            client_email=appointment.client_email,
            client_phone=appointment.client_phone,
            notes=appointment.notes,
            created_at=appointment.created_at,
            updated_at=appointment.updated_at,
        )


class SummaryStatsResponse(CamelModel):
    total_revenue: str = Field(..., description="Completed revenue with two decimals")
    total_appointments: int
    active_clients: int
    today_appointments: int
    growth: float = Field(..., description="Month-over-month appointment growth in percent")


class StatsResponse(CamelModel):
    stats: SummaryStatsResponse
    recent_appointments: list[AppointmentResponse]

    @classmethod
    def from_domain(cls, result: DashboardStats) -> "StatsResponse":
        s = result.stats
        return cls(
            stats=SummaryStatsResponse(
                total_revenue=s.total_revenue,
                total_appointments=s.total_appointments,
                active_clients=s.active_clients,
                today_appointments=s.today_appointments,
                growth=s.growth,
            ),
            recent_appointments=[AppointmentResponse.from_domain(a) for a in result.recent_appointments],
        )


class RevenuePointResponse(BaseModel):
    name: str = Field(..., description="Weekday short name")
    revenue: float

    @classmethod
    def from_domain(cls, point: RevenuePoint) -> "RevenuePointResponse":
        return cls(name=point.name, revenue=point.revenue)


class StaffResponse(BaseModel):
    name: str
    role: str
    value: int = Field(..., ge=0, le=100, description="Utilization percentage")

    @classmethod
    def from_domain(cls, staff: StaffUtilization) -> "StaffResponse":
        return cls(name=staff.name, role=staff.role, value=staff.value)


class ServiceResponse(CamelModel):
    id: str = Field(..., alias="_id")
    name: str
    category: str
    duration: int
    price: float
    description: Optional[str] = None
    image: Optional[str] = None
    is_active: bool = True
    business_id: Optional[str] = None

    @classmethod
    def from_domain(cls, service: Service) -> "ServiceResponse":
        return cls(
            id=service.id,
            name=service.name,
            category=service.category.value,
            duration=service.duration,
            price=service.price,
            description=service.description,
            image=service.image,
            is_active=service.is_active,
            business_id=service.business_id,
        )


class StatusUpdateRequest(BaseModel):
    status: AppointmentStatus

"""Derived dashboard views produced by the aggregation service."""

from dataclasses import dataclass, field

from domain.model.appointment import Appointment


@dataclass(frozen=True)
class SummaryStats:
    total_revenue: str
    total_appointments: int
    active_clients: int
    today_appointments: int
    growth: float


@dataclass(frozen=True)
class DashboardStats:
    """Summary counters plus the most recently created appointments."""
    stats: SummaryStats
    recent_appointments: list[Appointment] = field(default_factory=list)


@dataclass(frozen=True)
class RevenuePoint:
    """Revenue for a single calendar date, labelled with its weekday."""
    name: str
    revenue: float
    date: str | None = None


@dataclass(frozen=True)
class StaffUtilization:
    name: str
    role: str
    value: int

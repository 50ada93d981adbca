"""Appointment domain model."""

from dataclasses import dataclass
from datetime import datetime, time
from enum import Enum


class AppointmentStatus(str, Enum):
    """Lifecycle of a booked appointment.

    pending -> confirmed -> in_progress -> completed, with cancelled
    reachable from any non-terminal state.
    """
    PENDING = 'pending'
    CONFIRMED = 'confirmed'
    IN_PROGRESS = 'in_progress'
    COMPLETED = 'completed'
    CANCELLED = 'cancelled'

    @property
    def is_terminal(self) -> bool:
        return self in (AppointmentStatus.COMPLETED, AppointmentStatus.CANCELLED)

    def allowed_next(self) -> frozenset['AppointmentStatus']:
        return _TRANSITIONS[self]

    def can_transition_to(self, target: 'AppointmentStatus') -> bool:
        return target in _TRANSITIONS[self]


_TRANSITIONS = {
    AppointmentStatus.PENDING: frozenset({AppointmentStatus.CONFIRMED, AppointmentStatus.CANCELLED}),
    AppointmentStatus.CONFIRMED: frozenset({AppointmentStatus.IN_PROGRESS, AppointmentStatus.CANCELLED}),
    AppointmentStatus.IN_PROGRESS: frozenset({AppointmentStatus.COMPLETED, AppointmentStatus.CANCELLED}),
    AppointmentStatus.COMPLETED: frozenset(),
    AppointmentStatus.CANCELLED: frozenset(),
}

_TIME_FORMATS = ('%I:%M %p', '%H:%M', '%I %p')


def parse_time_of_day(value: str) -> time | None:
    """Parse '10:30 AM', '14:00' or '9 PM'. Return None if unparseable."""
    text = value.strip().upper()
    for fmt in _TIME_FORMATS:
        try:
            return datetime.strptime(text, fmt).time()
        except ValueError:
            continue
    return None


@dataclass
class Appointment:
    """Domain model representing a scheduled service instance."""
    id: str
    user_id: str
    service: str
    specialist: str
    date: datetime
    time: str
    client_name: str
    client_email: str
    created_at: datetime
    updated_at: datetime
    status: AppointmentStatus = AppointmentStatus.PENDING
    price: float = 0.0
    service_id: str | None = None
    client_phone: str | None = None
    notes: str | None = None

    def __post_init__(self):
        if self.price < 0:
            raise ValueError("Appointment price must be non-negative")

    @property
    def counts_as_revenue(self) -> bool:
        return self.status == AppointmentStatus.COMPLETED

    @property
    def time_of_day(self) -> time | None:
        return parse_time_of_day(self.time)

from datetime import datetime
from typing import Protocol

from domain.model.appointment import Appointment, AppointmentStatus


class AppointmentRepository(Protocol):
    """Protocol defining the interface for appointment data access.

    Read methods raise UpstreamUnavailableError when the store fails so the
    dashboard can switch to its fallback payloads.
    """
    def get_by_id(self, appointment_id: str) -> Appointment | None:
        """Find an appointment by ID. Return Appointment or None if not found."""
        ...

    def count(self) -> int:
        """Count all appointments."""
        ...

    def count_in_range(self, start: datetime, end: datetime) -> int:
        """Count appointments whose business date is in [start, end)."""
        ...

    def count_created_before(self, boundary: datetime) -> int:
        """Count appointments created strictly before boundary."""
        ...

    def count_created_since(self, boundary: datetime) -> int:
        """Count appointments created on or after boundary."""
        ...

    def total_revenue(self) -> float:
        """Sum of price over completed appointments."""
        ...

    def revenue_by_date(self, since: datetime) -> list[tuple[str, float]]:
        """Completed revenue grouped by business date (YYYY-MM-DD), ascending.

        Only appointments whose business date is >= since are included.
        """
        ...

    def find_in_range(self, start: datetime, end: datetime) -> list[Appointment]:
        """Appointments whose business date is in [start, end)."""
        ...

    def find_recent(self, limit: int = 10) -> list[Appointment]:
        """Most recently created appointments, newest first."""
        ...

    def update_status(self, appointment_id: str, status: AppointmentStatus) -> Appointment | None:
        """Set the status. Return the updated Appointment or None if not found."""
        ...

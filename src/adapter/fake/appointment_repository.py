"""In-memory implementation of AppointmentRepository for testing."""

import uuid
from collections import defaultdict
from dataclasses import replace
from datetime import datetime, timezone

from domain.model.appointment import Appointment, AppointmentStatus


class FakeAppointmentRepository:
    def __init__(self):
        self.store: dict[str, Appointment] = {}

    # ── test helpers ─────────────────────────────────────────

    def add(
        self,
        date: datetime,
        status: AppointmentStatus = AppointmentStatus.PENDING,
        price: float = 0.0,
        created_at: datetime | None = None,
        **fields,
    ) -> Appointment:
        created = created_at or datetime.now(timezone.utc)
        defaults = {
            'id': uuid.uuid4().hex,
            'user_id': 'user-1',
            'service': 'Luxury Facial',
            'specialist': 'Sarah J.',
            'time': '10:30 AM',
            'client_name': 'Jessica Reed',
            'client_email': 'jessica@example.com',
        }
        defaults.update(fields)
        appointment = Appointment(
            date=date,
            status=status,
            price=price,
            created_at=created,
            updated_at=created,
            **defaults,
        )
        self.store[appointment.id] = appointment
        return appointment

    # ── write operations ─────────────────────────────────────

    def update_status(self, appointment_id: str, status: AppointmentStatus) -> Appointment | None:
        appointment = self.store.get(appointment_id)
        if not appointment:
            return None
        updated = replace(appointment, status=status, updated_at=datetime.now(timezone.utc))
        self.store[appointment_id] = updated
        return updated

    # ── read operations ──────────────────────────────────────

    def get_by_id(self, appointment_id: str) -> Appointment | None:
        return self.store.get(appointment_id)

    def count(self) -> int:
        return len(self.store)

    def count_in_range(self, start: datetime, end: datetime) -> int:
        return len(self.find_in_range(start, end))

    def count_created_before(self, boundary: datetime) -> int:
        return sum(1 for a in self.store.values() if a.created_at < boundary)

    def count_created_since(self, boundary: datetime) -> int:
        return sum(1 for a in self.store.values() if a.created_at >= boundary)

    def total_revenue(self) -> float:
        return sum(a.price for a in self.store.values() if a.counts_as_revenue)

    def revenue_by_date(self, since: datetime) -> list[tuple[str, float]]:
        buckets: dict[str, float] = defaultdict(float)
        for a in self.store.values():
            if a.counts_as_revenue and a.date >= since:
                # Mongo's $dateToString buckets in UTC
                buckets[a.date.astimezone(timezone.utc).strftime('%Y-%m-%d')] += a.price
        return sorted(buckets.items())

    def find_in_range(self, start: datetime, end: datetime) -> list[Appointment]:
        return [a for a in self.store.values() if start <= a.date < end]

    def find_recent(self, limit: int = 10) -> list[Appointment]:
        return sorted(self.store.values(), key=lambda a: a.created_at, reverse=True)[:limit]

"""Synthetic payloads served when the dashboard store is unavailable.

Each factory builds a fresh value so callers may mutate what they get.
The numbers are representative demo data, not derived from any records.
"""

from datetime import datetime, timezone

from domain.model.appointment import Appointment, AppointmentStatus
from domain.model.dashboard import DashboardStats, RevenuePoint, StaffUtilization, SummaryStats
from domain.model.service import Service, ServiceCategory

_DEMO_APPOINTMENTS = (
    ('1', 'Jessica Reed', 'Luxury Facial', '10:30 AM', AppointmentStatus.CONFIRMED, 'Sarah J.'),
    ('2', 'Marcus Smith', 'Deep Tissue', '12:00 PM', AppointmentStatus.PENDING, 'Michael C.'),
    ('3', 'Elena Gilbert', 'Designer Haircut', '02:15 PM', AppointmentStatus.IN_PROGRESS, 'Emma W.'),
)


def fallback_appointments() -> list[Appointment]:
    now = datetime.now(timezone.utc)
    return [
        Appointment(
            id=appointment_id,
            user_id='demo',
            service=service,
            specialist=specialist,
            date=now,
            time=time_of_day,
            client_name=client_name,
            client_email='',
            created_at=now,
            updated_at=now,
            status=status,
        )
        for appointment_id, client_name, service, time_of_day, status, specialist in _DEMO_APPOINTMENTS
    ]


def fallback_stats() -> DashboardStats:
    return DashboardStats(
        stats=SummaryStats(
            total_revenue='12840.00',
            total_appointments=156,
            active_clients=842,
            today_appointments=12,
            growth=12.5,
        ),
        recent_appointments=fallback_appointments(),
    )


def fallback_revenue() -> list[RevenuePoint]:
    return [
        RevenuePoint(name='Mon', revenue=4000),
        RevenuePoint(name='Tue', revenue=3000),
        RevenuePoint(name='Wed', revenue=5000),
        RevenuePoint(name='Thu', revenue=2780),
        RevenuePoint(name='Fri', revenue=6890),
        RevenuePoint(name='Sat', revenue=8390),
        RevenuePoint(name='Sun', revenue=4490),
    ]


def fallback_staff() -> list[StaffUtilization]:
    return [
        StaffUtilization(name='Sarah J.', role='Skin', value=85),
        StaffUtilization(name='Michael C.', role='Massage', value=65),
        StaffUtilization(name='Emma W.', role='Hair', value=92),
        StaffUtilization(name='David L.', role='Nails', value=45),
    ]


def fallback_services() -> list[Service]:
    return [
        Service(id='1', name='Luxury Facial', category=ServiceCategory.SKIN, duration=60, price=150),
        Service(id='2', name='Deep Tissue Massage', category=ServiceCategory.MASSAGE, duration=90, price=120),
        Service(id='3', name='Designer Haircut', category=ServiceCategory.HAIR, duration=45, price=85),
        Service(id='4', name='Full Spa Package', category=ServiceCategory.SPA, duration=180, price=350),
    ]

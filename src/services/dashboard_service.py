"""Dashboard aggregation service.

Derives counters, revenue series and staff utilization from appointment,
user and service records. Read operations never raise: when the store is
unreachable or any query fails, the whole operation is replaced by its
fallback payload from services.dashboard_fallbacks and the failure is only
logged. Status updates are writes and do propagate errors.
"""

import asyncio
import calendar
import functools
import inspect
import logging
from collections import Counter, defaultdict
from datetime import date, datetime, time, timedelta
from typing import Callable, TypeVar

from domain.model.appointment import Appointment, AppointmentStatus
from domain.model.dashboard import DashboardStats, RevenuePoint, StaffUtilization, SummaryStats
from domain.model.errors import NotFoundError, UpstreamUnavailableError
from domain.model.service import Service
from domain.model.user import UserRole
from port.appointment_repository import AppointmentRepository
from port.service_repository import ServiceRepository
from port.user_repository import UserRepository
from services import dashboard_fallbacks as fallbacks

logger = logging.getLogger(__name__)

T = TypeVar('T')

RECENT_APPOINTMENTS_LIMIT = 10
DAILY_SLOTS_PER_SPECIALIST = 8
WEEKDAY_LABELS = ('Mon', 'Tue', 'Wed', 'Thu', 'Fri', 'Sat', 'Sun')


# ── fallback policy ──────────────────────────────────────────


def _log_fallback(operation: str, error: Exception) -> None:
    extra = {"operation": operation, "error": str(error), "errorType": type(error).__name__}
    if isinstance(error, UpstreamUnavailableError):
        logger.warning("Dashboard store unavailable, serving fallback", extra=extra)
    else:
        logger.error("Dashboard query failed, serving fallback", extra=extra, exc_info=True)


def with_fallback(factory: Callable[[], T]):
    """Replace any failure of the wrapped read operation with factory()."""
    def decorator(func):
        if inspect.iscoroutinefunction(func):
            @functools.wraps(func)
            async def async_wrapper(*args, **kwargs):
                try:
                    return await func(*args, **kwargs)
                except Exception as e:
                    _log_fallback(func.__name__, e)
                    return factory()
            return async_wrapper

        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            try:
                return func(*args, **kwargs)
            except Exception as e:
                _log_fallback(func.__name__, e)
                return factory()
        return wrapper
    return decorator


# ── calculations ─────────────────────────────────────────────


def local_now() -> datetime:
    """Current time in the server's local timezone (aware)."""
    return datetime.now().astimezone()


def start_of_day(moment: datetime) -> datetime:
    return moment.replace(hour=0, minute=0, second=0, microsecond=0)


def subtract_month(moment: datetime) -> datetime:
    """Same wall-clock time one calendar month earlier, day clamped to month length."""
    if moment.month == 1:
        year, month = moment.year - 1, 12
    else:
        year, month = moment.year, moment.month - 1
    day = min(moment.day, calendar.monthrange(year, month)[1])
    return moment.replace(year=year, month=month, day=day)


def growth_rate(previous: int, current: int) -> float:
    """Period-over-period growth in percent, one decimal; 0 when previous is 0."""
    if previous == 0:
        return 0.0
    return round((current - previous) / previous * 100, 1)


def format_revenue(total: float) -> str:
    return f"{total:.2f}"


def weekday_label(day: str) -> str:
    """'2026-10-19' -> 'Mon'."""
    return WEEKDAY_LABELS[date.fromisoformat(day).weekday()]


def _time_sort_key(appointment: Appointment) -> tuple[bool, time, str]:
    parsed = appointment.time_of_day
    return (parsed is None, parsed or time.min, appointment.time)


# ── service ──────────────────────────────────────────────────


class DashboardService:
    """Read-only dashboard views plus appointment status updates.

    A repository given as None means the store is unreachable.
    """

    def __init__(
        self,
        users: UserRepository | None,
        appointments: AppointmentRepository | None,
        services: ServiceRepository | None,
    ):
        self.users = users
        self.appointments = appointments
        self.services = services

    @staticmethod
    def _require(repo: T | None) -> T:
        if repo is None:
            raise UpstreamUnavailableError("Database unavailable")
        return repo

    @with_fallback(fallbacks.fallback_stats)
    async def get_stats(self, now: datetime | None = None) -> DashboardStats:
        """Summary counters and recent appointments.

        The queries are independent and run concurrently; if any fails the
        fallback replaces the whole result.
        """
        users = self._require(self.users)
        appointments = self._require(self.appointments)

        today_start = start_of_day(now or local_now())
        tomorrow_start = today_start + timedelta(days=1)
        growth_boundary = subtract_month(today_start)

        (
            active_clients,
            total_appointments,
            today_appointments,
            revenue,
            previous,
            current,
            recent,
        ) = await asyncio.gather(
            asyncio.to_thread(users.count_by_role, UserRole.CLIENT),
            asyncio.to_thread(appointments.count),
            asyncio.to_thread(appointments.count_in_range, today_start, tomorrow_start),
            asyncio.to_thread(appointments.total_revenue),
            asyncio.to_thread(appointments.count_created_before, growth_boundary),
            asyncio.to_thread(appointments.count_created_since, growth_boundary),
            asyncio.to_thread(appointments.find_recent, RECENT_APPOINTMENTS_LIMIT),
        )

        return DashboardStats(
            stats=SummaryStats(
                total_revenue=format_revenue(revenue),
                total_appointments=total_appointments,
                active_clients=active_clients,
                today_appointments=today_appointments,
                growth=growth_rate(previous, current),
            ),
            recent_appointments=recent,
        )

    @with_fallback(fallbacks.fallback_revenue)
    def get_revenue_series(self, days: int = 7, now: datetime | None = None) -> list[RevenuePoint]:
        """Completed revenue per business date over the last `days` days, ascending."""
        appointments = self._require(self.appointments)
        since = (now or local_now()) - timedelta(days=days)
        return [
            RevenuePoint(name=weekday_label(day), revenue=round(total, 2), date=day)
            for day, total in appointments.revenue_by_date(since)
        ]

    @with_fallback(fallbacks.fallback_staff)
    def get_staff_utilization(self, days: int = 7, now: datetime | None = None) -> list[StaffUtilization]:
        """Booked share of each specialist's slots over the last `days` calendar days.

        Cancelled appointments free their slot and are not counted.
        """
        appointments = self._require(self.appointments)
        window_end = start_of_day(now or local_now()) + timedelta(days=1)
        window_start = window_end - timedelta(days=days)

        booked: dict[str, Counter] = defaultdict(Counter)
        for appointment in appointments.find_in_range(window_start, window_end):
            if appointment.status != AppointmentStatus.CANCELLED:
                booked[appointment.specialist][appointment.service] += 1

        capacity = days * DAILY_SLOTS_PER_SPECIALIST
        return [
            StaffUtilization(
                name=specialist,
                role=services.most_common(1)[0][0],
                value=min(100, round(sum(services.values()) / capacity * 100)),
            )
            for specialist, services in sorted(booked.items())
        ]

    @with_fallback(fallbacks.fallback_appointments)
    def get_today_appointments(self, now: datetime | None = None) -> list[Appointment]:
        """Appointments dated today, ordered by time of day."""
        appointments = self._require(self.appointments)
        today_start = start_of_day(now or local_now())
        found = appointments.find_in_range(today_start, today_start + timedelta(days=1))
        return sorted(found, key=_time_sort_key)

    @with_fallback(fallbacks.fallback_services)
    def list_active_services(self) -> list[Service]:
        return self._require(self.services).list_active()

    def update_appointment_status(self, appointment_id: str, status: AppointmentStatus) -> Appointment:
        """Set an appointment's status.

        Any target status is accepted; moves out of a terminal state are
        logged.

        Raises:
            NotFoundError: no appointment with that id
            UpstreamUnavailableError: store unreachable or write failed
        """
        appointments = self._require(self.appointments)
        current = appointments.get_by_id(appointment_id)
        if current is None:
            raise NotFoundError("Appointment not found")

        if current.status.is_terminal and status != current.status:
            logger.warning(
                "Appointment leaving terminal status",
                extra={"appointmentId": appointment_id, "from": current.status.value, "to": status.value},
            )

        updated = appointments.update_status(appointment_id, status)
        if updated is None:
            raise NotFoundError("Appointment not found")

        logger.info(
            "Appointment status updated",
            extra={"appointmentId": appointment_id, "status": status.value},
        )
        return updated

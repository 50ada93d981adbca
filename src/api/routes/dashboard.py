"""Business dashboard routes.

Every route requires a valid bearer token. Read routes always answer 200:
DashboardService substitutes fallback payloads when the store fails.
"""

import logging
from fastapi import APIRouter, Depends, HTTPException, Query, status

from api.dependencies import get_dashboard_service
from api.models import (
    AppointmentResponse,
    RevenuePointResponse,
    ServiceResponse,
    StaffResponse,
    StatsResponse,
    StatusUpdateRequest,
)
from api.security import get_current_identity
from domain.model.errors import NotFoundError, UpstreamUnavailableError
from services.dashboard_service import DashboardService

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/dashboard",
    tags=["dashboard"],
    dependencies=[Depends(get_current_identity)],
)


@router.get("/stats", response_model=StatsResponse)
async def get_stats(service: DashboardService = Depends(get_dashboard_service)):
    """Summary counters plus the ten most recent appointments."""
    return StatsResponse.from_domain(await service.get_stats())


@router.get("/revenue", response_model=list[RevenuePointResponse])
async def get_revenue(
    period: int = Query(7, ge=1, le=365, description="Number of days to include"),
    service: DashboardService = Depends(get_dashboard_service),
):
    """Completed revenue per day, oldest first."""
    return [RevenuePointResponse.from_domain(p) for p in service.get_revenue_series(days=period)]


@router.get("/staff", response_model=list[StaffResponse])
async def get_staff(service: DashboardService = Depends(get_dashboard_service)):
    return [StaffResponse.from_domain(s) for s in service.get_staff_utilization()]


@router.get("/appointments/today", response_model=list[AppointmentResponse])
async def get_today_appointments(service: DashboardService = Depends(get_dashboard_service)):
    return [AppointmentResponse.from_domain(a) for a in service.get_today_appointments()]


@router.patch("/appointments/{appointment_id}", response_model=AppointmentResponse)
async def update_appointment_status(
    appointment_id: str,
    request: StatusUpdateRequest,
    service: DashboardService = Depends(get_dashboard_service),
):
    """Set an appointment's status.

    Raises:
        HTTPException: 404 if the appointment does not exist, 500 if the write fails
    """
    try:
        updated = service.update_appointment_status(appointment_id, request.status)
    except NotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Appointment not found")
    except UpstreamUnavailableError as e:
        logger.error("Failed to update appointment", extra={"appointmentId": appointment_id, "error": str(e)})
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to update appointment",
        )
    return AppointmentResponse.from_domain(updated)


@router.get("/services", response_model=list[ServiceResponse])
async def list_services(service: DashboardService = Depends(get_dashboard_service)):
    """Active services offered by the salon."""
    return [ServiceResponse.from_domain(s) for s in service.list_active_services()]

"""
Application service for booking availability.

The service fetches tenant-scoped data through repository protocols and
delegates every decision to the pure domain functions. This keeps HTTP
handlers and the CLI thin and lets tests swap the data source for stubs.

Caller obligation: the check and the subsequent insert/update are not atomic.
Two concurrent requests can both pass against the same snapshot, so the
persistence layer must serialize check-and-write per
``(tenant_id, professional_id, date)`` (unique constraint, advisory lock or
serializable transaction).
"""

from __future__ import annotations

import logging
from dataclasses import replace
from decimal import Decimal
from typing import Dict, Iterable, List, Optional, Protocol, Sequence

from ..domain.availability import AvailabilityContext, check_availability
from ..domain.business_hours import BusinessHoursGate
from ..domain.durations import booked_duration
from ..domain.models import (
    Appointment,
    AvailabilityResult,
    BusinessHours,
    DayWindows,
    ProfessionalSchedule,
    Service,
)
from ..domain.pricing import total_effective_value
from ..domain.slot_calculator import SlotCalculator

logger = logging.getLogger(__name__)


class AppointmentRepository(Protocol):
    async def fetch_appointments_for_date(self, tenant_id: str, date: str) -> List[Appointment]:
        """Return every appointment of the date, cancelled ones included."""

    async def fetch_appointment(self, tenant_id: str, appointment_id: str) -> Optional[Appointment]:
        """Return the stored appointment, or None when it does not exist."""


class BusinessHoursRepository(Protocol):
    async def fetch_business_hours(self, tenant_id: str) -> List[BusinessHours]:
        """Return all business hours rows of the tenant, inactive ones included."""


class ProfessionalRepository(Protocol):
    async def fetch_schedule(self, tenant_id: str, professional_id: str) -> List[ProfessionalSchedule]:
        """Return the professional's schedule rows; empty when none is configured."""


class ServiceCatalog(Protocol):
    async def fetch_services(self, tenant_id: str, service_ids: Sequence[str]) -> List[Service]:
        """Return the services that exist among ``service_ids``."""


class BookingService:
    """
    Orchestrates data retrieval and the availability rules.
    """

    def __init__(
        self,
        appointments: AppointmentRepository,
        business_hours: BusinessHoursRepository,
        professionals: ProfessionalRepository,
        services: ServiceCatalog,
        gate: Optional[BusinessHoursGate] = None,
        min_window_minutes: int = 30,
    ) -> None:
        self._appointments = appointments
        self._business_hours = business_hours
        self._professionals = professionals
        self._services = services
        self._gate = gate or BusinessHoursGate()
        self._slot_calculator = SlotCalculator(gate=self._gate)
        self._min_window_minutes = min_window_minutes

    async def check_booking(
        self,
        tenant_id: str,
        candidate: Appointment,
        *,
        exclude_appointment_id: Optional[str] = None,
    ) -> AvailabilityResult:
        """
        Run the availability check for a create or an edit.

        Args:
            tenant_id: Tenant the candidate belongs to
            candidate: Appointment to be created, or the edited version of one
            exclude_appointment_id: Stored record to ignore, set when editing

        Returns:
            AvailabilityResult from the domain check
        """
        if exclude_appointment_id is not None:
            candidate = await self._keep_stored_duration(tenant_id, candidate, exclude_appointment_id)

        context = await self.build_context(
            tenant_id,
            candidate,
            exclude_appointment_id=exclude_appointment_id,
        )
        result = check_availability(candidate, context, gate=self._gate)

        if not result.available:
            logger.info(
                "Booking %s %s for tenant %s rejected: %s",
                candidate.date,
                candidate.time,
                tenant_id,
                result.reason.value,
            )

        return result

    async def build_context(
        self,
        tenant_id: str,
        candidate: Appointment,
        *,
        exclude_appointment_id: Optional[str] = None,
    ) -> AvailabilityContext:
        """Fetch everything the availability check of ``candidate`` reads."""
        existing = await self._appointments.fetch_appointments_for_date(tenant_id, candidate.date)
        if exclude_appointment_id is not None:
            existing = [apt for apt in existing if apt.id != exclude_appointment_id]

        business_hours = await self._business_hours.fetch_business_hours(tenant_id)

        professional_schedule = None
        if candidate.professional_id:
            professional_schedule = await self._professionals.fetch_schedule(
                tenant_id,
                candidate.professional_id,
            )

        services = await self._fetch_catalog(
            tenant_id,
            [candidate, *existing],
        )

        return AvailabilityContext(
            business_hours=business_hours,
            existing_appointments=existing,
            professional_schedule=professional_schedule,
            services=services,
        )

    async def find_open_windows(
        self,
        tenant_id: str,
        date: str,
        *,
        professional_id: Optional[str] = None,
    ) -> DayWindows:
        """Open booking windows of one date on the given timeline."""
        appointments = await self._appointments.fetch_appointments_for_date(tenant_id, date)
        schedule: Sequence = await self._business_hours.fetch_business_hours(tenant_id)

        if professional_id:
            professional_schedule = await self._professionals.fetch_schedule(tenant_id, professional_id)
            if professional_schedule:
                schedule = professional_schedule

        catalog = await self._fetch_catalog(tenant_id, appointments)

        return self._slot_calculator.find_open_windows(
            date=date,
            schedule=schedule,
            appointments=appointments,
            professional_id=professional_id,
            catalog=catalog,
            min_duration_minutes=self._min_window_minutes,
        )

    async def quote(self, tenant_id: str, service_ids: Sequence[str], today: str) -> Decimal:
        """Effective price of the given services on ``today``."""
        services = await self._services.fetch_services(tenant_id, list(dict.fromkeys(service_ids)))
        found = {service.id: service for service in services}

        missing = [service_id for service_id in service_ids if service_id not in found]
        if missing:
            logger.warning("Quote for tenant %s ignores unknown services: %s", tenant_id, ", ".join(missing))

        return total_effective_value(
            (found[service_id] for service_id in service_ids if service_id in found),
            today,
        )

    async def _keep_stored_duration(
        self,
        tenant_id: str,
        candidate: Appointment,
        appointment_id: str,
    ) -> Appointment:
        """
        An edit that leaves duration and services untouched keeps the length of
        the stored appointment instead of falling back to 60 minutes.
        """
        if candidate.duration is not None or candidate.service_ids:
            return candidate

        stored = await self._appointments.fetch_appointment(tenant_id, appointment_id)
        if stored is None:
            logger.warning("Edited appointment %s not found for tenant %s", appointment_id, tenant_id)
            return candidate

        catalog = await self._fetch_catalog(tenant_id, [stored])
        return replace(candidate, duration=booked_duration(stored, catalog))

    async def _fetch_catalog(
        self,
        tenant_id: str,
        appointments: Iterable[Appointment],
    ) -> Dict[str, Service]:
        service_ids: List[str] = []
        for appointment in appointments:
            for service_id in appointment.service_ids:
                if service_id not in service_ids:
                    service_ids.append(service_id)

        if not service_ids:
            return {}

        services = await self._services.fetch_services(tenant_id, service_ids)
        return {service.id: service for service in services}

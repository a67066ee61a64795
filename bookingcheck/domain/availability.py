"""
Availability orchestration: the single check run before an appointment is
created or moved.

Everything here is pure. Data is fetched by the caller and passed in through
an ``AvailabilityContext``, so the check runs synchronously without I/O.
"""

import logging
from dataclasses import dataclass, field, replace
from typing import Dict, List, Optional, Sequence

from .business_hours import BusinessHoursGate, ScheduleEntry
from .conflicts import find_conflict
from .durations import booked_duration, candidate_duration
from .models import (
    Appointment,
    AvailabilityResult,
    BusinessHours,
    ConflictSummary,
    ProfessionalSchedule,
    Service,
    day_of_week,
)

logger = logging.getLogger(__name__)


@dataclass
class AvailabilityContext:
    """Pre-fetched, tenant-scoped data an availability check runs against."""
    business_hours: List[BusinessHours] = field(default_factory=list)
    existing_appointments: List[Appointment] = field(default_factory=list)
    professional_schedule: Optional[List[ProfessionalSchedule]] = None
    services: Dict[str, Service] = field(default_factory=dict)

    def schedule_for(self, candidate: Appointment) -> Sequence[ScheduleEntry]:
        """
        A professional with a configured schedule is bound by it; otherwise the
        tenant business hours apply.
        """
        if candidate.professional_id and self.professional_schedule:
            return self.professional_schedule
        return self.business_hours


def check_availability(
    candidate: Appointment,
    context: AvailabilityContext,
    gate: Optional[BusinessHoursGate] = None,
) -> AvailabilityResult:
    """
    Decide whether the candidate appointment can be booked.

    Steps:
    1. Resolve the duration (explicit, else attached services, else 60)
    2. Check the relevant schedule (professional's own, else business hours)
    3. Look for an overlapping non-cancelled appointment on the same timeline

    Args:
        candidate: Appointment being created or edited
        context: Business hours, schedules, same-day appointments and services
        gate: Business hours gate; a closed-when-unconfigured gate by default

    Returns:
        AvailabilityResult describing the verdict
    """
    gate = gate or BusinessHoursGate()
    duration = candidate_duration(candidate, context.services)

    if not gate.is_open_for(
        day_of_week(candidate.date),
        candidate.start_minutes,
        duration,
        context.schedule_for(candidate),
    ):
        logger.debug(
            "Rejected %s %s (%d min): outside business hours",
            candidate.date,
            candidate.time,
            duration,
        )
        return AvailabilityResult.outside_business_hours()

    # Pin the resolved duration so conflict detection uses the same value.
    resolved = replace(candidate, duration=duration)
    conflict = find_conflict(resolved, context.existing_appointments, context.services)

    if conflict is not None:
        summary = ConflictSummary(
            id=conflict.id,
            client_name=conflict.client_name,
            date=conflict.date,
            time=conflict.time,
            duration=booked_duration(conflict, context.services),
        )
        logger.debug(
            "Rejected %s %s (%d min): conflicts with appointment %s (%s - %s)",
            candidate.date,
            candidate.time,
            duration,
            summary.id,
            summary.time,
            summary.end_time,
        )
        return AvailabilityResult.conflict(summary)

    return AvailabilityResult.ok()

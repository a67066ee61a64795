"""
Conflict detection between a candidate appointment and the existing bookings
of the same day.
"""

from typing import Iterable, Iterator, List, Optional

from .durations import ServiceCatalogMap, booked_duration, candidate_duration
from .intervals import overlaps
from .models import Appointment


def _shares_timeline(candidate: Appointment, existing: Appointment) -> bool:
    """
    Professional calendars are independent of each other and of the
    tenant-wide timeline of unassigned appointments.
    """
    return candidate.professional_id == existing.professional_id


def _iter_conflicts(
    candidate: Appointment,
    existing_appointments: Iterable[Appointment],
    catalog: Optional[ServiceCatalogMap],
) -> Iterator[Appointment]:
    start = candidate.start_minutes
    duration = candidate_duration(candidate, catalog)

    for existing in existing_appointments:
        if existing.date != candidate.date or existing.is_cancelled:
            continue
        if not _shares_timeline(candidate, existing):
            continue

        if overlaps(start, duration, existing.start_minutes, booked_duration(existing, catalog)):
            yield existing


def find_conflict(
    candidate: Appointment,
    existing_appointments: Iterable[Appointment],
    catalog: Optional[ServiceCatalogMap] = None,
) -> Optional[Appointment]:
    """
    Return the first existing appointment the candidate overlaps, or None.

    Cancelled appointments and appointments on other dates or other timelines
    never conflict. Back-to-back appointments do not conflict either.

    When editing, the caller must remove the candidate's own stored record from
    ``existing_appointments`` first.
    """
    return next(_iter_conflicts(candidate, existing_appointments, catalog), None)


def find_conflicts(
    candidate: Appointment,
    existing_appointments: Iterable[Appointment],
    catalog: Optional[ServiceCatalogMap] = None,
) -> List[Appointment]:
    """Return every existing appointment the candidate overlaps."""
    return list(_iter_conflicts(candidate, existing_appointments, catalog))

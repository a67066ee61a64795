"""
Appointment duration aggregation over attached services.
"""

import logging
from typing import Iterable, Mapping, Optional, Sequence

from .models import DEFAULT_DURATION_MINUTES, Appointment, Service

logger = logging.getLogger(__name__)

ServiceCatalogMap = Mapping[str, Service]


def total_duration(services: Iterable[Service]) -> int:
    """
    Sum the durations of the given services.

    A service without a duration counts as the default 60 minutes. An empty
    list yields 0; applying a default for service-less appointments is the
    caller's job.
    """
    return sum(
        service.duration if service.duration else DEFAULT_DURATION_MINUTES
        for service in services
    )


def resolve_service_durations(
    service_ids: Sequence[str],
    catalog: Optional[ServiceCatalogMap] = None,
) -> int:
    """
    Aggregate the durations of services referenced by id.

    Ids the catalog cannot resolve count as the default duration so that
    bookings keep working when catalog entries have been deleted.
    """
    catalog = catalog or {}
    total = 0

    for service_id in service_ids:
        service = catalog.get(service_id)
        if service is None:
            logger.warning(
                "Service %s not found in catalog, assuming %d minutes",
                service_id,
                DEFAULT_DURATION_MINUTES,
            )
            total += DEFAULT_DURATION_MINUTES
            continue
        total += total_duration([service])

    return total


def candidate_duration(
    appointment: Appointment,
    catalog: Optional[ServiceCatalogMap] = None,
) -> int:
    """
    Duration of an appointment being booked or edited.

    Order: explicit duration, then the attached services, then 60 minutes.
    """
    if appointment.duration is not None:
        return appointment.duration

    return resolve_service_durations(appointment.service_ids, catalog) or DEFAULT_DURATION_MINUTES


def booked_duration(
    appointment: Appointment,
    catalog: Optional[ServiceCatalogMap] = None,
) -> int:
    """
    Duration of an already booked appointment.

    Only the attached services count, else 60 minutes. The stored duration is
    ignored: it is not refreshed when a service's duration is edited later.
    """
    if appointment.service_ids:
        return resolve_service_durations(appointment.service_ids, catalog) or DEFAULT_DURATION_MINUTES

    return DEFAULT_DURATION_MINUTES

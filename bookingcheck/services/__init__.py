"""
Service layer helpers that orchestrate repositories and domain logic.
"""

from .booking import (
    AppointmentRepository,
    BookingService,
    BusinessHoursRepository,
    ProfessionalRepository,
    ServiceCatalog,
)
from .responses import to_http_error

__all__ = [
    "AppointmentRepository",
    "BookingService",
    "BusinessHoursRepository",
    "ProfessionalRepository",
    "ServiceCatalog",
    "to_http_error",
]

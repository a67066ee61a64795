"""
HTTP mapping of availability results.

External automations match on these bodies, so the keys are fixed.
"""

from typing import Any, Dict, Optional, Tuple

from ..domain.models import AvailabilityResult, UnavailableReason

HTTP_CONFLICT = 409


def to_http_error(result: AvailabilityResult) -> Optional[Tuple[int, Dict[str, Any]]]:
    """
    Translate a rejected availability result into ``(status, body)``.

    Returns None when the booking is available.
    """
    if result.available:
        return None

    if result.reason is UnavailableReason.OUTSIDE_BUSINESS_HOURS:
        return HTTP_CONFLICT, {"error": "outside_business_hours"}

    conflict = result.conflicting_appointment
    return HTTP_CONFLICT, {
        "error": "appointment_conflict",
        "conflictingAppointment": {
            "id": conflict.id,
            "clientName": conflict.client_name,
            "date": conflict.date,
            "time": conflict.time,
        },
    }

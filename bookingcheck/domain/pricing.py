"""
Promotional pricing rules.

``today`` is always passed in as a canonical ``YYYY-MM-DD`` string, so the
resolver never reads the wall clock. Canonical dates compare correctly as
plain strings.
"""

from decimal import Decimal
from typing import Iterable

from .models import Service


def is_in_promotion(service: Service, today: str) -> bool:
    """True iff the service has a complete promotion whose inclusive window contains ``today``."""
    if (
        service.promotional_value is None
        or not service.promotion_start_date
        or not service.promotion_end_date
    ):
        return False

    return service.promotion_start_date <= today <= service.promotion_end_date


def effective_value(service: Service, today: str) -> Decimal:
    """Return the price actually charged for the service on ``today``."""
    if is_in_promotion(service, today):
        return service.promotional_value
    return service.value


def total_effective_value(services: Iterable[Service], today: str) -> Decimal:
    """Price of an appointment made of several services."""
    return sum((effective_value(service, today) for service in services), Decimal("0"))

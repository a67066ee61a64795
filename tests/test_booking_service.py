"""
Tests for the BookingService orchestration layer.
"""

import asyncio
from decimal import Decimal
from typing import Dict, List

from bookingcheck.domain.business_hours import BusinessHoursGate
from bookingcheck.domain.models import (
    Appointment,
    BusinessHours,
    ProfessionalSchedule,
    Service,
    UnavailableReason,
)
from bookingcheck.services.booking import BookingService

TENANT = "t1"
MONDAY = "2025-01-13"


class StubRepository:
    """Minimal stub matching every repository protocol."""

    def __init__(
        self,
        appointments: List[Appointment] = (),
        business_hours: List[BusinessHours] = (),
        schedules: Dict[str, List[ProfessionalSchedule]] = None,
        services: List[Service] = (),
    ):
        self._appointments = list(appointments)
        self._business_hours = list(business_hours)
        self._schedules = schedules or {}
        self._services = list(services)
        self.calls: List[tuple] = []

    async def fetch_appointments_for_date(self, tenant_id, date):
        self.calls.append(("appointments", tenant_id, date))
        return [apt for apt in self._appointments if apt.tenant_id == tenant_id and apt.date == date]

    async def fetch_appointment(self, tenant_id, appointment_id):
        self.calls.append(("appointment", tenant_id, appointment_id))
        return next(
            (apt for apt in self._appointments if apt.tenant_id == tenant_id and apt.id == appointment_id),
            None,
        )

    async def fetch_business_hours(self, tenant_id):
        self.calls.append(("business_hours", tenant_id))
        return [row for row in self._business_hours if row.tenant_id == tenant_id]

    async def fetch_schedule(self, tenant_id, professional_id):
        self.calls.append(("schedule", tenant_id, professional_id))
        return self._schedules.get(professional_id, [])

    async def fetch_services(self, tenant_id, service_ids):
        self.calls.append(("services", tenant_id, tuple(service_ids)))
        return [s for s in self._services if s.tenant_id == tenant_id and s.id in service_ids]


def _build_service(repository: StubRepository, **kwargs) -> BookingService:
    return BookingService(
        appointments=repository,
        business_hours=repository,
        professionals=repository,
        services=repository,
        **kwargs,
    )


def _hours():
    return [
        BusinessHours(id="bh-mon", tenant_id=TENANT, day_of_week=1, start_time="09:00", end_time="18:00"),
        BusinessHours(id="bh-other", tenant_id="t2", day_of_week=1, start_time="00:00", end_time="23:59"),
    ]


def _services():
    return [
        Service(id="svc-cut", tenant_id=TENANT, name="Corte", value="50", duration=30),
        Service(
            id="svc-beard",
            tenant_id=TENANT,
            name="Barba",
            value="35",
            duration=15,
            promotional_value="25",
            promotion_start_date="2025-01-10",
            promotion_end_date="2025-01-20",
        ),
        Service(id="svc-color", tenant_id=TENANT, name="Coloração", value="120", duration=90),
    ]


def _apt(apt_id, time, **kwargs):
    kwargs.setdefault("tenant_id", TENANT)
    return Appointment(id=apt_id, client_id=f"c-{apt_id}", date=MONDAY, time=time, **kwargs)


def test_check_booking_available():
    repository = StubRepository(business_hours=_hours(), services=_services())
    service = _build_service(repository)

    result = asyncio.run(service.check_booking(TENANT, _apt("new", "10:00", service_ids=["svc-cut"])))

    assert result.available
    assert ("appointments", TENANT, MONDAY) in repository.calls


def test_check_booking_sizes_existing_appointments_from_catalog():
    existing = _apt("a1", "10:00", duration=30, service_ids=["svc-color"], client_name="Maria")
    repository = StubRepository(appointments=[existing], business_hours=_hours(), services=_services())
    service = _build_service(repository)

    result = asyncio.run(service.check_booking(TENANT, _apt("new", "11:00", service_ids=["svc-cut"])))

    assert result.reason is UnavailableReason.CONFLICT
    assert result.conflicting_appointment.id == "a1"
    assert result.conflicting_appointment.end_time == "11:30"
    assert ("services", TENANT, ("svc-cut", "svc-color")) in repository.calls


def test_edit_excludes_own_record():
    existing = _apt("a1", "10:00", duration=60)
    repository = StubRepository(appointments=[existing], business_hours=_hours())
    service = _build_service(repository)
    moved = _apt("a1", "10:30", duration=60)

    blocked = asyncio.run(service.check_booking(TENANT, moved))
    allowed = asyncio.run(service.check_booking(TENANT, moved, exclude_appointment_id="a1"))

    assert not blocked.available
    assert allowed.available


def test_other_tenants_data_is_not_used():
    foreign = _apt("x1", "10:00", duration=60, tenant_id="t2")
    repository = StubRepository(appointments=[foreign], business_hours=_hours())
    service = _build_service(repository)

    assert asyncio.run(service.check_booking(TENANT, _apt("new", "10:00"))).available
    assert not asyncio.run(service.check_booking(TENANT, _apt("new", "07:00"))).available


def test_professional_schedule_is_fetched():
    repository = StubRepository(
        business_hours=_hours(),
        schedules={"pro-ana": [ProfessionalSchedule(day_of_week=1, start_time="12:00", end_time="16:00")]},
    )
    service = _build_service(repository)

    result = asyncio.run(service.check_booking(TENANT, _apt("new", "10:00", professional_id="pro-ana")))

    assert result.reason is UnavailableReason.OUTSIDE_BUSINESS_HOURS
    assert ("schedule", TENANT, "pro-ana") in repository.calls


def test_unconfigured_tenant_uses_gate_policy():
    repository = StubRepository()

    closed = asyncio.run(_build_service(repository).check_booking(TENANT, _apt("new", "10:00")))
    opened = asyncio.run(
        _build_service(repository, gate=BusinessHoursGate(open_when_unconfigured=True)).check_booking(
            TENANT, _apt("new", "10:00")
        )
    )

    assert not closed.available
    assert opened.available


def test_find_open_windows():
    repository = StubRepository(
        appointments=[
            _apt("a1", "10:00", service_ids=["svc-color"]),
            _apt("a2", "15:00", duration=60, professional_id="pro-ana"),
        ],
        business_hours=_hours(),
        services=_services(),
    )
    service = _build_service(repository, min_window_minutes=60)

    day = asyncio.run(service.find_open_windows(TENANT, MONDAY))

    assert [str(window) for window in day.windows] == ["09:00 - 10:00", "11:30 - 18:00"]


def test_find_open_windows_for_professional():
    repository = StubRepository(
        appointments=[_apt("a2", "15:00", duration=60, professional_id="pro-ana")],
        business_hours=_hours(),
        schedules={"pro-ana": [ProfessionalSchedule(day_of_week=1, start_time="12:00", end_time="16:00")]},
    )
    service = _build_service(repository)

    day = asyncio.run(service.find_open_windows(TENANT, MONDAY, professional_id="pro-ana"))

    assert [str(window) for window in day.windows] == ["12:00 - 15:00"]


def test_quote_applies_promotions_and_skips_unknown_services():
    repository = StubRepository(services=_services())
    service = _build_service(repository)

    during = asyncio.run(service.quote(TENANT, ["svc-cut", "svc-beard", "gone"], "2025-01-15"))
    after = asyncio.run(service.quote(TENANT, ["svc-cut", "svc-beard"], "2025-01-21"))

    assert during == Decimal("75")
    assert after == Decimal("85")


def test_edit_without_services_keeps_stored_duration():
    moving = _apt("a1", "10:00", service_ids=["svc-cut"])
    following = _apt("a2", "11:00", service_ids=["svc-cut"])
    repository = StubRepository(appointments=[moving, following], business_hours=_hours(), services=_services())
    service = _build_service(repository)
    moved = _apt("a1", "10:30")

    result = asyncio.run(service.check_booking(TENANT, moved, exclude_appointment_id="a1"))

    assert result.available
    assert ("appointment", TENANT, "a1") in repository.calls


def test_edit_with_explicit_duration_skips_stored_lookup():
    following = _apt("a2", "11:00", service_ids=["svc-cut"])
    repository = StubRepository(appointments=[_apt("a1", "10:00"), following], business_hours=_hours())
    service = _build_service(repository)

    result = asyncio.run(
        service.check_booking(TENANT, _apt("a1", "10:30", duration=45), exclude_appointment_id="a1")
    )

    assert result.reason is UnavailableReason.CONFLICT
    assert not any(call[0] == "appointment" for call in repository.calls)

"""
JSON file repository for booking data.

Reads an export of the scheduling database (camelCase records, as the REST
API serves them) and answers the repository protocols of the service layer.
Every query is scoped by tenant.
"""

import json
import logging
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Sequence, TypeVar

from ..domain.exceptions import RepositoryError
from ..domain.models import (
    Appointment,
    BusinessHours,
    Professional,
    ProfessionalSchedule,
    Service,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _appointment_from_record(record: Dict[str, Any], client_names: Dict[str, str]) -> Appointment:
    return Appointment(
        id=record["id"],
        tenant_id=record["tenantId"],
        client_id=record["clientId"],
        date=record["date"],
        time=record["time"],
        duration=record.get("duration"),
        status=record.get("status", "scheduled"),
        service_ids=record.get("serviceIds", []),
        professional_id=record.get("professionalId"),
        client_name=record.get("clientName") or client_names.get(record["clientId"]),
    )


def _service_from_record(record: Dict[str, Any]) -> Service:
    return Service(
        id=record["id"],
        tenant_id=record["tenantId"],
        name=record["name"],
        category=record.get("category", ""),
        value=record["value"],
        duration=record.get("duration", 60),
        promotional_value=record.get("promotionalValue"),
        promotion_start_date=record.get("promotionStartDate"),
        promotion_end_date=record.get("promotionEndDate"),
    )


def _business_hours_from_record(record: Dict[str, Any]) -> BusinessHours:
    return BusinessHours(
        id=record["id"],
        tenant_id=record["tenantId"],
        day_of_week=int(record["dayOfWeek"]),
        start_time=record["startTime"],
        end_time=record["endTime"],
        active=bool(record.get("active", True)),
    )


def _professional_from_record(record: Dict[str, Any]) -> Professional:
    return Professional(
        id=record["id"],
        tenant_id=record["tenantId"],
        name=record["name"],
        schedules=[
            ProfessionalSchedule(
                day_of_week=int(entry["dayOfWeek"]),
                start_time=entry["startTime"],
                end_time=entry["endTime"],
                active=bool(entry.get("active", True)),
            )
            for entry in record.get("schedules", [])
        ],
    )


class JsonRepository:
    """
    Repository backed by a single JSON document.

    Implements AppointmentRepository, BusinessHoursRepository,
    ProfessionalRepository and ServiceCatalog.
    """

    def __init__(self, data_file: Path):
        """
        Initialize the repository.

        Args:
            data_file: Path to the JSON export

        Raises:
            RepositoryError: If the file cannot be read or is not a JSON object
        """
        self.data_file = Path(data_file)
        self._load_data()

    def _load_data(self) -> None:
        """Load and parse every collection of the data file."""
        try:
            with open(self.data_file, "r", encoding="utf-8") as f:
                data = json.load(f)
        except OSError as exc:
            raise RepositoryError(f"Could not read data file {self.data_file}: {exc}") from exc
        except json.JSONDecodeError as exc:
            raise RepositoryError(f"Invalid JSON in {self.data_file}: {exc}") from exc

        if not isinstance(data, dict):
            raise RepositoryError(f"Data file {self.data_file} must contain an object at the root level.")

        client_names = {
            client["id"]: client.get("name", "")
            for client in data.get("clients", [])
            if isinstance(client, dict) and "id" in client
        }

        self.appointments = self._parse_collection(
            data, "appointments", lambda record: _appointment_from_record(record, client_names)
        )
        self.services = self._parse_collection(data, "services", _service_from_record)
        self.business_hours = self._parse_collection(data, "businessHours", _business_hours_from_record)
        self.professionals = self._parse_collection(data, "professionals", _professional_from_record)

    def _parse_collection(
        self,
        data: Dict[str, Any],
        key: str,
        parse: Callable[[Dict[str, Any]], T],
    ) -> List[T]:
        records = data.get(key, [])
        if not isinstance(records, list):
            raise RepositoryError(f"'{key}' in {self.data_file} must be a list")

        parsed: List[T] = []
        for index, record in enumerate(records):
            try:
                parsed.append(parse(record))
            except (KeyError, TypeError, ValueError) as exc:
                # Skip invalid records
                logger.warning("Skipping %s[%d] in %s: %s", key, index, self.data_file, exc)
        return parsed

    async def fetch_appointments_for_date(self, tenant_id: str, date: str) -> List[Appointment]:
        return [
            appointment for appointment in self.appointments
            if appointment.tenant_id == tenant_id and appointment.date == date
        ]

    async def fetch_appointment(self, tenant_id: str, appointment_id: str) -> Optional[Appointment]:
        for appointment in self.appointments:
            if appointment.id == appointment_id and appointment.tenant_id == tenant_id:
                return appointment
        return None

    async def fetch_business_hours(self, tenant_id: str) -> List[BusinessHours]:
        return [row for row in self.business_hours if row.tenant_id == tenant_id]

    async def fetch_active_business_hours(self, tenant_id: str, day_of_week: int) -> List[BusinessHours]:
        return [
            row for row in self.business_hours
            if row.tenant_id == tenant_id and row.day_of_week == day_of_week and row.active
        ]

    async def fetch_schedule(self, tenant_id: str, professional_id: str) -> List[ProfessionalSchedule]:
        for professional in self.professionals:
            if professional.id == professional_id and professional.tenant_id == tenant_id:
                return list(professional.schedules)

        logger.warning("Professional %s not found for tenant %s", professional_id, tenant_id)
        return []

    async def fetch_services(self, tenant_id: str, service_ids: Sequence[str]) -> List[Service]:
        wanted = set(service_ids)
        return [
            service for service in self.services
            if service.tenant_id == tenant_id and service.id in wanted
        ]

    def list_services(self, tenant_id: str) -> List[Service]:
        """All services of a tenant, sorted by category and name."""
        return sorted(
            (service for service in self.services if service.tenant_id == tenant_id),
            key=lambda service: (service.category, service.name),
        )

"""Service catalog with pricing and durations, plus the in-progress selection."""

import logging
from typing import Iterable, Optional

from barbershop.errors import ServiceNotFoundError
from barbershop.schemas.booking_schema import ServiceSnapshot
from barbershop.schemas.catalog_schema import ServiceOffering
from barbershop.schemas.provider_schema import ProfessionLevel

logger = logging.getLogger(__name__)

DEFAULT_SERVICES: list[dict] = [
    {"id": "s1", "name": "Corte Normal", "price": 25000, "duration": 30,
     "eligible_levels": "Maestro Barbero, Barbero Artista, Estilista Senior"},
    {"id": "s2", "name": "Corte Clásico con Tijera", "price": 40000, "duration": 45,
     "eligible_levels": "Maestro Barbero, Estilista Senior"},
    {"id": "s3", "name": "Corte + Barba", "price": 55000, "duration": 60,
     "eligible_levels": "Maestro Barbero, Barbero Artista"},
    {"id": "s4", "name": "Arreglo de Barba", "price": 20000, "duration": 30,
     "eligible_levels": "Maestro Barbero"},
    {"id": "s5", "name": "Limpieza Facial Básica", "price": 60000, "duration": 60,
     "eligible_levels": "Estilista Senior"},
]


def snapshot(service: ServiceOffering) -> ServiceSnapshot:
    """Denormalized copy stored on an appointment."""
    return ServiceSnapshot(name=service.name, price=service.price, duration=service.duration)


class ServiceCatalog:
    """The bookable service offerings. Admin edits never touch past bookings."""

    def __init__(self, services: Optional[Iterable[ServiceOffering]] = None) -> None:
        if services is None:
            services = [ServiceOffering.model_validate(raw) for raw in DEFAULT_SERVICES]
        self._services: dict[str, ServiceOffering] = {s.id: s for s in services}

    def __len__(self) -> int:
        return len(self._services)

    def __contains__(self, service_id: object) -> bool:
        return service_id in self._services

    def all(self) -> list[ServiceOffering]:
        return list(self._services.values())

    def get(self, service_id: str) -> ServiceOffering:
        try:
            return self._services[service_id]
        except KeyError:
            raise ServiceNotFoundError(f"Service {service_id} not found.") from None

    def add(self, service: ServiceOffering) -> ServiceOffering:
        if service.id in self._services:
            raise ValueError(f"Service {service.id} already exists.")
        self._services[service.id] = service
        logger.info("Service added: %s (%s)", service.id, service.name)
        return service

    def update(self, service_id: str, **changes) -> ServiceOffering:
        current = self.get(service_id)
        changes.pop("id", None)
        updated = ServiceOffering.model_validate({**current.model_dump(), **changes})
        self._services[service_id] = updated
        logger.info("Service updated: %s fields=%s", service_id, sorted(changes))
        return updated

    def remove(self, service_id: str) -> ServiceOffering:
        removed = self.get(service_id)
        del self._services[service_id]
        logger.info("Service removed: %s", service_id)
        return removed

    def for_level(self, level: ProfessionLevel) -> list[ServiceOffering]:
        """Services a provider of the given tier can perform."""
        return [s for s in self._services.values() if level in s.eligible_levels]


class ServiceSelection:
    """Services picked for one in-progress booking.

    Order carries no meaning; selecting the same id twice is a no-op.
    """

    def __init__(self) -> None:
        self._selected: dict[str, ServiceOffering] = {}

    def __len__(self) -> int:
        return len(self._selected)

    def __contains__(self, service_id: object) -> bool:
        return service_id in self._selected

    @property
    def is_empty(self) -> bool:
        return not self._selected

    @property
    def services(self) -> list[ServiceOffering]:
        return list(self._selected.values())

    def add(self, service: ServiceOffering) -> None:
        self._selected[service.id] = service

    def toggle(self, service: ServiceOffering) -> bool:
        """Select or deselect a service. Returns True if now selected."""
        if service.id in self._selected:
            del self._selected[service.id]
            return False
        self._selected[service.id] = service
        return True

    def replace(self, services: Iterable[ServiceOffering]) -> None:
        """Swap the whole selection, e.g. when applying a recommendation."""
        self._selected = {s.id: s for s in services}

    def clear(self) -> None:
        self._selected.clear()

    def total_price(self) -> int:
        return sum(s.price for s in self._selected.values())

    def total_duration(self) -> int:
        return sum(s.duration for s in self._selected.values())

    def snapshots(self) -> list[ServiceSnapshot]:
        return [snapshot(s) for s in self._selected.values()]

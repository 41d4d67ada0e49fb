"""
BarberShop: the scheduling core as one explicit object.

It owns the provider directory, the service catalog, the appointment book
and the in-progress selection, and is the only surface that mutates them.
Presentation code issues commands here and reads query results; every
mutation writes the affected collection back through the key-value store.
"""

import logging
from datetime import datetime
from typing import Callable, Optional, TypeVar

from pydantic import BaseModel, ValidationError

from barbershop.conversation.booking_flow import BookingFlow, FlowState, FlowTrigger
from barbershop.errors import BookingValidationError
from barbershop.notifications import LogNotifier, Notifier
from barbershop.schemas.booking_schema import Appointment, AvailabilityResult, HistoryDay
from barbershop.schemas.catalog_schema import ServiceOffering
from barbershop.schemas.provider_schema import Provider, ProviderFilter, Review
from barbershop.schemas.recommendation_schema import StyleRecommendation
from barbershop.storage import InMemoryStore, KeyValueStore, StorageKey
from barbershop.tools.availability import (
    DEFAULT_HOURS,
    BusinessHours,
    busy_intervals,
    check_availability,
)
from barbershop.tools.booking import AppointmentBook
from barbershop.tools.providers import ProviderDirectory, sort_by_distance
from barbershop.tools.services import ServiceCatalog, ServiceSelection

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)

DEFAULT_CLIENT_ID = "Usuario Demo"


class BarberShop:
    """Scheduling core for one client session (single logical writer)."""

    def __init__(
        self,
        store: Optional[KeyValueStore] = None,
        notifier: Optional[Notifier] = None,
        clock: Callable[[], datetime] = datetime.now,
        hours: BusinessHours = DEFAULT_HOURS,
        client_id: str = DEFAULT_CLIENT_ID,
    ) -> None:
        self.store = store or InMemoryStore()
        self.notifier = notifier or LogNotifier()
        self.client_id = client_id
        self._clock = clock
        self._hours = hours

        self.providers = ProviderDirectory(self._load_models(StorageKey.PROVIDERS, Provider))
        self.catalog = ServiceCatalog(self._load_models(StorageKey.SERVICES, ServiceOffering))
        self.appointments = AppointmentBook(
            self._load_models(StorageKey.APPOINTMENTS, Appointment) or [],
            clock=clock,
            hours=hours,
        )
        self.admin_mode = bool(self.store.load(StorageKey.ADMIN_MODE, False))

        self.selection = ServiceSelection()
        self.selected_provider: Optional[Provider] = None
        self.flow = BookingFlow()

    # ------------------------------------------------------------------ #
    # Persistence
    # ------------------------------------------------------------------ #

    def _load_models(self, key: StorageKey, model: type[M]) -> Optional[list[M]]:
        """Load a stored collection, or None to fall back to seed data."""
        raw = self.store.load(key, None)
        if raw is None:
            return None
        try:
            return [model.model_validate(item) for item in raw]
        except (ValidationError, TypeError):
            logger.warning("Discarding unreadable %s collection", key.value, exc_info=True)
            return None

    def _save(self, key: StorageKey) -> None:
        if key == StorageKey.APPOINTMENTS:
            items = self.appointments.all()
        elif key == StorageKey.PROVIDERS:
            items = self.providers.all()
        elif key == StorageKey.SERVICES:
            items = self.catalog.all()
        else:
            self.store.save(key, self.admin_mode)
            return
        self.store.save(key, [item.model_dump(mode="json") for item in items])

    def save_all(self) -> None:
        """Manual backup of every collection."""
        for key in StorageKey:
            self._save(key)
        logger.info("All collections saved")

    def today(self) -> str:
        return self._clock().date().isoformat()

    # ------------------------------------------------------------------ #
    # Service selection
    # ------------------------------------------------------------------ #

    def _sync_flow_with_selection(self) -> None:
        state = self.flow.current_state
        if state == FlowState.CONFIRMED:
            self.flow.transition(FlowTrigger.START_OVER)
            state = self.flow.current_state
        if self.selection.is_empty and state != FlowState.SERVICE_SELECTION:
            self.selected_provider = None
            self.flow.transition(FlowTrigger.SERVICES_CLEARED)
        elif not self.selection.is_empty and state == FlowState.SERVICE_SELECTION:
            self.flow.transition(FlowTrigger.SERVICES_CHOSEN)

    def toggle_service(self, service_id: str) -> bool:
        """Select or deselect a catalog service. Returns True if now selected."""
        selected = self.selection.toggle(self.catalog.get(service_id))
        self._sync_flow_with_selection()
        return selected

    def apply_recommendation(self, recommendation: StyleRecommendation) -> list[ServiceOffering]:
        """Replace the selection with the recommended services still in the catalog."""
        services = [
            self.catalog.get(sid)
            for sid in recommendation.recommended_service_ids
            if sid in self.catalog
        ]
        self.selection.replace(services)
        self._sync_flow_with_selection()
        return services

    def reset_selection(self) -> None:
        self.selection.clear()
        self.selected_provider = None
        self.flow.reset()

    # ------------------------------------------------------------------ #
    # Providers
    # ------------------------------------------------------------------ #

    def find_providers(self, criteria: Optional[ProviderFilter] = None) -> list[Provider]:
        """Filtered providers, nearest first when an origin is known."""
        criteria = criteria or ProviderFilter()
        return sort_by_distance(self.providers.filter(criteria), criteria.origin)

    def select_provider(self, provider_id: str) -> Provider:
        provider = self.providers.get(provider_id)
        if self.selection.is_empty:
            raise ValueError("Choose at least one service before picking a provider.")
        if not provider.is_available and not self.admin_mode:
            raise ValueError(f"{provider.name} is not taking bookings right now.")
        if self.flow.current_state == FlowState.SCHEDULING:
            self.flow.transition(FlowTrigger.CHANGE_PROVIDER)
        self.flow.transition(FlowTrigger.PROVIDER_CHOSEN)
        self.selected_provider = provider
        return provider

    def provider_calendar(self, provider_id: str, date: str) -> list[tuple[str, str]]:
        self.providers.get(provider_id)
        return busy_intervals(provider_id, date, self.appointments.all())

    def open_slots(
        self,
        provider_id: str,
        date: str,
        duration_minutes: Optional[int] = None,
        preferred_time: Optional[str] = None,
    ) -> AvailabilityResult:
        """Availability for a provider; duration defaults to the current selection."""
        self.providers.get(provider_id)
        if duration_minutes is None:
            duration_minutes = self.selection.total_duration()
        if duration_minutes <= 0:
            raise ValueError("Duration must be positive; select services first.")
        return check_availability(
            provider_id, date, duration_minutes, self.appointments.all(),
            preferred_time=preferred_time, now=self._clock(), hours=self._hours,
        )

    def add_review(self, provider_id: str, review: Review) -> Provider:
        provider = self.providers.add_review(provider_id, review)
        self._save(StorageKey.PROVIDERS)
        return provider

    # ------------------------------------------------------------------ #
    # Booking lifecycle
    # ------------------------------------------------------------------ #

    def book(self, date: str, time: str, client_id: Optional[str] = None) -> Appointment:
        """Book the current selection with the selected provider.

        Raises:
            ValueError: If no provider or no services are selected.
            BookingValidationError: If the scheduling engine rejects the slot.
        """
        provider = self.selected_provider
        if provider is None or self.selection.is_empty:
            raise ValueError("Select services and a provider before booking.")

        try:
            appointment = self.appointments.create(
                provider_id=provider.id,
                provider_name=provider.name,
                client_id=client_id or self.client_id,
                services=self.selection.snapshots(),
                date=date,
                time=time,
            )
        except BookingValidationError:
            self.flow.transition(FlowTrigger.BOOKING_REJECTED)
            raise

        self._save(StorageKey.APPOINTMENTS)
        self.selection.clear()
        self.selected_provider = None
        self.flow.transition(FlowTrigger.BOOKING_CONFIRMED)
        self.notifier.notify(
            "Cita Confirmada", f"Cita con {provider.name} el {appointment.date} a las {appointment.time}."
        )
        return appointment

    def cancel_appointment(self, appointment_id: str) -> Appointment:
        already = self.appointments.get(appointment_id).is_cancelled
        appointment = self.appointments.cancel(appointment_id)
        if not already:
            self._save(StorageKey.APPOINTMENTS)
            self.notifier.notify(
                "Cita Cancelada", f"Tu cita con {appointment.provider_name} el {appointment.date} fue cancelada."
            )
        return appointment

    def edit_appointment(self, appointment_id: str, new_date: str, new_time: str) -> Appointment:
        appointment = self.appointments.edit(appointment_id, new_date, new_time)
        self._save(StorageKey.APPOINTMENTS)
        self.notifier.notify(
            "Cita Reprogramada",
            f"Cita con {appointment.provider_name} movida al {appointment.date} a las {appointment.time}.",
        )
        return appointment

    def upcoming(self, reference_date: Optional[str] = None) -> list[Appointment]:
        return self.appointments.list_upcoming(reference_date or self.today())

    def history(self, reference_date: Optional[str] = None) -> dict[str, HistoryDay]:
        return self.appointments.list_history(reference_date or self.today())

    # ------------------------------------------------------------------ #
    # Admin
    # ------------------------------------------------------------------ #

    def set_admin_mode(self, enabled: bool) -> None:
        self.admin_mode = enabled
        self._save(StorageKey.ADMIN_MODE)
        logger.info("Admin mode %s", "enabled" if enabled else "disabled")

    def _require_admin(self) -> None:
        if not self.admin_mode:
            raise PermissionError("Admin mode is required for this action.")

    def add_provider(self, provider: Provider) -> Provider:
        self._require_admin()
        added = self.providers.add(provider)
        self._save(StorageKey.PROVIDERS)
        return added

    def update_provider(self, provider_id: str, **changes) -> Provider:
        self._require_admin()
        updated = self.providers.update(provider_id, **changes)
        self._save(StorageKey.PROVIDERS)
        return updated

    def set_provider_availability(self, provider_id: str, is_available: bool) -> Provider:
        self._require_admin()
        updated = self.providers.set_availability(provider_id, is_available)
        self._save(StorageKey.PROVIDERS)
        return updated

    def add_service(self, service: ServiceOffering) -> ServiceOffering:
        self._require_admin()
        added = self.catalog.add(service)
        self._save(StorageKey.SERVICES)
        return added

    def update_service(self, service_id: str, **changes) -> ServiceOffering:
        self._require_admin()
        updated = self.catalog.update(service_id, **changes)
        self._save(StorageKey.SERVICES)
        return updated

    def remove_service(self, service_id: str) -> ServiceOffering:
        """Remove from the catalog. Booked appointments keep their snapshots."""
        self._require_admin()
        removed = self.catalog.remove(service_id)
        if service_id in self.selection:
            self.selection.toggle(removed)
            self._sync_flow_with_selection()
        self._save(StorageKey.SERVICES)
        return removed

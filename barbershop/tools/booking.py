"""
Appointment lifecycle: create, reschedule, cancel, and agenda queries.

AppointmentBook owns the authoritative appointment list. Validation runs
before any write, so a rejected create or edit leaves the list untouched.
"""

import logging
import uuid
from datetime import datetime
from typing import Callable, Iterable, Optional

from barbershop.errors import AppointmentNotFoundError, BookingValidationError
from barbershop.schemas.booking_schema import (
    Appointment,
    AppointmentStatus,
    HistoryDay,
    ServiceSnapshot,
    validate_date,
    validate_time,
)
from barbershop.tools.availability import DEFAULT_HOURS, BusinessHours, validate_booking
from barbershop.utils import add_minutes

logger = logging.getLogger(__name__)


class AppointmentBook:
    """The appointment collection and its only mutation surface."""

    def __init__(
        self,
        appointments: Optional[Iterable[Appointment]] = None,
        clock: Callable[[], datetime] = datetime.now,
        hours: BusinessHours = DEFAULT_HOURS,
    ) -> None:
        self._appointments: list[Appointment] = list(appointments or [])
        self._clock = clock
        self._hours = hours

    def __len__(self) -> int:
        return len(self._appointments)

    def all(self) -> list[Appointment]:
        return list(self._appointments)

    def get(self, appointment_id: str) -> Appointment:
        for app in self._appointments:
            if app.id == appointment_id:
                return app
        raise AppointmentNotFoundError(f"Appointment {appointment_id} not found.")

    def _new_id(self) -> str:
        taken = {app.id for app in self._appointments}
        while True:
            candidate = f"AP-{uuid.uuid4().hex[:10].upper()}"
            if candidate not in taken:
                return candidate

    def _validate(
        self,
        provider_id: str,
        date: str,
        time: str,
        duration: int,
        exclude_appointment_id: Optional[str] = None,
    ) -> None:
        result = validate_booking(
            provider_id, date, time, duration, self._appointments,
            now=self._clock(),
            exclude_appointment_id=exclude_appointment_id,
            hours=self._hours,
        )
        if not result.ok:
            logger.info(
                "Booking rejected for %s on %s at %s: %s",
                provider_id, date, time, result.reason.value,
            )
            raise BookingValidationError(result.reason, result.message, result.conflicting_ids)

    # ------------------------------------------------------------------ #
    # Commands
    # ------------------------------------------------------------------ #

    def create(
        self,
        provider_id: str,
        provider_name: str,
        client_id: str,
        services: list[ServiceSnapshot],
        date: str,
        time: str,
    ) -> Appointment:
        """Validate and append a confirmed appointment.

        Raises:
            ValueError: If no services are given or date/time are malformed.
            BookingValidationError: If the slot is in the past, outside
                business hours, or overlaps another booking.
        """
        if not services:
            raise ValueError("An appointment needs at least one service.")
        date = validate_date(date)
        time = validate_time(time)
        duration = sum(s.duration for s in services)

        self._validate(provider_id, date, time, duration)

        appointment = Appointment(
            id=self._new_id(),
            provider_id=provider_id,
            provider_name=provider_name,
            client_id=client_id,
            services=list(services),
            total=sum(s.price for s in services),
            date=date,
            time=time,
            end_time=add_minutes(time, duration),
            status=AppointmentStatus.CONFIRMED,
        )
        self._appointments.append(appointment)
        logger.info(
            "Appointment created: %s with %s on %s %s-%s",
            appointment.id, provider_id, date, time, appointment.end_time,
        )
        return appointment

    def cancel(self, appointment_id: str) -> Appointment:
        """Flag an appointment cancelled. The record stays for history.

        Cancelling twice is a no-op.
        """
        appointment = self.get(appointment_id)
        if appointment.is_cancelled:
            logger.debug("Appointment %s already cancelled", appointment_id)
            return appointment
        appointment.status = AppointmentStatus.CANCELLED
        logger.info("Appointment cancelled: %s", appointment_id)
        return appointment

    def edit(self, appointment_id: str, new_date: str, new_time: str) -> Appointment:
        """Reschedule in place, re-validating against every other booking."""
        appointment = self.get(appointment_id)
        if appointment.is_cancelled:
            raise ValueError(f"Appointment {appointment_id} is cancelled and cannot be edited.")
        new_date = validate_date(new_date)
        new_time = validate_time(new_time)

        self._validate(
            appointment.provider_id, new_date, new_time, appointment.duration,
            exclude_appointment_id=appointment.id,
        )

        appointment.date = new_date
        appointment.time = new_time
        appointment.end_time = add_minutes(new_time, appointment.duration)
        logger.info("Appointment rescheduled: %s to %s %s", appointment_id, new_date, new_time)
        return appointment

    # ------------------------------------------------------------------ #
    # Queries
    # ------------------------------------------------------------------ #

    def list_upcoming(self, reference_date: str) -> list[Appointment]:
        """Live appointments on or after reference_date, soonest first."""
        upcoming = [
            app for app in self._appointments
            if app.date >= reference_date and not app.is_cancelled
        ]
        return sorted(upcoming, key=lambda app: (app.date, app.time))

    def list_upcoming_for_date(self, reference_date: str, day: str) -> list[Appointment]:
        return [app for app in self.list_upcoming(reference_date) if app.date == day]

    def list_history(self, reference_date: str) -> dict[str, HistoryDay]:
        """Past or cancelled appointments grouped per day, newest day first."""
        past = [
            app for app in self._appointments
            if app.date < reference_date or app.is_cancelled
        ]
        groups: dict[str, HistoryDay] = {}
        for app in sorted(past, key=lambda app: app.date, reverse=True):
            day = groups.setdefault(app.date, HistoryDay(date=app.date))
            day.appointments.append(app)
            day.total += app.total
        return groups

    def for_client(self, client_id: str) -> list[Appointment]:
        return [app for app in self._appointments if app.client_id == client_id]

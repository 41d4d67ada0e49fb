"""
Scheduling engine: booking validation and derived provider availability.

A provider's calendar is never stored; busy intervals are derived from the
appointment set each time. Every function here is a pure computation over
the appointments passed in and never mutates them.
"""

import logging
from dataclasses import dataclass
from datetime import date as date_cls
from datetime import datetime, timedelta
from typing import Iterable, Optional

from barbershop.config import settings
from barbershop.errors import BookingRejection
from barbershop.schemas.booking_schema import (
    Appointment,
    AvailabilityResult,
    AvailabilitySlot,
    DateAvailability,
    ValidationResult,
)
from barbershop.utils import MINUTES_PER_DAY, add_minutes, minutes_to_time, time_to_minutes

logger = logging.getLogger(__name__)

MAX_SLOTS_RETURNED = 5


@dataclass(frozen=True)
class BusinessHours:
    """Opening window in minutes since midnight.

    Only the start of a booking is bounded unless ``bound_end`` is set.
    """

    opening_minute: int = settings.business.opening_minute
    closing_minute: int = settings.business.closing_minute
    bound_end: bool = settings.business.bound_end
    slot_step_minutes: int = settings.business.slot_step_minutes
    search_days: int = settings.business.availability_search_days

    def describe(self) -> str:
        return f"{minutes_to_time(self.opening_minute)} to {minutes_to_time(self.closing_minute)}"


DEFAULT_HOURS = BusinessHours()


def _same_calendar(
    appointments: Iterable[Appointment],
    provider_id: str,
    date: str,
    exclude_appointment_id: Optional[str] = None,
) -> list[Appointment]:
    return [
        app for app in appointments
        if app.provider_id == provider_id
        and app.date == date
        and not app.is_cancelled
        and app.id != exclude_appointment_id
    ]


def find_conflicts(
    provider_id: str,
    date: str,
    start_time: str,
    total_duration_minutes: int,
    existing_appointments: Iterable[Appointment],
    exclude_appointment_id: Optional[str] = None,
) -> list[Appointment]:
    """Return the live appointments whose [start, end) intersects the new span.

    Touching endpoints do not count as a conflict.
    """
    new_start = time_to_minutes(start_time)
    new_end = new_start + total_duration_minutes
    conflicts = []
    for app in _same_calendar(existing_appointments, provider_id, date, exclude_appointment_id):
        app_start = time_to_minutes(app.time)
        app_end = time_to_minutes(app.end_time)
        if app_end <= app_start:
            # Stored end wrapped past midnight
            app_end += MINUTES_PER_DAY
        if new_start < app_end and new_end > app_start:
            conflicts.append(app)
    return conflicts


def validate_booking(
    provider_id: str,
    date: str,
    start_time: str,
    total_duration_minutes: int,
    existing_appointments: Iterable[Appointment],
    *,
    now: Optional[datetime] = None,
    exclude_appointment_id: Optional[str] = None,
    hours: BusinessHours = DEFAULT_HOURS,
) -> ValidationResult:
    """
    Check whether a provider can take a booking at date/start_time.

    Checks run in order: past, business hours, overlap. The first failing
    check decides the rejection reason.
    """
    now = now or datetime.now()
    new_start = time_to_minutes(start_time)
    new_end = new_start + total_duration_minutes

    requested = datetime.strptime(f"{date} {start_time}", "%Y-%m-%d %H:%M")
    if requested < now:
        return ValidationResult(
            ok=False,
            reason=BookingRejection.IN_PAST,
            message="Cannot book an appointment in the past.",
        )

    if new_start < hours.opening_minute or new_start > hours.closing_minute:
        return ValidationResult(
            ok=False,
            reason=BookingRejection.OUT_OF_HOURS,
            message=f"Opening hours are {hours.describe()}.",
        )
    if hours.bound_end and new_end > hours.closing_minute:
        return ValidationResult(
            ok=False,
            reason=BookingRejection.OUT_OF_HOURS,
            message=f"The services would run past closing at {minutes_to_time(hours.closing_minute)}.",
        )

    conflicts = find_conflicts(
        provider_id, date, start_time, total_duration_minutes,
        existing_appointments, exclude_appointment_id,
    )
    if conflicts:
        return ValidationResult(
            ok=False,
            reason=BookingRejection.CONFLICT,
            message="The provider already has an appointment at that time.",
            conflicting_ids=[app.id for app in conflicts],
        )

    return ValidationResult(ok=True)


def busy_intervals(
    provider_id: str, date: str, appointments: Iterable[Appointment]
) -> list[tuple[str, str]]:
    """The provider's occupied [start, end) spans on a date, in start order."""
    live = _same_calendar(appointments, provider_id, date)
    return sorted(((app.time, app.end_time) for app in live), key=lambda span: span[0])


def open_start_times(
    provider_id: str,
    date: str,
    duration_minutes: int,
    appointments: Iterable[Appointment],
    *,
    now: Optional[datetime] = None,
    hours: BusinessHours = DEFAULT_HOURS,
) -> list[str]:
    """Every grid start time on ``date`` that would pass validation."""
    appointments = list(appointments)
    starts = []
    for minute in range(hours.opening_minute, hours.closing_minute + 1, hours.slot_step_minutes):
        start = minutes_to_time(minute)
        result = validate_booking(
            provider_id, date, start, duration_minutes, appointments, now=now, hours=hours,
        )
        if result.ok:
            starts.append(start)
    return starts


def _slot(provider_id: str, date: str, start: str, duration_minutes: int) -> AvailabilitySlot:
    return AvailabilitySlot(
        date=date,
        time=start,
        end_time=add_minutes(start, duration_minutes),
        provider_id=provider_id,
    )


def _following_days(date: str, count: int) -> list[str]:
    first = date_cls.fromisoformat(date)
    return [(first + timedelta(days=offset)).isoformat() for offset in range(count)]


def _find_next_available(
    provider_id: str,
    after_date: str,
    duration_minutes: int,
    appointments: list[Appointment],
    now: Optional[datetime],
    hours: BusinessHours,
) -> Optional[str]:
    for day in _following_days(after_date, hours.search_days + 1)[1:]:
        starts = open_start_times(
            provider_id, day, duration_minutes, appointments, now=now, hours=hours,
        )
        if starts:
            return f"{day} {starts[0]}"
    return None


def check_availability(
    provider_id: str,
    date: str,
    duration_minutes: int,
    appointments: Iterable[Appointment],
    *,
    preferred_time: Optional[str] = None,
    now: Optional[datetime] = None,
    hours: BusinessHours = DEFAULT_HOURS,
) -> AvailabilityResult:
    """
    Check a provider's availability for a span of services on a date.

    Returns the preferred time when it is free, otherwise the first open
    starts of the day, otherwise a next-available fallback on a later day.
    """
    appointments = list(appointments)

    if preferred_time:
        result = validate_booking(
            provider_id, date, preferred_time, duration_minutes, appointments,
            now=now, hours=hours,
        )
        if result.ok:
            return AvailabilityResult(
                available=True,
                slots=[_slot(provider_id, date, preferred_time, duration_minutes)],
                message=f"Available on {date} at {preferred_time}.",
            )

    starts = open_start_times(
        provider_id, date, duration_minutes, appointments, now=now, hours=hours,
    )
    if starts:
        slots = [
            _slot(provider_id, date, start, duration_minutes)
            for start in starts[:MAX_SLOTS_RETURNED]
        ]
        return AvailabilityResult(
            available=True,
            slots=slots,
            message=f"{len(starts)} start times available on {date}.",
        )

    next_available = _find_next_available(
        provider_id, date, duration_minutes, appointments, now, hours,
    )
    logger.debug("No availability for %s on %s, next: %s", provider_id, date, next_available)
    return AvailabilityResult(
        available=False,
        next_available=next_available,
        message=f"No availability on {date}.",
    )


def get_available_dates(
    provider_id: str,
    duration_minutes: int,
    appointments: Iterable[Appointment],
    *,
    start_date: str,
    limit: int = 5,
    now: Optional[datetime] = None,
    hours: BusinessHours = DEFAULT_HOURS,
) -> list[DateAvailability]:
    """Get the next N dates, from start_date on, that still have open starts."""
    appointments = list(appointments)
    results = []
    for day in _following_days(start_date, hours.search_days):
        starts = open_start_times(
            provider_id, day, duration_minutes, appointments, now=now, hours=hours,
        )
        if starts:
            results.append(
                DateAvailability(
                    date=day,
                    day_name=date_cls.fromisoformat(day).strftime("%A"),
                    slot_count=len(starts),
                )
            )
        if len(results) >= limit:
            break
    return results

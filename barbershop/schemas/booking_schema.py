"""Appointment, validation and availability data models."""

from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from barbershop.errors import BookingRejection


def _check_format(value: str, fmt: str, label: str) -> str:
    value = value.strip()
    try:
        datetime.strptime(value, fmt)
    except ValueError:
        raise ValueError(f"{label} must match {fmt}, got {value!r}") from None
    return value


def validate_date(value: str) -> str:
    """Validate date is in YYYY-MM-DD format."""
    return _check_format(value, "%Y-%m-%d", "date")


def validate_time(value: str) -> str:
    """Validate time is in zero-padded HH:MM format."""
    value = _check_format(value, "%H:%M", "time")
    if len(value) != 5:
        raise ValueError(f"time must be zero-padded HH:MM, got {value!r}")
    return value


class AppointmentStatus(str, Enum):
    PENDING_PAYMENT = "pending_payment"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"


class ServiceSnapshot(BaseModel):
    """Copy of a catalog entry taken when the appointment is written."""

    name: str
    price: int = Field(ge=0)
    duration: int = Field(gt=0)


class Appointment(BaseModel):
    """A booking of one or more services with one provider.

    ``end_time`` is computed once at create/edit and stored; it is never
    recomputed implicitly from the snapshots.
    """

    id: str
    provider_id: str
    provider_name: str
    client_id: str
    services: list[ServiceSnapshot]
    total: int = Field(ge=0)
    date: str
    time: str
    end_time: str
    status: AppointmentStatus = AppointmentStatus.CONFIRMED
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @field_validator("date")
    @classmethod
    def _date_format(cls, value: str) -> str:
        return validate_date(value)

    @field_validator("time", "end_time")
    @classmethod
    def _time_format(cls, value: str) -> str:
        return validate_time(value)

    @property
    def duration(self) -> int:
        return sum(s.duration for s in self.services)

    @property
    def is_cancelled(self) -> bool:
        return self.status == AppointmentStatus.CANCELLED


class ValidationResult(BaseModel):
    """Outcome of the scheduling engine's booking check."""

    ok: bool
    reason: Optional[BookingRejection] = None
    message: str = ""
    conflicting_ids: list[str] = Field(default_factory=list)


class HistoryDay(BaseModel):
    """Past or cancelled appointments for one calendar day."""

    date: str
    appointments: list[Appointment] = Field(default_factory=list)
    total: int = 0


class AvailabilitySlot(BaseModel):
    """Single open start time for a provider."""

    date: str
    time: str
    end_time: str
    provider_id: str


class AvailabilityResult(BaseModel):
    """Calendar availability check result."""

    available: bool
    slots: list[AvailabilitySlot] = Field(default_factory=list)
    next_available: Optional[str] = None
    message: str = ""


class DateAvailability(BaseModel):
    """Summary of open starts on a single date."""

    date: str
    day_name: str
    slot_count: int

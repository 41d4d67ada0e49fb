"""Exception hierarchy for the scheduling core.

None of these are fatal: validation errors go back to the client for
correction, persistence and external-service errors are recovered locally
by the collaborator wrappers.
"""

from enum import Enum
from typing import Optional


class BookingRejection(str, Enum):
    """Why the scheduling engine refused a date/time."""

    CONFLICT = "conflict"
    OUT_OF_HOURS = "out_of_hours"
    IN_PAST = "in_past"


class BarbershopError(Exception):
    """Base class for all scheduling-core errors."""


class BookingValidationError(BarbershopError):
    """Raised when a create or edit fails scheduling validation."""

    def __init__(
        self,
        reason: BookingRejection,
        message: str,
        conflicting_ids: Optional[list[str]] = None,
    ) -> None:
        super().__init__(message)
        self.reason = reason
        self.message = message
        self.conflicting_ids = conflicting_ids or []


class AppointmentNotFoundError(BarbershopError, KeyError):
    """Raised when an appointment id is unknown."""


class ProviderNotFoundError(BarbershopError, KeyError):
    """Raised when a provider id is unknown."""


class ServiceNotFoundError(BarbershopError, KeyError):
    """Raised when a service offering id is unknown."""


class PersistenceError(BarbershopError):
    """A load or save against the key-value store failed."""


class ExternalServiceError(BarbershopError):
    """The text-generation service failed, timed out, or returned junk."""


class InvalidTransitionError(BarbershopError):
    """Raised when a booking-flow trigger is not valid from the current state."""

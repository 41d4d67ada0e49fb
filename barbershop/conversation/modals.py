"""
Modal state as a closed set of variants.

Each modal kind carries only the fields it needs. Consumers resolve a modal
with an exhaustive ``match`` over the variants; ``NO_MODAL`` is the closed
state.
"""

from dataclasses import dataclass
from typing import Optional, Union

from barbershop.schemas.booking_schema import Appointment
from barbershop.schemas.catalog_schema import ServiceOffering
from barbershop.schemas.provider_schema import Provider


@dataclass(frozen=True)
class NoModal:
    pass


@dataclass(frozen=True)
class LoadingModal:
    title: str
    message: str = ""


@dataclass(frozen=True)
class MessageModal:
    title: str
    message: str


@dataclass(frozen=True)
class ProviderProfileModal:
    provider: Provider


@dataclass(frozen=True)
class AgendaModal:
    """Date/time picker for booking with ``provider``."""

    provider: Provider
    default_date: str


@dataclass(frozen=True)
class ConfirmCancelModal:
    appointment: Appointment


@dataclass(frozen=True)
class EditAppointmentModal:
    appointment: Appointment
    provider: Optional[Provider] = None


@dataclass(frozen=True)
class EditItemModal:
    title: str
    item: Union[Provider, ServiceOffering]


Modal = Union[
    NoModal,
    LoadingModal,
    MessageModal,
    ProviderProfileModal,
    AgendaModal,
    ConfirmCancelModal,
    EditAppointmentModal,
    EditItemModal,
]

NO_MODAL = NoModal()


def describe_modal(modal: Modal) -> str:
    """Plain-text rendering of a modal for the console."""
    match modal:
        case NoModal():
            return ""
        case LoadingModal(title=title, message=message):
            return f"... {title} {message}".rstrip()
        case MessageModal(title=title, message=message):
            return f"{title}\n{message}"
        case ProviderProfileModal(provider=provider):
            status = "online" if provider.is_available else "offline"
            return (
                f"{provider.name} [{provider.profession_level.value}] ({status})\n"
                f"{provider.specialty} - {provider.rating:.1f}/5 from {provider.review_count} reviews\n"
                f"{provider.bio}"
            )
        case AgendaModal(provider=provider, default_date=default_date):
            return f"Pick a date (from {default_date}) and time with {provider.name}"
        case ConfirmCancelModal(appointment=appointment):
            return (
                f"Cancel appointment {appointment.id} with {appointment.provider_name} "
                f"on {appointment.date} at {appointment.time}?"
            )
        case EditAppointmentModal(appointment=appointment):
            return (
                f"Reschedule {appointment.id} "
                f"(currently {appointment.date} {appointment.time}-{appointment.end_time})"
            )
        case EditItemModal(title=title, item=item):
            return f"{title}: {item.name} ({item.id})"
        case _:
            raise TypeError(f"Unknown modal variant: {type(modal).__name__}")

"""Shared test fixtures and helpers."""

from datetime import datetime
from typing import Optional

import pytest

from barbershop.notifications import RecordingNotifier
from barbershop.schemas.booking_schema import Appointment, AppointmentStatus, ServiceSnapshot
from barbershop.shop import BarberShop
from barbershop.storage import InMemoryStore
from barbershop.tools.booking import AppointmentBook
from barbershop.utils import add_minutes

# Monday morning; every test date below is after this moment
NOW = datetime(2025, 3, 10, 9, 0)
TODAY = "2025-03-10"


def fixed_clock() -> datetime:
    return NOW


@pytest.fixture
def book():
    return AppointmentBook(clock=fixed_clock)


@pytest.fixture
def store():
    return InMemoryStore()


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def shop(store, notifier):
    return BarberShop(store=store, notifier=notifier, clock=fixed_clock)


def make_snapshot(name: str = "Corte Normal", price: int = 25000, duration: int = 30) -> ServiceSnapshot:
    return ServiceSnapshot(name=name, price=price, duration=duration)


def make_appointment(
    appointment_id: str = "AP-TEST",
    provider_id: str = "b1",
    date: str = "2025-03-12",
    time: str = "10:00",
    duration: int = 30,
    price: int = 25000,
    status: AppointmentStatus = AppointmentStatus.CONFIRMED,
    client_id: Optional[str] = "client-1",
) -> Appointment:
    """Helper to create an Appointment with a single service."""
    return Appointment(
        id=appointment_id,
        provider_id=provider_id,
        provider_name=f"Provider {provider_id}",
        client_id=client_id,
        services=[make_snapshot(price=price, duration=duration)],
        total=price,
        date=date,
        time=time,
        end_time=add_minutes(time, duration),
        status=status,
    )

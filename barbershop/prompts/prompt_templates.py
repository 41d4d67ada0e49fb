"""Dynamic prompt and message construction around bookings."""

import json

from barbershop.schemas.booking_schema import Appointment, AvailabilitySlot
from barbershop.schemas.catalog_schema import ServiceOffering


def build_style_query(style_description: str, services: list[ServiceOffering]) -> str:
    """User prompt for a style recommendation over the current catalog."""
    catalog = json.dumps(
        [
            {
                "id": s.id,
                "name": s.name,
                "duration": s.duration,
                "barberTypes": [level.value for level in s.eligible_levels],
            }
            for s in services
        ],
        ensure_ascii=False,
    )
    return (
        f'The client wants: "{style_description}".\n'
        f"Available services: {catalog}.\n"
        "Suggest the services and visual references for this style."
    )


def build_description_query(product_name: str, rough_description: str) -> str:
    """User prompt for polishing a product description."""
    return (
        "Write a high-conversion sales description for this product: "
        f'Name: "{product_name}". Basic description: "{rough_description}".'
    )


def build_booking_summary(appointment: Appointment, currency: str = "COP") -> str:
    """Read-back of a booking for the client."""
    lines = [
        f"Appointment {appointment.id} with {appointment.provider_name}",
        f"  date: {appointment.date}",
        f"  time: {appointment.time} - {appointment.end_time}",
    ]
    for service in appointment.services:
        lines.append(f"  {service.name} ({service.duration} min): {service.price:,} {currency}")
    lines.append(f"  total: {appointment.total:,} {currency}")
    lines.append(f"  status: {appointment.status.value}")
    return "\n".join(lines)


def build_alternative_times_message(
    original_date: str,
    original_time: str,
    alternatives: list[AvailabilitySlot],
) -> str:
    """Message offering other start times after a rejected booking."""
    lines = [f"The requested time ({original_date} at {original_time}) is not available."]
    if not alternatives:
        lines.append("Please choose a different day.")
        return "\n".join(lines)
    lines.append("These times are open:")
    for alt in alternatives[:3]:
        lines.append(f"  {alt.date} at {alt.time} (until {alt.end_time})")
    return "\n".join(lines)

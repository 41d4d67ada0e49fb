"""
Provider directory: the shop's barbers, admin edits, and proximity filters.

Seeded with the default team; in production the records come from the
persistence collaborator and admin edits write back through it.
"""

import logging
from typing import Iterable, Optional

from barbershop.errors import ProviderNotFoundError
from barbershop.schemas.provider_schema import (
    ALL,
    GeoPoint,
    Provider,
    ProviderFilter,
    Review,
)
from barbershop.utils import distance_km

logger = logging.getLogger(__name__)

DEFAULT_PROVIDERS: list[dict] = [
    {
        "id": "b1",
        "name": 'Carlos "Filos" Mendoza',
        "is_available": True,
        "experience": "10 años",
        "specialty": "Corte Clásico y Barba",
        "bio": "Perfeccionista del degradado y amante de la navaja clásica.",
        "location": {"address": "Chapinero, Bogotá", "lat": 4.6097, "lng": -74.0817},
        "profession_level": "Maestro Barbero",
        "rating": 4.8,
        "review_count": 124,
        "reviews": [
            {"id": "r1", "user_name": "Juan D.", "rating": 5,
             "comment": "¡El mejor corte que he tenido!", "date": "2023-10-15"},
            {"id": "r2", "user_name": "Andrés M.", "rating": 4,
             "comment": "Muy buen servicio, aunque hubo un poco de espera.", "date": "2023-10-10"},
        ],
    },
    {
        "id": "b2",
        "name": 'Luis "Navaja" Pérez',
        "is_available": True,
        "experience": "5 años",
        "specialty": "Diseños y Tribales",
        "bio": "Creatividad y precisión en cada diseño.",
        "location": {"address": "El Poblado, Medellín", "lat": 6.2057, "lng": -75.5670},
        "profession_level": "Barbero Artista",
        "rating": 4.6,
        "review_count": 89,
        "reviews": [
            {"id": "r3", "user_name": "Kevin S.", "rating": 5,
             "comment": "El diseño quedó idéntico a la foto que llevé.", "date": "2023-10-20"},
        ],
    },
    {
        "id": "b3",
        "name": 'Sofía "Tijeras" Gómez',
        "is_available": False,
        "experience": "7 años",
        "specialty": "Corte con Tijera y Facial",
        "bio": "Especialista en cortes largos y cuidado facial.",
        "location": {"address": "Ciudad Jardín, Cali", "lat": 3.4516, "lng": -76.5320},
        "profession_level": "Estilista Senior",
        "rating": 4.9,
        "review_count": 215,
        "reviews": [],
    },
]


def provider_distance_km(provider: Provider, origin: GeoPoint) -> float:
    """Distance from ``origin`` to where the provider works."""
    return distance_km(origin.lat, origin.lng, provider.location.lat, provider.location.lng)


def _matches(provider: Provider, criteria: ProviderFilter) -> bool:
    if criteria.available_only and not provider.is_available:
        return False
    if criteria.specialty != ALL and provider.specialty != criteria.specialty:
        return False
    if criteria.level != ALL and provider.profession_level.value != criteria.level:
        return False
    # No origin means no distance filtering, even with a radius selected
    if criteria.max_distance_km is not None and criteria.origin is not None:
        if provider_distance_km(provider, criteria.origin) > criteria.max_distance_km:
            return False
    return True


def filter_providers(
    providers: Iterable[Provider], criteria: Optional[ProviderFilter] = None
) -> list[Provider]:
    """Apply every filter predicate conjunctively, preserving input order."""
    criteria = criteria or ProviderFilter()
    return [p for p in providers if _matches(p, criteria)]


def sort_by_distance(providers: Iterable[Provider], origin: Optional[GeoPoint]) -> list[Provider]:
    """Order providers nearest first. Without an origin the order is kept."""
    providers = list(providers)
    if origin is None:
        return providers
    return sorted(providers, key=lambda p: provider_distance_km(p, origin))


class ProviderDirectory:
    """Holds the provider set. Providers are never hard-deleted."""

    def __init__(self, providers: Optional[Iterable[Provider]] = None) -> None:
        if providers is None:
            providers = [Provider.model_validate(raw) for raw in DEFAULT_PROVIDERS]
        self._providers: dict[str, Provider] = {p.id: p for p in providers}

    def __len__(self) -> int:
        return len(self._providers)

    def __contains__(self, provider_id: object) -> bool:
        return provider_id in self._providers

    def all(self) -> list[Provider]:
        return list(self._providers.values())

    def get(self, provider_id: str) -> Provider:
        try:
            return self._providers[provider_id]
        except KeyError:
            raise ProviderNotFoundError(f"Provider {provider_id} not found.") from None

    def add(self, provider: Provider) -> Provider:
        if provider.id in self._providers:
            raise ValueError(f"Provider {provider.id} already exists.")
        self._providers[provider.id] = provider
        logger.info("Provider added: %s (%s)", provider.id, provider.name)
        return provider

    def update(self, provider_id: str, **changes) -> Provider:
        """Apply an admin edit. The id itself cannot change."""
        current = self.get(provider_id)
        changes.pop("id", None)
        updated = Provider.model_validate({**current.model_dump(), **changes})
        self._providers[provider_id] = updated
        logger.info("Provider updated: %s fields=%s", provider_id, sorted(changes))
        return updated

    def set_availability(self, provider_id: str, is_available: bool) -> Provider:
        return self.update(provider_id, is_available=is_available)

    def add_review(self, provider_id: str, review: Review) -> Provider:
        """Append a review and fold its rating into the aggregate."""
        provider = self.get(provider_id)
        count = provider.review_count
        rating = round((provider.rating * count + review.rating) / (count + 1), 2)
        return self.update(
            provider_id,
            reviews=[*provider.reviews, review],
            review_count=count + 1,
            rating=rating,
        )

    def specialties(self) -> list[str]:
        """Filter choices for specialty, wildcard first."""
        return [ALL, *dict.fromkeys(p.specialty for p in self._providers.values())]

    def levels(self) -> list[str]:
        """Filter choices for professional level, wildcard first."""
        return [ALL, *dict.fromkeys(p.profession_level.value for p in self._providers.values())]

    def filter(self, criteria: Optional[ProviderFilter] = None) -> list[Provider]:
        return filter_providers(self._providers.values(), criteria)
